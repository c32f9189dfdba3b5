"""CLI tool for fetching validator logos for one chain without running the service.

Usage:
    logos-fetch --chain-id xion-mainnet-1
    logos-fetch --chain-id xion-testnet-2 --indent
"""

import argparse
import asyncio
import sys

import orjson

from common.config import get_config, setup_logging
from logos.chain_registry import ChainId, ChainRegistry
from logos.errors import ClientInputError, LogosError
from logos.pipeline import fetch_validator_images


def run(chain_id: str, indent: bool = False) -> int:
    """Fetch the logo mapping for a chain and print it as JSON. Returns the exit code."""
    config = get_config()
    registry = ChainRegistry(config.chain_registry_base_url)

    try:
        result = asyncio.run(fetch_validator_images(chain_id, config, registry))
    except ClientInputError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except LogosError as e:
        print(f"❌ Failed to fetch validator images: {e}", file=sys.stderr)
        return 1

    option = orjson.OPT_INDENT_2 if indent else 0
    print(orjson.dumps(result.model_dump(by_alias=True), option=option).decode())
    return 0


def main() -> None:
    """Entry point for the logos-fetch CLI tool."""
    parser = argparse.ArgumentParser(
        prog="logos-fetch",
        description="Print the validator operator address to logo URL mapping for a chain.",
        epilog=f"Supported chain ids: {', '.join(ChainId)}",
    )
    parser.add_argument("--chain-id", required=True, metavar="CHAIN_ID", help="Chain id to fetch")
    parser.add_argument("--indent", action="store_true", help="Pretty-print the JSON output")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    args = parser.parse_args()

    setup_logging("logos-fetch", level=args.log_level)
    sys.exit(run(args.chain_id, indent=args.indent))


if __name__ == "__main__":
    main()
