"""Aggregation pipeline: chain id in, validator logo mapping out."""

from datetime import UTC, datetime

import httpx
import structlog

from common.config import LogosConfig
from logos.chain_registry import ChainId, ChainRegistry, rest_address
from logos.errors import ClientInputError
from logos.keybase import resolve_validator_images
from logos.models import ValidatorImagesResponse
from logos.staking import fetch_validators


logger = structlog.get_logger(__name__)


def parse_chain_id(raw: str | None) -> ChainId:
    """Validate a requested chain id against the supported set."""
    value = (raw or "").strip()
    if not value:
        raise ClientInputError("Missing chain-id")
    try:
        return ChainId(value)
    except ValueError as e:
        raise ClientInputError(f"Invalid chain-id: {value}") from e


def create_http_client(config: LogosConfig) -> httpx.AsyncClient:
    """Create the HTTP client used for one pipeline run."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"Accept": "application/json", "User-Agent": config.user_agent},
        follow_redirects=True,
    )


async def _run(client: httpx.AsyncClient, chain_id: ChainId, config: LogosConfig, registry: ChainRegistry) -> dict[str, str]:
    metadata = await registry.fetch_metadata(client, chain_id)
    lcd_url = rest_address(metadata)
    validators = await fetch_validators(client, lcd_url, max_pages=config.max_validator_pages)
    return await resolve_validator_images(client, validators, config.keybase_lookup_url)


async def fetch_validator_images(
    raw_chain_id: str | None,
    config: LogosConfig,
    registry: ChainRegistry,
    client: httpx.AsyncClient | None = None,
) -> ValidatorImagesResponse:
    """Build the validator logo mapping for a chain.

    Stages run strictly in sequence: chain registry, validator pages, Keybase
    lookups. The first three are fail-closed; image lookups fail per item.

    Args:
        raw_chain_id: Chain id as received from the caller
        config: Service configuration
        registry: Chain registry built at start-up
        client: Optional HTTP client; one is created and closed per call otherwise

    Raises:
        ClientInputError: missing or unsupported chain id (no network calls made)
        UpstreamValidationError: chain metadata lists no REST endpoint
        DataSourceError: chain metadata or validator list could not be fetched
    """
    chain_id = parse_chain_id(raw_chain_id)
    logger.info("🔍 Fetching validator images", chain_id=str(chain_id))

    if client is None:
        async with create_http_client(config) as owned_client:
            images = await _run(owned_client, chain_id, config, registry)
    else:
        images = await _run(client, chain_id, config, registry)

    return ValidatorImagesResponse(
        chain_id=str(chain_id),
        validators=images,
        timestamp=datetime.now(UTC).isoformat(),
    )
