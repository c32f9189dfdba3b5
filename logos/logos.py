#!/usr/bin/env python3
"""Validator logos service: operator address to Keybase logo URL, per chain."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
import structlog
import uvicorn

from common import LogosConfig, get_config, setup_logging
from logos.chain_registry import ChainId, ChainRegistry
from logos.errors import ClientInputError, LogosError
from logos.pipeline import fetch_validator_images


logger = structlog.get_logger(__name__)

LOGOS_PORT = 8010

# Module-level state
config: LogosConfig | None = None
registry: ChainRegistry | None = None


def get_health_data() -> dict[str, Any]:
    """Return health check data."""
    return {
        "status": "healthy" if registry else "starting",
        "service": "logos",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle."""
    global config, registry
    logger.info("🚀 Starting Logos service")
    config = get_config()
    logger.info("📋 Configuration loaded from environment")

    registry = ChainRegistry(config.chain_registry_base_url)
    logger.info("🔗 Chain registry ready", chains=[str(chain_id) for chain_id in registry.urls])

    logger.info("✅ Logos service ready", port=LOGOS_PORT)
    yield

    logger.info("🛑 Shutting down Logos service")
    registry = None
    logger.info("✅ Logos service shutdown complete")


app = FastAPI(
    title="Validator Logos",
    version="0.1.0",
    description="Validator operator address to logo URL mapping for supported chains",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> ORJSONResponse:
    """Health check endpoint."""
    return ORJSONResponse(content=get_health_data())


@app.get("/api/chains")
async def list_chains() -> ORJSONResponse:
    """List the chain ids this service answers for."""
    return ORJSONResponse(content={"chains": [str(chain_id) for chain_id in ChainId]})


@app.get("/")
@app.get("/api/validators/images")
async def validator_images(
    chain_id: str | None = Query(None, alias="chain-id", description="Chain id, e.g. xion-mainnet-1"),
) -> ORJSONResponse:
    """Map each validator's operator address to its logo URL."""
    if config is None or registry is None:
        return ORJSONResponse(content={"error": "Service not ready"}, status_code=503)

    try:
        result = await fetch_validator_images(chain_id, config, registry)
    except ClientInputError as e:
        logger.warning("⚠️ Rejected validator images request", chain_id=chain_id, error=str(e))
        return ORJSONResponse(content={"error": str(e)}, status_code=e.status_code)
    except LogosError as e:
        logger.error("❌ Failed to fetch validator images", chain_id=chain_id, error=str(e))
        return ORJSONResponse(
            content={"error": "Failed to fetch validator images", "message": str(e)},
            status_code=e.status_code,
        )

    return ORJSONResponse(
        content=result.model_dump(by_alias=True),
        headers={"Cache-Control": f"public, max-age={config.cache_max_age_seconds}"},
    )


def main() -> None:  # pragma: no cover
    """Entry point for the Logos service."""
    service_config = get_config()
    setup_logging("logos", level=service_config.log_level)
    uvicorn.run(app, host="0.0.0.0", port=LOGOS_PORT)  # noqa: S104  # nosec B104


if __name__ == "__main__":
    main()
