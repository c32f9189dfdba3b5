"""Configuration management for the validator logos service."""

from dataclasses import dataclass
import logging
from os import getenv
from pathlib import Path

import structlog


logger = logging.getLogger(__name__)

DEFAULT_CHAIN_REGISTRY_BASE_URL = "https://assets.xion.burnt.com/chain-registry"
DEFAULT_KEYBASE_LOOKUP_URL = "https://keybase.io/_/api/1.0/user/lookup.json"
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_VALIDATOR_PAGES = 200
DEFAULT_CACHE_MAX_AGE_SECONDS = 3600
DEFAULT_USER_AGENT = "validator-logos/0.1.0"


def _positive_int_env(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to the default."""
    raw = getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"⚠️ Invalid {name} value: {raw}. Using default of {default}.")
        return default
    if value < 1:
        logger.warning(f"⚠️ Invalid {name} value: {raw}. Using default of {default}.")
        return default
    return value


def _positive_float_env(name: str, default: float) -> float:
    """Read a positive float from the environment, falling back to the default."""
    raw = getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"⚠️ Invalid {name} value: {raw}. Using default of {default}.")
        return default
    if value <= 0:
        logger.warning(f"⚠️ Invalid {name} value: {raw}. Using default of {default}.")
        return default
    return value


@dataclass(frozen=True)
class LogosConfig:
    """Configuration for the validator logos service."""

    chain_registry_base_url: str = DEFAULT_CHAIN_REGISTRY_BASE_URL
    keybase_lookup_url: str = DEFAULT_KEYBASE_LOOKUP_URL
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    max_validator_pages: int = DEFAULT_MAX_VALIDATOR_PAGES
    cache_max_age_seconds: int = DEFAULT_CACHE_MAX_AGE_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "LogosConfig":
        """Create configuration from environment variables."""
        chain_registry_base_url = getenv("CHAIN_REGISTRY_BASE_URL") or DEFAULT_CHAIN_REGISTRY_BASE_URL
        keybase_lookup_url = getenv("KEYBASE_LOOKUP_URL") or DEFAULT_KEYBASE_LOOKUP_URL

        return cls(
            chain_registry_base_url=chain_registry_base_url.rstrip("/"),
            keybase_lookup_url=keybase_lookup_url,
            http_timeout_seconds=_positive_float_env("HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS),
            max_validator_pages=_positive_int_env("MAX_VALIDATOR_PAGES", DEFAULT_MAX_VALIDATOR_PAGES),
            cache_max_age_seconds=_positive_int_env("CACHE_MAX_AGE_SECONDS", DEFAULT_CACHE_MAX_AGE_SECONDS),
            user_agent=getenv("LOGOS_USER_AGENT") or DEFAULT_USER_AGENT,
            log_level=(getenv("LOG_LEVEL") or "INFO").upper(),
        )


def setup_logging(
    service_name: str,
    level: str = "INFO",
    log_file: Path | None = None,
) -> None:
    """Set up stdlib logging and route structlog through it."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        # Create parent directory if it doesn't exist
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=f"%(asctime)s - {service_name} - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Suppress per-request transport logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info(f"✅ Logging configured for {service_name}")


def get_config() -> LogosConfig:
    """Get validator logos configuration from environment."""
    return LogosConfig.from_env()
