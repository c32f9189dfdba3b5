"""Common utilities and configuration for the validator logos service."""

from common.config import (
    DEFAULT_CACHE_MAX_AGE_SECONDS,
    DEFAULT_CHAIN_REGISTRY_BASE_URL,
    DEFAULT_KEYBASE_LOOKUP_URL,
    LogosConfig,
    get_config,
    setup_logging,
)


__all__ = [
    "DEFAULT_CACHE_MAX_AGE_SECONDS",
    "DEFAULT_CHAIN_REGISTRY_BASE_URL",
    "DEFAULT_KEYBASE_LOOKUP_URL",
    "LogosConfig",
    "get_config",
    "setup_logging",
]
