"""Error taxonomy for the validator logos pipeline."""


class LogosError(Exception):
    """Base class for failures that abort a validator images request."""

    status_code: int = 500


class ClientInputError(LogosError):
    """Raised when the requested chain id is missing or not supported."""

    status_code = 400


class UpstreamValidationError(LogosError):
    """Raised when chain metadata resolves but has no usable REST endpoint."""


class DataSourceError(LogosError):
    """Raised when chain metadata or a validator page cannot be retrieved."""


class IdentityLookupError(Exception):
    """Raised when a single Keybase identity lookup fails.

    Never escapes the image resolver; the validator is left without a logo.
    """
