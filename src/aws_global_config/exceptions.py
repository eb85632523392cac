"""Error taxonomy for credential resolution and configuration."""

import logging

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"
DISPLAY_MESSAGE_LIMIT = 200


def describe_exception(exc: BaseException) -> str:
    """Format an exception as ``ClassName:message`` for display."""
    logger.debug("%s", exc, exc_info=exc)
    message = str(exc).strip()
    return f"{type(exc).__name__}:{message or UNKNOWN_ERROR}"


def abbreviate(text: str, max_width: int = DISPLAY_MESSAGE_LIMIT) -> str:
    """Shorten ``text`` to ``max_width`` characters, ending with an ellipsis."""
    if len(text) <= max_width:
        return text
    return text[: max_width - 3] + "..."


class AwsConfigurationError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(AwsConfigurationError):
    """Raised when a configuration mutation is rejected."""


class CredentialsUnavailable(AwsConfigurationError):
    """Raised when no ambient credential could be found."""


class NoValidSessionCredential(AwsConfigurationError):
    """Raised when the ambient credential is not a session credential."""


class _WrappedError(AwsConfigurationError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(describe_exception(cause))
        self.cause = cause


class TokenExchangeFailed(_WrappedError):
    """Raised when the token service could not vend a session credential."""


class TestConnectivityFailed(_WrappedError):
    """Raised when probing an overridden service endpoint fails."""
