"""Exceptions raised inside the translation layer.

The provider protocols raise these; ``TranslationClient`` is the only caller and
turns each one into a failed ``TranslationResult`` with the matching ``ErrorKind``.
"""

from typing import Optional

from .models import ErrorKind


class TranslatorError(Exception):
    """Base exception for translation failures."""

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ConfigurationMissingError(TranslatorError):
    """Raised when no API key or no usable provider is configured."""

    kind = ErrorKind.CONFIGURATION_MISSING


class ProviderError(TranslatorError):
    """Raised when a reachable provider reports a non-success status."""

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ProviderParseError(TranslatorError):
    """Raised when a response body is not JSON or lacks the expected fields."""

    kind = ErrorKind.PARSE_ERROR


class NetworkError(TranslatorError):
    """Raised when the transport fails and no response is available."""

    kind = ErrorKind.NETWORK_ERROR
