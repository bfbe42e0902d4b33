"""Gateway error taxonomy.

Every failure path of the chat endpoint ends in one of these. Each carries
the HTTP status it maps to.
"""

from typing import Any


class GatewayError(Exception):
    """Base class for chat gateway failures."""

    status_code: int = 500

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(GatewayError):
    """Raised when the provider credential is not configured."""

    status_code = 500


class ValidationError(GatewayError):
    """Raised when the request body has the wrong shape."""

    status_code = 400


class ProviderError(GatewayError):
    """Raised when the completion call fails for any reason."""

    status_code = 500


class EmptyResponseError(GatewayError):
    """Raised when the provider returns no usable text."""

    status_code = 500
