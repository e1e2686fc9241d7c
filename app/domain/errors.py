"""
Pipeline error taxonomy.

Each error carries the ErrorKind it maps to and the HTTP status the API
layer answers with.
"""
from app.domain.models import ErrorKind


class PipelineError(Exception):
    """Base class for errors raised by the viewpoint pipeline."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(PipelineError):
    """A referenced viewpoint or garden plan does not exist."""
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class InvalidInputError(PipelineError, ValueError):
    """Input rejected before any external call is made."""
    kind = ErrorKind.INVALID_INPUT
    status_code = 400


class ProviderError(PipelineError):
    """The generation provider did not produce a usable result."""
    kind = ErrorKind.PROVIDER_UNAVAILABLE
    status_code = 502


class ProviderTimeoutError(ProviderError):
    kind = ErrorKind.PROVIDER_TIMEOUT
    status_code = 504


class ProviderRejectedError(ProviderError):
    """Content policy rejection or a malformed provider response."""
    kind = ErrorKind.PROVIDER_REJECTED
    status_code = 502


class ProviderUnavailableError(ProviderError):
    kind = ErrorKind.PROVIDER_UNAVAILABLE
    status_code = 503
