"""
Errors
Exception types raised by the X API client and request signer.
"""

from typing import Any, Optional


class XClientError(Exception):
    """Base class for every error raised by this package."""


class SigningError(XClientError):
    """A request could not be signed."""


class InvalidCredential(SigningError, ValueError):
    """One or more OAuth secrets are missing or empty."""


class UnsupportedMethod(SigningError):
    """The HTTP method is not one the signer knows how to canonicalize."""


class EncodingFailure(SigningError):
    """A parameter value could not be represented as UTF-8."""


class ReservedParameterError(SigningError):
    """A query parameter reuses the name of an OAuth protocol parameter."""


class XApiError(XClientError):
    """The X API answered with a non-2xx status."""

    def __init__(self, status_code: int, payload: Optional[Any] = None, message: str = "X API request failed"):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"{message}: {status_code} {payload}")
