"""
xclient - X API Client
Read-only X API v2 access with OAuth 1.0a request signing.
"""

__version__ = "0.1.0"
__author__ = "Developer"

from .auth import Credentials, OAuth1Signer
from .client import BookmarksClient, XClient
from .errors import (
    EncodingFailure,
    InvalidCredential,
    ReservedParameterError,
    SigningError,
    UnsupportedMethod,
    XApiError,
    XClientError,
)
from .models import Tweet, User

__all__ = [
    "Credentials",
    "OAuth1Signer",
    "XClient",
    "BookmarksClient",
    "Tweet",
    "User",
    "XClientError",
    "SigningError",
    "InvalidCredential",
    "UnsupportedMethod",
    "EncodingFailure",
    "ReservedParameterError",
    "XApiError",
]
