"""
Authentication Module
OAuth 1.0a (HMAC-SHA1) request signing for X API user-context calls.
"""

import base64
import hashlib
import hmac
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import InvalidCredential, ReservedParameterError, UnsupportedMethod
from .utils import generate_nonce, generate_timestamp, mask_secret, percent_encode

logger = logging.getLogger(__name__)

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"
SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"})
RESERVED_PARAMS = frozenset({
    "oauth_consumer_key",
    "oauth_token",
    "oauth_signature_method",
    "oauth_timestamp",
    "oauth_nonce",
    "oauth_version",
    "oauth_signature",
})


class Credentials:
    """The four OAuth 1.0a secrets for one app + user pair."""

    __slots__ = ("consumer_key", "consumer_secret", "access_token", "access_token_secret")

    def __init__(self, consumer_key: str, consumer_secret: str,
                 access_token: str, access_token_secret: str):
        """
        Initialize credentials.

        Args:
            consumer_key: X API Key
            consumer_secret: X API Secret
            access_token: X Access Token
            access_token_secret: X Access Token Secret

        Raises:
            InvalidCredential: any of the four values is empty
        """
        values = {
            "consumer_key": consumer_key,
            "consumer_secret": consumer_secret,
            "access_token": access_token,
            "access_token_secret": access_token_secret,
        }
        missing = [name for name, value in values.items() if not value]
        if missing:
            raise InvalidCredential(f"Missing required authentication credentials: {', '.join(missing)}")
        for name, value in values.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError("Credentials are immutable")

    def __repr__(self) -> str:
        return (
            f"Credentials(consumer_key={mask_secret(self.consumer_key)!r}, "
            f"consumer_secret={mask_secret(self.consumer_secret)!r}, "
            f"access_token={mask_secret(self.access_token)!r}, "
            f"access_token_secret={mask_secret(self.access_token_secret)!r})"
        )


def normalize_parameters(params: Mapping[str, Any]) -> str:
    """Encode, sort and join parameters into the OAuth parameter string."""
    pairs: List[Tuple[str, str]] = [(percent_encode(k), percent_encode(v)) for k, v in params.items()]
    pairs.sort()
    return "&".join(f"{k}={v}" for k, v in pairs)


def signature_base_string(method: str, url: str, params: Mapping[str, Any]) -> str:
    """
    Build the OAuth signature base string.

    Args:
        method: Uppercase HTTP method
        url: Base URL without query string
        params: OAuth protocol parameters plus query parameters

    Returns:
        METHOD&encoded-url&encoded-parameter-string
    """
    return "&".join([method, percent_encode(url), percent_encode(normalize_parameters(params))])


def signing_key(consumer_secret: str, token_secret: str) -> str:
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"


def hmac_sha1_signature(base_string: str, key: str) -> str:
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


class OAuth1Signer:
    """Produce OAuth 1.0a Authorization headers. Stateless apart from the credentials."""

    def __init__(self, credentials: Credentials):
        self.credentials = credentials

    def oauth_parameters(self, timestamp: Optional[str] = None, nonce: Optional[str] = None) -> Dict[str, str]:
        return {
            "oauth_consumer_key": self.credentials.consumer_key,
            "oauth_token": self.credentials.access_token,
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": timestamp or generate_timestamp(),
            "oauth_nonce": nonce or generate_nonce(),
            "oauth_version": OAUTH_VERSION,
        }

    def sign(self, method: str, url: str, query_params: Optional[Mapping[str, Any]] = None,
             timestamp: Optional[str] = None, nonce: Optional[str] = None) -> str:
        """
        Compute the Authorization header for one request.

        Args:
            method: HTTP method
            url: Base URL (scheme, host and path; no query string)
            query_params: Parameters sent in the query string
            timestamp: Fixed oauth_timestamp, for reproducible signatures only
            nonce: Fixed oauth_nonce, for reproducible signatures only

        Returns:
            Header value of the form 'OAuth k1="v1", k2="v2", ...'

        Raises:
            UnsupportedMethod: unknown HTTP method
            ReservedParameterError: a query parameter uses an oauth_* protocol name
            EncodingFailure: a value is not representable as UTF-8
        """
        verb = str(method).upper()
        if verb not in SUPPORTED_METHODS:
            raise UnsupportedMethod(f"Cannot sign HTTP method {method!r}")

        query_params = dict(query_params or {})
        clashes = sorted(RESERVED_PARAMS.intersection(query_params))
        if clashes:
            raise ReservedParameterError(f"Query parameters collide with OAuth parameters: {', '.join(clashes)}")

        oauth_params = self.oauth_parameters(timestamp=timestamp, nonce=nonce)
        base_string = signature_base_string(verb, url, {**oauth_params, **query_params})
        key = signing_key(self.credentials.consumer_secret, self.credentials.access_token_secret)
        oauth_params["oauth_signature"] = hmac_sha1_signature(base_string, key)
        logger.debug("Signed %s %s (nonce=%s)", verb, url, oauth_params["oauth_nonce"])

        return "OAuth " + ", ".join(
            f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in sorted(oauth_params.items())
        )
