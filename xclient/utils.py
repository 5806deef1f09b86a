"""
Utility Functions
Encoding and randomness helpers shared by the signer and clients.
"""

import secrets
import string
import time
from typing import Any
from urllib.parse import quote

from .errors import EncodingFailure

NONCE_ALPHABET = string.ascii_letters + string.digits
NONCE_LENGTH = 32


def to_text(value: Any) -> str:
    """
    Coerce a parameter value to text.

    Args:
        value: str, UTF-8 bytes, or anything with a sensible str()

    Returns:
        The value as a str

    Raises:
        EncodingFailure: bytes that are not valid UTF-8
    """
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EncodingFailure(f"Value is not valid UTF-8: {value!r}") from exc
    return str(value)


def percent_encode(value: Any) -> str:
    """
    Percent-encode a value per RFC 3986.

    Letters, digits, '-', '.', '_' and '~' are left alone; everything else
    becomes %XX with uppercase hex over the UTF-8 bytes. Spaces are %20.

    Args:
        value: Value to encode

    Returns:
        Encoded string
    """
    text = to_text(value)
    try:
        return quote(text, safe="~")
    except UnicodeEncodeError as exc:
        raise EncodingFailure(f"Value cannot be encoded as UTF-8: {text!r}") from exc


def generate_nonce(length: int = NONCE_LENGTH) -> str:
    """Random ASCII alphanumeric nonce."""
    return "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))


def generate_timestamp() -> str:
    """Current Unix time in whole seconds."""
    return str(int(time.time()))


def mask_secret(value: Any) -> str:
    """Describe a secret without revealing it."""
    if not value:
        return "NOT SET"
    return f"Set ({len(value)} chars)"
