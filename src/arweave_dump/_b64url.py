from __future__ import annotations

import binascii
from base64 import urlsafe_b64decode, urlsafe_b64encode


def b64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url, the encoding Arweave uses for binary."""
    return urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str | bytes) -> bytes:
    """Decode base64url with or without padding.

    >>> b64url_decode("aGk")
    b'hi'
    """
    if isinstance(text, str):
        text = text.encode("ascii")
    elif not isinstance(text, bytes):
        raise TypeError(f"Expected base64url str or bytes, not {type(text).__name__}")
    text = text.strip()
    try:
        return urlsafe_b64decode(text + b"=" * (-len(text) % 4))
    except binascii.Error as e:
        raise ValueError(f"Invalid base64url data: {e}") from e
