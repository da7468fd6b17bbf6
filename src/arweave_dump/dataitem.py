"""Python representations of the records stored in a bundle."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from functools import cached_property
from typing import Any, NamedTuple

from arweave_dump._b64url import b64url_encode
from arweave_dump.constants import SignatureType


class BundleTag(NamedTuple):
    """A name/value text pair attached to a data item."""

    name: str
    value: str


@dataclass(frozen=True)
class DataItem:
    """One signed record decoded from a bundle.

    The signature is not verified. `id` is derived from the signature bytes, it
    is not part of the encoded item.
    """

    signature_type: SignatureType
    signature: bytes
    owner: bytes
    target: bytes | None
    anchor: bytes | None
    tags: tuple[BundleTag, ...]
    data: bytes

    @cached_property
    def id(self) -> bytes:
        """The item's content address: the SHA-256 digest of its signature."""
        return hashlib.sha256(self.signature).digest()

    @property
    def signature_name(self) -> str:
        return self.signature_type.display_name

    def to_json(self) -> dict[str, Any]:
        """Get a JSON-serializable dict with binary fields as base64url text."""
        return {
            "id": b64url_encode(self.id),
            "signature_name": self.signature_name,
            "signature": b64url_encode(self.signature),
            "owner_public_key": b64url_encode(self.owner),
            "target": None if self.target is None else b64url_encode(self.target),
            "anchor": None if self.anchor is None else b64url_encode(self.anchor),
            "tags": [{"name": tag.name, "value": tag.value} for tag in self.tags],
            "data": b64url_encode(self.data),
        }
