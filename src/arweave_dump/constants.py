"""Constant values related to the ANS-104 bundle format."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from typing_extensions import Self

U256_SIZE: Final = 32
"""Bundle item counts and item lengths are 256-bit little-endian integers."""
U128_RANGE: Final = range(0, 2**128)
"""The range of counts and lengths we accept from the 256-bit fields."""

ENTRY_ID_SIZE: Final = 32
TARGET_SIZE: Final = 32
ANCHOR_SIZE: Final = 32

BUNDLE_FORMAT_TAG: Final = "Bundle-Format"
BUNDLE_FORMAT_BINARY: Final = "binary"
BUNDLE_VERSION_TAG: Final = "Bundle-Version"
BUNDLE_VERSION: Final = "2.0.0"


class SignatureType(IntEnum):
    """The 2-byte tag at the start of a data item that names its signature scheme.

    The signature scheme determines the fixed sizes of the item's signature and
    owner public key fields.

    Examples
    --------
    >>> SignatureType.ED25519.signature_length
    64
    >>> SignatureType(1).owner_length
    512
    >>> SignatureType.ETHEREUM.display_name
    'ethereum'
    """

    ARWEAVE = 1, 512, 512
    ED25519 = 2, 64, 32
    ETHEREUM = 3, 65, 65
    SOLANA = 4, 64, 32

    signature_length: int
    owner_length: int

    if not TYPE_CHECKING:  # this __new__ breaks the default Enum types if mypy sees it

        def __new__(cls, value: int, signature_length: int, owner_length: int) -> Self:
            obj = int.__new__(cls, value)
            obj._value_ = value
            obj.signature_length = signature_length
            obj.owner_length = owner_length
            return obj

    @property
    def display_name(self) -> str:
        return self.name.lower()
