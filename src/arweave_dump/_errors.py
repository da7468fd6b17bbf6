from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, cast


@dataclass(init=False)
class ArweaveDumpError(Exception):
    """The base class that all arweave_dump errors are subclasses of."""

    if not TYPE_CHECKING:
        message: str  # needed to have dataclass include message in the repr, etc

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)

    @property
    def message(self) -> str:
        return cast(str, self.args[0])

    def __str__(self) -> str:
        field_values = [
            (f.name, getattr(self, f.name))
            for f in fields(self)
            if f.name != "message" and getattr(self, f.name) is not None
        ]
        values_fmt = ", ".join(f"{f}={v!r}" for (f, v) in field_values)

        if values_fmt:
            return f"{self.message}: {values_fmt}"
        return self.message


@dataclass(init=False)
class DecodeBundleError(ArweaveDumpError, ValueError):
    """Bundle data is not well-formed.

    `position` is the absolute byte offset in the bundle at which the problem
    was found. When the error happens inside a data item, the bundle decoder
    sets `item_index` and `item_length` to identify the table row.
    """

    position: int
    item_index: int | None
    item_length: int | None

    def __init__(self, message: str, *args: object, position: int) -> None:
        super().__init__(message, *args)
        self.position = position
        self.item_index = None
        self.item_length = None


@dataclass(init=False)
class TruncatedInputError(DecodeBundleError):
    """Fewer bytes are available than a fixed-size field requires."""

    expected: int
    available: int

    def __init__(
        self, message: str, *args: object, position: int, expected: int, available: int
    ) -> None:
        super().__init__(message, *args, position=position)
        self.expected = expected
        self.available = available


@dataclass(init=False)
class MalformedInputError(DecodeBundleError):
    pass


@dataclass(init=False)
class UnsupportedSignatureVariantError(DecodeBundleError):
    """A data item starts with a signature type not in `SignatureType`."""

    signature_type: int

    def __init__(
        self, message: str, *args: object, position: int, signature_type: int
    ) -> None:
        super().__init__(message, *args, position=position)
        self.signature_type = signature_type


@dataclass(init=False)
class SchemaDecodeError(DecodeBundleError):
    """An item's tag data is not a valid Avro-encoded tag array."""


@dataclass(init=False)
class CountOverflowError(DecodeBundleError):
    """A 256-bit count or length has non-zero bits above the 128-bit range."""

    upper: int

    def __init__(self, message: str, *args: object, position: int, upper: int) -> None:
        super().__init__(message, *args, position=position)
        self.upper = upper


@dataclass(init=False)
class ChunkError(ArweaveDumpError):
    offset: int

    def __init__(self, message: str, *args: object, offset: int) -> None:
        super().__init__(message, *args)
        self.offset = offset


@dataclass(init=False)
class ShortOrEmptyChunkError(ChunkError):
    """A chunk would not move the stream forward, or would overrun its size."""

    length: int
    remaining: int

    def __init__(
        self, message: str, *args: object, offset: int, length: int, remaining: int
    ) -> None:
        super().__init__(message, *args, offset=offset)
        self.length = length
        self.remaining = remaining


@dataclass(init=False)
class TransportError(ArweaveDumpError):
    """A request to the gateway failed."""

    url: str | None

    def __init__(self, message: str, *args: object, url: str | None = None) -> None:
        super().__init__(message, *args)
        self.url = url


@dataclass(init=False)
class DataPendingError(TransportError):
    """
    The gateway accepted the request but the data has not propagated yet.

    The request can be retried later.
    """


@dataclass(init=False)
class ChunkPendingError(DataPendingError):
    offset: int

    def __init__(
        self, message: str, *args: object, offset: int, url: str | None = None
    ) -> None:
        super().__init__(message, *args, url=url)
        self.offset = offset
