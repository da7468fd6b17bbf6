"""Decode ANS-104 bundles into `DataItem` records."""

from __future__ import annotations

import io
import logging
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, NamedTuple

from arweave_dump._errors import (
    CountOverflowError,
    DecodeBundleError,
    MalformedInputError,
    TruncatedInputError,
    UnsupportedSignatureVariantError,
)
from arweave_dump._pycompat import add_note
from arweave_dump.constants import (
    ANCHOR_SIZE,
    ENTRY_ID_SIZE,
    TARGET_SIZE,
    U128_RANGE,
    U256_SIZE,
    SignatureType,
)
from arweave_dump.dataitem import DataItem
from arweave_dump.tags import decode_tags

if TYPE_CHECKING:
    from typing_extensions import Buffer, Never, TypeAlias

    from _typeshed import SupportsRead

    BundleSource: TypeAlias = "SupportsRead[bytes] | Buffer"

logger = logging.getLogger(__name__)

MAX_READ_SIZE: Final = 2**20
"""The largest number of bytes requested from a source in one read."""


class BundleEntry(NamedTuple):
    """A row of a bundle's item table."""

    length: int
    """The number of bytes occupied by the item."""
    id: bytes
    """The item's id, as recorded by the bundle's creator."""


@dataclass(slots=True)
class ReadableBundleStream:
    """A forward-only reader of bundle fields from a binary file-like source.

    A stream can be limited to a number of bytes, after which it behaves as if
    its source had ended. `take()` creates a limited stream that reads through
    its parent, so reading a data item never reads beyond the item's length.

    `ReadableBundleStream` itself has a `read()` method, so it can act as the
    source of another stream.
    """

    source: SupportsRead[bytes]
    limit: int | None = field(default=None)
    pos: int = field(default=0)
    """The number of bytes read through this stream."""
    offset: int = field(default=0)
    """The position in the bundle at which this stream starts."""

    @property
    def position(self) -> int:
        return self.offset + self.pos

    @property
    def remaining(self) -> int | None:
        """The number of bytes left before the limit, or None if not limited."""
        if self.limit is None:
            return None
        return self.limit - self.pos

    def throw(
        self,
        message: str,
        *,
        position: int | None = None,
        cause: BaseException | None = None,
    ) -> Never:
        if position is None:
            position = self.position
        raise MalformedInputError(message, position=position) from cause

    def throw_truncated(self, field_name: str, expected: int, available: int) -> Never:
        raise TruncatedInputError(
            f"Data truncated: Expected {expected} bytes for {field_name} at "
            f"position {self.position} but {available} available",
            position=self.position,
            expected=expected,
            available=available,
        )

    def take(self, count: int) -> ReadableBundleStream:
        """Get a stream that reads at most `count` bytes from this stream."""
        return ReadableBundleStream(self, limit=count, offset=self.position)

    def read(self, size: int = -1) -> bytes:
        """Read up to `size` bytes, or all bytes when `size` is negative.

        Like a raw file, fewer than `size` bytes may be returned. An empty
        result means the end of the stream (or its limit) has been reached.
        """
        remaining = self.remaining
        if remaining is not None:
            size = remaining if size < 0 else min(size, remaining)
        if size == 0:
            return b""
        data = self.source.read(size)
        self.pos += len(data)
        return data

    def read_bytes(self, count: int, field_name: str = "field") -> bytes:
        remaining = self.remaining
        if remaining is not None and count > remaining:
            self.throw_truncated(field_name, count, remaining)

        chunks = []
        missing = count
        while missing:
            chunk = self.source.read(min(missing, MAX_READ_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            missing -= len(chunk)
        available = count - missing
        if missing:
            self.throw_truncated(field_name, count, available)
        self.pos += count
        return b"".join(chunks)

    def read_to_end(self, field_name: str = "field") -> bytes:
        """Read all bytes up to the limit, or until the source has no more data.

        A limited stream whose source ends before the limit is truncated.
        """
        remaining = self.remaining
        if remaining is not None:
            return self.read_bytes(remaining, field_name)

        chunks = []
        while chunk := self.source.read(io.DEFAULT_BUFFER_SIZE):
            chunks.append(chunk)
            self.pos += len(chunk)
        return b"".join(chunks)

    def read_uint(self, size: int, field_name: str = "integer") -> int:
        return int.from_bytes(self.read_bytes(size, field_name), byteorder="little")

    def read_u256_as_u128(self, field_name: str = "integer") -> int:
        """Read a 256-bit integer, which must have its upper 128 bits unset."""
        start = self.position
        value = self.read_uint(U256_SIZE, field_name)
        if value in U128_RANGE:
            return value
        raise CountOverflowError(
            f"Value of {field_name} does not fit in 128 bits",
            position=start,
            upper=value >> 128,
        )

    def read_optional_bytes(self, count: int, field_name: str) -> bytes | None:
        """Read a 1-byte presence flag followed by `count` bytes if the flag is 1."""
        flag_position = self.position
        is_present = self.read_uint(1, f"{field_name} presence flag")
        if is_present == 1:
            return self.read_bytes(count, field_name)
        if is_present == 0:
            return None
        self.throw(
            f"Expected {field_name} presence flag to be 0 or 1 but found {is_present}",
            position=flag_position,
        )

    def read_signature_type(self) -> SignatureType:
        value = self.read_uint(2, "signature type")
        try:
            return SignatureType(value)
        except ValueError as e:
            raise UnsupportedSignatureVariantError(
                f"Unsupported signature type: {value}",
                position=self.position - 2,
                signature_type=value,
            ) from e

    def read_bundle_entries(self, item_count: int) -> list[BundleEntry]:
        entries = []
        for _ in range(item_count):
            length = self.read_u256_as_u128("item length")
            entry_id = self.read_bytes(ENTRY_ID_SIZE, "item id")
            entries.append(BundleEntry(length, entry_id))
        return entries


def _as_stream(source: BundleSource | ReadableBundleStream) -> ReadableBundleStream:
    if isinstance(source, ReadableBundleStream):
        return source
    if hasattr(source, "read"):
        return ReadableBundleStream(source)
    return ReadableBundleStream(io.BytesIO(source))


def read_data_item(source: BundleSource | ReadableBundleStream) -> DataItem:
    """Decode a single data item.

    The item's data field extends to the end of `source`, so `source` must be
    limited to the item's length when the item is part of a bundle.

    Raises
    ------
    DecodeBundleError
        When the item is not well-formed. The subclass identifies the problem.
    """
    stream = _as_stream(source)

    signature_type = stream.read_signature_type()
    signature = stream.read_bytes(signature_type.signature_length, "signature")
    owner = stream.read_bytes(signature_type.owner_length, "owner public key")
    target = stream.read_optional_bytes(TARGET_SIZE, "target")
    anchor = stream.read_optional_bytes(ANCHOR_SIZE, "anchor")

    tag_count = stream.read_uint(8, "tag count")
    tag_data_size = stream.read_uint(8, "tag data size")
    tag_data_position = stream.position
    tag_data = stream.read_bytes(tag_data_size, "tag data")
    tags = decode_tags(tag_data, position=tag_data_position)
    if len(tags) != tag_count:
        raise MalformedInputError(
            f"Expected tag count does not match actual count after reading "
            f"tags: expected={tag_count}, actual={len(tags)}",
            position=tag_data_position,
        )

    data = stream.read_to_end("data")

    return DataItem(
        signature_type=signature_type,
        signature=signature,
        owner=owner,
        target=target,
        anchor=anchor,
        tags=tuple(tags),
        data=data,
    )


def read_bundle(
    source: BundleSource | ReadableBundleStream,
) -> Generator[DataItem, None, None]:
    """Decode the data items of a bundle, one at a time.

    The bundle's item table is read in full when the first item is requested.
    Each following item is read from `source` only when it's requested, so the
    whole bundle is never held in memory at once when `source` is a stream.

    Parameters
    ----------
    source
        A binary file-like object positioned at the start of the bundle, or a
        bytes-like object holding the whole bundle.

    Raises
    ------
    DecodeBundleError
        When the bundle is not well-formed. Errors in items have `item_index`
        and `item_length` set. No further items are produced after an error.
    Exception
        Errors raised by `source` propagate, with a note naming the item
        being decoded.

    Examples
    --------
    >>> list(read_bundle(bytes(32)))
    []
    """
    stream = _as_stream(source)
    item_count = stream.read_u256_as_u128("item count")
    entries = stream.read_bundle_entries(item_count)
    logger.debug("Bundle table lists %d items", item_count)

    for index, entry in enumerate(entries):
        entry_offset = stream.position
        try:
            item = read_data_item(stream.take(entry.length))
        except DecodeBundleError as e:
            e.item_index = index
            e.item_length = entry.length
            raise
        except Exception as e:
            add_note(
                e,
                f"Failed while decoding bundle item {index} "
                f"(item_length={entry.length}, offset={entry_offset})",
            )
            raise
        logger.debug(
            "Decoded item %d of %d: %d bytes, %d tags",
            index + 1,
            item_count,
            entry.length,
            len(item.tags),
        )
        yield item
