"""Reassemble transaction data from chunks, and read it as a binary stream."""

from __future__ import annotations

import io
import logging
from collections.abc import Generator, Iterable, Iterator
from typing import TYPE_CHECKING, Protocol

from arweave_dump._errors import ShortOrEmptyChunkError

if TYPE_CHECKING:
    from typing_extensions import Buffer

logger = logging.getLogger(__name__)


class FetchChunkFn(Protocol):
    def __call__(self, offset: int) -> bytes:
        """Get the bytes of the chunk starting at `offset` in the weave."""


def chunk_stream(
    fetch_chunk: FetchChunkFn, *, size: int, end_offset: int
) -> Generator[bytes, None, None]:
    """Fetch the chunks of a transaction's data in order.

    Parameters
    ----------
    fetch_chunk
        A function that fetches the chunk at an absolute weave offset.
    size
        The number of bytes of data in the transaction.
    end_offset
        The absolute weave offset of the last byte of the transaction's data.

    Returns
    -------
    :
        A generator yielding each chunk's bytes. Chunks are fetched one at a
        time, when the next chunk is requested. Joined together, the chunks are
        exactly `size` bytes.

    Raises
    ------
    ShortOrEmptyChunkError
        When a chunk is empty, or extends past the end of the transaction.
    ChunkPendingError
        (From `fetch_chunk`) When a chunk is not yet available.
    """
    if size < 0:
        raise ValueError(f"size must be >= 0: {size}")
    if end_offset < size - 1:
        raise ValueError(
            f"end_offset must be >= size - 1: end_offset={end_offset}, size={size}"
        )

    offset = end_offset - size + 1
    remaining = size
    while remaining > 0:
        chunk = fetch_chunk(offset)
        if not chunk or len(chunk) > remaining:
            raise ShortOrEmptyChunkError(
                "Chunk is empty" if not chunk else "Chunk is larger than the data left",
                offset=offset,
                length=len(chunk),
                remaining=remaining,
            )
        logger.debug("Fetched chunk at offset %d: %d bytes", offset, len(chunk))
        yield chunk
        offset += len(chunk)
        remaining -= len(chunk)


class ChunkReader(io.RawIOBase):
    """A read-only binary file that reads from an iterable of byte chunks.

    Only the chunk currently being read is held in memory. Like other raw
    files, a read returns fewer bytes than requested at the end of a chunk.

    Closing the reader closes the chunk iterator, if it has a `close()` method
    (as generators do).

    Examples
    --------
    >>> reader = ChunkReader([b"ab", b"cde"])
    >>> reader.read(1), reader.read(3), reader.read()
    (b'a', b'b', b'cde')
    """

    _chunks: Iterator[bytes]
    _current: memoryview

    def __init__(self, chunks: Iterable[bytes]) -> None:
        super().__init__()
        self._chunks = iter(chunks)
        self._current = memoryview(b"")

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Buffer) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        while not self._current:
            chunk = next(self._chunks, None)
            if chunk is None:
                return 0
            self._current = memoryview(chunk).cast("B")

        target = memoryview(buffer).cast("B")
        count = min(len(target), len(self._current))
        target[:count] = self._current[:count]
        self._current = self._current[count:]
        return count

    def close(self) -> None:
        if not self.closed:
            self._current = memoryview(b"")
            close = getattr(self._chunks, "close", None)
            if close is not None:
                close()
        super().close()
