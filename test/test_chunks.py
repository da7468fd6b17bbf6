from __future__ import annotations

from collections.abc import Generator, Sequence

import pytest
from hypothesis import given
from hypothesis import strategies as st

from arweave_dump._errors import ChunkPendingError, ShortOrEmptyChunkError
from arweave_dump.chunks import ChunkReader, chunk_stream

from .strategies import chunkings


class FakeWeave:
    """Serves chunks of `data`, which ends at the weave offset `end_offset`."""

    def __init__(self, chunks: Sequence[bytes], end_offset: int) -> None:
        self.chunks = list(chunks)
        self.size = sum(len(c) for c in chunks)
        self.end_offset = end_offset
        self.requested: list[int] = []

    def fetch_chunk(self, offset: int) -> bytes:
        self.requested.append(offset)
        start = self.end_offset - self.size + 1
        for chunk in self.chunks:
            if offset == start:
                return chunk
            start += len(chunk)
        raise AssertionError(f"No chunk starts at {offset}")


@given(data=st.data(), end_padding=st.integers(min_value=0, max_value=2**40))
def test_chunk_stream__reassembles_data(data: st.DataObject, end_padding: int) -> None:
    expected = data.draw(st.binary(max_size=2000))
    chunks = data.draw(chunkings(expected))
    weave = FakeWeave(chunks, end_offset=len(expected) - 1 + end_padding)

    result = list(
        chunk_stream(weave.fetch_chunk, size=weave.size, end_offset=weave.end_offset)
    )

    assert result == chunks
    assert b"".join(result) == expected
    assert len(weave.requested) == len(chunks)


def test_chunk_stream__offsets() -> None:
    weave = FakeWeave([b"abc", b"de", b"f"], end_offset=1005)

    assert list(chunk_stream(weave.fetch_chunk, size=6, end_offset=1005)) == [
        b"abc",
        b"de",
        b"f",
    ]
    assert weave.requested == [1000, 1003, 1005]


def test_chunk_stream__empty_transaction() -> None:
    def fetch_chunk(offset: int) -> bytes:
        raise AssertionError("should not be called")

    assert list(chunk_stream(fetch_chunk, size=0, end_offset=99)) == []


def test_chunk_stream__is_lazy() -> None:
    weave = FakeWeave([b"abc", b"de"], end_offset=4)
    chunks = chunk_stream(weave.fetch_chunk, size=5, end_offset=4)

    assert weave.requested == []
    assert next(chunks) == b"abc"
    assert weave.requested == [0]


def test_chunk_stream__empty_chunk() -> None:
    chunks = chunk_stream(lambda offset: b"", size=10, end_offset=109)

    with pytest.raises(ShortOrEmptyChunkError, match="Chunk is empty") as exc_info:
        next(chunks)

    assert exc_info.value.offset == 100
    assert exc_info.value.length == 0
    assert exc_info.value.remaining == 10


def test_chunk_stream__chunk_overshoots_size() -> None:
    chunks = chunk_stream(lambda offset: b"x" * 6, size=10, end_offset=9)

    assert next(chunks) == b"x" * 6
    with pytest.raises(ShortOrEmptyChunkError, match="larger than") as exc_info:
        next(chunks)

    assert exc_info.value.offset == 6
    assert exc_info.value.remaining == 4


def test_chunk_stream__pending_first_chunk() -> None:
    def fetch_chunk(offset: int) -> bytes:
        raise ChunkPendingError("Chunk is not available yet", offset=offset)

    chunks = chunk_stream(fetch_chunk, size=10, end_offset=9)

    with pytest.raises(ChunkPendingError) as exc_info:
        next(chunks)

    assert exc_info.value.offset == 0
    assert list(chunks) == []


@pytest.mark.parametrize("size,end_offset", [(-1, 10), (10, 5)])
def test_chunk_stream__invalid_arguments(size: int, end_offset: int) -> None:
    with pytest.raises(ValueError):
        next(chunk_stream(lambda offset: b"", size=size, end_offset=end_offset))


@given(st.data())
def test_ChunkReader__reads_in_order(data: st.DataObject) -> None:
    expected = data.draw(st.binary(max_size=500))
    chunks = data.draw(chunkings(expected))
    read_sizes = data.draw(st.lists(st.integers(min_value=1, max_value=64)))

    reader = ChunkReader(chunks)
    result = b""
    for size in read_sizes:
        piece = reader.read(size)
        assert len(piece) <= size
        result += piece
    result += reader.read()

    assert result == expected
    assert reader.read(1) == b""


def test_ChunkReader__does_not_read_ahead() -> None:
    fetched: list[bytes] = []

    def chunks() -> Generator[bytes, None, None]:
        for chunk in [b"ab", b"cd"]:
            fetched.append(chunk)
            yield chunk

    reader = ChunkReader(chunks())
    assert fetched == []
    assert reader.read(2) == b"ab"
    assert fetched == [b"ab"]


def test_ChunkReader__propagates_chunk_errors() -> None:
    def chunks() -> Generator[bytes, None, None]:
        yield b"ab"
        raise ChunkPendingError("Chunk is not available yet", offset=2)

    reader = ChunkReader(chunks())
    assert reader.read(2) == b"ab"
    with pytest.raises(ChunkPendingError):
        reader.read(2)


def test_ChunkReader__close_closes_chunk_generator() -> None:
    released = []

    def chunks() -> Generator[bytes, None, None]:
        try:
            yield b"ab"
            yield b"cd"
        finally:
            released.append(True)

    with ChunkReader(chunks()) as reader:
        assert reader.read(1) == b"a"
        assert released == []

    assert released == [True]
    assert reader.closed
    with pytest.raises(ValueError):
        reader.read(1)


def test_ChunkReader__readinto() -> None:
    reader = ChunkReader([b"abc", b"def"])
    buffer = bytearray(4)

    assert reader.readinto(buffer) == 3
    assert buffer == b"abc\x00"
    assert reader.readinto(memoryview(buffer)[1:]) == 3
    assert buffer == b"adef"
    assert reader.readinto(buffer) == 0
