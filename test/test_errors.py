from __future__ import annotations

from dataclasses import dataclass

from arweave_dump._errors import (
    ArweaveDumpError,
    ChunkPendingError,
    DataPendingError,
    DecodeBundleError,
    TransportError,
    TruncatedInputError,
    UnsupportedSignatureVariantError,
)


@dataclass(init=False)
class ExampleArweaveDumpError(ArweaveDumpError):
    level: int
    limit: float

    def __init__(self, message: str, *, level: int, limit: float) -> None:
        super().__init__(message)
        self.level = level
        self.limit = limit


def test_arweavedumperror_str_with_fields() -> None:
    assert (
        str(ExampleArweaveDumpError("Level too high", level=3, limit=2.123))
        == "Level too high: level=3, limit=2.123"
    )


def test_arweavedumperror_str_without_fields() -> None:
    assert str(ArweaveDumpError("Something went wrong")) == "Something went wrong"


def test_DecodeBundleError_is_ValueError() -> None:
    assert issubclass(DecodeBundleError, ValueError)
    assert issubclass(TruncatedInputError, DecodeBundleError)


def test_TruncatedInputError() -> None:
    err = TruncatedInputError("Msg", position=2, expected=32, available=3)

    assert str(err) == "Msg: position=2, expected=32, available=3"
    err.item_index = 1
    err.item_length = 100
    assert str(err) == (
        "Msg: position=2, item_index=1, item_length=100, expected=32, available=3"
    )


def test_UnsupportedSignatureVariantError() -> None:
    err = UnsupportedSignatureVariantError("Msg", position=0, signature_type=5)

    assert err.signature_type == 5
    assert str(err) == "Msg: position=0, signature_type=5"


def test_ChunkPendingError() -> None:
    err = ChunkPendingError("Msg", offset=10, url="https://arweave.net/chunk/10")

    assert isinstance(err, DataPendingError)
    assert isinstance(err, TransportError)
    assert str(err) == "Msg: url='https://arweave.net/chunk/10', offset=10"
