from __future__ import annotations

import io
import json

import pytest

from arweave_dump.jsonarray import JsonArrayWriter


def test_JsonArrayWriter() -> None:
    out = io.StringIO()
    writer = JsonArrayWriter(out)

    writer.write_open_bracket()
    writer.write_item("abc")
    writer.write_item("123")
    writer.write_item("last")
    writer.write_close_bracket()

    assert out.getvalue() == '[\n"abc",\n"123",\n"last"\n]\n'
    assert writer.count == 3


@pytest.mark.parametrize(
    "items",
    [[], [{}], [{"a": [1, 2], "b": None}, {"c": "✨"}], list(range(20))],
)
def test_JsonArrayWriter__writes_valid_json(items: list[object]) -> None:
    out = io.StringIO()
    with JsonArrayWriter(out) as writer:
        for item in items:
            writer.write_item(item)

    assert json.loads(out.getvalue()) == items


def test_JsonArrayWriter__leaves_array_open_on_error() -> None:
    out = io.StringIO()
    with pytest.raises(RuntimeError):
        with JsonArrayWriter(out) as writer:
            writer.write_item(1)
            raise RuntimeError("failed")

    assert out.getvalue() == "[\n1"
