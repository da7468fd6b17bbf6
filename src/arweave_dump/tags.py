"""Decode the Avro-encoded tag lists of data items."""

from __future__ import annotations

import io
from collections.abc import Iterable
from typing import Final

import fastavro

from arweave_dump._errors import SchemaDecodeError
from arweave_dump.dataitem import BundleTag

TAG_LIST_SCHEMA: Final = fastavro.parse_schema(
    {
        "type": "array",
        "items": {
            "type": "record",
            "name": "Tag",
            "fields": [
                {"name": "name", "type": "string"},
                {"name": "value", "type": "string"},
            ],
        },
    }
)
"""The Avro schema of a data item's tags: an array of name/value string records."""


def decode_tags(data: bytes, *, position: int = 0) -> list[BundleTag]:
    """Decode an Avro-encoded tag list.

    Parameters
    ----------
    data
        The tag data of a single data item.
    position
        The offset of `data` in the bundle, reported in errors.

    Raises
    ------
    SchemaDecodeError
        When `data` is not exactly one tag list encoded with `TAG_LIST_SCHEMA`.
    """
    if not data:
        return []

    fp = io.BytesIO(data)
    try:
        records = fastavro.schemaless_reader(fp, TAG_LIST_SCHEMA, None)
    # The Avro reader has no error type of its own. Short data surfaces as
    # EOFError or IndexError, malformed text or lengths as ValueError.
    except Exception as e:
        raise SchemaDecodeError(
            f"Tag data is not a valid Avro tag list: {e}", position=position
        ) from e

    if fp.tell() != len(data):
        raise SchemaDecodeError(
            f"Tag data has {len(data) - fp.tell()} unread bytes after the tag list",
            position=position + fp.tell(),
        )

    assert isinstance(records, list)
    return [BundleTag(record["name"], record["value"]) for record in records]


def encode_tags(tags: Iterable[tuple[str, str]]) -> bytes:
    """Encode name/value pairs as an Avro tag list, the inverse of `decode_tags`."""
    records = [{"name": name, "value": value} for name, value in tags]
    if not records:
        return b""
    fp = io.BytesIO()
    fastavro.schemaless_writer(fp, TAG_LIST_SCHEMA, records)
    return fp.getvalue()
