"""Write a JSON array incrementally, one item at a time."""

from __future__ import annotations

import json
from types import TracebackType
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from typing_extensions import Self


class JsonArrayWriter:
    """Write items to a text file as the elements of a pretty-printed JSON array.

    Only the item being written is held in memory, so an array of any length can
    be written from a generator.

    Examples
    --------
    >>> import io
    >>> out = io.StringIO()
    >>> with JsonArrayWriter(out) as writer:
    ...     writer.write_item("abc")
    ...     writer.write_item(123)
    >>> out.getvalue()
    '[\\n"abc",\\n123\\n]\\n'
    """

    fp: TextIO
    count: int
    """The number of items written."""

    def __init__(self, fp: TextIO) -> None:
        self.fp = fp
        self.count = 0

    def write_open_bracket(self) -> None:
        self.fp.write("[\n")

    def write_close_bracket(self) -> None:
        self.fp.write("\n]\n")

    def write_item(self, item: object) -> None:
        if self.count:
            self.fp.write(",\n")
        self.fp.write(json.dumps(item, indent=2))
        self.count += 1

    def __enter__(self) -> Self:
        self.write_open_bracket()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # An unfinished array is left open, so a partial file is not valid JSON.
        if exc_type is None:
            self.write_close_bracket()
