from __future__ import annotations

import sys


def add_note(exc: BaseException, note: str) -> None:
    """Attach a note to an exception, like `BaseException.add_note` on 3.11+."""
    if sys.version_info >= (3, 11):
        exc.add_note(note)
        return
    notes = getattr(exc, "__notes__", None)
    if not isinstance(notes, list):
        notes = []
        exc.__notes__ = notes  # type: ignore[attr-defined]
    notes.append(note)
