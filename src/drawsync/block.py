"""Embedded source block editing for companion documents.

A companion document carries at most one embedded block:

    ...manual text...
    ```drawing-source
    { ...raw drawing content... }
    ```
    ...manual text...

Only the lines between the begin-marker line and the end-marker line are
rewritten. Marker search is a plain substring scan; the document format
itself is never parsed.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from drawsync import BLOCK_END, BLOCK_START
from drawsync.errors import MissingEndMarker


def _locate(text: str, begin: str, end: str) -> tuple[int, int, bool, bool] | None:
    """Return (start, stop, closed, adjacent) for the block body, or None.

    start is the first offset of the line after the begin-marker line.
    stop is the line break (CRLF or LF) that precedes the end-marker line, or len(text) when
    there is no end-marker (closed is False). adjacent means the end-marker
    line directly follows the begin line, so the body has no lines at all.
    """
    b = text.find(begin)
    if b == -1:
        return None

    nl = text.find("\n", b + len(begin))
    start = len(text) if nl == -1 else nl + 1

    e = text.find(end, start)
    if e == -1:
        return start, len(text), False, False

    before = text.rfind("\n", start, e)
    if before == -1:
        return start, start, True, True
    if before > start and text[before - 1] == "\r":
        before -= 1
    return start, before, True, False


def find_block(text: str, begin: str = BLOCK_START, end: str = BLOCK_END) -> tuple[int, int] | None:
    """Return the (start, end) offsets of the block body, or None."""
    found = _locate(text, begin, end)
    if found is None:
        return None
    return found[0], found[1]


def overwrite_block(
    text: str,
    new_content: str,
    begin: str = BLOCK_START,
    end: str = BLOCK_END,
    strict: bool = False,
) -> tuple[str, bool]:
    """Replace the body of the embedded block with new_content.

    Args:
        text: Full document text.
        new_content: Replacement body, inserted verbatim.
        begin: Begin-marker literal.
        end: End-marker literal.
        strict: Raise MissingEndMarker instead of replacing through to
            end-of-text when the end-marker is absent.

    Returns:
        (updated_text, found). Without a begin-marker the text is returned
        unchanged with found=False.
    """
    found = _locate(text, begin, end)
    if found is None:
        return text, False

    start, stop, closed, adjacent = found
    if not closed and strict:
        raise MissingEndMarker(end)

    if start == len(text) and not text.endswith("\n"):
        # Begin-marker sits on the last line
        return text + "\n" + new_content, True
    if adjacent:
        # Empty block: keep the end-marker on its own line
        return text[:start] + new_content + "\n" + text[start:], True
    return text[:start] + new_content + text[stop:], True


class Document:
    """A companion document seen only as full text.

    Writes replace the whole file in one step so readers never see a
    partially written document.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"Document({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        with open(self.path, encoding="utf-8", newline="") as f:
            return f.read()

    def write(self, text: str) -> None:
        fd, tmp = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            if self.path.exists():
                shutil.copymode(self.path, tmp)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
