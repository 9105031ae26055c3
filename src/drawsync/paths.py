"""Drawing/image/document path resolution.

Pure string and path transforms; nothing here touches the filesystem.

    <drawing_dir>/foo.drawing      → drawing
    <image_dir>/foo.drawing.svg    → companion image
    <document_dir>/foo.drawing.doc → companion document
"""

from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path

from drawsync import DOCUMENT_SUFFIX, DRAWING_EXTENSION, IMAGE_EXTENSION
from drawsync.errors import InvalidExtension

DEFAULT_PREFIX = "Drawing "
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d-%H.%M.%S"


def timestamp_now(fmt: str = DEFAULT_TIMESTAMP_FORMAT, now: datetime | None = None) -> str:
    """Format the current (or given) local time for drawing filenames."""
    return (now or datetime.now()).strftime(fmt)


def filename_for(use_uuid: bool, prefix: str, timestamp: str) -> str:
    """Pick a filename for a new drawing.

    Args:
        use_uuid: Use a random uuid4 instead of prefix + timestamp.
        prefix: Filename prefix (ignored with use_uuid).
        timestamp: Pre-formatted timestamp (ignored with use_uuid).

    Returns:
        Bare filename ending in the drawing extension.
    """
    if use_uuid:
        return uuid.uuid4().hex + DRAWING_EXTENSION
    return f"{prefix}{timestamp}{DRAWING_EXTENSION}"


def is_drawing_path(path: Path | str) -> bool:
    name = Path(path).name
    return name.endswith(DRAWING_EXTENSION) and len(name) > len(DRAWING_EXTENSION)


def validate_drawing_path(path: Path | str) -> None:
    """Raise InvalidExtension unless path names a drawing file."""
    if not is_drawing_path(path):
        raise InvalidExtension(path, DRAWING_EXTENSION)


def drawing_stem(path: Path | str) -> str:
    """Strip the directory and the drawing extension: /d/foo.drawing → foo."""
    name = Path(path).name
    if name.endswith(DRAWING_EXTENSION):
        return name[: -len(DRAWING_EXTENSION)]
    return name


def companion_document_path(drawing_path: Path | str, document_dir: Path | str) -> Path:
    """Return <document_dir>/<stem>.drawing.doc."""
    return Path(document_dir) / (drawing_stem(drawing_path) + DOCUMENT_SUFFIX)


def companion_image_path(drawing_path: Path | str, image_dir: Path | str) -> Path:
    """Return <image_dir>/<stem>.drawing.svg."""
    return Path(image_dir) / (drawing_stem(drawing_path) + DRAWING_EXTENSION + IMAGE_EXTENSION)
