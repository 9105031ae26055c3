"""New drawing creation.

Allocates a filename, writes the template, then opens the file in the
drawing editor. The file is fully written before the editor is launched.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from drawsync.commands import current_platform, open_in_editor
from drawsync.config import Settings
from drawsync.errors import CreationError
from drawsync.paths import filename_for, timestamp_now, validate_drawing_path
from drawsync.templates import DRAWING_TEMPLATE

logger = logging.getLogger(__name__)


def create_drawing(
    settings: Settings,
    platform: str | None = None,
    launcher: Callable[..., None] = open_in_editor,
    now: datetime | None = None,
) -> Path:
    """Create a drawing from the template and open it for editing.

    Args:
        settings: Resolved settings (drawing_dir, naming, editor).
        platform: Platform tag; detected when omitted.
        launcher: Called as launcher(path, platform, editor).
        now: Timestamp for prefix-style names; defaults to the current time.

    Returns:
        Path of the new drawing.

    Raises:
        InvalidExtension: If the computed path is not a drawing path.
        CreationError: If the file cannot be created.
    """
    name = filename_for(
        settings.use_uuid,
        settings.filename_prefix,
        timestamp_now(settings.timestamp_format, now),
    )
    path = Path(settings.drawing_dir) / name
    validate_drawing_path(path)

    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(DRAWING_TEMPLATE)
    except OSError as e:
        raise CreationError(f"Cannot create {path}: {e}") from e

    logger.info("Created %s", path)
    launcher(path, platform or current_platform(), settings.editor)
    return path
