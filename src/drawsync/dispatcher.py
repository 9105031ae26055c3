"""Change dispatch — react to drawing changes, re-render, splice documents.

For every qualifying change event:
1. Request a render of the drawing (detached, unobserved)
2. Resolve the companion document <stem>.drawing.doc
3. Read the drawing's raw content
4. Rewrite the document's embedded block and replace the file

handle_event() never raises: each event succeeds or fails on its own and
the watch keeps running. sync_drawing() and sync_all() are the interactive
counterparts and report failures to their caller.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from drawsync.block import Document, overwrite_block
from drawsync.commands import current_platform, request_render
from drawsync.config import Settings
from drawsync.errors import (
    DrawsyncError,
    MissingBlockMarkers,
    MissingCompanionDocument,
    MissingEndMarker,
)
from drawsync.paths import companion_document_path, is_drawing_path, validate_drawing_path

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    CREATED = "created"
    CHANGED = "changed"
    RENAMED = "renamed"
    DELETED = "deleted"
    OTHER = "other"


# Only these kinds mean "a drawing now has new content"
SYNC_KINDS = {EventKind.CHANGED, EventKind.RENAMED}


@dataclass(frozen=True)
class ChangeEvent:
    """One filesystem notification. For renames, path is the destination."""

    kind: EventKind
    path: Path


Renderer = Callable[..., None]


class ChangeDispatcher:
    """Turns change events into renders and document updates."""

    def __init__(
        self,
        settings: Settings,
        renderer: Renderer = request_render,
        platform: str | None = None,
    ):
        self.settings = settings
        self._renderer = renderer
        self._platform = platform or current_platform()
        self._locks: dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, path: Path) -> threading.Lock:
        # One lock per document path ever seen; bounded by the document count
        key = Path(path).resolve()
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def accepts(self, event: ChangeEvent) -> bool:
        return event.kind in SYNC_KINDS and is_drawing_path(event.path)

    def handle_event(self, event: ChangeEvent) -> None:
        """Process a single change event to completion, swallowing its failures."""
        if not self.accepts(event):
            logger.debug("Ignoring %s event for %s", event.kind.value, event.path)
            return

        self.render(event.path)

        try:
            action = self.sync_drawing(event.path)
            logger.info("Synced %s (%s)", event.path, action)
        except MissingCompanionDocument as e:
            logger.info("No companion document for %s: %s", event.path, e.path)
        except MissingBlockMarkers as e:
            logger.warning("Skipped %s: %s", event.path, e)
        except Exception:
            logger.exception("Failed to sync %s", event.path)

    def render(self, drawing_path: Path | str) -> None:
        """Fire off the converter; launch failures are logged, not raised."""
        try:
            self._renderer(
                drawing_path,
                self._platform,
                self.settings.converter,
                self.settings.converter_args,
            )
        except OSError as e:
            logger.error("Could not launch converter %r for %s: %s",
                         self.settings.converter, drawing_path, e)
        except Exception:
            logger.exception("Render request failed for %s", drawing_path)

    def sync_drawing(self, drawing_path: Path | str, dry_run: bool = False) -> str:
        """Copy a drawing's raw content into its companion document's block.

        Args:
            drawing_path: Path to the .drawing file.
            dry_run: Compute the change without writing the document.

        Returns:
            "updated" or "unchanged".

        Raises:
            InvalidExtension: If drawing_path is not a drawing.
            MissingCompanionDocument: If no companion document exists.
            MissingBlockMarkers: If the document has no begin-marker
                (MissingEndMarker in strict mode without an end-marker).
            OSError: On read/write failure.
        """
        s = self.settings
        validate_drawing_path(drawing_path)
        doc = Document(companion_document_path(drawing_path, s.document_dir))
        if not doc.exists():
            raise MissingCompanionDocument(doc.path)

        with open(drawing_path, encoding="utf-8", newline="") as f:
            content = f.read()

        with self._lock_for(doc.path):
            text = doc.read()
            try:
                new_text, found = overwrite_block(
                    text, content, s.begin_marker, s.end_marker, strict=s.strict_markers,
                )
            except MissingEndMarker:
                raise MissingEndMarker(s.end_marker, doc.path) from None
            if not found:
                raise MissingBlockMarkers(s.begin_marker, doc.path)
            if new_text == text:
                return "unchanged"
            if not dry_run:
                doc.write(new_text)
        return "updated"

    def sync_all(self, dry_run: bool = False) -> dict[str, Any]:
        """Sync every drawing in the drawing directory."""
        updated = []
        unchanged = []
        skipped = []
        errors = []

        for path in sorted(Path(self.settings.drawing_dir).iterdir()):
            if not path.is_file() or not is_drawing_path(path):
                continue
            try:
                action = self.sync_drawing(path, dry_run=dry_run)
                if action == "updated": updated.append(str(path))
                else: unchanged.append(str(path))
            except (MissingCompanionDocument, MissingBlockMarkers) as e:
                skipped.append({"path": str(path), "reason": str(e)})
            except (DrawsyncError, OSError) as e:
                errors.append({"path": str(path), "error": str(e)})

        return {
            "updated": updated,
            "unchanged": unchanged,
            "skipped": skipped,
            "errors": errors,
            "dry_run": dry_run,
        }
