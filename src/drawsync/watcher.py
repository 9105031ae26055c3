"""Filesystem watch on the drawing directory.

WatchHandle owns the one live watchdog subscription. It is armed by
start() only after the configured directories have been validated, and
torn down by stop(). watchdog delivers events for a watch on a single
emitter thread, so events reach the dispatcher one at a time.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from drawsync.config import Settings, validate_dirs
from drawsync.dispatcher import ChangeDispatcher, ChangeEvent, EventKind

logger = logging.getLogger(__name__)

_KINDS = {
    EVENT_TYPE_CREATED: EventKind.CREATED,
    EVENT_TYPE_MODIFIED: EventKind.CHANGED,
    EVENT_TYPE_MOVED: EventKind.RENAMED,
    EVENT_TYPE_DELETED: EventKind.DELETED,
}


def _as_str(path: str | bytes) -> str:
    if isinstance(path, bytes):
        return path.decode()
    return path


def to_change_event(event: FileSystemEvent) -> ChangeEvent | None:
    """Translate a watchdog event; directory events yield None."""
    if event.is_directory:
        return None
    kind = _KINDS.get(event.event_type, EventKind.OTHER)
    if kind is EventKind.RENAMED:
        path = _as_str(event.dest_path)
    else:
        path = _as_str(event.src_path)
    return ChangeEvent(kind, Path(path))


class _DrawingEventHandler(FileSystemEventHandler):
    def __init__(self, dispatcher: ChangeDispatcher):
        super().__init__()
        self._dispatcher = dispatcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        change = to_change_event(event)
        if change is None:
            return
        try:
            self._dispatcher.handle_event(change)
        except Exception:
            # A dying handler would silently stop the observer thread
            logger.exception("Unhandled error for %s", change.path)


class WatchHandle:
    """Explicit lifetime for the drawing-directory subscription."""

    def __init__(self, settings: Settings, dispatcher: ChangeDispatcher | None = None):
        self.settings = settings
        self.dispatcher = dispatcher or ChangeDispatcher(settings)
        self._observer: Observer | None = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        """Validate directories, then arm the watch.

        Raises:
            ConfigurationError: If any configured directory is missing.
        """
        if self._observer is not None:
            logger.warning("Watch on %s is already running", self.settings.drawing_dir)
            return

        validate_dirs(self.settings)

        observer = Observer()
        observer.schedule(
            _DrawingEventHandler(self.dispatcher),
            str(self.settings.drawing_dir),
            recursive=False,
        )
        observer.start()
        self._observer = observer
        logger.info("Watching %s", self.settings.drawing_dir)

    def stop(self, timeout: float | None = 5.0) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout)
        self._observer = None
        logger.info("Stopped watching %s", self.settings.drawing_dir)

    def __enter__(self) -> "WatchHandle":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()


def run_forever(handle: WatchHandle, poll_interval: float = 1.0) -> None:
    """Start the watch and block until interrupted."""
    handle.start()
    try:
        while handle.is_running:
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        pass
    finally:
        handle.stop()
