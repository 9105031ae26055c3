"""Exception taxonomy for drawsync.

Background (watch) errors are caught per event by the dispatcher.
Interactive operations let these propagate to the CLI.
"""

from __future__ import annotations

from pathlib import Path


class DrawsyncError(Exception):
    """Base class for all drawsync errors."""


class ConfigurationError(DrawsyncError):
    """Configured directories are missing or the config file is unusable."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class InvalidExtension(DrawsyncError, ValueError):
    """A path does not carry the drawing extension."""

    def __init__(self, path: Path | str, extension: str):
        super().__init__(f"{path} does not end with '{extension}'")
        self.path = str(path)


class CreationError(DrawsyncError):
    """A new drawing file could not be written."""


class MissingCompanionDocument(DrawsyncError):
    """No companion document exists for a drawing."""

    def __init__(self, path: Path | str):
        super().__init__(f"companion document not found: {path}")
        self.path = str(path)


class MissingBlockMarkers(DrawsyncError):
    """The companion document has no embedded source block."""

    def __init__(self, marker: str, path: Path | str | None = None):
        where = f" in {path}" if path else ""
        super().__init__(f"no '{marker}' marker{where}")
        self.marker = marker
        self.path = str(path) if path else None


class MissingEndMarker(MissingBlockMarkers):
    """A begin-marker was found but its end-marker was not."""
