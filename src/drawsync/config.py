"""Settings resolution.

Settings are layered, later sources winning:
    1. built-in defaults (~/drawings/{drawings,images,documents})
    2. YAML config file (--config, $DRAWSYNC_CONFIG, ~/.config/drawsync/config.yaml)
    3. environment variables

Environment variables:
    DRAWSYNC_CONFIG — config file path
    DRAWSYNC_DRAWING_DIR, DRAWSYNC_IMAGE_DIR, DRAWSYNC_DOCUMENT_DIR — directories
    DRAWSYNC_CONVERTER — external drawing-to-image command
    DRAWSYNC_LOG_LEVEL, DRAWSYNC_LOG_FILE — logging
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from drawsync import BLOCK_END, BLOCK_START
from drawsync.errors import ConfigurationError
from drawsync.paths import DEFAULT_PREFIX, DEFAULT_TIMESTAMP_FORMAT

_DEFAULT_ROOT = Path.home() / "drawings"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "drawsync" / "config.yaml"

_PATH_KEYS = {"drawing_dir", "image_dir", "document_dir", "log_file"}

_ENV_KEYS = {
    "DRAWSYNC_DRAWING_DIR": "drawing_dir",
    "DRAWSYNC_IMAGE_DIR": "image_dir",
    "DRAWSYNC_DOCUMENT_DIR": "document_dir",
    "DRAWSYNC_CONVERTER": "converter",
    "DRAWSYNC_LOG_LEVEL": "log_level",
    "DRAWSYNC_LOG_FILE": "log_file",
}


@dataclass(frozen=True)
class Settings:
    drawing_dir: Path = _DEFAULT_ROOT / "drawings"
    image_dir: Path = _DEFAULT_ROOT / "images"
    document_dir: Path = _DEFAULT_ROOT / "documents"
    # External tools
    converter: str = "drawing-export"
    converter_args: tuple[str, ...] = ()
    editor: str | None = None
    # New drawing names
    use_uuid: bool = False
    filename_prefix: str = DEFAULT_PREFIX
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    # Embedded block
    begin_marker: str = BLOCK_START
    end_marker: str = BLOCK_END
    strict_markers: bool = False
    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None
    log_max_bytes: int = 5 * 1024 * 1024
    log_backups: int = 3
    source: Path | None = field(default=None, compare=False)

    def directories(self) -> dict[str, Path]:
        return {
            "drawing_dir": self.drawing_dir,
            "image_dir": self.image_dir,
            "document_dir": self.document_dir,
        }

    def missing_dirs(self) -> list[str]:
        """Names and paths of configured directories that do not exist."""
        return [
            f"{name}={path}"
            for name, path in self.directories().items()
            if not Path(path).is_dir()
        ]


def _coerce(key: str, value: Any) -> Any:
    if key in _PATH_KEYS:
        if value in (None, ""):
            return None
        return Path(str(value)).expanduser().resolve()
    if key == "converter_args":
        if isinstance(value, str):
            return tuple(value.split())
        return tuple(str(v) for v in value or ())
    if key in ("use_uuid", "strict_markers"):
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "y"}
        return bool(value)
    if key in ("log_max_bytes", "log_backups"):
        return int(value)
    if key == "log_level":
        return (str(value) or "INFO").upper()
    return value


def read_config_file(path: Path | str) -> dict:
    """Read a drawsync YAML config file.

    Raises:
        ConfigurationError: If the file is unreadable, malformed, or not a mapping.
    """
    config_path = Path(path).expanduser()
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config at {config_path} is not a YAML mapping")
    return data


def _config_path(explicit: Path | str | None) -> Path | None:
    if explicit:
        return Path(explicit).expanduser()
    env = os.environ.get("DRAWSYNC_CONFIG")
    if env:
        return Path(env).expanduser()
    return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.is_file() else None


# Values that must be non-empty strings; "" would match every document
_NON_EMPTY_KEYS = ("begin_marker", "end_marker", "converter")


def _check_text_values(values: dict[str, Any]) -> None:
    """Raise ConfigurationError for empty or non-string text settings."""
    for key in _NON_EMPTY_KEYS:
        if key in values:
            value = values[key]
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"{key} must be a non-empty string, got {value!r}")
    if "filename_prefix" in values and not isinstance(values["filename_prefix"], str):
        raise ConfigurationError(
            f"filename_prefix must be a string, got {values['filename_prefix']!r}"
        )


def load_settings(
    config_path: Path | str | None = None,
    **overrides: Any,
) -> Settings:
    """Build Settings from defaults, config file, environment and overrides.

    Args:
        config_path: Explicit config file. An explicit path that does not
            exist is an error; the default location is optional.
        **overrides: Final values (e.g. from CLI flags); None values are ignored.

    Returns:
        Frozen Settings.
    """
    known = {f.name for f in fields(Settings)} - {"source"}
    values: dict[str, Any] = {}

    path = _config_path(config_path)
    if path is not None:
        for key, value in read_config_file(path).items():
            if key in known:
                values[key] = _coerce(key, value)

    for env_key, key in _ENV_KEYS.items():
        raw = os.environ.get(env_key, "").strip()
        if raw:
            values[key] = _coerce(key, raw)

    for key, value in overrides.items():
        if key in known and value is not None:
            values[key] = _coerce(key, value)

    for key in ("drawing_dir", "image_dir", "document_dir"):
        if values.get(key) is None:
            values.pop(key, None)

    _check_text_values(values)
    return replace(Settings(), source=path, **values)


def validate_dirs(settings: Settings) -> None:
    """Raise ConfigurationError unless all three directories exist."""
    missing = settings.missing_dirs()
    if missing:
        raise ConfigurationError(
            "Missing directories: " + ", ".join(missing),
            missing=missing,
        )
