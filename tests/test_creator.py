"""Tests for new drawing creation."""

import json
import os
from dataclasses import replace
from datetime import datetime

import pytest

from drawsync.creator import create_drawing
from drawsync.errors import CreationError
from drawsync.templates import DRAWING_SKELETON, DRAWING_TEMPLATE

NOW = datetime(2024, 5, 6, 7, 8, 9)


class RecordingLauncher:
    def __init__(self):
        self.calls = []

    def __call__(self, path, platform, editor):
        # The file must be complete before the editor starts
        self.calls.append((path, platform, editor, path.read_text()))


class TestCreateDrawing:
    def test_writes_template_then_launches(self, settings):
        launcher = RecordingLauncher()
        path = create_drawing(settings, platform="posix", launcher=launcher, now=NOW)
        assert path == settings.drawing_dir / "Drawing 2024-05-06-07.08.09.drawing"
        assert path.read_text() == DRAWING_TEMPLATE
        assert launcher.calls == [(path, "posix", None, DRAWING_TEMPLATE)]

    def test_uuid_naming(self, settings):
        launcher = RecordingLauncher()
        path = create_drawing(replace(settings, use_uuid=True), platform="posix", launcher=launcher)
        assert path.name.endswith(".drawing")
        assert not path.name.startswith("Drawing ")

    def test_custom_editor_is_passed(self, settings):
        launcher = RecordingLauncher()
        create_drawing(replace(settings, editor="my-editor"), platform="darwin", launcher=launcher, now=NOW)
        assert launcher.calls[0][1:3] == ("darwin", "my-editor")

    def test_existing_file_is_not_overwritten(self, settings):
        launcher = RecordingLauncher()
        create_drawing(settings, platform="posix", launcher=launcher, now=NOW)
        with pytest.raises(CreationError):
            create_drawing(settings, platform="posix", launcher=launcher, now=NOW)
        assert len(launcher.calls) == 1

    def test_missing_directory_raises_creation_error(self, settings, tmp_path):
        launcher = RecordingLauncher()
        broken = replace(settings, drawing_dir=tmp_path / "nope")
        with pytest.raises(CreationError) as exc_info:
            create_drawing(broken, platform="posix", launcher=launcher, now=NOW)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert launcher.calls == []

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
    def test_unwritable_directory_raises_creation_error(self, settings):
        settings.drawing_dir.chmod(0o500)
        try:
            with pytest.raises(CreationError):
                create_drawing(settings, platform="posix", launcher=RecordingLauncher(), now=NOW)
        finally:
            settings.drawing_dir.chmod(0o700)


class TestTemplate:
    def test_template_is_the_skeleton(self):
        data = json.loads(DRAWING_TEMPLATE)
        assert data == DRAWING_SKELETON
        assert data["elements"] == []
        assert data["files"] == {}
        assert {"type", "version", "source", "appState"} <= data.keys()
