"""Shared test fixtures for drawsync."""

import pytest

from drawsync.config import Settings


class RecordingRenderer:
    """Stands in for request_render; remembers every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, drawing_path, platform, converter, extra_args=()):
        self.calls.append((str(drawing_path), platform, converter, tuple(extra_args)))

    @property
    def paths(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def dirs(tmp_path):
    drawings = tmp_path / "drawings"
    images = tmp_path / "images"
    documents = tmp_path / "documents"
    for d in (drawings, images, documents):
        d.mkdir()
    return drawings, images, documents


@pytest.fixture
def settings(dirs):
    drawings, images, documents = dirs
    return Settings(
        drawing_dir=drawings,
        image_dir=images,
        document_dir=documents,
        converter="fake-export",
        begin_marker="BEGIN",
        end_marker="END",
    )


@pytest.fixture
def renderer():
    return RecordingRenderer()
