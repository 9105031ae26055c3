"""Tests for settings resolution."""

from pathlib import Path

import pytest

from drawsync import BLOCK_END, BLOCK_START
from drawsync.config import Settings, load_settings, read_config_file, validate_dirs
from drawsync.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in (
        "DRAWSYNC_CONFIG", "DRAWSYNC_DRAWING_DIR", "DRAWSYNC_IMAGE_DIR",
        "DRAWSYNC_DOCUMENT_DIR", "DRAWSYNC_CONVERTER", "DRAWSYNC_LOG_LEVEL",
        "DRAWSYNC_LOG_FILE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("drawsync.config.DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")


class TestLoadSettings:
    def test_defaults(self):
        s = load_settings()
        assert s.begin_marker == BLOCK_START
        assert s.end_marker == BLOCK_END
        assert s.strict_markers is False
        assert s.log_level == "INFO"
        assert s.source is None

    def test_reads_yaml_file(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(
            f"drawing_dir: {tmp_path / 'dr'}\n"
            "converter: my-export\n"
            "converter_args: [--rename, -q]\n"
            "use_uuid: true\n"
            "log_level: debug\n"
            "unknown_key: ignored\n"
        )
        s = load_settings(cfg)
        assert s.drawing_dir == (tmp_path / "dr").resolve()
        assert s.converter == "my-export"
        assert s.converter_args == ("--rename", "-q")
        assert s.use_uuid is True
        assert s.log_level == "DEBUG"
        assert s.source == cfg

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("converter: from-file\n")
        monkeypatch.setenv("DRAWSYNC_CONFIG", str(cfg))
        monkeypatch.setenv("DRAWSYNC_CONVERTER", "from-env")
        monkeypatch.setenv("DRAWSYNC_IMAGE_DIR", str(tmp_path / "img"))
        s = load_settings()
        assert s.converter == "from-env"
        assert s.image_dir == (tmp_path / "img").resolve()

    def test_overrides_win_and_none_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DRAWSYNC_LOG_LEVEL", "warning")
        s = load_settings(None, log_level="error", document_dir=None)
        assert s.log_level == "ERROR"
        assert s.document_dir == Settings().document_dir

    def test_explicit_missing_file_is_an_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(tmp_path / "missing.yaml")

    def test_empty_file_gives_defaults(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("")
        assert load_settings(cfg).converter == Settings().converter


class TestReadConfigFile:
    def test_non_mapping_is_rejected(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="not a YAML mapping"):
            read_config_file(cfg)

    def test_malformed_yaml_is_rejected(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("key: [unclosed\n")
        with pytest.raises(ConfigurationError):
            read_config_file(cfg)


class TestValidateDirs:
    def test_all_present(self, settings):
        validate_dirs(settings)
        assert settings.missing_dirs() == []

    def test_reports_every_missing_dir(self, tmp_path):
        s = Settings(
            drawing_dir=tmp_path,
            image_dir=tmp_path / "no-images",
            document_dir=tmp_path / "no-docs",
        )
        with pytest.raises(ConfigurationError) as exc_info:
            validate_dirs(s)
        missing = exc_info.value.missing
        assert len(missing) == 2
        assert missing[0].startswith("image_dir=")
        assert missing[1].startswith("document_dir=")

    def test_file_is_not_a_directory(self, tmp_path):
        f = tmp_path / "file"
        f.write_text("")
        s = Settings(drawing_dir=f, image_dir=tmp_path, document_dir=tmp_path)
        assert s.missing_dirs() == [f"drawing_dir={f}"]


class TestTextValues:
    @pytest.mark.parametrize("body", [
        'begin_marker: ""\n',
        'end_marker: ""\n',
        "end_marker: '   '\n",
        "begin_marker: 42\n",
        "converter: null\n",
        'converter: ""\n',
        "converter: [a, b]\n",
        "filename_prefix: 7\n",
    ])
    def test_rejects_empty_or_non_string(self, tmp_path, body):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(body)
        with pytest.raises(ConfigurationError, match="must be"):
            load_settings(cfg)

    def test_empty_prefix_is_allowed(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text('filename_prefix: ""\n')
        assert load_settings(cfg).filename_prefix == ""

    def test_custom_markers_are_kept(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("begin_marker: '%% begin'\nend_marker: '%% end'\n")
        s = load_settings(cfg)
        assert (s.begin_marker, s.end_marker) == ("%% begin", "%% end")
