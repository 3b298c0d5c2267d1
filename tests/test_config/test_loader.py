"""Tests for configuration loading and validation."""

import re
from pathlib import Path

import pytest
from pydantic import ValidationError

from watch_exporter.config.loader import ConfigLoader, ConfigurationError
from watch_exporter.config.models import ExporterConfig, WatchSpec

# Fixtures imported from conftest.py: config_file


VALID_CONFIG = """
listen_port: 9912
file_watchers:
  - name: uploads
    path: /srv/uploads
    recursive: true
    file_regex: '\\.csv$'
    labels:
      team: data
  - name: logs
    path: /var/log/app
"""


class TestLoadFromFile:
    def test_valid_config(self, config_file):
        config = ConfigLoader.load_from_file(config_file(VALID_CONFIG))

        assert config.listen_port == 9912
        assert config.listen_address == "0.0.0.0"
        assert config.scrape_timeout_seconds is None
        assert [w.name for w in config.file_watchers] == ["uploads", "logs"]

        uploads = config.file_watchers[0]
        assert uploads.path == Path("/srv/uploads")
        assert uploads.recursive is True
        assert isinstance(uploads.file_regex, re.Pattern)
        assert uploads.file_regex.pattern == r"\.csv$"
        assert uploads.labels == {"team": "data"}

    def test_defaults(self, config_file):
        config = ConfigLoader.load_from_file(config_file(VALID_CONFIG))

        logs = config.file_watchers[1]
        assert logs.recursive is False
        assert logs.file_regex is None
        assert logs.labels == {}

    def test_env_substitution(self, config_file, monkeypatch):
        monkeypatch.setenv("WATCH_ROOT", "/data/incoming")
        monkeypatch.setenv("WATCH_PORT", "9100")

        config = ConfigLoader.load_from_file(config_file("""
listen_port: ${WATCH_PORT}
file_watchers:
  - name: incoming
    path: ${WATCH_ROOT}
"""))

        assert config.listen_port == 9100
        assert config.file_watchers[0].path == Path("/data/incoming")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader.load_from_file(str(tmp_path / "nope.yaml"))

    def test_directory_instead_of_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigLoader.load_from_file(str(tmp_path))

    def test_invalid_yaml(self, config_file):
        with pytest.raises(ConfigurationError, match="Failed to read"):
            ConfigLoader.load_from_file(config_file("listen_port: [9912\n"))

    def test_empty_file(self, config_file):
        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigLoader.load_from_file(config_file(""))

    def test_invalid_regex_fails_at_load(self, config_file):
        with pytest.raises(ConfigurationError, match="invalid file pattern"):
            ConfigLoader.load_from_file(config_file("""
listen_port: 9912
file_watchers:
  - name: broken
    path: /tmp
    file_regex: '([a-z'
"""))

    def test_duplicate_names(self, config_file):
        with pytest.raises(ConfigurationError, match="duplicate watch names: twice"):
            ConfigLoader.load_from_file(config_file("""
listen_port: 9912
file_watchers:
  - name: twice
    path: /a
  - name: twice
    path: /b
"""))

    def test_missing_listen_port(self, config_file):
        with pytest.raises(ConfigurationError, match="listen_port"):
            ConfigLoader.load_from_file(config_file("file_watchers: []\n"))

    def test_unknown_key_rejected(self, config_file):
        with pytest.raises(ConfigurationError, match="file_regexp"):
            ConfigLoader.load_from_file(config_file("""
listen_port: 9912
file_watchers:
  - name: typo
    path: /a
    file_regexp: 'x'
"""))


class TestWatchSpec:
    def test_empty_regex_matches_everything(self):
        spec = WatchSpec(name="w", path="/tmp", file_regex="")

        assert spec.file_regex is None
        assert spec.matches("/tmp/anything.bin")

    def test_matches_uses_search(self):
        spec = WatchSpec(name="w", path="/tmp", file_regex=r"reports/")

        assert spec.matches("/tmp/reports/q1.pdf")
        assert not spec.matches("/tmp/other/q1.pdf")

    def test_precompiled_pattern_accepted(self):
        pattern = re.compile(r"\.log$")

        spec = WatchSpec(name="w", path="/tmp", file_regex=pattern)

        assert spec.file_regex is pattern

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            WatchSpec(name="", path="/tmp")

    @pytest.mark.parametrize("path", ["", "   "])
    def test_blank_path_rejected(self, path):
        with pytest.raises(ValidationError, match="path must not be empty"):
            WatchSpec(name="w", path=path)

    @pytest.mark.parametrize("key", ["name", "__meta", "bad-key", "1st"])
    def test_invalid_label_names(self, key):
        with pytest.raises(ValidationError):
            WatchSpec(name="w", path="/tmp", labels={key: "v"})

    def test_spec_is_immutable(self):
        spec = WatchSpec(name="w", path="/tmp")

        with pytest.raises(ValidationError):
            spec.recursive = True


class TestExporterConfig:
    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_range(self, port):
        with pytest.raises(ValidationError):
            ExporterConfig(listen_port=port)

    def test_scrape_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ExporterConfig(listen_port=9912, scrape_timeout_seconds=0)

    def test_label_names_union(self):
        config = ExporterConfig(listen_port=9912, file_watchers=[
            WatchSpec(name="a", path="/a", labels={"team": "data", "env": "prod"}),
            WatchSpec(name="b", path="/b", labels={"team": "ops", "tier": "gold"}),
            WatchSpec(name="c", path="/c"),
        ])

        assert config.label_names() == ["env", "team", "tier"]

    def test_load_from_dict_rejects_non_mapping(self):
        with pytest.raises(ConfigurationError):
            ConfigLoader.load_from_dict(["listen_port", 9912])


class TestEnvSubstitution:
    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("TEAM", "core")

        result = ConfigLoader._substitute_env_vars({"a": ["${TEAM}", {"b": "x-${TEAM}"}], "n": 3})

        assert result == {"a": ["core", {"b": "x-core"}], "n": 3}

    def test_unset_variable_becomes_empty(self, monkeypatch):
        monkeypatch.delenv("WATCH_EXPORTER_UNSET", raising=False)

        assert ConfigLoader._substitute_env_vars("${WATCH_EXPORTER_UNSET}") == ""

    def test_unset_variable_in_path_fails_load(self, monkeypatch):
        monkeypatch.delenv("WATCH_EXPORTER_UNSET_DIR", raising=False)

        with pytest.raises(ConfigurationError, match="path must not be empty"):
            ConfigLoader.load_from_dict({
                "listen_port": 9912,
                "file_watchers": [{"name": "backups", "path": "${WATCH_EXPORTER_UNSET_DIR}"}]
            })
