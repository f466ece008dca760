"""Tests for exporter settings."""

import json

import pytest
from pydantic import ValidationError

from docker_exporter.core.config import ExporterSettings, load_config
from docker_exporter.core.constants import DEFAULT_LOG_CUSTOM_QUERY
from docker_exporter.core.schemas import NetworkMode

ENV_VARS = (
    "DOCKER_LOG_METRICS",
    "DOCKER_LOG_CUSTOM_METRICS",
    "DOCKER_LOG_CUSTOM_QUERY",
    "EXPORTER_PORT",
    "EXPORTER_MAX_WORKERS",
    "EXPORTER_NETWORK_MODE",
    "EXPORTER_TASK_TIMEOUT_SECONDS",
    "EXPORTER_REQUEST_TIMEOUT_SECONDS",
    "LOG_METRICS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestExporterSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = ExporterSettings()

        assert settings.log_metrics is False
        assert settings.log_custom_metrics is False
        assert settings.log_custom_query == DEFAULT_LOG_CUSTOM_QUERY
        assert settings.include_stopped is True
        assert settings.network_mode == NetworkMode.FIRST
        assert settings.port == 9333
        assert settings.log_pattern is None

    @pytest.mark.parametrize("value", ["true", "True"])
    def test_log_flags_from_env(self, monkeypatch, value):
        monkeypatch.setenv("DOCKER_LOG_METRICS", value)
        monkeypatch.setenv("DOCKER_LOG_CUSTOM_METRICS", value)
        settings = ExporterSettings()

        assert settings.log_metrics is True
        assert settings.log_custom_metrics is True
        assert settings.log_pattern.search('{"level":"error"}')

    def test_custom_query_from_env(self, monkeypatch):
        monkeypatch.setenv("DOCKER_LOG_CUSTOM_METRICS", "true")
        monkeypatch.setenv("DOCKER_LOG_CUSTOM_QUERY", "panic|fatal")
        settings = ExporterSettings()

        assert settings.log_pattern.search("kernel panic")

    def test_blank_query_uses_default(self, monkeypatch):
        monkeypatch.setenv("DOCKER_LOG_CUSTOM_QUERY", "")
        assert ExporterSettings().log_custom_query == DEFAULT_LOG_CUSTOM_QUERY

    def test_invalid_query_rejected(self, monkeypatch):
        monkeypatch.setenv("DOCKER_LOG_CUSTOM_QUERY", "(unclosed")
        with pytest.raises(ValidationError):
            ExporterSettings()

    def test_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("EXPORTER_PORT", "9400")
        monkeypatch.setenv("EXPORTER_MAX_WORKERS", "4")
        monkeypatch.setenv("EXPORTER_NETWORK_MODE", "sum")
        settings = ExporterSettings()

        assert settings.port == 9400
        assert settings.max_workers == 4
        assert settings.network_mode == NetworkMode.SUM

    def test_blank_log_flags_disable(self, monkeypatch):
        """Flags set to an empty string behave as if unset."""
        monkeypatch.setenv("DOCKER_LOG_METRICS", "")
        monkeypatch.setenv("DOCKER_LOG_CUSTOM_METRICS", "")
        settings = ExporterSettings()

        assert settings.log_metrics is False
        assert settings.log_custom_metrics is False

    def test_unprefixed_field_name_ignored(self, monkeypatch):
        monkeypatch.setenv("LOG_METRICS", "true")
        assert ExporterSettings().log_metrics is False

    def test_request_timeout_defaults_to_task_timeout(self):
        settings = ExporterSettings(task_timeout_seconds=2.5)
        assert settings.request_timeout_seconds == 2.5

    def test_request_timeout_within_task_timeout(self, monkeypatch):
        monkeypatch.setenv("EXPORTER_TASK_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("EXPORTER_REQUEST_TIMEOUT_SECONDS", "3")
        settings = ExporterSettings()

        assert settings.task_timeout_seconds == 5.0
        assert settings.request_timeout_seconds == 3.0

    def test_request_timeout_longer_than_task_rejected(self):
        with pytest.raises(ValidationError, match="must not exceed"):
            ExporterSettings(task_timeout_seconds=2.0, request_timeout_seconds=5)

    def test_bounds(self):
        with pytest.raises(ValidationError):
            ExporterSettings(max_workers=0)
        with pytest.raises(ValidationError):
            ExporterSettings(task_timeout_seconds=0)


class TestLoadConfig:
    """Tests for config file loading."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "exporter.yaml"
        path.write_text("log_metrics: true\nport: 9500\nnetwork_mode: sum\n")
        settings = load_config(path)

        assert settings.log_metrics is True
        assert settings.port == 9500
        assert settings.network_mode == NetworkMode.SUM

    def test_json(self, tmp_path):
        path = tmp_path / "exporter.json"
        path.write_text(json.dumps({"max_workers": 2}))
        assert load_config(path).max_workers == 2

    def test_file_overrides_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EXPORTER_PORT", "9400")
        path = tmp_path / "exporter.yaml"
        path.write_text("port: 9500\n")
        assert load_config(path).port == 9500

    def test_explicit_overrides(self, tmp_path):
        path = tmp_path / "exporter.yaml"
        path.write_text("port: 9500\n")
        settings = load_config(path, port=9600, host=None)

        assert settings.port == 9600
        assert settings.host == "0.0.0.0"

    def test_no_file(self):
        assert load_config().port == 9333

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "exporter.toml"
        path.write_text("port = 1\n")
        with pytest.raises(ValueError):
            load_config(path)
