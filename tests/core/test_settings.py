"""Tests for docspine.core.settings."""

import json

import pytest
from pydantic import ValidationError

from docspine.core.settings import DocSpineSettings, configure_from_settings
from docspine.core.logging import get_logger


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No DOCSPINE_* variables or .env file leak in from the host."""
    for key in [
        "DOCSPINE_LOG_LEVEL",
        "DOCSPINE_LOG_JSON",
        "DOCSPINE_SERVICE_NAME",
        "DOCSPINE_HISTORY_MAX_ENTRIES",
    ]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_defaults(self):
        settings = DocSpineSettings()
        assert settings.log_level == "INFO"
        assert settings.log_json is None
        assert settings.service_name == "doc-spine"
        assert settings.history_max_entries is None


class TestEnvironment:
    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("DOCSPINE_HISTORY_MAX_ENTRIES", "25")
        monkeypatch.setenv("DOCSPINE_LOG_LEVEL", "debug")
        monkeypatch.setenv("DOCSPINE_LOG_JSON", "true")

        settings = DocSpineSettings()

        assert settings.history_max_entries == 25
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True

    def test_reads_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text("DOCSPINE_SERVICE_NAME=review-queue\n")
        assert DocSpineSettings().service_name == "review-queue"

    def test_unprefixed_ignored(self, monkeypatch):
        monkeypatch.setenv("HISTORY_MAX_ENTRIES", "3")
        assert DocSpineSettings().history_max_entries is None


class TestValidation:
    def test_history_cap_must_be_positive(self):
        with pytest.raises(ValidationError):
            DocSpineSettings(history_max_entries=0)

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            DocSpineSettings(log_level="chatty")


class TestConfigureFromSettings:
    def test_applies_logging(self, capsys):
        settings = DocSpineSettings(log_level="INFO", log_json=True, service_name="editor")
        configure_from_settings(settings)

        get_logger("docspine.test").info("ready")

        payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert payload["service.name"] == "editor"
        assert payload["event"] == "ready"
