"""Tests for the layered settings loader."""

import pytest

from locdict.configuration import get_settings
from locdict.errors import ConfigurationError


def test_defaults_without_any_source(tmp_path):
    settings = get_settings(app_dir=tmp_path)
    assert settings.LOCDICT_COMMENT_PREFIX == "# "
    assert settings.LOCDICT_STRICT_PLACEHOLDERS is False
    assert settings.LOCDICT_LOG_LEVEL == "WARNING"
    assert settings.LOCDICT_LOG_FILE is None


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("LOCDICT_STRICT_PLACEHOLDERS", "true")
    monkeypatch.setenv("LOCDICT_LOG_LEVEL", "debug")
    settings = get_settings(app_dir=tmp_path)
    assert settings.LOCDICT_STRICT_PLACEHOLDERS is True
    assert settings.LOCDICT_LOG_LEVEL == "DEBUG"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("LOCDICT_COMMENT_PREFIX=;;\n", encoding="utf-8")
    assert get_settings(app_dir=tmp_path).LOCDICT_COMMENT_PREFIX == ";;"


def test_invalid_log_level(tmp_path, monkeypatch):
    monkeypatch.setenv("LOCDICT_LOG_LEVEL", "chatty")
    with pytest.raises(ConfigurationError):
        get_settings(app_dir=tmp_path)


def test_empty_comment_prefix_is_rejected(tmp_path):
    (tmp_path / ".env").write_text("LOCDICT_COMMENT_PREFIX=''\n", encoding="utf-8")
    with pytest.raises(ConfigurationError) as excinfo:
        get_settings(app_dir=tmp_path)
    assert "LOCDICT_COMMENT_PREFIX" in str(excinfo.value)
