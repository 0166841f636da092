import json
import logging
from pathlib import Path

import pytest

from typee.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_POLL_INTERVAL_SEC,
    DEFAULT_WORD_COUNT,
    Settings,
    config_path,
    load_settings,
)


def write_config(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path: Path):
    assert load_settings(tmp_path / "missing.json") == Settings()


def test_values_are_read(tmp_path: Path):
    path = write_config(
        tmp_path / "typee.json",
        {"word_count": 12, "poll_interval_sec": 0.5, "log_level": "debug"},
    )
    settings = load_settings(path)
    assert settings.word_count == 12
    assert settings.poll_interval_sec == 0.5
    assert settings.log_level == "DEBUG"


def test_malformed_file_falls_back(tmp_path: Path, caplog):
    path = tmp_path / "typee.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="typee.config"):
        settings = load_settings(path)
    assert settings == Settings()
    assert "ignoring unreadable config" in caplog.text


def test_non_object_file_falls_back(tmp_path: Path):
    path = write_config(tmp_path / "typee.json", [1, 2, 3])
    assert load_settings(path) == Settings()


@pytest.mark.parametrize("poll", ["soon", 0, -2.5, float("nan"), float("inf")])
def test_invalid_values_fall_back_individually(tmp_path: Path, poll):
    path = write_config(
        tmp_path / "typee.json",
        {"word_count": -3, "poll_interval_sec": poll, "log_level": "LOUD"},
    )
    settings = load_settings(path)
    assert settings.word_count == DEFAULT_WORD_COUNT
    assert settings.poll_interval_sec == DEFAULT_POLL_INTERVAL_SEC
    assert settings.log_level == DEFAULT_LOG_LEVEL


def test_boolean_word_count_is_rejected(tmp_path: Path):
    path = write_config(tmp_path / "typee.json", {"word_count": True})
    assert load_settings(path).word_count == DEFAULT_WORD_COUNT


def test_env_var_selects_config(tmp_path: Path, monkeypatch):
    path = write_config(tmp_path / "env.json", {"word_count": 2})
    monkeypatch.setenv("TYPEE_CONFIG", str(path))
    assert config_path() == path
    assert load_settings().word_count == 2


def test_explicit_path_beats_env_var(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TYPEE_CONFIG", str(tmp_path / "env.json"))
    explicit = tmp_path / "explicit.json"
    assert config_path(explicit) == explicit
