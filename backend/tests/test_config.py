"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from disk_history.core.config import Settings


def test_yaml_sections_and_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "storage:\n  db_path: ~/custom.db\nupdates:\n  window_hours: 48\nlogging:\n  level: debug\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DSKH_MAX_URL_LENGTH", "100")
    monkeypatch.delenv("DSKH_DB_PATH", raising=False)

    settings = Settings.from_yaml(config)

    assert settings.db_path == Path("~/custom.db").expanduser()
    assert settings.updates_window_hours == 48
    assert settings.log_level == "DEBUG"
    assert settings.max_url_length == 100


def test_env_beats_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("imports:\n  max_url_length: 10\n", encoding="utf-8")
    monkeypatch.setenv("DSKH_CONFIG", str(config))
    monkeypatch.setenv("DSKH_MAX_URL_LENGTH", "20")
    assert Settings.from_yaml().max_url_length == 20


def test_unknown_log_level_is_rejected() -> None:
    assert Settings(log_level="warning").log_level == "WARNING"
    with pytest.raises(pydantic.ValidationError):
        Settings(log_level="loud")
