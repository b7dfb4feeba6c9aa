# tests/test_config.py
from pathlib import Path

import pytest

from happy_hours.config import DEFAULT_USER_AGENT, Settings

ENV_VARS = (
    "HAPPY_HOURS_DATA_DIR",
    "HAPPY_HOURS_USER_AGENT",
    "HAPPY_HOURS_PAGE_TIMEOUT",
    "HAPPY_HOURS_MAX_SUBPAGES",
    "HAPPY_HOURS_MAX_SCROLLS",
    "HAPPY_HOURS_RESPECT_ROBOTS",
    "HAPPY_HOURS_FALLBACK_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()

    assert settings.data_dir == Path("data")
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.page_timeout == 15.0
    assert settings.max_subpages == 5
    assert settings.max_scrolls == 12
    assert settings.respect_robots is True
    assert settings.fallback_file is None
    assert settings.venues_file == Path("data/venues.json")
    assert settings.raw_dir == Path("data/raw")
    assert settings.happy_hours_file == Path("data/happy_hours.json")


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("HAPPY_HOURS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HAPPY_HOURS_USER_AGENT", "happy-hours-test")
    monkeypatch.setenv("HAPPY_HOURS_PAGE_TIMEOUT", "2.5")
    monkeypatch.setenv("HAPPY_HOURS_MAX_SUBPAGES", "2")
    monkeypatch.setenv("HAPPY_HOURS_RESPECT_ROBOTS", "false")
    monkeypatch.setenv("HAPPY_HOURS_FALLBACK_FILE", str(tmp_path / "venues.json"))

    settings = Settings.from_env()

    assert settings.data_dir == tmp_path
    assert settings.user_agent == "happy-hours-test"
    assert settings.page_timeout == 2.5
    assert settings.max_subpages == 2
    assert settings.respect_robots is False
    assert settings.fallback_file == tmp_path / "venues.json"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("HAPPY_HOURS_PAGE_TIMEOUT", "soon")
    monkeypatch.setenv("HAPPY_HOURS_MAX_SUBPAGES", "-3")
    monkeypatch.setenv("HAPPY_HOURS_MAX_SCROLLS", "lots")

    settings = Settings.from_env()

    assert settings.page_timeout == 15.0
    assert settings.max_subpages == 0
    assert settings.max_scrolls == 12


def test_with_data_dir():
    settings = Settings()

    assert settings.with_data_dir(None) is settings
    assert settings.with_data_dir("out").raw_dir == Path("out/raw")
