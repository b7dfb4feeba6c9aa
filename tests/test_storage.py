# tests/test_storage.py
import json

import pytest

from conftest import make_venue
from happy_hours.storage import (
    load_happy_hours,
    load_venues,
    read_raw,
    write_raw,
    write_venues,
)


def test_venues_survive_a_write_and_load(tmp_path):
    path = tmp_path / "venues.json"
    venues = [make_venue("Señor Bear", neighborhood="LoHi", website="https://senorbear.example")]

    write_venues(path, venues)

    assert "Señor Bear" in path.read_text(encoding="utf-8")
    assert load_venues(path) == venues


def test_load_venues_fills_missing_ids(tmp_path):
    path = tmp_path / "venues.json"
    path.write_text(json.dumps([{"name": "Terminal Bar", "neighborhood": "LoDo"}]), encoding="utf-8")

    (venue,) = load_venues(path)

    assert venue.id == "terminal-bar"
    assert venue.website is None


@pytest.mark.parametrize("content", ["not json", '{"LoDo": []}'])
def test_load_venues_rejects_bad_files(tmp_path, content):
    path = tmp_path / "venues.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(SystemExit):
        load_venues(path)


def test_read_raw_of_missing_capture_is_empty(tmp_path):
    assert read_raw(tmp_path / "raw", "nobody") == ""

    write_raw(tmp_path / "raw", "somebody", "Venue: Somebody\n")
    assert read_raw(tmp_path / "raw", "somebody") == "Venue: Somebody\n"


def test_load_happy_hours_requires_a_list(tmp_path):
    path = tmp_path / "happy_hours.json"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError):
        load_happy_hours(path)
