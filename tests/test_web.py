# tests/test_web.py
import json

import pytest
from fastapi.testclient import TestClient

from web.app import MISSING_DATA_MESSAGE, app

WORKWEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
UNKNOWN_HAPPY_HOUR = {
    "days": "unknown",
    "start_time": "unknown",
    "end_time": "unknown",
    "food_deals": "unknown",
    "drink_deals": "unknown",
}
RECORDS = [
    {
        "id": "falling-rock-tap-house",
        "name": "Falling Rock Tap House",
        "address": "1919 Blake St, Denver, CO 80202",
        "neighborhood": "LoDo",
        "website": "https://fallingrocktaphouse.com",
        "happy_hour": {
            "days": WORKWEEK,
            "start_time": "3:00 PM",
            "end_time": "6:00 PM",
            "food_deals": ["$5 wings"],
            "drink_deals": ["$3 drafts"],
        },
    },
    {
        "id": "linger",
        "name": "Linger",
        "address": "2030 W 30th Ave, Denver, CO 80211",
        "neighborhood": "LoHi",
        "website": "https://lingerdenver.com",
        "happy_hour": {
            "days": ["Saturday", "Sunday"],
            "start_time": "unknown",
            "end_time": "unknown",
            "food_deals": "unknown",
            "drink_deals": ["Cocktails for $8"],
        },
    },
    {
        "id": "retro-room",
        "name": "Retro Room",
        "address": "1801 Wynkoop St, Denver, CO 80202",
        "neighborhood": "LoDo",
        "website": None,
        "happy_hour": UNKNOWN_HAPPY_HOUR,
    },
]


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    directory = tmp_path / "data"
    monkeypatch.setenv("HAPPY_HOURS_DATA_DIR", str(directory))
    return directory


@pytest.fixture
def client(data_dir):
    data_dir.mkdir(parents=True)
    (data_dir / "happy_hours.json").write_text(json.dumps(RECORDS), encoding="utf-8")
    return TestClient(app)


def _ids(response):
    return [record["id"] for record in response.json()["results"]]


def test_lists_every_venue(client):
    response = client.get("/venues")

    assert response.status_code == 200
    assert response.json()["total"] == 3
    assert _ids(response) == ["falling-rock-tap-house", "linger", "retro-room"]


def test_filters_by_neighborhood(client):
    assert _ids(client.get("/venues", params={"neighborhood": "LoDo"})) == [
        "falling-rock-tap-house",
        "retro-room",
    ]


def test_day_filter_skips_unknown_days(client):
    assert _ids(client.get("/venues", params={"day": "Monday"})) == ["falling-rock-tap-house"]
    assert _ids(client.get("/venues", params={"day": "Sunday"})) == ["linger"]


def test_name_search_is_case_insensitive(client):
    assert _ids(client.get("/venues", params={"q": "  ROCK "})) == ["falling-rock-tap-house"]


def test_filters_combine(client):
    response = client.get("/venues", params={"neighborhood": "LoHi", "day": "Monday"})

    assert response.json() == {"total": 0, "results": []}


def test_get_single_venue(client):
    response = client.get("/venues/linger")

    assert response.status_code == 200
    assert response.json()["happy_hour"]["drink_deals"] == ["Cocktails for $8"]


def test_unknown_venue_is_404(client):
    response = client.get("/venues/nowhere")

    assert response.status_code == 404
    assert response.json()["detail"] == "unknown_venue"


def test_stats_counts_extracted_and_unknown(client):
    assert client.get("/stats").json() == {"total": 3, "extracted": 2, "unknown": 1}


def test_index_renders_filtered_cards(client):
    response = client.get("/", params={"neighborhood": "LoDo"})

    assert response.status_code == 200
    assert "Showing 2 of 3 venues" in response.text
    assert "Falling Rock Tap House" in response.text
    assert "3:00 PM - 6:00 PM" in response.text
    assert "Linger</a>" not in response.text


def test_missing_data_is_503(data_dir):
    client = TestClient(app)

    response = client.get("/venues")
    assert response.status_code == 503
    assert response.json()["detail"] == MISSING_DATA_MESSAGE

    page = client.get("/")
    assert page.status_code == 503
    assert "happy-hours-extract" in page.text
