"""Reading and writing the pipeline's on-disk artifacts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from .models import Venue, VenueHappyHour

logger = logging.getLogger(__name__)


def load_venues(path: Path) -> list[Venue]:
    """Load the discovery output, exiting with guidance when it is missing."""

    if not path.exists():
        raise SystemExit(
            f"{path} not found. Run the discovery stage (happy-hours-discover) first."
        )
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise SystemExit(f"{path} must contain a JSON array of venues")

    venues = [Venue.from_dict(item) for item in payload if isinstance(item, dict)]
    logger.info("Loaded %d venues from %s", len(venues), path)
    return venues


def write_venues(path: Path, venues: Sequence[Venue]) -> None:
    _write_json(path, [venue.to_dict() for venue in venues])
    logger.info("Wrote %d venues to %s", len(venues), path)


def raw_path(raw_dir: Path, venue_id: str) -> Path:
    return raw_dir / f"{venue_id}.txt"


def write_raw(raw_dir: Path, venue_id: str, text: str) -> Path:
    raw_dir.mkdir(parents=True, exist_ok=True)
    path = raw_path(raw_dir, venue_id)
    path.write_text(text, encoding="utf-8")
    return path


def read_raw(raw_dir: Path, venue_id: str) -> str:
    """Return the raw capture for *venue_id*, or an empty string when none exists."""

    path = raw_path(raw_dir, venue_id)
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def write_happy_hours(path: Path, results: Sequence[VenueHappyHour]) -> None:
    _write_json(path, [result.to_dict() for result in results])
    logger.info("Wrote %d happy hour records to %s", len(results), path)


def load_happy_hours(path: Path) -> list[dict]:
    """Load the extractor output as plain dicts (the shape the frontend consumes)."""

    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a JSON array")
    return [item for item in payload if isinstance(item, dict)]


def _write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.write("\n")
