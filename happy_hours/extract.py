"""Stage 3: derive happy hour records from the persisted raw captures."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from .config import Settings
from .crawl import CRAWL_FAILED_MARKER, NO_WEBSITE_MARKER
from .logs import configure_logging
from .matchers import (
    DRINK_PATTERNS,
    FOOD_PATTERNS,
    extract_days,
    extract_deals,
    extract_times,
)
from .models import HappyHourRecord, Venue, VenueHappyHour
from .storage import load_venues, read_raw, write_happy_hours

logger = logging.getLogger(__name__)

SENTINEL_MARKERS: tuple[str, ...] = (NO_WEBSITE_MARKER, CRAWL_FAILED_MARKER)


def is_sentinel(raw_text: str) -> bool:
    """True when the capture carries no page text worth matching."""

    return not raw_text or any(marker in raw_text for marker in SENTINEL_MARKERS)


def extract_happy_hour(raw_text: str) -> HappyHourRecord:
    """Run every field matcher over *raw_text*. Pure and deterministic."""

    if is_sentinel(raw_text):
        return HappyHourRecord.unknown()

    start_time, end_time = extract_times(raw_text)
    return HappyHourRecord(
        days=extract_days(raw_text),
        start_time=start_time,
        end_time=end_time,
        food_deals=extract_deals(raw_text, FOOD_PATTERNS),
        drink_deals=extract_deals(raw_text, DRINK_PATTERNS),
    )


def extract_all(venues: Sequence[Venue], raw_dir: Path) -> list[VenueHappyHour]:
    """One record per venue, in input order; a missing capture yields all unknowns."""

    results: list[VenueHappyHour] = []
    for venue in venues:
        raw_text = read_raw(raw_dir, venue.id)
        if raw_text:
            logger.info("Processing %s (%d chars of raw text)", venue.name, len(raw_text))
        else:
            logger.info("No raw file for %s - marking as unknown", venue.name)

        record = extract_happy_hour(raw_text)
        results.append(VenueHappyHour(venue=venue, happy_hour=record))

        if record.has_days:
            logger.info(
                "  Days: %s | Time: %s - %s",
                ", ".join(record.days),
                record.start_time,
                record.end_time,
            )
        else:
            logger.debug("  Status: unknown")
    return results


def main(argv: Sequence[str] | None = None) -> None:
    """Extract happy hour details for every venue in venues.json."""

    args = _parse_args(argv)
    configure_logging(args.log_level)
    settings = Settings.from_env().with_data_dir(args.data_dir)

    venues = load_venues(settings.venues_file)
    results = extract_all(venues, settings.raw_dir)
    write_happy_hours(settings.happy_hours_file, results)

    extracted = sum(1 for result in results if result.happy_hour.has_days)
    logging.info(
        "Extracted: %d, Unknown: %d, Total: %d",
        extracted,
        len(results) - extracted,
        len(results),
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("--data-dir", default=None, help="Directory holding pipeline artifacts")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g. INFO, DEBUG)")
    return parser.parse_args(argv)


if __name__ == "__main__":
    main()
