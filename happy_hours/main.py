"""CLI entry point that runs discovery, crawling and extraction in order."""

from __future__ import annotations

import argparse
import asyncio
import logging
from functools import partial
from typing import Sequence

from .config import Settings
from .crawl import crawl_venues
from .discovery import SEARCHES, discover_venues, scrape_google_maps
from .extract import extract_all
from .logs import configure_logging
from .storage import write_happy_hours, write_venues


def main(argv: Sequence[str] | None = None) -> None:
    """Execute the full pipeline."""

    args = _parse_args(argv)
    configure_logging(args.log_level)
    settings = Settings.from_env().with_data_dir(args.data_dir)

    logging.info("=== Stage 1: venue discovery ===")
    scrape = partial(
        scrape_google_maps,
        user_agent=settings.user_agent,
        max_scrolls=settings.max_scrolls,
    )
    venues = asyncio.run(
        discover_venues(SEARCHES, scrape=scrape, fallback_file=settings.fallback_file)
    )
    write_venues(settings.venues_file, venues)

    logging.info("=== Stage 2: crawling %d venues ===", len(venues))
    asyncio.run(crawl_venues(venues, settings))

    logging.info("=== Stage 3: extraction ===")
    results = extract_all(venues, settings.raw_dir)
    write_happy_hours(settings.happy_hours_file, results)

    extracted = sum(1 for result in results if result.happy_hour.has_days)
    logging.info(
        "Wrote %d venues to %s (%d with happy hour days, %d unknown)",
        len(results),
        settings.happy_hours_file,
        extracted,
        len(results) - extracted,
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding venues.json, raw/ and happy_hours.json",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. INFO, DEBUG)",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    main()
