"""Stage 2: crawl each venue's website and persist one raw text capture per venue."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

import httpx

from .config import Settings
from .crawler import AsyncCrawler
from .links import MAX_SUBPAGES, select_subpages, visible_text
from .logs import configure_logging
from .models import RawCapture, Venue
from .storage import load_venues, write_raw

logger = logging.getLogger(__name__)

NO_WEBSITE_MARKER = "No website available"
CRAWL_FAILED_MARKER = "Unable to crawl"

NO_WEBSITE_BODY = f"{NO_WEBSITE_MARKER} for crawling.\n"
CRAWL_FAILED_BODY = f"{CRAWL_FAILED_MARKER} website. No raw text available.\n"
HOMEPAGE_LABEL = "HOMEPAGE"


def capture_header(venue: Venue) -> str:
    return (
        f"Venue: {venue.name}\n"
        f"Address: {venue.address}\n"
        f"Neighborhood: {venue.neighborhood}\n"
        f"Website: {venue.website or 'none'}\n\n"
    )


def section(label: str, body: str) -> str:
    return f"=== {label} ===\n{body}\n\n"


def no_website_capture(venue: Venue) -> RawCapture:
    return RawCapture(venue_id=venue.id, text=capture_header(venue) + NO_WEBSITE_BODY)


def failed_capture(venue: Venue, reason: str | None = None) -> RawCapture:
    body = CRAWL_FAILED_BODY
    if reason:
        body += f"Failed to fetch homepage: {reason}\n"
    return RawCapture(venue_id=venue.id, text=capture_header(venue) + body)


async def crawl_venue(
    venue: Venue,
    crawler: AsyncCrawler,
    *,
    max_subpages: int = MAX_SUBPAGES,
) -> RawCapture:
    """Fetch a venue's homepage plus its keyword-matched subpages."""

    if not venue.website:
        logger.info("Skipping %s (no website)", venue.name)
        return no_website_capture(venue)

    logger.info("Fetching homepage: %s", venue.website)
    homepage = await crawler.fetch(venue.website)
    if not homepage.ok:
        logger.warning("Error fetching %s: %s", venue.name, homepage.error)
        return failed_capture(venue, homepage.error)

    html = homepage.html or ""
    page_url = homepage.final_url or venue.website
    parts = [capture_header(venue), section(HOMEPAGE_LABEL, visible_text(html))]

    subpages = select_subpages(html, page_url, venue.website, limit=max_subpages)
    logger.info("Found %d relevant subpages for %s", len(subpages), venue.name)

    for url in subpages:
        logger.debug("Fetching subpage %s", url)
        result = await crawler.fetch(url)
        if result.ok:
            parts.append(section(url, visible_text(result.html or "")))
        else:
            logger.debug("Failed to fetch subpage %s: %s", url, result.error)
            parts.append(section(url, f"Failed to fetch: {result.error}"))

    return RawCapture(venue_id=venue.id, text="".join(parts))


async def crawl_venues(
    venues: Sequence[Venue],
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RawCapture]:
    """Crawl *venues* one at a time, writing each capture as soon as it exists.

    Every venue ends up with exactly one capture: failures inside a venue's
    crawl become a failure sentinel for that venue, and if the fetcher
    cannot be used at all the remaining venues all get the sentinel.
    """

    captures: dict[str, RawCapture] = {}

    def _store(capture: RawCapture) -> None:
        captures[capture.venue_id] = capture
        path = write_raw(settings.raw_dir, capture.venue_id, capture.text)
        logger.info("Saved %s (%d chars)", path, len(capture.text))

    try:
        async with AsyncCrawler(
            user_agent=settings.user_agent,
            page_timeout=settings.page_timeout,
            respect_robots=settings.respect_robots,
            transport=transport,
        ) as crawler:
            for venue in venues:
                if venue.id in captures:
                    continue
                logger.info("Crawling: %s", venue.name)
                try:
                    capture = await crawl_venue(venue, crawler, max_subpages=settings.max_subpages)
                except Exception as exc:
                    logger.exception("Crawl failed for %s", venue.name)
                    capture = failed_capture(venue, str(exc) or exc.__class__.__name__)
                _store(capture)
    except Exception as exc:
        logger.error("Crawler unavailable (%s); writing placeholder captures", exc)

    for venue in venues:
        if venue.id not in captures:
            _store(failed_capture(venue))

    return [captures[venue.id] for venue in venues]


def main(argv: Sequence[str] | None = None) -> None:
    """Crawl every venue in venues.json into raw/<id>.txt."""

    args = _parse_args(argv)
    configure_logging(args.log_level)
    settings = Settings.from_env().with_data_dir(args.data_dir)

    venues = load_venues(settings.venues_file)
    captures = asyncio.run(crawl_venues(venues, settings))
    logging.info("Generated %d raw text files in %s", len(captures), settings.raw_dir)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("--data-dir", default=None, help="Directory holding pipeline artifacts")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g. INFO, DEBUG)")
    return parser.parse_args(argv)


if __name__ == "__main__":
    main()
