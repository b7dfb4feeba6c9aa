"""Stage 1: discover happy hour venues from Google Maps, with a curated fallback."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from collections import Counter
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional, Protocol, Sequence
from urllib.parse import quote

from bs4 import BeautifulSoup
from playwright.async_api import Browser, async_playwright

from .config import DEFAULT_MAX_SCROLLS, DEFAULT_USER_AGENT, Settings
from .logs import configure_logging
from .models import Venue, VenueCandidate, slugify, utc_now
from .storage import write_venues

logger = logging.getLogger(__name__)

MAPS_SEARCH_URL = "https://www.google.com/maps/search/{query}"
FEED_SELECTOR = 'div[role="feed"]'
END_OF_LIST_SELECTOR = "span.HlvSq"

SCRAPE_TIMEOUT_MS = 30_000
SCROLL_PAUSE_MS = 2_000
MIN_LIVE_VENUES = 10

FALLBACK_FILE = Path(__file__).with_name("data") / "fallback_venues.json"


@dataclass(frozen=True, slots=True)
class Search:
    query: str
    neighborhood: str


SEARCHES: tuple[Search, ...] = (
    Search("happy hour bars LoDo Denver", "LoDo"),
    Search("happy hour bars LoHi Denver", "LoHi"),
)

LiveScraper = Callable[[Sequence[Search]], Awaitable[list[VenueCandidate]]]


class DiscoveryError(RuntimeError):
    """Raised when no usable venue source is available."""


class CardParser(Protocol):
    """Turns a rendered search results page into venue candidates."""

    def parse(self, html: str, neighborhood: str) -> list[VenueCandidate]:
        ...


class GoogleMapsCardParser:
    """Best-effort extraction of result cards from the Google Maps feed.

    A card without a name is dropped. Address and website are optional and
    come back as ``""`` and ``None`` when the card does not show them.
    """

    card_selector = 'div[role="feed"] > div > div[jsaction]'
    name_selector = "div.fontHeadlineSmall"
    address_hint_selector = "span[jstcache]"
    address_hints = ("Denver", "CO")

    def parse(self, html: str, neighborhood: str) -> list[VenueCandidate]:
        soup = BeautifulSoup(html, "lxml")
        candidates: list[VenueCandidate] = []
        for card in soup.select(self.card_selector):
            name_el = card.select_one(self.name_selector)
            name = name_el.get_text(strip=True) if name_el else ""
            if not name:
                continue
            candidates.append(
                VenueCandidate(
                    name=name,
                    address=self._address(card),
                    neighborhood=neighborhood,
                    website=self._website(card),
                )
            )
        return candidates

    def _address(self, card) -> str:
        labelled = card.select_one("a[aria-label]")
        if labelled is not None:
            parts = str(labelled.get("aria-label") or "").split("\n")
            if len(parts) > 1:
                address = ", ".join(part.strip() for part in parts[1:] if part.strip())
                if address:
                    return address

        address = ""
        for span in card.select(self.address_hint_selector):
            text = span.get_text(strip=True)
            if len(text) > 10 and any(hint in text for hint in self.address_hints):
                address = text
        return address

    def _website(self, card) -> Optional[str]:
        website = None
        for anchor in card.select("a[href]"):
            href = str(anchor.get("href") or "")
            if href.startswith("http") and "google.com" not in href:
                website = href
        return website


async def scrape_google_maps(
    searches: Sequence[Search],
    *,
    parser: CardParser | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
    max_scrolls: int = DEFAULT_MAX_SCROLLS,
    scroll_pause_ms: int = SCROLL_PAUSE_MS,
    timeout_ms: int = SCRAPE_TIMEOUT_MS,
) -> list[VenueCandidate]:
    """Run each search in headless Chromium and parse the result cards.

    Launch failures propagate. A failure inside one search is logged and
    the remaining searches still run.
    """

    parser = parser or GoogleMapsCardParser()
    candidates: list[VenueCandidate] = []

    logger.info("Launching Chromium in headless mode ...")
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=True,
            args=["--no-sandbox", "--disable-dev-shm-usage"],
        )
        try:
            for search in searches:
                logger.info('Searching Google Maps for: "%s"', search.query)
                try:
                    html = await _render_search(
                        browser,
                        search,
                        user_agent=user_agent,
                        max_scrolls=max_scrolls,
                        scroll_pause_ms=scroll_pause_ms,
                        timeout_ms=timeout_ms,
                    )
                    found = parser.parse(html, search.neighborhood)
                except Exception as exc:
                    logger.warning('Search "%s" failed: %s', search.query, exc)
                    continue

                logger.info('Found %d venues for "%s"', len(found), search.query)
                candidates.extend(found)
        finally:
            await browser.close()

    return candidates


async def _render_search(
    browser: Browser,
    search: Search,
    *,
    user_agent: str,
    max_scrolls: int,
    scroll_pause_ms: int,
    timeout_ms: int,
) -> str:
    context = await browser.new_context(
        user_agent=user_agent,
        viewport={"width": 1280, "height": 900},
        locale="en-US",
    )
    try:
        page = await context.new_page()
        url = MAPS_SEARCH_URL.format(query=quote(search.query))
        await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        await page.wait_for_selector(FEED_SELECTOR, timeout=timeout_ms)

        # The feed lazily loads more cards as it is scrolled.
        for _ in range(max_scrolls):
            await page.eval_on_selector(FEED_SELECTOR, "feed => { feed.scrollTop = feed.scrollHeight; }")
            await page.wait_for_timeout(scroll_pause_ms)
            if await page.query_selector(END_OF_LIST_SELECTOR):
                logger.info('Reached end of results for "%s"', search.query)
                break

        return await page.content()
    finally:
        await context.close()


def load_fallback_venues(
    path: Path | None = None,
    *,
    scraped_at: str | None = None,
) -> list[Venue]:
    """Load the curated venue list, keyed by neighborhood in the data file."""

    source = path or FALLBACK_FILE
    logger.info("Using curated venue dataset from %s", source)
    payload = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise DiscoveryError(f"{source} must map neighborhoods to venue lists")

    timestamp = scraped_at or utc_now()
    venues: list[Venue] = []
    for neighborhood, entries in payload.items():
        for entry in entries or []:
            candidate = VenueCandidate(
                name=str(entry.get("name") or "").strip(),
                address=str(entry.get("address") or ""),
                neighborhood=neighborhood,
                website=entry.get("website") or None,
            )
            if slugify(candidate.name):
                venues.append(Venue.from_candidate(candidate, scraped_at=timestamp))

    if not venues:
        raise DiscoveryError(f"{source} does not list any venues")
    return venues


def deduplicate_venues(venues: Iterable[Venue]) -> list[Venue]:
    """Drop venues whose identifier was already seen; the first one wins."""

    seen: set[str] = set()
    unique: list[Venue] = []
    for venue in venues:
        if venue.id in seen:
            logger.debug("Dropping duplicate venue %s (%s)", venue.name, venue.id)
            continue
        seen.add(venue.id)
        unique.append(venue)
    return unique


async def discover_venues(
    searches: Sequence[Search] = SEARCHES,
    *,
    scrape: LiveScraper | None = None,
    fallback_file: Path | None = None,
    min_live_venues: int = MIN_LIVE_VENUES,
) -> list[Venue]:
    """Return a non-empty, de-duplicated venue list from the live or curated source."""

    scrape = scrape or scrape_google_maps
    scraped_at = utc_now()
    venues: list[Venue] | None = None

    try:
        candidates = await scrape(searches)
    except Exception as exc:
        logger.error("Google Maps scraping failed: %s", exc)
    else:
        if len(candidates) >= min_live_venues:
            logger.info("Successfully scraped %d venues from Google Maps", len(candidates))
            venues = [
                Venue.from_candidate(candidate, scraped_at=scraped_at)
                for candidate in candidates
                if slugify(candidate.name)
            ]
        else:
            logger.warning(
                "Only found %d venues -- not enough (need %d)", len(candidates), min_live_venues
            )

    if venues is None:
        logger.warning("Activating fallback dataset")
        venues = load_fallback_venues(fallback_file, scraped_at=scraped_at)

    return deduplicate_venues(venues)


def main(argv: Sequence[str] | None = None) -> None:
    """Discover LoDo and LoHi happy hour venues into venues.json."""

    args = _parse_args(argv)
    configure_logging(args.log_level)
    settings = Settings.from_env().with_data_dir(args.data_dir)

    scrape = partial(
        scrape_google_maps,
        user_agent=settings.user_agent,
        max_scrolls=settings.max_scrolls,
    )
    venues = asyncio.run(
        discover_venues(SEARCHES, scrape=scrape, fallback_file=settings.fallback_file)
    )
    write_venues(settings.venues_file, venues)

    counts = Counter(venue.neighborhood for venue in venues)
    for neighborhood, count in sorted(counts.items()):
        logging.info("%s venues: %d", neighborhood, count)
    logging.info("Total: %d", len(venues))


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("--data-dir", default=None, help="Directory holding pipeline artifacts")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g. INFO, DEBUG)")
    return parser.parse_args(argv)


if __name__ == "__main__":
    main()
