"""Page text and subpage link helpers for the happy hour crawler."""

from __future__ import annotations

import logging
import re
from typing import Iterable
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# A homepage link is followed when its URL or anchor text contains one of these.
SUBPAGE_KEYWORDS: tuple[str, ...] = (
    "happy",
    "special",
    "menu",
    "drink",
    "hour",
    "deal",
    "promo",
    "offer",
    "food",
)

MAX_SUBPAGES = 5

# Elements whose text never reaches the raw capture.
HIDDEN_TAGS: tuple[str, ...] = (
    "script",
    "style",
    "noscript",
    "template",
    "svg",
    "iframe",
    "nav",
)

_SKIPPED_SCHEMES = ("mailto:", "tel:", "javascript:", "sms:", "data:")


def visible_text(html: str) -> str:
    """Return the human-visible text of *html*, one text block per line."""

    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")
    for element in soup.find_all(list(HIDDEN_TAGS)):
        element.decompose()

    root = soup.body or soup
    lines = (_normalize_whitespace(chunk) for chunk in root.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)


def extract_keyword_links(
    html: str,
    base_url: str,
    *,
    keywords: Iterable[str] = SUBPAGE_KEYWORDS,
) -> list[str]:
    """Return absolute, canonical URLs of links whose href or text mentions a keyword."""

    if not html:
        return []

    soup = BeautifulSoup(html, "lxml")
    lowered_keywords = tuple(k.lower() for k in keywords)
    found: list[str] = []
    seen: set[str] = set()

    for anchor in soup.find_all("a", href=True):
        href = (anchor.get("href") or "").strip()
        if not href:
            continue

        if href.lower().startswith(_SKIPPED_SCHEMES):
            continue

        try:
            absolute_url = canonicalize_url(urljoin(base_url, href))
        except ValueError:
            logger.debug("Skipping malformed link %r on %s", href, base_url)
            continue
        if not absolute_url or absolute_url in seen:
            continue

        text_lower = anchor.get_text(" ", strip=True).lower()
        url_lower = absolute_url.lower()
        if not any(keyword in url_lower or keyword in text_lower for keyword in lowered_keywords):
            continue

        seen.add(absolute_url)
        found.append(absolute_url)

    return found


def is_same_site(url: str, site_url: str) -> bool:
    """True when *url* is on the host of *site_url* or one of its subdomains."""

    try:
        host = (urlparse(url).hostname or "").lower()
        site_host = (urlparse(site_url).hostname or "").lower()
    except ValueError:
        return False
    if not host or not site_host:
        return False
    return host == site_host or host.endswith("." + site_host)


def select_subpages(
    html: str,
    page_url: str,
    site_url: str,
    *,
    limit: int = MAX_SUBPAGES,
) -> list[str]:
    """Pick the subpages worth crawling from a fetched homepage.

    Links are resolved against *page_url* (the homepage after redirects) but
    must stay on the host of *site_url* (the venue's listed website).
    """

    homepage_urls = {canonicalize_url(page_url), canonicalize_url(site_url)}
    selected: list[str] = []
    for url in extract_keyword_links(html, page_url):
        if len(selected) >= limit:
            break
        if url in homepage_urls:
            continue
        if not is_same_site(url, site_url):
            continue
        selected.append(url)
    return selected


def canonicalize_url(url: str) -> str:
    """Absolute http(s) URL without fragment or trailing slash; "" when unusable."""

    try:
        parsed = urlparse(url)
    except ValueError:
        return ""
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        return ""
    if not parsed.path:
        parsed = parsed._replace(path="/")
    cleaned = parsed._replace(fragment="").geturl()
    if parsed.path and parsed.path != "/":
        cleaned = cleaned.rstrip("/")
    return cleaned


def _normalize_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()
