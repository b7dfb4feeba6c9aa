"""Single-attempt HTTP page fetching for venue websites."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import httpx

from .robots import RobotsCache

logger = logging.getLogger(__name__)

ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
TEXTUAL_CONTENT = ("text", "html", "xml")
ROBOTS_REFUSAL = "disallowed_by_robots"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(slots=True)
class FetchResult:
    """One page fetch. ``error`` is set whenever the page is unusable."""

    url: str
    final_url: str | None = None
    status_code: int | None = None
    html: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, url: str, error: str, *, status_code: int | None = None) -> "FetchResult":
        return cls(url=url, status_code=status_code, error=error)


class AsyncCrawler:
    """Fetches venue pages one request at a time with a fixed timeout.

    Nothing is retried: a timeout, a transport error, an HTTP status of 400
    or above and a robots.txt refusal all come back as a failed
    ``FetchResult`` instead of raising.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        page_timeout: float = 15.0,
        respect_robots: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_agent = user_agent
        self._client = httpx.AsyncClient(
            headers={
                "User-Agent": user_agent,
                "Accept": ACCEPT_HTML,
                "Accept-Language": "en-US,en;q=0.9",
            },
            timeout=httpx.Timeout(page_timeout),
            http2=True,
            follow_redirects=True,
            transport=transport,
        )
        self._robots = RobotsCache(self._client, request_timeout=page_timeout) if respect_robots else None

    async def __aenter__(self) -> "AsyncCrawler":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, url: str) -> FetchResult:
        url = clean_url(url)

        if self._robots and not await self._robots.allows(url, self._user_agent):
            logger.debug("robots.txt forbids %s", url)
            return FetchResult.failed(url, ROBOTS_REFUSAL)

        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as exc:
            logger.debug("Timed out fetching %s", url)
            return FetchResult.failed(url, f"timeout: {exc}" if str(exc) else "timeout")
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("Request error for %s: %s", url, exc)
            return FetchResult.failed(url, str(exc) or type(exc).__name__)

        if response.status_code >= 400:
            return FetchResult.failed(
                url, f"HTTP {response.status_code}", status_code=response.status_code
            )

        return FetchResult(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            html=_decode_page(response),
        )


def _decode_page(response: httpx.Response) -> str | None:
    content_type = (response.headers.get("content-type") or "").lower()
    if content_type and not any(token in content_type for token in TEXTUAL_CONTENT):
        return None
    try:
        return response.text
    except UnicodeDecodeError:
        logger.debug("Undecodable body at %s", response.url)
        return None


def clean_url(url: str) -> str:
    """Drop control characters and escape spaces in a scraped URL."""

    return _CONTROL_CHARS.sub("", url or "").strip().replace(" ", "%20")
