"""robots.txt policy for venue website crawling."""

from __future__ import annotations

import logging
from urllib import robotparser
from urllib.parse import urlsplit

import httpx

logger = logging.getLogger(__name__)

# Rules applied to an origin whose robots.txt answers 401/403.
DISALLOW_ALL = ("User-agent: *", "Disallow: /")


def robots_url_for(url: str) -> str | None:
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}/robots.txt"


class RobotsCache:
    """Remembers the parsed robots.txt of every origin visited during a run.

    Origins without usable rules (missing file, server error, network
    failure) are cached as ``None`` and allow everything. A 401/403 answer
    locks the whole origin.
    """

    def __init__(self, client: httpx.AsyncClient, *, request_timeout: float = 10.0) -> None:
        self._client = client
        self._request_timeout = request_timeout
        self._rules: dict[str, robotparser.RobotFileParser | None] = {}

    async def allows(self, url: str, user_agent: str) -> bool:
        robots_url = robots_url_for(url)
        if robots_url is None:
            return True

        if robots_url not in self._rules:
            self._rules[robots_url] = await self._load(robots_url)

        rules = self._rules[robots_url]
        return rules is None or rules.can_fetch(user_agent, url)

    async def _load(self, robots_url: str) -> robotparser.RobotFileParser | None:
        try:
            response = await self._client.get(robots_url, timeout=self._request_timeout)
        except httpx.HTTPError as exc:
            logger.debug("Could not read %s (%s); allowing crawl", robots_url, exc)
            return None

        if response.status_code in (401, 403):
            logger.info("%s answered %s; treating site as off limits", robots_url, response.status_code)
            lines: list[str] | tuple[str, ...] = DISALLOW_ALL
        elif response.is_error:
            logger.debug("No robots rules at %s (status %s)", robots_url, response.status_code)
            return None
        else:
            lines = response.text.splitlines()

        rules = robotparser.RobotFileParser(robots_url)
        rules.parse(lines)
        return rules
