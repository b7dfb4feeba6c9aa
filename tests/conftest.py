# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Union

import httpx
import pytest

from happy_hours.config import Settings
from happy_hours.models import Venue, slugify

CannedPage = Union[str, int, type]


def make_venue(
    name: str,
    *,
    website: str | None = None,
    neighborhood: str = "LoDo",
    address: str = "1 Test St, Denver, CO 80202",
) -> Venue:
    return Venue(
        id=slugify(name),
        name=name,
        address=address,
        neighborhood=neighborhood,
        website=website,
        scraped_at="2026-01-01T00:00:00+00:00",
    )


def page_transport(pages: dict[str, CannedPage]) -> httpx.MockTransport:
    """Serve canned responses keyed by absolute URL.

    A string is returned as an HTML page, an int as a bare status code and an
    httpx exception class is raised. Unknown URLs get a 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        canned = pages.get(str(request.url))
        if canned is None:
            return httpx.Response(404, request=request)
        if isinstance(canned, type) and issubclass(canned, httpx.HTTPError):
            raise canned("simulated failure", request=request)
        if isinstance(canned, int):
            return httpx.Response(canned, request=request)
        return httpx.Response(
            200,
            text=canned,
            headers={"content-type": "text/html; charset=utf-8"},
            request=request,
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path / "data", respect_robots=False)
