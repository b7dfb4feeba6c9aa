"""Minimal FastAPI app for browsing the extracted happy hour data."""

from __future__ import annotations

import html
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse

from happy_hours.config import Settings
from happy_hours.filters import ALL, filter_venues, neighborhoods
from happy_hours.models import UNKNOWN, WEEKDAYS
from happy_hours.storage import load_happy_hours

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

app = FastAPI(title="Denver Happy Hours")

MISSING_DATA_MESSAGE = (
    "happy_hours.json not found. Run the extraction stage (happy-hours-extract) first."
)


def _load_records() -> list[dict]:
    path = Settings.from_env().happy_hours_file
    if not path.exists():
        logger.warning("Happy hour data missing at %s", path)
        raise HTTPException(status_code=503, detail=MISSING_DATA_MESSAGE)
    try:
        return load_happy_hours(path)
    except ValueError as exc:
        logger.error("Unreadable happy hour data at %s: %s", path, exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def _format_field(value: object) -> str:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value if value is not None else UNKNOWN)


def _render_card(record: dict) -> str:
    happy_hour = record.get("happy_hour") or {}
    name = html.escape(str(record.get("name") or ""))
    website = record.get("website")
    title = (
        f'<a href="{html.escape(str(website))}" rel="noopener">{name}</a>' if website else name
    )
    start = happy_hour.get("start_time", UNKNOWN)
    end = happy_hour.get("end_time", UNKNOWN)
    hours = f"{start} - {end}" if start != UNKNOWN else UNKNOWN
    return f"""
      <article class="venue">
        <h2>{title}</h2>
        <p class="meta">{html.escape(str(record.get("neighborhood") or ""))} &middot; {html.escape(str(record.get("address") or ""))}</p>
        <dl>
          <dt>Days</dt><dd>{html.escape(_format_field(happy_hour.get("days")))}</dd>
          <dt>Hours</dt><dd>{html.escape(hours)}</dd>
          <dt>Food</dt><dd>{html.escape(_format_field(happy_hour.get("food_deals")))}</dd>
          <dt>Drinks</dt><dd>{html.escape(_format_field(happy_hour.get("drink_deals")))}</dd>
        </dl>
      </article>"""


def _options(values: list[str], selected: str) -> str:
    return "\n".join(
        f'<option value="{html.escape(value)}"{" selected" if value == selected else ""}>{html.escape(value)}</option>'
        for value in [ALL, *values]
    )


@app.get("/", response_class=HTMLResponse)
def index(
    neighborhood: str = ALL,
    day: str = ALL,
    q: str = "",
) -> HTMLResponse:
    try:
        records = _load_records()
    except HTTPException as exc:
        return HTMLResponse(f"<p>{html.escape(str(exc.detail))}</p>", status_code=exc.status_code)

    shown = filter_venues(records, neighborhood=neighborhood, day=day, search=q)
    cards = "".join(_render_card(record) for record in shown) or "<p>No venues match these filters.</p>"
    return HTMLResponse(f"""
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Denver Happy Hours</title>
    <style>
      body {{
        font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
        margin: 2rem auto;
        max-width: 960px;
        line-height: 1.5;
      }}
      form {{ display: flex; gap: 0.75rem; flex-wrap: wrap; margin-bottom: 1.5rem; }}
      .venue {{ border: 1px solid #ddd; border-radius: 8px; padding: 0.75rem 1rem; margin-bottom: 1rem; }}
      .meta {{ color: #666; margin-top: 0; }}
      dt {{ font-weight: 600; }}
      dd {{ margin: 0 0 0.25rem 0; }}
    </style>
  </head>
  <body>
    <h1>Denver Happy Hours</h1>
    <form method="get" action="/">
      <select name="neighborhood">{_options(neighborhoods(records), neighborhood)}</select>
      <select name="day">{_options(list(WEEKDAYS), day)}</select>
      <input type="search" name="q" value="{html.escape(q)}" placeholder="Search venues" />
      <button type="submit">Filter</button>
    </form>
    <p>Showing {len(shown)} of {len(records)} venues</p>
    {cards}
  </body>
</html>
""")


@app.get("/venues")
def list_venues(
    neighborhood: str = ALL,
    day: str = ALL,
    q: Optional[str] = Query(default=None, description="Case-insensitive venue name search"),
):
    records = _load_records()
    results = filter_venues(records, neighborhood=neighborhood, day=day, search=q or "")
    return {"total": len(results), "results": results}


@app.get("/venues/{venue_id}")
def get_venue(venue_id: str):
    for record in _load_records():
        if record.get("id") == venue_id:
            return record
    raise HTTPException(status_code=404, detail="unknown_venue")


@app.get("/stats")
def stats():
    records = _load_records()
    extracted = sum(
        1 for record in records if isinstance((record.get("happy_hour") or {}).get("days"), list)
    )
    return {"total": len(records), "extracted": extracted, "unknown": len(records) - extracted}


@app.head("/stats")
def stats_head():
    return stats()
