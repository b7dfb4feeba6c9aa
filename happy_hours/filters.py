"""Filtering of extracted happy hour records, as offered by the venue browser."""

from __future__ import annotations

from typing import Iterable

ALL = "All"


def matches(
    record: dict,
    *,
    neighborhood: str = ALL,
    day: str = ALL,
    search: str = "",
) -> bool:
    if neighborhood != ALL and record.get("neighborhood") != neighborhood:
        return False

    if day != ALL:
        happy_hour = record.get("happy_hour") or {}
        days = happy_hour.get("days")
        # "unknown" days never match a specific weekday.
        if not isinstance(days, list) or day not in days:
            return False

    query = search.strip().lower()
    if query and query not in str(record.get("name") or "").lower():
        return False

    return True


def filter_venues(
    records: Iterable[dict],
    *,
    neighborhood: str = ALL,
    day: str = ALL,
    search: str = "",
) -> list[dict]:
    """Records matching all three filters, in their original order."""

    return [
        record
        for record in records
        if matches(record, neighborhood=neighborhood, day=day, search=search)
    ]


def neighborhoods(records: Iterable[dict]) -> list[str]:
    return sorted({str(record.get("neighborhood")) for record in records if record.get("neighborhood")})
