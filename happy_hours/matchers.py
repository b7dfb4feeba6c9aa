"""Pattern matchers that recover happy hour attributes from raw page text.

Each field is resolved by an ordered tuple of independent matchers. Day
matchers either short-circuit with a complete answer or contribute days to
an accumulating set; time matchers return a (start, end) pair or ``None``
and the first hit wins; deal matchers are plain regex sets whose matches
are collected in discovery order.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, Sequence

from .models import UNKNOWN, WEEKDAYS

WORKWEEK: tuple[str, ...] = WEEKDAYS[:5]
WEEKEND: tuple[str, ...] = WEEKDAYS[5:]

# ---------------------------------------------------------------------------
# Days
# ---------------------------------------------------------------------------

_DAY_NAME = (
    r"(?:mon(?:days?)?|tue(?:s(?:days?)?)?|wed(?:nesdays?)?|thu(?:r(?:s(?:days?)?)?)?"
    r"|fri(?:days?)?|sat(?:urdays?)?|sun(?:days?)?)"
)
_RANGE_SEPARATOR = r"\s*(?:-|–|—|\bto\b|\bthru\b|\bthrough\b)\s*"

WHOLE_WEEK_PATTERN = re.compile(r"\bdaily\b|\bevery\s*day\b|\b7\s*days\b", re.IGNORECASE)
WORKWEEK_PATTERN = re.compile(r"\bweekdays?\b", re.IGNORECASE)
WEEKEND_PATTERN = re.compile(r"\bweekends?\b", re.IGNORECASE)
DAY_RANGE_PATTERN = re.compile(
    rf"\b({_DAY_NAME})\.?{_RANGE_SEPARATOR}({_DAY_NAME})\b\.?", re.IGNORECASE
)
DAY_MENTION_PATTERN = re.compile(rf"\b({_DAY_NAME})\b", re.IGNORECASE)

ShortCircuitDayMatcher = Callable[[str], Optional[list[str]]]
AccumulatingDayMatcher = Callable[[str], Iterable[str]]


def normalize_day(token: str) -> str | None:
    """Map a day token (full or abbreviated) to its canonical weekday name."""

    prefix = token.strip().lower()[:3]
    if len(prefix) < 3:
        return None
    for day in WEEKDAYS:
        if day.lower().startswith(prefix):
            return day
    return None


def expand_day_range(start: str, end: str) -> list[str]:
    """Inclusive run of days from *start* to *end*, wrapping past Sunday."""

    start_index = WEEKDAYS.index(start)
    end_index = WEEKDAYS.index(end)
    span = (end_index - start_index) % len(WEEKDAYS)
    return [WEEKDAYS[(start_index + offset) % len(WEEKDAYS)] for offset in range(span + 1)]


def match_whole_week(text: str) -> list[str] | None:
    if WHOLE_WEEK_PATTERN.search(text):
        return list(WEEKDAYS)
    return None


def match_workweek(text: str) -> list[str] | None:
    if WORKWEEK_PATTERN.search(text):
        return list(WORKWEEK)
    return None


def match_weekend(text: str) -> list[str]:
    return list(WEEKEND) if WEEKEND_PATTERN.search(text) else []


def match_day_ranges(text: str) -> list[str]:
    days: list[str] = []
    for match in DAY_RANGE_PATTERN.finditer(text):
        start = normalize_day(match.group(1))
        end = normalize_day(match.group(2))
        if start and end:
            days.extend(expand_day_range(start, end))
    return days


def match_day_mentions(text: str) -> list[str]:
    days: list[str] = []
    for match in DAY_MENTION_PATTERN.finditer(text):
        day = normalize_day(match.group(1))
        if day:
            days.append(day)
    return days


SHORT_CIRCUIT_DAY_MATCHERS: tuple[ShortCircuitDayMatcher, ...] = (
    match_whole_week,
    match_workweek,
)
ACCUMULATING_DAY_MATCHERS: tuple[AccumulatingDayMatcher, ...] = (
    match_weekend,
    match_day_ranges,
    match_day_mentions,
)


def extract_days(text: str) -> list[str] | str:
    """Return the weekdays a happy hour applies to, or ``"unknown"``."""

    for matcher in SHORT_CIRCUIT_DAY_MATCHERS:
        days = matcher(text)
        if days:
            return days

    found: set[str] = set()
    for matcher in ACCUMULATING_DAY_MATCHERS:
        found.update(matcher(text))

    ordered = [day for day in WEEKDAYS if day in found]
    return ordered or UNKNOWN


# ---------------------------------------------------------------------------
# Times
# ---------------------------------------------------------------------------

_CLOCK = r"\d{1,2}(?::\d{2})?(?:\s*[ap]\.?\s?m\b\.?)?"
TIME_RANGE_PATTERN = re.compile(
    rf"(?<![\d:$])({_CLOCK})\s*(?:-|–|—|\bto\b|\buntil\b|\btill\b)\s*({_CLOCK})(?![\d:])",
    re.IGNORECASE,
)
HAPPY_HOUR_PATTERN = re.compile(r"happy\s*hours?", re.IGNORECASE)
# A sentence ends at ., ! or ? followed by whitespace, except the dot closing "a.m."/"p.m.".
SENTENCE_END_PATTERN = re.compile(r"(?:(?<![ap]\.m)\.|[!?])(?=\s|$)|^===", re.IGNORECASE | re.MULTILINE)

_CLOCK_PARTS = re.compile(
    r"^(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?:(?P<meridiem>[ap])\.?\s?m\.?)?$",
    re.IGNORECASE,
)

TimeRange = tuple[str, str]
TimeMatcher = Callable[[str], Optional[TimeRange]]


def _parse_clock(value: str) -> tuple[int, int, str | None] | None:
    match = _CLOCK_PARTS.match(value.strip())
    if not match:
        return None
    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    if not 1 <= hour <= 12 or minute > 59:
        return None
    meridiem = match.group("meridiem")
    return hour, minute, meridiem.upper() + "M" if meridiem else None


def _flip(meridiem: str) -> str:
    return "AM" if meridiem == "PM" else "PM"


def normalize_time_range(start: str, end: str) -> TimeRange | None:
    """Normalize both ends of a range to ``H:MM AM|PM``.

    At least one end must carry an AM/PM marker. The unmarked end takes the
    marker of the other end, flipped when the clock order shows the range
    crossing noon or midnight ("11-2pm" starts at 11:00 AM).
    """

    parsed_start = _parse_clock(start)
    parsed_end = _parse_clock(end)
    if parsed_start is None or parsed_end is None:
        return None

    start_hour, start_minute, start_meridiem = parsed_start
    end_hour, end_minute, end_meridiem = parsed_end
    if start_meridiem is None and end_meridiem is None:
        return None

    start_clock = (start_hour % 12, start_minute)
    end_clock = (end_hour % 12, end_minute)
    if start_meridiem is None:
        assert end_meridiem is not None
        start_meridiem = end_meridiem if start_clock <= end_clock else _flip(end_meridiem)
    if end_meridiem is None:
        end_meridiem = start_meridiem if end_clock >= start_clock else _flip(start_meridiem)

    return (
        f"{start_hour}:{start_minute:02d} {start_meridiem}",
        f"{end_hour}:{end_minute:02d} {end_meridiem}",
    )


def _first_range(text: str) -> TimeRange | None:
    for match in TIME_RANGE_PATTERN.finditer(text):
        normalized = normalize_time_range(match.group(1), match.group(2))
        if normalized:
            return normalized
    return None


def match_happy_hour_time(text: str) -> TimeRange | None:
    """Time range in the same sentence as a "happy hour" phrase."""

    for mention in HAPPY_HOUR_PATTERN.finditer(text):
        remainder = text[mention.end():]
        boundary = SENTENCE_END_PATTERN.search(remainder)
        clause = remainder[: boundary.end()] if boundary else remainder
        found = _first_range(clause)
        if found:
            return found
    return None


def match_any_time(text: str) -> TimeRange | None:
    """First time range anywhere in the text."""

    return _first_range(text)


TIME_MATCHERS: tuple[TimeMatcher, ...] = (
    match_happy_hour_time,
    match_any_time,
)


def extract_times(text: str) -> TimeRange:
    """Return (start, end); both are ``"unknown"`` when no range is found."""

    for matcher in TIME_MATCHERS:
        found = matcher(text)
        if found:
            return found
    return UNKNOWN, UNKNOWN


# ---------------------------------------------------------------------------
# Deals
# ---------------------------------------------------------------------------

_PRICE = r"\$\d+(?:\.\d{2})?"

FOOD_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        rf"{_PRICE}\s+(?:off\s+)?(?:appetizer|app|wing|taco|nacho|slider|fries|pizza|burger|bite|snack|plate|food)s?\b",
        r"\bhalf[\s-]?(?:off|price)\s+(?:appetizer|app|food|menu|bite|snack)s?\b",
        rf"\b(?:appetizer|app|food|bite|snack)s?\s+(?:for\s+)?{_PRICE}",
        r"\b(?:free|complimentary)\s+(?:appetizer|food|snack|bite|pizza)s?\b",
        r"\b(?:food|kitchen)\s+specials?\b",
    )
)

DRINK_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        rf"{_PRICE}\s+(?:off\s+)?(?:beer|draft|pint|well|cocktail|wine|margarita|marg|shot|drink|spirit|pour|rail|domestic|craft|import|ipa|lager|ale)s?\b",
        r"\bhalf[\s-]?(?:off|price)\s+(?:beer|draft|pint|well|cocktail|wine|drink|bottle|glass)(?:e?s)?\b",
        rf"\b(?:beer|draft|pint|well|cocktail|wine|margarita|drink|pour)s?\s+(?:for\s+)?{_PRICE}",
        rf"{_PRICE}\s+(?:domestic|craft|import|house|select|featured)\s+(?:beer|draft|pint|wine|cocktail)s?\b",
        r"\b(?:buy\s+one|bogo)\s+(?:get\s+one\s+)?(?:free|half)\b",
        r"\b(?:drink|cocktail|beer|wine)\s+specials?\b",
    )
)


def extract_deals(text: str, patterns: Sequence[re.Pattern[str]]) -> list[str] | str:
    """Distinct matched phrases in discovery order, or ``"unknown"``."""

    deals: dict[str, None] = {}
    for pattern in patterns:
        for match in pattern.finditer(text):
            phrase = match.group(0).strip()
            if phrase:
                deals.setdefault(phrase, None)
    return list(deals) or UNKNOWN
