# tests/test_matchers.py
import pytest

from happy_hours.matchers import (
    DRINK_PATTERNS,
    FOOD_PATTERNS,
    expand_day_range,
    extract_days,
    extract_deals,
    extract_times,
    normalize_day,
    normalize_time_range,
)
from happy_hours.models import UNKNOWN, WEEKDAYS

WORKWEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


@pytest.mark.parametrize(
    "token, expected",
    [
        ("Monday", "Monday"),
        ("mon", "Monday"),
        ("TUES", "Tuesday"),
        ("thurs", "Thursday"),
        ("Sun", "Sunday"),
        ("xyz", None),
        ("mo", None),
    ],
)
def test_normalize_day_uses_first_three_letters(token, expected):
    assert normalize_day(token) == expected


def test_expand_day_range_wraps_past_sunday():
    assert expand_day_range("Friday", "Monday") == ["Friday", "Saturday", "Sunday", "Monday"]
    assert expand_day_range("Wednesday", "Wednesday") == ["Wednesday"]


@pytest.mark.parametrize(
    "text",
    [
        "Happy Hour Monday-Friday",
        "Mon thru Fri",
        "monday to friday",
        "Mon – Fri",
    ],
)
def test_day_ranges_expand_to_workweek(text):
    assert extract_days(text) == WORKWEEK


def test_whole_week_phrases_short_circuit():
    assert extract_days("Happy hour daily, except Tuesday") == list(WEEKDAYS)
    assert extract_days("Open every day") == list(WEEKDAYS)
    assert extract_days("Specials 7 days a week") == list(WEEKDAYS)


def test_weekday_phrase_short_circuits_to_workweek():
    assert extract_days("Weekdays 3-6pm, plus Saturday brunch") == WORKWEEK


def test_weekend_seeds_saturday_and_sunday():
    assert extract_days("Weekends and Monday nights") == ["Monday", "Saturday", "Sunday"]


def test_wrapping_range_is_returned_in_canonical_order():
    assert extract_days("Sat - Mon") == ["Monday", "Saturday", "Sunday"]


def test_individual_mentions_accumulate_without_duplicates():
    assert extract_days("Tue, Thu and again Tuesday") == ["Tuesday", "Thursday"]


def test_day_words_inside_other_words_are_ignored():
    assert extract_days("Sunset patio, wedding packages, Monument Ave") == UNKNOWN


def test_no_days_is_unknown():
    assert extract_days("Great beer, friendly staff") == UNKNOWN


def test_happy_hour_time_range_is_normalized():
    assert extract_times("Happy Hour 3-6pm") == ("3:00 PM", "6:00 PM")


def test_dotted_meridiem_and_minutes():
    text = "Join us for happy hour from 4:30 p.m. to 6:30 p.m. every day"
    assert extract_times(text) == ("4:30 PM", "6:30 PM")


def test_happy_hour_clause_wins_over_earlier_range():
    text = "Open 11am-10pm. Happy hour 3-6pm."
    assert extract_times(text) == ("3:00 PM", "6:00 PM")


def test_falls_back_to_first_generic_range():
    text = "Happy hour specials available. Kitchen open 11am-2pm and 5pm-9pm"
    assert extract_times(text) == ("11:00 AM", "2:00 PM")


def test_range_needs_a_meridiem():
    assert extract_times("Call 303-555-1234 or visit 1919 Blake St") == (UNKNOWN, UNKNOWN)
    assert extract_times("Happy hour 3-6") == (UNKNOWN, UNKNOWN)


def test_prices_are_not_times():
    assert extract_times("$5-7 drafts all night") == (UNKNOWN, UNKNOWN)


@pytest.mark.parametrize(
    "start, end, expected",
    [
        ("5pm", "7pm", ("5:00 PM", "7:00 PM")),
        ("3", "6pm", ("3:00 PM", "6:00 PM")),
        ("11", "2pm", ("11:00 AM", "2:00 PM")),
        ("10", "12am", ("10:00 PM", "12:00 AM")),
        ("9pm", "1", ("9:00 PM", "1:00 AM")),
        ("4:30PM", "6:30", ("4:30 PM", "6:30 PM")),
    ],
)
def test_normalize_time_range(start, end, expected):
    assert normalize_time_range(start, end) == expected


def test_normalize_time_range_rejects_invalid_clock_values():
    assert normalize_time_range("13", "6pm") is None
    assert normalize_time_range("3:75pm", "6pm") is None
    assert normalize_time_range("3", "6") is None


def test_food_and_drink_deals_are_collected_separately():
    text = "$5 wings and $3 drafts, half off appetizers, BOGO free wells"

    assert extract_deals(text, FOOD_PATTERNS) == ["$5 wings", "half off appetizers"]
    assert extract_deals(text, DRINK_PATTERNS) == ["$3 drafts", "BOGO free"]


def test_deals_are_distinct_in_discovery_order():
    text = "$4 tacos. Cocktails for $8. $4 tacos again! Wine special tonight."

    assert extract_deals(text, FOOD_PATTERNS) == ["$4 tacos"]
    assert extract_deals(text, DRINK_PATTERNS) == ["Cocktails for $8", "Wine special"]


def test_no_deals_is_unknown():
    assert extract_deals("Live music Friday", FOOD_PATTERNS) == UNKNOWN
    assert extract_deals("Live music Friday", DRINK_PATTERNS) == UNKNOWN


def test_plural_day_names_count_as_mentions():
    assert extract_days("Taco Tuesdays and Wine Wednesdays 4-6pm") == ["Tuesday", "Wednesday"]
    assert extract_days("Mondays through Thursdays") == ["Monday", "Tuesday", "Wednesday", "Thursday"]


def test_plural_abbreviations_are_not_days():
    assert extract_days("Thus the patio stays open late") == UNKNOWN
