"""Data models used across the Denver happy hour pipeline."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional, Union

UNKNOWN = "unknown"

WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# A field is either the extracted value or the literal "unknown" sentinel.
DayField = Union[list[str], str]
PhraseField = Union[list[str], str]


def slugify(name: str) -> str:
    """Turn a venue name into a URL-friendly identifier."""

    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def utc_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


@dataclass(slots=True)
class VenueCandidate:
    """A venue as read off a search result card, before identifiers are assigned."""

    name: str
    address: str
    neighborhood: str
    website: Optional[str]


@dataclass(frozen=True, slots=True)
class Venue:
    """A bar or restaurant tracked by the pipeline."""

    id: str
    name: str
    address: str
    neighborhood: str
    website: Optional[str]
    scraped_at: str

    @classmethod
    def from_candidate(cls, candidate: VenueCandidate, *, scraped_at: str) -> "Venue":
        return cls(
            id=slugify(candidate.name),
            name=candidate.name,
            address=candidate.address or "",
            neighborhood=candidate.neighborhood,
            website=candidate.website or None,
            scraped_at=scraped_at,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Venue":
        name = str(data.get("name") or "")
        return cls(
            id=str(data.get("id") or slugify(name)),
            name=name,
            address=str(data.get("address") or ""),
            neighborhood=str(data.get("neighborhood") or ""),
            website=data.get("website") or None,
            scraped_at=str(data.get("scraped_at") or ""),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(slots=True)
class RawCapture:
    """Unstructured text gathered for one venue."""

    venue_id: str
    text: str


@dataclass(slots=True)
class HappyHourRecord:
    """Happy hour attributes derived from a venue's raw capture."""

    days: DayField = UNKNOWN
    start_time: str = UNKNOWN
    end_time: str = UNKNOWN
    food_deals: PhraseField = UNKNOWN
    drink_deals: PhraseField = UNKNOWN

    @classmethod
    def unknown(cls) -> "HappyHourRecord":
        return cls()

    @property
    def has_days(self) -> bool:
        return isinstance(self.days, list)

    def to_dict(self) -> dict:
        return {
            "days": list(self.days) if isinstance(self.days, list) else self.days,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "food_deals": list(self.food_deals) if isinstance(self.food_deals, list) else self.food_deals,
            "drink_deals": list(self.drink_deals) if isinstance(self.drink_deals, list) else self.drink_deals,
        }


@dataclass(slots=True)
class VenueHappyHour:
    """Final per-venue output row consumed by the frontend."""

    venue: Venue
    happy_hour: HappyHourRecord = field(default_factory=HappyHourRecord.unknown)

    def to_dict(self) -> dict:
        return {
            "id": self.venue.id,
            "name": self.venue.name,
            "address": self.venue.address,
            "neighborhood": self.venue.neighborhood,
            "website": self.venue.website,
            "happy_hour": self.happy_hour.to_dict(),
        }
