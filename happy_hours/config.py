"""Environment-driven settings for the happy hour pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

DEFAULT_DATA_DIR = "data"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_PAGE_TIMEOUT = 15.0
DEFAULT_MAX_SUBPAGES = 5
DEFAULT_MAX_SCROLLS = 12


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True, slots=True)
class Settings:
    data_dir: Path = Path(DEFAULT_DATA_DIR)
    user_agent: str = DEFAULT_USER_AGENT
    page_timeout: float = DEFAULT_PAGE_TIMEOUT
    max_subpages: int = DEFAULT_MAX_SUBPAGES
    max_scrolls: int = DEFAULT_MAX_SCROLLS
    respect_robots: bool = True
    fallback_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        fallback = os.getenv("HAPPY_HOURS_FALLBACK_FILE")
        return cls(
            data_dir=Path(os.getenv("HAPPY_HOURS_DATA_DIR") or DEFAULT_DATA_DIR),
            user_agent=os.getenv("HAPPY_HOURS_USER_AGENT") or DEFAULT_USER_AGENT,
            page_timeout=_env_float("HAPPY_HOURS_PAGE_TIMEOUT", DEFAULT_PAGE_TIMEOUT),
            max_subpages=max(0, _env_int("HAPPY_HOURS_MAX_SUBPAGES", DEFAULT_MAX_SUBPAGES)),
            max_scrolls=max(0, _env_int("HAPPY_HOURS_MAX_SCROLLS", DEFAULT_MAX_SCROLLS)),
            respect_robots=_env_bool("HAPPY_HOURS_RESPECT_ROBOTS", True),
            fallback_file=Path(fallback) if fallback else None,
        )

    def with_data_dir(self, data_dir: str | Path | None) -> "Settings":
        if not data_dir:
            return self
        return replace(self, data_dir=Path(data_dir))

    @property
    def venues_file(self) -> Path:
        return self.data_dir / "venues.json"

    @property
    def raw_dir(self) -> Path:
        return self.data_dir / "raw"

    @property
    def happy_hours_file(self) -> Path:
        return self.data_dir / "happy_hours.json"
