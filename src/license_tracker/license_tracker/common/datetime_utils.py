from __future__ import annotations

from datetime import date, datetime, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current UTC time (naive, as stored in MySQL DATETIME columns).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_until(target: date, today: date) -> int:
    return (target - today).days


def is_within_days(target: date, today: date, days: int) -> bool:
    """True when target falls in [today, today + days]."""
    return 0 <= days_until(target, today) <= int(days)


def is_expired(target: date, today: date) -> bool:
    return days_until(target, today) < 0
