"""Business-timezone clock helpers.

All cutoff and fulfillment-day arithmetic happens on the bakery's wall clock
(America/Boise), never on the server's local zone or on UTC. Instants are kept
as timezone-aware datetimes carrying the business ``ZoneInfo``; the tz
database resolves the UTC offset, including daylight saving transitions.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

BUSINESS_TIMEZONE: str = "America/Boise"


class TimezoneUnavailableError(RuntimeError):
    """Raised when the business timezone cannot be resolved."""


@lru_cache(maxsize=8)
def business_tz(name: str = BUSINESS_TIMEZONE) -> ZoneInfo:
    """Return the ZoneInfo for the business timezone."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise TimezoneUnavailableError(f"Timezone {name!r} is not available") from exc


def to_business_time(value: datetime, tz_name: str = BUSINESS_TIMEZONE) -> datetime:
    """Express an instant in business wall-clock fields.

    Naive datetimes are treated as business wall-clock already and only get the
    zone attached.
    """
    tz = business_tz(tz_name)
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def current_business_time(tz_name: str = BUSINESS_TIMEZONE) -> datetime:
    """Return now in the business timezone."""
    return datetime.now(timezone.utc).astimezone(business_tz(tz_name))


def business_today(tz_name: str = BUSINESS_TIMEZONE) -> date:
    return current_business_time(tz_name).date()


def business_iso_date(value: datetime, tz_name: str = BUSINESS_TIMEZONE) -> str:
    """Return YYYY-MM-DD of the instant's business calendar date."""
    return to_business_time(value, tz_name).date().isoformat()


def parse_business_date(value: str) -> date:
    """Parse a stored YYYY-MM-DD business date string."""
    return date.fromisoformat(value.strip())
