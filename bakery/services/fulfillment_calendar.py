"""Fulfillment window calculator: weekly cutoff, lead time and slot dates.

Days of week follow the storefront convention 0=Sunday .. 6=Saturday and a
week starts on Sunday. Every comparison runs on business wall-clock time.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from bakery.utils.time import BUSINESS_TIMEZONE, business_tz, to_business_time

logger = logging.getLogger(__name__)

DAYS_IN_WEEK: int = 7
DAY_NAMES: list[str] = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class InvalidInputError(ValueError):
    """Raised for out-of-range days, malformed HH:MM values or negative lead times."""


def validate_day_of_week(value: Any, field_name: str = "day_of_week") -> int:
    """Return value when it is an integer day of week in 0-6."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{field_name} must be an integer 0-6, got {value!r}")
    if not 0 <= value <= 6:
        raise InvalidInputError(f"{field_name} must be between 0 (Sunday) and 6 (Saturday), got {value}")
    return value


def validate_lead_time(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"lead_time_days must be an integer, got {value!r}")
    if value < 0:
        raise InvalidInputError(f"lead_time_days must not be negative, got {value}")
    return value


def parse_cutoff_time(value: str | time) -> time:
    """Parse a strict 24h HH:MM string into a time."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    match = HHMM_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise InvalidInputError(f"cutoff_time must be in HH:MM format, got {value!r}")
    return time(hour=int(match.group(1)), minute=int(match.group(2)))


def business_day_of_week(value: date | datetime) -> int:
    """Return 0=Sunday .. 6=Saturday for a civil date."""
    return value.isoweekday() % DAYS_IN_WEEK


@dataclass(frozen=True)
class CutoffRule:
    """Weekly deadline after which the current week's slots are closed."""

    cutoff_day: int
    cutoff_time: time

    def __post_init__(self) -> None:
        validate_day_of_week(self.cutoff_day, "cutoff_day")
        object.__setattr__(self, "cutoff_time", parse_cutoff_time(self.cutoff_time))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "CutoffRule":
        """Build from ``{cutoffDay, cutoffTime}`` or ``{cutoff_day, cutoff_time}``."""
        day = config.get("cutoff_day", config.get("cutoffDay"))
        cutoff = config.get("cutoff_time", config.get("cutoffTime"))
        if day is None or cutoff is None:
            raise InvalidInputError("Cutoff config requires cutoff day and cutoff time")
        return cls(cutoff_day=day, cutoff_time=cutoff)

    def label(self) -> str:
        return f"{DAY_NAMES[self.cutoff_day]} {self.cutoff_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class FulfillmentWindow:
    """A computed delivery or pickup slot."""

    fulfillment_date: date
    meets_lead_time: bool
    day_of_week: int
    cutoff_at: datetime | None = None
    time_window: str | None = field(default=None, compare=False)


def _wall_clock(now: datetime, tz_name: str) -> datetime:
    return to_business_time(now, tz_name)


def _civil_date(value: date | datetime, tz_name: str) -> date:
    if isinstance(value, datetime):
        return _wall_clock(value, tz_name).date()
    return value


def is_before_cutoff(now: datetime, rule: CutoffRule, *, tz_name: str = BUSINESS_TIMEZONE) -> bool:
    """Return True when now is on or before the cutoff within the Sunday-start week."""
    local = _wall_clock(now, tz_name)
    current_day = business_day_of_week(local)
    if current_day != rule.cutoff_day:
        return current_day < rule.cutoff_day
    return (local.hour, local.minute) <= (rule.cutoff_time.hour, rule.cutoff_time.minute)


def next_occurrence_of_weekday(
    target_day_of_week: int,
    start: date | datetime,
    *,
    tz_name: str = BUSINESS_TIMEZONE,
) -> date:
    """Return the first date strictly after start falling on the target weekday.

    Today never counts as the next occurrence: when start already is the
    target weekday the result is one week later.
    """
    validate_day_of_week(target_day_of_week, "target_day_of_week")
    start_date = _civil_date(start, tz_name)
    days_until = (target_day_of_week - business_day_of_week(start_date) + DAYS_IN_WEEK) % DAYS_IN_WEEK
    if days_until == 0:
        days_until = DAYS_IN_WEEK
    return start_date + timedelta(days=days_until)


def occurrence_one_week_later(
    target_day_of_week: int,
    start: date | datetime,
    *,
    tz_name: str = BUSINESS_TIMEZONE,
) -> date:
    return next_occurrence_of_weekday(target_day_of_week, start, tz_name=tz_name) + timedelta(days=DAYS_IN_WEEK)


def days_between(
    start: date | datetime,
    end: date | datetime,
    *,
    exact: bool = False,
    rounding: str = "ceil",
    tz_name: str = BUSINESS_TIMEZONE,
) -> int:
    """Return whole days from start to end.

    By default both values are reduced to business calendar dates. With
    ``exact=True`` two datetimes are compared as instants and the fractional
    day count is rounded with ``rounding`` ("ceil" or "trunc"); ceil is what
    customer-facing "days away" copy uses.
    """
    if rounding not in {"ceil", "trunc"}:
        raise InvalidInputError(f"rounding must be 'ceil' or 'trunc', got {rounding!r}")
    if exact and isinstance(start, datetime) and isinstance(end, datetime):
        # Same-tzinfo subtraction ignores offsets, so compare in UTC.
        delta = _wall_clock(end, tz_name).astimezone(timezone.utc) - _wall_clock(start, tz_name).astimezone(timezone.utc)
        delta_days = delta.total_seconds() / 86400
        return math.ceil(delta_days) if rounding == "ceil" else math.trunc(delta_days)
    return (_civil_date(end, tz_name) - _civil_date(start, tz_name)).days


def meets_lead_time(
    candidate_date: date,
    now: date | datetime,
    lead_time_days: int,
    *,
    tz_name: str = BUSINESS_TIMEZONE,
) -> bool:
    """Return True when candidate is at least lead_time_days after now's date."""
    validate_lead_time(lead_time_days)
    return candidate_date >= _civil_date(now, tz_name) + timedelta(days=lead_time_days)


def cutoff_deadline(fulfillment_date: date, rule: CutoffRule, *, tz_name: str = BUSINESS_TIMEZONE) -> datetime:
    """Return the cutoff instant that closes ordering for a fulfillment date.

    The deadline is the rule's weekday and time in the Sunday-start week of the
    fulfillment date, moved back a week when that weekday comes after it.
    """
    week_start = fulfillment_date - timedelta(days=business_day_of_week(fulfillment_date))
    deadline_date = week_start + timedelta(days=rule.cutoff_day)
    if deadline_date > fulfillment_date:
        deadline_date -= timedelta(days=DAYS_IN_WEEK)
    return datetime.combine(deadline_date, rule.cutoff_time, tzinfo=business_tz(tz_name))


def week_cutoff(now: datetime, rule: CutoffRule, *, tz_name: str = BUSINESS_TIMEZONE) -> datetime:
    """Return the cutoff instant inside the Sunday-start week containing now."""
    today = _wall_clock(now, tz_name).date()
    week_start = today - timedelta(days=business_day_of_week(today))
    return datetime.combine(
        week_start + timedelta(days=rule.cutoff_day),
        rule.cutoff_time,
        tzinfo=business_tz(tz_name),
    )


def available_fulfillment_windows(
    now: datetime,
    cutoff_rule: CutoffRule,
    fulfillment_days: Iterable[int],
    lead_time_days: int,
    *,
    time_windows: Mapping[int, str] | None = None,
    tz_name: str = BUSINESS_TIMEZONE,
) -> list[FulfillmentWindow]:
    """Return one upcoming slot per fulfillment day, in the order given.

    Before the cutoff the nearest occurrence is offered unless it misses the
    lead time, in which case the following week's is offered. After the cutoff
    the nearest occurrence is skipped entirely. ``meets_lead_time`` on each
    window reports whether that first pick already met the lead time.

    ``cutoff_at`` is the deadline governing the offered slot: this week's
    cutoff for the nearest occurrence, shifted by one week for every week the
    slot was rolled forward.
    """
    validate_lead_time(lead_time_days)
    days = [validate_day_of_week(day, "fulfillment_day") for day in fulfillment_days]
    local = _wall_clock(now, tz_name)
    before_cutoff = is_before_cutoff(local, cutoff_rule, tz_name=tz_name)
    current_cutoff = week_cutoff(local, cutoff_rule, tz_name=tz_name)

    windows: list[FulfillmentWindow] = []
    for day in days:
        nearest = next_occurrence_of_weekday(day, local, tz_name=tz_name)
        if before_cutoff:
            candidate = nearest
        else:
            candidate = nearest + timedelta(days=DAYS_IN_WEEK)
        first_pick_ok = meets_lead_time(candidate, local, lead_time_days, tz_name=tz_name)

        if before_cutoff and not first_pick_ok:
            candidate = occurrence_one_week_later(day, local, tz_name=tz_name)
        # Lead times longer than a week keep rolling until satisfied.
        while not meets_lead_time(candidate, local, lead_time_days, tz_name=tz_name):
            candidate += timedelta(days=DAYS_IN_WEEK)
        weeks_rolled = (candidate - nearest).days // DAYS_IN_WEEK

        windows.append(
            FulfillmentWindow(
                fulfillment_date=candidate,
                meets_lead_time=first_pick_ok,
                day_of_week=day,
                cutoff_at=current_cutoff + timedelta(days=DAYS_IN_WEEK * weeks_rolled),
                time_window=(time_windows or {}).get(day),
            )
        )

    logger.debug(
        "Computed %d fulfillment windows at %s (before cutoff %s: %s)",
        len(windows),
        local.isoformat(),
        cutoff_rule.label(),
        before_cutoff,
    )
    return windows


# End of the Sunday-start week: every instant is on or before it.
NO_CUTOFF: CutoffRule = CutoffRule(cutoff_day=6, cutoff_time=time(23, 59))


@dataclass(frozen=True)
class FulfillmentConfig:
    """Caller-supplied scheduling configuration."""

    cutoff_rule: CutoffRule
    fulfillment_days: tuple[int, ...]
    lead_time_days: int

    def __post_init__(self) -> None:
        validate_lead_time(self.lead_time_days)
        days = tuple(validate_day_of_week(day, "fulfillment_day") for day in self.fulfillment_days)
        object.__setattr__(self, "fulfillment_days", days)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "FulfillmentConfig":
        """Build from ``{cutoffDay, cutoffTime, leadTimeDays, fulfillmentDays}`` (camel or snake case)."""
        days = config.get("fulfillment_days", config.get("fulfillmentDays"))
        lead = config.get("lead_time_days", config.get("leadTimeDays"))
        if days is None or lead is None:
            raise InvalidInputError("Fulfillment config requires fulfillment days and lead time days")
        return cls(cutoff_rule=CutoffRule.from_config(config), fulfillment_days=tuple(days), lead_time_days=lead)

    def windows(self, now: datetime, *, tz_name: str = BUSINESS_TIMEZONE) -> list[FulfillmentWindow]:
        return available_fulfillment_windows(
            now,
            self.cutoff_rule,
            self.fulfillment_days,
            self.lead_time_days,
            tz_name=tz_name,
        )
