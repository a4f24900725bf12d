"""Tests for the weekly cutoff and fulfillment window calculator."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from bakery.services.fulfillment_calendar import (
    NO_CUTOFF,
    CutoffRule,
    FulfillmentConfig,
    InvalidInputError,
    available_fulfillment_windows,
    business_day_of_week,
    cutoff_deadline,
    days_between,
    is_before_cutoff,
    meets_lead_time,
    next_occurrence_of_weekday,
    occurrence_one_week_later,
    parse_cutoff_time,
)

BOISE = ZoneInfo("America/Boise")
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)
TUESDAY_CUTOFF = CutoffRule(cutoff_day=TUESDAY, cutoff_time="23:59")


def _boise(day: int, hour: int = 0, minute: int = 0, month: int = 10, year: int = 2026) -> datetime:
    # 2026-10-18 is a Sunday.
    return datetime(year, month, day, hour, minute, tzinfo=BOISE)


def test_business_day_of_week_starts_on_sunday() -> None:
    assert business_day_of_week(date(2026, 10, 18)) == SUNDAY
    assert business_day_of_week(date(2026, 10, 24)) == SATURDAY


def test_monday_before_cutoff_offers_this_weeks_thursday_and_saturday() -> None:
    windows = available_fulfillment_windows(_boise(19, 10), TUESDAY_CUTOFF, [THURSDAY, SATURDAY], 2)

    assert [window.fulfillment_date for window in windows] == [date(2026, 10, 22), date(2026, 10, 24)]
    assert all(window.meets_lead_time for window in windows)
    assert [window.day_of_week for window in windows] == [THURSDAY, SATURDAY]


def test_wednesday_after_cutoff_pushes_to_next_week() -> None:
    windows = available_fulfillment_windows(_boise(21, 8), TUESDAY_CUTOFF, [THURSDAY, SATURDAY], 2)

    assert [window.fulfillment_date for window in windows] == [date(2026, 10, 29), date(2026, 10, 31)]
    assert all(window.meets_lead_time for window in windows)


@pytest.mark.parametrize(
    ("now", "expected"),
    [
        (_boise(20, 23, 58), True),
        (_boise(20, 23, 59), True),
        (_boise(20, 0, 0), True),
        (_boise(19, 23, 59), True),
        (_boise(21, 0, 0), False),
        (_boise(24, 12, 0), False),
        (_boise(18, 0, 0), True),
    ],
)
def test_is_before_cutoff_is_inclusive_at_the_deadline_minute(now: datetime, expected: bool) -> None:
    assert is_before_cutoff(now, TUESDAY_CUTOFF) is expected


def test_tuesday_midnight_thursday_exactly_meets_two_day_lead_time() -> None:
    windows = available_fulfillment_windows(_boise(20, 0, 0), TUESDAY_CUTOFF, [THURSDAY], 2)

    assert windows[0].fulfillment_date == date(2026, 10, 22)
    assert windows[0].meets_lead_time is True
    assert meets_lead_time(date(2026, 10, 22), _boise(20), 2) is True
    assert meets_lead_time(date(2026, 10, 21), _boise(20), 2) is False


def test_before_cutoff_lead_time_miss_rolls_one_week_and_reports_it() -> None:
    rule = CutoffRule(cutoff_day=THURSDAY, cutoff_time="12:00")

    windows = available_fulfillment_windows(_boise(21, 9), rule, [THURSDAY], 2)

    assert windows[0].fulfillment_date == date(2026, 10, 29)
    assert windows[0].meets_lead_time is False


@pytest.mark.parametrize(("lead_time_days", "expected"), [(10, date(2026, 10, 29)), (15, date(2026, 11, 5))])
def test_lead_time_longer_than_a_week_keeps_rolling(lead_time_days: int, expected: date) -> None:
    windows = available_fulfillment_windows(_boise(19, 10), TUESDAY_CUTOFF, [THURSDAY], lead_time_days)

    assert windows[0].fulfillment_date == expected
    assert meets_lead_time(windows[0].fulfillment_date, _boise(19, 10), lead_time_days)


def test_every_returned_window_satisfies_lead_time() -> None:
    start = _boise(18, 0)
    for hour_offset in range(0, 24 * 14, 5):
        now = start + timedelta(hours=hour_offset)
        for lead_time_days in (0, 1, 2, 6, 9):
            windows = available_fulfillment_windows(now, TUESDAY_CUTOFF, list(range(7)), lead_time_days)
            for window in windows:
                assert meets_lead_time(window.fulfillment_date, now, lead_time_days)
                assert business_day_of_week(window.fulfillment_date) == window.day_of_week


def test_windows_are_idempotent_for_identical_inputs() -> None:
    now = _boise(19, 10)
    first = available_fulfillment_windows(now, TUESDAY_CUTOFF, [THURSDAY, SATURDAY], 2)
    second = available_fulfillment_windows(now, TUESDAY_CUTOFF, [THURSDAY, SATURDAY], 2)

    assert first == second


def test_windows_keep_input_order_and_attach_time_windows() -> None:
    windows = available_fulfillment_windows(
        _boise(19, 10),
        TUESDAY_CUTOFF,
        [SATURDAY, THURSDAY],
        2,
        time_windows={SATURDAY: "09:00-12:00"},
    )

    assert [window.day_of_week for window in windows] == [SATURDAY, THURSDAY]
    assert windows[0].time_window == "09:00-12:00"
    assert windows[1].time_window is None


def test_empty_fulfillment_days_yield_no_windows() -> None:
    assert available_fulfillment_windows(_boise(19, 10), TUESDAY_CUTOFF, [], 2) == []


def test_next_occurrence_never_returns_today() -> None:
    assert next_occurrence_of_weekday(THURSDAY, _boise(22, 9)) == date(2026, 10, 29)
    assert next_occurrence_of_weekday(FRIDAY, _boise(22, 9)) == date(2026, 10, 23)
    assert next_occurrence_of_weekday(THURSDAY, date(2026, 10, 21)) == date(2026, 10, 22)


def test_next_occurrence_lands_within_seven_days_on_target_weekday() -> None:
    start = date(2026, 10, 18)
    for offset in range(14):
        today = start + timedelta(days=offset)
        for target in range(7):
            result = next_occurrence_of_weekday(target, today)
            assert 1 <= (result - today).days <= 7
            assert business_day_of_week(result) == target
            assert occurrence_one_week_later(target, today) == result + timedelta(days=7)


def test_same_day_policy_applies_to_windows() -> None:
    rule = CutoffRule(cutoff_day=SATURDAY, cutoff_time="12:00")

    windows = available_fulfillment_windows(_boise(22, 9), rule, [THURSDAY], 0)

    assert windows[0].fulfillment_date == date(2026, 10, 29)


def test_days_between_counts_calendar_days_or_rounds_instants() -> None:
    monday_morning = _boise(19, 10)
    thursday_early = _boise(22, 9)

    assert days_between(monday_morning, thursday_early) == 3
    assert days_between(monday_morning, thursday_early, exact=True) == 3
    assert days_between(monday_morning, thursday_early, exact=True, rounding="trunc") == 2
    assert days_between(date(2026, 10, 22), date(2026, 10, 19)) == -3

    with pytest.raises(InvalidInputError):
        days_between(monday_morning, thursday_early, rounding="floor")


def test_cutoff_deadline_is_the_cutoff_in_the_fulfillment_week() -> None:
    assert cutoff_deadline(date(2026, 10, 22), TUESDAY_CUTOFF) == datetime(2026, 10, 20, 23, 59, tzinfo=BOISE)
    assert cutoff_deadline(date(2026, 10, 19), TUESDAY_CUTOFF) == datetime(2026, 10, 13, 23, 59, tzinfo=BOISE)

    windows = available_fulfillment_windows(_boise(21, 8), TUESDAY_CUTOFF, [THURSDAY], 2)
    assert windows[0].cutoff_at == datetime(2026, 10, 27, 23, 59, tzinfo=BOISE)


def test_cutoff_after_fulfillment_weekday_reports_the_upcoming_deadline() -> None:
    friday_noon = CutoffRule(cutoff_day=FRIDAY, cutoff_time="12:00")

    offered = available_fulfillment_windows(_boise(19, 10), friday_noon, [THURSDAY], 2)[0]
    rolled = available_fulfillment_windows(_boise(24, 9), friday_noon, [THURSDAY], 2)[0]

    assert offered.fulfillment_date == date(2026, 10, 22)
    assert offered.cutoff_at == datetime(2026, 10, 23, 12, 0, tzinfo=BOISE)
    assert rolled.fulfillment_date == date(2026, 11, 5)
    assert rolled.cutoff_at == datetime(2026, 10, 30, 12, 0, tzinfo=BOISE)
    assert offered.cutoff_at >= _boise(19, 10) and rolled.cutoff_at >= _boise(24, 9)


def test_window_cutoff_is_never_in_the_past() -> None:
    start = _boise(18, 0)
    for hour_offset in range(0, 24 * 14, 7):
        now = start + timedelta(hours=hour_offset)
        for cutoff_day in range(7):
            rule = CutoffRule(cutoff_day=cutoff_day, cutoff_time="12:00")
            for lead_time_days in (0, 2, 9):
                for window in available_fulfillment_windows(now, rule, list(range(7)), lead_time_days):
                    assert window.cutoff_at >= now


def test_utc_instants_are_read_on_boise_wall_clock_across_dst() -> None:
    # 06:30 UTC is Tuesday 23:30 under MST and Wednesday 00:30 under MDT.
    winter = datetime(2026, 1, 14, 6, 30, tzinfo=timezone.utc)
    summer = datetime(2026, 3, 11, 6, 30, tzinfo=timezone.utc)

    assert is_before_cutoff(winter, TUESDAY_CUTOFF) is True
    assert is_before_cutoff(summer, TUESDAY_CUTOFF) is False
    assert next_occurrence_of_weekday(THURSDAY, summer) == date(2026, 3, 12)


def test_fall_back_night_keeps_saturday_until_local_midnight() -> None:
    before_midnight = datetime(2026, 11, 1, 5, 30, tzinfo=timezone.utc)
    after_midnight = datetime(2026, 11, 1, 6, 30, tzinfo=timezone.utc)

    assert business_day_of_week(before_midnight.astimezone(BOISE)) == SATURDAY
    assert next_occurrence_of_weekday(SUNDAY, before_midnight) == date(2026, 11, 1)
    assert next_occurrence_of_weekday(SUNDAY, after_midnight) == date(2026, 11, 8)


def test_naive_now_is_treated_as_boise_wall_clock() -> None:
    naive = datetime(2026, 10, 20, 23, 59)

    assert is_before_cutoff(naive, TUESDAY_CUTOFF) is True
    assert is_before_cutoff(naive + timedelta(minutes=1), TUESDAY_CUTOFF) is False


@pytest.mark.parametrize("value", ["24:00", "9:00", "12:60", "noon", "", "12:00:00"])
def test_parse_cutoff_time_rejects_malformed_values(value: str) -> None:
    with pytest.raises(InvalidInputError):
        parse_cutoff_time(value)


def test_parse_cutoff_time_accepts_time_objects_and_strings() -> None:
    assert parse_cutoff_time("07:05") == time(7, 5)
    assert parse_cutoff_time(time(18, 30, 15)) == time(18, 30)


@pytest.mark.parametrize("day", [-1, 7, 3.0, True, "2", None])
def test_invalid_days_of_week_are_rejected(day) -> None:
    with pytest.raises(InvalidInputError):
        CutoffRule(cutoff_day=day, cutoff_time="12:00")
    with pytest.raises(InvalidInputError):
        available_fulfillment_windows(_boise(19), TUESDAY_CUTOFF, [day], 2)


def test_negative_lead_time_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        available_fulfillment_windows(_boise(19), TUESDAY_CUTOFF, [THURSDAY], -1)
    with pytest.raises(InvalidInputError):
        meets_lead_time(date(2026, 10, 22), _boise(19), -3)


def test_no_cutoff_rule_is_never_passed() -> None:
    assert is_before_cutoff(_boise(24, 23, 59), NO_CUTOFF) is True
    assert is_before_cutoff(_boise(18, 0, 0), NO_CUTOFF) is True


def test_fulfillment_config_accepts_camel_case_mapping() -> None:
    config = FulfillmentConfig.from_config(
        {"cutoffDay": TUESDAY, "cutoffTime": "23:59", "leadTimeDays": 2, "fulfillmentDays": [THURSDAY, SATURDAY]}
    )

    assert config.cutoff_rule == TUESDAY_CUTOFF
    assert config.fulfillment_days == (THURSDAY, SATURDAY)
    assert [window.fulfillment_date for window in config.windows(_boise(19, 10))] == [
        date(2026, 10, 22),
        date(2026, 10, 24),
    ]


def test_fulfillment_config_requires_all_keys() -> None:
    with pytest.raises(InvalidInputError):
        FulfillmentConfig.from_config({"cutoff_day": TUESDAY, "cutoff_time": "23:59", "fulfillment_days": [4]})
    with pytest.raises(InvalidInputError):
        CutoffRule.from_config({"cutoffTime": "23:59"})
