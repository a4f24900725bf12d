"""Delivery and pickup availability built on the fulfillment calendar.

Reads the delivery settings tables and runs each schedule or pickup location
through the fulfillment window calculator. Dates falling on a calendar closure
are omitted rather than moved to the next week.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from bakery.core.config import settings
from bakery.models import (
    DeliveryCalendarClosure,
    DeliveryOneOffDate,
    DeliverySchedule,
    DeliveryZone,
    Order,
    PickupLocation,
    ProductDeliveryRules,
)
from bakery.services.fulfillment_calendar import (
    NO_CUTOFF,
    CutoffRule,
    available_fulfillment_windows,
    business_day_of_week,
    meets_lead_time,
)
from bakery.utils.time import parse_business_date, to_business_time

logger = logging.getLogger(__name__)

FULFILLMENT_DELIVERY: str = "delivery"
FULFILLMENT_PICKUP: str = "pickup"


@dataclass
class DeliveryDateResult:
    delivery_date: date
    cutoff_at: datetime | None
    time_window: str
    day_of_week: int
    schedule: DeliverySchedule | None = None
    one_off: bool = False


@dataclass
class PickupDateResult:
    pickup_date: date
    cutoff_at: datetime | None
    time_window: str
    one_off: bool = False


@dataclass
class PickupLocationWithDate:
    location: PickupLocation
    next_pickup_date: date
    pickup_time_window: str


@dataclass
class DeliveryFeeResult:
    fee_cents: int
    zone: DeliveryZone | None
    adjustments: list[tuple[str, int]] = field(default_factory=list)


@dataclass
class FulfillmentGroups:
    """Orders grouped by delivery date, and by pickup date then location id."""

    deliveries: dict[str, list[Order]]
    pickups: dict[str, dict[int, list[Order]]]


def get_product_rules(db: Session, product_id: str | None) -> ProductDeliveryRules | None:
    if not product_id:
        return None
    return db.query(ProductDeliveryRules).filter(ProductDeliveryRules.product_id == product_id).first()


def get_closure_dates(db: Session, *, method: str) -> set[str]:
    """Return closed business dates (YYYY-MM-DD) for delivery or pickup."""
    column = (
        DeliveryCalendarClosure.affects_delivery
        if method == FULFILLMENT_DELIVERY
        else DeliveryCalendarClosure.affects_pickup
    )
    rows = db.query(DeliveryCalendarClosure.closure_date).filter(column.is_(True)).all()
    return {str(row[0]) for row in rows}


def effective_lead_time(base_days: int, rules: ProductDeliveryRules | None) -> int:
    """Product minimum lead time can only lengthen the schedule's."""
    if rules is None or rules.minimum_lead_time_days is None:
        return base_days
    return max(base_days, rules.minimum_lead_time_days)


def _day_allowed(day_of_week: int, rules: ProductDeliveryRules | None) -> bool:
    if rules is None or rules.allowed_delivery_days is None:
        return True
    return day_of_week in rules.allowed_delivery_days


def _one_off_dates(
    db: Session,
    *,
    method: str,
    now: datetime,
    rules: ProductDeliveryRules | None,
    closed: set[str],
    tz_name: str,
    filter_days: bool = True,
    default_lead_time: int | None = None,
) -> list[tuple[DeliveryOneOffDate, date]]:
    """Return reachable one-off dates of a method.

    Product rules always apply their minimum lead time; their allowed days only
    filter when ``filter_days`` is set. Rows without a lead time use
    ``default_lead_time``, falling back to the configured default.
    """
    if default_lead_time is None:
        default_lead_time = settings.default_lead_time_days
    rows: list[DeliveryOneOffDate] = (
        db.query(DeliveryOneOffDate)
        .filter(DeliveryOneOffDate.type == method, DeliveryOneOffDate.is_active.is_(True))
        .order_by(DeliveryOneOffDate.date.asc())
        .all()
    )
    results: list[tuple[DeliveryOneOffDate, date]] = []
    for row in rows:
        try:
            one_off_date = parse_business_date(row.date)
        except ValueError:
            logger.warning("Ignoring one-off %s date with malformed value %r", method, row.date)
            continue
        if row.date in closed:
            continue
        if filter_days and not _day_allowed(business_day_of_week(one_off_date), rules):
            continue
        base_lead = row.lead_time_days if row.lead_time_days is not None else default_lead_time
        if not meets_lead_time(one_off_date, now, effective_lead_time(base_lead, rules), tz_name=tz_name):
            continue
        results.append((row, one_off_date))
    return results


def get_available_delivery_dates(
    db: Session,
    *,
    now: datetime,
    product_id: str | None = None,
    tz_name: str | None = None,
) -> list[DeliveryDateResult]:
    """Return one upcoming delivery date per active schedule plus one-off dates."""
    tz_name = tz_name or settings.business_timezone
    now = to_business_time(now, tz_name)
    rules = get_product_rules(db, product_id)
    if rules is not None and not rules.allow_delivery:
        return []

    schedules: list[DeliverySchedule] = (
        db.query(DeliverySchedule)
        .filter(DeliverySchedule.is_active.is_(True))
        .order_by(DeliverySchedule.day_of_week.asc(), DeliverySchedule.id.asc())
        .all()
    )
    schedules = [schedule for schedule in schedules if _day_allowed(schedule.day_of_week, rules)]
    closed = get_closure_dates(db, method=FULFILLMENT_DELIVERY)

    options: list[DeliveryDateResult] = []
    for schedule in schedules:
        rule = CutoffRule(cutoff_day=schedule.cutoff_day, cutoff_time=schedule.cutoff_time)
        window = available_fulfillment_windows(
            now,
            rule,
            [schedule.day_of_week],
            effective_lead_time(schedule.lead_time_days, rules),
            tz_name=tz_name,
        )[0]
        if window.fulfillment_date.isoformat() in closed:
            logger.info("Skipping delivery on %s (%s): calendar closure", window.fulfillment_date, schedule.name)
            continue
        options.append(
            DeliveryDateResult(
                delivery_date=window.fulfillment_date,
                cutoff_at=window.cutoff_at,
                time_window=schedule.delivery_time_window or "",
                day_of_week=schedule.day_of_week,
                schedule=schedule,
            )
        )

    scheduled_dates = {option.delivery_date for option in options}
    for row, one_off_date in _one_off_dates(
        db, method=FULFILLMENT_DELIVERY, now=now, rules=rules, closed=closed, tz_name=tz_name
    ):
        if one_off_date in scheduled_dates:
            continue
        options.append(
            DeliveryDateResult(
                delivery_date=one_off_date,
                cutoff_at=None,
                time_window=row.time_window() or "",
                day_of_week=business_day_of_week(one_off_date),
                one_off=True,
            )
        )

    return sorted(options, key=lambda option: option.delivery_date)


def get_available_pickup_dates(
    db: Session,
    *,
    location_id: int,
    now: datetime,
    product_id: str | None = None,
    max_dates: int = 4,
    tz_name: str | None = None,
) -> list[PickupDateResult]:
    """Return up to max_dates upcoming pickup dates for an active location."""
    tz_name = tz_name or settings.business_timezone
    now = to_business_time(now, tz_name)
    location: PickupLocation | None = (
        db.query(PickupLocation)
        .filter(PickupLocation.id == location_id, PickupLocation.is_active.is_(True))
        .first()
    )
    if location is None:
        return []

    rules = get_product_rules(db, product_id)
    if rules is not None and not rules.allow_pickup:
        return []

    rule: CutoffRule | None = None
    if location.requires_preorder and location.cutoff_day is not None and location.cutoff_time:
        rule = CutoffRule(cutoff_day=location.cutoff_day, cutoff_time=location.cutoff_time)

    closed = get_closure_dates(db, method=FULFILLMENT_PICKUP)
    windows = available_fulfillment_windows(
        now,
        rule or NO_CUTOFF,
        sorted(set(location.pickup_days or [])),
        effective_lead_time(location.lead_time_days, rules),
        tz_name=tz_name,
    )

    options: list[PickupDateResult] = [
        PickupDateResult(
            pickup_date=window.fulfillment_date,
            cutoff_at=window.cutoff_at if rule is not None else None,
            time_window=location.pickup_time_windows,
        )
        for window in windows
        if window.fulfillment_date.isoformat() not in closed
    ]

    scheduled_dates = {option.pickup_date for option in options}
    for row, one_off_date in _one_off_dates(
        db,
        method=FULFILLMENT_PICKUP,
        now=now,
        rules=rules,
        closed=closed,
        tz_name=tz_name,
        filter_days=False,
        default_lead_time=location.lead_time_days,
    ):
        if one_off_date in scheduled_dates:
            continue
        options.append(
            PickupDateResult(
                pickup_date=one_off_date,
                cutoff_at=None,
                time_window=row.time_window() or location.pickup_time_windows,
                one_off=True,
            )
        )

    options.sort(key=lambda option: option.pickup_date)
    return options[:max_dates]


def get_available_pickup_locations(
    db: Session,
    *,
    now: datetime,
    product_id: str | None = None,
    tz_name: str | None = None,
) -> list[PickupLocationWithDate]:
    """Return active pickup locations that have an upcoming pickup date."""
    locations: list[PickupLocation] = (
        db.query(PickupLocation)
        .filter(PickupLocation.is_active.is_(True))
        .order_by(PickupLocation.name.asc())
        .all()
    )
    results: list[PickupLocationWithDate] = []
    for location in locations:
        dates = get_available_pickup_dates(
            db,
            location_id=location.id,
            now=now,
            product_id=product_id,
            max_dates=1,
            tz_name=tz_name,
        )
        if not dates:
            continue
        results.append(
            PickupLocationWithDate(
                location=location,
                next_pickup_date=dates[0].pickup_date,
                pickup_time_window=dates[0].time_window,
            )
        )
    return results


def calculate_delivery_fee(
    db: Session,
    *,
    zip_code: str,
    fulfillment_method: str = FULFILLMENT_DELIVERY,
) -> DeliveryFeeResult:
    """Resolve the delivery fee from the highest-priority zone containing the ZIP."""
    if fulfillment_method == FULFILLMENT_PICKUP:
        return DeliveryFeeResult(fee_cents=0, zone=None, adjustments=[("Pickup is free", 0)])

    zones: list[DeliveryZone] = (
        db.query(DeliveryZone)
        .filter(DeliveryZone.is_active.is_(True))
        .order_by(DeliveryZone.priority.desc(), DeliveryZone.id.asc())
        .all()
    )
    normalized_zip = zip_code.strip()
    for zone in zones:
        if normalized_zip in (zone.zip_codes or []):
            return DeliveryFeeResult(fee_cents=zone.fee_cents, zone=zone)

    logger.info("No delivery zone covers ZIP %s", normalized_zip)
    return DeliveryFeeResult(fee_cents=0, zone=None, adjustments=[("ZIP code not in delivery zones", 0)])


def get_orders_by_fulfillment(
    db: Session,
    *,
    start: date | None = None,
    end: date | None = None,
) -> FulfillmentGroups:
    """Group orders by fulfillment date; bounds are inclusive business dates."""
    query = db.query(Order).filter(
        or_(
            (Order.fulfillment_method == FULFILLMENT_DELIVERY) & Order.delivery_date.is_not(None),
            (Order.fulfillment_method == FULFILLMENT_PICKUP)
            & Order.pickup_date.is_not(None)
            & Order.pickup_location_id.is_not(None),
        )
    )
    orders: list[Order] = query.order_by(Order.id.asc()).all()

    deliveries: dict[str, list[Order]] = defaultdict(list)
    pickups: dict[str, dict[int, list[Order]]] = defaultdict(lambda: defaultdict(list))
    for order in orders:
        key = order.delivery_date if order.fulfillment_method == FULFILLMENT_DELIVERY else order.pickup_date
        if start is not None and key < start.isoformat():
            continue
        if end is not None and key > end.isoformat():
            continue
        if order.fulfillment_method == FULFILLMENT_DELIVERY:
            deliveries[key].append(order)
        else:
            pickups[key][order.pickup_location_id].append(order)

    return FulfillmentGroups(
        deliveries=dict(sorted(deliveries.items())),
        pickups={day: dict(by_location) for day, by_location in sorted(pickups.items())},
    )


def list_orders_for_date(db: Session, fulfillment_date: date) -> list[Order]:
    """Return delivery and pickup orders scheduled on one business date."""
    iso_value = fulfillment_date.isoformat()
    return (
        db.query(Order)
        .filter(
            or_(
                (Order.fulfillment_method == FULFILLMENT_DELIVERY) & (Order.delivery_date == iso_value),
                (Order.fulfillment_method == FULFILLMENT_PICKUP) & (Order.pickup_date == iso_value),
            )
        )
        .order_by(Order.fulfillment_method.asc(), Order.id.asc())
        .all()
    )
