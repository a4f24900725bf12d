"""Storefront endpoints for delivery and pickup slot selection."""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bakery.core.config import settings
from bakery.db.session import get_db
from bakery.models import PickupLocation
from bakery.schemas.delivery import (
    DeliveryDateOption,
    DeliveryFeeAdjustment,
    DeliveryFeeResponse,
    DeliveryOptionsResponse,
    FulfillmentWindowRead,
    PickupDateOption,
    PickupLocationOption,
    PickupOptionsResponse,
)
from bakery.services.delivery_service import (
    DeliveryFeeResult,
    calculate_delivery_fee,
    get_available_delivery_dates,
    get_available_pickup_dates,
    get_available_pickup_locations,
)
from bakery.services.fulfillment_calendar import CutoffRule, InvalidInputError, available_fulfillment_windows
from bakery.utils.time import current_business_time, to_business_time

router = APIRouter()


def _current_business_time() -> datetime:
    return current_business_time(settings.business_timezone)


def _fee_response(result: DeliveryFeeResult) -> DeliveryFeeResponse:
    return DeliveryFeeResponse(
        fee_cents=result.fee_cents,
        zone_id=result.zone.id if result.zone else None,
        zone_name=result.zone.name if result.zone else None,
        adjustments=[DeliveryFeeAdjustment(reason=reason, amount_cents=amount) for reason, amount in result.adjustments],
    )


@router.get("/windows", response_model=list[FulfillmentWindowRead])
def get_fulfillment_windows(
    cutoff_day: int = Query(default=settings.default_cutoff_day),
    cutoff_time: str = Query(default=settings.default_cutoff_time.strftime("%H:%M")),
    lead_time_days: int = Query(default=settings.default_lead_time_days),
    fulfillment_days: list[int] | None = Query(default=None),
    now: datetime | None = None,
) -> list[FulfillmentWindowRead]:
    reference = to_business_time(now, settings.business_timezone) if now else _current_business_time()
    days = fulfillment_days if fulfillment_days is not None else settings.default_fulfillment_days
    try:
        rule = CutoffRule(cutoff_day=cutoff_day, cutoff_time=cutoff_time)
        windows = available_fulfillment_windows(
            reference,
            rule,
            days,
            lead_time_days,
            tz_name=settings.business_timezone,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [FulfillmentWindowRead.model_validate(window) for window in windows]


@router.get("/delivery-options", response_model=DeliveryOptionsResponse)
def get_delivery_options(
    product_id: str | None = None,
    zip_code: str | None = None,
    db: Session = Depends(get_db),
) -> DeliveryOptionsResponse:
    results = get_available_delivery_dates(
        db,
        now=_current_business_time(),
        product_id=product_id,
        tz_name=settings.business_timezone,
    )
    fee = calculate_delivery_fee(db, zip_code=zip_code) if zip_code else None
    return DeliveryOptionsResponse(
        available=bool(results),
        delivery_dates=[
            DeliveryDateOption(
                delivery_date=result.delivery_date,
                cutoff_at=result.cutoff_at,
                time_window=result.time_window,
                day_of_week=result.day_of_week,
                schedule_id=result.schedule.id if result.schedule else None,
                schedule_name=result.schedule.name if result.schedule else None,
                one_off=result.one_off,
            )
            for result in results
        ],
        fee_cents=fee.fee_cents if fee else 0,
        zone_id=fee.zone.id if fee and fee.zone else None,
        zone_name=fee.zone.name if fee and fee.zone else None,
    )


@router.get("/pickup-options", response_model=PickupOptionsResponse)
def get_pickup_options(product_id: str | None = None, db: Session = Depends(get_db)) -> PickupOptionsResponse:
    results = get_available_pickup_locations(
        db,
        now=_current_business_time(),
        product_id=product_id,
        tz_name=settings.business_timezone,
    )
    return PickupOptionsResponse(
        available=bool(results),
        locations=[
            PickupLocationOption(
                id=result.location.id,
                name=result.location.name,
                address=result.location.address,
                pickup_date=result.next_pickup_date,
                pickup_time_window=result.pickup_time_window,
                instructions=result.location.instructions,
            )
            for result in results
        ],
    )


@router.get("/pickup-locations/{location_id}/dates", response_model=list[PickupDateOption])
def get_pickup_location_dates(
    location_id: int,
    product_id: str | None = None,
    max_dates: int = Query(default=4, ge=1, le=12),
    db: Session = Depends(get_db),
) -> list[PickupDateOption]:
    if db.get(PickupLocation, location_id) is None:
        raise HTTPException(status_code=404, detail="Pickup location not found")
    results = get_available_pickup_dates(
        db,
        location_id=location_id,
        now=_current_business_time(),
        product_id=product_id,
        max_dates=max_dates,
        tz_name=settings.business_timezone,
    )
    return [
        PickupDateOption(
            pickup_date=result.pickup_date,
            cutoff_at=result.cutoff_at,
            time_window=result.time_window,
            one_off=result.one_off,
        )
        for result in results
    ]


@router.get("/delivery-fee", response_model=DeliveryFeeResponse)
def get_delivery_fee(
    zip_code: str = Query(min_length=1),
    fulfillment_method: Literal["delivery", "pickup"] = "delivery",
    db: Session = Depends(get_db),
) -> DeliveryFeeResponse:
    return _fee_response(calculate_delivery_fee(db, zip_code=zip_code, fulfillment_method=fulfillment_method))
