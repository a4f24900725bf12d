"""Admin endpoints for delivery settings and order fulfillment."""

import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bakery.db.session import get_db
from bakery.models import (
    DeliveryCalendarClosure,
    DeliveryOneOffDate,
    DeliverySchedule,
    DeliveryZone,
    Order,
    PickupLocation,
    ProductDeliveryRules,
)
from bakery.schemas.delivery import (
    CalendarClosureCreate,
    CalendarClosureRead,
    DeliveryScheduleCreate,
    DeliveryScheduleRead,
    DeliveryZoneCreate,
    DeliveryZoneRead,
    OneOffDateCreate,
    OneOffDateRead,
    PickupLocationCreate,
    PickupLocationRead,
    ProductDeliveryRulesRead,
    ProductDeliveryRulesUpsert,
)
from bakery.schemas.order import (
    BatchDeliveryStatusUpdate,
    DeliveryStatusUpdate,
    FulfillmentDayOrders,
    FulfillmentOrdersResponse,
    OrderFulfillmentRead,
    PickupLocationOrders,
    PickupStatusUpdate,
    StatusChangeResponse,
)
from bakery.services.delivery_service import get_orders_by_fulfillment, list_orders_for_date
from bakery.services.fulfillment_status import StatusTransitionError, set_fulfillment_status
from bakery.services.pdf_exports import render_fulfillment_sheet_pdf, sanitize_filename, serialize_order_for_sheet

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(db: Session, model: type, object_id: int, label: str):
    instance = db.get(model, object_id)
    if instance is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return instance


def _check_pickup_cutoff(payload: PickupLocationCreate) -> None:
    if payload.requires_preorder and (payload.cutoff_day is None or payload.cutoff_time is None):
        raise HTTPException(status_code=400, detail="Preorder pickup locations need a cutoff day and time")


# Delivery schedules


@router.get("/delivery-settings/schedules", response_model=list[DeliveryScheduleRead])
def list_schedules(db: Session = Depends(get_db)) -> list[DeliverySchedule]:
    return db.scalars(select(DeliverySchedule).order_by(DeliverySchedule.day_of_week, DeliverySchedule.id)).all()


@router.post("/delivery-settings/schedules", response_model=DeliveryScheduleRead, status_code=status.HTTP_201_CREATED)
def create_schedule(payload: DeliveryScheduleCreate, db: Session = Depends(get_db)) -> DeliverySchedule:
    schedule = DeliverySchedule(**payload.model_dump())
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.put("/delivery-settings/schedules/{schedule_id}", response_model=DeliveryScheduleRead)
def update_schedule(schedule_id: int, payload: DeliveryScheduleCreate, db: Session = Depends(get_db)) -> DeliverySchedule:
    schedule = _get_or_404(db, DeliverySchedule, schedule_id, "Delivery schedule")
    for key, value in payload.model_dump().items():
        setattr(schedule, key, value)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.delete("/delivery-settings/schedules/{schedule_id}")
def delete_schedule(schedule_id: int, db: Session = Depends(get_db)) -> dict[str, str]:
    db.delete(_get_or_404(db, DeliverySchedule, schedule_id, "Delivery schedule"))
    db.commit()
    return {"message": "Delivery schedule removed"}


# Pickup locations


@router.get("/delivery-settings/pickup-locations", response_model=list[PickupLocationRead])
def list_pickup_locations(db: Session = Depends(get_db)) -> list[PickupLocation]:
    return db.scalars(select(PickupLocation).order_by(PickupLocation.name)).all()


@router.post(
    "/delivery-settings/pickup-locations",
    response_model=PickupLocationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_pickup_location(payload: PickupLocationCreate, db: Session = Depends(get_db)) -> PickupLocation:
    _check_pickup_cutoff(payload)
    location = PickupLocation(**payload.model_dump())
    db.add(location)
    db.commit()
    db.refresh(location)
    return location


@router.put("/delivery-settings/pickup-locations/{location_id}", response_model=PickupLocationRead)
def update_pickup_location(
    location_id: int,
    payload: PickupLocationCreate,
    db: Session = Depends(get_db),
) -> PickupLocation:
    location = _get_or_404(db, PickupLocation, location_id, "Pickup location")
    _check_pickup_cutoff(payload)
    for key, value in payload.model_dump().items():
        setattr(location, key, value)
    db.commit()
    db.refresh(location)
    return location


@router.delete("/delivery-settings/pickup-locations/{location_id}")
def delete_pickup_location(location_id: int, db: Session = Depends(get_db)) -> dict[str, str]:
    location = _get_or_404(db, PickupLocation, location_id, "Pickup location")
    linked_orders = db.scalars(select(Order.id).where(Order.pickup_location_id == location_id).limit(1)).first()
    if linked_orders is not None:
        raise HTTPException(status_code=400, detail="Pickup location has orders. Deactivate it instead.")
    db.delete(location)
    db.commit()
    return {"message": "Pickup location removed"}


# Calendar closures


@router.get("/delivery-settings/closures", response_model=list[CalendarClosureRead])
def list_closures(db: Session = Depends(get_db)) -> list[DeliveryCalendarClosure]:
    return db.scalars(select(DeliveryCalendarClosure).order_by(DeliveryCalendarClosure.closure_date)).all()


@router.post(
    "/delivery-settings/closures",
    response_model=CalendarClosureRead,
    status_code=status.HTTP_201_CREATED,
)
def create_closure(payload: CalendarClosureCreate, db: Session = Depends(get_db)) -> DeliveryCalendarClosure:
    closure_date = payload.closure_date.isoformat()
    existing = db.scalars(
        select(DeliveryCalendarClosure).where(DeliveryCalendarClosure.closure_date == closure_date)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail=f"A closure already exists for {closure_date}")

    closure = DeliveryCalendarClosure(**{**payload.model_dump(), "closure_date": closure_date})
    db.add(closure)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"A closure already exists for {closure_date}") from exc
    db.refresh(closure)
    logger.info("Calendar closure added for %s: %s", closure_date, closure.reason)
    return closure


@router.delete("/delivery-settings/closures/{closure_id}")
def delete_closure(closure_id: int, db: Session = Depends(get_db)) -> dict[str, str]:
    db.delete(_get_or_404(db, DeliveryCalendarClosure, closure_id, "Calendar closure"))
    db.commit()
    return {"message": "Calendar closure removed"}


# One-off dates


@router.get("/delivery-settings/one-off-dates", response_model=list[OneOffDateRead])
def list_one_off_dates(db: Session = Depends(get_db)) -> list[DeliveryOneOffDate]:
    return db.scalars(select(DeliveryOneOffDate).order_by(DeliveryOneOffDate.date, DeliveryOneOffDate.type)).all()


@router.post(
    "/delivery-settings/one-off-dates",
    response_model=OneOffDateRead,
    status_code=status.HTTP_201_CREATED,
)
def create_one_off_date(payload: OneOffDateCreate, db: Session = Depends(get_db)) -> DeliveryOneOffDate:
    if (payload.time_window_start is None) != (payload.time_window_end is None):
        raise HTTPException(status_code=400, detail="Time window needs both start and end")
    iso_value = payload.date.isoformat()
    existing = db.scalars(
        select(DeliveryOneOffDate).where(DeliveryOneOffDate.date == iso_value, DeliveryOneOffDate.type == payload.type)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail=f"A one-off {payload.type} date already exists for {iso_value}")

    one_off = DeliveryOneOffDate(**{**payload.model_dump(), "date": iso_value, "is_active": True})
    db.add(one_off)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=409, detail=f"A one-off {payload.type} date already exists for {iso_value}"
        ) from exc
    db.refresh(one_off)
    return one_off


@router.delete("/delivery-settings/one-off-dates/{one_off_id}")
def delete_one_off_date(one_off_id: int, db: Session = Depends(get_db)) -> dict[str, str]:
    db.delete(_get_or_404(db, DeliveryOneOffDate, one_off_id, "One-off date"))
    db.commit()
    return {"message": "One-off date removed"}


# Delivery zones


@router.get("/delivery-settings/zones", response_model=list[DeliveryZoneRead])
def list_zones(db: Session = Depends(get_db)) -> list[DeliveryZone]:
    return db.scalars(select(DeliveryZone).order_by(DeliveryZone.priority.desc(), DeliveryZone.id)).all()


@router.post("/delivery-settings/zones", response_model=DeliveryZoneRead, status_code=status.HTTP_201_CREATED)
def create_zone(payload: DeliveryZoneCreate, db: Session = Depends(get_db)) -> DeliveryZone:
    zone = DeliveryZone(**payload.model_dump())
    db.add(zone)
    db.commit()
    db.refresh(zone)
    return zone


@router.delete("/delivery-settings/zones/{zone_id}")
def delete_zone(zone_id: int, db: Session = Depends(get_db)) -> dict[str, str]:
    db.delete(_get_or_404(db, DeliveryZone, zone_id, "Delivery zone"))
    db.commit()
    return {"message": "Delivery zone removed"}


# Product rules


@router.get("/delivery-settings/product-rules/{product_id}", response_model=ProductDeliveryRulesRead)
def get_product_rules(product_id: str, db: Session = Depends(get_db)) -> ProductDeliveryRules:
    rules = db.scalars(select(ProductDeliveryRules).where(ProductDeliveryRules.product_id == product_id)).first()
    if rules is None:
        raise HTTPException(status_code=404, detail="Product delivery rules not found")
    return rules


@router.put("/delivery-settings/product-rules/{product_id}", response_model=ProductDeliveryRulesRead)
def upsert_product_rules(
    product_id: str,
    payload: ProductDeliveryRulesUpsert,
    db: Session = Depends(get_db),
) -> ProductDeliveryRules:
    rules = db.scalars(select(ProductDeliveryRules).where(ProductDeliveryRules.product_id == product_id)).first()
    if rules is None:
        rules = ProductDeliveryRules(product_id=product_id)
        db.add(rules)
    for key, value in payload.model_dump().items():
        setattr(rules, key, value)
    db.commit()
    db.refresh(rules)
    return rules


# Orders


@router.get("/fulfillment/orders", response_model=FulfillmentOrdersResponse)
def list_fulfillment_orders(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> FulfillmentOrdersResponse:
    if start is not None and end is not None and start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    groups = get_orders_by_fulfillment(db, start=start, end=end)

    location_ids = {location_id for by_location in groups.pickups.values() for location_id in by_location}
    location_names: dict[int, str] = {}
    if location_ids:
        rows = db.execute(select(PickupLocation.id, PickupLocation.name).where(PickupLocation.id.in_(location_ids)))
        location_names = {row.id: row.name for row in rows}

    days: list[FulfillmentDayOrders] = []
    for day in sorted(set(groups.deliveries) | set(groups.pickups)):
        pickups = [
            PickupLocationOrders(
                location_id=location_id,
                location_name=location_names.get(location_id, "Unknown location"),
                orders=[OrderFulfillmentRead.model_validate(order) for order in orders],
            )
            for location_id, orders in sorted(groups.pickups.get(day, {}).items())
        ]
        days.append(
            FulfillmentDayOrders(
                date=day,
                deliveries=[OrderFulfillmentRead.model_validate(order) for order in groups.deliveries.get(day, [])],
                pickups=pickups,
            )
        )
    return FulfillmentOrdersResponse(days=days)


def _apply_status(db: Session, order_id: int, new_status: str, method: str) -> StatusChangeResponse:
    order = _get_or_404(db, Order, order_id, "Order")
    if order.fulfillment_method != method:
        raise HTTPException(status_code=409, detail=f"Order {order_id} is not a {method} order")
    try:
        previous = set_fulfillment_status(order, new_status, datetime.now(timezone.utc))
    except StatusTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    db.commit()
    logger.info("Order %s %s status: %s -> %s", order_id, method, previous or "pending", new_status)
    return StatusChangeResponse(order_id=order_id, previous_status=previous, status=new_status)


@router.patch("/orders/{order_id}/delivery-status", response_model=StatusChangeResponse)
def update_delivery_status(
    order_id: int,
    payload: DeliveryStatusUpdate,
    db: Session = Depends(get_db),
) -> StatusChangeResponse:
    return _apply_status(db, order_id, payload.status, "delivery")


@router.patch("/orders/{order_id}/pickup-status", response_model=StatusChangeResponse)
def update_pickup_status(
    order_id: int,
    payload: PickupStatusUpdate,
    db: Session = Depends(get_db),
) -> StatusChangeResponse:
    return _apply_status(db, order_id, payload.status, "pickup")


@router.post("/orders/delivery-status/batch", response_model=list[StatusChangeResponse])
def batch_update_delivery_status(
    payload: BatchDeliveryStatusUpdate,
    db: Session = Depends(get_db),
) -> list[StatusChangeResponse]:
    order_ids = list(dict.fromkeys(payload.order_ids))
    orders = {order.id: order for order in db.scalars(select(Order).where(Order.id.in_(order_ids))).all()}
    missing = [order_id for order_id in order_ids if order_id not in orders]
    if missing:
        raise HTTPException(status_code=404, detail=f"Orders not found: {missing}")

    now = datetime.now(timezone.utc)
    results: list[StatusChangeResponse] = []
    try:
        for order_id in order_ids:
            order = orders[order_id]
            if order.fulfillment_method != "delivery":
                raise StatusTransitionError(f"Order {order_id} is not a delivery order")
            previous = set_fulfillment_status(order, payload.status, now)
            results.append(StatusChangeResponse(order_id=order_id, previous_status=previous, status=payload.status))
    except StatusTransitionError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    db.commit()
    logger.info("Batch delivery status %s applied to %d orders", payload.status, len(results))
    return results


@router.get("/fulfillment/{fulfillment_date}/sheet.pdf")
def download_fulfillment_sheet(fulfillment_date: date, db: Session = Depends(get_db)) -> Response:
    orders = list_orders_for_date(db, fulfillment_date)
    pdf_bytes = render_fulfillment_sheet_pdf(
        [serialize_order_for_sheet(order) for order in orders],
        {
            "date": fulfillment_date.isoformat(),
            "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        },
    )
    filename = sanitize_filename(f"fulfillment_{fulfillment_date.isoformat()}")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}.pdf"'},
    )
