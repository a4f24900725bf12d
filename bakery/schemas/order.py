"""Order fulfillment schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DeliveryStatus = Literal["pending", "confirmed", "preparing", "out_for_delivery", "delivered"]
PickupStatus = Literal["pending", "confirmed", "preparing", "ready_for_pickup", "picked_up"]


class OrderFulfillmentRead(BaseModel):
    id: int
    order_number: str | None
    customer_name: str
    customer_email: str | None
    fulfillment_method: str
    delivery_date: str | None
    delivery_time_window: str | None
    delivery_address: str | None
    delivery_zip: str | None
    delivery_fee_cents: int
    delivery_status: str | None
    pickup_location_id: int | None
    pickup_date: str | None
    pickup_time_window: str | None
    pickup_status: str | None
    notes: str | None
    total_cents: int
    status_updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class DeliveryStatusUpdate(BaseModel):
    status: DeliveryStatus


class PickupStatusUpdate(BaseModel):
    status: PickupStatus


class BatchDeliveryStatusUpdate(BaseModel):
    order_ids: list[int] = Field(min_length=1)
    status: DeliveryStatus


class StatusChangeResponse(BaseModel):
    order_id: int
    previous_status: str | None
    status: str


class PickupLocationOrders(BaseModel):
    location_id: int
    location_name: str
    orders: list[OrderFulfillmentRead]


class FulfillmentDayOrders(BaseModel):
    date: str
    deliveries: list[OrderFulfillmentRead]
    pickups: list[PickupLocationOrders]


class FulfillmentOrdersResponse(BaseModel):
    days: list[FulfillmentDayOrders]
