"""Delivery settings and fulfillment option schemas."""

from datetime import date as dt_date, datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from bakery.services.fulfillment_calendar import HHMM_PATTERN


def _check_hhmm(value: str) -> str:
    if not HHMM_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def _check_days(values: list[int]) -> list[int]:
    return sorted(set(values))


DayOfWeek = Annotated[int, Field(ge=0, le=6)]
HHMM = Annotated[str, AfterValidator(_check_hhmm)]
DaysOfWeek = Annotated[list[DayOfWeek], AfterValidator(_check_days)]


class DeliveryScheduleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    day_of_week: DayOfWeek
    cutoff_day: DayOfWeek
    cutoff_time: HHMM
    lead_time_days: int = Field(default=2, ge=0)
    delivery_time_window: str | None = Field(default=None, max_length=100)
    is_active: bool = True


class DeliveryScheduleRead(DeliveryScheduleCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class PickupLocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=1000)
    pickup_days: DaysOfWeek = Field(min_length=1)
    pickup_time_windows: str = Field(min_length=1, max_length=255)
    instructions: str | None = Field(default=None, max_length=1000)
    is_active: bool = True
    requires_preorder: bool = False
    cutoff_day: DayOfWeek | None = None
    cutoff_time: HHMM | None = None
    lead_time_days: int = Field(default=0, ge=0)


class PickupLocationRead(PickupLocationCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class CalendarClosureCreate(BaseModel):
    closure_date: dt_date
    reason: str = Field(min_length=1, max_length=500)
    affects_delivery: bool = True
    affects_pickup: bool = True


class CalendarClosureRead(BaseModel):
    id: int
    closure_date: str
    reason: str
    affects_delivery: bool
    affects_pickup: bool

    model_config = ConfigDict(from_attributes=True)


class OneOffDateCreate(BaseModel):
    date: dt_date
    type: Literal["delivery", "pickup"]
    reason: str | None = Field(default=None, max_length=500)
    time_window_start: HHMM | None = None
    time_window_end: HHMM | None = None
    lead_time_days: int | None = Field(default=None, ge=0)


class OneOffDateRead(BaseModel):
    id: int
    date: str
    type: str
    reason: str | None
    time_window_start: str | None
    time_window_end: str | None
    lead_time_days: int | None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class DeliveryZoneCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    zip_codes: list[str] = Field(min_length=1)
    fee_cents: int = Field(ge=0)
    priority: int = 0
    is_active: bool = True

    @field_validator("zip_codes")
    @classmethod
    def strip_zip_codes(cls, values: list[str]) -> list[str]:
        cleaned = [value.strip() for value in values if value.strip()]
        if not cleaned:
            raise ValueError("At least one ZIP code is required")
        return cleaned


class DeliveryZoneRead(DeliveryZoneCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class ProductDeliveryRulesUpsert(BaseModel):
    allowed_delivery_days: DaysOfWeek | None = None
    minimum_lead_time_days: int | None = Field(default=None, ge=0)
    allow_pickup: bool = True
    allow_delivery: bool = True


class ProductDeliveryRulesRead(ProductDeliveryRulesUpsert):
    id: int
    product_id: str

    model_config = ConfigDict(from_attributes=True)


class FulfillmentWindowRead(BaseModel):
    fulfillment_date: dt_date
    day_of_week: int
    meets_lead_time: bool
    cutoff_at: datetime | None
    time_window: str | None

    model_config = ConfigDict(from_attributes=True)


class DeliveryDateOption(BaseModel):
    delivery_date: dt_date
    cutoff_at: datetime | None
    time_window: str
    day_of_week: int
    schedule_id: int | None
    schedule_name: str | None
    one_off: bool = False


class DeliveryFeeAdjustment(BaseModel):
    reason: str
    amount_cents: int


class DeliveryFeeResponse(BaseModel):
    fee_cents: int
    zone_id: int | None
    zone_name: str | None
    adjustments: list[DeliveryFeeAdjustment]


class DeliveryOptionsResponse(BaseModel):
    available: bool
    delivery_dates: list[DeliveryDateOption]
    fee_cents: int
    zone_id: int | None
    zone_name: str | None


class PickupDateOption(BaseModel):
    pickup_date: dt_date
    cutoff_at: datetime | None
    time_window: str
    one_off: bool = False


class PickupLocationOption(BaseModel):
    id: int
    name: str
    address: str
    pickup_date: dt_date
    pickup_time_window: str
    instructions: str | None


class PickupOptionsResponse(BaseModel):
    available: bool
    locations: list[PickupLocationOption]
