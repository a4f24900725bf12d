"""Delivery and pickup settings ORM models."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bakery.db.base import Base


class DeliverySchedule(Base):
    """Weekly delivery day with its ordering cutoff and lead time."""

    __tablename__ = "delivery_schedules"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    cutoff_day: Mapped[int] = mapped_column(Integer, nullable=False)
    cutoff_time: Mapped[str] = mapped_column(String(5), nullable=False)
    lead_time_days: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    delivery_time_window: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class PickupLocation(Base):
    """Pickup spot with its weekly pickup days."""

    __tablename__ = "pickup_locations"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(1000), nullable=False)
    pickup_days: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    pickup_time_windows: Mapped[str] = mapped_column(String(255), nullable=False)
    instructions: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    requires_preorder: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cutoff_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cutoff_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    lead_time_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class DeliveryCalendarClosure(Base):
    """Business date on which delivery and/or pickup do not happen."""

    __tablename__ = "delivery_calendar_closures"

    id: Mapped[int] = mapped_column(primary_key=True)
    closure_date: Mapped[str] = mapped_column(String(10), nullable=False, unique=True, index=True)
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    affects_delivery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    affects_pickup: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class DeliveryOneOffDate(Base):
    """Extra delivery or pickup date outside the weekly schedule."""

    __tablename__ = "delivery_one_off_dates"
    __table_args__ = (
        UniqueConstraint("date", "type", name="uq_delivery_one_off_date_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    time_window_start: Mapped[str | None] = mapped_column(String(5), nullable=True)
    time_window_end: Mapped[str | None] = mapped_column(String(5), nullable=True)
    lead_time_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def time_window(self) -> str | None:
        if self.time_window_start and self.time_window_end:
            return f"{self.time_window_start}-{self.time_window_end}"
        return None


class DeliveryZone(Base):
    """ZIP-code based delivery fee zone."""

    __tablename__ = "delivery_zones"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    zip_codes: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    fee_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)


class ProductDeliveryRules(Base):
    """Per-product restrictions on fulfillment days and methods."""

    __tablename__ = "product_delivery_rules"

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    allowed_delivery_days: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)
    minimum_lead_time_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    allow_pickup: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allow_delivery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
