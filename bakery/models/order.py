"""Order model carrying the chosen delivery or pickup slot."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bakery.db.base import Base


class Order(Base):
    """Storefront order as seen by the fulfillment back-office."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    order_number: Mapped[str | None] = mapped_column(String(16), nullable=True, unique=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    fulfillment_method: Mapped[str] = mapped_column(String(16), nullable=False)
    delivery_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    delivery_time_window: Mapped[str | None] = mapped_column(String(100), nullable=True)
    delivery_address: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    delivery_zip: Mapped[str | None] = mapped_column(String(16), nullable=True)
    delivery_zone_id: Mapped[int | None] = mapped_column(ForeignKey("delivery_zones.id"), nullable=True)
    delivery_fee_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    delivery_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    pickup_location_id: Mapped[int | None] = mapped_column(ForeignKey("pickup_locations.id"), nullable=True)
    pickup_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    pickup_time_window: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pickup_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    status_updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    pickup_location: Mapped[Optional["PickupLocation"]] = relationship("PickupLocation")

    __table_args__ = (
        Index("ix_orders_fulfillment_method", "fulfillment_method"),
        Index("ix_orders_delivery_date", "delivery_date"),
        Index("ix_orders_pickup_date", "pickup_date"),
    )
