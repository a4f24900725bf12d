"""Application models package."""

from bakery.models.delivery import (
    DeliveryCalendarClosure,
    DeliveryOneOffDate,
    DeliverySchedule,
    DeliveryZone,
    PickupLocation,
    ProductDeliveryRules,
)
from bakery.models.order import Order

__all__ = [
    "DeliverySchedule", "PickupLocation", "DeliveryCalendarClosure", "DeliveryOneOffDate", "DeliveryZone",
    "ProductDeliveryRules", "Order",
]
