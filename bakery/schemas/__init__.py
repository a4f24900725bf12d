"""Schema exports."""

from bakery.schemas.delivery import (
    CalendarClosureCreate,
    CalendarClosureRead,
    DeliveryDateOption,
    DeliveryFeeAdjustment,
    DeliveryFeeResponse,
    DeliveryOptionsResponse,
    DeliveryScheduleCreate,
    DeliveryScheduleRead,
    DeliveryZoneCreate,
    DeliveryZoneRead,
    FulfillmentWindowRead,
    OneOffDateCreate,
    OneOffDateRead,
    PickupDateOption,
    PickupLocationCreate,
    PickupLocationOption,
    PickupLocationRead,
    PickupOptionsResponse,
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

__all__ = [
    "CalendarClosureCreate",
    "CalendarClosureRead",
    "DeliveryDateOption",
    "DeliveryFeeAdjustment",
    "DeliveryFeeResponse",
    "DeliveryOptionsResponse",
    "DeliveryScheduleCreate",
    "DeliveryScheduleRead",
    "DeliveryZoneCreate",
    "DeliveryZoneRead",
    "FulfillmentWindowRead",
    "OneOffDateCreate",
    "OneOffDateRead",
    "PickupDateOption",
    "PickupLocationCreate",
    "PickupLocationOption",
    "PickupLocationRead",
    "PickupOptionsResponse",
    "ProductDeliveryRulesRead",
    "ProductDeliveryRulesUpsert",
    "BatchDeliveryStatusUpdate",
    "DeliveryStatusUpdate",
    "FulfillmentDayOrders",
    "FulfillmentOrdersResponse",
    "OrderFulfillmentRead",
    "PickupLocationOrders",
    "PickupStatusUpdate",
    "StatusChangeResponse",
]
