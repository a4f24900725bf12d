import pytest

from bakery.models import Order, PickupLocation
from bakery.services.pdf_exports import (
    group_pickups_by_location,
    render_fulfillment_sheet_pdf,
    sanitize_filename,
    serialize_order_for_sheet,
)


def _sample_rows():
    return [
        {
            "id": 1,
            "order_number": "A-100",
            "customer_name": "Zoë Nuñez",
            "fulfillment_method": "delivery",
            "address": "12 Elm St",
            "zip": "83702",
            "time_window": "14:00-18:00",
            "status": "confirmed",
            "total_cents": 4250,
        },
        {
            "id": 2,
            "customer_name": "Ben",
            "fulfillment_method": "pickup",
            "location_name": "Uptown",
            "time_window": "08:00-12:00",
            "notes": None,
        },
        {
            "id": 3,
            "customer_name": "Cy",
            "fulfillment_method": "pickup",
            "location_name": "airport kiosk",
        },
    ]


def test_group_pickups_by_location_sorts_names() -> None:
    grouped = group_pickups_by_location(_sample_rows())

    assert list(grouped) == ["airport kiosk", "Uptown"]
    assert sum(len(items) for items in grouped.values()) == 2


def test_render_fulfillment_sheet_returns_pdf_bytes() -> None:
    pytest.importorskip("reportlab")

    pdf = render_fulfillment_sheet_pdf(_sample_rows(), {"date": "2026-10-22", "generated_at": "now"})

    assert pdf.startswith(b"%PDF")


def test_render_fulfillment_sheet_handles_empty_day() -> None:
    pytest.importorskip("reportlab")

    assert render_fulfillment_sheet_pdf([], {"date": "2026-10-23"}).startswith(b"%PDF")


def test_serialize_order_for_sheet_picks_method_specific_fields() -> None:
    delivery = Order(
        id=7,
        customer_name="Ada",
        fulfillment_method="delivery",
        delivery_address="1 Main St",
        delivery_zip="83702",
        delivery_time_window="09:00-12:00",
        pickup_time_window="ignored",
        total_cents=1200,
    )
    pickup = Order(id=8, customer_name="Ben", fulfillment_method="pickup", pickup_status="ready_for_pickup")
    pickup.pickup_location = PickupLocation(name="Uptown", address="2 Oak", pickup_time_windows="all day")

    delivery_row = serialize_order_for_sheet(delivery)
    pickup_row = serialize_order_for_sheet(pickup)

    assert delivery_row["address"] == "1 Main St"
    assert delivery_row["time_window"] == "09:00-12:00"
    assert delivery_row["status"] == "pending"
    assert pickup_row["location_name"] == "Uptown"
    assert pickup_row["status"] == "ready_for_pickup"
    assert pickup_row["address"] is None


def test_sanitize_filename() -> None:
    assert sanitize_filename("fulfillment 2026/10/22") == "fulfillment_2026_10_22"
    assert sanitize_filename("  ") == "sheet"
