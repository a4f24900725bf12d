"""Storefront fulfillment endpoint tests."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bakery.api.v1.endpoints import fulfillment
from bakery.models import DeliveryCalendarClosure, DeliverySchedule, DeliveryZone, PickupLocation, ProductDeliveryRules
from bakery.utils import time as time_utils

MONDAY_MORNING = datetime(2026, 10, 19, 10, 0, tzinfo=ZoneInfo("America/Boise"))


@pytest.fixture(autouse=True)
def frozen_clock(monkeypatch) -> None:
    monkeypatch.setattr(fulfillment, "_current_business_time", lambda: MONDAY_MORNING)


def _seed_settings(testing_session_local) -> int:
    session: Session = testing_session_local()
    try:
        session.add_all(
            [
                DeliverySchedule(
                    name="Thursday delivery",
                    day_of_week=4,
                    cutoff_day=2,
                    cutoff_time="23:59",
                    lead_time_days=2,
                    delivery_time_window="14:00-18:00",
                ),
                DeliverySchedule(name="Saturday delivery", day_of_week=6, cutoff_day=2, cutoff_time="23:59"),
                DeliveryZone(name="Downtown", zip_codes=["83702"], fee_cents=800, priority=5),
                ProductDeliveryRules(product_id="sourdough", allowed_delivery_days=[6]),
            ]
        )
        location = PickupLocation(
            name="Uptown",
            address="5 Hill Rd",
            pickup_days=[3, 6],
            pickup_time_windows="08:00-12:00",
            instructions="Ring the bell",
        )
        session.add(location)
        session.commit()
        return location.id
    finally:
        session.close()


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_windows_endpoint_runs_the_calculator(client: TestClient) -> None:
    response = client.get(
        "/api/v1/fulfillment/windows",
        params={
            "cutoff_day": 2,
            "cutoff_time": "23:59",
            "lead_time_days": 2,
            "fulfillment_days": [4, 6],
            "now": "2026-10-21T08:00:00-06:00",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert [window["fulfillment_date"] for window in body] == ["2026-10-29", "2026-10-31"]
    assert all(window["meets_lead_time"] for window in body)


def test_windows_endpoint_defaults_to_current_business_time(client: TestClient) -> None:
    response = client.get("/api/v1/fulfillment/windows", params={"fulfillment_days": [4]})

    assert response.status_code == 200
    assert response.json()[0]["fulfillment_date"] == "2026-10-22"


@pytest.mark.parametrize(
    "params",
    [
        {"cutoff_day": 9},
        {"cutoff_time": "25:00"},
        {"lead_time_days": -1},
        {"fulfillment_days": [7]},
    ],
)
def test_windows_endpoint_rejects_invalid_input(client: TestClient, params: dict) -> None:
    response = client.get("/api/v1/fulfillment/windows", params={"fulfillment_days": [4], **params})

    assert response.status_code == 400


def test_delivery_options_include_fee_and_respect_closures(client: TestClient, testing_session_local) -> None:
    _seed_settings(testing_session_local)
    session: Session = testing_session_local()
    try:
        session.add(DeliveryCalendarClosure(closure_date="2026-10-24", reason="Inventory"))
        session.commit()
    finally:
        session.close()

    response = client.get("/api/v1/fulfillment/delivery-options", params={"zip_code": "83702"})

    assert response.status_code == 200
    body = response.json()
    assert body["available"] is True
    assert [option["delivery_date"] for option in body["delivery_dates"]] == ["2026-10-22"]
    assert body["delivery_dates"][0]["schedule_name"] == "Thursday delivery"
    assert (body["fee_cents"], body["zone_name"]) == (800, "Downtown")


def test_delivery_options_filter_by_product(client: TestClient, testing_session_local) -> None:
    _seed_settings(testing_session_local)

    response = client.get("/api/v1/fulfillment/delivery-options", params={"product_id": "sourdough"})

    assert [option["delivery_date"] for option in response.json()["delivery_dates"]] == ["2026-10-24"]


def test_pickup_options_and_location_dates(client: TestClient, testing_session_local) -> None:
    location_id = _seed_settings(testing_session_local)

    options = client.get("/api/v1/fulfillment/pickup-options").json()
    dates = client.get(f"/api/v1/fulfillment/pickup-locations/{location_id}/dates", params={"max_dates": 1})

    assert options["available"] is True
    assert options["locations"][0]["pickup_date"] == "2026-10-21"
    assert options["locations"][0]["instructions"] == "Ring the bell"
    assert dates.status_code == 200
    assert [item["pickup_date"] for item in dates.json()] == ["2026-10-21"]
    assert dates.json()[0]["cutoff_at"] is None


def test_pickup_dates_for_unknown_location_is_404(client: TestClient) -> None:
    assert client.get("/api/v1/fulfillment/pickup-locations/404/dates").status_code == 404


def test_delivery_fee_endpoint(client: TestClient, testing_session_local) -> None:
    _seed_settings(testing_session_local)

    inside = client.get("/api/v1/fulfillment/delivery-fee", params={"zip_code": "83702"}).json()
    outside = client.get("/api/v1/fulfillment/delivery-fee", params={"zip_code": "99999"}).json()
    pickup = client.get(
        "/api/v1/fulfillment/delivery-fee",
        params={"zip_code": "83702", "fulfillment_method": "pickup"},
    ).json()

    assert inside["fee_cents"] == 800
    assert outside["fee_cents"] == 0
    assert outside["adjustments"] == [{"reason": "ZIP code not in delivery zones", "amount_cents": 0}]
    assert pickup["fee_cents"] == 0


def test_unavailable_timezone_returns_500(client: TestClient, monkeypatch) -> None:
    def _broken_clock():
        raise time_utils.TimezoneUnavailableError("Timezone 'America/Boise' is not available")

    monkeypatch.setattr(fulfillment, "_current_business_time", _broken_clock)

    response = client.get("/api/v1/fulfillment/windows", params={"fulfillment_days": [4]})

    assert response.status_code == 500
    assert response.json() == {"detail": "Business timezone unavailable"}
