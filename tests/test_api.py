import sys

import pytest
from fastapi.testclient import TestClient

from glamflow.auth import require_admin
from glamflow.main import create_app
from glamflow.services.concierge_service import CONSULTATION_FALLBACK, ConciergeService
from glamflow.store import APPOINTMENTS, CONFIG
from glamflow.store.memory import InMemoryRecordStore

from .conftest import make_appointment

ADMIN_CLAIMS = {"uid": "admin-1", "email": "owner@glamflow.ph", "admin": True}


@pytest.fixture
def api_store():
    return InMemoryRecordStore()


@pytest.fixture
def client(api_store):
    app = create_app(store_factory=lambda: api_store, concierge=ConciergeService(api_key=None))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    client.app.dependency_overrides[require_admin] = lambda: ADMIN_CLAIMS
    yield client
    client.app.dependency_overrides.clear()


def settle(client: TestClient):
    client.portal.call(client.app.state.sync.settle)


def write(client: TestClient, store, collection, doc_id, data):
    client.portal.call(store.set_document, collection, doc_id, data)
    settle(client)


BOOKING = {
    "serviceId": "s1",
    "staffId": "st1",
    "date": "2025-03-10",
    "time": "10:00 AM",
    "clientName": "Ana Reyes",
    "clientPhone": "09171234567",
    "paymentMethod": "GCASH",
    "referenceCode": "GC123456",
}


def test_health_reports_mirror_state(client):
    settle(client)
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["connected"] is True
    assert "appointments" in response.json()["synced"]
    assert "appointments" in response.json()["lastChange"]


def test_catalog_defaults(client):
    services = client.get("/catalog/services").json()
    settings = client.get("/catalog/settings").json()

    assert len(services) == 10
    assert services[0]["name"] == "Signature Haircut"
    assert len(client.get("/catalog/staff").json()) == 6
    assert settings["siteName"] == "GlamFlow"
    assert settings["acceptingBookings"] is True
    assert client.get("/catalog/promo").json()["message"]


def test_availability_endpoint(client, api_store):
    write(client, api_store, APPOINTMENTS, "GLAM-AB12CD", make_appointment().to_document())

    response = client.get("/availability", params={"staff_id": "st1", "date": "2025-03-10"})

    slots = {s["time"]: s["state"] for s in response.json()["slots"]}
    assert slots["10:00 AM"] == "BOOKED"
    assert slots["12:00 PM"] == "BLOCKED"
    assert slots["09:00 AM"] == "AVAILABLE"


def test_availability_rejects_bad_date(client):
    response = client.get("/availability", params={"staff_id": "st1", "date": "tomorrow"})

    assert response.status_code == 400


@pytest.mark.skipif(sys.version_info < (3, 11), reason="compact ISO dates parse from 3.11")
def test_availability_folds_date_spelling(client, api_store):
    write(client, api_store, APPOINTMENTS, "GLAM-AB12CD", make_appointment().to_document())

    response = client.get("/availability", params={"staff_id": "st1", "date": "20250310"})

    assert response.json()["date"] == "2025-03-10"
    slots = {s["time"]: s["state"] for s in response.json()["slots"]}
    assert slots["10:00 AM"] == "BOOKED"


def test_booking_without_reference_code_is_refused(client):
    gcash = client.post("/bookings", json={**BOOKING, "referenceCode": ""})
    cash = client.post(
        "/bookings", json={**BOOKING, "paymentMethod": "CASH", "referenceCode": None}
    )

    assert gcash.status_code == 422
    assert gcash.json()["detail"] == "Please enter your payment reference code"
    assert cash.status_code == 201


def test_booking_flow(client, admin_client):
    created = client.post("/bookings", json=BOOKING)
    assert created.status_code == 201
    body = created.json()
    booking_id = body["appointment"]["id"]
    assert body["appointment"]["status"] == "PENDING"
    assert body["appointment"]["totalAmount"] == 850
    assert body["appointment"]["serviceName"] == "Signature Haircut"
    assert body["appointment"]["staffName"] == "Maria Santos"
    assert "Signature Haircut" in body["confirmationMessage"]
    settle(client)

    conflict = client.post("/bookings", json={**BOOKING, "clientName": "Someone Else"})
    assert conflict.status_code == 409

    confirmed = admin_client.patch(
        f"/admin/bookings/{booking_id}/status", json={"status": "CONFIRMED"}
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "CONFIRMED"

    back = admin_client.patch(f"/admin/bookings/{booking_id}/status", json={"status": "PENDING"})
    assert back.status_code == 409

    tracked = client.get("/tracking/gc123456")
    assert tracked.status_code == 200
    assert tracked.json()["appointment"]["id"] == booking_id
    assert tracked.json()["source"] in ("Local Cache", "Cloud Database")


def test_booking_validation_errors(client):
    missing_name = client.post("/bookings", json={**BOOKING, "clientName": ""})
    lunch = client.post("/bookings", json={**BOOKING, "time": "12:00 PM"})
    bad_phone = client.post("/bookings", json={**BOOKING, "clientPhone": "12"})

    assert missing_name.status_code == 422
    assert missing_name.json()["detail"] == "Please enter your name"
    assert lunch.status_code == 409
    assert bad_phone.status_code == 422


def test_booking_closed_during_maintenance(client, api_store):
    write(client, api_store, CONFIG, "siteSettings", {"maintenanceMode": True})

    response = client.post("/bookings", json=BOOKING)

    assert response.status_code == 503
    assert client.get("/catalog/settings").json()["acceptingBookings"] is False


def test_tracking_not_found(client):
    response = client.get("/tracking/GLAM-NOPE00")

    assert response.status_code == 404
    assert response.json()["detail"] == "Booking not found. Please check your Reference ID."


def test_tracking_store_offline(client, api_store):
    api_store.offline = True

    response = client.get("/tracking/GLAM-NOPE00")

    assert response.status_code == 503


def test_portal_history(client, api_store):
    write(
        client, api_store, APPOINTMENTS, "GLAM-PAST01",
        make_appointment(id="GLAM-PAST01", date="2020-01-10").to_document(),
    )
    write(
        client, api_store, APPOINTMENTS, "GLAM-NEXT01",
        make_appointment(id="GLAM-NEXT01", date="2999-01-10").to_document(),
    )
    write(
        client, api_store, APPOINTMENTS, "GLAM-CANC01",
        make_appointment(id="GLAM-CANC01", date="2999-02-10", status="CANCELLED").to_document(),
    )

    history = client.get("/bookings/portal/09171234567").json()

    assert [a["id"] for a in history["upcoming"]] == ["GLAM-NEXT01"]
    assert [a["id"] for a in history["past"]] == ["GLAM-CANC01", "GLAM-PAST01"]


def test_feedback_endpoint(client, api_store):
    write(
        client, api_store, APPOINTMENTS, "GLAM-PAST01",
        make_appointment(id="GLAM-PAST01", date="2020-01-10").to_document(),
    )

    response = client.post(
        "/bookings/GLAM-PAST01/feedback",
        json={"clientPhone": "09171234567", "rating": 4, "feedback": "Great cut"},
    )

    assert response.status_code == 200
    assert response.json()["rating"] == 4


def test_admin_routes_require_token(client):
    assert client.get("/admin/bookings/stats").status_code in (401, 403)
    assert client.put("/catalog/promo", json={"message": "hi"}).status_code in (401, 403)


def test_admin_block_day_view_stats_and_delete(admin_client):
    block = admin_client.post(
        "/admin/bookings/blocks", json={"staffId": "st3", "date": "2025-03-10", "time": "03:00 PM"}
    )
    assert block.status_code == 201
    block_id = block.json()["id"]
    assert block_id.startswith("BLK-")
    settle(admin_client)

    day = admin_client.get("/admin/bookings", params={"date": "2025-03-10"}).json()
    assert [a["id"] for a in day] == [block_id]
    assert day[0]["serviceName"] == "Unknown"

    stats = admin_client.get("/admin/bookings/stats").json()
    assert stats["confirmedCount"] == 1
    assert stats["totalRevenue"] == 0
    assert len(stats["chart"]) == 7

    assert admin_client.delete(f"/admin/bookings/{block_id}").status_code == 200
    assert admin_client.delete(f"/admin/bookings/{block_id}").status_code == 404


def test_admin_updates_promo(admin_client):
    response = admin_client.put("/catalog/promo", json={"message": "Summer glow sale"})
    settle(admin_client)

    assert response.json() == {"message": "Summer glow sale"}
    assert admin_client.get("/catalog/promo").json() == {"message": "Summer glow sale"}


def test_concierge_falls_back_without_key(client):
    response = client.post("/concierge/consult", json={"message": "I need to relax"})

    assert response.status_code == 200
    assert response.json() == {"reply": CONSULTATION_FALLBACK}
