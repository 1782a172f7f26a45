"""HTTP layer tests through FastAPI's TestClient (in-memory store)."""

import logging
import uuid

import pytest
from fastapi.testclient import TestClient

from wedbook.api.deps import get_booking_store
from wedbook.main import app
from wedbook.stores.memory_store import InMemoryBookingStore

BOOKINGS = "/api/v1/bookings"

COUPLE = {"X-Actor-Role": "couple"}
VENDOR = {"X-Actor-Role": "vendor"}


@pytest.fixture
def client():
    store = InMemoryBookingStore()
    app.dependency_overrides[get_booking_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client) -> dict:
    response = client.post(
        f"{BOOKINGS}/",
        json={
            "couple_id": "couple-1",
            "vendor_id": "vendor-1",
            "service_type": "photography",
            "event_date": "2030-06-14",
        },
        headers=COUPLE,
    )
    assert response.status_code == 201
    return response.json()


def _accepted(client, quote: int = 50_000) -> str:
    booking_id = _create(client)["id"]
    assert client.post(f"{BOOKINGS}/{booking_id}/quote", json={"amount": quote}, headers=VENDOR).status_code == 200
    response = client.post(
        f"{BOOKINGS}/{booking_id}/transition",
        json={"target_status": "quote_accepted"},
        headers=COUPLE,
    )
    assert response.status_code == 200
    return booking_id


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestBookingFlow:
    """Full lifecycle over HTTP."""

    def test_quote_pay_complete(self, client):
        booking_id = _accepted(client)

        deposit = client.post(
            f"{BOOKINGS}/{booking_id}/payments",
            json={"amount": 20_000, "payment_type": "deposit", "payment_method": "gcash"},
            headers=COUPLE,
        )
        assert deposit.status_code == 201
        assert deposit.json()["booking"]["status"] == "downpayment_paid"
        assert deposit.json()["receipt"]["receipt_number"].startswith("RCP-")

        balance = client.post(
            f"{BOOKINGS}/{booking_id}/payments",
            json={"amount": 30_000, "payment_type": "balance"},
            headers=COUPLE,
        )
        assert balance.json()["booking"]["status"] == "fully_paid"
        assert balance.json()["booking"]["payment_progress"] == 100

        started = client.post(
            f"{BOOKINGS}/{booking_id}/transition",
            json={"target_status": "in_progress", "expected_status": "fully_paid"},
            headers=VENDOR,
        )
        assert started.json()["status"] == "in_progress"

        vendor_done = client.post(
            f"{BOOKINGS}/{booking_id}/mark-completed", json={"notes": "Delivered"}, headers=VENDOR
        )
        assert vendor_done.json()["status"] == "vendor_completed"

        status = client.get(f"{BOOKINGS}/{booking_id}/completion-status").json()
        assert status["waiting_for"] == "couple"
        assert status["completion_notes"] == "Delivered"

        couple_done = client.post(f"{BOOKINGS}/{booking_id}/mark-completed", json={}, headers=COUPLE)
        assert couple_done.json()["status"] == "completed"

        history = client.get(f"{BOOKINGS}/{booking_id}/history").json()
        assert [h["to_status"] for h in history] == [
            "quote_requested",
            "quote_sent",
            "quote_accepted",
            "downpayment_paid",
            "fully_paid",
            "in_progress",
            "vendor_completed",
            "completed",
        ]

        receipts = client.get(f"{BOOKINGS}/{booking_id}/receipts").json()
        assert [r["amount"] for r in receipts] == [20_000, 30_000]

        summary = client.get(f"{BOOKINGS}/{booking_id}/payments").json()
        assert summary["remaining_balance"] == 0
        assert len(summary["receipts"]) == 2

    def test_payment_replay(self, client):
        booking_id = _accepted(client)
        body = {"amount": 20_000, "payment_type": "deposit", "idempotency_key": "pm_123"}

        first = client.post(f"{BOOKINGS}/{booking_id}/payments", json=body, headers=COUPLE)
        second = client.post(f"{BOOKINGS}/{booking_id}/payments", json=body, headers=COUPLE)

        assert first.json()["receipt"]["id"] == second.json()["receipt"]["id"]
        assert second.json()["booking"]["total_paid"] == 20_000

    def test_list_and_filter(self, client):
        _create(client)
        _accepted(client)

        response = client.get(f"{BOOKINGS}/", params={"status": "quote_accepted"})
        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_amend_event_date(self, client):
        booking_id = _create(client)["id"]
        response = client.patch(
            f"{BOOKINGS}/{booking_id}/event-date", json={"event_date": "2030-07-01"}, headers=COUPLE
        )
        assert response.status_code == 200
        assert response.json()["event_date"] == "2030-07-01"


class TestErrorMapping:
    """Core errors map to HTTP status codes."""

    def test_unknown_booking(self, client):
        response = client.get(f"{BOOKINGS}/{uuid.uuid4()}")
        assert response.status_code == 404

    def test_invalid_transition(self, client):
        booking_id = _create(client)["id"]
        response = client.post(
            f"{BOOKINGS}/{booking_id}/transition", json={"target_status": "completed"}, headers=COUPLE
        )
        assert response.status_code == 409
        assert response.json()["error"] == "InvalidTransition"

    def test_wrong_actor(self, client):
        booking_id = _create(client)["id"]
        client.post(f"{BOOKINGS}/{booking_id}/quote", json={"amount": 50_000}, headers=VENDOR)
        response = client.post(
            f"{BOOKINGS}/{booking_id}/transition", json={"target_status": "quote_accepted"}, headers=VENDOR
        )
        assert response.status_code == 403

    def test_stale_expected_status(self, client):
        booking_id = _create(client)["id"]
        response = client.post(
            f"{BOOKINGS}/{booking_id}/transition",
            json={"target_status": "quote_requested", "expected_status": "quote_sent"},
            headers=COUPLE,
        )
        assert response.status_code == 409
        assert response.json()["error"] == "StaleState"

    def test_overpayment(self, client):
        booking_id = _accepted(client, quote=50_000)
        response = client.post(
            f"{BOOKINGS}/{booking_id}/payments",
            json={"amount": 60_000, "payment_type": "deposit"},
            headers=COUPLE,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "OverPayment"
        assert client.get(f"{BOOKINGS}/{booking_id}").json()["total_paid"] == 0

    def test_unknown_status(self, client):
        booking_id = _create(client)["id"]
        response = client.post(
            f"{BOOKINGS}/{booking_id}/transition", json={"target_status": "archived"}, headers=COUPLE
        )
        assert response.status_code == 422

    def test_missing_actor_header(self, client):
        booking_id = _create(client)["id"]
        response = client.post(f"{BOOKINGS}/{booking_id}/transition", json={"target_status": "quote_requested"})
        assert response.status_code == 422

    def test_unknown_actor(self, client):
        booking_id = _create(client)["id"]
        response = client.post(
            f"{BOOKINGS}/{booking_id}/transition",
            json={"target_status": "quote_requested"},
            headers={"X-Actor-Role": "admin"},
        )
        assert response.status_code == 422


class TestRequestLogging:
    """Write requests are logged with the acting party."""

    def test_logs_actor_for_writes(self, client, caplog):
        booking_id = _create(client)["id"]

        with caplog.at_level(logging.INFO, logger="wedbook.core.middleware"):
            response = client.post(
                f"{BOOKINGS}/{booking_id}/quote",
                json={"amount": 50_000},
                headers={**VENDOR, "X-Request-ID": "req-42"},
            )

        assert response.headers["X-Request-ID"] == "req-42"
        messages = [r.getMessage() for r in caplog.records if r.name == "wedbook.core.middleware"]
        assert any(
            "POST" in m and "-> 200" in m and "actor=vendor" in m and "request_id=req-42" in m
            for m in messages
        )

    def test_conflict_logged_as_warning(self, client, caplog):
        booking_id = _create(client)["id"]

        with caplog.at_level(logging.INFO, logger="wedbook.core.middleware"):
            client.post(
                f"{BOOKINGS}/{booking_id}/transition", json={"target_status": "completed"}, headers=COUPLE
            )

        warnings = [
            r.getMessage()
            for r in caplog.records
            if r.name == "wedbook.core.middleware" and r.levelno == logging.WARNING
        ]
        assert any("Booking conflict" in m and "actor=couple" in m for m in warnings)


class TestReports:
    def test_booking_summary(self, client):
        booking_id = _accepted(client, quote=50_000)
        client.post(
            f"{BOOKINGS}/{booking_id}/payments",
            json={"amount": 20_000, "payment_type": "deposit"},
            headers=COUPLE,
        )

        summary = client.get("/api/v1/reports/bookings/summary").json()
        assert summary["total_bookings"] == 1
        assert summary["total_revenue"] == 50_000
        assert summary["total_collected"] == 20_000
        assert summary["status_counts"]["downpayment_paid"] == 1
        assert len(summary["status_counts"]) == 16

    def test_summary_text(self, client):
        response = client.get("/api/v1/reports/bookings/summary.txt")
        assert response.status_code == 200
        assert response.text.startswith("Booking Summary")

    def test_receipt_summary(self, client):
        response = client.get("/api/v1/reports/receipts/summary")
        assert response.status_code == 200
        assert response.json()["total_receipts"] == 0
