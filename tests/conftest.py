"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from wedbook.domain.booking_state import Actor, BookingStatus
from wedbook.domain.events import EventBus
from wedbook.domain.models import Booking, PaymentType
from wedbook.services.booking_service import BookingService
from wedbook.services.completion_service import CompletionService
from wedbook.services.ledger_service import LedgerService
from wedbook.services.receipt_service import ReceiptService
from wedbook.services.transition_engine import TransitionEngine
from wedbook.stores.memory_store import InMemoryBookingStore

EVENT_DATE = date(2030, 6, 14)
QUOTE = 50_000


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def published() -> list:
    return []


@pytest.fixture
def bus(published) -> EventBus:
    bus = EventBus()
    bus.subscribe(published.append)
    return bus


@pytest.fixture
def engine(store, bus) -> TransitionEngine:
    return TransitionEngine(store, bus)


@pytest.fixture
def bookings(engine) -> BookingService:
    return BookingService(engine)


@pytest.fixture
def receipts(store) -> ReceiptService:
    return ReceiptService(store)


@pytest.fixture
def ledger(engine, receipts) -> LedgerService:
    return LedgerService(engine, receipts)


@pytest.fixture
def completion(engine) -> CompletionService:
    return CompletionService(engine)


@pytest.fixture
def make_booking(bookings, ledger, engine):
    """Create a booking and walk it along the happy path up to a status."""

    async def _make(
        until: BookingStatus = BookingStatus.DRAFT,
        quote: int = QUOTE,
        vendor_id: str = "vendor-1",
        couple_id: str = "couple-1",
    ) -> Booking:
        booking = await bookings.create_booking(couple_id, vendor_id, "photography", EVENT_DATE)
        if until == BookingStatus.DRAFT:
            return booking

        booking = await ledger.set_quote(booking.id, quote)
        if until == BookingStatus.QUOTE_SENT:
            return booking

        booking = await engine.request_transition(
            booking.id, BookingStatus.QUOTE_ACCEPTED, Actor.COUPLE
        )
        if until == BookingStatus.QUOTE_ACCEPTED:
            return booking

        booking, _ = await ledger.record_payment(booking.id, quote, PaymentType.FULL)
        if until == BookingStatus.FULLY_PAID:
            return booking

        booking = await engine.request_transition(booking.id, BookingStatus.IN_PROGRESS, Actor.VENDOR)
        if until == BookingStatus.IN_PROGRESS:
            return booking

        raise ValueError(f"Unsupported fixture status: {until.value}")

    return _make
