from __future__ import annotations

from uuid import UUID

from wedbook.core.exceptions import (
    DuplicatePayment,
    NotFoundError,
    ReceiptNumberConflict,
    StaleState,
)
from wedbook.domain.booking_state import BookingStatus
from wedbook.domain.models import Booking, Receipt, TransitionRecord
from wedbook.stores.interfaces import BookingStore


class InMemoryBookingStore(BookingStore):
    """Process-local store for development and tests.

    Writes are applied immediately, so commit() and rollback() are no-ops.
    None of the methods suspend, which makes each compare-and-swap atomic
    on a single event loop.
    """

    def __init__(self) -> None:
        self._bookings: dict[UUID, Booking] = {}
        self._receipts: list[Receipt] = []
        self._receipts_by_key: dict[str, Receipt] = {}
        self._receipts_by_number: dict[str, Receipt] = {}
        self._history: dict[UUID, list[TransitionRecord]] = {}

    async def load_booking(self, booking_id: UUID) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def add_booking(self, booking: Booking) -> Booking:
        self._bookings[booking.id] = booking
        return booking

    async def save_booking(
        self,
        booking: Booking,
        expected_status: BookingStatus,
        expected_total_paid: int,
    ) -> Booking:
        stored = await self.load_booking(booking.id)
        if stored.status != expected_status or stored.total_paid != expected_total_paid:
            raise StaleState(str(booking.id), expected_status.value, stored.status.value)
        self._bookings[booking.id] = booking
        return booking

    async def list_bookings(
        self,
        couple_id: str | None = None,
        vendor_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        bookings = [
            b
            for b in self._bookings.values()
            if (couple_id is None or b.couple_id == couple_id)
            and (vendor_id is None or b.vendor_id == vendor_id)
            and (status is None or b.status == status)
        ]
        return sorted(bookings, key=lambda b: b.created_at)

    async def append_receipt(self, receipt: Receipt) -> Receipt:
        if receipt.payment_key in self._receipts_by_key:
            raise DuplicatePayment(receipt.payment_key)
        if receipt.receipt_number in self._receipts_by_number:
            raise ReceiptNumberConflict(receipt.receipt_number)
        self._receipts.append(receipt)
        self._receipts_by_key[receipt.payment_key] = receipt
        self._receipts_by_number[receipt.receipt_number] = receipt
        return receipt

    async def get_receipt(self, receipt_id: UUID) -> Receipt | None:
        return next((r for r in self._receipts if r.id == receipt_id), None)

    async def get_receipt_by_number(self, receipt_number: str) -> Receipt | None:
        return self._receipts_by_number.get(receipt_number)

    async def get_receipt_by_payment_key(self, payment_key: str) -> Receipt | None:
        return self._receipts_by_key.get(payment_key)

    async def list_receipts(self, booking_id: UUID | None = None) -> list[Receipt]:
        return [r for r in self._receipts if booking_id is None or r.booking_id == booking_id]

    async def append_transition(self, record: TransitionRecord) -> None:
        self._history.setdefault(record.booking_id, []).append(record)

    async def list_transitions(self, booking_id: UUID) -> list[TransitionRecord]:
        return list(self._history.get(booking_id, []))

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass
