"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Writes made through a
store become durable on commit(); everything between two commits is one
unit of work.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from wedbook.domain.booking_state import BookingStatus
from wedbook.domain.models import Booking, Receipt, TransitionRecord


class BookingStore(ABC):
    """Interface for booking, receipt and history persistence."""

    @abstractmethod
    async def load_booking(self, booking_id: UUID) -> Booking:
        """Return a booking by ID.

        Raises:
            NotFoundError: If the booking does not exist.
        """
        ...

    @abstractmethod
    async def add_booking(self, booking: Booking) -> Booking:
        """Insert a new booking."""
        ...

    @abstractmethod
    async def save_booking(
        self,
        booking: Booking,
        expected_status: BookingStatus,
        expected_total_paid: int,
    ) -> Booking:
        """Compare-and-swap write of a booking.

        The write applies only if the stored row still has expected_status
        and expected_total_paid.

        Raises:
            StaleState: If the stored booking changed since it was read.
            NotFoundError: If the booking does not exist.
        """
        ...

    @abstractmethod
    async def list_bookings(
        self,
        couple_id: str | None = None,
        vendor_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Return bookings matching the filters, oldest first."""
        ...

    @abstractmethod
    async def append_receipt(self, receipt: Receipt) -> Receipt:
        """Insert a receipt.

        Raises:
            DuplicatePayment: If a receipt already exists for the payment key.
            ReceiptNumberConflict: If the receipt number is already taken.
        """
        ...

    @abstractmethod
    async def get_receipt(self, receipt_id: UUID) -> Receipt | None:
        ...

    @abstractmethod
    async def get_receipt_by_number(self, receipt_number: str) -> Receipt | None:
        ...

    @abstractmethod
    async def get_receipt_by_payment_key(self, payment_key: str) -> Receipt | None:
        ...

    @abstractmethod
    async def list_receipts(self, booking_id: UUID | None = None) -> list[Receipt]:
        """Return receipts in issue order, optionally for one booking."""
        ...

    @abstractmethod
    async def append_transition(self, record: TransitionRecord) -> None:
        ...

    @abstractmethod
    async def list_transitions(self, booking_id: UUID) -> list[TransitionRecord]:
        """Return a booking's status history, oldest first."""
        ...

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
