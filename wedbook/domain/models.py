"""Domain records for the booking lifecycle.

Plain frozen dataclasses; ORM rows live in wedbook/models and are mapped
to and from these by the SQL store.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from wedbook.domain.booking_state import Actor, BookingStatus


def utcnow() -> datetime:
    return datetime.now(UTC)


class PaymentType(str, Enum):
    DEPOSIT = "deposit"
    BALANCE = "balance"
    FULL = "full"


@dataclass(frozen=True)
class Booking:
    """A single couple-vendor service engagement.

    Money fields are integer centavos.
    """

    couple_id: str
    vendor_id: str
    service_type: str
    event_date: date
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    status: BookingStatus = BookingStatus.DRAFT
    currency: str = "PHP"
    quoted_amount: int | None = None
    total_paid: int = 0
    vendor_completed: bool = False
    vendor_completed_at: datetime | None = None
    couple_completed: bool = False
    couple_completed_at: datetime | None = None
    completion_notes: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def total_amount(self) -> int:
        return self.quoted_amount or 0

    @property
    def remaining_balance(self) -> int:
        return self.total_amount - self.total_paid

    @property
    def is_fully_paid(self) -> bool:
        return self.quoted_amount is not None and self.total_paid == self.quoted_amount

    @property
    def payment_progress(self) -> int:
        """Percentage of the quote paid so far, rounded down."""
        if not self.quoted_amount:
            return 0
        return self.total_paid * 100 // self.quoted_amount

    @property
    def both_completed(self) -> bool:
        return self.vendor_completed and self.couple_completed

    @property
    def waiting_for(self) -> str | None:
        """Which party still has to confirm completion."""
        if self.both_completed:
            return None
        if self.vendor_completed:
            return "couple"
        if self.couple_completed:
            return "vendor"
        return "both"

    def evolve(self, **changes: Any) -> Booking:
        return replace(self, **changes)


@dataclass(frozen=True)
class Receipt:
    """Immutable proof of one payment event."""

    booking_id: uuid.UUID
    receipt_number: str
    amount: int
    payment_type: PaymentType
    payment_key: str
    currency: str = "PHP"
    payment_method: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    issued_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class TransitionRecord:
    """One applied edge in a booking's status history."""

    booking_id: uuid.UUID
    from_status: BookingStatus
    to_status: BookingStatus
    actor: Actor
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
