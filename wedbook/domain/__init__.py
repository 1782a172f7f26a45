"""Booking lifecycle domain: status registry, records and events."""

from wedbook.domain.booking_state import Actor, BookingStatus
from wedbook.domain.models import Booking, PaymentType, Receipt, TransitionRecord

__all__ = [
    "Actor",
    "Booking",
    "BookingStatus",
    "PaymentType",
    "Receipt",
    "TransitionRecord",
]
