"""Database models."""

from wedbook.models.booking import BookingRecord, BookingStatusHistory
from wedbook.models.receipt import ReceiptRecord

__all__ = [
    # Booking
    "BookingRecord",
    "BookingStatusHistory",
    # Receipt
    "ReceiptRecord",
]
