"""Booking reporting schemas (read-only)."""

from pydantic import BaseModel


class BookingSummary(BaseModel):
    """Aggregate view of a booking snapshot."""

    status_counts: dict[str, int]
    total_bookings: int
    quoted_bookings: int
    total_revenue: int
    total_collected: int
    total_outstanding: int
    average_booking_value: int
    currency: str = "PHP"


class ReceiptSummary(BaseModel):
    """Receipt counts per payment type."""

    total_receipts: int
    by_payment_type: dict[str, int]
    total_amount: int
    currency: str = "PHP"
