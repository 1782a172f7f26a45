"""Booking reporting (read-only).

The summarize_* functions are pure over a snapshot; ReportingService only
loads the snapshot.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from wedbook.config import settings
from wedbook.domain.booking_state import BookingStatus
from wedbook.domain.models import Booking, PaymentType, Receipt
from wedbook.stores.interfaces import BookingStore


def summarize_bookings(bookings: Iterable[Booking], currency: str | None = None) -> dict:
    """Aggregate a booking snapshot.

    Revenue counts quoted amounts; collected counts total paid. The average
    booking value is taken over quoted bookings only and rounded half-up to
    a whole centavo.
    """
    status_counts = {status.value: 0 for status in BookingStatus}
    total_bookings = 0
    quoted_bookings = 0
    total_revenue = 0
    total_collected = 0

    for booking in bookings:
        total_bookings += 1
        status_counts[booking.status.value] += 1
        total_collected += booking.total_paid
        if booking.quoted_amount is not None:
            quoted_bookings += 1
            total_revenue += booking.quoted_amount

    average_booking_value = 0
    if quoted_bookings:
        average_booking_value = int(
            (Decimal(total_revenue) / Decimal(quoted_bookings)).quantize(
                Decimal("1"), rounding=ROUND_HALF_UP
            )
        )

    return {
        "status_counts": status_counts,
        "total_bookings": total_bookings,
        "quoted_bookings": quoted_bookings,
        "total_revenue": total_revenue,
        "total_collected": total_collected,
        "total_outstanding": total_revenue - total_collected,
        "average_booking_value": average_booking_value,
        "currency": currency or settings.default_currency,
    }


def _format_amount(centavos: int, currency: str) -> str:
    return f"{currency} {Decimal(centavos) / 100:,.2f}"


def render_summary_text(summary: dict) -> str:
    """Render a booking summary as a fixed-layout text report."""
    currency = summary["currency"]
    lines = [
        "Booking Summary",
        "===============",
        f"Total bookings: {summary['total_bookings']}",
        f"Quoted bookings: {summary['quoted_bookings']}",
        "",
        "By status:",
    ]
    width = max(len(status) for status in summary["status_counts"])
    for status, count in summary["status_counts"].items():
        lines.append(f"  {status.ljust(width)}  {count}")
    lines += [
        "",
        f"Total revenue: {_format_amount(summary['total_revenue'], currency)}",
        f"Total collected: {_format_amount(summary['total_collected'], currency)}",
        f"Total outstanding: {_format_amount(summary['total_outstanding'], currency)}",
        f"Average booking value: {_format_amount(summary['average_booking_value'], currency)}",
    ]
    return "\n".join(lines) + "\n"


def summarize_receipts(receipts: Iterable[Receipt], currency: str | None = None) -> dict:
    """Count receipts per payment type and total their amounts."""
    by_type = {payment_type.value: 0 for payment_type in PaymentType}
    total_receipts = 0
    total_amount = 0

    for receipt in receipts:
        total_receipts += 1
        by_type[receipt.payment_type.value] += 1
        total_amount += receipt.amount

    return {
        "total_receipts": total_receipts,
        "by_payment_type": by_type,
        "total_amount": total_amount,
        "currency": currency or settings.default_currency,
    }


class ReportingService:
    """Read-only booking reporting service."""

    def __init__(self, store: BookingStore):
        self.store = store

    async def get_booking_summary(
        self,
        couple_id: str | None = None,
        vendor_id: str | None = None,
    ) -> dict:
        bookings = await self.store.list_bookings(couple_id=couple_id, vendor_id=vendor_id)
        return summarize_bookings(bookings)

    async def get_receipt_summary(self) -> dict:
        receipts = await self.store.list_receipts()
        return summarize_receipts(receipts)
