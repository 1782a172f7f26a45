"""Booking reporting endpoints (read-only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from wedbook.api.deps import get_reporting_service
from wedbook.schemas.reporting import BookingSummary, ReceiptSummary
from wedbook.services.reporting_service import ReportingService, render_summary_text

router = APIRouter()


@router.get("/bookings/summary", response_model=BookingSummary)
async def get_booking_summary(
    reporting: Annotated[ReportingService, Depends(get_reporting_service)],
    couple_id: str | None = Query(None),
    vendor_id: str | None = Query(None),
) -> BookingSummary:
    """Get booking counts per status and money totals."""
    data = await reporting.get_booking_summary(couple_id=couple_id, vendor_id=vendor_id)
    return BookingSummary(**data)


@router.get("/bookings/summary.txt", response_class=PlainTextResponse)
async def get_booking_summary_text(
    reporting: Annotated[ReportingService, Depends(get_reporting_service)],
    couple_id: str | None = Query(None),
    vendor_id: str | None = Query(None),
) -> str:
    """Get the booking summary as a plain-text report."""
    data = await reporting.get_booking_summary(couple_id=couple_id, vendor_id=vendor_id)
    return render_summary_text(data)


@router.get("/receipts/summary", response_model=ReceiptSummary)
async def get_receipt_summary(
    reporting: Annotated[ReportingService, Depends(get_reporting_service)],
) -> ReceiptSummary:
    """Get receipt counts per payment type."""
    return ReceiptSummary(**await reporting.get_receipt_summary())
