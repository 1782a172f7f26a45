"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from wedbook.api.deps import (
    get_actor,
    get_booking_service,
    get_completion_service,
    get_ledger_service,
    get_receipt_service,
    get_transition_engine,
)
from wedbook.domain.booking_state import Actor, parse_status
from wedbook.schemas.booking import (
    BookingCreate,
    BookingEventDateUpdate,
    BookingListResponse,
    BookingResponse,
    BookingTransitionRequest,
    CompletionRequest,
    CompletionStatusResponse,
    TransitionRecordResponse,
)
from wedbook.schemas.payment import (
    PaymentCreate,
    PaymentResponse,
    PaymentSummaryResponse,
    QuoteRequest,
    ReceiptResponse,
)
from wedbook.services.booking_service import BookingService
from wedbook.services.completion_service import CompletionService
from wedbook.services.ledger_service import LedgerService
from wedbook.services.receipt_service import ReceiptService
from wedbook.services.transition_engine import TransitionEngine

router = APIRouter()


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: BookingCreate,
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingResponse:
    """Open a draft booking inquiry."""
    booking = await bookings.create_booking(
        couple_id=request.couple_id,
        vendor_id=request.vendor_id,
        service_type=request.service_type,
        event_date=request.event_date,
        currency=request.currency,
    )
    return BookingResponse.model_validate(booking)


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    bookings: Annotated[BookingService, Depends(get_booking_service)],
    couple_id: str | None = Query(None),
    vendor_id: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
) -> BookingListResponse:
    """List bookings, optionally filtered by party or status."""
    items = await bookings.list_bookings(
        couple_id=couple_id,
        vendor_id=vendor_id,
        status=parse_status(status_filter) if status_filter else None,
    )
    return BookingListResponse(
        items=[BookingResponse.model_validate(b) for b in items],
        total=len(items),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingResponse:
    """Get a booking by ID."""
    return BookingResponse.model_validate(await bookings.get_booking(booking_id))


@router.patch("/{booking_id}/event-date", response_model=BookingResponse)
async def amend_event_date(
    booking_id: UUID,
    request: BookingEventDateUpdate,
    actor: Annotated[Actor, Depends(get_actor)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingResponse:
    """Change the event date before the booking is confirmed."""
    booking = await bookings.amend_event_date(booking_id, request.event_date, actor)
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/transition", response_model=BookingResponse)
async def transition_booking(
    booking_id: UUID,
    request: BookingTransitionRequest,
    actor: Annotated[Actor, Depends(get_actor)],
    engine: Annotated[TransitionEngine, Depends(get_transition_engine)],
) -> BookingResponse:
    """Request a status change (accept/reject quote, confirm, start, cancel, dispute, refund)."""
    booking = await engine.request_transition(
        booking_id,
        parse_status(request.target_status),
        actor,
        expected_status=(
            parse_status(request.expected_status) if request.expected_status else None
        ),
    )
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/quote", response_model=BookingResponse)
async def send_quote(
    booking_id: UUID,
    request: QuoteRequest,
    actor: Annotated[Actor, Depends(get_actor)],
    ledger: Annotated[LedgerService, Depends(get_ledger_service)],
) -> BookingResponse:
    """Set the quoted amount and send the quote to the couple (vendor only)."""
    booking = await ledger.set_quote(booking_id, request.amount, actor)
    return BookingResponse.model_validate(booking)


@router.post(
    "/{booking_id}/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    booking_id: UUID,
    request: PaymentCreate,
    actor: Annotated[Actor, Depends(get_actor)],
    ledger: Annotated[LedgerService, Depends(get_ledger_service)],
) -> PaymentResponse:
    """Record a deposit, balance or full payment and issue its receipt."""
    booking, receipt = await ledger.record_payment(
        booking_id,
        request.amount,
        request.payment_type,
        actor=actor,
        idempotency_key=request.idempotency_key,
        payment_method=request.payment_method,
    )
    return PaymentResponse(
        booking=BookingResponse.model_validate(booking),
        receipt=ReceiptResponse.model_validate(receipt),
    )


@router.get("/{booking_id}/payments", response_model=PaymentSummaryResponse)
async def get_payment_summary(
    booking_id: UUID,
    ledger: Annotated[LedgerService, Depends(get_ledger_service)],
) -> PaymentSummaryResponse:
    """Get quote, amount paid and payment progress."""
    return PaymentSummaryResponse.model_validate(await ledger.get_payment_summary(booking_id))


@router.get("/{booking_id}/receipts", response_model=list[ReceiptResponse])
async def list_receipts(
    booking_id: UUID,
    receipts: Annotated[ReceiptService, Depends(get_receipt_service)],
) -> list[ReceiptResponse]:
    """List receipts issued for a booking."""
    return [ReceiptResponse.model_validate(r) for r in await receipts.list_receipts(booking_id)]


@router.post("/{booking_id}/mark-completed", response_model=BookingResponse)
async def mark_completed(
    booking_id: UUID,
    request: CompletionRequest,
    actor: Annotated[Actor, Depends(get_actor)],
    completion: Annotated[CompletionService, Depends(get_completion_service)],
) -> BookingResponse:
    """Confirm service delivery as the vendor or the couple."""
    booking = await completion.mark_complete(booking_id, actor, request.notes)
    return BookingResponse.model_validate(booking)


@router.get("/{booking_id}/completion-status", response_model=CompletionStatusResponse)
async def get_completion_status(
    booking_id: UUID,
    completion: Annotated[CompletionService, Depends(get_completion_service)],
) -> CompletionStatusResponse:
    """Get both parties' completion confirmations."""
    return CompletionStatusResponse.model_validate(await completion.completion_status(booking_id))


@router.get("/{booking_id}/history", response_model=list[TransitionRecordResponse])
async def get_history(
    booking_id: UUID,
    bookings: Annotated[BookingService, Depends(get_booking_service)],
) -> list[TransitionRecordResponse]:
    """Get the booking's status history."""
    return [TransitionRecordResponse.model_validate(r) for r in await bookings.get_history(booking_id)]
