"""Quote, payment and receipt schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from wedbook.domain.booking_state import BookingStatus
from wedbook.domain.models import PaymentType
from wedbook.schemas.booking import BookingResponse


class QuoteRequest(BaseModel):
    """Vendor quote in centavos."""

    amount: int = Field(..., gt=0)


class PaymentCreate(BaseModel):
    """Schema for recording a payment (amount in centavos)."""

    amount: int
    payment_type: PaymentType
    idempotency_key: str | None = Field(None, max_length=255)
    payment_method: str | None = Field(
        None, pattern="^(card|gcash|maya|bank_transfer|cash)$"
    )


class ReceiptResponse(BaseModel):
    """Schema for receipt response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    receipt_number: str
    amount: int
    currency: str
    payment_type: PaymentType
    payment_method: str | None
    issued_at: datetime


class PaymentResponse(BaseModel):
    booking: BookingResponse
    receipt: ReceiptResponse


class PaymentSummaryResponse(BaseModel):
    """Payment progress of one booking."""

    model_config = ConfigDict(from_attributes=True)

    booking_id: UUID
    status: BookingStatus
    currency: str
    quoted_amount: int | None
    total_paid: int
    remaining_balance: int
    payment_progress: int
    receipts: list[ReceiptResponse]
