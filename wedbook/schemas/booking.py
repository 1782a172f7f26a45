"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from wedbook.domain.booking_state import Actor, BookingStatus


class BookingCreate(BaseModel):
    """Schema for opening a booking inquiry."""

    couple_id: str = Field(..., min_length=1, max_length=64)
    vendor_id: str = Field(..., min_length=1, max_length=64)
    service_type: str = Field(..., min_length=1, max_length=100)
    event_date: date
    currency: str | None = Field(None, min_length=3, max_length=3)


class BookingEventDateUpdate(BaseModel):
    event_date: date


class BookingTransitionRequest(BaseModel):
    """Schema for a requested status change."""

    target_status: str
    expected_status: str | None = None


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    couple_id: str
    vendor_id: str
    service_type: str
    event_date: date
    status: BookingStatus
    currency: str
    quoted_amount: int | None
    total_paid: int
    remaining_balance: int
    payment_progress: int
    vendor_completed: bool
    vendor_completed_at: datetime | None
    couple_completed: bool
    couple_completed_at: datetime | None
    completion_notes: str | None
    created_at: datetime
    updated_at: datetime


class BookingListResponse(BaseModel):
    """Schema for booking list."""

    items: list[BookingResponse]
    total: int


class CompletionRequest(BaseModel):
    notes: str | None = Field(None, max_length=2000)


class CompletionStatusResponse(BaseModel):
    """Schema for dual completion status."""

    model_config = ConfigDict(from_attributes=True)

    booking_id: UUID
    status: BookingStatus
    vendor_completed: bool
    vendor_completed_at: datetime | None
    couple_completed: bool
    couple_completed_at: datetime | None
    completion_notes: str | None
    both_completed: bool
    waiting_for: str | None


class TransitionRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    from_status: BookingStatus
    to_status: BookingStatus
    actor: Actor
    occurred_at: datetime
