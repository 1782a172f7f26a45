"""Booking-related database models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from wedbook.database import Base
from wedbook.domain.booking_state import Actor, BookingStatus

if TYPE_CHECKING:
    from wedbook.models.receipt import ReceiptRecord

_STATUS_VALUES = ", ".join(f"'{status.value}'" for status in BookingStatus)
_ACTOR_VALUES = ", ".join(f"'{actor.value}'" for actor in Actor)


class BookingRecord(Base):
    """Booking row."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_bookings_status"),
        CheckConstraint("total_paid >= 0", name="ck_bookings_total_paid_non_negative"),
        CheckConstraint(
            "quoted_amount IS NULL OR total_paid <= quoted_amount",
            name="ck_bookings_paid_within_quote",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    couple_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    vendor_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    service_type: Mapped[str] = mapped_column(String(100), nullable=False)

    # Status (written only through the transition engine)
    status: Mapped[str] = mapped_column(
        String(30), default=BookingStatus.DRAFT.value, nullable=False, index=True
    )

    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Pricing (in centavos - smallest currency unit)
    quoted_amount: Mapped[int | None] = mapped_column(Integer)
    total_paid: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="PHP")

    # Dual completion
    vendor_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    vendor_completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    couple_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    couple_completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completion_notes: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    receipts: Mapped[list["ReceiptRecord"]] = relationship(
        "ReceiptRecord", back_populates="booking"
    )
    history: Mapped[list["BookingStatusHistory"]] = relationship(
        "BookingStatusHistory", back_populates="booking"
    )


class BookingStatusHistory(Base):
    """Append-only log of applied status transitions."""

    __tablename__ = "booking_status_history"
    __table_args__ = (
        CheckConstraint(f"actor IN ({_ACTOR_VALUES})", name="ck_booking_status_history_actor"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id"), nullable=False, index=True
    )
    from_status: Mapped[str] = mapped_column(String(30), nullable=False)
    to_status: Mapped[str] = mapped_column(String(30), nullable=False)
    actor: Mapped[str] = mapped_column(String(10), nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    booking: Mapped["BookingRecord"] = relationship("BookingRecord", back_populates="history")
