"""Receipt database model.

Receipts are immutable once written; see wedbook.core.immutability.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from wedbook.database import Base

if TYPE_CHECKING:
    from wedbook.models.booking import BookingRecord


class ReceiptRecord(Base):
    """Proof of one payment event."""

    __tablename__ = "receipts"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_receipts_amount_positive"),
        CheckConstraint(
            "payment_type IN ('deposit', 'balance', 'full')", name="ck_receipts_payment_type"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    receipt_number: Mapped[str] = mapped_column(
        String(40), unique=True, nullable=False, index=True
    )  # RCP-YYYYMMDD-XXXXXX
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id"), nullable=False, index=True
    )

    # Payment event identity; one receipt per key
    payment_key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    # Amount
    amount: Mapped[int] = mapped_column(Integer, nullable=False)  # in centavos
    currency: Mapped[str] = mapped_column(String(3), default="PHP")
    payment_type: Mapped[str] = mapped_column(String(10), nullable=False)
    payment_method: Mapped[str | None] = mapped_column(String(30))  # card, gcash, maya, bank_transfer

    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    booking: Mapped["BookingRecord"] = relationship("BookingRecord", back_populates="receipts")
