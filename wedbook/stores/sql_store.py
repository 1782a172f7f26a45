"""SQLAlchemy-backed booking store."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wedbook.core.exceptions import (
    DuplicatePayment,
    NotFoundError,
    ReceiptNumberConflict,
    StaleState,
)
from wedbook.domain.booking_state import Actor, BookingStatus
from wedbook.domain.models import Booking, PaymentType, Receipt, TransitionRecord
from wedbook.models.booking import BookingRecord, BookingStatusHistory
from wedbook.models.receipt import ReceiptRecord
from wedbook.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)


def _aware(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_booking(row: BookingRecord) -> Booking:
    return Booking(
        id=row.id,
        couple_id=row.couple_id,
        vendor_id=row.vendor_id,
        service_type=row.service_type,
        event_date=row.event_date,
        status=BookingStatus(row.status),
        currency=row.currency,
        quoted_amount=row.quoted_amount,
        total_paid=row.total_paid,
        vendor_completed=row.vendor_completed,
        vendor_completed_at=_aware(row.vendor_completed_at),
        couple_completed=row.couple_completed,
        couple_completed_at=_aware(row.couple_completed_at),
        completion_notes=row.completion_notes,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _booking_values(booking: Booking) -> dict:
    return {
        "couple_id": booking.couple_id,
        "vendor_id": booking.vendor_id,
        "service_type": booking.service_type,
        "event_date": booking.event_date,
        "status": booking.status.value,
        "currency": booking.currency,
        "quoted_amount": booking.quoted_amount,
        "total_paid": booking.total_paid,
        "vendor_completed": booking.vendor_completed,
        "vendor_completed_at": booking.vendor_completed_at,
        "couple_completed": booking.couple_completed,
        "couple_completed_at": booking.couple_completed_at,
        "completion_notes": booking.completion_notes,
        "updated_at": booking.updated_at,
    }


def _to_receipt(row: ReceiptRecord) -> Receipt:
    return Receipt(
        id=row.id,
        booking_id=row.booking_id,
        receipt_number=row.receipt_number,
        amount=row.amount,
        currency=row.currency,
        payment_type=PaymentType(row.payment_type),
        payment_key=row.payment_key,
        payment_method=row.payment_method,
        issued_at=_aware(row.issued_at),
    )


def _to_transition(row: BookingStatusHistory) -> TransitionRecord:
    return TransitionRecord(
        id=row.id,
        booking_id=row.booking_id,
        from_status=BookingStatus(row.from_status),
        to_status=BookingStatus(row.to_status),
        actor=Actor(row.actor),
        occurred_at=_aware(row.occurred_at),
    )


class SqlBookingStore(BookingStore):
    """Booking store over one AsyncSession; one session is one unit of work."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_booking(self, booking_id: UUID) -> Booking:
        result = await self.db.execute(
            select(BookingRecord)
            .where(BookingRecord.id == booking_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError("Booking", str(booking_id))
        return _to_booking(row)

    async def add_booking(self, booking: Booking) -> Booking:
        row = BookingRecord(id=booking.id, created_at=booking.created_at, **_booking_values(booking))
        self.db.add(row)
        await self.db.flush()
        return booking

    async def save_booking(
        self,
        booking: Booking,
        expected_status: BookingStatus,
        expected_total_paid: int,
    ) -> Booking:
        result = await self.db.execute(
            update(BookingRecord)
            .where(
                BookingRecord.id == booking.id,
                BookingRecord.status == expected_status.value,
                BookingRecord.total_paid == expected_total_paid,
            )
            .values(**_booking_values(booking))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            current = await self.db.execute(
                select(BookingRecord.status).where(BookingRecord.id == booking.id)
            )
            actual = current.scalar_one_or_none()
            if actual is None:
                raise NotFoundError("Booking", str(booking.id))
            logger.warning(
                f"Stale write rejected: booking_id={booking.id} "
                f"expected={expected_status.value} actual={actual}"
            )
            raise StaleState(str(booking.id), expected_status.value, actual)
        return booking

    async def list_bookings(
        self,
        couple_id: str | None = None,
        vendor_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        query = select(BookingRecord)
        if couple_id is not None:
            query = query.where(BookingRecord.couple_id == couple_id)
        if vendor_id is not None:
            query = query.where(BookingRecord.vendor_id == vendor_id)
        if status is not None:
            query = query.where(BookingRecord.status == status.value)
        query = query.order_by(BookingRecord.created_at).execution_options(populate_existing=True)

        result = await self.db.execute(query)
        return [_to_booking(row) for row in result.scalars().all()]

    async def append_receipt(self, receipt: Receipt) -> Receipt:
        self.db.add(
            ReceiptRecord(
                id=receipt.id,
                receipt_number=receipt.receipt_number,
                booking_id=receipt.booking_id,
                payment_key=receipt.payment_key,
                amount=receipt.amount,
                currency=receipt.currency,
                payment_type=receipt.payment_type.value,
                payment_method=receipt.payment_method,
                issued_at=receipt.issued_at,
            )
        )
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            if await self.get_receipt_by_payment_key(receipt.payment_key) is not None:
                raise DuplicatePayment(receipt.payment_key) from None
            if await self.get_receipt_by_number(receipt.receipt_number) is not None:
                logger.warning(f"Receipt number collision: {receipt.receipt_number}")
                raise ReceiptNumberConflict(receipt.receipt_number) from None
            raise
        return receipt

    async def get_receipt(self, receipt_id: UUID) -> Receipt | None:
        row = await self.db.get(ReceiptRecord, receipt_id)
        return _to_receipt(row) if row else None

    async def get_receipt_by_number(self, receipt_number: str) -> Receipt | None:
        result = await self.db.execute(
            select(ReceiptRecord).where(ReceiptRecord.receipt_number == receipt_number)
        )
        row = result.scalar_one_or_none()
        return _to_receipt(row) if row else None

    async def get_receipt_by_payment_key(self, payment_key: str) -> Receipt | None:
        result = await self.db.execute(
            select(ReceiptRecord).where(ReceiptRecord.payment_key == payment_key)
        )
        row = result.scalar_one_or_none()
        return _to_receipt(row) if row else None

    async def list_receipts(self, booking_id: UUID | None = None) -> list[Receipt]:
        query = select(ReceiptRecord)
        if booking_id is not None:
            query = query.where(ReceiptRecord.booking_id == booking_id)
        result = await self.db.execute(query.order_by(ReceiptRecord.issued_at))
        return [_to_receipt(row) for row in result.scalars().all()]

    async def append_transition(self, record: TransitionRecord) -> None:
        self.db.add(
            BookingStatusHistory(
                id=record.id,
                booking_id=record.booking_id,
                from_status=record.from_status.value,
                to_status=record.to_status.value,
                actor=record.actor.value,
                occurred_at=record.occurred_at,
            )
        )
        await self.db.flush()

    async def list_transitions(self, booking_id: UUID) -> list[TransitionRecord]:
        result = await self.db.execute(
            select(BookingStatusHistory)
            .where(BookingStatusHistory.booking_id == booking_id)
            .order_by(BookingStatusHistory.occurred_at)
        )
        return [_to_transition(row) for row in result.scalars().all()]

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
