"""Quote and payment ledger.

All amounts are integer centavos. The ledger is the only writer of
quoted_amount and total_paid; status changes go through the transition
engine in the same unit of work.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from wedbook.core.exceptions import (
    DuplicatePayment,
    InvalidState,
    OverPayment,
    Unauthorized,
    ValidationError,
)
from wedbook.core.idempotency import payment_key_for
from wedbook.domain.booking_state import Actor, BookingStatus, allowed_actors
from wedbook.domain.models import Booking, PaymentType, Receipt
from wedbook.services.receipt_service import ReceiptService
from wedbook.services.transition_engine import TransitionEngine

logger = logging.getLogger(__name__)

PAYABLE_STATUSES = frozenset(
    {
        BookingStatus.QUOTE_ACCEPTED,
        BookingStatus.CONFIRMED,
        BookingStatus.DOWNPAYMENT_PAID,
    }
)

PAYING_ACTORS = frozenset({Actor.COUPLE, Actor.SYSTEM})


@dataclass(frozen=True)
class PaymentSummary:
    booking_id: UUID
    currency: str
    quoted_amount: int | None
    total_paid: int
    remaining_balance: int
    payment_progress: int
    status: BookingStatus
    receipts: list[Receipt]


class LedgerService:
    """Quotes, payments and their reconciliation against the quote."""

    def __init__(self, engine: TransitionEngine, receipts: ReceiptService | None = None):
        self.engine = engine
        self.store = engine.store
        self.receipts = receipts or ReceiptService(engine.store)

    async def set_quote(
        self,
        booking_id: UUID,
        amount: int,
        actor: Actor = Actor.VENDOR,
    ) -> Booking:
        """Attach the vendor's quote and send it to the couple.

        A draft inquiry is first moved to quote_requested by the quoting
        vendor, so the history stays a walk along legal edges.
        """
        if amount <= 0:
            raise ValidationError("Quote amount must be positive")

        booking = await self.store.load_booking(booking_id)

        if actor not in allowed_actors(BookingStatus.QUOTE_REQUESTED, BookingStatus.QUOTE_SENT):
            raise Unauthorized(actor.value, booking.status.value, BookingStatus.QUOTE_SENT.value)

        if booking.status == BookingStatus.DRAFT:
            booking = await self.engine.stage_transition(
                booking, BookingStatus.QUOTE_REQUESTED, actor
            )
        if booking.status != BookingStatus.QUOTE_REQUESTED:
            raise InvalidState(
                f"Cannot quote a booking in status {booking.status.value}; "
                "a quote must be requested first"
            )

        booking = await self.engine.stage_transition(
            booking, BookingStatus.QUOTE_SENT, actor, {"quoted_amount": amount}
        )
        await self.engine.commit()

        logger.info(f"Quote sent: booking_id={booking.id} amount={amount} {booking.currency}")
        return booking

    async def record_payment(
        self,
        booking_id: UUID,
        amount: int,
        payment_type: PaymentType,
        actor: Actor = Actor.COUPLE,
        idempotency_key: str | None = None,
        payment_method: str | None = None,
    ) -> tuple[Booking, Receipt]:
        """Record one payment against the quote and issue its receipt.

        Returns:
            The updated booking and the receipt. A replay of an already
            recorded payment key returns the current booking and the
            original receipt.

        Raises:
            InvalidState: No quote, status not payable, or payment type does
                not fit the booking's payment history
            ValidationError: Non-positive amount
            OverPayment: Payment would exceed the quoted amount
            DuplicatePayment: Payment key reused for a different payment
            StaleState: Booking changed concurrently
        """
        payment_key = payment_key_for(booking_id, idempotency_key)

        existing = await self.store.get_receipt_by_payment_key(payment_key)
        if existing is not None:
            if (
                existing.booking_id != booking_id
                or existing.amount != amount
                or existing.payment_type != payment_type
            ):
                raise DuplicatePayment(payment_key)
            logger.info(
                f"Payment replay: booking_id={booking_id} receipt={existing.receipt_number}"
            )
            return await self.store.load_booking(booking_id), existing

        booking = await self.store.load_booking(booking_id)

        if booking.quoted_amount is None:
            raise InvalidState("Cannot record a payment before a quote is set")
        if booking.status not in PAYABLE_STATUSES:
            raise InvalidState(f"Cannot record a payment in status {booking.status.value}")
        if actor not in PAYING_ACTORS:
            raise Unauthorized(actor.value, booking.status.value, BookingStatus.FULLY_PAID.value)
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")
        if booking.total_paid + amount > booking.quoted_amount:
            raise OverPayment(amount, booking.total_paid, booking.quoted_amount)
        if payment_type == PaymentType.DEPOSIT and booking.total_paid > 0:
            raise InvalidState("A deposit can only be the first payment")
        if payment_type == PaymentType.FULL and amount != booking.remaining_balance:
            raise InvalidState(
                f"A full payment must settle the remaining balance of {booking.remaining_balance}"
            )

        new_total = booking.total_paid + amount
        updates = {"total_paid": new_total}

        if new_total == booking.quoted_amount:
            booking = await self.engine.stage_transition(
                booking, BookingStatus.FULLY_PAID, actor, updates
            )
        elif booking.status == BookingStatus.DOWNPAYMENT_PAID:
            booking = await self.engine.stage_update(booking, updates)
        else:
            booking = await self.engine.stage_transition(
                booking, BookingStatus.DOWNPAYMENT_PAID, actor, updates
            )

        receipt = await self.receipts.issue(
            booking, amount, payment_type, payment_key, payment_method
        )
        await self.engine.commit()

        logger.info(
            f"Payment recorded: booking_id={booking.id} amount={amount} "
            f"total_paid={booking.total_paid}/{booking.quoted_amount} "
            f"status={booking.status.value}"
        )
        return booking, receipt

    async def get_payment_summary(self, booking_id: UUID) -> PaymentSummary:
        booking = await self.store.load_booking(booking_id)
        receipts = await self.store.list_receipts(booking_id)
        return PaymentSummary(
            booking_id=booking.id,
            currency=booking.currency,
            quoted_amount=booking.quoted_amount,
            total_paid=booking.total_paid,
            remaining_balance=booking.remaining_balance,
            payment_progress=booking.payment_progress,
            status=booking.status,
            receipts=receipts,
        )
