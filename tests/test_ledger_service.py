"""Unit tests for the quote and payment ledger."""

import pytest

from wedbook.core.exceptions import (
    DuplicatePayment,
    InvalidState,
    OverPayment,
    Unauthorized,
    ValidationError,
)
from wedbook.domain.booking_state import Actor, BookingStatus
from wedbook.domain.events import BOOKING_FULLY_PAID
from wedbook.domain.models import PaymentType


class TestSetQuote:
    """Tests for quoting."""

    async def test_quote_from_draft_walks_legal_edges(self, ledger, store, make_booking):
        """Quoting a draft records draft → quote_requested → quote_sent."""
        booking = await make_booking()

        quoted = await ledger.set_quote(booking.id, 50_000)

        assert quoted.status == BookingStatus.QUOTE_SENT
        assert quoted.quoted_amount == 50_000
        history = await store.list_transitions(booking.id)
        assert [(r.from_status, r.to_status, r.actor) for r in history] == [
            (BookingStatus.DRAFT, BookingStatus.QUOTE_REQUESTED, Actor.VENDOR),
            (BookingStatus.QUOTE_REQUESTED, BookingStatus.QUOTE_SENT, Actor.VENDOR),
        ]

    async def test_quote_after_request(self, ledger, engine, make_booking):
        booking = await make_booking()
        await engine.request_transition(booking.id, BookingStatus.QUOTE_REQUESTED, Actor.COUPLE)

        quoted = await ledger.set_quote(booking.id, 75_000)
        assert quoted.status == BookingStatus.QUOTE_SENT
        assert quoted.total_amount == 75_000

    async def test_quote_must_be_positive(self, ledger, make_booking):
        booking = await make_booking()
        with pytest.raises(ValidationError):
            await ledger.set_quote(booking.id, 0)

    async def test_cannot_requote_sent_quote(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_SENT)
        with pytest.raises(InvalidState):
            await ledger.set_quote(booking.id, 60_000)

    async def test_couple_cannot_quote(self, ledger, make_booking):
        booking = await make_booking()
        with pytest.raises(Unauthorized):
            await ledger.set_quote(booking.id, 50_000, actor=Actor.COUPLE)


class TestRecordPayment:
    """Tests for payment recording and reconciliation."""

    async def test_deposit_then_balance(self, ledger, store, make_booking, published):
        """Deposit moves to downpayment_paid; the balance settles to fully_paid."""
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        published.clear()

        booking, deposit = await ledger.record_payment(booking.id, 20_000, PaymentType.DEPOSIT)
        assert booking.status == BookingStatus.DOWNPAYMENT_PAID
        assert booking.total_paid == 20_000
        assert booking.remaining_balance == 30_000
        assert deposit.amount == 20_000

        booking, balance = await ledger.record_payment(booking.id, 30_000, PaymentType.BALANCE)
        assert booking.status == BookingStatus.FULLY_PAID
        assert booking.total_paid == 50_000
        assert booking.is_fully_paid

        receipts = await store.list_receipts(booking.id)
        assert [r.id for r in receipts] == [deposit.id, balance.id]
        assert [e.event_type for e in published] == [BOOKING_FULLY_PAID]

    async def test_overpayment_rejected(self, ledger, store, make_booking):
        """A payment above the quote is refused and nothing is written."""
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)

        with pytest.raises(OverPayment):
            await ledger.record_payment(booking.id, 60_000, PaymentType.DEPOSIT)

        stored = await store.load_booking(booking.id)
        assert stored.total_paid == 0
        assert stored.status == BookingStatus.QUOTE_ACCEPTED
        assert await store.list_receipts(booking.id) == []

    async def test_overpayment_after_deposit(self, ledger, store, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        await ledger.record_payment(booking.id, 20_000, PaymentType.DEPOSIT)

        with pytest.raises(OverPayment):
            await ledger.record_payment(booking.id, 30_001, PaymentType.BALANCE)
        assert (await store.load_booking(booking.id)).total_paid == 20_000

    async def test_full_payment(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        booking, receipt = await ledger.record_payment(booking.id, 50_000, PaymentType.FULL)
        assert booking.status == BookingStatus.FULLY_PAID
        assert receipt.payment_type == PaymentType.FULL

    async def test_full_payment_must_settle_balance(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        with pytest.raises(InvalidState):
            await ledger.record_payment(booking.id, 10_000, PaymentType.FULL)

    async def test_deposit_only_first(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        await ledger.record_payment(booking.id, 10_000, PaymentType.DEPOSIT)
        with pytest.raises(InvalidState):
            await ledger.record_payment(booking.id, 10_000, PaymentType.DEPOSIT)

    async def test_second_partial_payment_keeps_status(self, ledger, store, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        await ledger.record_payment(booking.id, 10_000, PaymentType.DEPOSIT)
        history_before = await store.list_transitions(booking.id)

        booking, _ = await ledger.record_payment(booking.id, 15_000, PaymentType.BALANCE)

        assert booking.status == BookingStatus.DOWNPAYMENT_PAID
        assert booking.total_paid == 25_000
        assert booking.payment_progress == 50
        assert await store.list_transitions(booking.id) == history_before

    async def test_payment_before_acceptance(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_SENT)
        with pytest.raises(InvalidState):
            await ledger.record_payment(booking.id, 10_000, PaymentType.DEPOSIT)

    async def test_payment_without_quote(self, ledger, make_booking):
        booking = await make_booking()
        with pytest.raises(InvalidState):
            await ledger.record_payment(booking.id, 10_000, PaymentType.DEPOSIT)

    async def test_payment_after_fully_paid(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.FULLY_PAID)
        with pytest.raises(InvalidState):
            await ledger.record_payment(booking.id, 1, PaymentType.BALANCE)

    async def test_non_positive_amount(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED)
        with pytest.raises(ValidationError):
            await ledger.record_payment(booking.id, 0, PaymentType.DEPOSIT)
        with pytest.raises(ValidationError):
            await ledger.record_payment(booking.id, -500, PaymentType.DEPOSIT)

    async def test_vendor_cannot_pay(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED)
        with pytest.raises(Unauthorized):
            await ledger.record_payment(booking.id, 10_000, PaymentType.DEPOSIT, actor=Actor.VENDOR)

    async def test_system_can_record_payment(self, ledger, store, make_booking):
        """Payment callbacks record payments on the couple's behalf."""
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        booking, _ = await ledger.record_payment(
            booking.id, 50_000, PaymentType.FULL, actor=Actor.SYSTEM
        )
        assert booking.status == BookingStatus.FULLY_PAID
        history = await store.list_transitions(booking.id)
        assert history[-1].actor == Actor.SYSTEM

    async def test_payments_from_confirmed(self, ledger, engine, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        await engine.request_transition(booking.id, BookingStatus.CONFIRMED, Actor.VENDOR)

        booking, _ = await ledger.record_payment(booking.id, 5_000, PaymentType.DEPOSIT)
        assert booking.status == BookingStatus.DOWNPAYMENT_PAID

    async def test_total_paid_monotone_and_bounded(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        attempts = [
            (10_000, PaymentType.DEPOSIT),
            (45_000, PaymentType.BALANCE),
            (15_000, PaymentType.BALANCE),
            (30_000, PaymentType.BALANCE),
            (25_000, PaymentType.BALANCE),
            (1, PaymentType.BALANCE),
        ]
        totals = [0]
        for amount, payment_type in attempts:
            try:
                booking, _ = await ledger.record_payment(booking.id, amount, payment_type)
            except (OverPayment, InvalidState):
                pass
            totals.append(booking.total_paid)

        assert totals == sorted(totals)
        assert max(totals) <= 50_000
        assert booking.total_paid == 50_000
        assert booking.status == BookingStatus.FULLY_PAID


class TestPaymentKeys:
    """Tests for idempotent payment recording."""

    async def test_replay_returns_original_receipt(self, ledger, store, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)

        first_booking, first = await ledger.record_payment(
            booking.id, 20_000, PaymentType.DEPOSIT, idempotency_key="gcash-123"
        )
        again_booking, again = await ledger.record_payment(
            booking.id, 20_000, PaymentType.DEPOSIT, idempotency_key="gcash-123"
        )

        assert again.id == first.id
        assert again.receipt_number == first.receipt_number
        assert again_booking.total_paid == first_booking.total_paid == 20_000
        assert len(await store.list_receipts(booking.id)) == 1

    async def test_key_reused_for_different_payment(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        await ledger.record_payment(booking.id, 20_000, PaymentType.DEPOSIT, idempotency_key="k-1")

        with pytest.raises(DuplicatePayment):
            await ledger.record_payment(booking.id, 30_000, PaymentType.BALANCE, idempotency_key="k-1")

    async def test_distinct_payments_without_keys(self, ledger, store, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        await ledger.record_payment(booking.id, 10_000, PaymentType.DEPOSIT)
        await ledger.record_payment(booking.id, 10_000, PaymentType.BALANCE)

        receipts = await store.list_receipts(booking.id)
        assert len(receipts) == 2
        assert receipts[0].payment_key != receipts[1].payment_key


class TestPaymentSummary:
    async def test_summary(self, ledger, make_booking):
        booking = await make_booking(BookingStatus.QUOTE_ACCEPTED, quote=50_000)
        await ledger.record_payment(booking.id, 20_000, PaymentType.DEPOSIT)

        summary = await ledger.get_payment_summary(booking.id)
        assert summary.quoted_amount == 50_000
        assert summary.total_paid == 20_000
        assert summary.remaining_balance == 30_000
        assert summary.payment_progress == 40
        assert len(summary.receipts) == 1
