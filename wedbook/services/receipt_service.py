"""Receipt generation for recorded payments."""

import logging
from uuid import UUID

from wedbook.core.exceptions import NotFoundError
from wedbook.domain.models import Booking, PaymentType, Receipt
from wedbook.stores.interfaces import BookingStore
from wedbook.utils.receipt_number import generate_receipt_number

logger = logging.getLogger(__name__)


class ReceiptService:
    """Issues and reads receipts.

    issue() is called by the ledger inside its unit of work and is not
    exposed on its own; a receipt only exists for a recorded payment.
    """

    def __init__(self, store: BookingStore):
        self.store = store

    async def issue(
        self,
        booking: Booking,
        amount: int,
        payment_type: PaymentType,
        payment_key: str,
        payment_method: str | None = None,
    ) -> Receipt:
        """Append a receipt for one payment event.

        Raises:
            DuplicatePayment: If the payment key already has a receipt
            ReceiptNumberConflict: If a concurrent payment took the number
                between the uniqueness check and the insert
        """
        while True:
            receipt_number = generate_receipt_number()
            if await self.store.get_receipt_by_number(receipt_number) is None:
                break
            logger.debug(f"Receipt number {receipt_number} taken, regenerating")

        receipt = Receipt(
            booking_id=booking.id,
            receipt_number=receipt_number,
            amount=amount,
            payment_type=payment_type,
            payment_key=payment_key,
            currency=booking.currency,
            payment_method=payment_method,
        )
        await self.store.append_receipt(receipt)
        logger.info(
            f"Receipt issued: {receipt.receipt_number} booking_id={booking.id} "
            f"amount={amount} type={payment_type.value}"
        )
        return receipt

    async def list_receipts(self, booking_id: UUID) -> list[Receipt]:
        await self.store.load_booking(booking_id)
        return await self.store.list_receipts(booking_id)

    async def get_receipt(self, receipt_id: UUID) -> Receipt:
        receipt = await self.store.get_receipt(receipt_id)
        if receipt is None:
            raise NotFoundError("Receipt", str(receipt_id))
        return receipt
