"""Booking creation, lookup and event-date amendment."""

import logging
from datetime import date
from uuid import UUID

from wedbook.config import settings
from wedbook.core.exceptions import InvalidState, ValidationError
from wedbook.domain.booking_state import Actor, BookingStatus
from wedbook.domain.models import Booking, TransitionRecord
from wedbook.services.transition_engine import TransitionEngine

logger = logging.getLogger(__name__)

# Event date is fixed once the vendor confirms or money changes hands
AMENDABLE_STATUSES = frozenset(
    {
        BookingStatus.DRAFT,
        BookingStatus.QUOTE_REQUESTED,
        BookingStatus.QUOTE_SENT,
        BookingStatus.QUOTE_REJECTED,
        BookingStatus.QUOTE_ACCEPTED,
    }
)


class BookingService:
    def __init__(self, engine: TransitionEngine):
        self.engine = engine
        self.store = engine.store

    async def create_booking(
        self,
        couple_id: str,
        vendor_id: str,
        service_type: str,
        event_date: date,
        currency: str | None = None,
    ) -> Booking:
        """Open a draft booking inquiry."""
        if not couple_id or not vendor_id:
            raise ValidationError("couple_id and vendor_id are required")
        if not service_type:
            raise ValidationError("service_type is required")

        booking = Booking(
            couple_id=couple_id,
            vendor_id=vendor_id,
            service_type=service_type,
            event_date=event_date,
            currency=currency or settings.default_currency,
        )
        await self.store.add_booking(booking)
        await self.engine.commit()

        logger.info(
            f"Booking created: booking_id={booking.id} couple={couple_id} "
            f"vendor={vendor_id} service={service_type}"
        )
        return booking

    async def get_booking(self, booking_id: UUID) -> Booking:
        return await self.store.load_booking(booking_id)

    async def list_bookings(
        self,
        couple_id: str | None = None,
        vendor_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        return await self.store.list_bookings(couple_id=couple_id, vendor_id=vendor_id, status=status)

    async def amend_event_date(self, booking_id: UUID, new_date: date, actor: Actor) -> Booking:
        """Move the event date before the booking is confirmed.

        Any party (couple, vendor or system) may amend; the actor is only
        recorded in the log since a date change is not a status transition.
        """
        booking = await self.store.load_booking(booking_id)

        if booking.status not in AMENDABLE_STATUSES:
            raise InvalidState(
                f"Cannot change the event date of a booking in status {booking.status.value}"
            )
        if new_date == booking.event_date:
            return booking

        old_date = booking.event_date
        booking = await self.engine.stage_update(booking, {"event_date": new_date})
        await self.engine.commit()

        logger.info(f"Event date amended: booking_id={booking.id} {old_date} → {new_date} by={actor.value}")
        return booking

    async def get_history(self, booking_id: UUID) -> list[TransitionRecord]:
        await self.store.load_booking(booking_id)
        return await self.store.list_transitions(booking_id)
