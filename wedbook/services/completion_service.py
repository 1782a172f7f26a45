"""Dual completion: vendor and couple both confirm the service was delivered."""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from wedbook.core.exceptions import InvalidState
from wedbook.domain.booking_state import Actor, BookingStatus
from wedbook.domain.models import Booking, utcnow
from wedbook.services.transition_engine import TransitionEngine

logger = logging.getLogger(__name__)

COMPLETABLE_STATUSES = frozenset(
    {
        BookingStatus.IN_PROGRESS,
        BookingStatus.VENDOR_COMPLETED,
        BookingStatus.COUPLE_COMPLETED,
    }
)

_OWN_STATUS = {
    Actor.VENDOR: BookingStatus.VENDOR_COMPLETED,
    Actor.COUPLE: BookingStatus.COUPLE_COMPLETED,
}


@dataclass(frozen=True)
class CompletionStatus:
    booking_id: UUID
    status: BookingStatus
    vendor_completed: bool
    vendor_completed_at: datetime | None
    couple_completed: bool
    couple_completed_at: datetime | None
    completion_notes: str | None
    both_completed: bool
    waiting_for: str | None


class CompletionService:
    def __init__(self, engine: TransitionEngine):
        self.engine = engine
        self.store = engine.store

    async def mark_vendor_complete(self, booking_id: UUID, notes: str | None = None) -> Booking:
        return await self._mark_complete(booking_id, Actor.VENDOR, notes)

    async def mark_couple_complete(self, booking_id: UUID, notes: str | None = None) -> Booking:
        return await self._mark_complete(booking_id, Actor.COUPLE, notes)

    async def mark_complete(
        self, booking_id: UUID, actor: Actor, notes: str | None = None
    ) -> Booking:
        """Dispatch a completion acknowledgement by actor role."""
        if actor not in _OWN_STATUS:
            raise InvalidState(f"Only the vendor or the couple can confirm completion, not {actor.value}")
        return await self._mark_complete(booking_id, actor, notes)

    async def completion_status(self, booking_id: UUID) -> CompletionStatus:
        booking = await self.store.load_booking(booking_id)
        return CompletionStatus(
            booking_id=booking.id,
            status=booking.status,
            vendor_completed=booking.vendor_completed,
            vendor_completed_at=booking.vendor_completed_at,
            couple_completed=booking.couple_completed,
            couple_completed_at=booking.couple_completed_at,
            completion_notes=booking.completion_notes,
            both_completed=booking.both_completed,
            waiting_for=booking.waiting_for,
        )

    async def _mark_complete(self, booking_id: UUID, actor: Actor, notes: str | None) -> Booking:
        booking = await self.store.load_booking(booking_id)
        party = actor.value

        # Repeated acknowledgements are no-ops
        if getattr(booking, f"{party}_completed"):
            logger.info(f"Completion already confirmed: booking_id={booking.id} by={party}")
            return booking

        if booking.status not in COMPLETABLE_STATUSES:
            raise InvalidState(
                f"Cannot confirm completion for a booking in status {booking.status.value}"
            )

        updates = {
            f"{party}_completed": True,
            f"{party}_completed_at": utcnow(),
        }
        if notes:
            updates["completion_notes"] = notes

        other = "couple" if actor == Actor.VENDOR else "vendor"
        if getattr(booking, f"{other}_completed"):
            booking = await self.engine.stage_transition(
                booking, BookingStatus.COMPLETED, Actor.SYSTEM, updates
            )
        else:
            booking = await self.engine.stage_transition(
                booking, _OWN_STATUS[actor], actor, updates
            )
        await self.engine.commit()

        logger.info(
            f"Completion confirmed: booking_id={booking.id} by={party} "
            f"status={booking.status.value}"
        )
        return booking
