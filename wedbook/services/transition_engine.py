"""Transition engine: the only writer of booking status."""

import logging
from typing import Any
from uuid import UUID

from wedbook.core.exceptions import InvalidState, InvalidTransition, StaleState, Unauthorized
from wedbook.domain.booking_state import (
    MANAGED_STATUSES,
    Actor,
    BookingStatus,
    allowed_actors,
    assert_booking_transition,
)
from wedbook.domain.events import BookingEvent, EventBus, event_bus
from wedbook.domain.models import Booking, TransitionRecord, utcnow
from wedbook.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)


class TransitionEngine:
    """Validates and applies status changes for one unit of work.

    Components that own other booking fields (ledger, completion tracker,
    booking service) stage their field updates through this engine so they
    are saved together with the status change under one compare-and-swap.
    Events for staged transitions are published only after commit().
    """

    def __init__(self, store: BookingStore, bus: EventBus | None = None):
        self.store = store
        self.bus = bus or event_bus
        self._pending_events: list[BookingEvent] = []

    async def request_transition(
        self,
        booking_id: UUID,
        target: BookingStatus,
        actor: Actor,
        expected_status: BookingStatus | None = None,
    ) -> Booking:
        """Move a booking to a new status on behalf of an actor.

        Args:
            booking_id: Booking to move
            target: Desired status
            actor: Who is asking
            expected_status: Status the caller last saw; a mismatch is stale

        Raises:
            NotFoundError: Unknown booking
            InvalidTransition: Edge not in the graph, or target is set only
                by payments or completion acknowledgements
            Unauthorized: Actor may not take this edge
            StaleState: Booking changed since the caller read it
        """
        booking = await self.store.load_booking(booking_id)

        self._check_edge(booking, target, actor)
        if target in MANAGED_STATUSES:
            raise InvalidTransition(
                booking.status.value,
                target.value,
                detail=f"Status {target.value} is set by payments or completion acknowledgements",
            )
        if expected_status is not None and booking.status != expected_status:
            raise StaleState(str(booking.id), expected_status.value, booking.status.value)

        booking = await self.stage_transition(booking, target, actor)
        await self.commit()
        return booking

    async def stage_transition(
        self,
        booking: Booking,
        target: BookingStatus,
        actor: Actor,
        updates: dict[str, Any] | None = None,
    ) -> Booking:
        """Save a status change plus the caller's field updates, uncommitted.

        The save is conditioned on the status and total paid of the given
        snapshot.
        """
        self._check_edge(booking, target, actor)

        changes = dict(updates or {})
        changes.update(status=target, updated_at=utcnow())
        updated = booking.evolve(**changes)

        if target == BookingStatus.COMPLETED and not updated.both_completed:
            raise InvalidState("Booking cannot complete until both vendor and couple confirm")

        await self.store.save_booking(updated, booking.status, booking.total_paid)
        await self.store.append_transition(
            TransitionRecord(
                booking_id=booking.id,
                from_status=booking.status,
                to_status=target,
                actor=actor,
            )
        )
        logger.info(
            f"Booking transition staged: booking_id={booking.id} "
            f"{booking.status.value} → {target.value} actor={actor.value}"
        )

        event = BookingEvent.for_booking(updated)
        if event is not None:
            self._pending_events.append(event)
        return updated

    async def stage_update(self, booking: Booking, updates: dict[str, Any]) -> Booking:
        """Save field updates without a status change, uncommitted."""
        updated = booking.evolve(**updates, updated_at=utcnow())
        await self.store.save_booking(updated, booking.status, booking.total_paid)
        return updated

    async def commit(self) -> None:
        """Commit the unit of work, then publish its events."""
        await self.store.commit()
        events, self._pending_events = self._pending_events, []
        for event in events:
            await self.bus.publish(event)

    async def rollback(self) -> None:
        self._pending_events = []
        await self.store.rollback()

    @staticmethod
    def _check_edge(booking: Booking, target: BookingStatus, actor: Actor) -> None:
        assert_booking_transition(booking.status, target)
        if actor not in allowed_actors(booking.status, target):
            raise Unauthorized(actor.value, booking.status.value, target.value)
