"""Booking domain events and an in-process event bus.

Events are published after the unit of work that produced them has been
committed. Consumers (notifications, dashboards) live outside the core.
"""

from __future__ import annotations

import inspect
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from wedbook.domain.booking_state import BookingStatus
from wedbook.domain.models import Booking, utcnow

logger = logging.getLogger(__name__)

BOOKING_QUOTE_ACCEPTED = "booking.quote_accepted"
BOOKING_FULLY_PAID = "booking.fully_paid"
BOOKING_COMPLETED = "booking.completed"

# Statuses whose arrival is announced to consumers
EVENT_TYPES: dict[BookingStatus, str] = {
    BookingStatus.QUOTE_ACCEPTED: BOOKING_QUOTE_ACCEPTED,
    BookingStatus.FULLY_PAID: BOOKING_FULLY_PAID,
    BookingStatus.COMPLETED: BOOKING_COMPLETED,
}


@dataclass(frozen=True)
class BookingEvent:
    event_type: str
    booking_id: uuid.UUID
    status: BookingStatus
    payload: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=utcnow)

    @classmethod
    def for_booking(cls, booking: Booking) -> BookingEvent | None:
        """Build the event announcing the booking's current status, if any."""
        event_type = EVENT_TYPES.get(booking.status)
        if event_type is None:
            return None
        return cls(
            event_type=event_type,
            booking_id=booking.id,
            status=booking.status,
            payload={
                "couple_id": booking.couple_id,
                "vendor_id": booking.vendor_id,
                "quoted_amount": booking.quoted_amount,
                "total_paid": booking.total_paid,
                "currency": booking.currency,
            },
        )


EventHandler = Callable[[BookingEvent], Awaitable[None] | None]


class EventBus:
    """Fan-out of booking events to subscribed handlers."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        self._handlers.remove(handler)

    async def publish(self, event: BookingEvent) -> None:
        """Deliver an event to every handler.

        State is already committed at this point, so a failing consumer is
        logged and does not affect the others.
        """
        for handler in list(self._handlers):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    f"Booking event handler {getattr(handler, '__name__', handler)!r} "
                    f"failed for {event.event_type} booking_id={event.booking_id}"
                )


def log_booking_event(event: BookingEvent) -> None:
    logger.info(
        f"{event.event_type}: booking_id={event.booking_id} "
        f"status={event.status.value} payload={event.payload}"
    )


event_bus = EventBus()
event_bus.subscribe(log_booking_event)
