"""Booking state machine.

Happy path:
    draft → quote_requested → quote_sent → quote_accepted → (confirmed) →
    downpayment_paid → fully_paid → in_progress → vendor_completed |
    couple_completed → completed

Bookings can be cancelled by either party at any point before completed,
and disputed once confirmed. completed, cancelled_by_couple,
cancelled_by_vendor and refunded are terminal.
"""

from enum import Enum

from wedbook.core.exceptions import InvalidTransition, ValidationError


class BookingStatus(str, Enum):
    DRAFT = "draft"
    QUOTE_REQUESTED = "quote_requested"
    QUOTE_SENT = "quote_sent"
    QUOTE_ACCEPTED = "quote_accepted"
    QUOTE_REJECTED = "quote_rejected"
    CONFIRMED = "confirmed"
    DOWNPAYMENT_PAID = "downpayment_paid"
    FULLY_PAID = "fully_paid"
    IN_PROGRESS = "in_progress"
    VENDOR_COMPLETED = "vendor_completed"
    COUPLE_COMPLETED = "couple_completed"
    COMPLETED = "completed"
    CANCELLED_BY_COUPLE = "cancelled_by_couple"
    CANCELLED_BY_VENDOR = "cancelled_by_vendor"
    DISPUTED = "disputed"
    REFUNDED = "refunded"


class Actor(str, Enum):
    COUPLE = "couple"
    VENDOR = "vendor"
    SYSTEM = "system"  # platform: payment callbacks, completion gating, admin


S = BookingStatus

_CANCELLATIONS = {S.CANCELLED_BY_COUPLE, S.CANCELLED_BY_VENDOR}

BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    S.DRAFT: {S.QUOTE_REQUESTED} | _CANCELLATIONS,
    S.QUOTE_REQUESTED: {S.QUOTE_SENT} | _CANCELLATIONS,
    S.QUOTE_SENT: {S.QUOTE_ACCEPTED, S.QUOTE_REJECTED} | _CANCELLATIONS,
    S.QUOTE_REJECTED: {S.QUOTE_REQUESTED} | _CANCELLATIONS,
    S.QUOTE_ACCEPTED: {S.CONFIRMED, S.DOWNPAYMENT_PAID, S.FULLY_PAID} | _CANCELLATIONS,
    S.CONFIRMED: {S.DOWNPAYMENT_PAID, S.FULLY_PAID, S.DISPUTED} | _CANCELLATIONS,
    S.DOWNPAYMENT_PAID: {S.FULLY_PAID, S.DISPUTED} | _CANCELLATIONS,
    S.FULLY_PAID: {S.IN_PROGRESS, S.DISPUTED} | _CANCELLATIONS,
    S.IN_PROGRESS: {S.VENDOR_COMPLETED, S.COUPLE_COMPLETED, S.DISPUTED} | _CANCELLATIONS,
    S.VENDOR_COMPLETED: {S.COMPLETED, S.DISPUTED} | _CANCELLATIONS,
    S.COUPLE_COMPLETED: {S.COMPLETED, S.DISPUTED} | _CANCELLATIONS,
    S.DISPUTED: {S.REFUNDED} | _CANCELLATIONS,
    S.COMPLETED: set(),
    S.CANCELLED_BY_COUPLE: set(),
    S.CANCELLED_BY_VENDOR: set(),
    S.REFUNDED: set(),
}

# Who may take an edge, keyed by target; overrides keyed by (current, target).
_TARGET_ACTORS: dict[BookingStatus, frozenset[Actor]] = {
    S.QUOTE_REQUESTED: frozenset({Actor.COUPLE}),
    S.QUOTE_SENT: frozenset({Actor.VENDOR}),
    S.QUOTE_ACCEPTED: frozenset({Actor.COUPLE}),
    S.QUOTE_REJECTED: frozenset({Actor.COUPLE}),
    S.CONFIRMED: frozenset({Actor.VENDOR}),
    S.DOWNPAYMENT_PAID: frozenset({Actor.COUPLE, Actor.SYSTEM}),
    S.FULLY_PAID: frozenset({Actor.COUPLE, Actor.SYSTEM}),
    S.IN_PROGRESS: frozenset({Actor.VENDOR}),
    S.VENDOR_COMPLETED: frozenset({Actor.VENDOR}),
    S.COUPLE_COMPLETED: frozenset({Actor.COUPLE}),
    S.COMPLETED: frozenset({Actor.SYSTEM}),
    S.CANCELLED_BY_COUPLE: frozenset({Actor.COUPLE}),
    S.CANCELLED_BY_VENDOR: frozenset({Actor.VENDOR}),
    S.DISPUTED: frozenset({Actor.COUPLE, Actor.VENDOR}),
    S.REFUNDED: frozenset({Actor.VENDOR, Actor.SYSTEM}),
}

_EDGE_ACTORS: dict[tuple[BookingStatus, BookingStatus], frozenset[Actor]] = {
    # A vendor may open a quote on a couple's draft inquiry.
    (S.DRAFT, S.QUOTE_REQUESTED): frozenset({Actor.COUPLE, Actor.VENDOR}),
}

# Targets written only by the ledger or the completion tracker.
MANAGED_STATUSES: frozenset[BookingStatus] = frozenset(
    {
        S.QUOTE_SENT,
        S.DOWNPAYMENT_PAID,
        S.FULLY_PAID,
        S.VENDOR_COMPLETED,
        S.COUPLE_COMPLETED,
        S.COMPLETED,
    }
)

TERMINAL_STATUSES: frozenset[BookingStatus] = frozenset(
    status for status, targets in BOOKING_TRANSITIONS.items() if not targets
)


def parse_status(value: str | BookingStatus) -> BookingStatus:
    """Coerce a raw string into a registry status."""
    try:
        return BookingStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown booking status: {value}") from None


def parse_actor(value: str | Actor) -> Actor:
    try:
        return Actor(value)
    except ValueError:
        raise ValidationError(f"Unknown actor: {value}") from None


def is_valid_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())


def next_statuses(current: BookingStatus) -> set[BookingStatus]:
    return set(BOOKING_TRANSITIONS.get(current, set()))


def is_terminal(status: BookingStatus) -> bool:
    return status in TERMINAL_STATUSES


def allowed_actors(current: BookingStatus, target: BookingStatus) -> frozenset[Actor]:
    """Actors permitted on an edge; empty when the edge does not exist."""
    if not is_valid_transition(current, target):
        return frozenset()
    return _EDGE_ACTORS.get((current, target), _TARGET_ACTORS[target])


def assert_booking_transition(current: BookingStatus, target: BookingStatus) -> None:
    if not is_valid_transition(current, target):
        raise InvalidTransition(current.value, target.value)
