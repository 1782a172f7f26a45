"""Immutability enforcement for receipts and status history using SQLAlchemy events."""

import logging
from datetime import UTC, datetime

from sqlalchemy import event

from wedbook.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_registered = False


class ImmutabilityViolationError(ValidationError):
    """Raised when attempting to modify append-only records."""

    def __init__(self, model_name: str, operation: str, record_id: str):
        self.model_name = model_name
        self.operation = operation
        self.record_id = record_id
        super().__init__(
            f"Immutability violation: Cannot {operation} {model_name} record {record_id}. "
            "Receipts and status history are append-only."
        )


def _log_immutability_violation(model_name: str, operation: str, record_id: str) -> None:
    """Log immutability violation for audit purposes."""
    logger.error(
        f"IMMUTABILITY_VIOLATION: Attempted to {operation} {model_name} "
        f"record_id={record_id} at {datetime.now(UTC).isoformat()}"
    )


def _forbid(model, operation: str) -> None:
    model_name = model.__name__

    @event.listens_for(model, f"before_{operation.lower()}")
    def prevent(mapper, connection, target):
        _log_immutability_violation(model_name, operation, str(target.id))
        raise ImmutabilityViolationError(model_name, operation, str(target.id))


def register_immutability_enforcement() -> None:
    """Register SQLAlchemy event listeners for append-only records.

    Safe to call more than once; listeners are attached on the first call.
    """
    global _registered
    if _registered:
        return

    from wedbook.models.booking import BookingStatusHistory
    from wedbook.models.receipt import ReceiptRecord

    # Receipts: No UPDATE, No DELETE
    _forbid(ReceiptRecord, "UPDATE")
    _forbid(ReceiptRecord, "DELETE")

    # Status history: Append-Only
    _forbid(BookingStatusHistory, "UPDATE")
    _forbid(BookingStatusHistory, "DELETE")

    _registered = True
    logger.info("Immutability enforcement registered for receipts and status history")
