"""Core utilities: exceptions, idempotency, immutability."""

from wedbook.core.exceptions import (
    AppException,
    DuplicatePayment,
    InvalidState,
    InvalidTransition,
    NotFoundError,
    OverPayment,
    StaleState,
    Unauthorized,
    ValidationError,
)

__all__ = [
    "AppException",
    "DuplicatePayment",
    "InvalidState",
    "InvalidTransition",
    "NotFoundError",
    "OverPayment",
    "StaleState",
    "Unauthorized",
    "ValidationError",
]
