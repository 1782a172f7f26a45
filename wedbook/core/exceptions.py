"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidTransition(AppException):
    """Requested status change is not an edge of the booking graph."""

    def __init__(self, current: str, target: str, detail: str | None = None) -> None:
        self.current = current
        self.target = target
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail or f"Invalid booking transition: {current} → {target}",
        )


class Unauthorized(AppException):
    """Actor is not allowed to take this edge."""

    def __init__(self, actor: str, current: str, target: str) -> None:
        self.actor = actor
        self.current = current
        self.target = target
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"A {actor} cannot move a booking from {current} to {target}",
        )


class StaleState(AppException):
    """Booking changed since it was read; re-read and retry."""

    def __init__(self, booking_id: str, expected_status: str, actual_status: str | None = None) -> None:
        self.booking_id = booking_id
        self.expected_status = expected_status
        self.actual_status = actual_status
        detail = f"Booking {booking_id} is no longer in status {expected_status}"
        if actual_status:
            detail = f"{detail} (now {actual_status})"
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidState(AppException):
    """Operation is not allowed for the current booking state."""

    def __init__(self, detail: str = "This operation is not allowed for the current booking status") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class OverPayment(AppException):
    """Payment would push the total paid beyond the quoted amount."""

    def __init__(self, amount: int, total_paid: int, quoted_amount: int) -> None:
        self.amount = amount
        self.total_paid = total_paid
        self.quoted_amount = quoted_amount
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Payment of {amount} exceeds the remaining balance of "
                f"{quoted_amount - total_paid} (quoted {quoted_amount}, paid {total_paid})"
            ),
        )


class DuplicatePayment(AppException):
    """Payment key was already used for a different payment."""

    def __init__(self, payment_key: str) -> None:
        self.payment_key = payment_key
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Payment {payment_key} was already processed with different details",
        )


class ReceiptNumberConflict(AppException):
    """Generated receipt number was taken by a concurrent payment."""

    def __init__(self, receipt_number: str) -> None:
        self.receipt_number = receipt_number
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Receipt number {receipt_number} is already in use; retry the payment",
        )
