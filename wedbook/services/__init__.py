from wedbook.services.booking_service import BookingService
from wedbook.services.completion_service import CompletionService
from wedbook.services.ledger_service import LedgerService
from wedbook.services.receipt_service import ReceiptService
from wedbook.services.reporting_service import ReportingService
from wedbook.services.transition_engine import TransitionEngine

__all__ = [
    "BookingService",
    "CompletionService",
    "LedgerService",
    "ReceiptService",
    "ReportingService",
    "TransitionEngine",
]
