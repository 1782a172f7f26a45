"""API dependencies: booking store, actor role and services."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from wedbook.config import settings
from wedbook.database import get_db
from wedbook.domain.booking_state import Actor, parse_actor
from wedbook.services.booking_service import BookingService
from wedbook.services.completion_service import CompletionService
from wedbook.services.ledger_service import LedgerService
from wedbook.services.receipt_service import ReceiptService
from wedbook.services.reporting_service import ReportingService
from wedbook.services.transition_engine import TransitionEngine
from wedbook.stores.interfaces import BookingStore
from wedbook.stores.memory_store import InMemoryBookingStore
from wedbook.stores.sql_store import SqlBookingStore

# Shared by all requests when booking_store_backend is "memory"
memory_store = InMemoryBookingStore()


async def get_booking_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingStore:
    """Get the booking store for this request's unit of work."""
    if settings.booking_store_backend == "memory":
        return memory_store
    return SqlBookingStore(db)


async def get_actor(
    x_actor_role: Annotated[str, Header(description="couple, vendor or system")],
) -> Actor:
    """Get the acting party from the trusted X-Actor-Role header."""
    return parse_actor(x_actor_role)


def get_transition_engine(
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> TransitionEngine:
    return TransitionEngine(store)


def get_booking_service(
    engine: Annotated[TransitionEngine, Depends(get_transition_engine)],
) -> BookingService:
    return BookingService(engine)


def get_receipt_service(
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> ReceiptService:
    return ReceiptService(store)


def get_ledger_service(
    engine: Annotated[TransitionEngine, Depends(get_transition_engine)],
    receipts: Annotated[ReceiptService, Depends(get_receipt_service)],
) -> LedgerService:
    return LedgerService(engine, receipts)


def get_completion_service(
    engine: Annotated[TransitionEngine, Depends(get_transition_engine)],
) -> CompletionService:
    return CompletionService(engine)


def get_reporting_service(
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> ReportingService:
    return ReportingService(store)
