from wedbook.stores.interfaces import BookingStore
from wedbook.stores.memory_store import InMemoryBookingStore
from wedbook.stores.sql_store import SqlBookingStore

__all__ = ["BookingStore", "InMemoryBookingStore", "SqlBookingStore"]
