"""Payment-event keys for idempotent payment recording."""

import hashlib
import json
import uuid
from typing import Any
from uuid import UUID


def generate_idempotency_key(
    operation: str,
    entity_id: UUID | str,
    params: dict[str, Any] | None = None,
) -> str:
    """Generate a deterministic idempotency key.

    Args:
        operation: Operation name (e.g., "record_payment")
        entity_id: Primary entity ID
        params: Additional parameters to include in key

    Returns:
        SHA256 hash of operation + entity + params
    """
    key_data = {
        "operation": operation,
        "entity_id": str(entity_id),
        "params": params or {},
    }
    key_str = json.dumps(key_data, sort_keys=True)
    return hashlib.sha256(key_str.encode()).hexdigest()


def payment_key_for(booking_id: UUID, client_key: str | None) -> str:
    """Key identifying one payment event on a booking.

    A caller-supplied key makes retries of the same payment collapse onto one
    receipt. Without one every call is a distinct payment event.
    """
    if client_key is None:
        return uuid.uuid4().hex
    return generate_idempotency_key("record_payment", booking_id, {"key": client_key})
