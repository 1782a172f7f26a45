"""Receipt number generation."""

import random
import string
from datetime import datetime

from wedbook.config import settings


def generate_receipt_number(prefix: str | None = None) -> str:
    """Generate a receipt number for a payment.

    Args:
        prefix: Number prefix; defaults to the configured receipt prefix

    Returns:
        str: Receipt number like 'RCP-20300115-A3B7K9'
    """
    date_part = datetime.now().strftime("%Y%m%d")
    random_part = "".join(random.choices(string.ascii_uppercase + string.digits, k=6))
    return f"{prefix or settings.receipt_prefix}-{date_part}-{random_part}"
