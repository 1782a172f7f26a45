"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the booking lifecycle tables:
- Bookings
- Status history (append-only)
- Receipts (append-only)
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

BOOKING_STATUSES = (
    "draft",
    "quote_requested",
    "quote_sent",
    "quote_accepted",
    "quote_rejected",
    "confirmed",
    "downpayment_paid",
    "fully_paid",
    "in_progress",
    "vendor_completed",
    "couple_completed",
    "completed",
    "cancelled_by_couple",
    "cancelled_by_vendor",
    "disputed",
    "refunded",
)


def _in(column: str, values: Sequence[str]) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


def upgrade() -> None:
    """Create all database tables."""

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("couple_id", sa.String(64), nullable=False, index=True),
        sa.Column("vendor_id", sa.String(64), nullable=False, index=True),
        sa.Column("service_type", sa.String(100), nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="draft", index=True),
        sa.Column("event_date", sa.Date, nullable=False, index=True),
        sa.Column("quoted_amount", sa.Integer),
        sa.Column("total_paid", sa.Integer, nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), server_default="PHP"),
        sa.Column("vendor_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("vendor_completed_at", sa.DateTime(timezone=True)),
        sa.Column("couple_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("couple_completed_at", sa.DateTime(timezone=True)),
        sa.Column("completion_notes", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(_in("status", BOOKING_STATUSES), name="ck_bookings_status"),
        sa.CheckConstraint("total_paid >= 0", name="ck_bookings_total_paid_non_negative"),
        sa.CheckConstraint(
            "quoted_amount IS NULL OR total_paid <= quoted_amount",
            name="ck_bookings_paid_within_quote",
        ),
    )

    # ==================== STATUS HISTORY ====================
    op.create_table(
        "booking_status_history",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("booking_id", sa.Uuid, sa.ForeignKey("bookings.id"), nullable=False, index=True),
        sa.Column("from_status", sa.String(30), nullable=False),
        sa.Column("to_status", sa.String(30), nullable=False),
        sa.Column("actor", sa.String(10), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            _in("actor", ("couple", "vendor", "system")), name="ck_booking_status_history_actor"
        ),
    )

    # ==================== RECEIPTS ====================
    op.create_table(
        "receipts",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("receipt_number", sa.String(40), unique=True, nullable=False, index=True),
        sa.Column("booking_id", sa.Uuid, sa.ForeignKey("bookings.id"), nullable=False, index=True),
        sa.Column("payment_key", sa.String(64), unique=True, nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("currency", sa.String(3), server_default="PHP"),
        sa.Column("payment_type", sa.String(10), nullable=False),
        sa.Column("payment_method", sa.String(30)),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_receipts_amount_positive"),
        sa.CheckConstraint(
            _in("payment_type", ("deposit", "balance", "full")), name="ck_receipts_payment_type"
        ),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("receipts")
    op.drop_table("booking_status_history")
    op.drop_table("bookings")
