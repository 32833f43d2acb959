"""Initial schema - quotes, contact tickets and their history

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _history_columns() -> list[sa.Column]:
    return [
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("old_value", postgresql.JSONB, nullable=True),
        sa.Column("new_value", postgresql.JSONB, nullable=True),
        sa.Column("performed_by", sa.String(100), nullable=False, server_default="system"),
    ]


def upgrade() -> None:
    # Quotes
    op.create_table(
        "quotes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False, index=True),
        sa.Column("customer_phone", sa.String(50), nullable=False),
        sa.Column("postcode", sa.String(20), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("status", sa.String(30), nullable=False, server_default="OPEN", index=True),
        sa.Column("board_position", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("total_items", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("admin_notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_quotes_status_board_position", "quotes", ["status", "board_position"])

    op.create_table(
        "quote_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "quote_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("quotes.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("furniture_id", sa.String(100), nullable=False),
        sa.Column("furniture_name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("size", sa.String(100), nullable=True),
        sa.Column("color", sa.String(100), nullable=True),
        sa.Column("color_code", sa.String(20), nullable=True),
        sa.Column("variation_id", sa.String(100), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("quantity", sa.Integer, nullable=False, server_default=sa.text("1")),
        *_timestamps(),
    )

    op.create_table(
        "quote_history",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "parent_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("quotes.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        *_history_columns(),
        *_timestamps(),
    )

    # Contact tickets
    op.create_table(
        "contact_tickets",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, index=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="NEW", index=True),
        sa.Column("board_position", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("admin_notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_contact_tickets_status_board_position", "contact_tickets", ["status", "board_position"]
    )

    op.create_table(
        "contact_ticket_history",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "parent_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("contact_tickets.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        *_history_columns(),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("contact_ticket_history")
    op.drop_index("ix_contact_tickets_status_board_position", table_name="contact_tickets")
    op.drop_table("contact_tickets")
    op.drop_table("quote_history")
    op.drop_table("quote_items")
    op.drop_index("ix_quotes_status_board_position", table_name="quotes")
    op.drop_table("quotes")
