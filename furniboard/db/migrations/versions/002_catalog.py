"""Catalog - categories, furniture, variations, images, brands, showroom

Revision ID: 002
Revises: 001
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _furniture_fk() -> sa.Column:
    return sa.Column(
        "furniture_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("furniture.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("featured", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "furniture",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column("sizes", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("producer", sa.String(255), nullable=True, index=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("featured", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("promotion_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_promotion_active", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("promotion_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("in_stock", sa.Boolean, nullable=False, server_default=sa.true(), index=True),
        sa.Column(
            "category_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("categories.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
    )

    op.create_table(
        "furniture_variations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _furniture_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("texture_type", sa.String(100), nullable=False, index=True),
        sa.Column("color", sa.String(100), nullable=True),
        sa.Column("color_code", sa.String(20), nullable=True),
        sa.Column("texture_image_url", sa.String(1000), nullable=False),
        sa.Column("in_stock", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "furniture_images",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _furniture_fk(),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )

    op.create_table(
        "brands",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column("cover_url", sa.String(1000), nullable=False),
        sa.Column("logo_url", sa.String(1000), nullable=True),
        sa.Column("website_url", sa.String(1000), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("deals", postgresql.JSONB, nullable=False, server_default="[]"),
        *_timestamps(),
    )

    op.create_table(
        "showroom_images",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default=sa.text("0"), index=True),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("showroom_images")
    op.drop_table("brands")
    op.drop_table("furniture_images")
    op.drop_table("furniture_variations")
    op.drop_table("furniture")
    op.drop_table("categories")
