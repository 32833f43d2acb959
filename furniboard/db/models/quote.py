import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from furniboard.common.enums import QuoteStatus
from furniboard.db.base import BaseModel
from furniboard.db.models.history import HistoryBase


class Quote(BaseModel):
    __tablename__ = "quotes"
    __table_args__ = (Index("ix_quotes_status_board_position", "status", "board_position"),)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    customer_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    postcode: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=QuoteStatus.OPEN.value, index=True
    )
    board_position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_items: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    items = relationship(
        "QuoteItem",
        back_populates="quote",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    history = relationship(
        "QuoteHistory",
        back_populates="quote",
        order_by="QuoteHistory.created_at.desc()",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class QuoteItem(BaseModel):
    __tablename__ = "quote_items"

    quote_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    furniture_id: Mapped[str] = mapped_column(String(100), nullable=False)
    furniture_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[str | None] = mapped_column(String(100), nullable=True)
    color: Mapped[str | None] = mapped_column(String(100), nullable=True)
    color_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    variation_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    quote = relationship("Quote", back_populates="items")


class QuoteHistory(HistoryBase):
    __tablename__ = "quote_history"

    parent_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True
    )

    quote = relationship("Quote", back_populates="history")
