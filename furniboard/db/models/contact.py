import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from furniboard.common.enums import ContactTicketStatus
from furniboard.db.base import BaseModel
from furniboard.db.models.history import HistoryBase


class ContactTicket(BaseModel):
    __tablename__ = "contact_tickets"
    __table_args__ = (
        Index("ix_contact_tickets_status_board_position", "status", "board_position"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=ContactTicketStatus.NEW.value, index=True
    )
    board_position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    history = relationship(
        "ContactTicketHistory",
        back_populates="ticket",
        order_by="ContactTicketHistory.created_at.desc()",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ContactTicketHistory(HistoryBase):
    __tablename__ = "contact_ticket_history"

    parent_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("contact_tickets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    ticket = relationship("ContactTicket", back_populates="history")
