from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from furniboard.db.base import BaseModel


class HistoryEntryMixin:
    """Columns shared by the append-only audit trail of every board entity."""

    action: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    old_value: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    new_value: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    performed_by: Mapped[str] = mapped_column(String(100), nullable=False, default="system")


class HistoryBase(BaseModel, HistoryEntryMixin):
    __abstract__ = True
