import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from furniboard.common.enums import HistoryAction
from furniboard.common.logging import get_logger

logger = get_logger("board.history")

DEFAULT_ACTOR = "system"


class HistoryLogger:
    """Append-only audit trail for one board entity.

    Entries are added to the caller's session, so they commit or roll back
    together with the mutation they describe.
    """

    def __init__(self, model: type):
        self.model = model

    async def append(
        self,
        db: AsyncSession,
        parent_id: uuid.UUID,
        action: HistoryAction,
        description: str,
        old_value: dict | None = None,
        new_value: dict | None = None,
        performed_by: str | None = None,
    ):
        entry = self.model(
            parent_id=parent_id,
            action=action.value,
            description=description,
            old_value=old_value,
            new_value=new_value,
            performed_by=performed_by or DEFAULT_ACTOR,
        )
        db.add(entry)
        logger.debug("%s %s: %s", action.value, parent_id, description)
        return entry

    async def entries(self, db: AsyncSession, parent_id: uuid.UUID) -> list:
        result = await db.execute(
            select(self.model)
            .where(self.model.parent_id == parent_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())


def diff_fields(item: Any, fields: dict[str, Any]) -> tuple[list[str], dict, dict]:
    """Compare ``fields`` against ``item`` and return (changed keys, old, new).

    Only keys the caller actually sent belong in ``fields``; a ``None`` value
    clears the attribute.
    """
    changed: list[str] = []
    old_values: dict[str, Any] = {}
    new_values: dict[str, Any] = {}
    for key, value in fields.items():
        current = getattr(item, key)
        if current != value:
            changed.append(key)
            old_values[key] = current
            new_values[key] = value
    return changed, old_values, new_values


def classify_field_changes(changed: list[str]) -> HistoryAction:
    if changed and all(key == "admin_notes" for key in changed):
        return HistoryAction.ADMIN_NOTES_UPDATED
    return HistoryAction.CUSTOMER_INFO_UPDATED


def describe_changes(changed: list[str]) -> str:
    return "Changed " + ", ".join(key.replace("_", " ") for key in changed)
