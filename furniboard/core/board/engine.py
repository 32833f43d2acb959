"""Board reordering engine.

One engine instance owns one status-partitioned entity (quotes, contact
tickets). It is the only code allowed to write ``status`` or
``board_position`` on those rows, and it keeps every status column densely
ordered: the positions of the ``n`` items sharing a status are exactly
``0..n-1``.

Each operation runs inside the caller's session. The request dependency
commits on success and rolls back on any exception, so position updates and
the history entry describing them land together or not at all.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from furniboard.common.enums import HistoryAction
from furniboard.common.exceptions import (
    BadRequestError,
    InvalidStatusError,
    NotFoundError,
    StorageError,
)
from furniboard.common.logging import get_logger
from furniboard.config import settings
from furniboard.core.board.history import (
    HistoryLogger,
    classify_field_changes,
    describe_changes,
    diff_fields,
)
from furniboard.core.board.planner import (
    next_position,
    plan_append,
    plan_close_gap,
    plan_move,
)
from furniboard.core.board.schemas import BoardDefinition, BoardStats, MovePlan
from furniboard.core.board.store import BoardStore, to_entries

logger = get_logger("board.engine")


class BoardEngine:
    def __init__(self, board: BoardDefinition):
        self.board = board
        self.store = BoardStore(board)
        self.history = HistoryLogger(board.history_model)

    # ---------- Validation ----------

    def validate_status(self, value: str | enum.Enum) -> str:
        raw = value.value if isinstance(value, enum.Enum) else value
        try:
            return self.board.status_enum(raw).value
        except ValueError:
            raise InvalidStatusError(str(raw), self.board.statuses)

    def _check_clearable(self, fields: dict[str, Any]) -> None:
        columns = self.board.model.__table__.columns
        for key, value in fields.items():
            if value is None and not columns[key].nullable:
                raise BadRequestError(f"{key} cannot be cleared")

    async def _load(self, db: AsyncSession, item_id: uuid.UUID):
        item = await self.store.get(db, item_id, for_update=True)
        if item is None:
            raise NotFoundError(self.board.resource, str(item_id))
        return item

    # ---------- Mutations ----------

    async def create(
        self,
        db: AsyncSession,
        item,
        description: str,
        snapshot: dict | None = None,
        performed_by: str = "customer",
    ):
        """Insert ``item`` at the end of the board's initial column."""
        status = self.board.initial_status.value
        try:
            await self.store.lock(db)
            column = await self.store.column(db, status)
            item.status = status
            item.board_position = next_position(to_entries(column))
            db.add(item)
            await db.flush()

            await self.history.append(
                db, item.id, HistoryAction.CREATED, description, None, snapshot, performed_by
            )
            await db.flush()
        except SQLAlchemyError as e:
            logger.exception("Failed to create %s", self.board.resource)
            raise StorageError("create", str(e)) from e

        logger.info(
            "Created %s %s at %s[%d]", self.board.resource, item.id, status, item.board_position
        )
        return item

    async def move(
        self,
        db: AsyncSession,
        item_id: uuid.UUID,
        new_status: str | enum.Enum,
        new_position: int,
        performed_by: str | None = None,
        fields: dict[str, Any] | None = None,
    ):
        """Move an item to ``new_position`` within ``new_status``.

        Positions past the end of the target column are clamped to its end.
        Optional ``fields`` are written in the same transaction and recorded
        in the same history entry.
        """
        status = self.validate_status(new_status)
        self._check_clearable(fields or {})
        try:
            await self.store.lock(db)
            item = await self._load(db, item_id)
            source = await self.store.column(db, item.status)
            dest = await self.store.column(db, status) if status != item.status else []

            plan = plan_move(
                item.id, item.status, status, new_position, to_entries(source), to_entries(dest)
            )
            await self._commit_plan(db, item, plan, [*source, *dest], performed_by, fields)
        except SQLAlchemyError as e:
            logger.exception("Failed to move %s %s", self.board.resource, item_id)
            raise StorageError("move", str(e)) from e
        return item

    async def append_to_end(
        self,
        db: AsyncSession,
        item_id: uuid.UUID,
        new_status: str | enum.Enum,
        performed_by: str | None = None,
        fields: dict[str, Any] | None = None,
    ):
        """Change an item's status, placing it last in the destination column."""
        status = self.validate_status(new_status)
        self._check_clearable(fields or {})
        try:
            await self.store.lock(db)
            item = await self._load(db, item_id)
            source = await self.store.column(db, item.status)
            dest = await self.store.column(db, status) if status != item.status else []

            plan = plan_append(item.id, item.status, status, to_entries(source), to_entries(dest))
            await self._commit_plan(db, item, plan, [*source, *dest], performed_by, fields)
        except SQLAlchemyError as e:
            logger.exception("Failed to change status of %s %s", self.board.resource, item_id)
            raise StorageError("status change", str(e)) from e
        return item

    async def update(
        self,
        db: AsyncSession,
        item_id: uuid.UUID,
        fields: dict[str, Any],
        performed_by: str | None = None,
    ):
        """Write plain fields (never status or position) and log the diff."""
        blocked = {"status", "board_position"} & set(fields)
        if blocked:
            raise ValueError(f"use move/append_to_end to change {', '.join(sorted(blocked))}")
        self._check_clearable(fields)

        try:
            item = await self._load(db, item_id)
            changed, old_values, new_values = diff_fields(item, fields)
            if not changed:
                return item

            for key in changed:
                setattr(item, key, new_values[key])
            await self.history.append(
                db,
                item.id,
                classify_field_changes(changed),
                describe_changes(changed),
                old_values,
                new_values,
                performed_by or "admin",
            )
            await db.flush()
        except SQLAlchemyError as e:
            logger.exception("Failed to update %s %s", self.board.resource, item_id)
            raise StorageError("update", str(e)) from e
        return item

    async def delete(self, db: AsyncSession, item_id: uuid.UUID) -> None:
        """Delete an item and close the gap it leaves in its column."""
        try:
            await self.store.lock(db)
            item = await self._load(db, item_id)
            status = item.status
            column = await self.store.column(db, status)

            updates = plan_close_gap(item.id, status, to_entries(column))
            await self.store.delete(db, item)
            await db.flush()

            self.store.apply_updates([row for row in column if row.id != item.id], updates)
            await db.flush()
        except SQLAlchemyError as e:
            logger.exception("Failed to delete %s %s", self.board.resource, item_id)
            raise StorageError("delete", str(e)) from e

        logger.info("Deleted %s %s from %s", self.board.resource, item_id, status)

    async def _commit_plan(
        self,
        db: AsyncSession,
        item,
        plan: MovePlan,
        rows: list,
        performed_by: str | None,
        fields: dict[str, Any] | None,
    ) -> None:
        changed, old_values, new_values = diff_fields(item, fields or {})

        if not plan.changed and not changed:
            logger.debug("No-op move for %s %s", self.board.resource, item.id)
            return

        self.store.apply(rows, plan)
        for key in changed:
            setattr(item, key, new_values[key])

        if plan.changed:
            action = HistoryAction.STATUS_CHANGED if plan.status_changed else HistoryAction.POSITION_CHANGED
            old_values = {"status": plan.old_status, "board_position": plan.old_position, **old_values}
            new_values = {"status": plan.new_status, "board_position": plan.new_position, **new_values}
            if plan.status_changed:
                description = (
                    f"Moved from {plan.old_status} to position {plan.new_position} "
                    f"in {plan.new_status} column"
                )
            else:
                description = f"Moved to position {plan.new_position} in {plan.new_status} column"
            if changed:
                description += "; " + describe_changes(changed).lower()
        else:
            action = classify_field_changes(changed)
            description = describe_changes(changed)

        await self.history.append(
            db, item.id, action, description, old_values, new_values, performed_by or "admin"
        )
        await db.flush()

        logger.info(
            "%s %s: %s[%d] -> %s[%d] (%d sibling update(s))",
            self.board.resource,
            item.id,
            plan.old_status,
            plan.old_position,
            plan.new_status,
            plan.new_position,
            len(plan.updates),
        )

    # ---------- Queries ----------

    async def get(self, db: AsyncSession, item_id: uuid.UUID, options=()):
        query = select(self.board.model).where(self.board.model.id == item_id)
        if options:
            query = query.options(*options).execution_options(populate_existing=True)
        result = await db.execute(query)
        item = result.scalar_one_or_none()
        if item is None:
            raise NotFoundError(self.board.resource, str(item_id))
        return item

    async def columns(self, db: AsyncSession, options=()) -> dict[str, list]:
        """Every status mapped to its items in board order."""
        rows = await self.store.all_ordered(db, options)
        grouped: dict[str, list] = {status: [] for status in self.board.statuses}
        for row in rows:
            grouped.setdefault(row.status, []).append(row)
        for column in grouped.values():
            column.sort(key=lambda r: r.board_position)
        return grouped

    async def stats(self, db: AsyncSession) -> BoardStats:
        model = self.board.model
        total = (await db.execute(select(func.count(model.id)))).scalar() or 0

        since = datetime.now(timezone.utc) - timedelta(days=settings.RECENT_WINDOW_DAYS)
        recent = (
            await db.execute(select(func.count(model.id)).where(model.created_at >= since))
        ).scalar() or 0

        result = await db.execute(select(model.status, func.count(model.id)).group_by(model.status))
        by_status = {status: 0 for status in self.board.statuses}
        for status, count in result.all():
            by_status[status] = count

        return BoardStats(total=total, recent=recent, by_status=by_status)
