import uuid
import zlib
from collections.abc import Iterable

from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from furniboard.common.exceptions import ConfigurationError
from furniboard.common.logging import get_logger
from furniboard.core.board.schemas import BoardDefinition, ColumnEntry, MovePlan, PositionUpdate
from furniboard.db.session import begin_immediate

logger = get_logger("board.store")


class BoardStore:
    """Record access for one board, always within the caller's transaction."""

    def __init__(self, board: BoardDefinition):
        self.board = board
        self.model = board.model
        self.lock_key = zlib.crc32(f"furniboard:{board.name}".encode())

    async def lock(self, db: AsyncSession) -> None:
        """Serialize writers to this board until the transaction ends.

        PostgreSQL gets a transaction-scoped advisory lock. SQLite ignores
        ``FOR UPDATE``, so its engine must open every transaction with
        ``BEGIN IMMEDIATE`` (see ``use_immediate_transactions``).
        """
        bind = db.get_bind()
        dialect = bind.dialect.name
        if dialect == "postgresql":
            await db.execute(select(func.pg_advisory_xact_lock(self.lock_key)))
        elif dialect == "sqlite" and not event.contains(bind, "begin", begin_immediate):
            raise ConfigurationError(
                "SQLite engine must be set up with use_immediate_transactions()"
            )

    async def get(self, db: AsyncSession, item_id: uuid.UUID, for_update: bool = False):
        query = select(self.model).where(self.model.id == item_id)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def column(self, db: AsyncSession, status: str, for_update: bool = True) -> list:
        query = (
            select(self.model)
            .where(self.model.status == status)
            .order_by(self.model.board_position.asc(), self.model.created_at.asc())
        )
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return list(result.scalars().all())

    async def all_ordered(self, db: AsyncSession, options: Iterable = ()) -> list:
        query = select(self.model).order_by(
            self.model.status.asc(),
            self.model.board_position.asc(),
            self.model.created_at.desc(),
        )
        if options:
            query = query.options(*options).execution_options(populate_existing=True)
        result = await db.execute(query)
        return list(result.scalars().all())

    def apply(self, rows: Iterable, plan: MovePlan) -> None:
        by_id = {row.id: row for row in rows}
        self.apply_updates(by_id.values(), plan.updates)
        moved = by_id[plan.item_id]
        moved.status = plan.new_status
        moved.board_position = plan.new_position

    def apply_updates(self, rows: Iterable, updates: list[PositionUpdate]) -> None:
        by_id = {row.id: row for row in rows}
        for update in updates:
            by_id[update.item_id].board_position = update.new_position
        if updates:
            logger.debug("%s: %d position update(s)", self.board.name, len(updates))

    async def delete(self, db: AsyncSession, item) -> None:
        await db.delete(item)


def to_entries(rows: Iterable) -> list[ColumnEntry]:
    return [ColumnEntry(item_id=row.id, position=row.board_position) for row in rows]
