from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from furniboard.config import settings


def _disable_driver_begin(dbapi_connection, connection_record):
    # The driver's own deferred BEGIN would only lock on the first write
    dbapi_connection.isolation_level = None


def begin_immediate(conn):
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def use_immediate_transactions(engine: AsyncEngine) -> None:
    """Make every SQLite transaction take the database write lock when it starts.

    Board writers read a column and then rewrite it, so on SQLite the whole
    transaction has to hold the lock, not just its writes.
    """
    event.listen(engine.sync_engine, "connect", _disable_driver_begin)
    event.listen(engine.sync_engine, "begin", begin_immediate)


engine = create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, pool_pre_ping=True)
if engine.dialect.name == "sqlite":
    use_immediate_transactions(engine)

async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
