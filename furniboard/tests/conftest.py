from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import JSON, event, select
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from furniboard.common.security import create_access_token
from furniboard.config import settings
from furniboard.core.board.boards import contact_board, quote_board
from furniboard.db.base import Base
from furniboard.db.models import *  # noqa: F401,F403 - ensure all models loaded
from furniboard.db.models import ContactTicket, Quote, QuoteItem
from furniboard.db.session import use_immediate_transactions

TEST_PASSWORD = "showroom-secret"


# Make JSONB render as JSON for SQLite
@event.listens_for(Base.metadata, "before_create")
def _remap_jsonb(target, connection, **kw):
    if connection.dialect.name == "sqlite":
        for table in target.tables.values():
            for column in table.columns:
                if isinstance(column.type, JSONB):
                    column.type = JSON()


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    use_immediate_transactions(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session):
    from furniboard.api.deps import get_db
    from furniboard.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def auth_password(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_PASSWORD", TEST_PASSWORD)
    return TEST_PASSWORD


@pytest.fixture
def admin_token():
    return create_access_token({"authenticated": True})


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def make_quote(db_session):
    """Create a quote through the engine; it lands last in the OPEN column."""

    async def _make(name: str, quantity: int = 1) -> Quote:
        quote = Quote(
            customer_name=name,
            customer_email=f"{name.lower()}@test.com",
            customer_phone="+44 20 7946 0000",
            postcode="SW1A 1AA",
            address="1 Test Street",
            total_items=quantity,
            items=[
                QuoteItem(
                    furniture_id="sofa-01",
                    furniture_name="Test Sofa",
                    category="Sofas",
                    quantity=quantity,
                )
            ],
        )
        return await quote_board.create(db_session, quote, f"Quote created by {name}")

    return _make


@pytest.fixture
def make_ticket(db_session):
    """Create a contact ticket through the engine; it lands last in NEW."""

    async def _make(name: str) -> ContactTicket:
        ticket = ContactTicket(
            name=name,
            email=f"{name.lower()}@test.com",
            message=f"Message from {name}",
        )
        return await contact_board.create(db_session, ticket, f"Contact ticket created by {name}")

    return _make


@pytest.fixture
def column_names(db_session):
    """Names in a column, in board order, read straight from the database."""

    async def _column(engine, status: str) -> list[str]:
        model = engine.board.model
        name_col = model.customer_name if model is Quote else model.name
        result = await db_session.execute(
            select(name_col, model.board_position)
            .where(model.status == status)
            .order_by(model.board_position)
        )
        return [f"{name}({pos})" for name, pos in result.all()]

    return _column
