from collections.abc import AsyncGenerator

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession

from furniboard.common.exceptions import UnauthorizedError
from furniboard.common.security import decode_token
from furniboard.db.session import async_session_factory

ADMIN_ACTOR = "admin"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def require_admin(
    authorization: str | None = Header(None, description="Bearer <token>"),
) -> str:
    """Accept any valid token issued by ``/auth/validate``; returns the actor name."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing or malformed authorization header")

    token = authorization[len("Bearer "):]
    try:
        payload = decode_token(token)
    except ValueError:
        raise UnauthorizedError("Invalid or expired token")

    if payload.get("type") != "access" or not payload.get("authenticated"):
        raise UnauthorizedError("Invalid token payload")

    return ADMIN_ACTOR
