"""Reusable pagination, filtering and sorting for list endpoints."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class PaginationParams:
    """Inject as a FastAPI dependency for any list endpoint."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        page_size: int = Query(10, ge=1, le=100, description="Items per page"),
        sort_by: str | None = Query(None, description="Column to sort by"),
        sort_order: str = Query("desc", pattern="^(asc|desc)$", description="asc or desc"),
        search: str | None = Query(None, description="Free-text search"),
    ):
        self.page = page
        self.page_size = page_size
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.search = search

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PaginatedResponse(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


def apply_search(query: Select, model: Any, search: str | None, fields: list[str]) -> Select:
    """Case-insensitive substring match across ``fields``."""
    if not search:
        return query
    pattern = f"%{search.lower()}%"
    return query.where(or_(*(func.lower(getattr(model, f)).like(pattern) for f in fields)))


async def paginate(
    db: AsyncSession,
    query: Select,
    params: PaginationParams,
    model: Any = None,
    default_sort: str = "created_at",
) -> tuple[list[Any], int]:
    """Apply pagination to a query and return (items, total_count)."""
    # Count total
    count_q = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_q)).scalar() or 0

    # Sort
    if model is not None:
        sort_by = default_sort
        if params.sort_by and params.sort_by in model.__table__.columns:
            sort_by = params.sort_by
        col = getattr(model, sort_by)
        query = query.order_by(col.asc() if params.sort_order == "asc" else col.desc())

    # Paginate
    query = query.offset(params.offset).limit(params.page_size)

    result = await db.execute(query)
    items = list(result.scalars().all())
    return items, total


def page_meta(params: PaginationParams, total: int) -> dict:
    total_pages = (total + params.page_size - 1) // params.page_size
    return {
        "total": total,
        "page": params.page,
        "page_size": params.page_size,
        "total_pages": total_pages,
        "has_next": params.page < total_pages,
        "has_prev": params.page > 1,
    }
