"""Furniture categories: public listing and admin management."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from furniboard.api.deps import get_db, require_admin
from furniboard.common.exceptions import BadRequestError, NotFoundError
from furniboard.common.logging import get_logger
from furniboard.db.models.catalog import Category, Furniture

logger = get_logger("api.categories")

router = APIRouter(prefix="/categories", tags=["Catalog"])


# ---------- Schemas ----------


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    image_url: str | None = None
    featured: bool = False


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    image_url: str | None = None
    featured: bool | None = None


class CategoryFeaturedUpdate(BaseModel):
    featured: bool


class CategoryImageUpdate(BaseModel):
    image_url: str | None


class CategoryMerge(BaseModel):
    primary_category_id: uuid.UUID
    secondary_category_id: uuid.UUID


class CategoryResponse(BaseModel):
    id: uuid.UUID
    name: str
    image_url: str | None
    featured: bool
    furniture_count: int
    created_at: datetime
    updated_at: datetime


# ---------- Public endpoints ----------


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Category).order_by(Category.name))
    categories = list(result.scalars().all())
    counts = await _furniture_counts(db, [c.id for c in categories])
    return [_category_response(c, counts.get(c.id, 0)) for c in categories]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    category = await _get_category(db, category_id)
    return await _with_count(db, category)


# ---------- Admin endpoints ----------


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    body: CategoryCreate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_name_free(db, body.name)
    category = Category(**body.model_dump())
    db.add(category)
    await db.flush()
    await db.refresh(category)
    return _category_response(category, 0)


@router.post("/merge", response_model=CategoryResponse)
async def merge_categories(
    body: CategoryMerge,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Move every piece of furniture into the primary category and drop the other."""
    if body.primary_category_id == body.secondary_category_id:
        raise BadRequestError("Cannot merge a category into itself")

    primary = await _get_category(db, body.primary_category_id)
    secondary = await _get_category(db, body.secondary_category_id)

    result = await db.execute(select(Furniture).where(Furniture.category_id == secondary.id))
    moved = list(result.scalars().all())
    for furniture in moved:
        furniture.category = primary
    await db.flush()

    await db.delete(secondary)
    await db.flush()
    logger.info(
        "Merged category %s into %s (%d furniture moved)", secondary.name, primary.name, len(moved)
    )
    return await _with_count(db, primary)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: uuid.UUID,
    body: CategoryUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, category_id)
    fields = body.model_dump(exclude_unset=True)
    for key in ("name", "featured"):
        if key in fields and fields[key] is None:
            raise BadRequestError(f"{key} cannot be cleared")
    if "name" in fields and fields["name"] != category.name:
        await _ensure_name_free(db, fields["name"])

    for key, value in fields.items():
        setattr(category, key, value)
    await db.flush()
    await db.refresh(category)
    return await _with_count(db, category)


@router.patch("/{category_id}/featured", response_model=CategoryResponse)
async def set_category_featured(
    category_id: uuid.UUID,
    body: CategoryFeaturedUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, category_id)
    category.featured = body.featured
    await db.flush()
    await db.refresh(category)
    return await _with_count(db, category)


@router.patch("/{category_id}/image", response_model=CategoryResponse)
async def set_category_image(
    category_id: uuid.UUID,
    body: CategoryImageUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, category_id)
    category.image_url = body.image_url
    await db.flush()
    await db.refresh(category)
    return await _with_count(db, category)


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: uuid.UUID,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category(db, category_id)
    count = (await _furniture_counts(db, [category.id])).get(category.id, 0)
    if count:
        raise BadRequestError(f"Category '{category.name}' still has {count} furniture items")

    await db.delete(category)
    await db.flush()
    logger.info("Deleted category %s", category.name)
    return Response(status_code=204)


async def _get_category(db: AsyncSession, category_id: uuid.UUID) -> Category:
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise NotFoundError("Category", str(category_id))
    return category


async def _ensure_name_free(db: AsyncSession, name: str) -> None:
    result = await db.execute(select(Category.id).where(Category.name == name))
    if result.scalar_one_or_none() is not None:
        raise BadRequestError(f"Category '{name}' already exists")


async def _furniture_counts(db: AsyncSession, category_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not category_ids:
        return {}
    result = await db.execute(
        select(Furniture.category_id, func.count(Furniture.id))
        .where(Furniture.category_id.in_(category_ids))
        .group_by(Furniture.category_id)
    )
    return {category_id: count for category_id, count in result.all()}


async def _with_count(db: AsyncSession, category: Category) -> CategoryResponse:
    counts = await _furniture_counts(db, [category.id])
    return _category_response(category, counts.get(category.id, 0))


def _category_response(category: Category, furniture_count: int) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        image_url=category.image_url,
        featured=category.featured,
        furniture_count=furniture_count,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )
