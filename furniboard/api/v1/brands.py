"""Partner brands shown on the showroom site."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from furniboard.api.deps import get_db, require_admin
from furniboard.common.exceptions import BadRequestError, NotFoundError
from furniboard.db.models.catalog import Brand

router = APIRouter(prefix="/brands", tags=["Catalog"])


# ---------- Schemas ----------


class BrandCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    cover_url: str = Field(..., min_length=1)
    logo_url: str | None = None
    website_url: str | None = None
    description: str | None = None
    deals: list[str] = Field(default_factory=list)


class BrandUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    cover_url: str | None = Field(None, min_length=1)
    logo_url: str | None = None
    website_url: str | None = None
    description: str | None = None
    deals: list[str] | None = None


class BrandResponse(BaseModel):
    id: uuid.UUID
    name: str
    cover_url: str
    logo_url: str | None
    website_url: str | None
    description: str | None
    deals: list[str]
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


# ---------- Public endpoints ----------


@router.get("", response_model=list[BrandResponse])
async def list_brands(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Brand).order_by(Brand.name))
    return list(result.scalars().all())


# ---------- Admin endpoints ----------


@router.get("/admin", response_model=list[BrandResponse])
async def admin_list_brands(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Brand).order_by(Brand.name))
    return list(result.scalars().all())


@router.get("/{brand_id}", response_model=BrandResponse)
async def get_brand(brand_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await _get_brand(db, brand_id)


@router.post("", response_model=BrandResponse, status_code=201)
async def create_brand(
    body: BrandCreate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    brand = Brand(**body.model_dump())
    db.add(brand)
    await db.flush()
    await db.refresh(brand)
    return brand


@router.put("/{brand_id}", response_model=BrandResponse)
async def update_brand(
    brand_id: uuid.UUID,
    body: BrandUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    brand = await _get_brand(db, brand_id)
    fields = body.model_dump(exclude_unset=True)
    columns = Brand.__table__.columns
    for key, value in fields.items():
        if value is None and not columns[key].nullable:
            raise BadRequestError(f"{key} cannot be cleared")

    for key, value in fields.items():
        setattr(brand, key, value)

    await db.flush()
    await db.refresh(brand)
    return brand


@router.delete("/{brand_id}", status_code=204)
async def delete_brand(
    brand_id: uuid.UUID,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    brand = await _get_brand(db, brand_id)
    await db.delete(brand)
    await db.flush()
    return Response(status_code=204)


async def _get_brand(db: AsyncSession, brand_id: uuid.UUID) -> Brand:
    result = await db.execute(select(Brand).where(Brand.id == brand_id))
    brand = result.scalar_one_or_none()
    if not brand:
        raise NotFoundError("Brand", str(brand_id))
    return brand
