"""Showroom gallery images, added by URL and ordered by position."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from furniboard.api.deps import get_db, require_admin
from furniboard.common.exceptions import BadRequestError, NotFoundError
from furniboard.db.models.catalog import ShowroomImage

router = APIRouter(prefix="/showroom", tags=["Catalog"])


# ---------- Schemas ----------


class ShowroomImageCreate(BaseModel):
    url: str = Field(..., min_length=1)
    title: str | None = None
    description: str | None = None
    position: int | None = Field(None, ge=0)


class ShowroomImagesAdd(BaseModel):
    images: list[ShowroomImageCreate] = Field(..., min_length=1)


class ShowroomImageUpdate(BaseModel):
    url: str | None = Field(None, min_length=1)
    title: str | None = None
    description: str | None = None
    position: int | None = Field(None, ge=0)


class ShowroomPosition(BaseModel):
    id: uuid.UUID
    position: int = Field(..., ge=0)


class ShowroomPositionsUpdate(BaseModel):
    images: list[ShowroomPosition] = Field(..., min_length=1)


class ShowroomImageResponse(BaseModel):
    id: uuid.UUID
    url: str
    position: int
    title: str | None
    description: str | None
    created_at: datetime
    model_config = {"from_attributes": True}


# ---------- Public endpoints ----------


@router.get("", response_model=list[ShowroomImageResponse])
async def list_showroom_images(db: AsyncSession = Depends(get_db)):
    return await _gallery(db)


# ---------- Admin endpoints ----------


@router.get("/admin", response_model=list[ShowroomImageResponse])
async def admin_list_showroom_images(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await _gallery(db)


@router.post("", response_model=list[ShowroomImageResponse], status_code=201)
async def add_showroom_images(
    body: ShowroomImagesAdd,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Images without a position go after the current last one."""
    last = (await db.execute(select(func.max(ShowroomImage.position)))).scalar()
    next_position = 0 if last is None else last + 1
    for image in body.images:
        position = next_position if image.position is None else image.position
        db.add(ShowroomImage(**image.model_dump(exclude={"position"}), position=position))
        next_position = max(next_position, position + 1)

    await db.flush()
    return await _gallery(db)


@router.put("/positions", response_model=list[ShowroomImageResponse])
async def update_showroom_positions(
    body: ShowroomPositionsUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    ids = [entry.id for entry in body.images]
    result = await db.execute(select(ShowroomImage).where(ShowroomImage.id.in_(ids)))
    by_id = {image.id: image for image in result.scalars().all()}
    for entry in body.images:
        image = by_id.get(entry.id)
        if image is None:
            raise NotFoundError("Showroom image", str(entry.id))
        image.position = entry.position

    await db.flush()
    return await _gallery(db)


@router.put("/{image_id}", response_model=ShowroomImageResponse)
async def update_showroom_image(
    image_id: uuid.UUID,
    body: ShowroomImageUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    image = await _get_image(db, image_id)
    fields = body.model_dump(exclude_unset=True)
    for key in ("url", "position"):
        if key in fields and fields[key] is None:
            raise BadRequestError(f"{key} cannot be cleared")

    for key, value in fields.items():
        setattr(image, key, value)
    await db.flush()
    await db.refresh(image)
    return image


@router.delete("/{image_id}", status_code=204)
async def delete_showroom_image(
    image_id: uuid.UUID,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    image = await _get_image(db, image_id)
    await db.delete(image)
    await db.flush()
    return Response(status_code=204)


async def _gallery(db: AsyncSession) -> list[ShowroomImage]:
    result = await db.execute(
        select(ShowroomImage).order_by(ShowroomImage.position, ShowroomImage.created_at)
    )
    return list(result.scalars().all())


async def _get_image(db: AsyncSession, image_id: uuid.UUID) -> ShowroomImage:
    result = await db.execute(select(ShowroomImage).where(ShowroomImage.id == image_id))
    image = result.scalar_one_or_none()
    if not image:
        raise NotFoundError("Showroom image", str(image_id))
    return image
