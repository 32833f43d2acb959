"""Furniture catalog: storefront listing and admin management."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, BeforeValidator, Field
from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from furniboard.api.deps import get_db, require_admin
from furniboard.common.exceptions import BadRequestError, NotFoundError
from furniboard.common.logging import get_logger
from furniboard.common.pagination import (
    PaginatedResponse,
    PaginationParams,
    apply_search,
    page_meta,
    paginate,
)
from furniboard.db.models.catalog import Category, Furniture, FurnitureImage, FurnitureVariation

logger = get_logger("api.furniture")

router = APIRouter(prefix="/furniture", tags=["Catalog"])

SEARCH_FIELDS = ["name", "description", "producer"]


# ---------- Schemas ----------


class VariationIn(BaseModel):
    name: str
    texture_type: str
    color: str | None = None
    color_code: str | None = None
    texture_image_url: str
    in_stock: bool = True


def _as_size_list(value: Any) -> Any:
    # A single size may be sent as a bare string
    if isinstance(value, str):
        return [value]
    return value


SizeList = Annotated[list[str], BeforeValidator(_as_size_list)]


class FurnitureCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    sizes: SizeList = Field(default_factory=list)
    description: str | None = None
    producer: str | None = None
    price: Decimal | None = Field(None, ge=0)
    featured: bool = False
    promotion_price: Decimal | None = Field(None, ge=0)
    is_promotion_active: bool = False
    promotion_expires_at: datetime | None = None
    in_stock: bool = True
    category_id: uuid.UUID
    variations: list[VariationIn] = Field(default_factory=list)


class FurnitureUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    sizes: SizeList | None = None
    description: str | None = None
    producer: str | None = None
    price: Decimal | None = Field(None, ge=0)
    featured: bool | None = None
    promotion_price: Decimal | None = Field(None, ge=0)
    is_promotion_active: bool | None = None
    promotion_expires_at: datetime | None = None
    in_stock: bool | None = None
    category_id: uuid.UUID | None = None
    variations: list[VariationIn] | None = None


class BulkStockUpdate(BaseModel):
    furniture_ids: list[uuid.UUID] = Field(..., min_length=1)
    in_stock: bool


class BulkStockResult(BaseModel):
    updated_count: int
    in_stock: bool


class ImageIn(BaseModel):
    url: str = Field(..., min_length=1)
    position: int | None = Field(None, ge=0)


class ImagesAdd(BaseModel):
    images: list[ImageIn] = Field(..., min_length=1)


class ImagePosition(BaseModel):
    id: uuid.UUID
    position: int = Field(..., ge=0)


class ImagePositionsUpdate(BaseModel):
    images: list[ImagePosition] = Field(..., min_length=1)


class VariationResponse(BaseModel):
    id: uuid.UUID
    name: str
    texture_type: str
    color: str | None
    color_code: str | None
    texture_image_url: str
    in_stock: bool
    model_config = {"from_attributes": True}


class ImageResponse(BaseModel):
    id: uuid.UUID
    url: str
    position: int
    model_config = {"from_attributes": True}


class FurnitureResponse(BaseModel):
    id: uuid.UUID
    name: str
    sizes: list[str]
    description: str | None
    producer: str | None
    price: Decimal | None
    current_price: Decimal | None
    featured: bool
    promotion_price: Decimal | None
    is_promotion_active: bool
    promotion_expires_at: datetime | None
    in_stock: bool
    category_id: uuid.UUID
    category_name: str
    variations: list[VariationResponse]
    images: list[ImageResponse]
    created_at: datetime
    updated_at: datetime


class FurnitureListResponse(PaginatedResponse[FurnitureResponse]):
    pass


class FurnitureFilters:
    """Catalog filters shared by the storefront and admin lists."""

    def __init__(
        self,
        category_id: uuid.UUID | None = Query(None),
        producer: str | None = Query(None),
        in_stock: bool | None = Query(None),
        featured: bool | None = Query(None),
        is_promotion_active: bool | None = Query(None),
        texture_type: str | None = Query(None, description="Any variation with this texture"),
        min_price: Decimal | None = Query(None, ge=0),
        max_price: Decimal | None = Query(None, ge=0),
    ):
        self.category_id = category_id
        self.producer = producer
        self.in_stock = in_stock
        self.featured = featured
        self.is_promotion_active = is_promotion_active
        self.texture_type = texture_type
        self.min_price = min_price
        self.max_price = max_price

    def apply(self, query: Select) -> Select:
        if self.category_id:
            query = query.where(Furniture.category_id == self.category_id)
        if self.producer:
            query = query.where(Furniture.producer == self.producer)
        if self.in_stock is not None:
            query = query.where(Furniture.in_stock == self.in_stock)
        if self.featured is not None:
            query = query.where(Furniture.featured == self.featured)
        if self.is_promotion_active is not None:
            query = query.where(Furniture.is_promotion_active == self.is_promotion_active)
        if self.texture_type:
            query = query.where(
                Furniture.variations.any(FurnitureVariation.texture_type == self.texture_type)
            )
        if self.min_price is not None:
            query = query.where(Furniture.price >= self.min_price)
        if self.max_price is not None:
            query = query.where(Furniture.price <= self.max_price)
        return query


# ---------- Public endpoints ----------


@router.get("", response_model=FurnitureListResponse)
async def list_furniture(
    filters: FurnitureFilters = Depends(),
    params: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Storefront listing; only pieces that are in stock."""
    filters.in_stock = True
    return await _list(db, filters, params)


@router.get("/producers", response_model=list[str])
async def list_producers(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Furniture.producer)
        .where(Furniture.producer.is_not(None))
        .distinct()
        .order_by(Furniture.producer)
    )
    return list(result.scalars().all())


# ---------- Admin endpoints ----------


@router.get("/admin", response_model=FurnitureListResponse)
async def admin_list_furniture(
    filters: FurnitureFilters = Depends(),
    params: PaginationParams = Depends(),
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await _list(db, filters, params)


@router.patch("/bulk-stock", response_model=BulkStockResult)
async def bulk_update_stock(
    body: BulkStockUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        update(Furniture)
        .where(Furniture.id.in_(body.furniture_ids))
        .values(in_stock=body.in_stock)
        .execution_options(synchronize_session="evaluate")
    )
    logger.info("Set in_stock=%s on %d furniture items", body.in_stock, result.rowcount)
    return BulkStockResult(updated_count=result.rowcount, in_stock=body.in_stock)


@router.post("", response_model=FurnitureResponse, status_code=201)
async def create_furniture(
    body: FurnitureCreate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await _require_category(db, body.category_id)
    furniture = Furniture(
        **body.model_dump(exclude={"variations", "category_id"}),
        category=category,
        variations=[FurnitureVariation(**v.model_dump()) for v in body.variations],
        images=[],
    )
    db.add(furniture)
    await db.flush()
    logger.info("Created furniture %s in %s", furniture.name, category.name)
    return furniture_response(furniture)


@router.delete("/images/{image_id}", response_model=FurnitureResponse)
async def delete_furniture_image(
    image_id: uuid.UUID,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(FurnitureImage).where(FurnitureImage.id == image_id))
    image = result.scalar_one_or_none()
    if not image:
        raise NotFoundError("Furniture image", str(image_id))

    furniture = await _get_furniture(db, image.furniture_id)
    furniture.images.remove(image)
    await db.flush()
    return furniture_response(furniture)


@router.get("/{furniture_id}", response_model=FurnitureResponse)
async def get_furniture(furniture_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return furniture_response(await _get_furniture(db, furniture_id))


@router.put("/{furniture_id}", response_model=FurnitureResponse)
async def update_furniture(
    furniture_id: uuid.UUID,
    body: FurnitureUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partial update. Sending ``variations`` replaces the whole set."""
    furniture = await _get_furniture(db, furniture_id)
    fields = body.model_dump(exclude_unset=True, exclude={"variations"})

    columns = Furniture.__table__.columns
    for key, value in fields.items():
        if value is None and not columns[key].nullable:
            raise BadRequestError(f"{key} cannot be cleared")
    if "variations" in body.model_fields_set and body.variations is None:
        raise BadRequestError("variations cannot be cleared; send an empty list")

    category_id = fields.pop("category_id", None)
    if category_id and category_id != furniture.category_id:
        furniture.category = await _require_category(db, category_id)

    for key, value in fields.items():
        setattr(furniture, key, value)
    if body.variations is not None:
        furniture.variations = [FurnitureVariation(**v.model_dump()) for v in body.variations]

    await db.flush()
    return furniture_response(furniture)


@router.delete("/{furniture_id}", status_code=204)
async def delete_furniture(
    furniture_id: uuid.UUID,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    furniture = await _get_furniture(db, furniture_id)
    await db.delete(furniture)
    await db.flush()
    logger.info("Deleted furniture %s", furniture.name)
    return Response(status_code=204)


@router.post("/{furniture_id}/images", response_model=FurnitureResponse, status_code=201)
async def add_furniture_images(
    furniture_id: uuid.UUID,
    body: ImagesAdd,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Attach images by URL. Images without a position go after the last one."""
    furniture = await _get_furniture(db, furniture_id)
    next_position = max((image.position for image in furniture.images), default=-1) + 1
    for image in body.images:
        position = next_position if image.position is None else image.position
        furniture.images.append(FurnitureImage(url=image.url, position=position))
        next_position = max(next_position, position + 1)

    await db.flush()
    return furniture_response(furniture)


@router.put("/{furniture_id}/images/positions", response_model=FurnitureResponse)
async def update_image_positions(
    furniture_id: uuid.UUID,
    body: ImagePositionsUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    furniture = await _get_furniture(db, furniture_id)
    by_id = {image.id: image for image in furniture.images}
    for entry in body.images:
        image = by_id.get(entry.id)
        if image is None:
            raise NotFoundError("Furniture image", str(entry.id))
        image.position = entry.position

    await db.flush()
    return furniture_response(furniture)


async def _list(
    db: AsyncSession, filters: FurnitureFilters, params: PaginationParams
) -> FurnitureListResponse:
    query = filters.apply(select(Furniture))
    query = apply_search(query, Furniture, params.search, SEARCH_FIELDS)
    items, total = await paginate(db, query, params, Furniture)
    return FurnitureListResponse(
        items=[furniture_response(f) for f in items], **page_meta(params, total)
    )


async def _get_furniture(db: AsyncSession, furniture_id: uuid.UUID) -> Furniture:
    result = await db.execute(select(Furniture).where(Furniture.id == furniture_id))
    furniture = result.scalar_one_or_none()
    if not furniture:
        raise NotFoundError("Furniture", str(furniture_id))
    return furniture


async def _require_category(db: AsyncSession, category_id: uuid.UUID) -> Category:
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise BadRequestError(f"Category '{category_id}' does not exist")
    return category


def current_price(furniture: Furniture, now: datetime | None = None) -> Decimal | None:
    """The promotion price while a promotion is live, otherwise the list price."""
    if furniture.is_promotion_active and furniture.promotion_price is not None:
        expires = furniture.promotion_expires_at
        if expires is None:
            return furniture.promotion_price
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        if expires > (now or datetime.now(timezone.utc)):
            return furniture.promotion_price
    return furniture.price


def furniture_response(furniture: Furniture) -> FurnitureResponse:
    return FurnitureResponse(
        id=furniture.id,
        name=furniture.name,
        sizes=furniture.sizes,
        description=furniture.description,
        producer=furniture.producer,
        price=furniture.price,
        current_price=current_price(furniture),
        featured=furniture.featured,
        promotion_price=furniture.promotion_price,
        is_promotion_active=furniture.is_promotion_active,
        promotion_expires_at=furniture.promotion_expires_at,
        in_stock=furniture.in_stock,
        category_id=furniture.category_id,
        category_name=furniture.category.name,
        variations=[VariationResponse.model_validate(v) for v in furniture.variations],
        images=[
            ImageResponse.model_validate(i)
            for i in sorted(furniture.images, key=lambda i: i.position)
        ],
        created_at=furniture.created_at,
        updated_at=furniture.updated_at,
    )
