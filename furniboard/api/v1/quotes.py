"""Customer quote requests and the admin quote board."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from furniboard.api.deps import get_db, require_admin
from furniboard.common.enums import HistoryAction, QuoteStatus
from furniboard.common.exceptions import BadRequestError
from furniboard.common.pagination import (
    PaginatedResponse,
    PaginationParams,
    apply_search,
    page_meta,
    paginate,
)
from furniboard.core.board.boards import quote_board
from furniboard.core.board.schemas import BoardStats
from furniboard.db.models.quote import Quote, QuoteItem

router = APIRouter(prefix="/quotes", tags=["Quotes"])

SEARCH_FIELDS = ["customer_name", "customer_email", "customer_phone", "postcode", "address"]


# ---------- Schemas ----------


class QuoteItemCreate(BaseModel):
    furniture_id: str
    furniture_name: str
    category: str
    size: str | None = None
    color: str | None = None
    color_code: str | None = None
    variation_id: str | None = None
    image_url: str | None = None
    quantity: int = Field(1, ge=1)


class QuoteCreate(BaseModel):
    customer_name: str
    customer_email: EmailStr
    customer_phone: str
    postcode: str
    address: str
    message: str | None = None
    items: list[QuoteItemCreate]


class QuoteUpdate(BaseModel):
    customer_name: str | None = None
    customer_email: EmailStr | None = None
    customer_phone: str | None = None
    postcode: str | None = None
    address: str | None = None
    message: str | None = None
    admin_notes: str | None = None


class QuoteItemsReplace(BaseModel):
    items: list[QuoteItemCreate] = Field(..., min_length=1)


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
    admin_notes: str | None = None


class QuotePositionUpdate(BaseModel):
    status: QuoteStatus
    board_position: int = Field(..., ge=0)


class QuoteItemResponse(BaseModel):
    id: uuid.UUID
    furniture_id: str
    furniture_name: str
    category: str
    size: str | None
    color: str | None
    color_code: str | None
    variation_id: str | None
    image_url: str | None
    quantity: int
    created_at: datetime
    model_config = {"from_attributes": True}


class HistoryResponse(BaseModel):
    id: uuid.UUID
    action: str
    description: str
    old_value: Any | None
    new_value: Any | None
    performed_by: str
    timestamp: datetime


class QuoteResponse(BaseModel):
    id: uuid.UUID
    customer_name: str
    customer_email: str
    customer_phone: str
    postcode: str
    address: str
    message: str | None
    status: str
    board_position: int
    total_items: int
    admin_notes: str | None
    created_at: datetime
    updated_at: datetime
    items: list[QuoteItemResponse]
    history: list[HistoryResponse] | None = None


class QuoteListResponse(PaginatedResponse[QuoteResponse]):
    pass


# ---------- Public endpoints ----------


@router.post("", response_model=QuoteResponse, status_code=201)
async def create_quote(body: QuoteCreate, db: AsyncSession = Depends(get_db)):
    if not body.items:
        raise BadRequestError("Quote must contain at least one item")

    total_items = sum(item.quantity for item in body.items)
    quote = Quote(
        **body.model_dump(exclude={"items"}),
        total_items=total_items,
        items=[QuoteItem(**item.model_dump()) for item in body.items],
    )
    await quote_board.create(
        db,
        quote,
        f"Quote created by {body.customer_name} with {total_items} items",
        {"total_items": total_items, "status": QuoteStatus.OPEN.value},
        performed_by="customer",
    )
    return _quote_response(quote)


# ---------- Admin endpoints ----------


@router.get("/admin", response_model=QuoteListResponse)
async def list_quotes(
    status: QuoteStatus | None = Query(None),
    params: PaginationParams = Depends(),
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    query = select(Quote)
    if status:
        query = query.where(Quote.status == status.value)
    query = apply_search(query, Quote, params.search, SEARCH_FIELDS)

    items, total = await paginate(db, query, params, Quote)
    return QuoteListResponse(items=[_quote_response(q) for q in items], **page_meta(params, total))


@router.get("/admin/by-status", response_model=dict[str, list[QuoteResponse]])
async def quotes_by_status(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    columns = await quote_board.columns(db)
    return {status: [_quote_response(q) for q in column] for status, column in columns.items()}


@router.get("/admin/stats", response_model=BoardStats)
async def quote_stats(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await quote_board.stats(db)


@router.get("/admin/{quote_id}", response_model=QuoteResponse)
async def get_quote(
    quote_id: uuid.UUID,
    include_history: bool = Query(False),
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    options = [selectinload(Quote.history)] if include_history else []
    quote = await quote_board.get(db, quote_id, options)
    return _quote_response(quote, include_history)


@router.patch("/admin/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_id: uuid.UUID,
    body: QuoteUpdate,
    actor: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    quote = await quote_board.update(db, quote_id, body.model_dump(exclude_unset=True), actor)
    return _quote_response(quote)


@router.put("/admin/{quote_id}/items", response_model=QuoteResponse)
async def replace_quote_items(
    quote_id: uuid.UUID,
    body: QuoteItemsReplace,
    actor: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    quote = await quote_board.get(db, quote_id)
    old_value = {"total_items": quote.total_items, "item_count": len(quote.items)}

    total_items = sum(item.quantity for item in body.items)
    quote.items = [QuoteItem(**item.model_dump()) for item in body.items]
    quote.total_items = total_items

    await quote_board.history.append(
        db,
        quote.id,
        HistoryAction.ITEMS_UPDATED,
        f"Items replaced: {len(body.items)} lines, {total_items} items",
        old_value,
        {"total_items": total_items, "item_count": len(body.items)},
        actor,
    )
    await db.flush()
    return _quote_response(quote)


@router.patch("/admin/{quote_id}/status", response_model=QuoteResponse)
async def update_quote_status(
    quote_id: uuid.UUID,
    body: QuoteStatusUpdate,
    actor: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    notes = body.model_dump(exclude_unset=True, include={"admin_notes"})
    quote = await quote_board.append_to_end(db, quote_id, body.status, actor, fields=notes)
    return _quote_response(quote)


@router.patch("/admin/{quote_id}/position", response_model=QuoteResponse)
async def update_quote_position(
    quote_id: uuid.UUID,
    body: QuotePositionUpdate,
    actor: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    quote = await quote_board.move(db, quote_id, body.status, body.board_position, actor)
    return _quote_response(quote)


@router.delete("/admin/{quote_id}", status_code=204)
async def delete_quote(
    quote_id: uuid.UUID,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await quote_board.delete(db, quote_id)
    return Response(status_code=204)


def history_response(entry) -> HistoryResponse:
    return HistoryResponse(
        id=entry.id,
        action=entry.action,
        description=entry.description,
        old_value=entry.old_value,
        new_value=entry.new_value,
        performed_by=entry.performed_by,
        timestamp=entry.created_at,
    )


def _quote_response(quote: Quote, include_history: bool = False) -> QuoteResponse:
    return QuoteResponse(
        id=quote.id,
        customer_name=quote.customer_name,
        customer_email=quote.customer_email,
        customer_phone=quote.customer_phone,
        postcode=quote.postcode,
        address=quote.address,
        message=quote.message,
        status=quote.status,
        board_position=quote.board_position,
        total_items=quote.total_items,
        admin_notes=quote.admin_notes,
        created_at=quote.created_at,
        updated_at=quote.updated_at,
        items=[QuoteItemResponse.model_validate(item) for item in quote.items],
        history=[history_response(h) for h in quote.history] if include_history else None,
    )
