"""Customer contact tickets and the admin ticket board."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from furniboard.api.deps import get_db, require_admin
from furniboard.api.v1.quotes import HistoryResponse, history_response
from furniboard.common.enums import ContactTicketStatus
from furniboard.core.board.boards import contact_board
from furniboard.core.board.schemas import BoardStats
from furniboard.db.models.contact import ContactTicket

router = APIRouter(prefix="/contacts", tags=["Contacts"])


# ---------- Schemas ----------


class ContactTicketCreate(BaseModel):
    name: str
    email: EmailStr
    phone: str | None = None
    message: str


class ContactTicketUpdate(BaseModel):
    status: ContactTicketStatus | None = None
    board_position: int | None = Field(None, ge=0)
    admin_notes: str | None = None
    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    message: str | None = None


class ContactTicketPositionUpdate(BaseModel):
    status: ContactTicketStatus
    board_position: int = Field(..., ge=0)


class ContactTicketResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str | None
    message: str
    status: str
    board_position: int
    admin_notes: str | None
    created_at: datetime
    updated_at: datetime
    history: list[HistoryResponse] | None = None


# ---------- Public endpoints ----------


@router.post("", response_model=ContactTicketResponse, status_code=201)
async def create_ticket(body: ContactTicketCreate, db: AsyncSession = Depends(get_db)):
    ticket = ContactTicket(**body.model_dump())
    await contact_board.create(
        db,
        ticket,
        f"Contact ticket created by {body.name}",
        {"status": ContactTicketStatus.NEW.value, "name": body.name, "email": body.email},
        performed_by="customer",
    )
    return _ticket_response(ticket)


# ---------- Admin endpoints ----------


@router.get("/admin", response_model=list[ContactTicketResponse])
async def list_tickets(
    include_history: bool = Query(False),
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    options = [selectinload(ContactTicket.history)] if include_history else []
    tickets = await contact_board.store.all_ordered(db, options)
    return [_ticket_response(t, include_history) for t in tickets]


@router.get("/admin/by-status", response_model=dict[str, list[ContactTicketResponse]])
async def tickets_by_status(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    columns = await contact_board.columns(db)
    return {status: [_ticket_response(t) for t in column] for status, column in columns.items()}


@router.get("/admin/stats", response_model=BoardStats)
async def ticket_stats(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await contact_board.stats(db)


@router.get("/admin/{ticket_id}", response_model=ContactTicketResponse)
async def get_ticket(
    ticket_id: uuid.UUID,
    include_history: bool = Query(False),
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    options = [selectinload(ContactTicket.history)] if include_history else []
    ticket = await contact_board.get(db, ticket_id, options)
    return _ticket_response(ticket, include_history)


@router.patch("/admin/{ticket_id}", response_model=ContactTicketResponse)
async def update_ticket(
    ticket_id: uuid.UUID,
    body: ContactTicketUpdate,
    actor: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    fields = body.model_dump(exclude_unset=True, exclude={"status", "board_position"})

    # Status and position only ever change through the board engine
    if body.board_position is not None:
        status = body.status
        if status is None:
            status = (await contact_board.get(db, ticket_id)).status
        ticket = await contact_board.move(db, ticket_id, status, body.board_position, actor, fields)
    elif body.status is not None:
        ticket = await contact_board.append_to_end(db, ticket_id, body.status, actor, fields)
    else:
        ticket = await contact_board.update(db, ticket_id, fields, actor)
    return _ticket_response(ticket)


@router.patch("/admin/{ticket_id}/position", response_model=ContactTicketResponse)
async def update_ticket_position(
    ticket_id: uuid.UUID,
    body: ContactTicketPositionUpdate,
    actor: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    ticket = await contact_board.move(db, ticket_id, body.status, body.board_position, actor)
    return _ticket_response(ticket)


@router.delete("/admin/{ticket_id}", status_code=204)
async def delete_ticket(
    ticket_id: uuid.UUID,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await contact_board.delete(db, ticket_id)
    return Response(status_code=204)


def _ticket_response(ticket: ContactTicket, include_history: bool = False) -> ContactTicketResponse:
    return ContactTicketResponse(
        id=ticket.id,
        name=ticket.name,
        email=ticket.email,
        phone=ticket.phone,
        message=ticket.message,
        status=ticket.status,
        board_position=ticket.board_position,
        admin_notes=ticket.admin_notes,
        created_at=ticket.created_at,
        updated_at=ticket.updated_at,
        history=[history_response(h) for h in ticket.history] if include_history else None,
    )
