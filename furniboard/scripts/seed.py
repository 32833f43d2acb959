"""
Seed script for the Furniboard admin.

Populates the database with demo quotes and contact tickets spread across
the board columns. Everything goes through the board engine so every column
starts densely ordered.

Usage:
    python -m furniboard.scripts.seed
"""

import asyncio

from sqlalchemy import select

from furniboard.common.enums import ContactTicketStatus, QuoteStatus
from furniboard.common.logging import get_logger, setup_logging
from furniboard.core.board.boards import contact_board, quote_board
from furniboard.db.models import ContactTicket, Quote, QuoteItem
from furniboard.db.session import async_session_factory

logger = get_logger("scripts.seed")

SEED_ACTOR = "seed"

QUOTES = [
    {
        "customer_name": "Sarah Chen",
        "customer_email": "sarah@example.org",
        "customer_phone": "+44 20 7946 0101",
        "postcode": "SW1A 1AA",
        "address": "12 Rosebery Avenue, London",
        "message": "Looking to furnish a new living room.",
        "items": [
            {"furniture_id": "arb-sofa-01", "furniture_name": "Arboreal 3-Seater", "category": "Sofas", "color": "Oat", "quantity": 1},
            {"furniture_id": "arb-table-07", "furniture_name": "Oak Coffee Table", "category": "Tables", "size": "120x60", "quantity": 1},
        ],
        "status": QuoteStatus.OPEN,
    },
    {
        "customer_name": "Marcus Johnson",
        "customer_email": "marcus@example.org",
        "customer_phone": "+44 20 7946 0102",
        "postcode": "M1 1AE",
        "address": "4 Piccadilly Gardens, Manchester",
        "message": None,
        "items": [
            {"furniture_id": "dk-chair-03", "furniture_name": "DK Lounge Chair", "category": "Chairs", "color": "Walnut", "quantity": 4},
        ],
        "status": QuoteStatus.ANSWERED,
    },
    {
        "customer_name": "Elena Rodriguez",
        "customer_email": "elena@example.org",
        "customer_phone": "+44 20 7946 0103",
        "postcode": "EH1 1YZ",
        "address": "88 Royal Mile, Edinburgh",
        "message": "Can you deliver before the end of the month?",
        "items": [
            {"furniture_id": "vol-bed-02", "furniture_name": "Voller Bed Frame", "category": "Beds", "size": "King", "quantity": 1},
            {"furniture_id": "vol-ns-02", "furniture_name": "Voller Nightstand", "category": "Storage", "quantity": 2},
        ],
        "status": QuoteStatus.BUDGET_WAITING,
    },
    {
        "customer_name": "David Kim",
        "customer_email": "david@example.org",
        "customer_phone": "+44 20 7946 0104",
        "postcode": "BS1 4DJ",
        "address": "3 Harbourside, Bristol",
        "message": "Office fit-out for six desks.",
        "items": [
            {"furniture_id": "liv-desk-11", "furniture_name": "Living Desk", "category": "Desks", "quantity": 6},
        ],
        "status": QuoteStatus.OPEN,
    },
]

TICKETS = [
    {"name": "Priya Patel", "email": "priya@example.org", "phone": None, "message": "Do you have a showroom in Leeds?", "status": ContactTicketStatus.NEW},
    {"name": "Tom Walsh", "email": "tom@example.org", "phone": "+44 7700 900123", "message": "My order arrived damaged.", "status": ContactTicketStatus.IN_PROGRESS},
    {"name": "Anna Novak", "email": "anna@example.org", "phone": None, "message": "Are your fabrics pet friendly?", "status": ContactTicketStatus.ANSWERED},
    {"name": "Liam Byrne", "email": "liam@example.org", "phone": None, "message": "Interested in trade pricing.", "status": ContactTicketStatus.NEW},
]


async def main() -> None:
    setup_logging()
    async with async_session_factory() as session:
        # ------------------------------------------------------------------
        # Guard: skip if already seeded
        # ------------------------------------------------------------------
        result = await session.execute(
            select(Quote).where(Quote.customer_email == QUOTES[0]["customer_email"])
        )
        if result.scalar_one_or_none() is not None:
            print("Database already seeded -- skipping.")
            return

        # ==================================================================
        # QUOTES
        # ==================================================================
        for data in QUOTES:
            data = dict(data)
            items = data.pop("items")
            status = data.pop("status")
            total_items = sum(i["quantity"] for i in items)
            quote = Quote(
                **data,
                total_items=total_items,
                items=[QuoteItem(**i) for i in items],
            )
            await quote_board.create(
                session,
                quote,
                f"Quote created by {quote.customer_name} with {total_items} items",
                {"total_items": total_items, "status": QuoteStatus.OPEN.value},
                performed_by=SEED_ACTOR,
            )
            if status != QuoteStatus.OPEN:
                await quote_board.append_to_end(session, quote.id, status, SEED_ACTOR)

        # ==================================================================
        # CONTACT TICKETS
        # ==================================================================
        for data in TICKETS:
            data = dict(data)
            status = data.pop("status")
            ticket = ContactTicket(**data)
            await contact_board.create(
                session,
                ticket,
                f"Contact ticket created by {ticket.name}",
                {"status": ContactTicketStatus.NEW.value, "name": ticket.name, "email": ticket.email},
                performed_by=SEED_ACTOR,
            )
            if status != ContactTicketStatus.NEW:
                await contact_board.append_to_end(session, ticket.id, status, SEED_ACTOR)

        await session.commit()

    logger.info("Seeded %d quotes and %d contact tickets", len(QUOTES), len(TICKETS))
    print(f"Seeded {len(QUOTES)} quotes and {len(TICKETS)} contact tickets.")


if __name__ == "__main__":
    asyncio.run(main())
