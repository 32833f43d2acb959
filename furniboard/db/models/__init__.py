from furniboard.db.models.catalog import (
    Brand,
    Category,
    Furniture,
    FurnitureImage,
    FurnitureVariation,
    ShowroomImage,
)
from furniboard.db.models.contact import ContactTicket, ContactTicketHistory
from furniboard.db.models.quote import Quote, QuoteHistory, QuoteItem

__all__ = [
    "Brand",
    "Category",
    "ContactTicket",
    "ContactTicketHistory",
    "Furniture",
    "FurnitureImage",
    "FurnitureVariation",
    "Quote",
    "QuoteHistory",
    "QuoteItem",
    "ShowroomImage",
]
