from furniboard.common.enums import ContactTicketStatus, QuoteStatus
from furniboard.core.board.engine import BoardEngine
from furniboard.core.board.schemas import BoardDefinition
from furniboard.db.models.contact import ContactTicket, ContactTicketHistory
from furniboard.db.models.quote import Quote, QuoteHistory

QUOTE_BOARD = BoardDefinition(
    name="quotes",
    resource="Quote",
    model=Quote,
    history_model=QuoteHistory,
    status_enum=QuoteStatus,
    initial_status=QuoteStatus.OPEN,
)

CONTACT_BOARD = BoardDefinition(
    name="contact_tickets",
    resource="Contact ticket",
    model=ContactTicket,
    history_model=ContactTicketHistory,
    status_enum=ContactTicketStatus,
    initial_status=ContactTicketStatus.NEW,
)

quote_board = BoardEngine(QUOTE_BOARD)
contact_board = BoardEngine(CONTACT_BOARD)
