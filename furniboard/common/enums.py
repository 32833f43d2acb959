import enum


class QuoteStatus(str, enum.Enum):
    OPEN = "OPEN"
    ANSWERED = "ANSWERED"
    BUDGET_WAITING = "BUDGET_WAITING"
    BUDGET_ACCEPTED = "BUDGET_ACCEPTED"
    BUDGET_DENIED = "BUDGET_DENIED"
    DELIVERED = "DELIVERED"


class ContactTicketStatus(str, enum.Enum):
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    ANSWERED = "ANSWERED"
    CLOSED = "CLOSED"


class HistoryAction(str, enum.Enum):
    CREATED = "CREATED"
    STATUS_CHANGED = "STATUS_CHANGED"
    POSITION_CHANGED = "POSITION_CHANGED"
    ADMIN_NOTES_UPDATED = "ADMIN_NOTES_UPDATED"
    CUSTOMER_INFO_UPDATED = "CUSTOMER_INFO_UPDATED"
    ITEMS_UPDATED = "ITEMS_UPDATED"
