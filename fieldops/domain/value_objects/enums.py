"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class TicketStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "InProgress"
    SCHEDULED = "Scheduled"
    CLOSED = "Closed"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class DocumentType(str, Enum):
    MANUAL = "manual"
    WARRANTY = "warranty"
    PLAN = "plan"
    CONTRACT = "contract"
    OTHER = "other"


class DocumentTarget(str, Enum):
    """What a document is attached to."""

    MODULE = "module"
    MODULE_TYPE = "moduleType"
    CLIENT = "client"


class EventSource(str, Enum):
    TICKET = "ticket"
    EXTERNAL = "external"


class DeletionStatus(str, Enum):
    DELETED = "deleted"
    PARTIALLY_DELETED = "partially_deleted"
