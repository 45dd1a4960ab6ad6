"""Domain models for customer service records."""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Optional

ContactStatus = Literal["not_contacted", "contacted", "overdue"]
Priority = Literal["Low", "Medium", "High"]

CONTACT_STATUSES: tuple[str, ...] = ("not_contacted", "contacted", "overdue")
SLOT_COUNT = 15


@dataclass(slots=True, frozen=True)
class CustomerRecord:
    """A customer row with its service history and derived schedule."""

    name: str
    serial_tangki: str
    serial_kolektor: str
    address: str
    phone: str
    services: dict[int, str]
    row_index: int
    last_service: Optional[date] = None
    next_service: Optional[date] = None
    contact_status: Optional[ContactStatus] = None
    contact_date: Optional[date] = None
    contact_notes: Optional[str] = None
    next_reminder: Optional[date] = None

    @property
    def record_key(self) -> str:
        """Durable key for addressing updates: tank serial when known, else the name."""
        return self.serial_tangki or self.name


@dataclass(slots=True, frozen=True)
class RowMatch:
    """Identifies a row in the store by natural key rather than position."""

    name: Optional[str] = None
    serial_tangki: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.name or "").strip() and not (self.serial_tangki or "").strip()


@dataclass(slots=True)
class RawRow:
    """A row as read from the store: sheet position plus column values."""

    position: int
    values: dict[str, str]


@dataclass(slots=True)
class SheetSnapshot:
    """Everything one load returns: header order and data rows."""

    headers: list[str]
    rows: list[RawRow] = field(default_factory=list)
    title: str = ""
