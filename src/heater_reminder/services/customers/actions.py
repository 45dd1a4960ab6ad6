"""Customer mutations: add, record a service, update contact status."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

from ...errors import AllSlotsFullError, InputValidationError, StoreConnectionError
from ...models import columns
from ...models.domain import CONTACT_STATUSES, SLOT_COUNT, RowMatch
from ..dates import parse_service_date
from .book import CustomerBook

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NewCustomer:
    name: str
    phone: str
    address: str = ""
    serial_tangki: str = ""
    serial_kolektor: str = ""
    services: dict[int, str] = field(default_factory=dict)
    next_reminder: Optional[str] = None


def _require_date(value: object, field_name: str) -> date:
    parsed = parse_service_date(value)
    if parsed is None:
        raise InputValidationError(f"Invalid {field_name}. Use YYYY-MM-DD.")
    return parsed


def _reload_after_write(book: CustomerBook, action: str) -> None:
    # The write already succeeded; a failed reload leaves the old snapshot for the next refresh.
    try:
        book.refresh()
    except StoreConnectionError as exc:
        logger.error(f"Reload after {action} failed: {exc}")


def add_customer(book: CustomerBook, customer: NewCustomer) -> int:
    """Append a customer row and reload; returns the new row position."""

    name = customer.name.strip()
    phone = customer.phone.strip()
    if not name or not phone:
        raise InputValidationError("Please provide at least customer name and phone number.")

    row: dict[str, str] = {
        columns.NAME: name,
        columns.SERIAL_TANGKI: customer.serial_tangki.strip(),
        columns.SERIAL_KOLEKTOR: customer.serial_kolektor.strip(),
        columns.ADDRESS: customer.address.strip(),
        columns.PHONE: phone,
    }
    for slot, value in sorted(customer.services.items()):
        if not 1 <= slot <= SLOT_COUNT:
            raise InputValidationError(f"Service slot must be between 1 and {SLOT_COUNT}")
        if value and value.strip():
            row[columns.slot_column(slot)] = _require_date(value, f"service date for slot {slot}").isoformat()
    if customer.next_reminder:
        row[columns.NEXT_REMINDER] = _require_date(customer.next_reminder, "next reminder").isoformat()

    with book.mutation_lock:
        position = book.store.append_row(row)
        logger.info(f"Added new customer: {name} at row {position}")
        _reload_after_write(book, "add customer")
    return position


def first_empty_slot(values: Mapping[str, str]) -> Optional[str]:
    for column in columns.SERVICE_COLUMNS:
        if column in values and not (values.get(column) or "").strip():
            return column
    return None


def update_service(
    book: CustomerBook,
    match: RowMatch,
    service_date: object,
    slot_column: Optional[str] = None,
) -> str:
    """Record a service date in the first empty slot of the matched row.

    ``slot_column`` is validated but the write always goes to the first
    empty slot in slot order; the returned column name says which one.
    """
    if slot_column:
        try:
            columns.slot_from_column(slot_column)
        except ValueError as exc:
            raise InputValidationError(str(exc)) from exc
    when = _require_date(service_date, "service date")

    with book.mutation_lock:
        row = book.store.find_row(match)
        target = first_empty_slot(row.values)
        if target is None:
            raise AllSlotsFullError("All service columns are full")
        if slot_column and slot_column.strip().upper() != target:
            logger.info(f"Requested {slot_column} but writing first empty slot {target}")

        book.store.set_cell(match, target, when.isoformat())
        logger.info(f"Updated {target} for customer {match.name or match.serial_tangki}")
        _reload_after_write(book, "service update")
    return target


def update_contact_status(
    book: CustomerBook,
    match: RowMatch,
    status: str,
    notes: Optional[str] = None,
    contact_date: Optional[object] = None,
    today: Optional[date] = None,
) -> int:
    """Persist a contact status; 'contacted' stamps the contact date (today unless given)."""

    if status not in CONTACT_STATUSES:
        raise InputValidationError(f"Unknown contact status '{status}'")

    stamped = ""
    if status == "contacted":
        stamped = (
            _require_date(contact_date, "contact date") if contact_date else (today or date.today())
        ).isoformat()

    updates = {
        columns.CONTACT_STATUS: status,
        columns.CONTACT_DATE: stamped,
        columns.CONTACT_NOTES: (notes or "").strip(),
    }
    with book.mutation_lock:
        position = book.store.set_cells(
            match, updates, optional=(columns.CONTACT_DATE, columns.CONTACT_NOTES)
        )
        logger.info(f"Contact status of row {position} set to {status}")
        _reload_after_write(book, "contact status update")
    return position
