"""Data access helpers for turning sheet rows into customer records."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from ..errors import SchemaError
from ..models import columns
from ..models.domain import CONTACT_STATUSES, SLOT_COUNT, CustomerRecord, SheetSnapshot
from ..db.base import RecordStore
from ..services.dates import last_service_date, next_service_date, parse_service_date

logger = logging.getLogger(__name__)


def _text(row: Mapping[str, object], column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


def _contact_status(value: str) -> Optional[str]:
    normalized = value.strip().lower().replace(" ", "_")
    return normalized if normalized in CONTACT_STATUSES else None


def missing_columns(headers: Iterable[str]) -> list[str]:
    present = {header.strip() for header in headers}
    return [column for column in columns.EXPECTED_COLUMNS if column not in present]


def check_schema(headers: Iterable[str]) -> Optional[SchemaError]:
    """Report expected columns the sheet lacks; a soft condition, never raised."""
    missing = missing_columns(headers)
    if not missing:
        return None
    logger.warning(f"Missing expected headers: {missing}")
    return SchemaError(f"Missing expected columns: {', '.join(missing)}", missing=missing)


def normalize_row(row: Mapping[str, object], row_index: int) -> Optional[CustomerRecord]:
    """Convert one raw row into a record, or ``None`` when the row has no name."""

    name = _text(row, columns.NAME)
    if not name:
        return None

    services = {slot: _text(row, columns.slot_column(slot)) for slot in range(1, SLOT_COUNT + 1)}
    notes = _text(row, columns.CONTACT_NOTES)
    return CustomerRecord(
        name=name,
        serial_tangki=_text(row, columns.SERIAL_TANGKI),
        serial_kolektor=_text(row, columns.SERIAL_KOLEKTOR),
        address=_text(row, columns.ADDRESS),
        phone=_text(row, columns.PHONE),
        services=services,
        row_index=row_index,
        last_service=last_service_date(services),
        next_service=next_service_date(services),
        contact_status=_contact_status(_text(row, columns.CONTACT_STATUS)),
        contact_date=parse_service_date(_text(row, columns.CONTACT_DATE)),
        contact_notes=notes or None,
        next_reminder=parse_service_date(_text(row, columns.NEXT_REMINDER)),
    )


def normalize_snapshot(snapshot: SheetSnapshot) -> tuple[CustomerRecord, ...]:
    records: list[CustomerRecord] = []
    skipped = 0
    for raw in snapshot.rows:
        record = normalize_row(raw.values, raw.position)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    if skipped:
        logger.info(f"Skipped {skipped} rows without a customer name")
    return tuple(records)


def load_customers(store: RecordStore) -> tuple[CustomerRecord, ...]:
    """Load and normalize every customer row from ``store``."""

    snapshot = store.load_all()
    check_schema(snapshot.headers)
    records = normalize_snapshot(snapshot)
    logger.info(f"Processed data: {len(records)} valid records")
    return records
