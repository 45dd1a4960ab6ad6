"""Base class for record store implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Mapping

from ..errors import InputValidationError, NotFoundError, SchemaError
from ..models import columns
from ..models.domain import RawRow, RowMatch, SheetSnapshot

logger = logging.getLogger(__name__)


def row_matches(values: Mapping[str, str], match: RowMatch) -> bool:
    """Serial wins when given; otherwise compare the customer name."""
    serial = (match.serial_tangki or "").strip()
    if serial:
        return (values.get(columns.SERIAL_TANGKI) or "").strip() == serial
    name = (match.name or "").strip()
    return bool(name) and (values.get(columns.NAME) or "").strip() == name


class RecordStore(ABC):
    """Contract for the row store backing the customer list.

    Rows are addressed by natural key (``RowMatch``) and resolved to a sheet
    position at write time, so a position read during an earlier load is
    never reused.
    """

    @abstractmethod
    def ping(self) -> str:
        """Check connectivity and return the store title."""
        raise NotImplementedError

    @abstractmethod
    def load_all(self) -> SheetSnapshot:
        raise NotImplementedError

    @abstractmethod
    def append_row(self, values: Mapping[str, str]) -> int:
        """Append a row and return its sheet position."""
        raise NotImplementedError

    @abstractmethod
    def _write_cells(self, position: int, headers: list[str], updates: Mapping[str, str]) -> None:
        raise NotImplementedError

    def find_row(self, match: RowMatch) -> RawRow:
        _require_match(match)
        for row in self.load_all().rows:
            if row_matches(row.values, match):
                return row
        raise NotFoundError("Customer not found")

    def set_cells(self, match: RowMatch, updates: Mapping[str, str], optional: Iterable[str] = ()) -> int:
        """Write several cells of the row identified by ``match``; return the row position.

        Columns listed in ``optional`` are dropped when the sheet lacks them;
        any other missing column raises ``SchemaError``.
        """
        _require_match(match)
        snapshot = self.load_all()
        optional = set(optional)
        missing = [column for column in updates if column not in snapshot.headers]
        required_missing = [column for column in missing if column not in optional]
        if required_missing:
            raise SchemaError(
                f"Columns not present in the sheet: {', '.join(required_missing)}", missing=required_missing
            )
        if missing:
            logger.warning(f"Skipping columns not present in the sheet: {missing}")
            updates = {column: value for column, value in updates.items() if column not in missing}
        for row in snapshot.rows:
            if row_matches(row.values, match):
                self._write_cells(row.position, snapshot.headers, updates)
                return row.position
        raise NotFoundError("Customer not found")

    def set_cell(self, match: RowMatch, column: str, value: str) -> int:
        return self.set_cells(match, {column: value})


def _require_match(match: RowMatch) -> None:
    if match.is_empty():
        raise InputValidationError("A customer name or tank serial is required to locate a row.")
