"""Local Excel workbook record store."""

from __future__ import annotations

import logging
import threading
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..config import settings
from ..errors import StoreConnectionError, WriteError
from ..models import columns
from ..models.domain import RawRow, SheetSnapshot
from .base import RecordStore

logger = logging.getLogger(__name__)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class WorkbookRecordStore(RecordStore):
    """Stores customers in the first (or configured) worksheet of an .xlsx file."""

    def __init__(self, path: Optional[Path] = None, worksheet_index: Optional[int] = None) -> None:
        self.path = (path or settings.workbook_file).resolve()
        self.worksheet_index = worksheet_index if worksheet_index is not None else settings.worksheet_index
        self._lock = threading.Lock()

    def _ensure_exists(self) -> None:
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = "Pelanggan"
        worksheet.append(list(columns.DEFAULT_HEADERS))
        workbook.save(self.path)
        logger.info(f"Created customer workbook at {self.path}")

    def _open(self):
        self._ensure_exists()
        try:
            workbook = load_workbook(filename=self.path)
        except (OSError, InvalidFileException, KeyError, zipfile.BadZipFile) as exc:
            raise StoreConnectionError(f"Unable to open workbook '{self.path}': {exc}") from exc
        try:
            worksheet = workbook.worksheets[self.worksheet_index]
        except IndexError as exc:
            raise StoreConnectionError(
                f"Workbook '{self.path.name}' has no worksheet at index {self.worksheet_index}"
            ) from exc
        return workbook, worksheet

    def _save(self, workbook) -> None:
        try:
            workbook.save(self.path)
        except OSError as exc:
            raise WriteError(f"Unable to save workbook '{self.path}': {exc}") from exc

    @staticmethod
    def _headers(worksheet) -> list[str]:
        first_row = next(worksheet.iter_rows(min_row=1, max_row=1, values_only=True), None)
        return [_cell_text(cell) for cell in first_row] if first_row else []

    def ping(self) -> str:
        with self._lock:
            _, worksheet = self._open()
            return f"{self.path.name}:{worksheet.title}"

    def load_all(self) -> SheetSnapshot:
        with self._lock:
            _, worksheet = self._open()
            headers = self._headers(worksheet)
            rows: list[RawRow] = []
            for position, values in enumerate(worksheet.iter_rows(min_row=2, values_only=True), start=2):
                if not any(value not in (None, "") for value in values):
                    continue
                row = {header: _cell_text(values[index]) if index < len(values) else ""
                       for index, header in enumerate(headers) if header}
                rows.append(RawRow(position=position, values=row))
            return SheetSnapshot(headers=headers, rows=rows, title=worksheet.title)

    def append_row(self, values: Mapping[str, str]) -> int:
        with self._lock:
            workbook, worksheet = self._open()
            headers = self._headers(worksheet)
            if not headers:
                headers = list(columns.DEFAULT_HEADERS)
                worksheet.append(headers)
            worksheet.append([values.get(header, "") for header in headers])
            position = worksheet.max_row
            self._save(workbook)
            return position

    def _write_cells(self, position: int, headers: list[str], updates: Mapping[str, str]) -> None:
        with self._lock:
            workbook, worksheet = self._open()
            for column, value in updates.items():
                worksheet.cell(row=position, column=headers.index(column) + 1, value=value)
            self._save(workbook)
