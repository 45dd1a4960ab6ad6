"""In-memory record store used for demo mode and tests."""

from __future__ import annotations

import threading
from typing import Iterable, Mapping, Optional

from ..models import columns
from ..models.domain import RawRow, SheetSnapshot
from .base import RecordStore


class MemoryRecordStore(RecordStore):
    """Keeps rows as dictionaries; positions start at 2 like a sheet with a header row."""

    def __init__(
        self,
        rows: Optional[Iterable[Mapping[str, str]]] = None,
        headers: Optional[Iterable[str]] = None,
        title: str = "memory",
    ) -> None:
        self.headers = list(headers or columns.DEFAULT_HEADERS)
        self.title = title
        self._rows: list[dict[str, str]] = [dict(row) for row in (rows or [])]
        self._lock = threading.Lock()
        self.load_count = 0

    def ping(self) -> str:
        return self.title

    def load_all(self) -> SheetSnapshot:
        with self._lock:
            self.load_count += 1
            rows = [
                RawRow(position=index + 2, values={header: row.get(header, "") for header in self.headers})
                for index, row in enumerate(self._rows)
            ]
        return SheetSnapshot(headers=list(self.headers), rows=rows, title=self.title)

    def append_row(self, values: Mapping[str, str]) -> int:
        with self._lock:
            self._rows.append({header: str(values.get(header, "")) for header in self.headers})
            return len(self._rows) + 1

    def _write_cells(self, position: int, headers: list[str], updates: Mapping[str, str]) -> None:
        with self._lock:
            self._rows[position - 2].update({column: str(value) for column, value in updates.items()})
