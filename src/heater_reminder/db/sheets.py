"""Google Sheets record store backed by gspread."""

from __future__ import annotations

import logging
import re
import threading
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from gspread.utils import rowcol_to_a1

from ..config import settings
from ..errors import StoreConnectionError, WriteError
from ..models.domain import RawRow, SheetSnapshot
from .base import RecordStore

logger = logging.getLogger(__name__)

_UPDATED_RANGE_ROW = re.compile(r"[A-Z]+(\d+)(?::[A-Z]+\d+)?$")


@lru_cache()
def get_sheets_client(credentials_file: Path) -> gspread.Client:
    """Get a cached, authorised gspread client for the service-account key file."""
    if not credentials_file.exists():
        raise StoreConnectionError(f"Credentials file not found: {credentials_file}")
    try:
        return gspread.service_account(filename=str(credentials_file))
    except (ValueError, GoogleAuthError) as exc:
        raise StoreConnectionError(f"Invalid service-account credentials: {exc}") from exc


class SheetsRecordStore(RecordStore):
    """Reads and writes the customer worksheet of a Google spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        worksheet_index: Optional[int] = None,
        credentials_file: Optional[Path] = None,
        value_input_option: Optional[str] = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id or settings.spreadsheet_id
        if not self.spreadsheet_id:
            raise StoreConnectionError(
                "Spreadsheet id is not configured. Set HEATER_SPREADSHEET_ID in your environment."
            )
        self.worksheet_index = worksheet_index if worksheet_index is not None else settings.worksheet_index
        self.credentials_file = credentials_file or settings.credentials_file
        self.value_input_option = value_input_option or settings.value_input_option
        self._lock = threading.Lock()

    def _worksheet(self) -> gspread.Worksheet:
        client = get_sheets_client(self.credentials_file)
        try:
            spreadsheet = client.open_by_key(self.spreadsheet_id)
            worksheet = spreadsheet.get_worksheet(self.worksheet_index)
        except gspread.exceptions.SpreadsheetNotFound as exc:
            raise StoreConnectionError(
                f"Spreadsheet '{self.spreadsheet_id}' not found or not shared with the service account."
            ) from exc
        except gspread.exceptions.WorksheetNotFound as exc:
            raise StoreConnectionError(f"No worksheet at index {self.worksheet_index}.") from exc
        except (gspread.exceptions.GSpreadException, requests.exceptions.RequestException) as exc:
            raise StoreConnectionError(f"Failed to reach Google Sheets: {exc}") from exc
        if worksheet is None:
            raise StoreConnectionError(f"No worksheet at index {self.worksheet_index}.")
        return worksheet

    def ping(self) -> str:
        worksheet = self._worksheet()
        logger.info(f"Connected to spreadsheet '{worksheet.spreadsheet.title}', worksheet '{worksheet.title}'")
        return f"{worksheet.spreadsheet.title}:{worksheet.title}"

    def load_all(self) -> SheetSnapshot:
        worksheet = self._worksheet()
        try:
            # get_all_values keeps phone numbers as text; get_all_records would numericise them.
            values = worksheet.get_all_values()
        except (gspread.exceptions.GSpreadException, requests.exceptions.RequestException) as exc:
            raise StoreConnectionError(f"Failed to read worksheet '{worksheet.title}': {exc}") from exc

        if not values:
            logger.warning(f"Worksheet '{worksheet.title}' has no header row")
            return SheetSnapshot(headers=[], rows=[], title=worksheet.title)

        headers = [header.strip() for header in values[0]]
        rows: list[RawRow] = []
        for position, row_values in enumerate(values[1:], start=2):
            row = {
                header: (row_values[index] if index < len(row_values) else "")
                for index, header in enumerate(headers)
                if header
            }
            rows.append(RawRow(position=position, values=row))
        logger.info(f"Loaded {len(rows)} rows from worksheet '{worksheet.title}'")
        return SheetSnapshot(headers=headers, rows=rows, title=worksheet.title)

    def append_row(self, values: Mapping[str, str]) -> int:
        with self._lock:
            worksheet = self._worksheet()
            try:
                headers = [header.strip() for header in worksheet.row_values(1)]
                response = worksheet.append_row(
                    [values.get(header, "") for header in headers],
                    value_input_option=self.value_input_option,
                    table_range="A1",
                )
            except (gspread.exceptions.GSpreadException, requests.exceptions.RequestException) as exc:
                raise WriteError(f"Google Sheets rejected the new row: {exc}") from exc

        updated_range = (response or {}).get("updates", {}).get("updatedRange", "")
        match = _UPDATED_RANGE_ROW.search(updated_range)
        if not match:
            raise WriteError(f"Unexpected append response range '{updated_range}'")
        return int(match.group(1))

    def _write_cells(self, position: int, headers: list[str], updates: Mapping[str, str]) -> None:
        payload = [
            {"range": rowcol_to_a1(position, headers.index(column) + 1), "values": [[value]]}
            for column, value in updates.items()
        ]
        with self._lock:
            worksheet = self._worksheet()
            try:
                worksheet.batch_update(payload, value_input_option=self.value_input_option)
            except (gspread.exceptions.GSpreadException, requests.exceptions.RequestException) as exc:
                raise WriteError(f"Google Sheets rejected the update of row {position}: {exc}") from exc
