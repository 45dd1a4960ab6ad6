import gspread
import pytest

from heater_reminder.config import settings
from heater_reminder.db import sheets
from heater_reminder.errors import StoreConnectionError, WriteError
from heater_reminder.models import columns
from heater_reminder.models.domain import RowMatch

HEADERS = [columns.NAME, columns.SERIAL_TANGKI, columns.PHONE, "SERVIS 1", "SERVIS 2"]


class FakeSpreadsheet:
    title = "Data Pelanggan"

    def __init__(self, worksheet=None, error=None):
        self.worksheet = worksheet
        self.error = error

    def get_worksheet(self, index):
        if self.error:
            raise self.error
        return self.worksheet if index == 0 else None


class FakeWorksheet:
    title = "Sheet1"

    def __init__(self, values):
        self.values = values
        self.spreadsheet = FakeSpreadsheet(self)
        self.appended = []
        self.batches = []
        self.append_range = None

    def get_all_values(self):
        return [list(row) for row in self.values]

    def row_values(self, row):
        return list(self.values[row - 1])

    def append_row(self, values, value_input_option=None, table_range=None):
        self.appended.append((values, value_input_option, table_range))
        self.values.append(list(values))
        row = len(self.values)
        updated = self.append_range or f"Sheet1!A{row}:E{row}"
        return {"updates": {"updatedRange": updated}}

    def batch_update(self, payload, value_input_option=None):
        self.batches.append((payload, value_input_option))


class FakeClient:
    def __init__(self, spreadsheet=None, error=None):
        self.spreadsheet = spreadsheet
        self.error = error
        self.opened = []

    def open_by_key(self, key):
        self.opened.append(key)
        if self.error:
            raise self.error
        return self.spreadsheet


@pytest.fixture
def worksheet():
    return FakeWorksheet(
        [
            HEADERS,
            ["Budi", "TK-1", "081234567890", "2024-01-15", ""],
            ["", "", "", "", ""],
            ["Sari", "TK-2", "0812", ""],
        ]
    )


@pytest.fixture
def store(monkeypatch, worksheet):
    client = FakeClient(worksheet.spreadsheet)
    monkeypatch.setattr(sheets, "get_sheets_client", lambda credentials_file: client)
    return sheets.SheetsRecordStore(spreadsheet_id="sheet-123", worksheet_index=0, value_input_option="RAW")


def test_load_all_keeps_values_as_text(store):
    snapshot = store.load_all()

    assert snapshot.headers == HEADERS
    assert snapshot.title == "Sheet1"
    assert [row.position for row in snapshot.rows] == [2, 3, 4]
    assert snapshot.rows[0].values[columns.PHONE] == "081234567890"
    assert snapshot.rows[2].values["SERVIS 2"] == ""


def test_ping_reports_spreadsheet_and_worksheet(store):
    assert store.ping() == "Data Pelanggan:Sheet1"


def test_append_row_returns_sheet_row(store, worksheet):
    position = store.append_row({columns.NAME: "Rina", columns.PHONE: "0813"})

    assert position == 5
    values, option, table_range = worksheet.appended[0]
    assert values == ["Rina", "", "0813", "", ""]
    assert option == "RAW"
    assert table_range == "A1"


def test_append_row_with_unexpected_range(store, worksheet):
    worksheet.append_range = "Sheet1"

    with pytest.raises(WriteError):
        store.append_row({columns.NAME: "Rina"})


def test_set_cells_targets_matched_row(store, worksheet):
    position = store.set_cells(RowMatch(serial_tangki="TK-2"), {"SERVIS 1": "2025-01-20", columns.PHONE: "0899"})

    assert position == 4
    payload, option = worksheet.batches[0]
    assert payload == [
        {"range": "D4", "values": [["2025-01-20"]]},
        {"range": "C4", "values": [["0899"]]},
    ]
    assert option == "RAW"


def test_missing_spreadsheet_id(monkeypatch):
    monkeypatch.setattr(settings, "spreadsheet_id", None)

    with pytest.raises(StoreConnectionError):
        sheets.SheetsRecordStore()


def test_unshared_spreadsheet(monkeypatch):
    client = FakeClient(error=gspread.exceptions.SpreadsheetNotFound("not found"))
    monkeypatch.setattr(sheets, "get_sheets_client", lambda credentials_file: client)
    store = sheets.SheetsRecordStore(spreadsheet_id="missing", worksheet_index=0)

    with pytest.raises(StoreConnectionError) as excinfo:
        store.load_all()

    assert "not shared" in excinfo.value.message
    assert isinstance(excinfo.value.__cause__, gspread.exceptions.SpreadsheetNotFound)


def test_missing_worksheet(monkeypatch, worksheet):
    client = FakeClient(worksheet.spreadsheet)
    monkeypatch.setattr(sheets, "get_sheets_client", lambda credentials_file: client)
    store = sheets.SheetsRecordStore(spreadsheet_id="sheet-123", worksheet_index=2)

    with pytest.raises(StoreConnectionError):
        store.ping()


def test_missing_credentials_file(tmp_path):
    sheets.get_sheets_client.cache_clear()

    with pytest.raises(StoreConnectionError):
        sheets.get_sheets_client(tmp_path / "credentials.json")
