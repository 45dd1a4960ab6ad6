from datetime import datetime

import pytest
from openpyxl import Workbook, load_workbook

from heater_reminder.db.workbook import WorkbookRecordStore
from heater_reminder.errors import NotFoundError, StoreConnectionError
from heater_reminder.models import columns
from heater_reminder.models.domain import RowMatch


def _write_workbook(path, rows):
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Pelanggan"
    worksheet.append([columns.NAME, columns.PHONE, "SERVIS 1", "SERVIS 2", columns.CONTACT_STATUS])
    for row in rows:
        worksheet.append(row)
    workbook.save(path)


def test_missing_workbook_is_created_with_default_headers(tmp_path):
    path = tmp_path / "nested" / "customers.xlsx"
    store = WorkbookRecordStore(path=path, worksheet_index=0)

    snapshot = store.load_all()

    assert path.exists()
    assert snapshot.headers == list(columns.DEFAULT_HEADERS)
    assert snapshot.rows == []
    assert store.ping() == "customers.xlsx:Pelanggan"


def test_cells_are_read_as_text(tmp_path):
    path = tmp_path / "customers.xlsx"
    _write_workbook(
        path,
        [
            ["Budi", 81234567890, datetime(2024, 1, 15), "2024-07-20", None],
            [None, None, None, None, None],
            ["Sari", "0812", None, None, "contacted"],
        ],
    )

    snapshot = WorkbookRecordStore(path=path, worksheet_index=0).load_all()

    assert [row.position for row in snapshot.rows] == [2, 4]
    first = snapshot.rows[0].values
    assert first[columns.PHONE] == "81234567890"
    assert first["SERVIS 1"] == "2024-01-15"
    assert first["SERVIS 2"] == "2024-07-20"
    assert first[columns.CONTACT_STATUS] == ""
    assert snapshot.rows[1].values[columns.CONTACT_STATUS] == "contacted"


def test_append_and_update_rows(tmp_path):
    path = tmp_path / "customers.xlsx"
    _write_workbook(path, [["Budi", "0811", "2024-01-15", None, None]])
    store = WorkbookRecordStore(path=path, worksheet_index=0)

    position = store.append_row({columns.NAME: "Sari", columns.PHONE: "0812"})
    store.set_cells(RowMatch(name="Budi"), {"SERVIS 2": "2024-07-20", columns.CONTACT_STATUS: "contacted"})

    assert position == 3
    worksheet = load_workbook(path).active
    assert worksheet.cell(row=3, column=1).value == "Sari"
    assert worksheet.cell(row=2, column=4).value == "2024-07-20"
    assert worksheet.cell(row=2, column=5).value == "contacted"


def test_update_unknown_row(tmp_path):
    path = tmp_path / "customers.xlsx"
    _write_workbook(path, [["Budi", "0811", None, None, None]])

    with pytest.raises(NotFoundError):
        WorkbookRecordStore(path=path, worksheet_index=0).set_cell(RowMatch(name="Sari"), "SERVIS 1", "2024-01-01")


def test_bad_worksheet_index(tmp_path):
    path = tmp_path / "customers.xlsx"
    _write_workbook(path, [])

    with pytest.raises(StoreConnectionError):
        WorkbookRecordStore(path=path, worksheet_index=3).load_all()


def test_unreadable_workbook(tmp_path):
    path = tmp_path / "customers.xlsx"
    path.write_text("not a workbook", encoding="utf-8")

    with pytest.raises(StoreConnectionError):
        WorkbookRecordStore(path=path, worksheet_index=0).load_all()
