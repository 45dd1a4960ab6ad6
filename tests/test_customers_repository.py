import logging
from datetime import date

from heater_reminder.data.customers_repository import (
    check_schema,
    load_customers,
    missing_columns,
    normalize_row,
)
from heater_reminder.db.memory import MemoryRecordStore
from heater_reminder.models import columns


def _row(name="Budi Santoso", **extra):
    row = {
        columns.NAME: name,
        columns.SERIAL_TANGKI: "TK-001",
        columns.SERIAL_KOLEKTOR: "KL-001",
        columns.ADDRESS: "Jl. Merdeka 10",
        columns.PHONE: "081234567890",
    }
    row.update(extra)
    return row


def test_normalize_row_maps_columns_and_derives_schedule():
    record = normalize_row(_row(**{"SERVIS 1": "2024-01-15", "SERVIS 2": "2024-07-20"}), row_index=2)

    assert record is not None
    assert record.name == "Budi Santoso"
    assert record.serial_tangki == "TK-001"
    assert record.serial_kolektor == "KL-001"
    assert record.address == "Jl. Merdeka 10"
    assert record.phone == "081234567890"
    assert record.row_index == 2
    assert list(record.services) == list(range(1, 16))
    assert record.services[1] == "2024-01-15"
    assert record.services[15] == ""
    assert record.last_service == date(2024, 7, 20)
    assert record.next_service == date(2025, 1, 20)
    assert record.record_key == "TK-001"


def test_rows_without_name_are_dropped():
    assert normalize_row(_row(name=""), row_index=3) is None
    assert normalize_row(_row(name="   "), row_index=3) is None


def test_missing_cells_default_to_empty_text():
    record = normalize_row({columns.NAME: "Sari"}, row_index=5)

    assert record.phone == ""
    assert record.address == ""
    assert record.services[1] == ""
    assert record.last_service is None
    assert record.next_service is None
    assert record.record_key == "Sari"


def test_normalize_row_does_not_mutate_input():
    row = _row(**{"SERVIS 1": " 2024-01-15 "})
    before = dict(row)

    normalize_row(row, row_index=2)

    assert row == before


def test_contact_columns_are_normalized():
    record = normalize_row(
        _row(
            **{
                columns.CONTACT_STATUS: "Contacted",
                columns.CONTACT_DATE: "2024-12-01",
                columns.CONTACT_NOTES: "  will call back ",
                columns.NEXT_REMINDER: "2025-02-01",
            }
        ),
        row_index=2,
    )

    assert record.contact_status == "contacted"
    assert record.contact_date == date(2024, 12, 1)
    assert record.contact_notes == "will call back"
    assert record.next_reminder == date(2025, 2, 1)


def test_unknown_contact_status_reads_as_unset():
    record = normalize_row(_row(**{columns.CONTACT_STATUS: "maybe"}), row_index=2)
    assert record.contact_status is None

    record = normalize_row(_row(**{columns.CONTACT_STATUS: "Not Contacted"}), row_index=2)
    assert record.contact_status == "not_contacted"


def test_missing_columns_lists_expected_headers_only():
    headers = [columns.NAME, columns.PHONE] + list(columns.SERVICE_COLUMNS)

    assert missing_columns(headers) == [columns.SERIAL_TANGKI, columns.SERIAL_KOLEKTOR, columns.ADDRESS]
    assert missing_columns(columns.DEFAULT_HEADERS) == []


def test_check_schema_logs_warning_and_returns_error(caplog):
    with caplog.at_level(logging.WARNING):
        warning = check_schema([columns.NAME, columns.PHONE])

    assert warning is not None
    assert warning.code == "SchemaError"
    assert columns.ADDRESS in warning.missing
    assert "SERVIS 15" in warning.missing
    assert "Missing expected headers" in caplog.text
    assert check_schema(columns.DEFAULT_HEADERS) is None


def test_load_customers_tolerates_partial_header(caplog):
    store = MemoryRecordStore(
        rows=[{columns.NAME: "Andi", columns.PHONE: "0811"}, {columns.NAME: ""}, {columns.NAME: "Rina"}],
        headers=[columns.NAME, columns.PHONE, "SERVIS 1"],
    )

    with caplog.at_level(logging.WARNING):
        records = load_customers(store)

    assert [record.name for record in records] == ["Andi", "Rina"]
    assert [record.row_index for record in records] == [2, 4]
    assert records[0].phone == "0811"
    assert records[0].services[1] == ""
    assert "Missing expected headers" in caplog.text
