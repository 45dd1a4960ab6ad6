"""Column headers of the customer sheet."""

from .domain import SLOT_COUNT

NAME = "Nama"
SERIAL_TANGKI = "NO SERI TANGKI"
SERIAL_KOLEKTOR = "NO SERI KOLEKTOR"
ADDRESS = "Alamat"
PHONE = "No. Telp"

CONTACT_STATUS = "Status"
CONTACT_DATE = "Tanggal Kontak"
CONTACT_NOTES = "Catatan Kontak"
NEXT_REMINDER = "Pengingat"

SERVICE_COLUMNS: tuple[str, ...] = tuple(f"SERVIS {slot}" for slot in range(1, SLOT_COUNT + 1))

IDENTITY_COLUMNS: tuple[str, ...] = (NAME, SERIAL_TANGKI, SERIAL_KOLEKTOR, ADDRESS, PHONE)
CONTACT_COLUMNS: tuple[str, ...] = (CONTACT_STATUS, CONTACT_DATE, CONTACT_NOTES, NEXT_REMINDER)

# Columns whose absence is reported at load time.
EXPECTED_COLUMNS: tuple[str, ...] = IDENTITY_COLUMNS + SERVICE_COLUMNS

# Header row written when a fresh workbook is created.
DEFAULT_HEADERS: tuple[str, ...] = IDENTITY_COLUMNS + SERVICE_COLUMNS + CONTACT_COLUMNS


def slot_column(slot: int) -> str:
    if not 1 <= slot <= SLOT_COUNT:
        raise ValueError(f"Service slot must be between 1 and {SLOT_COUNT}, got {slot}")
    return SERVICE_COLUMNS[slot - 1]


def slot_from_column(column: str) -> int:
    try:
        return SERVICE_COLUMNS.index(column.strip().upper()) + 1
    except ValueError as exc:
        raise ValueError(f"Unknown service column '{column}'") from exc
