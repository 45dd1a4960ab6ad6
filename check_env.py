#!/usr/bin/env python3
"""Check the .env configuration and test the connection to the customer sheet."""

from pathlib import Path
import sys

TEMPLATE = """# Record store: sheets, workbook or memory
HEATER_STORE_BACKEND=sheets

# Google Sheets (store_backend=sheets)
# The id is the part of the sheet URL between /d/ and /edit; the full URL also works.
HEATER_SPREADSHEET_ID=your-spreadsheet-id
HEATER_WORKSHEET_INDEX=0
HEATER_CREDENTIALS_FILE=./credentials.json

# Local workbook (store_backend=workbook)
HEATER_WORKBOOK_FILE=./data/customers.xlsx

# Messaging
HEATER_MESSAGING_BASE_URL=https://wa.me
HEATER_COUNTRY_CODE=62

HEATER_LOG_LEVEL=INFO
"""


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Service Reminder Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env file at: {env_file}")
        print("⚠️  Please edit .env and set your spreadsheet id and credentials file!")
        return 1

    print(f"✅ Found .env file at: {env_file}")
    print()

    sys.path.insert(0, str(project_root / "src"))
    from heater_reminder.config import settings
    from heater_reminder.data.customers_repository import load_customers, missing_columns
    from heater_reminder.db import get_record_store
    from heater_reminder.errors import TrackerError

    print(f"   Store backend:   {settings.store_backend}")
    if settings.store_backend == "sheets":
        print(f"   Spreadsheet id:  {settings.spreadsheet_id or 'NOT SET'}")
        print(f"   Worksheet index: {settings.worksheet_index}")
        print(f"   Credentials:     {settings.credentials_file}")
    elif settings.store_backend == "workbook":
        print(f"   Workbook file:   {settings.workbook_file}")
    print()

    print("Testing store connection...")
    try:
        store = get_record_store()
        print(f"   [OK] Connected to: {store.ping()}")
        snapshot = store.load_all()
        print(f"   [OK] Headers found: {snapshot.headers}")
        missing = missing_columns(snapshot.headers)
        if missing:
            print(f"   [WARN] Missing expected headers: {missing}")
        records = load_customers(store)
        print(f"   [OK] {len(records)} valid customer records")
    except TrackerError as exc:
        print(f"   [ERROR] {exc.code}: {exc.message}")
        print()
        print("Possible causes:")
        print("1. Invalid or incomplete spreadsheet ID")
        print("2. Document is not a Google Sheets file")
        print("3. Service account lacks access to the sheet (share it with the client_email)")
        return 1

    print()
    print("=" * 60)
    print("✅ SUCCESS: record store is configured!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
