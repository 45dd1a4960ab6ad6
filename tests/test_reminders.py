import time
from datetime import date

from heater_reminder.db.memory import MemoryRecordStore
from heater_reminder.models import columns
from heater_reminder.services.customers import CustomerBook, compute_customer_stats
from heater_reminder.services.reminders import ReminderScheduler, pending_reminders

TODAY = date(2025, 1, 5)


def _book():
    rows = [
        {columns.NAME: "Lewat", "SERVIS 1": "2024-06-01", columns.CONTACT_STATUS: "contacted"},
        {columns.NAME: "Segera", "SERVIS 1": "2024-07-10"},
        {columns.NAME: "Bulan Ini", "SERVIS 1": "2024-07-25", columns.CONTACT_STATUS: "overdue"},
        {columns.NAME: "Nanti", "SERVIS 1": "2024-10-01"},
        {columns.NAME: "Baru"},
    ]
    book = CustomerBook(MemoryRecordStore(rows=rows))
    book.refresh()
    return book


def test_pending_reminders_cover_overdue_and_upcoming_soonest_first():
    pending = pending_reminders(_book().records, TODAY)

    assert [record.name for record in pending] == ["Lewat", "Segera", "Bulan Ini"]


def test_customer_stats():
    stats = compute_customer_stats(_book().records, TODAY)

    assert stats == {
        "totalCustomers": 5,
        "overdueServices": 1,
        "dueThisMonth": 2,
        "contacted": 1,
        "notContacted": 3,
        "contactOverdue": 1,
    }


def test_run_once_records_the_check():
    scheduler = ReminderScheduler(_book(), interval_seconds=60, clock=lambda: TODAY)

    check = scheduler.run_once()

    assert scheduler.last_check is check
    assert check.as_of == TODAY
    assert [record.name for record in check.pending] == ["Lewat", "Segera", "Bulan Ini"]


def test_scheduler_checks_on_start_and_stops():
    scheduler = ReminderScheduler(_book(), interval_seconds=60, clock=lambda: TODAY)

    scheduler.start()
    deadline = time.monotonic() + 5
    while scheduler.last_check is None and time.monotonic() < deadline:
        time.sleep(0.01)
    scheduler.stop()

    assert scheduler.last_check is not None
    assert scheduler.last_check.as_of == TODAY


def test_zero_interval_disables_scheduler():
    scheduler = ReminderScheduler(_book(), interval_seconds=0)

    scheduler.start()
    scheduler.stop()

    assert scheduler.last_check is None
