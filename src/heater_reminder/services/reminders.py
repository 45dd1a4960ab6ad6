"""Pending service reminders and their periodic recomputation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Optional

from ..config import settings
from ..models.domain import CustomerRecord
from .customers.book import CustomerBook
from .dates import days_until

logger = logging.getLogger(__name__)


def pending_reminders(records: Iterable[CustomerRecord], today: date) -> list[CustomerRecord]:
    """Records whose next service is overdue or within the upcoming window, soonest first."""
    pending = []
    for record in records:
        days = days_until(record.next_service, today)
        if days is not None and days <= settings.upcoming_window_days:
            pending.append(record)
    return sorted(pending, key=lambda record: record.next_service)


@dataclass(slots=True)
class ReminderCheck:
    checked_at: datetime
    as_of: date
    pending: list[CustomerRecord]


class ReminderScheduler:
    """Recomputes pending reminders over the book's current snapshot on a fixed interval."""

    def __init__(
        self,
        book: CustomerBook,
        interval_seconds: Optional[float] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.book = book
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.reminder_check_interval_hours * 3600
        )
        self.clock = clock
        self.last_check: Optional[ReminderCheck] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> ReminderCheck:
        today = self.clock()
        pending = pending_reminders(self.book.records, today)
        self.last_check = ReminderCheck(checked_at=datetime.now(timezone.utc), as_of=today, pending=pending)
        if pending:
            logger.info(f"{len(pending)} customer(s) need attention as of {today.isoformat()}")
        return self.last_check

    def _run(self) -> None:
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self.interval_seconds)

    def start(self) -> None:
        if self.interval_seconds <= 0 or self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="reminder-scheduler", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
