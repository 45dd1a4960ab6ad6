"""Customer dashboard counters."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from ...models.domain import CustomerRecord
from ..classifier import is_service_overdue, is_service_upcoming


def compute_customer_stats(records: Iterable[CustomerRecord], today: date) -> dict:
    records = list(records)
    return {
        "totalCustomers": len(records),
        "overdueServices": sum(1 for record in records if is_service_overdue(record, today)),
        "dueThisMonth": sum(1 for record in records if is_service_upcoming(record, today)),
        "contacted": sum(1 for record in records if record.contact_status == "contacted"),
        "notContacted": sum(1 for record in records if record.contact_status in (None, "not_contacted")),
        "contactOverdue": sum(1 for record in records if record.contact_status == "overdue"),
    }
