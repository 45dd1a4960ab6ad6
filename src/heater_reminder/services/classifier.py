"""Priority, contact-status and reminder classification for customer records."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..config import settings
from ..models.domain import CustomerRecord, Priority
from .dates import days_until

PRIORITY_WEIGHTS: dict[str, int] = {"High": 3, "Medium": 2, "Low": 1}

CONTACT_LABELS: dict[str, str] = {
    "contacted": "Contacted",
    "overdue": "Overdue - Not Responded",
    "not_contacted": "Not Contacted",
}


def calculate_priority(record: CustomerRecord, today: date) -> Priority:
    days = days_until(record.next_service, today)
    if days is None:
        return "Low"
    if days < 0:
        return "High"
    if days <= settings.urgent_window_days:
        return "High"
    if days <= settings.upcoming_window_days:
        return "Medium"
    return "Low"


def priority_weight(record: CustomerRecord, today: date) -> int:
    return PRIORITY_WEIGHTS[calculate_priority(record, today)]


def contact_status_display(record: CustomerRecord, today: date) -> dict:
    """Stored contact status, with 'contacted' shown as overdue once the service date has passed.

    The overdue override is display-only; the stored status is unchanged.
    """
    if record.contact_status == "contacted" and record.next_service is not None and record.next_service < today:
        return {"status": "overdue", "text": CONTACT_LABELS["overdue"]}
    status = record.contact_status if record.contact_status in ("contacted", "overdue") else "not_contacted"
    return {"status": status, "text": CONTACT_LABELS[status]}


def reminder_date(record: CustomerRecord) -> Optional[date]:
    return record.next_reminder or record.next_service


def reminder_display(record: CustomerRecord, today: date) -> dict:
    days = days_until(reminder_date(record), today)
    if days is None:
        return {"days_diff": None, "bucket": "none", "text": "No reminder set"}
    if days < 0:
        return {"days_diff": days, "bucket": "overdue", "text": f"{abs(days)} days overdue"}
    if days == 0:
        return {"days_diff": days, "bucket": "due_today", "text": "Due today"}
    if days <= settings.urgent_window_days:
        return {"days_diff": days, "bucket": "due_soon", "text": f"Due in {days} days"}
    return {"days_diff": days, "bucket": "scheduled", "text": f"Due in {days} days"}


def service_status(record: CustomerRecord, today: date) -> dict:
    days = days_until(record.next_service, today)
    if days is None:
        return {"status": "unknown", "text": "No service date"}
    if days < 0:
        return {"status": "overdue", "text": f"Overdue by {abs(days)} days"}
    if days <= settings.urgent_window_days:
        return {"status": "urgent", "text": f"Due in {days} days"}
    if days <= settings.upcoming_window_days:
        return {"status": "upcoming", "text": f"Due in {days} days"}
    return {"status": "scheduled", "text": f"Due in {days} days"}


def is_service_overdue(record: CustomerRecord, today: date) -> bool:
    return record.next_service is not None and record.next_service < today


def is_service_upcoming(record: CustomerRecord, today: date) -> bool:
    days = days_until(record.next_service, today)
    return days is not None and 0 < days <= settings.upcoming_window_days
