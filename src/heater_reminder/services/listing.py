"""Search, filter and sort over the current customer snapshot."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Literal, Sequence

from ..errors import InputValidationError
from ..models.domain import CustomerRecord
from .classifier import is_service_overdue, is_service_upcoming, priority_weight

FilterBy = Literal["all", "overdue", "upcoming", "contacted", "not_contacted", "contact_overdue"]
SortBy = Literal["priority", "nextService", "name", "contactStatus"]


@dataclass(slots=True, frozen=True)
class ListQuery:
    search_term: str = ""
    filter_by: FilterBy = "all"
    sort_by: SortBy = "nextService"


def matches_search(record: CustomerRecord, term: str) -> bool:
    needle = (term or "").lower()
    if not needle:
        return True
    return any(needle in (value or "").lower() for value in (record.name, record.address, record.phone))


_FILTERS: dict[str, Callable[[CustomerRecord, date], bool]] = {
    "all": lambda record, today: True,
    "overdue": is_service_overdue,
    "upcoming": is_service_upcoming,
    # Contact filters read the stored status, not the displayed override.
    "contacted": lambda record, today: record.contact_status == "contacted",
    "not_contacted": lambda record, today: record.contact_status in (None, "not_contacted"),
    "contact_overdue": lambda record, today: record.contact_status == "overdue",
}


def _collation_key(text: str) -> tuple[str, str]:
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()
    return folded, text


def sort_records(records: Sequence[CustomerRecord], sort_by: str, today: date) -> list[CustomerRecord]:
    """Stable sort; records with equal keys keep their input order."""
    if sort_by == "priority":
        return sorted(records, key=lambda record: -priority_weight(record, today))
    if sort_by == "nextService":
        return sorted(
            records,
            key=lambda record: (record.next_service is None, record.next_service or date.min),
        )
    if sort_by == "name":
        return sorted(records, key=lambda record: _collation_key(record.name or ""))
    if sort_by == "contactStatus":
        return sorted(records, key=lambda record: record.contact_status or "not_contacted")
    raise InputValidationError(f"Unknown sort '{sort_by}'")


def apply_view(
    records: Iterable[CustomerRecord],
    search_term: str,
    filter_by: str,
    sort_by: str,
    today: date,
) -> list[CustomerRecord]:
    """Project the snapshot into the ordered list shown to the user."""

    predicate = _FILTERS.get(filter_by)
    if predicate is None:
        raise InputValidationError(f"Unknown filter '{filter_by}'")
    selected = [
        record
        for record in records
        if record.name and matches_search(record, search_term) and predicate(record, today)
    ]
    return sort_records(selected, sort_by, today)


def apply_query(records: Iterable[CustomerRecord], query: ListQuery, today: date) -> list[CustomerRecord]:
    return apply_view(records, query.search_term, query.filter_by, query.sort_by, today)
