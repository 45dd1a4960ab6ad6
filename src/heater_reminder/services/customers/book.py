"""The in-process snapshot of customer records and its reload policy."""

from __future__ import annotations

import itertools
import logging
import threading
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from ...data.customers_repository import check_schema, normalize_snapshot
from ...db import get_record_store
from ...db.base import RecordStore
from ...errors import SchemaError
from ...models.domain import CustomerRecord

logger = logging.getLogger(__name__)


class CustomerBook:
    """Holds the latest loaded records and serialises reloads against the store.

    Reloads are coalesced: a refresh request that arrives while another reload
    runs waits for it, then triggers at most one further reload which serves
    every request queued behind it. The snapshot is always replaced whole.
    Mutations hold ``mutation_lock`` across read, write and reload, so two
    writers never pick the same empty slot.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self._records: tuple[CustomerRecord, ...] = ()
        self._schema_warning: Optional[SchemaError] = None
        self._loaded_at: Optional[datetime] = None
        self._loaded = False
        self._tickets = itertools.count(1)
        self._ticket_lock = threading.Lock()
        self._issued = 0
        self._served = 0
        self._reload_lock = threading.Lock()
        # Held by mutations from the row read through the write.
        self.mutation_lock = threading.RLock()

    @property
    def records(self) -> tuple[CustomerRecord, ...]:
        return self._records

    @property
    def loaded_at(self) -> Optional[datetime]:
        return self._loaded_at

    @property
    def schema_warning(self) -> Optional[SchemaError]:
        return self._schema_warning

    def _take_ticket(self) -> int:
        with self._ticket_lock:
            self._issued = next(self._tickets)
            return self._issued

    def refresh(self) -> tuple[CustomerRecord, ...]:
        """Reload every row from the store; raises StoreConnectionError on failure."""
        ticket = self._take_ticket()
        with self._reload_lock:
            if self._served >= ticket:
                logger.debug(f"Refresh ticket {ticket} served by a newer reload")
                return self._records
            with self._ticket_lock:
                covering = self._issued
            snapshot = self.store.load_all()
            self._schema_warning = check_schema(snapshot.headers)
            records = normalize_snapshot(snapshot)
            self._records = records
            self._loaded_at = datetime.now(timezone.utc)
            self._loaded = True
            self._served = covering
            logger.info(f"Data loaded successfully: {len(records)} records")
            return records

    def ensure_loaded(self) -> tuple[CustomerRecord, ...]:
        if not self._loaded:
            return self.refresh()
        return self._records


@lru_cache(maxsize=1)
def get_customer_book() -> CustomerBook:
    return CustomerBook(get_record_store())
