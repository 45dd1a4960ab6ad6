"""Record store selection."""

from functools import lru_cache

from ..config import settings
from .base import RecordStore


@lru_cache()
def get_record_store() -> RecordStore:
    """Build the configured record store once per process."""
    if settings.store_backend == "memory":
        from .memory import MemoryRecordStore

        return MemoryRecordStore()
    if settings.store_backend == "workbook":
        from .workbook import WorkbookRecordStore

        return WorkbookRecordStore()
    from .sheets import SheetsRecordStore

    return SheetsRecordStore()


__all__ = ["RecordStore", "get_record_store"]
