"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...errors import TrackerError

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_customer_book():
    """Lazy import to avoid building the record store at startup."""
    from ...services.customers import get_customer_book

    return get_customer_book()


@router.get("/health/store", status_code=status.HTTP_200_OK)
def check_store() -> dict:
    """Check that the configured record store is reachable."""
    try:
        book = _get_customer_book()
        title = book.store.ping()
    except TrackerError as exc:
        return {
            "backend": settings.store_backend,
            "connected": False,
            "error": exc.message,
            "code": exc.code,
        }
    return {
        "backend": settings.store_backend,
        "connected": True,
        "title": title,
        "records_loaded": len(book.records),
        "loaded_at": book.loaded_at.isoformat() if book.loaded_at else None,
    }
