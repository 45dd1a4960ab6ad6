"""Customer service helpers."""

from .actions import NewCustomer, add_customer, update_contact_status, update_service
from .book import CustomerBook, get_customer_book
from .stats import compute_customer_stats

__all__ = [
    "CustomerBook",
    "get_customer_book",
    "NewCustomer",
    "add_customer",
    "update_service",
    "update_contact_status",
    "compute_customer_stats",
]
