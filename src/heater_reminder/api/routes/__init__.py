"""Route group exports."""

from . import customers, health

__all__ = ["customers", "health"]
