"""Error taxonomy shared by the record stores, services and API."""

from __future__ import annotations

from typing import Sequence


class TrackerError(Exception):
    """Base class for failures surfaced to the presentation layer."""

    code = "Error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StoreConnectionError(TrackerError, ConnectionError):
    """The record store is unreachable or misconfigured."""

    code = "ConnectionError"
    status_code = 503


class SchemaError(TrackerError):
    """Expected columns are absent from the sheet header."""

    code = "SchemaError"
    status_code = 422

    def __init__(self, message: str, missing: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.missing = tuple(missing)


class NotFoundError(TrackerError):
    code = "NotFound"
    status_code = 404


class AllSlotsFullError(TrackerError):
    code = "AllSlotsFull"
    status_code = 409


class WriteError(TrackerError):
    """The store rejected a mutation."""

    code = "WriteError"
    status_code = 502


class InputValidationError(TrackerError, ValueError):
    code = "ValidationError"
    status_code = 400
