"""Error taxonomy shared by the record stores, the ledger and the catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - for static analyzers only
    from .models import ItemRecord


class PantryError(Exception):
    """Base exception for pantry ledger failures."""


class StoreError(PantryError):
    """Raised by a record store adapter when the backend rejects a call."""


class LedgerError(PantryError):
    """Base class for failures reported through a ``LedgerResult``."""

    outcome = "error"
    status_code = 500

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.message = message
        self.key = key


class InvalidArgument(LedgerError):
    """Raised before touching storage when a caller supplies bad input."""

    status_code = 422


class NotFound(LedgerError):
    """Raised when an operation targets an item that does not exist."""

    outcome = "notFound"
    status_code = 404


class StoreUnavailable(LedgerError):
    """Raised when the record store failed or did not answer in time."""

    status_code = 503


class PartialRename(StoreUnavailable):
    """Raised when a rename deleted the old item but could not recreate it.

    The lost record is attached so callers can restore it by hand.
    """

    status_code = 500

    def __init__(self, message: str, *, old_key: str, new_key: str, record: "ItemRecord"):
        super().__init__(message, key=old_key)
        self.old_key = old_key
        self.new_key = new_key
        self.record = record


__all__ = [
    "InvalidArgument",
    "LedgerError",
    "NotFound",
    "PantryError",
    "PartialRename",
    "StoreError",
    "StoreUnavailable",
]
