"""Read-only, filterable listing of the pantry."""

from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from .models import CatalogEntry, ItemRecord, normalize_key
from .storage import RecordStore, StoreGuard

NO_EXPIRATION = "no expiration"


def describe_expiration(expiration: Optional[date], today: date) -> str:
    """Render the time left before ``expiration`` relative to ``today``."""

    if expiration is None:
        return NO_EXPIRATION
    days = (expiration - today).days
    if days == 0:
        return "expires today"
    if days == 1:
        return "expires tomorrow"
    if days > 1:
        return f"expires in {days} days"
    if days == -1:
        return "expired yesterday"
    return f"expired {-days} days ago"


class CatalogView:
    """Derive catalog listings from a full read of the record store.

    The view never takes ledger locks, so a listing may miss a mutation that
    is still in flight.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        guard: StoreGuard | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.guard = guard or StoreGuard(store)
        self._clock = clock

    def entry(self, record: ItemRecord, today: date | None = None) -> CatalogEntry:
        today = today or self._clock()
        return CatalogEntry(
            key=record.key,
            display_name=record.display_name,
            quantity=record.quantity,
            expiration=record.expiration,
            expires_in=describe_expiration(record.expiration, today),
            expired=record.expiration is not None and record.expiration < today,
        )

    def list(self, filter_text: str = "") -> List[CatalogEntry]:
        """Return every item whose key contains ``filter_text``, sorted by key."""

        needle = " ".join((filter_text or "").split()).lower()
        rows = self.guard.read("list")
        today = self._clock()
        records = sorted((record for _, record in rows), key=lambda record: record.key)
        return [self.entry(record, today) for record in records if needle in record.key]

    def get(self, name: str) -> Optional[CatalogEntry]:
        record = self.guard.read("get", normalize_key(name))
        if record is None:
            return None
        return self.entry(record)


__all__ = ["CatalogView", "NO_EXPIRATION", "describe_expiration"]
