"""Record store contract shared by every storage backend."""

from __future__ import annotations

import abc
from typing import List, Optional, Tuple

from ..models import ItemRecord


class RecordStore(abc.ABC):
    """Keyed storage of item records.

    Implementations make no atomicity promises across keys and raise
    ``StoreError`` when the backend fails a call.
    """

    @abc.abstractmethod
    def get(self, key: str) -> Optional[ItemRecord]:
        """Return the record stored under ``key`` or ``None``."""

    @abc.abstractmethod
    def put(self, key: str, record: ItemRecord) -> None:
        """Insert or replace the record stored under ``key``."""

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; removing an absent key is a no-op."""

    @abc.abstractmethod
    def list(self) -> List[Tuple[str, ItemRecord]]:
        """Return a snapshot of every ``(key, record)`` pair."""

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
