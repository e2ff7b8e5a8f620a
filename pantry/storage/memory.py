"""In-memory record store used by tests and the ``memory`` backend."""

from __future__ import annotations

from threading import RLock
from typing import Dict, List, Optional, Tuple

from ..models import ItemRecord
from .base import RecordStore


class MemoryRecordStore(RecordStore):
    """Record store backed by a thread-safe dictionary."""

    def __init__(self) -> None:
        self._records: Dict[str, ItemRecord] = {}
        self._lock = RLock()

    def get(self, key: str) -> Optional[ItemRecord]:
        with self._lock:
            return self._records.get(key)

    def put(self, key: str, record: ItemRecord) -> None:
        with self._lock:
            self._records[key] = record

    def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def list(self) -> List[Tuple[str, ItemRecord]]:
        with self._lock:
            return list(self._records.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
