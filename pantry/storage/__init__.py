"""Record store backends for pantry item data."""

from __future__ import annotations

from ..config import Settings
from ..errors import StoreError
from .base import RecordStore
from .guard import StoreGuard
from .memory import MemoryRecordStore
from .rocksdb import RocksRecordStore


def open_store(settings: Settings) -> RecordStore:
    """Open the backend selected by ``settings.store``."""

    if settings.store == "memory":
        return MemoryRecordStore()
    if settings.store == "rocksdb":
        return RocksRecordStore.open(settings.db_file)
    raise ValueError(f"Unsupported store backend: {settings.store}")


__all__ = [
    "MemoryRecordStore",
    "RecordStore",
    "RocksRecordStore",
    "StoreError",
    "StoreGuard",
    "open_store",
]
