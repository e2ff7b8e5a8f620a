"""Household pantry ledger: per-key serialized item records with a searchable catalog."""

from __future__ import annotations

from .catalog import CatalogView
from .config import Settings, load_settings
from .errors import (
    InvalidArgument,
    LedgerError,
    NotFound,
    PantryError,
    PartialRename,
    StoreError,
    StoreUnavailable,
)
from .ledger import Ledger
from .locks import KeyedLocks
from .models import CatalogEntry, ItemRecord, normalize_key
from .notifier import EventHistory, FanoutNotifier, LoggingNotifier
from .results import LedgerResult, Outcome, OutcomeEvent
from .service import Pantry, open_pantry
from .storage import MemoryRecordStore, RecordStore, RocksRecordStore, StoreGuard, open_store

__all__ = [
    "CatalogEntry",
    "CatalogView",
    "EventHistory",
    "FanoutNotifier",
    "InvalidArgument",
    "ItemRecord",
    "KeyedLocks",
    "Ledger",
    "LedgerError",
    "LedgerResult",
    "LoggingNotifier",
    "MemoryRecordStore",
    "NotFound",
    "Outcome",
    "OutcomeEvent",
    "Pantry",
    "PantryError",
    "PartialRename",
    "RecordStore",
    "RocksRecordStore",
    "Settings",
    "StoreError",
    "StoreGuard",
    "StoreUnavailable",
    "load_settings",
    "normalize_key",
    "open_pantry",
    "open_store",
]
