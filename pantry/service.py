"""Wire a store, ledger, catalog and event history from settings."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .catalog import CatalogView
from .config import Settings, load_settings
from .ledger import Ledger
from .notifier import EventHistory, FanoutNotifier, LoggingNotifier
from .storage import RecordStore, StoreGuard, open_store

LOGGER = logging.getLogger(__name__)


@dataclass
class Pantry:
    settings: Settings
    store: RecordStore
    guard: StoreGuard
    ledger: Ledger
    catalog: CatalogView
    history: EventHistory

    def close(self) -> None:
        """Stop the store workers and close the backend."""
        self.guard.close()
        self.store.close()

    def __enter__(self) -> "Pantry":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_pantry(settings: Settings | None = None, *, store: RecordStore | None = None) -> Pantry:
    """Return a ready ``Pantry``; ``store`` overrides the configured backend."""

    settings = settings or load_settings()
    store = store or open_store(settings)
    guard = StoreGuard(
        store,
        timeout=settings.store_timeout,
        read_retries=settings.read_retries,
        backoff=settings.retry_backoff,
        max_workers=settings.store_workers,
    )
    history = EventHistory(maxlen=settings.event_history)
    ledger = Ledger(
        store,
        notifier=FanoutNotifier([history, LoggingNotifier()]),
        guard=guard,
        rename_retries=settings.rename_retries,
    )
    catalog = CatalogView(store, guard=guard)
    LOGGER.info("Pantry opened", extra={"store": settings.store, "db_path": str(settings.db_path)})
    return Pantry(
        settings=settings,
        store=store,
        guard=guard,
        ledger=ledger,
        catalog=catalog,
        history=history,
    )


__all__ = ["Pantry", "open_pantry"]
