"""Inventory ledger: the only writer of item records.

Every mutation is a read-then-write against the record store, so each one
runs while holding the per-key lock for the item (both keys for a rename).
Operations never raise ``LedgerError`` to the caller; failures come back in
the ``LedgerResult`` and are announced to the notifier like successes.
"""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Callable, Optional

from .errors import LedgerError, NotFound, PartialRename, StoreUnavailable
from .locks import KeyedLocks
from .metrics import record_operation
from .models import ItemRecord, ensure_count, normalize_key, parse_expiration
from .notifier import Notifier
from .results import LedgerResult
from .storage import RecordStore, StoreGuard

LOGGER = logging.getLogger(__name__)


def _describe(name: Any) -> str:
    if isinstance(name, str):
        return " ".join(name.split()).lower()
    return repr(name)


class Ledger:
    """Serialize item mutations per key on top of a ``RecordStore``."""

    def __init__(
        self,
        store: RecordStore,
        *,
        notifier: Optional[Notifier] = None,
        locks: Optional[KeyedLocks] = None,
        guard: Optional[StoreGuard] = None,
        rename_retries: int = 2,
    ) -> None:
        self.store = store
        self.guard = guard or StoreGuard(store)
        self.locks = locks or KeyedLocks()
        self.notifier = notifier
        self.rename_retries = rename_retries

    def close(self) -> None:
        self.guard.close()

    def __enter__(self) -> "Ledger":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---------- operations ----------
    def add_item(self, name: str, delta: int = 1, expiration: Any = None) -> LedgerResult:
        """Create the item with ``delta`` units, or add ``delta`` to it.

        The stored expiration is only replaced when ``expiration`` is given.
        """

        def apply() -> LedgerResult:
            key = normalize_key(name)
            count = ensure_count(delta, field="delta", minimum=1)
            expires = parse_expiration(expiration)
            with self.locks.hold(key):
                current = self.guard.read("get", key)
                if current is None:
                    record = ItemRecord(key=key, quantity=count, expiration=expires)
                else:
                    record = current.with_changes(
                        quantity=current.quantity + count, expiration=expires
                    )
                self.guard.call("put", key, record)
            return LedgerResult.success(
                "add_item", key, f"Item '{key}' added successfully", record=record
            )

        return self._execute("add_item", name, apply)

    def remove_one(self, name: str) -> LedgerResult:
        """Take one unit away; the last unit deletes the item."""

        def apply() -> LedgerResult:
            key = normalize_key(name)
            with self.locks.hold(key):
                current = self.guard.read("get", key)
                if current is None:
                    raise NotFound(f"Item '{key}' not found", key=key)
                if current.quantity <= 1:
                    self.guard.call("delete", key)
                    record = None
                else:
                    record = current.with_changes(quantity=current.quantity - 1)
                    self.guard.call("put", key, record)
            return LedgerResult.success(
                "remove_one",
                key,
                f"Item '{key}' removed successfully",
                record=record,
                deleted=record is None,
                severity="info",
            )

        return self._execute("remove_one", name, apply)

    def set_quantity(self, name: str, quantity: int, expiration: Any = None) -> LedgerResult:
        """Overwrite the item's quantity; anything below 1 deletes it."""

        def apply() -> LedgerResult:
            key = normalize_key(name)
            count = ensure_count(quantity, field="quantity")
            expires = parse_expiration(expiration)
            if count < 1:
                return self._delete(key, "set_quantity")
            with self.locks.hold(key):
                current = self.guard.read("get", key)
                if current is None:
                    raise NotFound(f"Item '{key}' not found", key=key)
                record = current.with_changes(quantity=count, expiration=expires)
                self.guard.call("put", key, record)
            return LedgerResult.success(
                "set_quantity", key, f"Item '{key}' updated successfully", record=record
            )

        return self._execute("set_quantity", name, apply)

    def rename(
        self,
        old_name: str,
        new_name: str,
        quantity: Optional[int] = None,
        expiration: Any = None,
    ) -> LedgerResult:
        """Move an item to a new name, optionally changing quantity and expiration.

        The old record is deleted before the new one is written. The write is
        an absolute ``put`` and is retried; if it still fails the result
        carries ``PartialRename`` with the record that was lost.
        """

        def apply() -> LedgerResult:
            old_key = normalize_key(old_name)
            new_key = normalize_key(new_name)
            count = None if quantity is None else ensure_count(quantity, field="quantity", minimum=1)
            expires = parse_expiration(expiration)

            with self.locks.hold(old_key, new_key):
                current = self.guard.read("get", old_key)
                if current is None:
                    raise NotFound(f"Item '{old_key}' not found", key=old_key)

                if old_key == new_key:
                    record = current.with_changes(quantity=count, expiration=expires)
                    self.guard.call("put", old_key, record)
                    return LedgerResult.success(
                        "rename", old_key, f"Item '{old_key}' updated successfully", record=record
                    )

                moved_quantity = current.quantity if count is None else count
                existing = self.guard.read("get", new_key)
                if existing is None:
                    target = ItemRecord(
                        key=new_key,
                        quantity=moved_quantity,
                        expiration=expires or current.expiration,
                    )
                else:
                    target = existing.with_changes(
                        quantity=existing.quantity + moved_quantity, expiration=expires
                    )

                self.guard.call("delete", old_key)
                try:
                    self.guard.retry("put", new_key, target, retries=self.rename_retries)
                except StoreUnavailable as exc:
                    lost = current.with_changes(quantity=moved_quantity, expiration=expires)
                    raise PartialRename(
                        f"Item '{old_key}' was deleted but '{new_key}' could not be written; "
                        f"lost quantity {lost.quantity}"
                        + (f" expiring {lost.expiration.isoformat()}" if lost.expiration else ""),
                        old_key=old_key,
                        new_key=new_key,
                        record=lost,
                    ) from exc

            return LedgerResult.success(
                "rename",
                old_key,
                f"Item '{old_key}' renamed to '{new_key}'",
                record=target,
            )

        return self._execute("rename", old_name, apply)

    def delete_item(self, name: str) -> LedgerResult:
        """Remove the item whatever its quantity; a missing item is not an error."""

        return self._execute("delete_item", name, lambda: self._delete(normalize_key(name), "delete_item"))

    # ---------- helpers ----------
    def _delete(self, key: str, operation: str) -> LedgerResult:
        with self.locks.hold(key):
            current = self.guard.read("get", key)
            if current is not None:
                self.guard.call("delete", key)
        if current is None:
            return LedgerResult.success(operation, key, f"Item '{key}' was not in the pantry", severity="info")
        return LedgerResult.success(
            operation, key, f"Item '{key}' deleted successfully", deleted=True, severity="info"
        )

    def _execute(self, operation: str, name: Any, apply: Callable[[], LedgerResult]) -> LedgerResult:
        start = perf_counter()
        try:
            result = apply()
        except LedgerError as exc:
            result = LedgerResult.failure(operation, _describe(name), exc)
            log = LOGGER.error if isinstance(exc, PartialRename) else LOGGER.warning
            log(
                "%s failed",
                operation,
                extra={
                    "operation": operation,
                    "key": result.key,
                    "outcome": result.outcome.value,
                    "error": exc.message,
                },
            )
        else:
            LOGGER.debug(
                "%s completed",
                operation,
                extra={"operation": operation, "key": result.key, "deleted": result.deleted},
            )
        record_operation(operation, result.outcome.value, perf_counter() - start)
        self._notify(result)
        return result

    def _notify(self, result: LedgerResult) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(result.event())
        except Exception:
            LOGGER.exception("Notifier failed", extra={"operation": result.operation, "key": result.key})


__all__ = ["Ledger"]
