"""Per-key mutual exclusion for ledger mutations."""

from __future__ import annotations

from contextlib import contextmanager
from threading import Condition, Lock
from typing import Dict, Iterator, List, Set


class _Slot:
    """Ticket dispenser for one key; tickets are served in issue order."""

    __slots__ = ("condition", "next_ticket", "serving", "abandoned")

    def __init__(self, mutex: Lock) -> None:
        self.condition = Condition(mutex)
        self.next_ticket = 0
        self.serving = 0
        self.abandoned: Set[int] = set()

    @property
    def idle(self) -> bool:
        return self.serving == self.next_ticket


class KeyedLocks:
    """Lazily created FIFO locks, one per key, dropped once idle.

    Callers on the same key are admitted one at a time in arrival order;
    callers on different keys never wait on each other beyond the brief
    bookkeeping done under the table mutex.
    """

    def __init__(self) -> None:
        self._mutex = Lock()
        self._slots: Dict[str, _Slot] = {}

    def acquire(self, key: str) -> None:
        with self._mutex:
            slot = self._slots.get(key)
            if slot is None:
                slot = self._slots[key] = _Slot(self._mutex)
            ticket = slot.next_ticket
            slot.next_ticket += 1
            try:
                while slot.serving != ticket:
                    slot.condition.wait()
            except BaseException:
                if slot.serving == ticket:
                    self._advance(key, slot)
                else:
                    slot.abandoned.add(ticket)
                raise

    def release(self, key: str) -> None:
        with self._mutex:
            slot = self._slots.get(key)
            if slot is None or slot.idle:
                raise RuntimeError(f"release of unlocked key {key!r}")
            self._advance(key, slot)

    def _advance(self, key: str, slot: _Slot) -> None:
        # Caller holds the table mutex.
        slot.serving += 1
        while slot.serving in slot.abandoned:
            slot.abandoned.discard(slot.serving)
            slot.serving += 1
        if slot.idle:
            del self._slots[key]
        else:
            slot.condition.notify_all()

    @contextmanager
    def hold(self, *keys: str) -> Iterator[List[str]]:
        """Hold every key in ``keys``; acquired in sorted order to avoid deadlock."""

        ordered = sorted(set(keys))
        acquired: List[str] = []
        try:
            for key in ordered:
                self.acquire(key)
                acquired.append(key)
            yield ordered
        finally:
            for key in reversed(acquired):
                self.release(key)

    def is_locked(self, key: str) -> bool:
        with self._mutex:
            return key in self._slots

    def __len__(self) -> int:
        with self._mutex:
            return len(self._slots)


__all__ = ["KeyedLocks"]
