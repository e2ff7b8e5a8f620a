"""Outcome event sinks fed by the ledger after every call."""

from __future__ import annotations

import logging
from collections import deque
from threading import Lock
from typing import Deque, Iterable, List, Protocol

from .results import OutcomeEvent

LOGGER = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Notifier(Protocol):
    def notify(self, event: OutcomeEvent) -> None:
        ...


class LoggingNotifier:
    """Write each outcome event to a logger at a level matching its severity."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER

    def notify(self, event: OutcomeEvent) -> None:
        self._logger.log(
            _SEVERITY_LEVELS.get(event.severity, logging.INFO),
            event.message,
            extra={
                "operation": event.operation,
                "key": event.key,
                "outcome": event.outcome.value,
            },
        )


class EventHistory:
    """Bounded, thread-safe buffer of the most recent outcome events."""

    def __init__(self, maxlen: int = 50) -> None:
        self._events: Deque[OutcomeEvent] = deque(maxlen=int(maxlen))
        self._lock = Lock()

    def notify(self, event: OutcomeEvent) -> None:
        with self._lock:
            self._events.append(event)

    def recent(self, limit: int | None = None) -> List[OutcomeEvent]:
        """Return events newest first."""

        with self._lock:
            events = list(reversed(self._events))
        if limit is not None:
            return events[: max(limit, 0)]
        return events

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


class FanoutNotifier:
    """Deliver each event to several notifiers; one failing sink does not stop the rest."""

    def __init__(self, notifiers: Iterable[Notifier]) -> None:
        self._notifiers = list(notifiers)

    def notify(self, event: OutcomeEvent) -> None:
        for notifier in self._notifiers:
            try:
                notifier.notify(event)
            except Exception:
                LOGGER.exception(
                    "Notifier %r failed",
                    notifier,
                    extra={"operation": event.operation, "key": event.key},
                )


__all__ = ["EventHistory", "FanoutNotifier", "LoggingNotifier", "Notifier"]
