"""Typed results returned by ledger operations and the events derived from them."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import LedgerError
from .models import ItemRecord


class Outcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "notFound"
    ERROR = "error"


@dataclass(frozen=True)
class OutcomeEvent:
    """Notification emitted after every ledger call."""

    outcome: Outcome
    message: str
    operation: str
    key: str
    severity: str = "success"
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class LedgerResult:
    """Result-or-error value handed back by every ``Ledger`` operation.

    ``record`` is the item after the operation, ``deleted`` is true when the
    operation removed the item, and ``error`` carries the typed failure for
    non-success outcomes.
    """

    operation: str
    key: str
    outcome: Outcome
    message: str
    record: Optional[ItemRecord] = None
    deleted: bool = False
    error: Optional[LedgerError] = None
    severity: str = "success"

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @classmethod
    def success(
        cls,
        operation: str,
        key: str,
        message: str,
        *,
        record: ItemRecord | None = None,
        deleted: bool = False,
        severity: str = "success",
    ) -> "LedgerResult":
        return cls(
            operation=operation,
            key=key,
            outcome=Outcome.SUCCESS,
            message=message,
            record=record,
            deleted=deleted,
            severity=severity,
        )

    @classmethod
    def failure(cls, operation: str, key: str, error: LedgerError) -> "LedgerResult":
        outcome = Outcome(error.outcome)
        return cls(
            operation=operation,
            key=error.key or key,
            outcome=outcome,
            message=error.message,
            error=error,
            severity="warning" if outcome is Outcome.NOT_FOUND else "error",
        )

    def event(self) -> OutcomeEvent:
        return OutcomeEvent(
            outcome=self.outcome,
            message=self.message,
            operation=self.operation,
            key=self.key,
            severity=self.severity,
        )

    def raise_for_error(self) -> "LedgerResult":
        """Re-raise the carried error, or return ``self`` on success."""

        if self.error is not None:
            raise self.error
        return self


__all__ = ["LedgerResult", "Outcome", "OutcomeEvent"]
