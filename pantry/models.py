"""Data classes describing pantry items and their catalog rendering."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidArgument, StoreError


def normalize_key(name: Any) -> str:
    """Return the canonical key for an item name.

    Surrounding whitespace is stripped, inner runs of whitespace collapse to a
    single space and the result is lower-cased, so ``"  Large   EGGS "`` and
    ``"large eggs"`` address the same record.
    """

    if not isinstance(name, str):
        raise InvalidArgument("item name must be a string")
    key = " ".join(name.split()).lower()
    if not key:
        raise InvalidArgument("item name must not be empty")
    return key


def parse_expiration(value: Any) -> Optional[date]:
    """Coerce ``value`` into a date; ``None`` and blank strings mean "not supplied"."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        try:
            return date.fromisoformat(cleaned)
        except ValueError as exc:
            raise InvalidArgument(f"expiration must be an ISO-8601 date (got {value!r})") from exc
    raise InvalidArgument(f"expiration must be a date or ISO-8601 string (got {value!r})")


def ensure_count(value: Any, *, field: str, minimum: int | None = None) -> int:
    """Validate that ``value`` is a whole number, optionally bounded below."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{field} must be an integer (got {value!r})")
    if minimum is not None and value < minimum:
        raise InvalidArgument(f"{field} must be >= {minimum} (got {value})")
    return value


@dataclass(frozen=True)
class ItemRecord:
    """Persisted state for one inventory key."""

    key: str
    quantity: int
    expiration: Optional[date] = None

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("quantity must be an integer")
        if self.quantity < 1:
            raise ValueError("a stored item must have quantity >= 1")

    @property
    def display_name(self) -> str:
        return self.key[:1].upper() + self.key[1:]

    def with_changes(self, *, quantity: int | None = None, expiration: date | None = None) -> "ItemRecord":
        """Return a copy with ``quantity`` and/or ``expiration`` replaced.

        ``expiration=None`` keeps the current date.
        """

        return replace(
            self,
            quantity=self.quantity if quantity is None else quantity,
            expiration=self.expiration if expiration is None else expiration,
        )

    def to_document(self) -> Dict[str, Any]:
        """Serialize into the storage document shape."""

        document: Dict[str, Any] = {"key": self.key, "quantity": self.quantity}
        if self.expiration is not None:
            document["expiration"] = self.expiration.isoformat()
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ItemRecord":
        """Build a record from a stored document, rejecting corrupt payloads."""

        try:
            key = document["key"]
            quantity = document["quantity"]
            raw_expiration = document.get("expiration")
            expiration = date.fromisoformat(raw_expiration) if raw_expiration else None
            return cls(key=key, quantity=quantity, expiration=expiration)
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"corrupt item document: {document!r}") from exc


@dataclass(frozen=True)
class CatalogEntry:
    """One row of a catalog listing."""

    key: str
    display_name: str
    quantity: int
    expiration: Optional[date]
    expires_in: str
    expired: bool = False


__all__ = [
    "CatalogEntry",
    "ItemRecord",
    "ensure_count",
    "normalize_key",
    "parse_expiration",
]
