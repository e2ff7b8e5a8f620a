"""Pydantic schemas bridging HTTP payloads to pantry models."""

from __future__ import annotations

from datetime import date
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from pantry.models import CatalogEntry, ItemRecord
from pantry.results import LedgerResult, OutcomeEvent


class ItemCreate(BaseModel):
    """Payload for adding units of an item."""

    model_config = ConfigDict(extra="ignore")

    name: str
    quantity: int = Field(1, description="Units to add; must be >= 1")
    expiration: str | None = Field(None, description="ISO-8601 date, e.g. 2025-01-31")


class QuantityUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    quantity: int = Field(..., description="New absolute quantity; below 1 deletes the item")
    expiration: str | None = None


class RenameRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    new_name: str
    quantity: int | None = Field(None, description="Defaults to the current quantity")
    expiration: str | None = None


class ItemSchema(BaseModel):
    key: str
    name: str
    quantity: int
    expiration: date | None = None

    @classmethod
    def from_model(cls, record: ItemRecord) -> "ItemSchema":
        return cls(
            key=record.key,
            name=record.display_name,
            quantity=record.quantity,
            expiration=record.expiration,
        )


class CatalogEntrySchema(ItemSchema):
    expires_in: str
    expired: bool = False

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "CatalogEntrySchema":
        return cls(
            key=entry.key,
            name=entry.display_name,
            quantity=entry.quantity,
            expiration=entry.expiration,
            expires_in=entry.expires_in,
            expired=entry.expired,
        )


class CatalogResponse(BaseModel):
    query: str
    count: int
    items: List[CatalogEntrySchema]


class MutationResponse(BaseModel):
    """Outcome of a ledger operation."""

    outcome: Literal["success", "notFound", "error"]
    message: str
    operation: str
    key: str
    item: ItemSchema | None = None
    deleted: bool = False

    @classmethod
    def from_result(cls, result: LedgerResult) -> "MutationResponse":
        return cls(
            outcome=result.outcome.value,
            message=result.message,
            operation=result.operation,
            key=result.key,
            item=ItemSchema.from_model(result.record) if result.record else None,
            deleted=result.deleted,
        )


class EventSchema(BaseModel):
    outcome: Literal["success", "notFound", "error"]
    message: str
    operation: str
    key: str
    severity: str
    timestamp: float

    @classmethod
    def from_event(cls, event: OutcomeEvent) -> "EventSchema":
        return cls(
            outcome=event.outcome.value,
            message=event.message,
            operation=event.operation,
            key=event.key,
            severity=event.severity,
            timestamp=event.timestamp,
        )


__all__ = [
    "CatalogEntrySchema",
    "CatalogResponse",
    "EventSchema",
    "ItemCreate",
    "ItemSchema",
    "MutationResponse",
    "QuantityUpdate",
    "RenameRequest",
]
