"""HTTP layer for the pantry ledger."""

from .schemas import (
    CatalogEntrySchema,
    CatalogResponse,
    EventSchema,
    ItemCreate,
    ItemSchema,
    MutationResponse,
    QuantityUpdate,
    RenameRequest,
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
