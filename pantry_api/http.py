"""REST endpoints for pantry items backed by the ledger and catalog."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from pantry.catalog import CatalogView
from pantry.errors import PantryError, PartialRename
from pantry.ledger import Ledger
from pantry.notifier import EventHistory
from pantry.results import LedgerResult

from .logging_utils import log_operation
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

router = APIRouter(prefix="/items", tags=["items"])
events_router = APIRouter(tags=["events"])

LOGGER = logging.getLogger(__name__)


def _pantry(request: Request):
    pantry = getattr(request.app.state, "pantry", None)
    if pantry is None:
        raise HTTPException(status_code=500, detail="Pantry not initialized")
    return pantry


def get_ledger(request: Request) -> Ledger:
    return _pantry(request).ledger


def get_catalog(request: Request) -> CatalogView:
    return _pantry(request).catalog


def get_history(request: Request) -> EventHistory:
    return _pantry(request).history


def _respond(result: LedgerResult, ctx: Dict[str, object]) -> MutationResponse:
    """Translate a ledger result into a response, raising for non-success outcomes."""

    ctx.update({"outcome": result.outcome.value, "deleted": result.deleted})
    if result.ok:
        return MutationResponse.from_result(result)

    detail: Dict[str, Any] = MutationResponse.from_result(result).model_dump(mode="json")
    error = result.error
    if isinstance(error, PartialRename):
        detail["lost"] = ItemSchema.from_model(error.record).model_dump(mode="json")
        detail["new_key"] = error.new_key
    status_code = error.status_code if error is not None else 500
    raise HTTPException(status_code=status_code, detail=detail)


def _read_error(exc: PantryError) -> HTTPException:
    return HTTPException(status_code=getattr(exc, "status_code", 503), detail=str(exc))


@router.get("", response_model=CatalogResponse)
def list_items(
    request: Request,
    q: str = Query("", description="Case-insensitive substring to match against item names."),
    catalog: CatalogView = Depends(get_catalog),
) -> CatalogResponse:
    """Return the catalog, optionally filtered by name."""

    with log_operation(LOGGER, "item_list", request=request, query=q) as ctx:
        try:
            entries = catalog.list(q)
        except PantryError as exc:
            raise _read_error(exc) from exc
        ctx["result_count"] = len(entries)
        return CatalogResponse(
            query=q,
            count=len(entries),
            items=[CatalogEntrySchema.from_entry(entry) for entry in entries],
        )


@router.get("/{name}", response_model=CatalogEntrySchema)
def read_item(
    request: Request,
    name: str,
    catalog: CatalogView = Depends(get_catalog),
) -> CatalogEntrySchema:
    with log_operation(LOGGER, "item_read", request=request, item=name):
        try:
            entry = catalog.get(name)
        except PantryError as exc:
            raise _read_error(exc) from exc
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Item '{name}' not found")
        return CatalogEntrySchema.from_entry(entry)


@router.post("", response_model=MutationResponse)
def add_item(
    request: Request,
    payload: ItemCreate,
    ledger: Ledger = Depends(get_ledger),
) -> MutationResponse:
    """Add units of an item, creating it when absent."""

    with log_operation(LOGGER, "item_add", request=request, item=payload.name) as ctx:
        result = ledger.add_item(payload.name, payload.quantity, payload.expiration)
        return _respond(result, ctx)


@router.post("/{name}/remove", response_model=MutationResponse)
def remove_one(
    request: Request,
    name: str,
    ledger: Ledger = Depends(get_ledger),
) -> MutationResponse:
    with log_operation(LOGGER, "item_remove", request=request, item=name) as ctx:
        return _respond(ledger.remove_one(name), ctx)


@router.put("/{name}", response_model=MutationResponse)
def set_quantity(
    request: Request,
    name: str,
    payload: QuantityUpdate,
    ledger: Ledger = Depends(get_ledger),
) -> MutationResponse:
    with log_operation(LOGGER, "item_set_quantity", request=request, item=name) as ctx:
        result = ledger.set_quantity(name, payload.quantity, payload.expiration)
        return _respond(result, ctx)


@router.post("/{name}/rename", response_model=MutationResponse)
def rename_item(
    request: Request,
    name: str,
    payload: RenameRequest,
    ledger: Ledger = Depends(get_ledger),
) -> MutationResponse:
    with log_operation(
        LOGGER, "item_rename", request=request, item=name, new_name=payload.new_name
    ) as ctx:
        result = ledger.rename(name, payload.new_name, payload.quantity, payload.expiration)
        return _respond(result, ctx)


@router.delete("/{name}", response_model=MutationResponse)
def delete_item(
    request: Request,
    name: str,
    ledger: Ledger = Depends(get_ledger),
) -> MutationResponse:
    with log_operation(LOGGER, "item_delete", request=request, item=name) as ctx:
        return _respond(ledger.delete_item(name), ctx)


@events_router.get("/events", response_model=List[EventSchema])
def recent_events(
    limit: int = Query(20, ge=1, le=200, description="Maximum number of events to return."),
    history: EventHistory = Depends(get_history),
) -> List[EventSchema]:
    """Return the most recent ledger outcome events, newest first."""

    return [EventSchema.from_event(event) for event in history.recent(limit)]


__all__ = ["events_router", "get_catalog", "get_history", "get_ledger", "router"]
