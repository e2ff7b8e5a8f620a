"""Structured request logging for the pantry routes."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Dict, Generator

from fastapi import HTTPException, Request


def _elapsed_ms(start: float) -> float:
    return round((perf_counter() - start) * 1000, 3)


def request_context(request: Request | None) -> Dict[str, object]:
    """Path, method, client and correlation id of ``request``, when present."""

    if request is None:
        return {}

    context: Dict[str, object] = {"method": request.method, "path": request.url.path}
    host = getattr(request.client, "host", None)
    if host:
        context["client"] = host
    correlation = request.headers.get("x-request-id") or request.headers.get("x-correlation-id")
    if correlation:
        context["request_id"] = correlation
    return context


def _level_for(status_code: int) -> int:
    # A missing item is an expected answer, not a fault.
    if status_code == 404:
        return logging.INFO
    if status_code >= 500:
        return logging.ERROR
    return logging.WARNING


@contextmanager
def log_operation(
    logger: logging.Logger,
    operation: str,
    request: Request | None = None,
    **context: object,
) -> Generator[Dict[str, object], None, None]:
    """Log one route invocation with its duration and ledger outcome.

    The yielded dict is included in the final record, so handlers can add
    values such as ``outcome`` or ``result_count`` as they learn them. An
    ``HTTPException`` whose detail is a ledger response contributes its
    ``outcome`` and ``message``; any other exception is logged with its
    traceback. Exceptions are always re-raised.
    """

    start = perf_counter()
    fields: Dict[str, object] = {"operation": operation, **request_context(request), **context}

    try:
        yield fields
    except HTTPException as exc:
        detail = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
        logger.log(
            _level_for(exc.status_code),
            "%s answered %s",
            operation,
            exc.status_code,
            extra={
                **fields,
                "status_code": exc.status_code,
                "outcome": detail.get("outcome", "error"),
                "error": detail.get("message"),
                "duration_ms": _elapsed_ms(start),
            },
        )
        raise
    except Exception as exc:
        logger.exception(
            "%s crashed",
            operation,
            extra={**fields, "status_code": 500, "error": str(exc), "duration_ms": _elapsed_ms(start)},
        )
        raise
    else:
        logger.info(
            "%s completed",
            operation,
            extra={**fields, "status_code": 200, "duration_ms": _elapsed_ms(start)},
        )
