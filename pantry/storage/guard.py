"""Timeout and retry policy wrapped around record store calls."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from concurrent.futures import wait
from threading import Lock
from typing import Any, Callable, Dict, Optional

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import StoreError, StoreUnavailable
from ..metrics import record_retry, record_store_failure
from .base import RecordStore

LOGGER = logging.getLogger(__name__)

WRITE_CALLS = frozenset({"put", "delete"})


class StoreGuard:
    """Run store calls on a worker pool with a deadline and bounded read retries.

    ``call`` makes exactly one attempt. ``read`` retries up to ``read_retries``
    extra times with exponential backoff and must only be used for idempotent
    calls. Any ``StoreError`` or missed deadline surfaces as
    ``StoreUnavailable``.

    A write that misses its deadline keeps running on the worker pool. Until
    it finishes, every later call on the same key first waits for it (bounded
    by the same timeout) and fails with ``StoreUnavailable`` if it is still
    running, so a late write can never land on top of a newer one.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        timeout: Optional[float] = 2.0,
        read_retries: int = 3,
        backoff: float = 0.05,
        max_workers: int = 8,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if read_retries < 0:
            raise ValueError("read_retries must be >= 0")
        self.store = store
        self.timeout = timeout
        self.read_retries = read_retries
        self.backoff = backoff
        self._sleep = sleep
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pantry-store")
        self._pending: Dict[str, Future] = {}
        self._pending_lock = Lock()

    def call(self, name: str, *args: Any) -> Any:
        key = args[0] if args and isinstance(args[0], str) else None
        if key is not None:
            self._settle(name, key)

        method = getattr(self.store, name)
        future = self._executor.submit(method, *args)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout as exc:
            if not future.cancel() and key is not None and name in WRITE_CALLS:
                self._track(key, future)
            record_store_failure(name)
            raise StoreUnavailable(f"record store {name} timed out after {self.timeout:g}s") from exc
        except StoreError as exc:
            record_store_failure(name)
            raise StoreUnavailable(f"record store {name} failed: {exc}") from exc

    def retry(self, name: str, *args: Any, retries: int) -> Any:
        retrying = Retrying(
            stop=stop_after_attempt(retries + 1),
            wait=wait_exponential(multiplier=self.backoff),
            retry=retry_if_exception_type(StoreUnavailable),
            sleep=self._sleep,
            before_sleep=lambda state: self._before_retry(name, state),
            reraise=True,
        )
        return retrying(self.call, name, *args)

    def read(self, name: str, *args: Any) -> Any:
        return self.retry(name, *args, retries=self.read_retries)

    def pending(self, key: str) -> bool:
        """True while a timed-out write on ``key`` is still running."""

        with self._pending_lock:
            return key in self._pending

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ---------- helpers ----------
    def _before_retry(self, name: str, state: RetryCallState) -> None:
        record_retry(name)
        LOGGER.warning(
            "Retrying store %s",
            name,
            extra={
                "call": name,
                "attempt": state.attempt_number,
                "delay": state.next_action.sleep if state.next_action else None,
                "error": str(state.outcome.exception()) if state.outcome else None,
            },
        )

    def _track(self, key: str, future: Future) -> None:
        with self._pending_lock:
            self._pending[key] = future
        future.add_done_callback(lambda done: self._forget(key, done))

    def _forget(self, key: str, future: Future) -> None:
        with self._pending_lock:
            if self._pending.get(key) is future:
                del self._pending[key]

    def _settle(self, name: str, key: str) -> None:
        with self._pending_lock:
            earlier = self._pending.get(key)
        if earlier is None:
            return
        _, not_done = wait([earlier], timeout=self.timeout)
        if not_done:
            record_store_failure(name)
            raise StoreUnavailable(f"record store is still finishing an earlier write to {key!r}")
        self._forget(key, earlier)


__all__ = ["StoreGuard", "WRITE_CALLS"]
