import sys
import threading
import time
from collections import Counter
from datetime import date
from pathlib import Path

import pytest
from starlette.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pantry.catalog import CatalogView  # noqa: E402  (import after sys.path tweak)
from pantry.errors import StoreError  # noqa: E402
from pantry.ledger import Ledger  # noqa: E402
from pantry.notifier import EventHistory  # noqa: E402
from pantry.storage import MemoryRecordStore, StoreGuard  # noqa: E402

TODAY = date(2025, 1, 1)


class FlakyStore(MemoryRecordStore):
    """Memory store that can fail, stall or slow down selected calls."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = Counter()
        self.failures = Counter()
        self.stall = {}
        self.delay = 0.0

    def fail(self, call: str, times: int = 1) -> None:
        self.failures[call] += times

    def _enter(self, call: str) -> None:
        self.calls[call] += 1
        event = self.stall.get(call)
        if event is not None:
            event.wait(5)
        if self.delay:
            time.sleep(self.delay)
        if self.failures[call] > 0:
            self.failures[call] -= 1
            raise StoreError(f"injected {call} failure")

    def get(self, key):
        self._enter("get")
        return super().get(key)

    def put(self, key, record):
        self._enter("put")
        super().put(key, record)

    def delete(self, key):
        self._enter("delete")
        super().delete(key)

    def list(self):
        self._enter("list")
        return super().list()


def make_guard(store, *, timeout=2.0, read_retries=2):
    return StoreGuard(store, timeout=timeout, read_retries=read_retries, backoff=0.0, max_workers=16)


@pytest.fixture()
def store():
    return FlakyStore()


@pytest.fixture()
def history():
    return EventHistory(maxlen=100)


@pytest.fixture()
def ledger(store, history):
    with Ledger(store, notifier=history, guard=make_guard(store)) as instance:
        yield instance


@pytest.fixture()
def catalog(store):
    view = CatalogView(store, guard=make_guard(store), clock=lambda: TODAY)
    yield view
    view.guard.close()


@pytest.fixture()
def stall_event():
    event = threading.Event()
    yield event
    event.set()


@pytest.fixture()
def client(tmp_path, monkeypatch):
    """
    TestClient whose app opens/closes its own RocksDB under ``tmp_path``
    inside the same context, so every test starts from an empty pantry.
    """
    monkeypatch.setenv("PANTRY_STORE", "rocksdb")
    monkeypatch.setenv("PANTRY_DB_PATH", str(tmp_path))
    monkeypatch.setenv("PANTRY_RETRY_BACKOFF", "0.001")

    from pantry_api.main import app

    with TestClient(app) as c:
        yield c
