"""RocksDB-backed record store built on ``rocksdict``."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from threading import RLock
from typing import List, Optional, Tuple

from rocksdict import Options, Rdict

from ..errors import StoreError
from ..models import ItemRecord
from .base import RecordStore

ITEM_PREFIX = b"item:"

LOGGER = logging.getLogger(__name__)


def item_key(key: str) -> bytes:
    return ITEM_PREFIX + key.encode("utf-8")


def _encode(record: ItemRecord) -> bytes:
    return json.dumps(record.to_document(), separators=(",", ":"), sort_keys=True).encode("utf-8")


def _decode(payload: bytes | str) -> ItemRecord:
    try:
        raw = payload.decode("utf-8") if isinstance(payload, (bytes, bytearray)) else payload
        document = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StoreError(f"unreadable item payload: {payload!r}") from exc
    if not isinstance(document, dict):
        raise StoreError(f"item payload must be an object: {document!r}")
    return ItemRecord.from_document(document)


def open_rdict(path: os.PathLike[str] | str, *, create_if_missing: bool = True) -> Rdict:
    """Open (creating parents as needed) the RocksDB database at ``path``."""

    db_path = Path(path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    options = Options()
    options.create_if_missing(create_if_missing)
    return Rdict(str(db_path), options=options)


class RocksRecordStore(RecordStore):
    """Record store persisting JSON item documents in a RocksDB dictionary."""

    def __init__(self, db: Rdict):
        self._db = db
        self._lock = RLock()
        self._closed = False

    @classmethod
    def open(cls, path: os.PathLike[str] | str) -> "RocksRecordStore":
        try:
            db = open_rdict(path)
        except Exception as exc:
            raise StoreError(f"cannot open RocksDB at {path}: {exc}") from exc
        LOGGER.info("RocksDB opened at %s", path)
        return cls(db)

    @property
    def db(self) -> Rdict:
        return self._db

    def get(self, key: str) -> Optional[ItemRecord]:
        with self._lock:
            try:
                payload = self._db.get(item_key(key))
            except Exception as exc:
                raise StoreError(f"get {key!r} failed: {exc}") from exc
        if payload is None:
            return None
        return _decode(payload)

    def put(self, key: str, record: ItemRecord) -> None:
        encoded = _encode(record)
        with self._lock:
            try:
                self._db[item_key(key)] = encoded
            except Exception as exc:
                raise StoreError(f"put {key!r} failed: {exc}") from exc

    def delete(self, key: str) -> None:
        with self._lock:
            try:
                self._db.delete(item_key(key))
            except Exception as exc:
                raise StoreError(f"delete {key!r} failed: {exc}") from exc

    def list(self) -> List[Tuple[str, ItemRecord]]:
        with self._lock:
            try:
                raw_items = [
                    (raw_key, value)
                    for raw_key, value in self._db.items()
                    if isinstance(raw_key, (bytes, bytearray)) and raw_key.startswith(ITEM_PREFIX)
                ]
            except Exception as exc:
                raise StoreError(f"scan failed: {exc}") from exc
        return [
            (bytes(raw_key[len(ITEM_PREFIX):]).decode("utf-8"), _decode(value))
            for raw_key, value in raw_items
        ]

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._db.close()
        LOGGER.info("RocksDB closed")


__all__ = ["ITEM_PREFIX", "RocksRecordStore", "item_key", "open_rdict"]
