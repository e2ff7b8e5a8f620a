"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

STORE_BACKENDS = ("rocksdb", "memory")
DB_FILE = "pantry.db"


@dataclass(frozen=True)
class Settings:
    store: str = "rocksdb"
    db_path: Path = Path("./data")
    store_timeout: Optional[float] = 2.0
    read_retries: int = 3
    retry_backoff: float = 0.05
    rename_retries: int = 2
    store_workers: int = 8
    event_history: int = 50
    log_level: str = "INFO"

    @property
    def db_file(self) -> Path:
        return self.db_path / DB_FILE


def _env_float(env: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    if raw.lower() in {"none", "off"}:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number (got {raw!r})") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive (got {raw!r})")
    return value


def _env_int(env: Mapping[str, str], name: str, default: int, *, minimum: int = 0) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum} (got {value})")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from ``PANTRY_*`` environment variables."""

    env = os.environ if env is None else env

    store = (env.get("PANTRY_STORE") or "rocksdb").strip().lower()
    if store not in STORE_BACKENDS:
        raise ValueError(f"PANTRY_STORE must be one of {', '.join(STORE_BACKENDS)} (got {store!r})")

    backoff = _env_float(env, "PANTRY_RETRY_BACKOFF", 0.05)

    return Settings(
        store=store,
        db_path=Path(env.get("PANTRY_DB_PATH") or "./data"),
        store_timeout=_env_float(env, "PANTRY_STORE_TIMEOUT", 2.0),
        read_retries=_env_int(env, "PANTRY_READ_RETRIES", 3),
        retry_backoff=0.05 if backoff is None else backoff,
        rename_retries=_env_int(env, "PANTRY_RENAME_RETRIES", 2),
        store_workers=_env_int(env, "PANTRY_STORE_WORKERS", 8, minimum=1),
        event_history=_env_int(env, "PANTRY_EVENT_HISTORY", 50, minimum=1),
        log_level=(env.get("PANTRY_LOG_LEVEL") or "INFO").strip().upper(),
    )


__all__ = ["DB_FILE", "STORE_BACKENDS", "Settings", "load_settings"]
