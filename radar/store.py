"""
Persistence of the scan history.

The whole history is one JSON blob stored under one key of a key-value
store. Backends: in-memory dict, a JSON file on disk, or Redis. Every write
replaces the whole blob (last writer wins, single consumer assumed).
"""

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

import redis
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from radar.config import RadarSettings, settings
from radar.models import Session

_HISTORY_ADAPTER = TypeAdapter(list[Session])


class KeyValueStore(Protocol):
    """Minimal string key-value interface the history is persisted through."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local store, used for tests and when Redis is unreachable."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore:
    """All keys in one JSON object on disk, replaced atomically on write."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable store file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class RedisKeyValueStore:
    """Redis-backed store."""

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self._client = client or redis.from_url(url or settings.radar.redis_url, decode_responses=True)

    def ping(self) -> bool:
        return bool(self._client.ping())

    def get(self, key: str) -> str | None:
        return self._client.get(key)

    def set(self, key: str, value: str) -> None:
        self._client.set(key, value)

    def delete(self, key: str) -> None:
        self._client.delete(key)


def build_kv_store(radar_settings: RadarSettings | None = None) -> KeyValueStore:
    """Create the configured backend (RADAR_STORE_BACKEND)."""
    radar_settings = radar_settings or settings.radar
    backend = radar_settings.store_backend

    if backend == "memory":
        return MemoryKeyValueStore()

    if backend == "file":
        logger.debug(f"History file: {radar_settings.history_file}")
        return FileKeyValueStore(radar_settings.history_file)

    if backend == "redis":
        store = RedisKeyValueStore(radar_settings.redis_url)
        try:
            store.ping()
        except redis.RedisError as e:
            logger.warning(f"Redis unavailable at {radar_settings.redis_url} ({e}), using in-memory store")
            return MemoryKeyValueStore()
        return store

    raise ValueError(f"Unknown store backend: {backend!r}")


class SessionStore:
    """Loads and saves the whole scan history under one key."""

    def __init__(self, kv: KeyValueStore, key: str | None = None):
        self.kv = kv
        self.key = key or settings.radar.history_key

    def load(self) -> list[Session]:
        """Stored history; absent or corrupt data reads as no history."""
        raw = self.kv.get(self.key)
        if not raw:
            return []
        try:
            return _HISTORY_ADAPTER.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable history under {self.key!r}: {e}")
            return []

    def save(self, history: list[Session]) -> None:
        payload = [s.model_dump(mode="json", by_alias=True) for s in history]
        self.kv.set(self.key, json.dumps(payload, ensure_ascii=False))
        logger.debug(f"Saved {len(history)} sessions under {self.key!r}")

    def update(self, change: Callable[[list[Session]], list[Session]]) -> list[Session]:
        """Read the whole history, apply one change, write it back."""
        history = change(self.load())
        self.save(history)
        return history

    def clear(self) -> None:
        self.kv.delete(self.key)
        logger.info("History cleared")
