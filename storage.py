# storage.py

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger
from pydantic import ValidationError

from config import PENDING_SUBMISSIONS_KEY, RECENT_CLIENTS_KEY
from models import PendingSubmission, RecentClient


class MemoryStore:
    """Key-value store that lives only as long as the process."""

    def __init__(self, initial: Optional[dict] = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def update(self, key: str, fn: Callable[[Any], Any], default: Any = None) -> Any:
        with self._lock:
            value = fn(self._data.get(key, default))
            self._data[key] = value
            return value


class JsonFileStore:
    """
    Durable key-value store backed by a single JSON object on disk.

    Every `set` rewrites the whole file through a temp file + rename, so a
    crash mid-write leaves the previous snapshot in place. Writers in one
    process are serialized; separate processes are not coordinated.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def update(self, key: str, fn: Callable[[Any], Any], default: Any = None) -> Any:
        """Read-modify-write one key without letting another writer in between."""
        with self._lock:
            data = self._read()
            value = fn(data.get(key, default))
            data[key] = value
            self._write(data)
            return value

    # -------------------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------------------

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            logger.error(f"Local store {self.path} is corrupt, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Local store {self.path} does not hold an object, starting empty")
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)


class LocalFallbackStore:
    """
    Persist intake bookkeeping to a key-value store:
      - `recentClients`: the last few successful submissions, newest first
      - `pendingSubmissions`: failed submissions kept for manual recovery
    """

    def __init__(self, backend, recent_limit: int = 5) -> None:
        self.backend = backend
        self.recent_limit = recent_limit

    # -------------------------------------------------------------------------------------
    # Recent clients
    # -------------------------------------------------------------------------------------

    def load_recent_clients(self) -> list[RecentClient]:
        rows = self._load_list(RECENT_CLIENTS_KEY)
        clients = []
        for row in rows:
            try:
                clients.append(RecentClient.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed recent client entry: {e}")
        return clients[: self.recent_limit]

    def save_recent_clients(self, clients: list[RecentClient]) -> None:
        rows = [c.model_dump() for c in clients[: self.recent_limit]]
        self.backend.set(RECENT_CLIENTS_KEY, rows)

    # -------------------------------------------------------------------------------------
    # Pending submissions
    # -------------------------------------------------------------------------------------

    def load_pending(self) -> list[PendingSubmission]:
        pending = []
        for row in self._load_list(PENDING_SUBMISSIONS_KEY):
            try:
                pending.append(PendingSubmission.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed pending submission: {e}")
        return pending

    def append_pending(self, record: PendingSubmission) -> None:
        row = record.model_dump()
        rows = self.backend.update(
            PENDING_SUBMISSIONS_KEY, lambda value: self._as_list(PENDING_SUBMISSIONS_KEY, value) + [row], []
        )
        logger.info(f"Queued pending submission for {record.name or 'unnamed client'} ({len(rows)} pending)")

    def remove_pending(self, records: list[PendingSubmission]) -> int:
        """
        Drop the given entries from the queue as it is now, not as it was
        when they were read. Returns how many entries remain.
        """
        sent = [r.model_dump() for r in records]

        def without_sent(value):
            rows = self._as_list(PENDING_SUBMISSIONS_KEY, value)
            for row in sent:
                if row in rows:
                    rows.remove(row)
            return rows

        return len(self.backend.update(PENDING_SUBMISSIONS_KEY, without_sent, []))

    def clear_pending(self) -> None:
        self.backend.set(PENDING_SUBMISSIONS_KEY, [])

    def _load_list(self, key: str) -> list:
        return self._as_list(key, self.backend.get(key, []))

    @staticmethod
    def _as_list(key: str, value) -> list:
        if not isinstance(value, list):
            logger.error(f"Local store key {key!r} is not a list, ignoring it")
            return []
        return list(value)
