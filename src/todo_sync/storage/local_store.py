# src/todo_sync/storage/local_store.py

"""
Local persistent storage.

Two layers:
- key-value backends (KeyValueStore port): JSON file on disk, or an in-memory dict;
- LocalStoreAdapter: the three fixed slots (tasks, session flag, remote config)
  with typed load/save helpers.

Typed loads raise CorruptionError when a slot is unusable. Callers clear the slot
and fall back to an empty default.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from ..core.errors import CorruptionError, ParseError, StorageError
from ..core.ports import KeyValueStore
from ..tasks.task_models import RemoteConfig, Task
from . import serializer

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
SESSION_KEY = "session-flag"
REMOTE_CONFIG_KEY = "remote-config"


class MemoryKeyValueStore:
    """Process-local slots (tests, ephemeral runs)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileKeyValueStore:
    """
    All slots in one JSON object file.

    Writes are atomic (temp file + os.replace). A missing, unreadable or corrupted
    file is treated as empty so the app can start fresh; the next write replaces it.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            logger.warning("Local storage file %s is unreadable; starting empty.", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Local storage file %s has unexpected shape; starting empty.", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except (OSError, TypeError, ValueError):
            with contextlib.suppress(OSError):
                os.unlink(tmp)
            raise
        with contextlib.suppress(Exception):
            # The remote-config slot holds a token; keep the file private on disk.
            os.chmod(self._path, 0o600)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class LocalStoreAdapter:
    """Typed access to the fixed local slots. Keeps no copy of its own."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    # ---- raw ----

    def load(self, key: str) -> str | None:
        return self._kv.get(key)

    def save(self, key: str, text: str) -> None:
        try:
            self._kv.set(key, text)
        except OSError as e:
            raise StorageError(f"cannot write slot {key!r}: {e}") from e

    def clear(self, key: str) -> None:
        try:
            self._kv.delete(key)
        except OSError as e:
            raise StorageError(f"cannot clear slot {key!r}: {e}") from e
        logger.info("Local slot %r cleared.", key)

    # ---- tasks ----

    def load_tasks(self) -> list[Task]:
        raw = self.load(TASKS_KEY)
        if raw is None:
            return []
        try:
            return serializer.decode_structured(raw)
        except ParseError as e:
            raise CorruptionError(TASKS_KEY, str(e)) from e

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        self.save(TASKS_KEY, serializer.encode_structured(tasks))

    # ---- session flag ----

    def load_logged_in(self) -> bool:
        raw = self.load(SESSION_KEY)
        if raw is None:
            return False
        s = raw.strip().lower()
        if s not in ("true", "false"):
            raise CorruptionError(SESSION_KEY, f"unexpected value {raw[:20]!r}")
        return s == "true"

    def save_logged_in(self, logged_in: bool) -> None:
        self.save(SESSION_KEY, "true" if logged_in else "false")

    # ---- remote config ----

    def load_remote_config(self) -> RemoteConfig | None:
        raw = self.load(REMOTE_CONFIG_KEY)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptionError(REMOTE_CONFIG_KEY, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CorruptionError(REMOTE_CONFIG_KEY, "expected a JSON object")
        try:
            return RemoteConfig.from_dict(data)
        except ValueError as e:
            raise CorruptionError(REMOTE_CONFIG_KEY, str(e)) from e

    def save_remote_config(self, config: RemoteConfig | None) -> None:
        if config is None:
            self.clear(REMOTE_CONFIG_KEY)
            return
        self.save(REMOTE_CONFIG_KEY, json.dumps(config.to_dict(), ensure_ascii=False))
