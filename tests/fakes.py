# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from todo_sync.core.errors import ConflictError, NotFoundError
from todo_sync.core.ports import RemoteStore
from todo_sync.storage.local_store import MemoryKeyValueStore
from todo_sync.tasks.task_models import RemoteConfig, RemoteFile


@dataclass(slots=True)
class PutCall:
    location: str
    content: str
    version: str | None


@dataclass
class FakeRemoteStore(RemoteStore):
    """
    In-memory RemoteStore with GitHub-like optimistic concurrency.

    - files: location -> (content, version)
    - fetch_error / put_error: raised instead of doing the call (one-shot if *_once)
    - gate: when set, calls wait on it (to hold an operation "in flight")
    """

    files: dict[str, tuple[str, str]] = field(default_factory=dict)
    fetch_calls: list[str] = field(default_factory=list)
    put_calls: list[PutCall] = field(default_factory=list)
    fetch_error: Exception | None = None
    put_error: Exception | None = None
    gate: asyncio.Event | None = None
    _counter: int = 0

    def seed(self, config: RemoteConfig, content: str, version: str) -> None:
        self.files[config.location] = (content, version)

    @property
    def io_count(self) -> int:
        return len(self.fetch_calls) + len(self.put_calls)

    async def fetch(self, config: RemoteConfig) -> RemoteFile:
        self.fetch_calls.append(config.location)
        if self.gate is not None:
            await self.gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        if config.location not in self.files:
            raise NotFoundError(config.location, status_code=404)
        content, version = self.files[config.location]
        return RemoteFile(content=content, version=version)

    async def put(self, config: RemoteConfig, content: str, version: str | None) -> str:
        self.put_calls.append(PutCall(config.location, content, version))
        if self.gate is not None:
            await self.gate.wait()
        if self.put_error is not None:
            raise self.put_error

        current = self.files.get(config.location)
        if version is None and current is not None:
            raise ConflictError(f"{config.location} already exists", status_code=422)
        if version is not None and (current is None or current[1] != version):
            raise ConflictError(f"version mismatch for {config.location}", status_code=409)

        self._counter += 1
        new_version = f"v{self._counter}"
        self.files[config.location] = (content, new_version)
        return new_version


class StepClock:
    """Deterministic millisecond clock for TaskStore ids."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 0) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


class FlakyKeyValueStore(MemoryKeyValueStore):
    """Memory slots whose writes raise OSError while `fail_writes` is set (full disk)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__(initial)
        self.fail_writes = False

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError(28, "No space left on device")
        super().set(key, value)

    def delete(self, key: str) -> None:
        if self.fail_writes:
            raise OSError(28, "No space left on device")
        super().delete(key)
