# src/todo_sync/sync/orchestrator.py

"""
Sync orchestrator: decides which store is authoritative.

States: Unconfigured -> (load) -> Synced | Degraded(reason)

Policy ("last loader wins, last explicit saver wins"):
- on load, the remote file is authoritative when a RemoteConfig exists; any
  failure degrades to the local copy with a warning
- without a RemoteConfig only the local store is read, silently
- remote writes happen only on explicit save; failures never touch local data
- at most one remote fetch/put is in flight; a second request is rejected

Nothing raises out of load()/save_remote(): errors come back in SyncOutcome.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from ..core.errors import (
    CorruptionError,
    NotConfiguredError,
    NotFoundError,
    StorageError,
    SyncBusyError,
    SyncError,
    describe_error,
)
from ..core.ports import RemoteStore
from ..storage import serializer
from ..storage.local_store import TASKS_KEY, LocalStoreAdapter
from ..tasks.task_models import RemoteConfig, SyncState, SyncStatus, Task
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


class NoticeLevel(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    """Transient user-facing notification."""

    level: NoticeLevel
    text: str

    @classmethod
    def info(cls, text: str) -> Notice:
        return cls(NoticeLevel.INFO, text)

    @classmethod
    def warning(cls, text: str) -> Notice:
        return cls(NoticeLevel.WARNING, text)

    @classmethod
    def error(cls, text: str) -> Notice:
        return cls(NoticeLevel.ERROR, text)


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    ok: bool
    state: SyncState
    source: str | None = None  # "remote" / "local" for loads
    notice: Notice | None = None
    error: SyncError | None = None


class SyncOrchestrator:
    def __init__(
        self,
        *,
        local: LocalStoreAdapter,
        remote: RemoteStore,
        task_store: TaskStore,
        config: RemoteConfig | None = None,
    ) -> None:
        self._local = local
        self._remote = remote
        self._tasks = task_store
        self._config = config
        self._version: str | None = None
        self._in_flight = False
        if config is None:
            self._state = SyncState.unconfigured()
        else:
            self._state = SyncState.degraded("remote not loaded yet")

    # ---- introspection ----

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def config(self) -> RemoteConfig | None:
        return self._config

    @property
    def version(self) -> str | None:
        return self._version

    @property
    def busy(self) -> bool:
        """True while a remote fetch/put is outstanding (save action disabled)."""
        return self._in_flight

    # ---- internals ----

    @contextlib.contextmanager
    def _remote_op(self) -> Iterator[None]:
        # Check-and-set happens before any await, so it is atomic on the event loop.
        if self._in_flight:
            raise SyncBusyError("a remote operation is already in progress")
        self._in_flight = True
        try:
            yield
        finally:
            self._in_flight = False

    def _degrade(self, err: SyncError) -> SyncState:
        self._state = SyncState.degraded(describe_error(err))
        return self._state

    def _load_local(self) -> tuple[list[Task], Notice | None]:
        try:
            return self._local.load_tasks(), None
        except CorruptionError as e:
            logger.warning("%s; resetting local tasks.", e)
            try:
                self._local.clear(TASKS_KEY)
            except StorageError as clear_err:
                logger.error("Could not reset local tasks: %s", clear_err)
            return [], Notice.warning("Local task data was corrupted and has been reset.")

    def _busy_outcome(self, err: SyncBusyError) -> SyncOutcome:
        return SyncOutcome(
            ok=False,
            state=self._state,
            notice=Notice.warning("Please wait: a remote operation is already in progress."),
            error=err,
        )

    # ---- configuration ----

    def configure(self, config: RemoteConfig | None) -> SyncState:
        """
        Persist (or clear) the remote target. The version token is reset; the caller
        is expected to load() next so the new target becomes authoritative.
        """
        if self._in_flight:
            raise SyncBusyError("cannot change the remote target while a remote operation is in progress")
        self._local.save_remote_config(config)
        self._config = config
        self._version = None
        if config is None:
            self._state = SyncState.unconfigured()
            logger.info("Remote sync disabled.")
        else:
            self._state = SyncState.degraded("remote not loaded yet")
            logger.info("Remote sync target set to %s (%s).", config.location, config.format.value)
        return self._state

    # ---- load ----

    async def load(self) -> SyncOutcome:
        config = self._config
        if config is None:
            tasks, notice = self._load_local()
            self._tasks.replace_all(tasks, persist=False)
            self._state = SyncState.unconfigured()
            logger.info("Loaded %d task(s) from local storage.", len(tasks))
            return SyncOutcome(ok=True, state=self._state, source="local", notice=notice)

        try:
            with self._remote_op():
                remote_file = await self._remote.fetch(config)
                tasks = serializer.decode(remote_file.content, config.format)
            # Mirrors into the local slot; memory is untouched if that write fails.
            self._tasks.replace_all(tasks)
        except SyncBusyError as e:
            return self._busy_outcome(e)
        except SyncError as e:
            if isinstance(e, NotFoundError):
                self._version = None
            state = self._degrade(e)
            logger.warning("Remote load from %s failed (%s); using local copy.", config.location, state.reason)
            local_tasks, local_notice = self._load_local()
            self._tasks.replace_all(local_tasks, persist=False)
            text = f"Remote load failed: {state.reason}. Showing the local copy."
            if local_notice is not None:
                text = f"{text} {local_notice.text}"
            return SyncOutcome(
                ok=False,
                state=state,
                source="local",
                notice=Notice.warning(text),
                error=e,
            )

        self._version = remote_file.version
        self._state = SyncState.synced()
        logger.info("Loaded %d task(s) from %s (version=%s).", len(tasks), config.location, remote_file.version)
        return SyncOutcome(
            ok=True,
            state=self._state,
            source="remote",
            notice=Notice.info(f"Loaded {len(tasks)} task(s) from {config.location}."),
        )

    # ---- save ----

    async def save_remote(self) -> SyncOutcome:
        config = self._config
        if config is None or self._state.status is SyncStatus.UNCONFIGURED:
            err = NotConfiguredError("remote sync is not configured")
            return SyncOutcome(
                ok=False,
                state=self._state,
                notice=Notice.error("Remote sync is not configured."),
                error=err,
            )

        content = serializer.encode(self._tasks.snapshot(), config.format)
        try:
            with self._remote_op():
                new_version = await self._remote.put(config, content, self._version)
        except SyncBusyError as e:
            return self._busy_outcome(e)
        except SyncError as e:
            state = self._degrade(e)
            logger.warning("Remote save to %s failed (%s); local copy kept.", config.location, state.reason)
            return SyncOutcome(
                ok=False,
                state=state,
                notice=Notice.error(f"Remote save failed: {state.reason}. Local copy is unchanged."),
                error=e,
            )

        self._version = new_version
        self._state = SyncState.synced()
        logger.info("Saved %d task(s) to %s (version=%s).", len(self._tasks), config.location, new_version)
        return SyncOutcome(
            ok=True,
            state=self._state,
            notice=Notice.info(f"Saved {len(self._tasks)} task(s) to {config.location}."),
        )
