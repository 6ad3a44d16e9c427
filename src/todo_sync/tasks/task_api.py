# src/todo_sync/tasks/task_api.py

"""
Command handlers used by the presentation layer.

Each handler mutates AppState and returns a CommandResult the UI reacts to
(task snapshot + optional notice). Sync/storage errors never escape from here:
a failed local write comes back as an error notice with the list unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.errors import StorageError, SyncBusyError, describe_error
from ..core.state import AppState
from ..sync.orchestrator import Notice, SyncOutcome
from ..tasks.task_models import RemoteConfig, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    ok: bool
    tasks: tuple[Task, ...]
    notice: Notice | None = None
    task: Task | None = None


def _result(state: AppState, ok: bool, notice: Notice | None = None, task: Task | None = None) -> CommandResult:
    return CommandResult(ok=ok, tasks=state.task_store.snapshot(), notice=notice, task=task)


def _from_outcome(state: AppState, outcome: SyncOutcome) -> CommandResult:
    return _result(state, outcome.ok, outcome.notice)


def _storage_failure(state: AppState, err: StorageError) -> CommandResult:
    logger.error("Local write failed: %s", err)
    return _result(state, False, Notice.error(f"Could not save locally: {describe_error(err)}."))


def list_tasks(state: AppState) -> CommandResult:
    return _result(state, True)


def add_task(state: AppState, text: str) -> CommandResult:
    try:
        task = state.task_store.add(text)
    except StorageError as e:
        return _storage_failure(state, e)
    if task is None:
        return _result(state, False, Notice.warning("Task text is empty."))
    return _result(state, True, task=task)


def toggle_task(state: AppState, task_id: int) -> CommandResult:
    try:
        task = state.task_store.toggle(task_id)
    except StorageError as e:
        return _storage_failure(state, e)
    if task is None:
        return _result(state, False, Notice.warning(f"No task with id {task_id}."))
    return _result(state, True, task=task)


def delete_task(state: AppState, task_id: int) -> CommandResult:
    try:
        task = state.task_store.delete(task_id)
    except StorageError as e:
        return _storage_failure(state, e)
    if task is None:
        return _result(state, False, Notice.warning(f"No task with id {task_id}."))
    return _result(state, True, task=task)


async def reload_tasks(state: AppState) -> CommandResult:
    outcome = await state.sync.load()
    return _from_outcome(state, outcome)


async def request_remote_save(state: AppState) -> CommandResult:
    outcome = await state.sync.save_remote()
    return _from_outcome(state, outcome)


async def configure_remote(state: AppState, config: RemoteConfig | None) -> CommandResult:
    """Store (or clear) the remote target, then reload so it becomes authoritative."""
    try:
        state.sync.configure(config)
    except SyncBusyError:
        return _result(state, False, Notice.warning("Please wait: a remote operation is already in progress."))
    except StorageError as e:
        return _storage_failure(state, e)

    if config is None:
        # Local copy stays as it is; nothing to reload.
        return _result(state, True, Notice.info("Remote sync disabled."))

    outcome = await state.sync.load()
    return _from_outcome(state, outcome)
