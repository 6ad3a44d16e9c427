# src/todo_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (local store, GitHub store, orchestrator),
- restores the persisted login flag and remote config (corrupt slots are reset).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.auth import restore_login
from ..core.errors import CorruptionError, StorageError
from ..core.ports import KeyValueStore, RemoteStore
from ..core.state import AppState
from ..remote.github_store import GitHubContentStore
from ..storage.local_store import REMOTE_CONFIG_KEY, JsonFileKeyValueStore, LocalStoreAdapter
from ..sync.orchestrator import SyncOrchestrator
from ..tasks.task_models import RemoteConfig
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def _restore_remote_config(local: LocalStoreAdapter) -> RemoteConfig | None:
    try:
        return local.load_remote_config()
    except CorruptionError as e:
        logger.warning("%s; remote sync disabled until reconfigured.", e)
        try:
            local.clear(REMOTE_CONFIG_KEY)
        except StorageError as clear_err:
            logger.error("Could not reset remote config: %s", clear_err)
        return None


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    remote: RemoteStore | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the storage/remote backends) injectable makes the app easier
    to test and avoids hidden global config reads. If settings is None, falls back to
    get_settings(). Tasks are not loaded here; call state.sync.load() once a loop runs.
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = JsonFileKeyValueStore(settings.storage_path)

    if remote is None:
        remote = GitHubContentStore.from_settings(settings)

    local = LocalStoreAdapter(kv)
    task_store = TaskStore(local)
    config = _restore_remote_config(local)

    state = AppState(
        settings=settings,
        local=local,
        task_store=task_store,
        sync=SyncOrchestrator(local=local, remote=remote, task_store=task_store, config=config),
    )
    restore_login(state)

    logger.info(
        "State ready: remote=%s logged_in=%s",
        config.location if config else "off",
        state.logged_in,
    )
    return state
