# src/todo_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..storage.local_store import LocalStoreAdapter
from ..sync.orchestrator import SyncOrchestrator
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Explicit session context passed to every command handler.

    Owns the live task list, the orchestrator (remote config + sync state) and the
    login flag. There are no module-level globals holding any of these.
    """

    # Settings object (todo_sync.config.Settings or a test stand-in).
    settings: Any

    local: LocalStoreAdapter
    task_store: TaskStore
    sync: SyncOrchestrator

    logged_in: bool = False
