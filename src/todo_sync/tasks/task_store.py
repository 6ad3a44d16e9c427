# src/todo_sync/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from ..storage.local_store import LocalStoreAdapter
from .task_models import Task

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    """
    In-memory working copy of the task list for one session.

    Write-through:
    - every mutation (add/toggle/delete) and every wholesale replace (load)
      persists the full sequence to the local store right away
    - the in-memory list only changes once that write succeeded; a failed write
      raises StorageError and leaves both copies as they were
    - no-op calls (blank text, unknown id) do not write

    Task text is single-line: line breaks are folded into spaces on add.

    Ids come from the creation timestamp in ms, bumped past the current maximum so
    they stay unique and increasing.
    """

    def __init__(self, local: LocalStoreAdapter, *, clock_ms: Callable[[], int] = _now_ms) -> None:
        self._local = local
        self._clock_ms = clock_ms
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def snapshot(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _commit(self, tasks: list[Task]) -> None:
        self._local.save_tasks(tasks)
        self._tasks = tasks

    def _next_id(self) -> int:
        candidate = int(self._clock_ms())
        if self._tasks:
            candidate = max(candidate, max(t.id for t in self._tasks) + 1)
        return candidate

    # ---- mutations ----

    def add(self, text: str) -> Task | None:
        text = " ".join((text or "").splitlines())
        if not text.strip():
            return None
        task = Task(id=self._next_id(), text=text, completed=False)
        self._commit([*self._tasks, task])
        logger.debug("Task added id=%s", task.id)
        return task

    def toggle(self, task_id: int) -> Task | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                updated = Task(id=t.id, text=t.text, completed=not t.completed)
                tasks = list(self._tasks)
                tasks[i] = updated
                self._commit(tasks)
                logger.debug("Task toggled id=%s completed=%s", t.id, updated.completed)
                return updated
        return None

    def delete(self, task_id: int) -> Task | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                self._commit(self._tasks[:i] + self._tasks[i + 1 :])
                logger.debug("Task deleted id=%s", task_id)
                return t
        return None

    def replace_all(self, tasks: Iterable[Task], *, persist: bool = True) -> None:
        """Swap the whole sequence (after a load). Duplicate ids: first one wins."""
        seen: set[int] = set()
        clean: list[Task] = []
        for t in tasks:
            if t.id in seen:
                logger.warning("Dropping task with duplicate id=%s", t.id)
                continue
            seen.add(t.id)
            clean.append(t)
        if persist:
            self._commit(clean)
        else:
            self._tasks = clean
