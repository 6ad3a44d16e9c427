# tests/test_task_api.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from todo_sync.cli.bootstrap import create_initial_state
from todo_sync.core.state import AppState
from todo_sync.sync.orchestrator import NoticeLevel
from todo_sync.tasks import task_api
from todo_sync.tasks.task_models import RemoteConfig, SyncStatus, Task

from .fakes import FakeRemoteStore, FlakyKeyValueStore


def test_add_toggle_delete_return_snapshots(state: AppState) -> None:
    added = task_api.add_task(state, "Write tests")
    assert added.ok is True
    assert added.task is not None
    assert added.tasks == (added.task,)

    toggled = task_api.toggle_task(state, added.task.id)
    assert toggled.ok is True
    assert toggled.tasks[0].completed is True

    deleted = task_api.delete_task(state, added.task.id)
    assert deleted.ok is True
    assert deleted.tasks == ()


def test_rejected_commands_carry_a_warning(state: AppState) -> None:
    blank = task_api.add_task(state, "   ")
    assert blank.ok is False
    assert blank.notice is not None and blank.notice.level is NoticeLevel.WARNING

    assert task_api.toggle_task(state, 123).ok is False
    assert task_api.delete_task(state, 123).ok is False
    assert state.task_store.snapshot() == ()


def test_mutations_write_through_regardless_of_remote_state(configured_state: AppState) -> None:
    assert configured_state.sync.state.status is SyncStatus.DEGRADED
    result = task_api.add_task(configured_state, "offline edit")
    assert configured_state.local.load_tasks() == list(result.tasks)


@pytest.mark.asyncio
async def test_request_remote_save_without_config(state: AppState, remote: FakeRemoteStore) -> None:
    task_api.add_task(state, "a")
    result = await task_api.request_remote_save(state)
    assert result.ok is False
    assert result.notice is not None and result.notice.level is NoticeLevel.ERROR
    assert remote.io_count == 0


@pytest.mark.asyncio
async def test_configure_remote_reloads_from_new_target(
    state: AppState, remote: FakeRemoteStore, remote_config: RemoteConfig
) -> None:
    task_api.add_task(state, "local before config")
    remote.seed(remote_config, '[{"id": 9, "text": "remote", "completed": true}]', "r1")

    result = await task_api.configure_remote(state, remote_config)

    assert result.ok is True
    assert result.tasks == (Task(9, "remote", True),)
    assert state.sync.state.status is SyncStatus.SYNCED
    assert state.local.load_remote_config() == remote_config


@pytest.mark.asyncio
async def test_configure_remote_none_keeps_local_tasks(configured_state: AppState) -> None:
    task_api.add_task(configured_state, "stay")

    result = await task_api.configure_remote(configured_state, None)

    assert result.ok is True
    assert [t.text for t in result.tasks] == ["stay"]
    assert configured_state.sync.state.status is SyncStatus.UNCONFIGURED


@pytest.mark.asyncio
async def test_reload_tasks_reports_degraded_warning(configured_state: AppState, remote: FakeRemoteStore) -> None:
    result = await task_api.reload_tasks(configured_state)
    # nothing seeded -> remote file missing
    assert result.ok is False
    assert result.notice is not None
    assert "Remote load failed" in result.notice.text


def test_failed_local_write_comes_back_as_error_notice(
    settings: SimpleNamespace, remote: FakeRemoteStore
) -> None:
    kv = FlakyKeyValueStore()
    state = create_initial_state(settings=settings, kv=kv, remote=remote)
    kept = task_api.add_task(state, "kept")
    assert kept.task is not None

    kv.fail_writes = True
    for result in (
        task_api.add_task(state, "lost"),
        task_api.toggle_task(state, kept.task.id),
        task_api.delete_task(state, kept.task.id),
    ):
        assert result.ok is False
        assert result.notice is not None and result.notice.level is NoticeLevel.ERROR
        assert "local storage error" in result.notice.text
        assert result.tasks == (kept.task,)


@pytest.mark.asyncio
async def test_configure_remote_with_unwritable_storage_keeps_old_target(
    settings: SimpleNamespace, remote: FakeRemoteStore, remote_config: RemoteConfig
) -> None:
    kv = FlakyKeyValueStore()
    state = create_initial_state(settings=settings, kv=kv, remote=remote)
    kv.fail_writes = True

    result = await task_api.configure_remote(state, remote_config)

    assert result.ok is False
    assert result.notice is not None and result.notice.level is NoticeLevel.ERROR
    assert state.sync.config is None
    assert state.sync.state.status is SyncStatus.UNCONFIGURED
    assert remote.io_count == 0
