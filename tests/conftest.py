# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_sync.cli.bootstrap import create_initial_state
from todo_sync.core.state import AppState
from todo_sync.storage.local_store import LocalStoreAdapter, MemoryKeyValueStore
from todo_sync.tasks.task_models import RemoteConfig, SyncFormat

from .fakes import FakeRemoteStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-sync-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
        github_api_url="https://api.github.test",
        http_connect_timeout=1.0,
        http_read_timeout=1.0,
        commit_message_prefix="Update tasks",
        login_username="admin",
        login_password="secret",
    )


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def local(kv: MemoryKeyValueStore) -> LocalStoreAdapter:
    return LocalStoreAdapter(kv)


@pytest.fixture()
def remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture()
def remote_config() -> RemoteConfig:
    return RemoteConfig(token="ghp_test", owner="alice", repo="notes", path="tasks.json")


@pytest.fixture()
def flat_remote_config() -> RemoteConfig:
    return RemoteConfig(token="ghp_test", owner="alice", repo="notes", path="tasks.txt", format=SyncFormat.FLAT)


@pytest.fixture()
def state(settings: SimpleNamespace, kv: MemoryKeyValueStore, remote: FakeRemoteStore) -> AppState:
    """AppState wired with in-memory storage and the fake remote store (remote sync off)."""
    return create_initial_state(settings=settings, kv=kv, remote=remote)


@pytest.fixture()
def configured_state(
    settings: SimpleNamespace,
    kv: MemoryKeyValueStore,
    remote: FakeRemoteStore,
    remote_config: RemoteConfig,
) -> AppState:
    """Same as `state`, but with a RemoteConfig already persisted before startup."""
    LocalStoreAdapter(kv).save_remote_config(remote_config)
    return create_initial_state(settings=settings, kv=kv, remote=remote)
