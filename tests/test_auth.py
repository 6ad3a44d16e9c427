# tests/test_auth.py

from __future__ import annotations

from types import SimpleNamespace

from todo_sync.cli.bootstrap import create_initial_state
from todo_sync.core import auth
from todo_sync.core.state import AppState
from todo_sync.storage.local_store import REMOTE_CONFIG_KEY, SESSION_KEY, MemoryKeyValueStore

from .fakes import FakeRemoteStore, FlakyKeyValueStore


def test_login_checks_static_pair_and_persists_flag(state: AppState, kv: MemoryKeyValueStore) -> None:
    assert auth.login(state, "admin", "nope") is False
    assert state.logged_in is False
    assert kv.get(SESSION_KEY) is None

    assert auth.login(state, "admin", "secret") is True
    assert state.logged_in is True
    assert kv.get(SESSION_KEY) == "true"

    auth.logout(state)
    assert state.logged_in is False
    assert kv.get(SESSION_KEY) == "false"


def test_login_flag_survives_restart(settings: SimpleNamespace, kv: MemoryKeyValueStore) -> None:
    first = create_initial_state(settings=settings, kv=kv, remote=FakeRemoteStore())
    auth.login(first, "admin", "secret")

    second = create_initial_state(settings=settings, kv=kv, remote=FakeRemoteStore())
    assert second.logged_in is True


def test_corrupted_slots_are_reset_at_startup(settings: SimpleNamespace) -> None:
    kv = MemoryKeyValueStore({SESSION_KEY: "yes please", REMOTE_CONFIG_KEY: "{broken"})

    state = create_initial_state(settings=settings, kv=kv, remote=FakeRemoteStore())

    assert state.logged_in is False
    assert state.sync.config is None
    assert kv.get(SESSION_KEY) is None
    assert kv.get(REMOTE_CONFIG_KEY) is None


def test_login_still_works_when_the_flag_cannot_be_written(settings: SimpleNamespace) -> None:
    kv = FlakyKeyValueStore()
    state = create_initial_state(settings=settings, kv=kv, remote=FakeRemoteStore())
    kv.fail_writes = True

    assert auth.login(state, "admin", "secret") is True
    assert state.logged_in is True
    assert kv.get(SESSION_KEY) is None
