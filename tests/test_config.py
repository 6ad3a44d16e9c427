# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from todo_sync.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("TODO_SYNC_"):
            monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "todo-sync"
    assert s.data_dir == Path(".local/todo-sync")
    assert s.storage_path == Path(".local/todo-sync/storage.json")
    assert s.github_api_url == "https://api.github.com"
    assert s.commit_message_prefix == "Update tasks"
    assert s.console_enabled is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_SYNC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TODO_SYNC_GITHUB_API_URL", "https://ghe.example.com/api/v3/")
    monkeypatch.setenv("TODO_SYNC_HTTP_READ_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("TODO_SYNC_CONSOLE_ENABLED", "off")
    monkeypatch.setenv("TODO_SYNC_LOGIN_USERNAME", "me")

    s = Settings.from_env()

    assert s.storage_path == tmp_path / "storage.json"
    assert s.github_api_url == "https://ghe.example.com/api/v3"
    assert s.http_read_timeout == 2.5
    assert s.console_enabled is False
    assert s.login_username == "me"


def test_bad_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODO_SYNC_HTTP_CONNECT_TIMEOUT_SECONDS", "soon")
    assert Settings.from_env().http_connect_timeout == 5.0
