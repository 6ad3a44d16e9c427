# src/todo_sync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time (the GitHub token lives in the local store,
  entered by the user, not in the environment).
- Settings are injected into the state; nothing reads env vars after startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO_SYNC"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path

    # ---- GitHub remote store ----
    github_api_url: str
    http_connect_timeout: float
    http_read_timeout: float
    commit_message_prefix: str

    # ---- Login gate (static pair, not a security boundary) ----
    login_username: str
    login_password: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-sync").strip() or "todo-sync"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo-sync"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.json")

        github_api_url = _env(_k("GITHUB_API_URL"), "https://api.github.com").strip().rstrip("/")
        http_connect_timeout = _env_float(_k("HTTP_CONNECT_TIMEOUT_SECONDS"), 5.0)
        http_read_timeout = _env_float(_k("HTTP_READ_TIMEOUT_SECONDS"), 20.0)
        commit_message_prefix = _env(_k("COMMIT_MESSAGE_PREFIX"), "Update tasks").strip() or "Update tasks"

        login_username = _env(_k("LOGIN_USERNAME"), "admin")
        login_password = _env(_k("LOGIN_PASSWORD"), "admin")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            storage_path=storage_path,
            github_api_url=github_api_url,
            http_connect_timeout=http_connect_timeout,
            http_read_timeout=http_read_timeout,
            commit_message_prefix=commit_message_prefix,
            login_username=login_username,
            login_password=login_password,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
