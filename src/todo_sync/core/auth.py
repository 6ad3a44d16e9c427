# src/todo_sync/core/auth.py

"""
Login gate.

A static username/password pair from settings toggles a persisted flag. It only
gates the UI; it is not a security boundary.
"""

from __future__ import annotations

import logging

from ..storage.local_store import SESSION_KEY
from .errors import CorruptionError, StorageError
from .state import AppState

logger = logging.getLogger(__name__)


def restore_login(state: AppState) -> bool:
    """Read the persisted flag into state (corrupt slot -> cleared, logged out)."""
    try:
        state.logged_in = state.local.load_logged_in()
    except CorruptionError as e:
        logger.warning("%s; resetting session flag.", e)
        state.logged_in = False
        try:
            state.local.clear(SESSION_KEY)
        except StorageError as clear_err:
            logger.error("Could not reset session flag: %s", clear_err)
    return state.logged_in


def _persist_flag(state: AppState) -> None:
    # The flag only gates the UI; a failed write keeps the in-session value.
    try:
        state.local.save_logged_in(state.logged_in)
    except StorageError as e:
        logger.error("Could not persist session flag: %s", e)


def login(state: AppState, username: str, password: str) -> bool:
    expected_user = str(getattr(state.settings, "login_username", ""))
    expected_pass = str(getattr(state.settings, "login_password", ""))

    if username != expected_user or password != expected_pass:
        logger.info("Login rejected for user=%r", username)
        return False

    state.logged_in = True
    _persist_flag(state)
    logger.info("Logged in user=%r", username)
    return True


def logout(state: AppState) -> None:
    state.logged_in = False
    _persist_flag(state)
    logger.info("Logged out.")
