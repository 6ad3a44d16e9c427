# src/todo_sync/core/errors.py

"""
Error kinds of the sync/persistence core.

Every one of them is non-fatal: the orchestrator and the command handlers catch
SyncError and turn it into a user-visible notice.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for all task storage / sync failures."""


class ParseError(SyncError):
    """Structured-format text is not valid (bad JSON or wrong shape)."""


class CorruptionError(SyncError):
    """A local storage slot holds content that cannot be used."""

    def __init__(self, key: str, detail: str) -> None:
        super().__init__(f"local slot {key!r} is corrupted: {detail}")
        self.key = key


class StorageError(SyncError):
    """Writing to the local key-value store failed (disk full, read-only data dir)."""


class NotConfiguredError(SyncError):
    """Remote save requested while no RemoteConfig is stored."""


class SyncBusyError(SyncError):
    """Another remote fetch/put is still in flight."""


class RemoteStoreError(SyncError):
    """Remote store failed in a way not covered by a more specific kind."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(RemoteStoreError):
    pass


class AuthError(RemoteStoreError):
    pass


class NetworkError(RemoteStoreError):
    pass


class ConflictError(RemoteStoreError):
    """The remote file changed since it was fetched (or already exists on create)."""


def describe_error(err: BaseException) -> str:
    """Short, user-facing reason for a sync failure (used for Degraded(reason) and notices)."""
    msg = str(err).strip()
    if isinstance(err, NotFoundError):
        return f"remote file not found ({msg})" if msg else "remote file not found"
    if isinstance(err, AuthError):
        return "remote rejected the credentials (check the token)"
    if isinstance(err, NetworkError):
        return f"network error: {msg}" if msg else "network error"
    if isinstance(err, ConflictError):
        return "remote file changed since it was loaded (reload before saving)"
    if isinstance(err, ParseError):
        return f"remote content could not be parsed: {msg}" if msg else "remote content could not be parsed"
    if isinstance(err, StorageError):
        return f"local storage error: {msg}" if msg else "local storage error"
    if isinstance(err, NotConfiguredError):
        return "remote sync is not configured"
    if isinstance(err, SyncBusyError):
        return "a remote operation is already in progress"
    return msg or err.__class__.__name__
