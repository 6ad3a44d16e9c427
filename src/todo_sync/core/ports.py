# src/todo_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the storage backends and the remote store swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import RemoteConfig, RemoteFile


class KeyValueStore(Protocol):
    """
    Host-supplied persistent key-value slots (browser-localStorage style).

    Values are opaque text blobs; typing/validation is the adapter's job.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class RemoteStore(Protocol):
    """
    Remote file store with optimistic concurrency.

    fetch() returns the decoded text and a version token; put() must be given that
    token to update, or None to create. put() returns the new version token.
    """

    async def fetch(self, config: RemoteConfig) -> RemoteFile: ...

    async def put(self, config: RemoteConfig, content: str, version: str | None) -> str: ...
