# src/todo_sync/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class SyncFormat(StrEnum):
    """Serialization mode of the remote file."""

    STRUCTURED = "structured"  # JSON array
    FLAT = "flat"  # id/text/completed line blocks

    @classmethod
    def parse(cls, raw: str | None) -> SyncFormat:
        """
        Accept the canonical names plus the aliases the config form used
        ("json" / "text"). Raises ValueError on anything else.
        """
        s = (raw or "").strip().lower()
        aliases = {"json": cls.STRUCTURED, "text": cls.FLAT, "txt": cls.FLAT}
        if s in aliases:
            return aliases[s]
        return cls(s)


class SyncStatus(StrEnum):
    UNCONFIGURED = "unconfigured"
    SYNCED = "synced"
    DEGRADED = "degraded"


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    text: str
    completed: bool = False


@dataclass(frozen=True, slots=True)
class RemoteConfig:
    """Location and credential of the remote file used as sync target."""

    token: str
    owner: str
    repo: str
    path: str
    format: SyncFormat = SyncFormat.STRUCTURED

    def __post_init__(self) -> None:
        for name in ("token", "owner", "repo", "path"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{name} is required")
        token = self.token.strip()
        # Sent as an HTTP header value.
        if not token.isascii() or not token.isprintable() or any(c.isspace() for c in token):
            raise ValueError("token must be printable ASCII without spaces")
        if not isinstance(self.format, SyncFormat):
            object.__setattr__(self, "format", SyncFormat.parse(self.format))

    @property
    def location(self) -> str:
        return f"{self.owner}/{self.repo}:{self.path}"

    def to_dict(self) -> dict[str, str]:
        return {
            "token": self.token,
            "owner": self.owner,
            "repo": self.repo,
            "path": self.path,
            "format": self.format.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RemoteConfig:
        return cls(
            token=str(data.get("token") or ""),
            owner=str(data.get("owner") or ""),
            repo=str(data.get("repo") or ""),
            path=str(data.get("path") or ""),
            format=SyncFormat.parse(data.get("format") or SyncFormat.STRUCTURED.value),
        )


@dataclass(frozen=True, slots=True)
class SyncState:
    status: SyncStatus
    reason: str | None = None

    @classmethod
    def unconfigured(cls) -> SyncState:
        return cls(SyncStatus.UNCONFIGURED)

    @classmethod
    def synced(cls) -> SyncState:
        return cls(SyncStatus.SYNCED)

    @classmethod
    def degraded(cls, reason: str) -> SyncState:
        return cls(SyncStatus.DEGRADED, reason)

    def __str__(self) -> str:
        if self.reason:
            return f"{self.status.value} ({self.reason})"
        return self.status.value


@dataclass(frozen=True, slots=True)
class RemoteFile:
    """Decoded remote content plus its opaque version token (GitHub blob sha)."""

    content: str
    version: str
