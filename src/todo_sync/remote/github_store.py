# src/todo_sync/remote/github_store.py

"""
Remote store backed by a file in a GitHub repository (contents API).

- GET  /repos/{owner}/{repo}/contents/{path} -> {"content": base64, "sha": ...}
- PUT  /repos/{owner}/{repo}/contents/{path} <- {"message", "content": base64, "sha"?}

The blob sha is the version token: PUT with a stale sha is rejected (409), PUT
without a sha over an existing file is rejected (422). Both map to ConflictError.
Every successful PUT is a commit, so the message carries an ISO-8601 timestamp.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import AuthError, ConflictError, NetworkError, NotFoundError, RemoteStoreError
from ..tasks.task_models import RemoteConfig, RemoteFile

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso_utc(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class GitHubContentStore:
    """
    RemoteStore implementation over the GitHub repository contents API.

    A short-lived httpx.AsyncClient is opened per call; `transport` is injectable
    so tests can run against httpx.MockTransport.
    """

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        connect_timeout: float = 5.0,
        read_timeout: float = 20.0,
        commit_message_prefix: str = "Update tasks",
        clock: Callable[[], datetime] = _utc_now,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = (api_url or DEFAULT_API_URL).rstrip("/")
        self._timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=10.0,
            pool=connect_timeout,
        )
        self._commit_prefix = commit_message_prefix
        self._clock = clock
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Any, **kwargs: Any) -> GitHubContentStore:
        return cls(
            api_url=getattr(settings, "github_api_url", DEFAULT_API_URL),
            connect_timeout=float(getattr(settings, "http_connect_timeout", 5.0)),
            read_timeout=float(getattr(settings, "http_read_timeout", 20.0)),
            commit_message_prefix=getattr(settings, "commit_message_prefix", "Update tasks"),
            **kwargs,
        )

    # ---- helpers ----

    def contents_url(self, config: RemoteConfig) -> str:
        owner = quote(config.owner.strip(), safe="")
        repo = quote(config.repo.strip(), safe="")
        path = quote(config.path.strip().lstrip("/"), safe="/")
        return f"{self._api_url}/repos/{owner}/{repo}/contents/{path}"

    def commit_message(self) -> str:
        return f"{self._commit_prefix} {_iso_utc(self._clock())}"

    @staticmethod
    def _headers(config: RemoteConfig) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {config.token.strip()}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    @staticmethod
    def _json_body(resp: httpx.Response) -> dict[str, Any]:
        try:
            body = resp.json()
        except ValueError as e:
            raise RemoteStoreError("remote returned a non-JSON body", status_code=resp.status_code) from e
        if not isinstance(body, dict):
            raise RemoteStoreError("remote returned an unexpected body", status_code=resp.status_code)
        return body

    @staticmethod
    def _raise_for_common_status(resp: httpx.Response, config: RemoteConfig) -> None:
        code = resp.status_code
        if code == 404:
            raise NotFoundError(config.location, status_code=code)
        if code in (401, 403):
            raise AuthError(f"HTTP {code} for {config.location}", status_code=code)

    # ---- RemoteStore API ----

    async def fetch(self, config: RemoteConfig) -> RemoteFile:
        url = self.contents_url(config)
        logger.info("GitHub fetch %s", config.location)
        try:
            async with self._client() as client:
                resp = await client.get(url, headers=self._headers(config))
        except httpx.TransportError as e:
            raise NetworkError(str(e) or e.__class__.__name__) from e
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            # Bad URL, undecodable response, token that cannot go into a header.
            raise RemoteStoreError(f"request failed: {e.__class__.__name__}: {e}") from e

        self._raise_for_common_status(resp, config)
        if resp.status_code != 200:
            raise RemoteStoreError(f"unexpected HTTP {resp.status_code} on fetch", status_code=resp.status_code)

        body = self._json_body(resp)
        sha = body.get("sha")
        raw = body.get("content")
        if not isinstance(sha, str) or not isinstance(raw, str):
            raise RemoteStoreError(f"{config.location} is not a file", status_code=resp.status_code)

        try:
            # GitHub wraps base64 content at 60 columns.
            content = base64.b64decode("".join(raw.split()), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise RemoteStoreError("remote content is not valid base64 UTF-8 text") from e

        logger.debug("GitHub fetch ok %s sha=%s bytes=%d", config.location, sha, len(content))
        return RemoteFile(content=content, version=sha)

    async def put(self, config: RemoteConfig, content: str, version: str | None) -> str:
        url = self.contents_url(config)
        payload: dict[str, Any] = {
            "message": self.commit_message(),
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if version:
            payload["sha"] = version

        logger.info("GitHub put %s (%s)", config.location, "update" if version else "create")
        try:
            async with self._client() as client:
                resp = await client.put(url, headers=self._headers(config), json=payload)
        except httpx.TransportError as e:
            raise NetworkError(str(e) or e.__class__.__name__) from e
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            # Bad URL, undecodable response, token that cannot go into a header.
            raise RemoteStoreError(f"request failed: {e.__class__.__name__}: {e}") from e

        code = resp.status_code
        if code == 409:
            raise ConflictError(f"version mismatch for {config.location}", status_code=code)
        if code == 422 and not version:
            # Creating without a sha while the file exists.
            raise ConflictError(f"{config.location} already exists", status_code=code)
        self._raise_for_common_status(resp, config)
        if code not in (200, 201):
            raise RemoteStoreError(f"unexpected HTTP {code} on put", status_code=code)

        body = self._json_body(resp)
        content_obj = body.get("content")
        new_sha = content_obj.get("sha") if isinstance(content_obj, dict) else None
        if not isinstance(new_sha, str) or not new_sha:
            raise RemoteStoreError("remote did not return a new version", status_code=code)

        logger.debug("GitHub put ok %s sha=%s", config.location, new_sha)
        return new_sha
