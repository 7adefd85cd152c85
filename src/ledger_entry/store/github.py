"""File store backed by a GitHub repository (REST contents API)."""

from __future__ import annotations

import base64
import logging
from typing import Any
from urllib.parse import quote

import httpx

from ledger_entry.config import GitHubConfig
from ledger_entry.core.exceptions import (
    FileNotFoundInStore,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


class GitHubFileStore:
    """``FileStore`` over the GitHub contents API.

    Every ``write_file`` is one commit on the configured branch. The
    current blob ``sha`` is looked up before each update because the API
    requires it; it is not used as a concurrency check.

    Usage:
        store = GitHubFileStore(GitHubConfig(owner="me", repo="ledger", token="..."))
        content = await store.read_file("main.journal")
        await store.close()
    """

    def __init__(
        self,
        config: GitHubConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._headers = headers

    @property
    def identity(self) -> str:
        return f"github:{self._config.owner}/{self._config.repo}@{self._config.branch}"

    def _contents_url(self, path: str) -> str:
        return (
            f"{self._config.api_url.rstrip('/')}/repos/{self._config.owner}/"
            f"{self._config.repo}/contents/{quote(path)}"
        )

    async def _request(
        self, method: str, url: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, url, headers=self._headers, **kwargs
            )
        except httpx.TransportError as e:
            raise StoreUnavailableError(path, str(e) or type(e).__name__) from e

        if response.status_code == 404:
            raise FileNotFoundInStore(path)
        if response.is_error:
            raise StoreError(
                path,
                f"GitHub API {method} {path} failed: "
                f"{response.status_code} {_error_message(response)}",
            )
        return response

    async def _get_contents(self, path: str) -> dict[str, Any]:
        response = await self._request(
            "GET", self._contents_url(path), path, params={"ref": self._config.branch}
        )
        data = response.json()
        if not isinstance(data, dict) or data.get("type") != "file":
            raise StoreError(path, f"Not a file: {path}")
        return data

    async def read_file(self, path: str) -> str:
        data = await self._get_contents(path)
        try:
            return base64.b64decode(data.get("content", "")).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            raise StoreError(path, f"Could not decode {path}: {e}") from e

    async def write_file(self, path: str, content: str, commit_message: str) -> None:
        try:
            sha = (await self._get_contents(path)).get("sha")
        except FileNotFoundInStore:
            sha = None

        body: dict[str, Any] = {
            "message": commit_message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self._config.branch,
        }
        if sha:
            body["sha"] = sha

        await self._request("PUT", self._contents_url(path), path, json=body)
        logger.info("Committed %s to %s: %s", path, self.identity, commit_message)

    async def list_files(self, prefix: str = "") -> list[str]:
        url = (
            f"{self._config.api_url.rstrip('/')}/repos/{self._config.owner}/"
            f"{self._config.repo}/git/trees/{quote(self._config.branch)}"
        )
        response = await self._request("GET", url, prefix or "/", params={"recursive": "1"})
        data = response.json()
        if data.get("truncated"):
            logger.warning("Tree listing for %s was truncated by GitHub", self.identity)
        return sorted(
            entry["path"]
            for entry in data.get("tree", [])
            if entry.get("type") == "blob" and entry.get("path", "").startswith(prefix)
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubFileStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.reason_phrase
