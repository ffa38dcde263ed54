"""Async GitHub REST client for reading and merging pull requests."""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from rose_bridge.errors.exceptions import GitHubAPIError, GitHubResponseError
from rose_bridge.models.enums import MergeMethod

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class PullRequest(BaseModel):
    """The subset of a pull request the merge decision needs."""

    model_config = ConfigDict(extra="ignore")

    number: int
    state: str
    merged: bool = False
    # None while GitHub is still computing mergeability
    mergeable: bool | None = None
    title: str | None = None


class MergeResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sha: str | None = None
    merged: bool = False
    message: str | None = None


class GitHubClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the pulls endpoints.

    Every call carries the configured timeout. In-flight requests are capped by
    a semaphore shared by all deliveries handled by this process, which keeps
    the bridge inside the account's secondary rate limits.

    Non-2xx responses raise ``GitHubAPIError`` carrying the status code; a 2xx
    reply whose body is not a JSON object raises ``GitHubResponseError``.
    ``httpx.TimeoutException`` and other transport errors propagate unchanged.
    """

    def __init__(
        self,
        token: str = "",
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        max_concurrency: int = 4,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "rose-bridge",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.configured = bool(token)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, *, json: dict | None = None) -> dict:
        async with self._semaphore:
            response = await self._client.request(method, path, json=json)

        if response.is_success:
            if not response.content:
                return {}
            try:
                body = response.json()
            except ValueError:
                body = None
            if not isinstance(body, dict):
                logger.warning("GitHub %s %s returned %s with an unreadable body", method, path, response.status_code)
                raise GitHubResponseError(response.status_code, "Unexpected response body from GitHub")
            return body

        try:
            body = response.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None
        message = message or response.text[:500] or response.reason_phrase
        logger.warning("GitHub %s %s returned %s: %s", method, path, response.status_code, message)
        raise GitHubAPIError(response.status_code, message)

    async def get_pull(self, owner: str, repo: str, number: int) -> PullRequest:
        """``GET /repos/{owner}/{repo}/pulls/{number}``."""
        data = await self._request("GET", f"/repos/{owner}/{repo}/pulls/{number}")
        try:
            return PullRequest.model_validate(data)
        except ValidationError as exc:
            raise GitHubResponseError(200, f"Unexpected pull request payload: {exc.errors()[0]['msg']}") from exc

    async def merge_pull(
        self,
        owner: str,
        repo: str,
        number: int,
        *,
        merge_method: MergeMethod = MergeMethod.MERGE,
        commit_title: str | None = None,
        commit_message: str | None = None,
    ) -> MergeResult:
        """``PUT /repos/{owner}/{repo}/pulls/{number}/merge``.

        Any 2xx reply means the merge happened, so an unreadable body yields a
        ``MergeResult`` without a sha instead of an error.
        """
        payload: dict = {"merge_method": str(merge_method)}
        if commit_title:
            payload["commit_title"] = commit_title
        if commit_message:
            payload["commit_message"] = commit_message

        path = f"/repos/{owner}/{repo}/pulls/{number}/merge"
        try:
            data = await self._request("PUT", path, json=payload)
            return MergeResult.model_validate(data)
        except (GitHubResponseError, ValidationError):
            logger.warning("Merge of %s/%s#%s succeeded but the reply was unreadable", owner, repo, number)
            return MergeResult(merged=True)
