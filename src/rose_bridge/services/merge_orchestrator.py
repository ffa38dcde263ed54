"""Merge orchestration: fetch a pull request, then merge it if it can be merged.

The PR is always re-read before acting, so redelivered or reprocessed events
for an already merged PR short-circuit without a second mutating call.

Only the mergeable branch issues a write (the merge itself). Every failure,
including transport errors and timeouts, comes back as a ``MergeOutcome``.
"""

from __future__ import annotations

import logging

import httpx

from rose_bridge.errors.exceptions import GitHubAPIError
from rose_bridge.github.client import GitHubClient
from rose_bridge.models.enums import MergeMethod, MergeStatus
from rose_bridge.models.events import MergeOutcome, PrReference

logger = logging.getLogger(__name__)

COMMIT_TITLE = "Merged via Rose Token on-chain approval"

_STATUS_REASONS: dict[int, tuple[MergeStatus, str]] = {
    401: (MergeStatus.NOT_FOUND, "PR not found or insufficient permissions"),
    403: (MergeStatus.NOT_FOUND, "PR not found or insufficient permissions"),
    404: (MergeStatus.NOT_FOUND, "PR not found or insufficient permissions"),
    405: (MergeStatus.NOT_MERGEABLE, "PR is not mergeable (may have required checks pending)"),
    409: (MergeStatus.MERGE_CONFLICT, "PR has merge conflicts"),
}


def build_commit_message(worker: str, task_id: int | None = None) -> str:
    """Commit message recording the worker's on-chain identity."""
    lines = ["Task approved on-chain.", ""]
    if task_id is not None:
        lines.append(f"Task ID: {task_id}")
    lines.append(f"Worker: {worker}")
    lines.append("Automatic merge triggered by Rose Token smart contract approval event.")
    return "\n".join(lines)


def outcome_from_error(exc: Exception) -> MergeOutcome:
    """Map a GitHub or transport failure to a failed ``MergeOutcome``."""
    if isinstance(exc, GitHubAPIError) and exc.status_code in _STATUS_REASONS:
        status, reason = _STATUS_REASONS[exc.status_code]
        return MergeOutcome(success=False, reason=reason, status=status)
    if isinstance(exc, httpx.TimeoutException):
        return MergeOutcome(
            success=False,
            reason=f"GitHub request timed out: {exc}",
            status=MergeStatus.TIMEOUT,
        )
    message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    return MergeOutcome(success=False, reason=message, status=MergeStatus.ERROR)


class MergeOrchestrator:
    """Realizes the merge side effect for one approved task."""

    def __init__(self, github: GitHubClient, merge_method: MergeMethod = MergeMethod.MERGE) -> None:
        self.github = github
        self.merge_method = merge_method

    async def merge(self, ref: PrReference, worker: str, task_id: int | None = None) -> MergeOutcome:
        """Merge ``ref`` on behalf of ``worker`` unless its current state forbids it."""
        logger.info("Attempting to merge PR %s", ref.slug)

        try:
            pr = await self.github.get_pull(ref.owner, ref.repo, ref.number)
            logger.info(
                "PR %s state=%s mergeable=%s merged=%s",
                ref.slug,
                pr.state,
                pr.mergeable,
                pr.merged,
            )

            if pr.merged:
                return MergeOutcome(
                    success=True,
                    reason="PR already merged",
                    status=MergeStatus.ALREADY_MERGED,
                    already_merged=True,
                )
            if pr.state == "closed":
                return MergeOutcome(
                    success=False,
                    reason="PR is closed without being merged",
                    status=MergeStatus.CLOSED_UNMERGED,
                )
            if pr.mergeable is False:
                return MergeOutcome(
                    success=False,
                    reason="PR has conflicts and cannot be merged",
                    status=MergeStatus.CONFLICT,
                )

            result = await self.github.merge_pull(
                ref.owner,
                ref.repo,
                ref.number,
                merge_method=self.merge_method,
                commit_title=COMMIT_TITLE,
                commit_message=build_commit_message(worker, task_id),
            )
        except (GitHubAPIError, httpx.HTTPError) as exc:
            logger.error("Error merging PR %s: %s", ref.slug, exc)
            return outcome_from_error(exc)

        logger.info("PR %s merged (sha=%s)", ref.slug, result.sha)
        return MergeOutcome(
            success=True,
            reason="PR merged successfully",
            status=MergeStatus.MERGED,
            merge_sha=result.sha,
        )
