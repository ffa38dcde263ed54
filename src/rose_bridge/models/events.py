"""Domain models produced along the approval-to-merge pipeline."""

from pydantic import BaseModel, ConfigDict, Field

from rose_bridge.models.enums import MergeStatus, RecordStatus


class DecodedTaskApproved(BaseModel):
    """``TaskApproved`` event recovered from one raw log."""

    model_config = ConfigDict(frozen=True)

    task_id: int = Field(..., ge=0)
    worker: str
    github_pr_url: str


class PrReference(BaseModel):
    """A pull request located by owner, repository and number."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)
    number: int = Field(..., gt=0)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}#{self.number}"


class MergeOutcome(BaseModel):
    """Result of trying to merge one pull request. Logged, never returned to the caller."""

    model_config = ConfigDict(frozen=True)

    success: bool
    reason: str
    status: MergeStatus
    already_merged: bool = False
    merge_sha: str | None = None


class RecordOutcome(BaseModel):
    """What happened to one activity record of a delivery."""

    model_config = ConfigDict(frozen=True)

    index: int
    status: RecordStatus
    tx_hash: str | None = None
    detail: str | None = None
    merge: MergeOutcome | None = None


class Acknowledgement(BaseModel):
    """Fixed reply to the webhook caller plus the per-record outcomes for logging."""

    model_config = ConfigDict(frozen=True)

    status_code: int = 200
    body: str = "OK"
    outcomes: list[RecordOutcome] = Field(default_factory=list)
