"""String enums for merge and record outcomes."""

from enum import StrEnum


class MergeStatus(StrEnum):
    MERGED = "merged"
    ALREADY_MERGED = "already_merged"
    CLOSED_UNMERGED = "closed_unmerged"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    NOT_MERGEABLE = "not_mergeable"
    MERGE_CONFLICT = "merge_conflict"
    TIMEOUT = "timeout"
    ERROR = "error"


class RecordStatus(StrEnum):
    MALFORMED = "malformed"
    PROVENANCE_REJECTED = "provenance_rejected"
    UNDECODABLE = "undecodable"
    INVALID_PR_URL = "invalid_pr_url"
    PROCESSED = "processed"
    FAILED = "failed"


class MergeMethod(StrEnum):
    MERGE = "merge"
    SQUASH = "squash"
    REBASE = "rebase"
