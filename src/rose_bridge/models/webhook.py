"""Pydantic models for the inbound chain-event webhook delivery."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class RawLog(BaseModel):
    """One EVM log as delivered by the chain-event provider."""

    model_config = ConfigDict(extra="ignore")

    address: str | None = None
    topics: list[str] | None = None
    data: str | None = None


class ActivityRecord(BaseModel):
    """One blockchain log entry inside an envelope."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    hash: str | None = None
    block_num: str | int | None = Field(None, alias="blockNum")
    log: RawLog | None = None


class WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Items stay raw so one bad record cannot invalidate the whole batch.
    activity: list[Any]


class WebhookEnvelope(BaseModel):
    """One delivery from the chain-event provider."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    webhook_id: str | None = Field(None, alias="webhookId")
    type: str | None = None
    event: WebhookEvent


@dataclass(frozen=True)
class ValidEnvelope:
    envelope: WebhookEnvelope


@dataclass(frozen=True)
class MalformedEnvelope:
    reason: str


ParsedEnvelope = ValidEnvelope | MalformedEnvelope


def parse_envelope(payload: Any) -> ParsedEnvelope:
    """Validate a decoded JSON body into a tagged envelope result."""
    if not isinstance(payload, dict):
        return MalformedEnvelope(reason=f"expected JSON object, got {type(payload).__name__}")
    try:
        return ValidEnvelope(envelope=WebhookEnvelope.model_validate(payload))
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "body"
        return MalformedEnvelope(reason=f"{location}: {first['msg']}")
