"""Webhook ingestion: runs each activity record through the approval-to-merge pipeline.

Records of one delivery are processed strictly one after another, in delivery
order. Each record ends in a ``RecordOutcome``; no record can abort the batch
and the delivery is always acknowledged with ``200 OK``, so the provider never
redelivers (and re-triggers) a batch that was partly processed.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from rose_bridge.chain.decoder import decode_task_approved
from rose_bridge.chain.provenance import ProvenanceVerifier
from rose_bridge.github.pr_reference import parse_pr_url
from rose_bridge.models.enums import RecordStatus
from rose_bridge.models.events import Acknowledgement, RecordOutcome
from rose_bridge.models.webhook import ActivityRecord, MalformedEnvelope, parse_envelope
from rose_bridge.services.merge_orchestrator import MergeOrchestrator

logger = logging.getLogger(__name__)


class WebhookIngestionController:
    """Verifier → decoder → parser → orchestrator, once per activity record."""

    def __init__(self, verifier: ProvenanceVerifier, orchestrator: MergeOrchestrator) -> None:
        self.verifier = verifier
        self.orchestrator = orchestrator

    async def handle(self, payload: Any) -> Acknowledgement:
        """Process one delivery and return the fixed acknowledgement."""
        parsed = parse_envelope(payload)

        if isinstance(parsed, MalformedEnvelope):
            logger.info("Invalid webhook payload structure: %s", parsed.reason)
            outcomes: list[RecordOutcome] = []
        else:
            envelope = parsed.envelope
            logger.info(
                "Webhook received (webhook_id=%s, type=%s, activities=%d)",
                envelope.webhook_id,
                envelope.type,
                len(envelope.event.activity),
            )
            outcomes = await self.process_activities(envelope.event.activity)

        return self.acknowledge(outcomes)

    async def process_activities(self, activities: list[Any]) -> list[RecordOutcome]:
        """Fold the activity sequence into per-record outcomes, in order."""
        outcomes: list[RecordOutcome] = []
        for index, raw in enumerate(activities):
            try:
                outcome = await self.process_record(index, raw)
            except Exception as exc:
                logger.exception("Unexpected error processing activity %d", index)
                tx_hash = raw.get("hash") if isinstance(raw, dict) else None
                outcome = RecordOutcome(
                    index=index,
                    status=RecordStatus.FAILED,
                    tx_hash=tx_hash if isinstance(tx_hash, str) else None,
                    detail=f"{type(exc).__name__}: {exc}",
                )
            outcomes.append(outcome)
        return outcomes

    async def process_record(self, index: int, raw: Any) -> RecordOutcome:
        """Run the full pipeline for one activity record."""
        try:
            record = ActivityRecord.model_validate(raw)
        except ValidationError as exc:
            logger.info("Skipping malformed activity %d: %s", index, exc.errors()[0]["msg"])
            return RecordOutcome(index=index, status=RecordStatus.MALFORMED, detail="invalid activity shape")

        logger.info("Processing activity %d (tx=%s, block=%s)", index, record.hash, record.block_num)
        if record.log is None:
            logger.info("Skipping activity %d: missing log data", index)
            return RecordOutcome(
                index=index,
                status=RecordStatus.MALFORMED,
                tx_hash=record.hash,
                detail="missing log",
            )

        if not self.verifier.enabled:
            logger.warning(
                "MARKETPLACE_ADDRESS not configured - accepting events from ANY contract"
            )
        elif not self.verifier.verify(record.log.address):
            logger.warning("Skipping event from unexpected contract address %s", record.log.address)
            return RecordOutcome(
                index=index,
                status=RecordStatus.PROVENANCE_REJECTED,
                tx_hash=record.hash,
                detail=f"unexpected contract address {record.log.address}",
            )

        event = decode_task_approved(record.log)
        if event is None:
            logger.info("Could not decode TaskApproved event, skipping activity %d", index)
            return RecordOutcome(index=index, status=RecordStatus.UNDECODABLE, tx_hash=record.hash)

        logger.info(
            "Decoded TaskApproved (task_id=%s, worker=%s, url=%s)",
            event.task_id,
            event.worker,
            event.github_pr_url,
        )

        ref = parse_pr_url(event.github_pr_url)
        if ref is None:
            logger.error("Invalid GitHub PR URL format: %s", event.github_pr_url)
            return RecordOutcome(
                index=index,
                status=RecordStatus.INVALID_PR_URL,
                tx_hash=record.hash,
                detail=event.github_pr_url,
            )

        merge = await self.orchestrator.merge(ref, event.worker, task_id=event.task_id)
        if merge.success:
            logger.info("SUCCESS %s: %s", ref.slug, merge.reason)
        else:
            logger.error("FAILED %s: %s", ref.slug, merge.reason)

        return RecordOutcome(
            index=index,
            status=RecordStatus.PROCESSED,
            tx_hash=record.hash,
            detail=ref.slug,
            merge=merge,
        )

    @staticmethod
    def acknowledge(outcomes: list[RecordOutcome]) -> Acknowledgement:
        """Terminal step: the same acknowledgement whatever the outcomes were."""
        logger.info(
            "Webhook processing complete (records=%d, merged=%d)",
            len(outcomes),
            sum(1 for o in outcomes if o.merge is not None and o.merge.success),
        )
        return Acknowledgement(outcomes=outcomes)
