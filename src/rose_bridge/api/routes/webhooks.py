"""Chain-event webhook receiver: TaskApproved deliveries from the provider."""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from rose_bridge.dependencies import Controller, TraceId
from rose_bridge.logging_config import bind_delivery_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Webhooks"])


@router.post("/webhook/task-approved", response_class=PlainTextResponse)
async def task_approved(request: Request, controller: Controller, trace_id: TraceId) -> PlainTextResponse:
    """Merge the pull requests referenced by TaskApproved events.

    Always answers ``200 OK``: the provider retries non-2xx deliveries, and a
    retry of a partly processed batch would repeat its merges.
    """
    body = await request.body()
    try:
        payload = json.loads(body)
    except (ValueError, RecursionError):
        # ValueError covers JSONDecodeError and UnicodeDecodeError; RecursionError is nesting depth
        logger.info("Webhook body is not decodable JSON (%d bytes)", len(body))
        payload = None

    if isinstance(payload, dict) and isinstance(payload.get("webhookId"), str):
        bind_delivery_context(trace_id, webhook_id=payload["webhookId"])

    try:
        ack = await controller.handle(payload)
    except Exception:
        logger.exception("Webhook processing error")
        return PlainTextResponse("OK", status_code=200)

    return PlainTextResponse(ack.body, status_code=ack.status_code)
