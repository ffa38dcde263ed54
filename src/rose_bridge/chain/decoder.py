"""ABI decoding of the marketplace ``TaskApproved`` event log.

The event is declared as::

    event TaskApproved(uint256 indexed taskId, address indexed worker, string githubPrUrl)

so a matching log carries three topics (the event selector, then ``taskId``
and ``worker`` as 32-byte words) and a data section holding the ABI-encoded
``(string)`` tuple.
"""

import logging
from collections.abc import Mapping
from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, encode_hex, keccak

from rose_bridge.models.events import DecodedTaskApproved

logger = logging.getLogger(__name__)

TASK_APPROVED_SIGNATURE = "TaskApproved(uint256,address,string)"
TASK_APPROVED_TOPIC = encode_hex(keccak(text=TASK_APPROVED_SIGNATURE))

_WORD_SIZE = 32


def _field(log: Any, name: str) -> Any:
    if isinstance(log, Mapping):
        return log.get(name)
    return getattr(log, name, None)


def _topic_bytes(topic: str) -> bytes:
    raw = decode_hex(topic)
    if len(raw) != _WORD_SIZE:
        raise ValueError(f"topic is {len(raw)} bytes, expected {_WORD_SIZE}")
    return raw


def decode_task_approved(log: Any) -> DecodedTaskApproved | None:
    """Decode a raw log into a ``DecodedTaskApproved``.

    Returns None for anything that is not a well-formed ``TaskApproved`` log.
    Never raises.
    """
    topics = _field(log, "topics")
    data = _field(log, "data")
    if not isinstance(topics, list) or not isinstance(data, str):
        logger.info("Invalid log structure - missing topics or data")
        return None
    if len(topics) != 3 or not all(isinstance(t, str) for t in topics):
        logger.info("Not a TaskApproved event (topic count %d)", len(topics))
        return None

    try:
        selector, task_topic, worker_topic = (_topic_bytes(t) for t in topics)
        if encode_hex(selector) != TASK_APPROVED_TOPIC:
            logger.info("Not a TaskApproved event (selector %s)", encode_hex(selector))
            return None

        (task_id,) = decode(["uint256"], task_topic)
        (worker,) = decode(["address"], worker_topic)
        (github_pr_url,) = decode(["string"], decode_hex(data))
    except (DecodingError, ValueError, TypeError) as exc:
        logger.info("Could not decode TaskApproved log: %s", exc)
        return None

    return DecodedTaskApproved(task_id=task_id, worker=worker, github_pr_url=github_pr_url)
