"""Send a TaskApproved delivery to a running merge bridge.

Builds a properly ABI-encoded ``TaskApproved`` log, wraps it the way the
chain-event provider does, and posts it to ``/webhook/task-approved`` after a
health check.

Requires a running bridge:
    rose-bridge --dev --port 3000

Usage:
    python scripts/send_test_webhook.py --pr-url https://github.com/acme/repo/pull/7 \
        [--api-url http://localhost:3000] [--contract 0x...] [--task-id 1] [--worker 0x...]
"""

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import httpx
from eth_abi import encode
from eth_utils import encode_hex

from rose_bridge.chain.decoder import TASK_APPROVED_TOPIC


def build_envelope(pr_url: str, task_id: int, worker: str, contract: str) -> dict:
    return {
        "webhookId": "wh_manual_test",
        "id": "whevt_manual_test",
        "createdAt": datetime.now(timezone.utc).isoformat(),
        "type": "GRAPHQL",
        "event": {
            "activity": [
                {
                    "hash": "0x" + "ab" * 32,
                    "blockNum": "0x1",
                    "log": {
                        "address": contract,
                        "topics": [
                            TASK_APPROVED_TOPIC,
                            encode_hex(encode(["uint256"], [task_id])),
                            encode_hex(encode(["address"], [worker])),
                        ],
                        "data": encode_hex(encode(["string"], [pr_url])),
                    },
                }
            ]
        },
    }


def main(api_url: str, pr_url: str, task_id: int, worker: str, contract: str) -> None:
    client = httpx.Client(base_url=api_url, timeout=30.0)

    print(f"Bridge: {api_url}")
    r = client.get("/health")
    print(f"Health: {r.status_code} {r.text}")
    if r.status_code != 200:
        sys.exit(1)

    envelope = build_envelope(pr_url, task_id, worker, contract)
    r = client.post("/webhook/task-approved", json=envelope)
    print(f"Webhook: {r.status_code} {r.text} (trace {r.headers.get('X-Trace-Id')})")
    print("Check the bridge logs for the merge outcome.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Post a TaskApproved delivery to the merge bridge")
    parser.add_argument("--api-url", default="http://localhost:3000", help="Bridge base URL")
    parser.add_argument("--pr-url", required=True, help="GitHub pull request URL carried by the event")
    parser.add_argument("--task-id", type=int, default=1)
    parser.add_argument("--worker", default="0x70997970c51812dc3a010c7d01b50e0d17dc79c8")
    parser.add_argument(
        "--contract",
        default="0x5fbdb2315678afecb367f032d93f642f64180aa3",
        help="Emitting contract address (must match MARKETPLACE_ADDRESS if configured)",
    )
    args = parser.parse_args()
    main(args.api_url, args.pr_url, args.task_id, args.worker, args.contract)
