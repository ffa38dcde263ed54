"""Shared test fixtures."""

import httpx
import pytest
from eth_abi import encode
from eth_utils import encode_hex
from httpx import ASGITransport, AsyncClient

from rose_bridge.chain.decoder import TASK_APPROVED_TOPIC
from rose_bridge.config import Settings
from rose_bridge.github.client import GitHubClient

MARKETPLACE = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
WORKER = "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"
PR_URL = "https://github.com/acme/repo/pull/7"


def make_log(
    task_id: int = 1,
    worker: str = WORKER,
    url: str = PR_URL,
    address: str | None = MARKETPLACE,
) -> dict:
    """Build a raw ``TaskApproved`` log the way the chain-event provider delivers it."""
    log = {
        "topics": [
            TASK_APPROVED_TOPIC,
            encode_hex(encode(["uint256"], [task_id])),
            encode_hex(encode(["address"], [worker])),
        ],
        "data": encode_hex(encode(["string"], [url])),
    }
    if address is not None:
        log["address"] = address
    return log


def make_activity(log: dict | None = None, tx_hash: str = "0xabc", block: str = "0x10") -> dict:
    activity = {"hash": tx_hash, "blockNum": block}
    if log is not None:
        activity["log"] = log
    return activity


def make_envelope(*activities: dict) -> dict:
    return {
        "webhookId": "wh_test123",
        "id": "whevt_test456",
        "type": "GRAPHQL",
        "event": {"network": "ARB_SEPOLIA", "activity": list(activities)},
    }


class FakeGitHub:
    """In-memory stand-in for the GitHub pulls endpoints, served over ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.pulls: dict[tuple[str, str, int], dict] = {}
        self.requests: list[httpx.Request] = []
        self.merge_error: tuple[int, str] | None = None
        self.get_exception: Exception | None = None
        # Raw 200 bodies that replace the JSON replies
        self.get_body: bytes | None = None
        self.merge_body: bytes | None = None

    def add_pull(
        self,
        owner: str = "acme",
        repo: str = "repo",
        number: int = 7,
        *,
        state: str = "open",
        merged: bool = False,
        mergeable: bool | None = True,
    ) -> None:
        self.pulls[(owner, repo, number)] = {
            "number": number,
            "state": state,
            "merged": merged,
            "mergeable": mergeable,
            "title": f"PR {number}",
        }

    @property
    def merge_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "PUT"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")
        # repos/{owner}/{repo}/pulls/{number}[/merge]
        owner, repo, number = parts[1], parts[2], int(parts[4])
        pull = self.pulls.get((owner, repo, number))

        if request.method == "GET":
            if self.get_exception is not None:
                raise self.get_exception
            if self.get_body is not None:
                return httpx.Response(200, content=self.get_body)
            if pull is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=pull)

        if self.merge_error is not None:
            status, message = self.merge_error
            return httpx.Response(status, json={"message": message})
        if pull is None:
            return httpx.Response(404, json={"message": "Not Found"})
        pull["merged"] = True
        pull["state"] = "closed"
        if self.merge_body is not None:
            return httpx.Response(200, content=self.merge_body)
        return httpx.Response(
            200,
            json={"sha": "6dcb09b5b57875f334f61aebed695e2e4193db5e", "merged": True, "message": "Pull Request successfully merged"},
        )


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
async def github(fake_github):
    client = GitHubClient("test-token", transport=httpx.MockTransport(fake_github.handler))
    yield client
    await client.aclose()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        marketplace_address=MARKETPLACE,
        deployment_file=str(tmp_path / "deployment-output.json"),
        github_token="test-token",
    )


@pytest.fixture
def app(settings, github):
    """Create a test application instance wired to the fake GitHub."""
    from rose_bridge.main import create_app

    return create_app(settings, github=github)


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
