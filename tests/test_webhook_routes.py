"""HTTP tests for the webhook and health endpoints."""

import pytest

from tests.conftest import make_activity, make_envelope, make_log


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "rose-bridge"
    assert data["provenance_check"] is True
    assert data["github_configured"] is True
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_webhook_merges_pull_request(client, fake_github):
    fake_github.add_pull("acme", "repo", 7, mergeable=True)

    response = await client.post("/webhook/task-approved", json=make_envelope(make_activity(make_log())))

    assert response.status_code == 200
    assert response.text == "OK"
    assert [r.url.path for r in fake_github.merge_requests] == ["/repos/acme/repo/pulls/7/merge"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"webhookId": "wh_1", "type": "GRAPHQL"},
        {"webhookId": "wh_1", "event": {"activity": []}},
        {"event": {"activity": "nope"}},
        [1, 2, 3],
    ],
)
async def test_webhook_acknowledges_malformed_json(client, fake_github, payload):
    response = await client.post("/webhook/task-approved", json=payload)
    assert response.status_code == 200
    assert response.text == "OK"
    assert fake_github.requests == []


@pytest.mark.asyncio
async def test_webhook_acknowledges_non_json_body(client, fake_github):
    response = await client.post(
        "/webhook/task-approved",
        content=b"\x00not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    assert response.text == "OK"
    assert fake_github.requests == []


@pytest.mark.asyncio
async def test_webhook_acknowledges_deeply_nested_body(client, fake_github):
    response = await client.post(
        "/webhook/task-approved",
        content=b"[" * 200_000 + b"]" * 200_000,
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    assert response.text == "OK"
    assert fake_github.requests == []


@pytest.mark.asyncio
async def test_webhook_acknowledges_failed_merge(client, fake_github):
    fake_github.add_pull(mergeable=True)
    fake_github.merge_error = (405, "Required status check is expected")

    response = await client.post("/webhook/task-approved", json=make_envelope(make_activity(make_log())))

    assert response.status_code == 200
    assert response.text == "OK"
    assert len(fake_github.merge_requests) == 1


@pytest.mark.asyncio
async def test_webhook_acknowledges_controller_crash(app, client, monkeypatch):
    async def explode(payload):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(app.state.controller, "handle", explode)

    response = await client.post("/webhook/task-approved", json=make_envelope())

    assert response.status_code == 200
    assert response.text == "OK"


@pytest.mark.asyncio
async def test_trace_id_echoed(client):
    response = await client.get("/health", headers={"X-Trace-Id": "trc_fixed"})
    assert response.headers["X-Trace-Id"] == "trc_fixed"

    generated = await client.get("/health")
    assert generated.headers["X-Trace-Id"].startswith("trc_")
