import json

import httpx

from goal_tracker.main import app
from goal_tracker.services.rewrite import GoalRewriter, get_rewriter


def completion_transport(content=None, status_code=200, seen=None):
    def handler(request: httpx.Request):
        if seen is not None:
            seen.append(request)
        if status_code != 200:
            return httpx.Response(status_code, json={"error": {"message": "boom"}})
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})
    return httpx.MockTransport(handler)


async def test_rewrite_returns_completion_text():
    seen = []
    rewriter = GoalRewriter(
        api_key="sk-test",
        transport=completion_transport("Run 5 km three times a week until June 1.", seen=seen),
    )

    assert await rewriter.rewrite("get fit") == "Run 5 km three times a week until June 1."
    sent = json.loads(seen[0].content)
    assert sent["model"] == "gpt-4o-mini"
    assert "get fit" in sent["messages"][1]["content"]
    assert seen[0].headers["Authorization"] == "Bearer sk-test"


async def test_rewrite_falls_back_on_provider_error():
    rewriter = GoalRewriter(api_key="sk-test", transport=completion_transport(status_code=503))

    assert await rewriter.rewrite("get fit") == "get fit"


async def test_rewrite_falls_back_on_empty_completion():
    rewriter = GoalRewriter(api_key="sk-test", transport=completion_transport(content=None))

    assert await rewriter.rewrite("get fit") == "get fit"


async def test_rewrite_without_api_key_is_passthrough():
    assert await GoalRewriter(api_key="").rewrite("read more") == "read more"


async def test_rewrite_endpoint(client):
    app.dependency_overrides[get_rewriter] = lambda: GoalRewriter(
        api_key="sk-test", transport=completion_transport("Read 12 books by December 31.")
    )

    res = await client.post("/api/rewriteGoal", json={"goal": "read more"})

    assert res.status_code == 200
    assert res.json() == {"success": True, "goal": "Read 12 books by December 31."}


async def test_rewrite_endpoint_requires_goal(client):
    res = await client.post("/api/rewriteGoal", json={})

    assert res.status_code == 400
    assert res.json()["success"] is False


class ExplodingRewriter:
    async def rewrite(self, goal):
        raise RuntimeError("unexpected")


async def test_unexpected_rewrite_failure_is_500_with_security_headers(client):
    app.dependency_overrides[get_rewriter] = lambda: ExplodingRewriter()

    res = await client.post("/api/rewriteGoal", json={"goal": "get fit"})

    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Server error"}
    assert res.headers["X-Frame-Options"] == "DENY"
    assert res.headers["Content-Security-Policy"].startswith("default-src 'self'")
