from datetime import timedelta

from goal_tracker.core.security import create_access_token


async def test_login_known_user(client, make_user):
    await make_user("alice@example.com", name="Alice")

    res = await client.post("/api/auth/login", json={"email": "alice@example.com"})

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["user"]["email"] == "alice@example.com"
    assert body["token"]


async def test_login_unknown_email_is_401(client):
    res = await client.post("/api/auth/login", json={"email": "nobody@x.com"})

    assert res.status_code == 401
    assert res.json() == {"success": False, "message": "You're not in the system"}


async def test_login_requires_email(client):
    res = await client.post("/api/auth/login", json={})

    assert res.status_code == 400
    assert res.json()["success"] is False


async def test_login_token_opens_me(client, make_user):
    await make_user("alice@example.com")
    token = (await client.post("/api/auth/login", json={"email": "alice@example.com"})).json()["token"]

    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 200
    assert res.json()["user"]["email"] == "alice@example.com"


async def test_me_rejects_missing_and_expired_tokens(client, make_user):
    user = await make_user("alice@example.com")
    expired = create_access_token({"sub": user.id}, expires_delta=timedelta(minutes=-1))

    assert (await client.get("/api/auth/me")).status_code == 401
    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert res.status_code == 401
    assert res.json()["success"] is False


async def test_security_headers_on_api_responses(client):
    res = await client.post("/api/auth/login", json={"email": "nobody@x.com"})

    assert res.headers["X-Frame-Options"] == "DENY"
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "default-src 'self'" in res.headers["Content-Security-Policy"]
