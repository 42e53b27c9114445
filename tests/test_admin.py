async def test_non_admin_gets_401_even_with_goals(client, make_user, make_goal):
    alice = await make_user("alice@example.com")
    await make_goal(alice)

    res = await client.get("/api/admin/getAllGoals", params={"email": "notadmin@x.com"})

    assert res.status_code == 401
    assert res.json() == {"success": False, "message": "Unauthorized"}


async def test_missing_email_is_401(client):
    res = await client.get("/api/admin/getAllGoals")

    assert res.status_code == 401


async def test_admin_sees_every_goal_with_owner_fields(client, make_user, make_goal):
    alice = await make_user("alice@example.com", name="Alice")
    bob = await make_user("bob@example.com")
    await make_goal(alice, "Alice goal")
    await make_goal(bob, "Bob goal")

    res = await client.get("/api/admin/getAllGoals", params={"email": "Admin@Example.com"})

    assert res.status_code == 200
    goals = {g["goal"]: g for g in res.json()["goals"]}
    assert goals["Alice goal"]["userName"] == "Alice"
    assert goals["Bob goal"]["email"] == "bob@example.com"
    # display name falls back to the email
    assert goals["Bob goal"]["userName"] == "bob@example.com"


async def test_admin_creates_user_who_can_then_log_in(client):
    res = await client.post(
        "/api/admin/users",
        params={"email": "admin@example.com"},
        json={"email": "Carol@Example.com", "name": "Carol"},
    )

    assert res.status_code == 200
    assert res.json()["user"]["email"] == "carol@example.com"

    login = await client.post("/api/auth/login", json={"email": "carol@example.com"})
    assert login.status_code == 200


async def test_admin_cannot_register_twice(client, make_user):
    await make_user("carol@example.com")

    res = await client.post(
        "/api/admin/users",
        params={"email": "admin@example.com"},
        json={"email": "carol@example.com"},
    )

    assert res.status_code == 400
    assert res.json()["message"] == "Email already registered"


async def test_non_admin_cannot_create_users(client):
    res = await client.post(
        "/api/admin/users",
        params={"email": "alice@example.com"},
        json={"email": "eve@example.com"},
    )

    assert res.status_code == 401
