from conftest import add_session, add_user, auth_headers, register


def _me(client, session_id):
    return client.get("/auth/me", headers=auth_headers(session_id)).json()["user"]


def test_progress_save_is_full_overwrite(client):
    session_id = register(client)
    user_id = _me(client, session_id)["id"]

    first = client.post(
        "/api/user",
        json={
            "xp": 120,
            "level": 2,
            "streak": 3,
            "lastActiveDate": "2026-10-18",
            "completedLessons": ["l0"],
            "completedExercises": ["e1"],
            "moduleProgress": {"react-basics": 40},
            "labProgress": {"todo": {"step": 2}},
        },
        headers=auth_headers(session_id),
    )
    assert first.status_code == 200
    assert first.json() == {"success": True}

    second = client.post(
        "/api/user",
        json={"xp": 500, "completedLessons": ["l1", "l2"]},
        headers=auth_headers(session_id),
    )
    assert second.status_code == 200

    user = client.get(f"/api/user/{user_id}").json()
    assert user["xp"] == 500
    assert sorted(user["completedLessons"]) == ["l1", "l2"]
    assert user["completedExercises"] == []
    assert user["level"] == 1
    assert user["streak"] == 0
    assert user["lastActiveDate"] is None
    assert user["moduleProgress"] == {}
    assert user["labProgress"] == {}


def test_progress_save_dedupes_completed_ids(client):
    session_id = register(client)
    client.post(
        "/api/user",
        json={"completedLessons": ["l1", "l2", "l1"], "completedExercises": ["e1", "e1"]},
        headers=auth_headers(session_id),
    )
    user = _me(client, session_id)
    assert user["completedLessons"] == ["l1", "l2"]
    assert user["completedExercises"] == ["e1"]


def test_progress_save_requires_session(client):
    response = client.post("/api/user", json={"xp": 10})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

    response = client.post("/api/user", json={"xp": "lots"})
    assert response.status_code == 401

    response = client.post("/api/user", json={"xp": 10}, headers=auth_headers("f" * 64))
    assert response.status_code == 401


def test_progress_save_creates_missing_row(client, sync_db):
    add_user(sync_db, "github_7", email="gh@b.com", name="Octo")
    session_id = add_session(sync_db, "github_7", "d" * 64)
    response = client.post("/api/user", json={"xp": 42}, headers=auth_headers(session_id))
    assert response.status_code == 200
    assert client.get("/api/user/github_7").json()["xp"] == 42


def test_get_unknown_user(client):
    response = client.get("/api/user/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_get_user_without_progress_uses_defaults(client, sync_db):
    add_user(sync_db, "github_1", email="x@b.com", name="X", avatar_url="https://img/x.png")
    user = client.get("/api/user/github_1").json()
    assert user["avatarUrl"] == "https://img/x.png"
    assert user["xp"] == 0
    assert user["level"] == 1
    assert user["completedLessons"] == []


def test_leaderboard_orders_and_hides_guests(client, sync_db):
    add_user(sync_db, "u1", name="Zed", xp=300)
    add_user(sync_db, "u2", name="Amy", xp=300)
    add_user(sync_db, "u3", name="Bob", xp=900)
    add_user(sync_db, "guest", name="Learner", xp=5000)
    add_user(sync_db, "guest_with_avatar", name="Learner", avatar_url="https://img/g.png", xp=10)

    body = client.get("/api/leaderboard").json()

    assert [u["id"] for u in body["users"]] == ["u3", "u2", "u1", "guest_with_avatar"]
    assert body["total"] == 5
    assert set(body["users"][0]) == {"id", "name", "avatar_url", "xp", "level", "streak"}


def test_leaderboard_ranks_users_without_progress_last(client, sync_db):
    add_user(sync_db, "u1", name="Amy", xp=10)
    add_user(sync_db, "github_1", name="Octo", avatar_url="https://img/o.png")

    users = client.get("/api/leaderboard").json()["users"]

    assert [u["id"] for u in users] == ["u1", "github_1"]
    assert users[1]["xp"] == 0


def test_leaderboard_limit_and_offset(client, sync_db):
    for i in range(5):
        add_user(sync_db, f"u{i}", name=f"User {i}", xp=i * 10)

    page = client.get("/api/leaderboard", params={"limit": 2, "offset": 1}).json()
    assert [u["id"] for u in page["users"]] == ["u3", "u2"]

    clamped = client.get("/api/leaderboard", params={"limit": 0, "offset": -3}).json()
    assert len(clamped["users"]) == 5

    garbage = client.get("/api/leaderboard", params={"limit": "lots"})
    assert garbage.status_code == 200
    assert len(garbage.json()["users"]) == 5
