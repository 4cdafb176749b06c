from datetime import timedelta

from conftest import add_session, add_user, auth_headers, register
from sqlalchemy import func, select

from codecraft.models.progress import UserProgress
from codecraft.models.session import UserSession
from codecraft.models.user import User


def _admin(sync_db):
    add_user(sync_db, "admin", email="admin@b.com", password="secret1", name="Root", is_admin=True, xp=10)
    return auth_headers(add_session(sync_db, "admin", "a" * 64))


def test_admin_routes_need_admin(client, sync_db):
    assert client.get("/api/admin/stats").status_code == 403

    session_id = register(client)
    response = client.get("/api/admin/stats", headers=auth_headers(session_id))
    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}

    # unknown admin paths are hidden behind the same check
    assert client.get("/api/admin/nope").status_code == 403


def test_stats(client, sync_db):
    headers = _admin(sync_db)
    add_user(sync_db, "u1", name="Ann", xp=250)
    add_session(sync_db, "u1", "b" * 64, expires_in=timedelta(days=-1))

    body = client.get("/api/admin/stats", headers=headers).json()
    assert body == {"total_users": 2, "active_sessions": 1, "total_xp_awarded": 260}


def test_cleanup_sessions(client, sync_db):
    headers = _admin(sync_db)
    add_user(sync_db, "u1", name="Ann")
    add_session(sync_db, "u1", "b" * 64, expires_in=timedelta(days=-1))
    add_session(sync_db, "u1", "c" * 64)

    body = client.post("/api/admin/cleanup-sessions", headers=headers).json()

    assert body["success"] is True
    assert body["deleted"] == 1
    ids = set(sync_db.scalars(select(UserSession.id)))
    assert ids == {"a" * 64, "c" * 64}


def test_cleanup_guests(client, sync_db):
    headers = _admin(sync_db)
    add_user(sync_db, "guest1", xp=5)
    add_session(sync_db, "guest1", "d" * 64)
    add_user(sync_db, "guest2")
    add_user(sync_db, "oauth_guest", avatar_url="https://img/a.png")
    add_user(sync_db, "u1", name="Ann")

    body = client.post("/api/admin/cleanup-guests", headers=headers).json()

    assert body["deleted"] == 2
    remaining = set(sync_db.scalars(select(User.id)))
    assert remaining == {"admin", "oauth_guest", "u1"}
    for model in (UserProgress, UserSession):
        count = sync_db.scalar(select(func.count()).select_from(model).where(model.user_id == "guest1"))
        assert count == 0


def test_export_omits_password_hashes(client, sync_db):
    headers = _admin(sync_db)

    body = client.get("/api/admin/export", headers=headers).json()

    assert "exported_at" in body
    assert [u["id"] for u in body["users"]] == ["admin"]
    assert "password_hash" not in body["users"][0]
    assert body["users"][0]["is_admin"] is True
    assert body["user_progress"][0]["xp"] == 10
    assert body["active_sessions"] == 1


def test_unknown_admin_endpoint(client, sync_db):
    headers = _admin(sync_db)
    assert client.get("/api/admin/nope", headers=headers).json() == {"error": "Admin endpoint not found"}
    # wrong method on a known path
    assert client.get("/api/admin/cleanup-sessions", headers=headers).status_code == 404
