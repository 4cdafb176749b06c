import asyncio
from datetime import timedelta

from conftest import add_session, add_user

from codecraft.services.sessions import (
    create_session,
    get_session_from_cookie,
    resolve_session,
    revoke_session,
)


def run(session_factory, fn):
    async def runner():
        async with session_factory() as db:
            return await fn(db)

    return asyncio.run(runner())


def test_cookie_parsing():
    assert get_session_from_cookie(None) is None
    assert get_session_from_cookie("") is None
    assert get_session_from_cookie("theme=dark") is None
    assert get_session_from_cookie("session=abc123") == "abc123"
    assert get_session_from_cookie("theme=dark; session=abc123; lang=fr") == "abc123"
    assert get_session_from_cookie("mysession=nope") is None


def test_new_session_resolves_to_owner(session_factory, sync_db):
    add_user(sync_db, "u1", email="u1@x.io", password="secret1")

    session_id = run(session_factory, lambda db: create_session(db, "u1"))

    assert len(session_id) == 64
    assert run(session_factory, lambda db: resolve_session(db, session_id)) == "u1"


def test_expired_session_resolves_to_none(session_factory, sync_db):
    add_user(sync_db, "u1")
    add_session(sync_db, "u1", "e" * 64, expires_in=timedelta(seconds=-1))

    assert run(session_factory, lambda db: resolve_session(db, "e" * 64)) is None


def test_unknown_and_missing_sessions_resolve_to_none(session_factory):
    assert run(session_factory, lambda db: resolve_session(db, "f" * 64)) is None
    assert run(session_factory, lambda db: resolve_session(db, None)) is None


def test_revoke(session_factory, sync_db):
    add_user(sync_db, "u1")
    add_session(sync_db, "u1", "a" * 64)

    run(session_factory, lambda db: revoke_session(db, "a" * 64))
    assert run(session_factory, lambda db: resolve_session(db, "a" * 64)) is None

    # revoking again is not an error
    run(session_factory, lambda db: revoke_session(db, "a" * 64))
