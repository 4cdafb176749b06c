import asyncio
import os
import re
from datetime import timedelta

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["FRONTEND_URL"] = "https://codecraft.example"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from codecraft.core.errors import UpstreamTimeout
from codecraft.core.rate_limit import limiter
from codecraft.core.security import hash_password
from codecraft.db.base import Base
from codecraft.db.session import get_db
from codecraft.main import app
from codecraft.models.progress import UserProgress
from codecraft.models.session import UserSession
from codecraft.models.user import User
from codecraft.schemas.ai import ExecutionResult
from codecraft.services.deepseek import get_completion_client
from codecraft.services.sandbox import LANGUAGE_RUNTIMES, get_sandbox
from codecraft.services.sessions import utcnow

SESSION_RE = re.compile(r"session=([^;]*)")


class FakeCompletionClient:
    def __init__(self):
        self.replies: list[str] = []
        self.default_reply = "ok"
        self.calls: list[dict] = []

    async def complete(self, messages, max_tokens=500, temperature=0.7):
        self.calls.append({"messages": messages, "max_tokens": max_tokens, "temperature": temperature})
        return self.replies.pop(0) if self.replies else self.default_reply


class FakeSandbox:
    def __init__(self):
        self.timeout = False
        self.runs: list[tuple[str, str]] = []

    def supports(self, language):
        return language in LANGUAGE_RUNTIMES

    async def run(self, code, language):
        self.runs.append((code, language))
        if self.timeout:
            raise UpstreamTimeout("Code execution timed out (10s limit)")
        return ExecutionResult(stdout="hello\n", stderr="", exit_code=0)


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "test.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def session_factory(db_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    yield async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def sync_db(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine) as db:
        yield db
    engine.dispose()


@pytest.fixture
def fake_ai():
    return FakeCompletionClient()


@pytest.fixture
def fake_sandbox():
    return FakeSandbox()


@pytest.fixture
def client(session_factory, fake_ai, fake_sandbox):
    async def override_get_db():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_completion_client] = lambda: fake_ai
    app.dependency_overrides[get_sandbox] = lambda: fake_sandbox
    limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()
    limiter.reset()


def session_from(response) -> str | None:
    """Session id from a response's Set-Cookie header ("" when cleared)."""
    match = SESSION_RE.search(response.headers.get("set-cookie", ""))
    if not match:
        return None
    return match.group(1).strip('"')


def auth_headers(session_id: str) -> dict[str, str]:
    return {"Cookie": f"session={session_id}"}


def register(client, email="a@b.com", password="secret1", name="Ann") -> str:
    response = client.post("/auth/register", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.text
    return session_from(response)


def add_user(db, user_id, email=None, password=None, name="Learner", avatar_url=None, is_admin=False, xp=None):
    db.add(
        User(
            id=user_id,
            email=email,
            name=name,
            avatar_url=avatar_url,
            password_hash=hash_password(password) if password is not None else None,
            is_admin=is_admin,
        )
    )
    if xp is not None:
        db.add(UserProgress(user_id=user_id, xp=xp))
    db.commit()


def add_session(db, user_id, session_id, expires_in=timedelta(days=1)):
    db.add(UserSession(id=session_id, user_id=user_id, expires_at=utcnow() + expires_in))
    db.commit()
    return session_id
