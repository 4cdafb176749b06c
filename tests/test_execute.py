from conftest import auth_headers, register

from codecraft.core.rate_limit import limiter

RUN_BODY = {"code": "print('hello')", "language": "python"}


def test_execute_runs_code(client, fake_sandbox):
    session_id = register(client)

    response = client.post("/api/execute", json=RUN_BODY, headers=auth_headers(session_id))

    assert response.status_code == 200
    assert response.json() == {"stdout": "hello\n", "stderr": "", "exitCode": 0}
    assert fake_sandbox.runs == [("print('hello')", "python")]


def test_execute_requires_session(client, fake_sandbox):
    response = client.post("/api/execute", json=RUN_BODY)
    assert response.status_code == 401

    malformed = client.post("/api/execute", json={"language": 42})
    assert malformed.status_code == 401
    assert malformed.json() == {"error": "Log in to run code"}
    assert fake_sandbox.runs == []


def test_execute_rejects_unknown_language(client):
    session_id = register(client)
    response = client.post(
        "/api/execute",
        json={"code": "puts 1", "language": "ruby"},
        headers=auth_headers(session_id),
    )
    assert response.status_code == 400
    assert response.json() == {"error": 'Language "ruby" is not supported'}


def test_execute_timeout_is_504(client, fake_sandbox):
    fake_sandbox.timeout = True
    session_id = register(client)

    response = client.post("/api/execute", json=RUN_BODY, headers=auth_headers(session_id))

    assert response.status_code == 504
    assert response.json() == {"error": "Code execution timed out (10s limit)"}


def test_execute_has_its_own_rate_limit(client):
    session_id = register(client)
    headers = auth_headers(session_id)

    for _ in range(20):
        assert client.post("/api/execute", json=RUN_BODY, headers=headers).status_code == 200
    assert client.post("/api/execute", json=RUN_BODY, headers=headers).status_code == 429

    user_id = client.get("/auth/me", headers=headers).json()["user"]["id"]
    assert limiter.store.get(f"ai:{user_id}") is None
