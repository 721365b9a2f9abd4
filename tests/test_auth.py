import asyncio

from fastapi.testclient import TestClient

from thinklink import dependencies
from thinklink.config import SESSION_COOKIE_NAME
from thinklink.crud import user_crud
from thinklink.main import app


def _client():
    return TestClient(app)


def test_register_starts_session():
    client = _client()
    resp = client.post("/api/register", json={"email": "Dana@Example.com", "password": "secret123"})

    assert resp.status_code == 201
    assert resp.json()["email"] == "dana@example.com"
    assert SESSION_COOKIE_NAME in resp.cookies
    me = client.get("/api/user")
    assert me.status_code == 200
    assert me.json()["profile_complete"] is False


def test_duplicate_email_rejected():
    client = _client()
    client.post("/api/register", json={"email": "a@example.com", "password": "secret123"})

    resp = _client().post("/api/register", json={"email": "A@example.com", "password": "other123"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


def test_register_validation_errors_are_400():
    resp = _client().post("/api/register", json={"email": "not-an-email", "password": "123"})

    assert resp.status_code == 400
    fields = {e["field"] for e in resp.json()["errors"]}
    assert fields == {"email", "password"}


def test_login_and_logout():
    _client().post("/api/register", json={"email": "b@example.com", "password": "secret123"})
    client = _client()

    assert client.get("/api/user").status_code == 401
    resp = client.post("/api/login", json={"email": "b@example.com", "password": "secret123"})
    assert resp.status_code == 200
    assert client.get("/api/user").status_code == 200

    assert client.post("/api/logout").status_code == 204
    assert client.get("/api/user").status_code == 401


def test_wrong_password_is_401():
    _client().post("/api/register", json={"email": "c@example.com", "password": "secret123"})

    resp = _client().post("/api/login", json={"email": "c@example.com", "password": "wrong-pass"})

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"


def test_unknown_session_token_is_401():
    client = _client()
    client.cookies.set(SESSION_COOKIE_NAME, "forged-token")

    resp = client.get("/api/user")

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Authentication required"


def test_password_is_stored_hashed(db):
    from thinklink.models.user import User

    _client().post("/api/register", json={"email": "d@example.com", "password": "secret123"})

    user = db.query(User).filter(User.email == "d@example.com").one()
    assert user.password_hash != "secret123"
    assert user.password_hash.startswith("$pbkdf2-sha256$")


def _on_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def test_password_work_runs_in_threadpool(monkeypatch):
    calls = []
    real_hash, real_verify = user_crud.hash_password, user_crud.verify_password

    def spy_hash(password):
        calls.append(("hash", _on_event_loop()))
        return real_hash(password)

    def spy_verify(password, hashed):
        calls.append(("verify", _on_event_loop()))
        return real_verify(password, hashed)

    monkeypatch.setattr(user_crud, "hash_password", spy_hash)
    monkeypatch.setattr(user_crud, "verify_password", spy_verify)

    assert _client().post("/api/register", json={"email": "e@example.com", "password": "secret123"}).status_code == 201
    assert _client().post("/api/login", json={"email": "e@example.com", "password": "secret123"}).status_code == 200

    assert calls == [("hash", False), ("verify", False)]


def test_session_user_lookup_runs_in_threadpool(monkeypatch):
    client = _client()
    client.post("/api/register", json={"email": "f@example.com", "password": "secret123"})
    calls = []
    real_get_user = dependencies.get_user

    def spy_get_user(db, user_id):
        calls.append(_on_event_loop())
        return real_get_user(db, user_id)

    monkeypatch.setattr(dependencies, "get_user", spy_get_user)

    assert client.get("/api/user").status_code == 200
    assert calls == [False]
