"""Shared pytest fixtures.

환경 변수는 thinklink 모듈 import 전에 설정해야 함 (config가 import 시점에 읽음).

Fixture overview
----------------
_schema: 테스트마다 in-memory SQLite에 테이블 생성/삭제 (autouse)
session_store: 테스트 전용 InMemorySessionStore (autouse)
avatar_storage: tmp_path 하위 LocalAvatarStorage (autouse)
db: 직접 조회/시드용 SQLAlchemy 세션
make_client: 가입(+프로필 완성)된 사용자의 TestClient 생성기
create_meetup: API로 모임 생성 후 응답 JSON 반환
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["APP_ENV"] = "development"
os.environ["MIGRATE_ON_STARTUP"] = "false"
os.environ["AVATAR_STORAGE_URL"] = ""
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="thinklink-media-")

import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from thinklink.database import SessionLocal, engine
from thinklink.integrations.avatar_storage import LocalAvatarStorage, get_avatar_storage
from thinklink.main import app
from thinklink.models.base import Base
from thinklink.services.civil_time import civil_now
from thinklink.services.sessions import InMemorySessionStore, get_session_store

TECH = "טכנולוגיה"


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def session_store():
    store = InMemorySessionStore()
    app.dependency_overrides[get_session_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_session_store, None)


@pytest.fixture(autouse=True)
def avatar_storage(tmp_path):
    storage = LocalAvatarStorage(str(tmp_path), "/media")
    app.dependency_overrides[get_avatar_storage] = lambda: storage
    yield storage
    app.dependency_overrides.pop(get_avatar_storage, None)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_client():
    """
    make_client(full_name="...", complete=True) → 로그인된 TestClient.
    client.user_id 에 가입한 사용자 id가 들어 있음.
    """
    clients = []

    def _make(full_name: str = "דנה", complete: bool = True) -> TestClient:
        client = TestClient(app)
        email = f"user-{uuid.uuid4().hex[:8]}@example.com"
        resp = client.post("/api/register", json={"email": email, "password": "secret123"})
        assert resp.status_code == 201, resp.text
        client.user_id = resp.json()["id"]
        client.email = email
        if complete:
            resp = client.put("/api/user/profile", json={"full_name": full_name})
            assert resp.status_code == 200, resp.text
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def create_meetup():
    def _create(client: TestClient, **overrides) -> dict:
        payload = {
            "title": "ערב קוד פתוח",
            "topic": TECH,
            "description": "מדברים על פרויקטים",
            "start_at": (civil_now() + timedelta(days=1)).replace(microsecond=0).isoformat(),
            "location": "תל אביב",
            "capacity": 5,
        }
        payload.update(overrides)
        resp = client.post("/api/meetups", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
