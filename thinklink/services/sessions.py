# 서버 측 세션 저장소: 쿠키의 불투명 토큰 → user_id (TTL 적용)
# REDIS_URL 설정 시 Redis(SETEX), 미설정 시 프로세스 내 dict (로컬 개발/테스트용, 단일 워커 전제)

import logging
import secrets
import time
from typing import Dict, Optional, Protocol, Tuple

import redis.asyncio as redis

from thinklink.config import REDIS_URL, SESSION_TTL_SEC

logger = logging.getLogger(__name__)

KEY_PREFIX = "session:"


def _new_token() -> str:
    return secrets.token_urlsafe(32)


class SessionStore(Protocol):
    async def create(self, user_id: str) -> str:
        ...

    async def get(self, token: str) -> Optional[str]:
        ...

    async def delete(self, token: str) -> None:
        ...


class RedisSessionStore:
    """멀티 워커 환경에서도 세션 공유."""

    def __init__(self, client: redis.Redis, ttl_sec: int = SESSION_TTL_SEC):
        self.client = client
        self.ttl_sec = ttl_sec

    async def create(self, user_id: str) -> str:
        token = _new_token()
        await self.client.setex(f"{KEY_PREFIX}{token}", self.ttl_sec, user_id)
        return token

    async def get(self, token: str) -> Optional[str]:
        value = await self.client.get(f"{KEY_PREFIX}{token}")
        if value is None:
            return None
        return value.decode() if isinstance(value, bytes) else value

    async def delete(self, token: str) -> None:
        await self.client.delete(f"{KEY_PREFIX}{token}")


class InMemorySessionStore:
    """프로세스 내 세션 (재기동 시 소멸)."""

    def __init__(self, ttl_sec: int = SESSION_TTL_SEC):
        self.ttl_sec = ttl_sec
        self._sessions: Dict[str, Tuple[str, float]] = {}

    def _purge_expired(self, now: float) -> None:
        expired = [token for token, (_, expires_at) in self._sessions.items() if now >= expires_at]
        for token in expired:
            del self._sessions[token]

    async def create(self, user_id: str) -> str:
        now = time.monotonic()
        # 다시 제시되지 않는 토큰도 정리되도록 생성 시점에 만료분 제거
        self._purge_expired(now)
        token = _new_token()
        self._sessions[token] = (user_id, now + self.ttl_sec)
        return token

    async def get(self, token: str) -> Optional[str]:
        entry = self._sessions.get(token)
        if entry is None:
            return None
        user_id, expires_at = entry
        if time.monotonic() >= expires_at:
            # 만료 → 정리
            self._sessions.pop(token, None)
            return None
        return user_id

    async def delete(self, token: str) -> None:
        self._sessions.pop(token, None)

    def reset(self) -> None:
        self._sessions.clear()


_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """세션 저장소 싱글톤 (요청 간 상태 유지)."""
    global _session_store
    if _session_store is not None:
        return _session_store

    if REDIS_URL:
        logger.info("Using Redis session store")
        _session_store = RedisSessionStore(redis.from_url(REDIS_URL, decode_responses=True))
    else:
        logger.info("REDIS_URL not set, using in-memory session store")
        _session_store = InMemorySessionStore()
    return _session_store
