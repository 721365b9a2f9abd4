# 아바타 이미지 저장소
# - 원격: Supabase 스타일 Storage REST (POST /storage/v1/object/{bucket}/{path})
# - 로컬: MEDIA_ROOT 하위 디스크 저장 (개발/테스트)
# 경로는 항상 사용자별 prefix: {user_id}/avatar-{timestamp}.{ext}

import logging
import time
from pathlib import Path
from typing import Optional, Protocol

import httpx
from starlette.concurrency import run_in_threadpool

from thinklink.config import (
    AVATAR_BUCKET,
    AVATAR_STORAGE_KEY,
    AVATAR_STORAGE_URL,
    MEDIA_ROOT,
    MEDIA_URL,
)

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class StorageError(Exception):
    """업로드 실패 (원격 저장소 오류 등)."""

    def __init__(self, message: str, status_code: int = 502):
        self.message = message
        self.status_code = status_code


def avatar_path(user_id: str, content_type: str, now: Optional[float] = None) -> str:
    """사용자별 prefix 경로. 다른 사용자 폴더에 쓸 수 없도록 user_id로 시작."""
    ext = ALLOWED_CONTENT_TYPES[content_type]
    ts = int((now if now is not None else time.time()) * 1000)
    return f"{user_id}/avatar-{ts}.{ext}"


class AvatarStorage(Protocol):
    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """저장 후 공개 URL 반환."""
        ...


class RemoteAvatarStorage:
    def __init__(self, base_url: str, api_key: str, bucket: str):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.bucket = bucket

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{path}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
            "Content-Type": content_type,
            "x-upsert": "true",
        }
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                resp = await client.post(url, content=data, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Avatar upload failed: path=%s error=%s", path, e)
            raise StorageError("Avatar upload failed") from e
        if resp.status_code not in (200, 201):
            logger.warning("Avatar upload rejected: path=%s status=%s", path, resp.status_code)
            raise StorageError(f"Avatar upload failed: HTTP {resp.status_code}")
        return self.public_url(path)


class LocalAvatarStorage:
    def __init__(self, root: str, url_prefix: str):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        target = self.root / "avatars" / path
        await run_in_threadpool(self._write, target, data)
        return f"{self.url_prefix}/avatars/{path}"


_avatar_storage: Optional[AvatarStorage] = None


def get_avatar_storage() -> AvatarStorage:
    global _avatar_storage
    if _avatar_storage is not None:
        return _avatar_storage

    if AVATAR_STORAGE_URL:
        _avatar_storage = RemoteAvatarStorage(AVATAR_STORAGE_URL, AVATAR_STORAGE_KEY, AVATAR_BUCKET)
    else:
        _avatar_storage = LocalAvatarStorage(MEDIA_ROOT, MEDIA_URL)
    return _avatar_storage
