# 프로필 CRUD (생성은 최초 프로필 완성 제출 시)

from typing import Optional

from sqlalchemy.orm import Session

from thinklink.errors import DomainError
from thinklink.models.profile import Profile
from thinklink.schemas.profile import ProfileUpdate


class ProfileError(DomainError):
    """프로필 저장 불가."""


def get_profile(db: Session, user_id: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.id == user_id).first()


def is_profile_complete(profile: Optional[Profile]) -> bool:
    """표시 이름(full_name)이 저장되어 있어야 완성으로 간주."""
    return profile is not None and bool((profile.full_name or "").strip())


def upsert_profile(db: Session, user_id: str, body: ProfileUpdate) -> Profile:
    """
    본인 프로필 생성 또는 부분 수정. 보낸 필드만 반영.

    - 최초 생성 시 full_name 필수
    - 기존 full_name을 null로 지울 수 없음 (게이트 재차단 방지)

    ⚠️ commit 하지 않음.
    """
    changes = body.model_dump(exclude_unset=True)
    profile = get_profile(db, user_id)

    if profile is None:
        if not changes.get("full_name"):
            raise ProfileError("full_name is required to complete the profile", 400)
        profile = Profile(id=user_id, interests=[])
        db.add(profile)
    elif "full_name" in changes and not changes["full_name"]:
        raise ProfileError("full_name cannot be cleared", 400)

    for field, value in changes.items():
        if field == "interests" and value is None:
            value = []
        setattr(profile, field, value)

    db.flush()
    return profile


def set_avatar_url(db: Session, user_id: str, avatar_url: str) -> Optional[Profile]:
    """프로필이 있으면 avatar_url 갱신. 없으면 None (프로필 완성 시 함께 전달)."""
    profile = get_profile(db, user_id)
    if profile is None:
        return None
    profile.avatar_url = avatar_url
    db.flush()
    return profile
