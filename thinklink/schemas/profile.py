# 프로필 요청/응답 스키마

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from thinklink.models.meetup import TOPICS
from thinklink.services.civil_time import civil_today

MIN_AGE = 18


def age_on(birthdate: date, today: date) -> int:
    """만 나이."""
    age = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        age -= 1
    return age


class ProfileUpdate(BaseModel):
    """
    PUT /api/user/profile. 보낸 필드만 반영 (부분 수정).
    최초 생성 시 full_name 필수 (crud에서 검사).
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=500)
    birthdate: Optional[date] = None
    instagram_url: Optional[str] = Field(default=None, max_length=300)
    about_me: Optional[str] = Field(default=None, max_length=1000)
    interests: Optional[List[str]] = None

    @field_validator("birthdate")
    @classmethod
    def _adult_only(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and age_on(v, civil_today()) < MIN_AGE:
            raise ValueError(f"Registration is allowed from age {MIN_AGE} only")
        return v

    @field_validator("interests")
    @classmethod
    def _known_topics(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        unknown = [t for t in v if t not in TOPICS]
        if unknown:
            raise ValueError(f"Unknown interests: {', '.join(unknown)}")
        # 순서 유지하며 중복 제거
        return list(dict.fromkeys(v))


class ProfileOut(BaseModel):
    """본인 프로필 (birthdate 포함)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    birthdate: Optional[date] = None
    instagram_url: Optional[str] = None
    about_me: Optional[str] = None
    interests: List[str] = []
    updated_at: Optional[datetime] = None


class PublicProfileOut(BaseModel):
    """타인 프로필 조회용. 생년월일 대신 나이만 노출."""

    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    instagram_url: Optional[str] = None
    about_me: Optional[str] = None
    interests: List[str] = []
    age: Optional[int] = None


class AvatarOut(BaseModel):
    avatar_url: str
