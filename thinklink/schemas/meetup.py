# 모임 API 요청/응답 스키마

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from thinklink.models.meetup import TOPICS
from thinklink.services.civil_time import to_civil_naive

MIN_CAPACITY = 2
MAX_CAPACITY = 15


class MeetupCreate(BaseModel):
    """모임 생성 요청. host_id는 세션 사용자로 채움."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=100)
    topic: str
    description: str = Field(..., min_length=1, max_length=2000)
    start_at: datetime  # 현지 벽시계 시각. 오프셋이 붙어 오면 현지 시각으로 변환
    location: str = Field(..., min_length=1, max_length=300)
    place_name: Optional[str] = Field(default=None, max_length=200)
    custom_location_details: Optional[str] = Field(default=None, max_length=1000)
    capacity: int = Field(..., ge=MIN_CAPACITY, le=MAX_CAPACITY)
    icebreaker: Optional[str] = Field(default=None, max_length=500)

    @field_validator("topic")
    @classmethod
    def _known_topic(cls, v: str) -> str:
        if v not in TOPICS:
            raise ValueError("Unknown topic")
        return v

    @field_validator("start_at")
    @classmethod
    def _civil_start(cls, v: datetime) -> datetime:
        return to_civil_naive(v)


class MeetupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    host_id: str
    title: str
    topic: str
    description: str
    start_at: datetime
    location: str
    place_name: Optional[str] = None
    custom_location_details: Optional[str] = None
    capacity: int
    icebreaker: Optional[str] = None
    created_at: Optional[datetime] = None
    joined_count: int = 0


class FutureMeetupOut(MeetupOut):
    """GET /api/meetups 목록 항목 (호스트 이름/아바타 포함)."""

    host_name: Optional[str] = None
    host_avatar_url: Optional[str] = None


class HostOut(BaseModel):
    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class MeetupDetailOut(MeetupOut):
    """GET /api/meetups/{id} 상세 응답."""

    host: HostOut
