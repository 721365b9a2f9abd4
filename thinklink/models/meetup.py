# Meetup 모델: 토픽 기반 소규모 모임

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.sql import func

from thinklink.models.base import Base, new_id

# 모임/관심사 토픽 (클라이언트 선택지와 동일)
TOPICS = (
    "טכנולוגיה",
    "תרבות",
    "פילוסופיה",
    "פסיכולוגיה",
    "ספורט",
    "מוזיקה",
    "פיננסים",
    "אחר",
)


class Meetup(Base):
    """
    모임 테이블.

    start_at은 타임존 없는 현지 벽시계 시각 (CIVIL_TIMEZONE 기준).
    생성 후 수정 API 없음.
    """

    __tablename__ = "meetups"

    id = Column(String(36), primary_key=True, default=new_id)
    host_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    topic = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=False)
    start_at = Column(DateTime(timezone=False), nullable=False, index=True)
    location = Column(String(300), nullable=False)
    place_name = Column(String(200), nullable=True)
    custom_location_details = Column(Text, nullable=True)
    capacity = Column(Integer, nullable=False)  # 최대 참여 인원 (호스트 제외)
    icebreaker = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_meetups_topic_start_at", "topic", "start_at"),)
