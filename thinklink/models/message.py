# Message 모델: 모임 내 채팅 메시지

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from thinklink.models.base import Base, new_id, utcnow


class Message(Base):
    """메시지 테이블. 호스트/참여자만 읽기·쓰기."""

    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=new_id)
    meetup_id = Column(String(36), ForeignKey("meetups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    # 폴링(after 커서) 정렬 기준 → 마이크로초 정밀도 유지
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
