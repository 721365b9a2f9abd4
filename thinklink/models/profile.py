# Profile 모델: 사용자 표시 정보 (id = users.id)

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from thinklink.models.base import Base


class Profile(Base):
    """프로필 테이블. 최초 프로필 완성 제출 시 생성, 본인만 수정. full_name 없으면 미완성."""

    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String(100), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    birthdate = Column(Date, nullable=True)
    instagram_url = Column(String(300), nullable=True)
    about_me = Column(Text, nullable=True)
    interests = Column(JSON, nullable=False, default=list)  # 토픽 문자열 목록
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
