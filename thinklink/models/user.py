# User 모델: 인증 식별자 (이메일 + 비밀번호 해시)

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from thinklink.models.base import Base, new_id


class User(Base):
    """사용자(인증) 테이블. 표시 정보는 profiles에 분리."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)  # 소문자로 정규화해서 저장
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
