# AppFeedback 모델: 앱 피드백 (클라이언트 입장에서는 쓰기 전용)

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from thinklink.models.base import Base, new_id


class AppFeedback(Base):
    __tablename__ = "app_feedback"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True)  # 1~5
    category = Column(String(30), nullable=True)  # bug / improvement / general
    created_at = Column(DateTime(timezone=True), server_default=func.now())
