# Participation 모델: 모임 참여

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint

from thinklink.models.base import Base, new_id, utcnow

STATUS_JOINED = "joined"


class Participation(Base):
    """참여 테이블. (user, meetup)당 1행. join 시 생성, leave 시 삭제."""

    __tablename__ = "participations"

    id = Column(String(36), primary_key=True, default=new_id)
    meetup_id = Column(String(36), ForeignKey("meetups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=STATUS_JOINED, server_default=STATUS_JOINED)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (UniqueConstraint("user_id", "meetup_id", name="uq_participation_user_meetup"),)
