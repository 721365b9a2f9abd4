# 모임 채팅 메시지 CRUD (호스트/참여자 전용)

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from thinklink.crud.participation_crud import get_participation
from thinklink.errors import DomainError
from thinklink.models.meetup import Meetup
from thinklink.models.message import Message
from thinklink.models.profile import Profile
from thinklink.schemas.message import MessageOut


class MessageAccessError(DomainError):
    """메시지 접근 불가 (모임 없음 404 / 호스트·참여자 아님 403)."""


def ensure_member(db: Session, meetup_id: str, user_id: str) -> Meetup:
    """호스트 또는 참여자인지 확인. 아니면 MessageAccessError."""
    meetup = db.query(Meetup).filter(Meetup.id == meetup_id).first()
    if meetup is None:
        raise MessageAccessError("Meetup not found", 404)
    if meetup.host_id != user_id and get_participation(db, meetup_id, user_id) is None:
        raise MessageAccessError("Access denied", 403)
    return meetup


def _to_out(message: Message, profile: Optional[Profile]) -> MessageOut:
    return MessageOut(
        id=message.id,
        meetup_id=message.meetup_id,
        user_id=message.user_id,
        text=message.text,
        created_at=message.created_at,
        user_name=profile.full_name if profile else None,
        user_avatar_url=profile.avatar_url if profile else None,
    )


def list_messages(db: Session, meetup_id: str, after: Optional[datetime] = None) -> List[MessageOut]:
    """
    메시지 목록 (오래된 순). after가 있으면 그 이후 메시지만 (폴링용 커서).
    """
    q = (
        db.query(Message, Profile)
        .outerjoin(Profile, Profile.id == Message.user_id)
        .filter(Message.meetup_id == meetup_id)
    )
    if after is not None:
        q = q.filter(Message.created_at > after)
    rows = q.order_by(Message.created_at.asc()).all()
    return [_to_out(m, p) for m, p in rows]


def create_message(db: Session, meetup_id: str, user_id: str, text: str) -> MessageOut:
    """⚠️ commit 하지 않음."""
    message = Message(meetup_id=meetup_id, user_id=user_id, text=text)
    db.add(message)
    db.flush()
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    return _to_out(message, profile)
