# 참여/취소 CRUD (모임 행 비관적 락으로 정원 초과 방지)
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from thinklink.errors import DomainError
from thinklink.models.meetup import Meetup
from thinklink.models.participation import STATUS_JOINED, Participation
from thinklink.models.profile import Profile
from thinklink.schemas.participation import ParticipantOut

logger = logging.getLogger(__name__)


class JoinError(DomainError):
    """참여 불가 (정원 초과 또는 이미 참여 중)."""


class LeaveError(DomainError):
    """취소 불가 (참여 기록 없음 등)."""


def _lock_meetup(db: Session, meetup_id: str) -> Optional[Meetup]:
    """FOR UPDATE로 모임 행 잠금 → 같은 모임에 대한 join/leave 직렬화 (PostgreSQL)."""
    return (
        db.query(Meetup)
        .filter(Meetup.id == meetup_id)
        .with_for_update()
        .first()
    )


def get_participation(db: Session, meetup_id: str, user_id: str) -> Optional[Participation]:
    return (
        db.query(Participation)
        .filter(
            Participation.meetup_id == meetup_id,
            Participation.user_id == user_id,
        )
        .first()
    )


def count_joined(db: Session, meetup_id: str) -> int:
    """참여 인원 (participations 행에서 매번 계산 → 별도 카운터 불일치 없음)."""
    return (
        db.query(func.count(Participation.id))
        .filter(
            Participation.meetup_id == meetup_id,
            Participation.status == STATUS_JOINED,
        )
        .scalar()
        or 0
    )


def join_meetup(db: Session, meetup_id: str, user_id: str) -> int:
    """
    모임 참여.

    1. 모임 행 잠금 (없으면 404)
    2. 이미 참여 중이면 거절
    3. 현재 인원 >= capacity면 거절
    4. participation 삽입

    잠금 안에서 count → insert 하므로 동시 join도 정원을 넘지 못함.
    반환: 갱신된 참여 인원

    ⚠️ 이 함수는 commit/rollback 하지 않음. 호출자(라우터)가 트랜잭션을 제어.
    """
    meetup = _lock_meetup(db, meetup_id)
    if meetup is None:
        raise JoinError("Meetup not found", 404)

    if get_participation(db, meetup_id, user_id) is not None:
        raise JoinError("Already joined this meetup", 400)

    current_count = count_joined(db, meetup_id)
    if current_count >= meetup.capacity:
        logger.info("Join rejected (full): meetup=%s user=%s capacity=%s", meetup_id, user_id, meetup.capacity)
        raise JoinError("Meetup is full", 400)

    try:
        db.add(Participation(meetup_id=meetup_id, user_id=user_id, status=STATUS_JOINED))
        db.flush()
    except IntegrityError:
        # 동시에 같은 user가 join하면 UniqueConstraint 위반 가능
        # rollback은 호출자(라우터)에서 수행
        raise JoinError("Already joined this meetup", 400)

    return current_count + 1


def leave_meetup(db: Session, meetup_id: str, user_id: str) -> int:
    """
    모임 참여 취소. 해당 사용자의 participation 1행만 삭제.

    반환: 갱신된 참여 인원

    ⚠️ 이 함수는 commit/rollback 하지 않음. 호출자(라우터)가 트랜잭션을 제어.
    """
    meetup = _lock_meetup(db, meetup_id)
    if meetup is None:
        raise LeaveError("Meetup not found", 404)

    participation = get_participation(db, meetup_id, user_id)
    if participation is None:
        raise LeaveError("Not joined this meetup", 400)

    db.delete(participation)
    db.flush()

    return count_joined(db, meetup_id)


def list_participants(db: Session, meetup_id: str) -> List[ParticipantOut]:
    """참여자 목록 (프로필 이름/아바타 포함), 참여 순."""
    rows = (
        db.query(Participation, Profile.full_name, Profile.avatar_url)
        .outerjoin(Profile, Profile.id == Participation.user_id)
        .filter(
            Participation.meetup_id == meetup_id,
            Participation.status == STATUS_JOINED,
        )
        .order_by(Participation.joined_at.asc())
        .all()
    )
    return [
        ParticipantOut(
            user_id=p.user_id,
            status=p.status,
            joined_at=p.joined_at,
            full_name=full_name,
            avatar_url=avatar_url,
        )
        for p, full_name, avatar_url in rows
    ]
