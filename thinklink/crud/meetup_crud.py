# 모임 생성/조회 CRUD

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from thinklink.models.meetup import Meetup
from thinklink.models.participation import STATUS_JOINED, Participation
from thinklink.models.profile import Profile
from thinklink.schemas.meetup import MeetupCreate
from thinklink.services.civil_time import civil_now

DEFAULT_PAGE_LIMIT = 20

FutureMeetupRow = Tuple[Meetup, Optional[str], Optional[str]]


def create_meetup(db: Session, host_id: str, body: MeetupCreate) -> Meetup:
    """모임 생성. start_at은 스키마에서 현지 벽시계 시각으로 정규화됨. ⚠️ commit 하지 않음."""
    meetup = Meetup(host_id=host_id, **body.model_dump())
    db.add(meetup)
    db.flush()
    db.refresh(meetup)
    return meetup


def get_meetup(db: Session, meetup_id: str) -> Optional[Meetup]:
    return db.query(Meetup).filter(Meetup.id == meetup_id).first()


def get_meetup_with_host(db: Session, meetup_id: str) -> Optional[Tuple[Meetup, Optional[Profile]]]:
    """(모임, 호스트 프로필) 또는 None. 호스트가 프로필 미완성이면 프로필은 None."""
    row = (
        db.query(Meetup, Profile)
        .outerjoin(Profile, Profile.id == Meetup.host_id)
        .filter(Meetup.id == meetup_id)
        .first()
    )
    if row is None:
        return None
    return row[0], row[1]


def get_future_meetups(
    db: Session,
    topic: Optional[str] = None,
    limit: int = DEFAULT_PAGE_LIMIT,
    offset: int = 0,
    host_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[FutureMeetupRow]:
    """
    앞으로 열릴 모임 목록 (단일 SELECT + 호스트 프로필 LEFT JOIN).

    - "지금"은 시민 타임존 벽시계 시각 (클라이언트 시계와 무관)
    - start_at > now 인 모임만, start_at 오름차순 (동률은 id로 고정 → 페이지 간 중복/누락 없음)
    - topic=None이면 전체, 모르는 topic이면 빈 결과 (에러 아님)
    - host_id가 주어지면 해당 호스트 모임만 ("내 모임" 화면)

    반환: (meetup, host_name, host_avatar_url) 목록
    """
    if now is None:
        now = civil_now()

    q = (
        db.query(Meetup, Profile.full_name.label("host_name"), Profile.avatar_url.label("host_avatar_url"))
        .outerjoin(Profile, Profile.id == Meetup.host_id)
        .filter(Meetup.start_at > now)
    )
    if topic is not None:
        q = q.filter(Meetup.topic == topic)
    if host_id is not None:
        q = q.filter(Meetup.host_id == host_id)

    rows = q.order_by(Meetup.start_at.asc(), Meetup.id.asc()).limit(limit).offset(offset).all()
    return [(m, host_name, host_avatar_url) for m, host_name, host_avatar_url in rows]


def get_hosted_meetups(db: Session, host_id: str) -> List[Meetup]:
    """호스트한 모든 모임 (지난 모임 포함), start_at 오름차순."""
    return (
        db.query(Meetup)
        .filter(Meetup.host_id == host_id)
        .order_by(Meetup.start_at.asc(), Meetup.id.asc())
        .all()
    )


def get_joined_meetups(db: Session, user_id: str) -> List[Meetup]:
    """참여 중인 모임, start_at 오름차순."""
    return (
        db.query(Meetup)
        .join(Participation, Participation.meetup_id == Meetup.id)
        .filter(
            Participation.user_id == user_id,
            Participation.status == STATUS_JOINED,
        )
        .order_by(Meetup.start_at.asc(), Meetup.id.asc())
        .all()
    )


def joined_counts(db: Session, meetup_ids: Iterable[str]) -> Dict[str, int]:
    """meetup_id → 참여 인원 (GROUP BY 1회). 참여자 없는 모임은 0."""
    ids = list(meetup_ids)
    if not ids:
        return {}
    rows = (
        db.query(Participation.meetup_id, func.count(Participation.id))
        .filter(
            Participation.meetup_id.in_(ids),
            Participation.status == STATUS_JOINED,
        )
        .group_by(Participation.meetup_id)
        .all()
    )
    counts = {meetup_id: 0 for meetup_id in ids}
    counts.update({meetup_id: count for meetup_id, count in rows})
    return counts
