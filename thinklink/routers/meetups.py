# 모임 생성/조회/참여/채팅 API
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from thinklink.config import MAX_PAGE_LIMIT
from thinklink.crud.meetup_crud import (
    DEFAULT_PAGE_LIMIT,
    create_meetup,
    get_future_meetups,
    get_meetup,
    get_meetup_with_host,
    joined_counts,
)
from thinklink.crud.message_crud import (
    MessageAccessError,
    create_message,
    ensure_member,
    list_messages,
)
from thinklink.crud.participation_crud import (
    JoinError,
    LeaveError,
    count_joined,
    join_meetup,
    leave_meetup,
    list_participants,
)
from thinklink.database import get_db
from thinklink.dependencies import require_complete_profile
from thinklink.models.meetup import Meetup
from thinklink.models.user import User
from thinklink.schemas.meetup import (
    FutureMeetupOut,
    HostOut,
    MeetupCreate,
    MeetupDetailOut,
    MeetupOut,
)
from thinklink.schemas.message import MessageCreate, MessageOut
from thinklink.schemas.participation import (
    JoinLeaveResult,
    ParticipantOut,
    ParticipationCountOut,
)
from thinklink.services.calendar_export import meetup_to_ics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/meetups", tags=["Meetups"])


def meetup_to_out(meetup: Meetup, joined_count: int = 0) -> MeetupOut:
    out = MeetupOut.model_validate(meetup)
    out.joined_count = joined_count
    return out


def _get_meetup_or_404(db: Session, meetup_id: str) -> Meetup:
    meetup = get_meetup(db, meetup_id)
    if meetup is None:
        raise HTTPException(status_code=404, detail="Meetup not found")
    return meetup


@router.get("", response_model=List[FutureMeetupOut])
def list_future_meetups(
    topic: Optional[str] = Query(None, description="없거나 빈 문자열이면 전체 토픽"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    host_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> List[FutureMeetupOut]:
    """앞으로 열릴 모임 (현지 시각 기준), 시작 시각 오름차순 페이지네이션. 비로그인 조회 가능."""
    rows = get_future_meetups(db, topic=topic or None, limit=limit, offset=offset, host_id=host_id)
    counts = joined_counts(db, [m.id for m, _, _ in rows])
    return [
        FutureMeetupOut(
            **meetup_to_out(m, counts.get(m.id, 0)).model_dump(),
            host_name=host_name,
            host_avatar_url=host_avatar_url,
        )
        for m, host_name, host_avatar_url in rows
    ]


@router.post("", response_model=MeetupOut, status_code=201)
def post_meetup(
    body: MeetupCreate,
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> MeetupOut:
    """모임 생성. 호스트 = 세션 사용자."""
    try:
        meetup = create_meetup(db, user.id, body)
        db.commit()
        db.refresh(meetup)
    except Exception:
        db.rollback()
        logger.exception("Failed to create meetup: host=%s", user.id)
        raise HTTPException(status_code=500, detail="Failed to create meetup")
    logger.info("Meetup created: meetup=%s host=%s topic=%s", meetup.id, user.id, meetup.topic)
    return meetup_to_out(meetup)


@router.get("/{meetup_id}", response_model=MeetupDetailOut)
def get_meetup_detail(meetup_id: str, db: Session = Depends(get_db)) -> MeetupDetailOut:
    """모임 상세 (호스트 프로필 + 참여 인원). 없으면 404."""
    found = get_meetup_with_host(db, meetup_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Meetup not found")
    meetup, host_profile = found
    host = HostOut(
        id=meetup.host_id,
        full_name=host_profile.full_name if host_profile else None,
        avatar_url=host_profile.avatar_url if host_profile else None,
    )
    return MeetupDetailOut(
        **meetup_to_out(meetup, count_joined(db, meetup_id)).model_dump(),
        host=host,
    )


@router.get("/{meetup_id}/calendar.ics")
def get_meetup_calendar(meetup_id: str, db: Session = Depends(get_db)) -> Response:
    """캘린더에 추가용 .ics 파일."""
    meetup = _get_meetup_or_404(db, meetup_id)
    return Response(
        content=meetup_to_ics(meetup),
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="thinklink-{meetup.id}.ics"'},
    )


@router.post("/{meetup_id}/join", response_model=JoinLeaveResult, status_code=201)
def post_join(
    meetup_id: str,
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> JoinLeaveResult:
    """모임 참여. 이미 참여 중/정원 초과 시 400. 예외 시 rollback."""
    try:
        joined_count = join_meetup(db, meetup_id, user.id)
        db.commit()  # ✅ 트랜잭션 소유권: 라우터
    except JoinError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        db.rollback()
        logger.exception("Failed to join meetup: meetup=%s user=%s", meetup_id, user.id)
        raise HTTPException(status_code=500, detail="Failed to join meetup")

    logger.info("Joined meetup: meetup=%s user=%s count=%s", meetup_id, user.id, joined_count)
    return JoinLeaveResult(message="joined", joined_count=joined_count)


@router.delete("/{meetup_id}/leave", response_model=JoinLeaveResult)
def delete_leave(
    meetup_id: str,
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> JoinLeaveResult:
    """모임 참여 취소. 참여 기록 없으면 400. 예외 시 rollback."""
    try:
        joined_count = leave_meetup(db, meetup_id, user.id)
        db.commit()  # ✅ 트랜잭션 소유권: 라우터
    except LeaveError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        db.rollback()
        logger.exception("Failed to leave meetup: meetup=%s user=%s", meetup_id, user.id)
        raise HTTPException(status_code=500, detail="Failed to leave meetup")

    logger.info("Left meetup: meetup=%s user=%s count=%s", meetup_id, user.id, joined_count)
    return JoinLeaveResult(message="left", joined_count=joined_count)


@router.get("/{meetup_id}/participants", response_model=List[ParticipantOut])
def get_participants(
    meetup_id: str,
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> List[ParticipantOut]:
    _get_meetup_or_404(db, meetup_id)
    return list_participants(db, meetup_id)


@router.get("/{meetup_id}/participation-count", response_model=ParticipationCountOut)
def get_participation_count(meetup_id: str, db: Session = Depends(get_db)) -> ParticipationCountOut:
    _get_meetup_or_404(db, meetup_id)
    return ParticipationCountOut(count=count_joined(db, meetup_id))


@router.get("/{meetup_id}/messages", response_model=List[MessageOut])
def get_messages(
    meetup_id: str,
    after: Optional[datetime] = Query(None, description="이 시각 이후 메시지만 (폴링 커서, 오프셋 없으면 UTC)"),
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> List[MessageOut]:
    """채팅 메시지 (호스트/참여자만). 클라이언트는 일정 간격으로 폴링."""
    try:
        ensure_member(db, meetup_id, user.id)
    except MessageAccessError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if after is not None:
        after = after.replace(tzinfo=timezone.utc) if after.tzinfo is None else after.astimezone(timezone.utc)
    return list_messages(db, meetup_id, after=after)


@router.post("/{meetup_id}/messages", response_model=MessageOut, status_code=201)
def post_message(
    meetup_id: str,
    body: MessageCreate,
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> MessageOut:
    try:
        ensure_member(db, meetup_id, user.id)
        message = create_message(db, meetup_id, user.id, body.text)
        db.commit()
    except MessageAccessError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        db.rollback()
        logger.exception("Failed to create message: meetup=%s user=%s", meetup_id, user.id)
        raise HTTPException(status_code=500, detail="Failed to send message")
    return message
