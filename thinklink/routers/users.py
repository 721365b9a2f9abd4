# 내 정보/프로필/내 모임 API
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from thinklink.config import AVATAR_MAX_BYTES
from thinklink.crud.meetup_crud import (
    get_future_meetups,
    get_hosted_meetups,
    get_joined_meetups,
    joined_counts,
)
from thinklink.crud.profile_crud import (
    ProfileError,
    get_profile,
    is_profile_complete,
    set_avatar_url,
    upsert_profile,
)
from thinklink.database import get_db
from thinklink.dependencies import get_current_user, require_complete_profile
from thinklink.integrations.avatar_storage import (
    ALLOWED_CONTENT_TYPES,
    AvatarStorage,
    StorageError,
    avatar_path,
    get_avatar_storage,
)
from thinklink.models.user import User
from thinklink.routers.meetups import meetup_to_out
from thinklink.schemas.auth import CurrentUserOut
from thinklink.schemas.meetup import MeetupOut
from thinklink.schemas.profile import (
    AvatarOut,
    ProfileOut,
    ProfileUpdate,
    PublicProfileOut,
    age_on,
)
from thinklink.services.civil_time import civil_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])

# "내 모임" 화면의 다가오는 호스트 모임 상한
UPCOMING_HOSTED_LIMIT = 1000


@router.get("/user", response_model=CurrentUserOut)
def get_me(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> CurrentUserOut:
    """현재 사용자 + 프로필 완성 여부 (게이트 판단용)."""
    profile = get_profile(db, user.id)
    return CurrentUserOut(
        id=user.id,
        email=user.email,
        profile=ProfileOut.model_validate(profile) if profile else None,
        profile_complete=is_profile_complete(profile),
    )


@router.put("/user/profile", response_model=ProfileOut)
def put_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileOut:
    """프로필 완성/수정 (본인만). 보낸 필드만 반영."""
    try:
        profile = upsert_profile(db, user.id, body)
        db.commit()
        db.refresh(profile)
    except ProfileError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)
    logger.info("Profile saved: user=%s fields=%s", user.id, sorted(body.model_fields_set))
    return ProfileOut.model_validate(profile)


@router.post("/user/avatar", response_model=AvatarOut, status_code=201)
async def post_avatar(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: AvatarStorage = Depends(get_avatar_storage),
) -> AvatarOut:
    """아바타 업로드 ({user_id}/ 하위 경로). 프로필이 있으면 avatar_url도 갱신."""
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Unsupported image type")
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(data) > AVATAR_MAX_BYTES:
        raise HTTPException(status_code=400, detail="Image is too large")

    path = avatar_path(user.id, content_type)
    try:
        avatar_url = await storage.upload(path, data, content_type)
    except StorageError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    set_avatar_url(db, user.id, avatar_url)
    db.commit()
    logger.info("Avatar uploaded: user=%s path=%s", user.id, path)
    return AvatarOut(avatar_url=avatar_url)


@router.get("/user/joined-meetups", response_model=List[MeetupOut])
def get_my_joined_meetups(
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> List[MeetupOut]:
    meetups = get_joined_meetups(db, user.id)
    counts = joined_counts(db, [m.id for m in meetups])
    return [meetup_to_out(m, counts.get(m.id, 0)) for m in meetups]


@router.get("/user/hosted-meetups", response_model=List[MeetupOut])
def get_my_hosted_meetups(
    upcoming: bool = Query(False, description="true면 앞으로 열릴 모임만"),
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> List[MeetupOut]:
    if upcoming:
        rows = get_future_meetups(db, limit=UPCOMING_HOSTED_LIMIT, host_id=user.id)
        meetups = [m for m, _, _ in rows]
    else:
        meetups = get_hosted_meetups(db, user.id)
    counts = joined_counts(db, [m.id for m in meetups])
    return [meetup_to_out(m, counts.get(m.id, 0)) for m in meetups]


@router.get("/profiles/{user_id}", response_model=PublicProfileOut)
def get_public_profile(user_id: str, db: Session = Depends(get_db)) -> PublicProfileOut:
    """다른 사용자 프로필 (생년월일 대신 나이)."""
    profile = get_profile(db, user_id)
    if not is_profile_complete(profile):
        raise HTTPException(status_code=404, detail="Profile not found")
    return PublicProfileOut(
        id=profile.id,
        full_name=profile.full_name,
        avatar_url=profile.avatar_url,
        instagram_url=profile.instagram_url,
        about_me=profile.about_me,
        interests=profile.interests or [],
        age=age_on(profile.birthdate, civil_today()) if profile.birthdate else None,
    )
