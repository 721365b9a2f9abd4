"""
인증/프로필 게이트 의존성.
"""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from thinklink.config import SESSION_COOKIE_NAME
from thinklink.crud.profile_crud import get_profile, is_profile_complete
from thinklink.crud.user_crud import get_user
from thinklink.database import get_db
from thinklink.models.user import User
from thinklink.services.sessions import SessionStore, get_session_store


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> User:
    """세션 쿠키 → 사용자. 쿠키 없음/만료/사용자 삭제 시 401."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")
    user_id = await store.get(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    # DB 조회는 스레드풀에서 (이벤트 루프 블로킹 방지)
    user = await run_in_threadpool(get_user, db, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


def require_complete_profile(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    프로필 완성 게이트. full_name이 없는 사용자는 403 → 클라이언트는 프로필 완성 화면으로 이동.
    프로필 수정/아바타 업로드/내 정보 조회/로그아웃에는 적용하지 않음.
    """
    if not is_profile_complete(get_profile(db, user.id)):
        raise HTTPException(status_code=403, detail="Profile completion required")
    return user
