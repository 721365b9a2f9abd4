# 회원가입/로그인/로그아웃 API (세션 쿠키)
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from thinklink.config import SESSION_COOKIE_NAME, SESSION_TTL_SEC, is_development
from thinklink.crud.user_crud import AuthError, authenticate, create_user
from thinklink.database import get_db
from thinklink.schemas.auth import Credentials, RegisterBody, UserOut
from thinklink.services.sessions import SessionStore, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


def _register_user(db: Session, email: str, password: str) -> UserOut:
    """가입 트랜잭션 (해시 계산 + INSERT). 스레드풀에서 실행."""
    try:
        user = create_user(db, email, password)
        db.commit()
    except AuthError:
        db.rollback()
        raise
    return UserOut.model_validate(user)


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_TTL_SEC,
        httponly=True,
        samesite="lax",
        secure=not is_development(),
    )


@router.post("/register", response_model=UserOut, status_code=201)
async def register(
    body: RegisterBody,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> UserOut:
    """회원가입 후 바로 로그인 상태. 프로필은 이후 프로필 완성 단계에서 생성."""
    try:
        user = await run_in_threadpool(_register_user, db, body.email, body.password)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    token = await store.create(user.id)
    _set_session_cookie(response, token)
    logger.info("User registered: user=%s", user.id)
    return user


@router.post("/login", response_model=UserOut)
async def login(
    body: Credentials,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> UserOut:
    try:
        # 비밀번호 검증(PBKDF2)은 CPU 작업 → 스레드풀
        user = await run_in_threadpool(authenticate, db, body.email, body.password)
    except AuthError as e:
        logger.info("Login failed: email=%s", body.email)
        raise HTTPException(status_code=e.status_code, detail=e.message)

    token = await store.create(user.id)
    _set_session_cookie(response, token)
    logger.info("User logged in: user=%s", user.id)
    return UserOut.model_validate(user)


@router.post("/logout", status_code=204)
async def logout(request: Request, store: SessionStore = Depends(get_session_store)) -> Response:
    """세션 삭제 + 쿠키 제거. 세션이 없어도 204."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        await store.delete(token)
    response = Response(status_code=204)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response
