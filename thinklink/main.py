import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from thinklink.config import (
    AVATAR_STORAGE_URL,
    CORS_ORIGINS,
    LOG_LEVEL,
    MEDIA_ROOT,
    MEDIA_URL,
    MIGRATE_ON_STARTUP,
)
from thinklink.database import get_db
from thinklink.errors import register_exception_handlers
from thinklink.logging_setup import setup_logging
from thinklink.models import feedback, message, meetup, participation, profile, user  # noqa: F401  테이블 메타데이터 등록용
from thinklink.routers.auth import router as auth_router
from thinklink.routers.feedback import router as feedback_router
from thinklink.routers.meetups import router as meetups_router
from thinklink.routers.users import router as users_router

setup_logging(LOG_LEVEL)
logger = logging.getLogger("thinklink")


def _run_alembic_upgrade() -> None:
    """앱 기동 시 DB 마이그레이션 자동 적용."""
    from alembic import command
    from alembic.config import Config

    root = Path(__file__).resolve().parent.parent
    cfg = Config(str(root / "alembic.ini"))
    cfg.attributes["configure_logger"] = False  # 앱 로깅 설정 유지
    command.upgrade(cfg, "head")


app = FastAPI(
    title="ThinkLink API",
    description="주제별 소규모 모임 플랫폼 ThinkLink의 백엔드 API",
    version="0.1.0",
)


@app.on_event("startup")
def _startup_migrate() -> None:
    """기동 시 Alembic upgrade head 실행. 실패해도 앱은 기동 (예: 로컬에서 DB 없이 실행 시)."""
    if not MIGRATE_ON_STARTUP:
        return
    try:
        _run_alembic_upgrade()
    except Exception:
        logger.warning("Alembic upgrade failed on startup", exc_info=True)


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(meetups_router)
app.include_router(feedback_router)

register_exception_handlers(app)

# CORS 설정 (세션 쿠키 사용 → origin 명시 필요)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 로컬 아바타 저장소 사용 시 업로드 파일 서빙
if not AVATAR_STORAGE_URL:
    Path(MEDIA_ROOT).mkdir(parents=True, exist_ok=True)
    app.mount(MEDIA_URL, StaticFiles(directory=MEDIA_ROOT), name="media")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
    except Exception:
        # 트레이스백은 unhandled_exception_handler에서 한 번만 기록
        duration_ms = round((time.time() - start) * 1000, 2)
        logger.error("HTTP %s %s -> unhandled error in %sms", request.method, request.url.path, duration_ms)
        raise
    duration_ms = round((time.time() - start) * 1000, 2)
    if response.status_code >= 500:
        level = logging.ERROR
    elif response.status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(level, "HTTP %s %s -> %s in %sms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.get("/api/health", tags=["Health"])
def health_check(db: Session = Depends(get_db)):
    """DB 연결 확인. 실패 시 503."""
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        current_time = db.execute(select(func.now())).scalar()
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "timestamp": timestamp,
                "database": {"connected": False, "error": str(e)},
            },
        )
    return {
        "status": "healthy",
        "timestamp": timestamp,
        "database": {
            "connected": True,
            "current_time": current_time.isoformat() if isinstance(current_time, datetime) else str(current_time),
        },
    }


@app.get("/", tags=["Root"])
async def root() -> dict:
    return {
        "message": "ThinkLink API",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("thinklink.main:app", host="0.0.0.0", port=8000, reload=True)
