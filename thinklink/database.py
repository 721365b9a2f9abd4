from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from thinklink.config import DATABASE_URL


def _build_engine(url: str) -> Engine:
    """
    URL에 맞는 SQLAlchemy 엔진 생성

    - SQLite(테스트/로컬): 스레드 간 공유 허용 + StaticPool
      (in-memory DB가 연결마다 새로 생기지 않도록 단일 연결 재사용)
    - 그 외(PostgreSQL): 기본 커넥션 풀, pre_ping으로 끊긴 연결 감지
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=False, pool_pre_ping=True)


engine: Engine = _build_engine(DATABASE_URL)

# 세션 팩토리 생성
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI 의존성 주입(Dependency Injection)에서 사용할 DB 세션 제공 함수

    트랜잭션 소유권은 라우터에 있음 (crud 함수는 commit/rollback 하지 않음).

    Usage 예시:

    @router.get("/api/meetups")
    def list_meetups(db: Session = Depends(get_db)):
        ...
    """
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
