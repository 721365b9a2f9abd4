import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    모든 SQLAlchemy 모델이 상속할 기본 Base 클래스

    PK는 인증 식별자와 동일한 UUID 문자열(36자)을 사용.
    """

    pass


def new_id() -> str:
    """신규 행 PK (UUID4 문자열)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """앱 측 기본 시각. 정렬에 쓰이는 컬럼은 DB 초 단위 정밀도 대신 이 값을 사용."""
    return datetime.now(timezone.utc)
