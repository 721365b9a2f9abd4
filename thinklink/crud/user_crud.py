# 사용자(인증) CRUD

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from thinklink.errors import DomainError
from thinklink.models.user import User
from thinklink.services.security import hash_password, verify_password


class AuthError(DomainError):
    """회원가입/로그인 실패."""


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(db: Session, email: str, password: str) -> User:
    """
    신규 사용자 생성. 이메일 중복 시 AuthError(400).

    ⚠️ commit 하지 않음 (flush로 id만 확정).
    """
    if get_user_by_email(db, email) is not None:
        raise AuthError("Email already registered", 400)

    user = User(email=email.lower(), password_hash=hash_password(password))
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        # 동시 가입으로 unique 위반 (rollback은 호출자)
        raise AuthError("Email already registered", 400)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """이메일/비밀번호 검증. 실패 사유는 구분하지 않음 (401)."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthError("Invalid email or password", 401)
    return user
