# 회원가입/로그인 요청·응답 스키마

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from thinklink.schemas.profile import ProfileOut


class Credentials(BaseModel):
    """로그인 요청. 이메일은 소문자로 정규화."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        local, sep, domain = v.partition("@")
        if not sep or not local or "." not in domain:
            raise ValueError("Invalid email address")
        return v.lower()


class RegisterBody(Credentials):
    """회원가입 요청. 비밀번호 최소 6자."""

    password: str = Field(..., min_length=6, max_length=128)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str


class CurrentUserOut(BaseModel):
    """GET /api/user 응답. profile_complete=false면 클라이언트는 프로필 완성 화면으로 이동."""

    id: str
    email: str
    profile: Optional[ProfileOut] = None
    profile_complete: bool
