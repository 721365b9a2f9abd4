# 참여/취소 응답 스키마

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class JoinLeaveResult(BaseModel):
    message: str
    joined_count: int


class ParticipantOut(BaseModel):
    user_id: str
    status: str
    joined_at: datetime
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ParticipationCountOut(BaseModel):
    count: int
