# 채팅 메시지 스키마

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(..., min_length=1, max_length=2000)


class MessageOut(BaseModel):
    id: str
    meetup_id: str
    user_id: str
    text: str
    created_at: datetime
    user_name: Optional[str] = None
    user_avatar_url: Optional[str] = None
