# 앱 피드백 스키마

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

FeedbackCategory = Literal["bug", "improvement", "general"]


class FeedbackCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(..., min_length=1, max_length=2000)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    category: Optional[FeedbackCategory] = None


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    message: str
    rating: Optional[int] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
