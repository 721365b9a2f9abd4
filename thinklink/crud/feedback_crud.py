# 앱 피드백 CRUD

from sqlalchemy.orm import Session

from thinklink.models.feedback import AppFeedback
from thinklink.schemas.feedback import FeedbackCreate


def create_feedback(db: Session, user_id: str, body: FeedbackCreate) -> AppFeedback:
    """⚠️ commit 하지 않음."""
    feedback = AppFeedback(user_id=user_id, **body.model_dump())
    db.add(feedback)
    db.flush()
    db.refresh(feedback)
    return feedback
