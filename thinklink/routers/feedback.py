# 앱 피드백 API
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from thinklink.crud.feedback_crud import create_feedback
from thinklink.database import get_db
from thinklink.dependencies import require_complete_profile
from thinklink.models.user import User
from thinklink.schemas.feedback import FeedbackCreate, FeedbackOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["Feedback"])


@router.post("", response_model=FeedbackOut, status_code=201)
def post_feedback(
    body: FeedbackCreate,
    user: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
) -> FeedbackOut:
    try:
        feedback = create_feedback(db, user.id, body)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to submit feedback: user=%s", user.id)
        raise HTTPException(status_code=500, detail="Failed to submit feedback")
    logger.info("Feedback received: user=%s category=%s rating=%s", user.id, feedback.category, feedback.rating)
    return FeedbackOut.model_validate(feedback)
