"""
Registration and feedback API routes.

Endpoints:
- POST /register
- POST /feedback
"""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database import get_write_db
from app.services import entities
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


class RegistrationCreate(BaseModel):
    """Body for POST /register."""
    student_id: Optional[int] = None
    event_id: Optional[int] = None


class FeedbackCreate(BaseModel):
    """Body for POST /feedback."""
    registration_id: Optional[int] = None
    rating: Optional[int] = None
    comments: Optional[str] = None


@router.post("/register")
def register_student(request: RegistrationCreate, db: Session = Depends(get_write_db)):
    registration_id = entities.create_registration(
        db, student_id=request.student_id, event_id=request.event_id
    )
    log_with_context(logger, "INFO", "Student registered",
                     context={
                         "registration_id": registration_id,
                         "student_id": request.student_id,
                         "event_id": request.event_id,
                     })
    return {"message": "Student registered", "registration_id": registration_id}


@router.post("/feedback")
def submit_feedback(request: FeedbackCreate, db: Session = Depends(get_write_db)):
    feedback_id = entities.submit_feedback(
        db,
        registration_id=request.registration_id,
        rating=request.rating,
        comments=request.comments,
    )
    log_with_context(logger, "INFO", "Feedback submitted",
                     context={"feedback_id": feedback_id, "registration_id": request.registration_id},
                     extra_data={"rating": request.rating})
    return {"message": "Feedback submitted", "feedback_id": feedback_id}
