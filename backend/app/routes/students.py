"""
Student API routes.

Endpoints:
- POST /students
- GET /students/{student_id}/registrations
"""

from typing import Optional, Union
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database import get_db, get_write_db
from app.routes.common import isoformat
from app.services import entities
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


class StudentCreate(BaseModel):
    """Body for POST /students."""
    college_id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    year: Optional[Union[int, str]] = None
    department: Optional[str] = None


@router.post("/students")
def create_student(request: StudentCreate, db: Session = Depends(get_write_db)):
    student_id = entities.create_student(
        db,
        college_id=request.college_id,
        name=request.name,
        email=request.email,
        year=request.year,
        department=request.department,
    )
    log_with_context(logger, "INFO", "Student added: {}".format(request.name),
                     context={"student_id": student_id, "college_id": request.college_id})
    return {"message": "Student added", "student_id": student_id}


@router.get("/students/{student_id}/registrations")
def list_student_registrations(student_id: int, db: Session = Depends(get_db)):
    """Registrations of one student with event title, type and dates."""
    rows = entities.list_student_registrations(db, student_id)
    return [
        {
            **row,
            "start_date": isoformat(row["start_date"]),
            "end_date": isoformat(row["end_date"]),
        }
        for row in rows
    ]
