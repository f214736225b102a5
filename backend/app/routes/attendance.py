"""
Attendance API routes.

Endpoints:
- POST /attendance: insert a check-in record (rejects a second one)
- POST /admin/attendance: set attended for a registration (upsert)
"""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database import get_write_db
from app.routes.common import parse_timestamp
from app.services import attendance
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


class AttendanceCreate(BaseModel):
    """Body for POST /attendance."""
    registration_id: Optional[int] = None
    attended: Optional[bool] = None
    checkin_time: Optional[str] = None


class AttendanceMark(BaseModel):
    """Body for POST /admin/attendance."""
    registration_id: Optional[int] = None
    attended: Optional[bool] = None


@router.post("/attendance")
def record_attendance(request: AttendanceCreate, db: Session = Depends(get_write_db)):
    attendance_id = attendance.record_attendance(
        db,
        registration_id=request.registration_id,
        attended=bool(request.attended),
        checkin_time=parse_timestamp("checkin_time", request.checkin_time),
    )
    log_with_context(logger, "INFO", "Attendance recorded",
                     context={"attendance_id": attendance_id, "registration_id": request.registration_id})
    return {"message": "Attendance marked", "attendance_id": attendance_id}


@router.post("/admin/attendance")
def mark_attendance(request: AttendanceMark, db: Session = Depends(get_write_db)):
    """
    Mark a registration attended (or not). Repeating the call overwrites
    the previous value and check-in time; it never adds a second row.
    """
    registration_id = attendance.mark_attendance(
        db, registration_id=request.registration_id, attended=request.attended
    )
    log_with_context(logger, "INFO", "Attendance updated",
                     context={"registration_id": registration_id},
                     extra_data={"attended": request.attended})
    return {"message": "Attendance updated", "registration_id": registration_id}
