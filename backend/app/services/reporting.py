"""
Reporting Engine - read-only participation aggregates.

Ranking rules:
1. Popular events: every event with its registration count (left join, so
   events nobody registered for show 0), highest count first, then lowest
   event_id.
2. Student participation: students with at least one attended check-in,
   counted over attendance rows with attended = true (inner join, so
   students who never attended are left out), highest count first, then
   lowest student_id.
3. Top students: the first TOP_STUDENTS_LIMIT rows of (2).
"""

from typing import List, Optional

from sqlalchemy import func, true
from sqlalchemy.orm import Session

from app.database import store_read
from app.models.attendance import Attendance
from app.models.event import Event
from app.models.registration import Registration
from app.models.student import Student

TOP_STUDENTS_LIMIT = 3


def popular_events(db: Session) -> List[dict]:
    total = func.count(Registration.registration_id).label("total_registrations")
    with store_read("popular_events"):
        rows = db.query(
            Event.event_id, Event.title, total
        ).outerjoin(
            Registration, Registration.event_id == Event.event_id
        ).group_by(
            Event.event_id, Event.title
        ).order_by(
            total.desc(), Event.event_id.asc()
        ).all()
    return [row._asdict() for row in rows]


def student_participation(db: Session, limit: Optional[int] = None) -> List[dict]:
    attended = func.count(Attendance.attendance_id).label("events_attended")
    with store_read("student_participation"):
        query = db.query(
            Student.student_id, Student.name, attended
        ).join(
            Registration, Registration.student_id == Student.student_id
        ).join(
            Attendance, Attendance.registration_id == Registration.registration_id
        ).filter(
            Attendance.attended == true()
        ).group_by(
            Student.student_id, Student.name
        ).order_by(
            attended.desc(), Student.student_id.asc()
        )
        if limit is not None:
            query = query.limit(limit)
        rows = query.all()
    return [row._asdict() for row in rows]


def top_students(db: Session) -> List[dict]:
    """Most active students, a prefix of the participation ranking."""
    return student_participation(db, limit=TOP_STUDENTS_LIMIT)
