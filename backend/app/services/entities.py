"""
Entity Store operations - create and list events, students, registrations
and feedback.

Each function takes the session it should work in. Writes validate
required fields, resolve references and probe uniqueness inside one atomic
unit (see constraints.py) and return the new row's id. Listings return
plain dicts shaped for the API.
"""

from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import store_read
from app.models.attendance import Attendance
from app.models.event import Event
from app.models.feedback import Feedback
from app.models.registration import Registration
from app.models.student import Student
from app.services.constraints import (
    REGISTRATION_PAIR, STUDENT_EMAIL,
    atomic, ensure_exists, ensure_unique, require,
)


def normalize_email(email: str) -> str:
    """Trim and lower-case an email so case variants collide on uniqueness."""
    return email.strip().lower()


# ── Events ───────────────────────────────────────────────────

def create_event(db: Session, college_id: Optional[int], title: Optional[str],
                 description: Optional[str] = None, event_type: Optional[str] = None,
                 start_date: Optional[datetime] = None,
                 end_date: Optional[datetime] = None) -> int:
    require(college_id=college_id, title=title)

    event = Event(
        college_id=college_id,
        title=title,
        description=description,
        event_type=event_type,
        start_date=start_date,
        end_date=end_date,
    )
    with atomic(db, "create_event"):
        db.add(event)
        db.flush()
        event_id = event.event_id
    return event_id


def list_events(db: Session) -> List[Event]:
    """Every event, in id order."""
    with store_read("list_events"):
        return db.query(Event).order_by(Event.event_id).all()


def list_events_with_registration_counts(db: Session) -> List[dict]:
    """
    Every event with its registration count, zero-registration events
    included with count 0.
    """
    total = func.count(Registration.registration_id).label("total_registrations")
    with store_read("list_events_with_registration_counts"):
        rows = db.query(
            Event.event_id, Event.title, Event.event_type, total
        ).outerjoin(
            Registration, Registration.event_id == Event.event_id
        ).group_by(
            Event.event_id, Event.title, Event.event_type
        ).order_by(Event.event_id).all()
    return [row._asdict() for row in rows]


def list_event_registrants(db: Session, event_id: int) -> List[dict]:
    """
    Students registered for one event with their attendance flag.

    `attended` is None while the registration has no attendance row.
    """
    with store_read("list_event_registrants"):
        rows = db.query(
            Registration.registration_id,
            Student.name,
            Student.department,
            Student.year,
            Attendance.attended,
        ).join(
            Student, Registration.student_id == Student.student_id
        ).outerjoin(
            Attendance, Attendance.registration_id == Registration.registration_id
        ).filter(
            Registration.event_id == event_id
        ).order_by(Registration.registration_id).all()
    return [row._asdict() for row in rows]


# ── Students ─────────────────────────────────────────────────

def create_student(db: Session, college_id: Optional[int], name: Optional[str],
                   email: Optional[str], year: Optional[Union[int, str]] = None,
                   department: Optional[str] = None) -> int:
    require(college_id=college_id, name=name, email=email)
    email = normalize_email(email)

    student = Student(
        college_id=college_id,
        name=name,
        email=email,
        year=None if year is None else str(year),
        department=department,
    )
    with atomic(db, "create_student", constraint=STUDENT_EMAIL):
        ensure_unique(db, Student, STUDENT_EMAIL, email=email)
        db.add(student)
        db.flush()
        student_id = student.student_id
    return student_id


def list_student_registrations(db: Session, student_id: int) -> List[dict]:
    """Registrations of one student joined with their event details."""
    with store_read("list_student_registrations"):
        rows = db.query(
            Registration.registration_id,
            Event.title,
            Event.event_type,
            Event.start_date,
            Event.end_date,
        ).join(
            Event, Registration.event_id == Event.event_id
        ).filter(
            Registration.student_id == student_id
        ).order_by(Registration.registration_id).all()
    return [row._asdict() for row in rows]


# ── Registrations ────────────────────────────────────────────

def create_registration(db: Session, student_id: Optional[int], event_id: Optional[int]) -> int:
    require(student_id=student_id, event_id=event_id)

    registration = Registration(student_id=student_id, event_id=event_id)
    with atomic(db, "create_registration", constraint=REGISTRATION_PAIR):
        ensure_exists(db, Student, "student_id", student_id)
        ensure_exists(db, Event, "event_id", event_id)
        ensure_unique(db, Registration, REGISTRATION_PAIR,
                      student_id=student_id, event_id=event_id)
        db.add(registration)
        db.flush()
        registration_id = registration.registration_id
    return registration_id


# ── Feedback ─────────────────────────────────────────────────

def submit_feedback(db: Session, registration_id: Optional[int], rating: Optional[int],
                    comments: Optional[str] = None) -> int:
    require(registration_id=registration_id, rating=rating)

    feedback = Feedback(registration_id=registration_id, rating=rating, comments=comments)
    with atomic(db, "submit_feedback"):
        ensure_exists(db, Registration, "registration_id", registration_id)
        db.add(feedback)
        db.flush()
        feedback_id = feedback.feedback_id
    return feedback_id
