"""
Attendance Tracker - turns a registration into an attendance record.

Two entry points:
- record_attendance: plain insert. A second insert for the same
  registration is rejected with ConflictError.
- mark_attendance: upsert keyed by registration_id. Creates the row on the
  first call and overwrites `attended` / `checkin_time` on later calls, so
  repeated calls leave exactly one row.

The lookup and the insert-or-update happen in one write transaction. If a
concurrent writer still wins the insert (possible on PostgreSQL, where the
unique constraint is the guard), the upsert retries once and takes the
update path.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.errors import ConflictError
from app.models.attendance import Attendance
from app.models.registration import Registration
from app.services.constraints import (
    ATTENDANCE_REGISTRATION, atomic, ensure_exists, ensure_unique, require,
)

UPSERT_ATTEMPTS = 2


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (stored the same way for SQLite)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def record_attendance(db: Session, registration_id: Optional[int], attended: Optional[bool] = False,
                      checkin_time: Optional[datetime] = None) -> int:
    require(registration_id=registration_id)

    row = Attendance(
        registration_id=registration_id,
        attended=bool(attended),
        checkin_time=checkin_time,
    )
    with atomic(db, "record_attendance", constraint=ATTENDANCE_REGISTRATION):
        ensure_exists(db, Registration, "registration_id", registration_id)
        ensure_unique(db, Attendance, ATTENDANCE_REGISTRATION, registration_id=registration_id)
        db.add(row)
        db.flush()
        attendance_id = row.attendance_id
    return attendance_id


def _upsert(db: Session, registration_id: int, attended: bool) -> None:
    now = utcnow()
    with atomic(db, "mark_attendance", constraint=ATTENDANCE_REGISTRATION):
        ensure_exists(db, Registration, "registration_id", registration_id)
        row = db.query(Attendance).filter(
            Attendance.registration_id == registration_id
        ).first()
        if row is None:
            db.add(Attendance(registration_id=registration_id, attended=attended, checkin_time=now))
        else:
            row.attended = attended
            row.checkin_time = now
        db.flush()


def mark_attendance(db: Session, registration_id: Optional[int], attended: Optional[bool]) -> int:
    """
    Set the attendance flag for a registration, creating the row if needed.

    `checkin_time` is always set to the current server time. Returns the
    registration id.
    """
    require(registration_id=registration_id, attended=attended)

    for attempt in range(1, UPSERT_ATTEMPTS + 1):
        try:
            _upsert(db, registration_id, bool(attended))
            return registration_id
        except ConflictError:
            # Lost the insert race; the row exists now, so retry as update
            if attempt == UPSERT_ATTEMPTS:
                raise
