"""
Report API routes - ranked participation views.

Endpoints:
- GET /reports/popular-events
- GET /reports/student-participation
- GET /reports/top-students
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services import reporting
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


def _participation_rows(rows):
    return [{"name": r["name"], "events_attended": r["events_attended"]} for r in rows]


@router.get("/reports/popular-events")
def popular_events(db: Session = Depends(get_db)):
    rows = reporting.popular_events(db)
    log_with_context(logger, "INFO",
        "Popular events report generated: {} events".format(len(rows)),
        extra_data={"entries": len(rows)})
    return [{"title": r["title"], "total_registrations": r["total_registrations"]} for r in rows]


@router.get("/reports/student-participation")
def student_participation(db: Session = Depends(get_db)):
    rows = reporting.student_participation(db)
    log_with_context(logger, "INFO",
        "Student participation report generated: {} students".format(len(rows)),
        extra_data={"entries": len(rows)})
    return _participation_rows(rows)


@router.get("/reports/top-students")
def top_students(db: Session = Depends(get_db)):
    rows = reporting.top_students(db)
    log_with_context(logger, "INFO",
        "Top students report generated: {} students".format(len(rows)),
        extra_data={"entries": len(rows)})
    return _participation_rows(rows)
