"""
Event API routes - create and list events, plus the admin views.

Endpoints:
- POST /events
- GET /events
- GET /admin/events (events with registration counts)
- GET /admin/events/{event_id}/registrations
"""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database import get_db, get_write_db
from app.models.event import Event
from app.routes.common import isoformat, parse_timestamp
from app.services import entities
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


# ── Pydantic schemas ─────────────────────────────────────────

class EventCreate(BaseModel):
    """Body for POST /events. Required fields are checked by the core."""
    college_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    event_type: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


def serialize_event(event: Event) -> dict:
    return {
        "event_id": event.event_id,
        "college_id": event.college_id,
        "title": event.title,
        "description": event.description,
        "event_type": event.event_type,
        "start_date": isoformat(event.start_date),
        "end_date": isoformat(event.end_date),
    }


@router.post("/events")
def create_event(request: EventCreate, db: Session = Depends(get_write_db)):
    event_id = entities.create_event(
        db,
        college_id=request.college_id,
        title=request.title,
        description=request.description,
        event_type=request.event_type,
        start_date=parse_timestamp("start_date", request.start_date),
        end_date=parse_timestamp("end_date", request.end_date),
    )
    log_with_context(logger, "INFO", "Event created: {}".format(request.title),
                     context={"event_id": event_id, "college_id": request.college_id})
    return {"message": "Event created", "event_id": event_id}


@router.get("/events")
def list_events(db: Session = Depends(get_db)):
    return [serialize_event(e) for e in entities.list_events(db)]


@router.get("/admin/events")
def list_events_with_counts(db: Session = Depends(get_db)):
    """Every event with its total registration count (0 when nobody registered)."""
    return entities.list_events_with_registration_counts(db)


@router.get("/admin/events/{event_id}/registrations")
def list_event_registrants(event_id: int, db: Session = Depends(get_db)):
    rows = entities.list_event_registrants(db, event_id)
    log_with_context(logger, "INFO",
        "Listed {} registrants for event {}".format(len(rows), event_id),
        context={"event_id": event_id})
    return rows
