"""
Event model - a campus event students can register for.

Events are created once and never mutated or deleted. The start and end
timestamps are optional; reporting only needs the title and type.
"""

from sqlalchemy import Column, Integer, Text, DateTime, Index
from sqlalchemy.orm import relationship
from app.database import Base


class Event(Base):
    """
    SQLAlchemy model for the events table.

    One event has many registrations. `college_id` is required and indexed
    for per-college listings.
    """
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True, autoincrement=True,
                      doc="Unique event identifier, assigned by the store")
    college_id = Column(Integer, nullable=False,
                        doc="Owning college")
    title = Column(Text, nullable=False,
                   doc="Event title")
    description = Column(Text, nullable=True)
    event_type = Column(Text, nullable=True,
                        doc="Free-form category, e.g. Workshop, Hackathon, Seminar")
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)

    registrations = relationship("Registration", back_populates="event")

    __table_args__ = (
        Index("ix_events_college_id", "college_id"),
    )

    def __repr__(self):
        return f"<Event(id={self.event_id}, title='{self.title}', college={self.college_id})>"
