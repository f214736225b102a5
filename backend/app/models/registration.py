"""
Registration model - links one student to one event.

A student may register for a given event at most once. Registrations are
immutable; attendance and feedback hang off them.
"""

from sqlalchemy import Column, Integer, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base


class Registration(Base):
    """
    SQLAlchemy model for the registrations table.

    (student_id, event_id) is unique. Both references are foreign keys.
    """
    __tablename__ = "registrations"

    registration_id = Column(Integer, primary_key=True, autoincrement=True,
                             doc="Unique registration identifier")
    student_id = Column(Integer, ForeignKey("students.student_id"), nullable=False,
                        doc="Registered student")
    event_id = Column(Integer, ForeignKey("events.event_id"), nullable=False,
                      doc="Event registered for")

    student = relationship("Student", back_populates="registrations")
    event = relationship("Event", back_populates="registrations")
    attendance = relationship("Attendance", back_populates="registration", uselist=False)
    feedback = relationship("Feedback", back_populates="registration")

    __table_args__ = (
        UniqueConstraint("student_id", "event_id", name="uq_registrations_student_event"),
        Index("ix_registrations_event_id", "event_id"),
    )

    def __repr__(self):
        return f"<Registration(id={self.registration_id}, student={self.student_id}, event={self.event_id})>"
