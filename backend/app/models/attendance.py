"""
Attendance model - check-in record for a registration.

At most one row exists per registration. A registration with no row is
"unmarked"; once a row exists its `attended` flag may be flipped either
way by later check-ins.
"""

from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint, false
from sqlalchemy.orm import relationship
from app.database import Base


class Attendance(Base):
    """SQLAlchemy model for the attendance table."""
    __tablename__ = "attendance"

    attendance_id = Column(Integer, primary_key=True, autoincrement=True,
                           doc="Unique attendance identifier")
    registration_id = Column(Integer, ForeignKey("registrations.registration_id"), nullable=False,
                             doc="Registration this check-in belongs to (unique)")
    attended = Column(Boolean, nullable=False, default=False, server_default=false(),
                      doc="Whether the student attended")
    checkin_time = Column(DateTime, nullable=True,
                          doc="When the check-in was recorded (naive UTC)")

    registration = relationship("Registration", back_populates="attendance")

    __table_args__ = (
        UniqueConstraint("registration_id", name="uq_attendance_registration"),
    )

    def __repr__(self):
        return f"<Attendance(id={self.attendance_id}, registration={self.registration_id}, attended={self.attended})>"
