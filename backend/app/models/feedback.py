"""
Feedback model - post-event rating and comments for a registration.

No cap on the number of feedback rows per registration.
"""

from sqlalchemy import Column, Integer, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.database import Base


class Feedback(Base):
    """SQLAlchemy model for the feedback table."""
    __tablename__ = "feedback"

    feedback_id = Column(Integer, primary_key=True, autoincrement=True,
                         doc="Unique feedback identifier")
    registration_id = Column(Integer, ForeignKey("registrations.registration_id"), nullable=False,
                             doc="Registration the feedback is about")
    rating = Column(Integer, nullable=False)
    comments = Column(Text, nullable=True)

    registration = relationship("Registration", back_populates="feedback")

    __table_args__ = (
        Index("ix_feedback_registration_id", "registration_id"),
    )

    def __repr__(self):
        return f"<Feedback(id={self.feedback_id}, registration={self.registration_id}, rating={self.rating})>"
