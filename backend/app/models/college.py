"""
College model - the institution that owns events and students.

Colleges are pre-existing and managed elsewhere; events and students only
carry a `college_id` that is indexed but not enforced as a foreign key.
"""

from sqlalchemy import Column, Integer, Text
from app.database import Base


class College(Base):
    """SQLAlchemy model for the colleges table."""
    __tablename__ = "colleges"

    college_id = Column(Integer, primary_key=True, autoincrement=True,
                        doc="Unique college identifier")
    name = Column(Text, nullable=True,
                  doc="Display name, if known")

    def __repr__(self):
        return f"<College(id={self.college_id}, name='{self.name}')>"
