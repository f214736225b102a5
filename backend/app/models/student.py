"""
Student model - represents students who register for events.

Each student is identified by a store-assigned integer id. Email is unique
across all students regardless of college.
"""

from sqlalchemy import Column, Integer, Text, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base


class Student(Base):
    """
    SQLAlchemy model for the students table.

    Emails are stored normalized (trimmed, lower-cased), so the unique
    constraint also rejects case variants of an existing address.
    """
    __tablename__ = "students"

    student_id = Column(Integer, primary_key=True, autoincrement=True,
                        doc="Unique student identifier")
    college_id = Column(Integer, nullable=False,
                        doc="College the student belongs to")
    name = Column(Text, nullable=False,
                  doc="Student's full name")
    email = Column(Text, nullable=False,
                   doc="Normalized email, globally unique")
    year = Column(Text, nullable=True,
                  doc="Year of study as given, e.g. \"2\" or \"Third\"")
    department = Column(Text, nullable=True)

    # Relationship: one student has many registrations
    registrations = relationship("Registration", back_populates="student")

    __table_args__ = (
        UniqueConstraint("email", name="uq_students_email"),
        Index("ix_students_college_id", "college_id"),
    )

    def __repr__(self):
        return f"<Student(id={self.student_id}, name='{self.name}', email='{self.email}')>"
