from app.models.college import College
from app.models.event import Event
from app.models.student import Student
from app.models.registration import Registration
from app.models.attendance import Attendance
from app.models.feedback import Feedback

__all__ = ["College", "Event", "Student", "Registration", "Attendance", "Feedback"]
