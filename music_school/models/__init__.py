# music_school/models/__init__.py
"""Import all models here, needed for Alembic and create_all."""
from .base import Base
from .teacher import Teacher
from .student import Student
from .lesson import (
    ConfiguredLesson,
    LessonWeekday,
    LessonEnrollment,
    LessonOccurrence,
    RescheduleRecord,
    Shift,
    OccurrenceStatus,
)
from .payment import Payment, PaymentStatus

__all__ = [
    "Base",
    "Teacher",
    "Student",
    "ConfiguredLesson",
    "LessonWeekday",
    "LessonEnrollment",
    "LessonOccurrence",
    "RescheduleRecord",
    "Shift",
    "OccurrenceStatus",
    "Payment",
    "PaymentStatus",
]
