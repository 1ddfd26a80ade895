# music_school/models/lesson.py
from sqlalchemy import Column, String, Integer, Date, Text, ForeignKey, Enum, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base
import enum


class Shift(str, enum.Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class OccurrenceStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    HELD = "held"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class ConfiguredLesson(Base):
    """Recurring weekly class template."""
    __tablename__ = "configured_lessons"

    # Foreign Keys
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)

    # Lesson Information
    instrument = Column(String(100), nullable=False)
    shift = Column(
        Enum(Shift, name="lesson_shift", native_enum=False, values_callable=_enum_values),
        nullable=False
    )
    start_date = Column(Date, nullable=False)

    # Relationships
    teacher = relationship("Teacher", back_populates="lessons")
    weekdays = relationship(
        "LessonWeekday", back_populates="lesson",
        cascade="all, delete-orphan", passive_deletes=True, order_by="LessonWeekday.id"
    )
    enrollments = relationship(
        "LessonEnrollment", back_populates="lesson",
        cascade="all, delete-orphan", passive_deletes=True
    )
    occurrences = relationship(
        "LessonOccurrence", back_populates="lesson",
        cascade="all, delete-orphan", passive_deletes=True
    )


class LessonWeekday(Base):
    """One weekday (0=Sunday..6=Saturday) of a lesson's weekly pattern."""
    __tablename__ = "lesson_weekdays"

    lesson_id = Column(Integer, ForeignKey("configured_lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    weekday = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint('lesson_id', 'weekday', name='uq_lesson_weekday'),
        CheckConstraint('weekday BETWEEN 0 AND 6', name='ck_lesson_weekday_range'),
    )

    lesson = relationship("ConfiguredLesson", back_populates="weekdays")


class LessonEnrollment(Base):
    __tablename__ = "lesson_enrollments"

    lesson_id = Column(Integer, ForeignKey("configured_lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint('lesson_id', 'student_id', name='uq_lesson_enrollment'),
    )

    lesson = relationship("ConfiguredLesson", back_populates="enrollments")
    student = relationship("Student", back_populates="enrollments")


class LessonOccurrence(Base):
    """One concrete dated instance of a configured lesson."""
    __tablename__ = "lesson_occurrences"

    lesson_id = Column(Integer, ForeignKey("configured_lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(
        Enum(OccurrenceStatus, name="occurrence_status", native_enum=False, values_callable=_enum_values),
        default=OccurrenceStatus.SCHEDULED,
        server_default=OccurrenceStatus.SCHEDULED.value,
        nullable=False
    )

    # (lesson, date) is the idempotency key for generation
    __table_args__ = (
        UniqueConstraint('lesson_id', 'date', name='uq_occurrence_lesson_date'),
    )

    lesson = relationship("ConfiguredLesson", back_populates="occurrences")
    reschedules = relationship(
        "RescheduleRecord", back_populates="occurrence",
        cascade="all, delete-orphan", passive_deletes=True
    )


class RescheduleRecord(Base):
    """Append-only log; the latest row per occurrence is the current one."""
    __tablename__ = "reschedule_records"

    occurrence_id = Column(Integer, ForeignKey("lesson_occurrences.id", ondelete="CASCADE"), nullable=False, index=True)
    new_date = Column(Date, nullable=False)
    reason = Column(Text)

    occurrence = relationship("LessonOccurrence", back_populates="reschedules")
