# music_school/services/lesson_service.py
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, case
from sqlalchemy.exc import SQLAlchemyError
import logging

from .base_service import BaseService
from .materializer import OccurrenceMaterializer
from .recurrence import unique_weekdays
from ..core.config import settings
from ..core.exceptions import (
    ConflictError, InvalidInputError, MusicSchoolException, NotFoundError, PersistenceError
)
from ..models.lesson import (
    ConfiguredLesson, LessonWeekday, LessonEnrollment, LessonOccurrence, OccurrenceStatus, Shift
)
from ..models.student import Student
from ..models.teacher import Teacher

logger = logging.getLogger(__name__)


def parse_shift(value) -> Shift:
    try:
        return Shift(value)
    except ValueError:
        raise InvalidInputError('Shift must be "morning", "afternoon" or "evening"', field="shift")


def lesson_to_dict(lesson: ConfiguredLesson) -> dict:
    return {
        "id": lesson.id,
        "instrument": lesson.instrument,
        "shift": lesson.shift.value,
        "teacherId": lesson.teacher_id,
        "startDate": lesson.start_date.isoformat(),
        "createdAt": lesson.created_at.isoformat() if lesson.created_at else None,
    }


class LessonService(BaseService[ConfiguredLesson]):
    resource_name = "Lesson"

    def __init__(
        self,
        db: AsyncSession,
        materializer: OccurrenceMaterializer,
        default_weeks: Optional[int] = None
    ):
        super().__init__(ConfiguredLesson, db)
        self.materializer = materializer
        self.default_weeks = default_weeks or settings.default_lookahead_weeks

    async def configure(self, lesson_data: dict) -> Tuple[ConfiguredLesson, List[dict]]:
        """Create a lesson with its weekdays and generate the default look-ahead.

        Lesson, weekdays and the first occurrences are written in one
        transaction; any failure leaves no trace of the lesson behind.
        """
        weekdays = lesson_data.get("weekdays")
        required = ("instrument", "shift", "teacher_id", "start_date")
        if any(not lesson_data.get(field) for field in required) or not weekdays:
            raise InvalidInputError("Instrument, shift, teacher, start date and weekdays are required")

        shift = parse_shift(lesson_data["shift"])
        weekdays = unique_weekdays(self.materializer.validate_weekdays(weekdays))

        teacher_id = lesson_data["teacher_id"]
        teacher = await self.db.get(Teacher, teacher_id)
        if teacher is None:
            raise NotFoundError("Teacher", teacher_id)

        lesson = ConfiguredLesson(
            instrument=lesson_data["instrument"],
            shift=shift,
            teacher_id=teacher_id,
            start_date=lesson_data["start_date"],
        )
        try:
            self.db.add(lesson)
            await self.db.flush()
            for weekday in weekdays:
                self.db.add(LessonWeekday(lesson_id=lesson.id, weekday=weekday))
            await self.db.flush()

            generated = await self.materializer.materialize(
                lesson.id, lesson.start_date, weekdays, self.default_weeks, commit=False
            )
        except MusicSchoolException:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Lesson configuration failed: {e}")
            raise PersistenceError(str(e))

        await self.commit()
        logger.info(
            f"Configured lesson {lesson.id} ({lesson.instrument}, {shift.value}) "
            f"for teacher {teacher_id} on weekdays {weekdays}"
        )
        return lesson, generated

    async def generate_occurrences(self, lesson_id: int, weeks: Optional[int] = None) -> List[dict]:
        """Materialize occurrences from the lesson's stored start date and weekdays."""
        lesson = await self.get_or_404(lesson_id)
        weekdays = (await self.weekday_map([lesson.id])).get(lesson.id, [])
        week_count = self.default_weeks if weeks is None else weeks
        return await self.materializer.materialize(lesson.id, lesson.start_date, weekdays, week_count)

    async def weekday_map(self, lesson_ids: Iterable[int]) -> Dict[int, List[int]]:
        lesson_ids = list(lesson_ids)
        if not lesson_ids:
            return {}
        stmt = (
            select(LessonWeekday.lesson_id, LessonWeekday.weekday)
            .where(LessonWeekday.lesson_id.in_(lesson_ids))
            .order_by(LessonWeekday.id)
        )
        result = await self.db.execute(stmt)
        weekdays = {}
        for lesson_id, weekday in result.all():
            weekdays.setdefault(lesson_id, []).append(weekday)
        return weekdays

    async def student_counts(self, lesson_ids: Iterable[int]) -> Dict[int, int]:
        lesson_ids = list(lesson_ids)
        if not lesson_ids:
            return {}
        stmt = (
            select(LessonEnrollment.lesson_id, func.count(LessonEnrollment.id))
            .where(LessonEnrollment.lesson_id.in_(lesson_ids))
            .group_by(LessonEnrollment.lesson_id)
        )
        result = await self.db.execute(stmt)
        return {lesson_id: total for lesson_id, total in result.all()}

    async def list_configured(self) -> List[dict]:
        """All lessons with teacher name, weekdays and enrollment/occurrence totals"""
        stmt = (
            select(ConfiguredLesson, Teacher.name)
            .join(Teacher, ConfiguredLesson.teacher_id == Teacher.id)
            .order_by(ConfiguredLesson.id)
        )
        result = await self.db.execute(stmt)
        rows = result.all()
        lesson_ids = [lesson.id for lesson, _ in rows]

        weekdays = await self.weekday_map(lesson_ids)
        students = await self.student_counts(lesson_ids)

        occurrence_stats = {}
        if lesson_ids:
            stats_stmt = (
                select(
                    LessonOccurrence.lesson_id,
                    func.count(LessonOccurrence.id),
                    func.sum(case((LessonOccurrence.status == OccurrenceStatus.CANCELLED, 1), else_=0)),
                )
                .where(LessonOccurrence.lesson_id.in_(lesson_ids))
                .group_by(LessonOccurrence.lesson_id)
            )
            stats_result = await self.db.execute(stats_stmt)
            occurrence_stats = {
                lesson_id: (total, cancelled or 0) for lesson_id, total, cancelled in stats_result.all()
            }

        lessons = []
        for lesson, teacher_name in rows:
            total, cancelled = occurrence_stats.get(lesson.id, (0, 0))
            lessons.append({
                **lesson_to_dict(lesson),
                "teacherName": teacher_name,
                "weekdays": weekdays.get(lesson.id, []),
                "totalStudents": students.get(lesson.id, 0),
                "totalOccurrences": total,
                "totalCancelled": cancelled,
            })
        return lessons

    async def get_details(self, lesson_id: int) -> dict:
        stmt = (
            select(ConfiguredLesson, Teacher.name, Teacher.specialty)
            .join(Teacher, ConfiguredLesson.teacher_id == Teacher.id)
            .where(ConfiguredLesson.id == lesson_id)
        )
        result = await self.db.execute(stmt)
        row = result.first()
        if row is None:
            raise NotFoundError(self.resource_name, lesson_id)
        lesson, teacher_name, teacher_specialty = row

        students_stmt = (
            select(Student)
            .join(LessonEnrollment, LessonEnrollment.student_id == Student.id)
            .where(LessonEnrollment.lesson_id == lesson_id)
            .order_by(LessonEnrollment.id)
        )
        students_result = await self.db.execute(students_stmt)
        weekdays = await self.weekday_map([lesson_id])

        return {
            **lesson_to_dict(lesson),
            "teacherName": teacher_name,
            "teacherSpecialty": teacher_specialty,
            "weekdays": weekdays.get(lesson_id, []),
            "students": [
                {
                    "id": student.id,
                    "name": student.name,
                    "email": student.email,
                    "primaryInstrument": student.primary_instrument,
                }
                for student in students_result.scalars()
            ],
        }

    async def update_lesson(self, lesson_id: int, changes: dict) -> ConfiguredLesson:
        """Update lesson fields; a weekday list replaces the stored pattern.

        Occurrences already generated are left untouched.
        """
        lesson = await self.get_or_404(lesson_id)
        changes = dict(changes)
        weekdays = changes.pop("weekdays", None)

        if not changes and weekdays is None:
            raise InvalidInputError("No valid fields to update")
        for field in ("instrument", "start_date"):
            if field in changes and changes[field] is None:
                raise InvalidInputError(f"Field {field} cannot be empty", field=field)
        if "shift" in changes:
            changes["shift"] = parse_shift(changes["shift"])
        if weekdays is not None:
            weekdays = unique_weekdays(self.materializer.validate_weekdays(weekdays))

        for key, value in changes.items():
            setattr(lesson, key, value)

        if weekdays is not None:
            await self.db.execute(delete(LessonWeekday).where(LessonWeekday.lesson_id == lesson_id))
            for weekday in weekdays:
                self.db.add(LessonWeekday(lesson_id=lesson_id, weekday=weekday))

        await self.commit()
        await self.db.refresh(lesson)
        return lesson

    async def delete(self, id: int) -> None:
        """Delete a lesson; weekdays, enrollments and occurrences go with it"""
        await self.get_or_404(id)
        await self.db.execute(delete(ConfiguredLesson).where(ConfiguredLesson.id == id))
        await self.commit()
        logger.info(f"Deleted lesson {id}")

    async def get_enrollment(self, lesson_id: int, student_id: int) -> Optional[LessonEnrollment]:
        stmt = select(LessonEnrollment).where(
            LessonEnrollment.lesson_id == lesson_id,
            LessonEnrollment.student_id == student_id
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def enroll_student(self, lesson_id: int, student_id: int) -> LessonEnrollment:
        lesson = await self.get_or_404(lesson_id)
        if await self.db.get(Student, student_id) is None:
            raise NotFoundError("Student", student_id)

        if await self.get_enrollment(lesson_id, student_id):
            raise ConflictError("Student is already enrolled in this lesson")

        teacher = await self.db.get(Teacher, lesson.teacher_id)
        enrolled = (await self.student_counts([lesson_id])).get(lesson_id, 0)
        if enrolled >= teacher.max_students:
            raise ConflictError(f"Lesson is full ({teacher.max_students} students)")

        enrollment = LessonEnrollment(lesson_id=lesson_id, student_id=student_id)
        self.db.add(enrollment)
        await self.commit()
        return enrollment

    async def unenroll_student(self, lesson_id: int, student_id: int) -> None:
        enrollment = await self.get_enrollment(lesson_id, student_id)
        if enrollment is None:
            raise NotFoundError("Enrollment")
        await self.db.delete(enrollment)
        await self.commit()

    async def lessons_for_student(self, student_id: int) -> List[dict]:
        if await self.db.get(Student, student_id) is None:
            raise NotFoundError("Student", student_id)

        stmt = (
            select(ConfiguredLesson, Teacher.name, Teacher.specialty)
            .join(LessonEnrollment, LessonEnrollment.lesson_id == ConfiguredLesson.id)
            .join(Teacher, ConfiguredLesson.teacher_id == Teacher.id)
            .where(LessonEnrollment.student_id == student_id)
            .order_by(ConfiguredLesson.id)
        )
        result = await self.db.execute(stmt)
        rows = result.all()
        weekdays = await self.weekday_map(lesson.id for lesson, _, _ in rows)

        return [
            {
                **lesson_to_dict(lesson),
                "teacherName": teacher_name,
                "teacherSpecialty": teacher_specialty,
                "weekdays": weekdays.get(lesson.id, []),
            }
            for lesson, teacher_name, teacher_specialty in rows
        ]

    async def lessons_for_teacher(self, teacher_id: int) -> List[dict]:
        if await self.db.get(Teacher, teacher_id) is None:
            raise NotFoundError("Teacher", teacher_id)

        lessons = await self.get_multi(teacher_id=teacher_id)
        lesson_ids = [lesson.id for lesson in lessons]
        weekdays = await self.weekday_map(lesson_ids)
        students = await self.student_counts(lesson_ids)

        return [
            {
                **lesson_to_dict(lesson),
                "weekdays": weekdays.get(lesson.id, []),
                "totalStudents": students.get(lesson.id, 0),
            }
            for lesson in lessons
        ]
