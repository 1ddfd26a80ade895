# music_school/services/occurrence_service.py
from typing import Callable, Dict, Iterable, List, Optional
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, case
import logging

from .base_service import BaseService
from .recurrence import week_bounds
from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError
from ..models.lesson import (
    ConfiguredLesson, LessonOccurrence, RescheduleRecord, OccurrenceStatus, Shift
)
from ..models.teacher import Teacher

logger = logging.getLogger(__name__)

SHIFT_ORDER = case(
    (ConfiguredLesson.shift == Shift.MORNING, 0),
    (ConfiguredLesson.shift == Shift.AFTERNOON, 1),
    else_=2,
)


def occurrence_to_dict(occurrence: LessonOccurrence, reschedule: Optional[RescheduleRecord] = None) -> dict:
    return {
        "id": occurrence.id,
        "lessonId": occurrence.lesson_id,
        "date": occurrence.date.isoformat(),
        "status": occurrence.status.value,
        "newDate": reschedule.new_date.isoformat() if reschedule else None,
        "reason": reschedule.reason if reschedule else None,
    }


class OccurrenceService(BaseService[LessonOccurrence]):
    """Lifecycle of dated occurrences and the read models built on them.

    scheduled -> held | cancelled | rescheduled. Rescheduling leaves the
    source occurrence in place and creates a new scheduled one at the new
    date.
    """
    resource_name = "Occurrence"

    def __init__(self, db: AsyncSession, today: Callable[[], date] = date.today):
        super().__init__(LessonOccurrence, db)
        self.today = today

    async def get_by_lesson_and_date(self, lesson_id: int, day: date) -> Optional[LessonOccurrence]:
        stmt = select(self.model).where(
            self.model.lesson_id == lesson_id,
            self.model.date == day
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def cancel(self, occurrence_id: int, reason: Optional[str] = None) -> LessonOccurrence:
        """Cancel regardless of the current status; cancelling twice is a no-op."""
        occurrence = await self.get_or_404(occurrence_id)
        previous = occurrence.status
        occurrence.status = OccurrenceStatus.CANCELLED
        await self.commit()

        logger.info(
            f"Occurrence {occurrence_id} cancelled (was {previous.value})"
            + (f": {reason}" if reason else "")
        )
        return occurrence

    async def mark_held(self, occurrence_id: int) -> LessonOccurrence:
        occurrence = await self.get_or_404(occurrence_id)
        if occurrence.status != OccurrenceStatus.SCHEDULED:
            raise ConflictError(
                f"Only scheduled occurrences can be marked as held (current status: {occurrence.status.value})"
            )
        occurrence.status = OccurrenceStatus.HELD
        await self.commit()
        return occurrence

    async def reschedule(
        self,
        occurrence_id: int,
        new_date: Optional[date],
        reason: Optional[str] = None
    ) -> LessonOccurrence:
        """Move an occurrence to ``new_date`` and return the replacement.

        The new date must be strictly after today. A lesson never holds two
        occurrences on one date, so a target date that is already taken is
        rejected before anything is written.
        """
        occurrence = await self.get_or_404(occurrence_id)

        if new_date is None or new_date <= self.today():
            raise InvalidInputError("New date invalid", field="newDate")

        if await self.get_by_lesson_and_date(occurrence.lesson_id, new_date):
            raise ConflictError(
                f"Lesson {occurrence.lesson_id} already has an occurrence on {new_date.isoformat()}"
            )

        self.db.add(RescheduleRecord(occurrence_id=occurrence.id, new_date=new_date, reason=reason))
        occurrence.status = OccurrenceStatus.RESCHEDULED
        replacement = LessonOccurrence(
            lesson_id=occurrence.lesson_id,
            date=new_date,
            status=OccurrenceStatus.SCHEDULED
        )
        self.db.add(replacement)
        await self.commit()

        logger.info(
            f"Occurrence {occurrence_id} rescheduled from {occurrence.date.isoformat()} "
            f"to {new_date.isoformat()} as occurrence {replacement.id}"
        )
        return replacement

    async def latest_reschedules(self, occurrence_ids: Iterable[int]) -> Dict[int, RescheduleRecord]:
        """Most recently created reschedule record per occurrence."""
        occurrence_ids = list(occurrence_ids)
        if not occurrence_ids:
            return {}

        stmt = (
            select(RescheduleRecord)
            .where(RescheduleRecord.occurrence_id.in_(occurrence_ids))
            .order_by(RescheduleRecord.created_at, RescheduleRecord.id)
        )
        result = await self.db.execute(stmt)

        latest = {}
        for record in result.scalars():
            latest[record.occurrence_id] = record
        return latest

    async def get_detail(self, occurrence_id: int) -> dict:
        stmt = (
            select(LessonOccurrence, ConfiguredLesson.instrument, ConfiguredLesson.shift, Teacher.name)
            .join(ConfiguredLesson, LessonOccurrence.lesson_id == ConfiguredLesson.id)
            .join(Teacher, ConfiguredLesson.teacher_id == Teacher.id)
            .where(LessonOccurrence.id == occurrence_id)
        )
        result = await self.db.execute(stmt)
        row = result.first()
        if row is None:
            raise NotFoundError(self.resource_name, occurrence_id)

        occurrence, instrument, shift, teacher_name = row
        reschedules = await self.latest_reschedules([occurrence.id])
        return {
            **occurrence_to_dict(occurrence, reschedules.get(occurrence.id)),
            "instrument": instrument,
            "shift": shift.value,
            "teacherName": teacher_name,
        }

    async def list_for_lesson(
        self,
        lesson_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None
    ) -> List[dict]:
        """Occurrences of one lesson in an optional inclusive date range."""
        lesson_exists = await self.db.execute(
            select(ConfiguredLesson.id).where(ConfiguredLesson.id == lesson_id)
        )
        if lesson_exists.scalar_one_or_none() is None:
            raise NotFoundError("Lesson", lesson_id)

        stmt = select(LessonOccurrence).where(LessonOccurrence.lesson_id == lesson_id)
        if date_from is not None:
            stmt = stmt.where(LessonOccurrence.date >= date_from)
        if date_to is not None:
            stmt = stmt.where(LessonOccurrence.date <= date_to)
        stmt = stmt.order_by(LessonOccurrence.date, LessonOccurrence.id)

        result = await self.db.execute(stmt)
        occurrences = list(result.scalars().all())
        reschedules = await self.latest_reschedules(o.id for o in occurrences)

        return [occurrence_to_dict(o, reschedules.get(o.id)) for o in occurrences]

    async def weekly_agenda(self, anchor: Optional[date] = None) -> dict:
        """All occurrences in the Monday-to-Sunday week containing ``anchor``."""
        week_start, week_end = week_bounds(anchor or self.today())

        stmt = (
            select(
                LessonOccurrence,
                ConfiguredLesson.instrument,
                ConfiguredLesson.shift,
                Teacher.name,
                Teacher.specialty,
            )
            .join(ConfiguredLesson, LessonOccurrence.lesson_id == ConfiguredLesson.id)
            .join(Teacher, ConfiguredLesson.teacher_id == Teacher.id)
            .where(LessonOccurrence.date >= week_start, LessonOccurrence.date <= week_end)
            .order_by(LessonOccurrence.date, SHIFT_ORDER, LessonOccurrence.id)
        )
        result = await self.db.execute(stmt)
        rows = result.all()
        reschedules = await self.latest_reschedules(row[0].id for row in rows)

        occurrences = []
        for occurrence, instrument, shift, teacher_name, teacher_specialty in rows:
            occurrences.append({
                **occurrence_to_dict(occurrence, reschedules.get(occurrence.id)),
                "instrument": instrument,
                "shift": shift.value,
                "teacherName": teacher_name,
                "teacherSpecialty": teacher_specialty,
            })

        return {
            "weekStart": week_start.isoformat(),
            "weekEnd": week_end.isoformat(),
            "occurrences": occurrences,
        }
