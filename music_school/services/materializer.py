# music_school/services/materializer.py
from typing import Iterable, List, Optional
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..core.config import settings
from ..core.database import Database
from ..core.exceptions import InvalidInputError, PersistenceError
from ..models.lesson import LessonOccurrence, OccurrenceStatus
from .recurrence import expand, is_valid_weekday

logger = logging.getLogger(__name__)


class OccurrenceMaterializer:
    """Turns a lesson's weekly pattern into stored occurrences, idempotently."""

    def __init__(self, db: AsyncSession, database: Database, max_weeks: Optional[int] = None):
        self.db = db
        self.database = database
        self.max_weeks = max_weeks or settings.max_lookahead_weeks

    @staticmethod
    def validate_weekdays(weekdays: Iterable) -> List[int]:
        weekdays = list(weekdays)
        for weekday in weekdays:
            if not is_valid_weekday(weekday):
                raise InvalidInputError(
                    "Weekday must be between 0 (Sunday) and 6 (Saturday)",
                    field="weekdays"
                )
        return weekdays

    def validate_week_count(self, week_count) -> int:
        if not isinstance(week_count, int) or isinstance(week_count, bool) or not 1 <= week_count <= self.max_weeks:
            raise InvalidInputError(
                f"Weeks must be between 1 and {self.max_weeks}",
                field="weeks"
            )
        return week_count

    async def materialize(
        self,
        lesson_id: int,
        start_date: date,
        weekdays: Iterable[int],
        week_count: int,
        commit: bool = True
    ) -> List[dict]:
        """Insert the missing occurrences and return only the ones created.

        Every weekday and the week count are checked before anything is
        written. Dates that already have an occurrence for the lesson are
        skipped by the database itself, so repeated or concurrent runs over
        overlapping ranges never duplicate a (lesson, date) pair. With
        ``commit=False`` the caller owns the surrounding transaction.
        """
        weekdays = self.validate_weekdays(weekdays)
        self.validate_week_count(week_count)

        created = []
        try:
            for candidate in expand(start_date, weekdays, week_count):
                stmt = self.database.insert_if_absent(
                    LessonOccurrence,
                    {
                        "lesson_id": lesson_id,
                        "date": candidate,
                        "status": OccurrenceStatus.SCHEDULED,
                    },
                    conflict_columns=("lesson_id", "date"),
                )
                result = await self.db.execute(stmt)
                occurrence_id = result.scalar_one_or_none()
                if occurrence_id is None:
                    continue
                created.append({"id": occurrence_id, "date": candidate})

            if commit:
                await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Occurrence generation failed for lesson {lesson_id}: {e}")
            raise PersistenceError(str(e))

        created.sort(key=lambda occurrence: occurrence["date"])
        logger.info(
            f"Lesson {lesson_id}: generated {len(created)} occurrences "
            f"over {week_count} weeks from {start_date.isoformat()}"
        )
        return created
