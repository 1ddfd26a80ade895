# music_school/schemas/lesson_schemas.py
from typing import List, Optional
from datetime import date
from pydantic import Field
from .base import CamelModel


class LessonConfigure(CamelModel):
    instrument: str = Field(..., min_length=1, max_length=100)
    # Shift and weekday ranges are checked by the lesson service
    shift: str
    teacher_id: int
    start_date: date
    weekdays: List[int] = Field(..., min_length=1)

class LessonUpdate(CamelModel):
    instrument: Optional[str] = Field(default=None, min_length=1, max_length=100)
    shift: Optional[str] = None
    start_date: Optional[date] = None
    weekdays: Optional[List[int]] = None

class GenerateOccurrences(CamelModel):
    weeks: Optional[int] = None

class CancelOccurrence(CamelModel):
    reason: Optional[str] = None

class RescheduleOccurrence(CamelModel):
    new_date: Optional[date] = None
    reason: Optional[str] = None
