from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import Database, get_database, get_db
from ..schemas.lesson_schemas import LessonConfigure, LessonUpdate, GenerateOccurrences
from ..services.lesson_service import LessonService
from ..services.materializer import OccurrenceMaterializer
from ..services.occurrence_service import OccurrenceService

router = APIRouter(prefix="/lessons", tags=["Lessons"])


def get_lesson_service(
    db: AsyncSession = Depends(get_db),
    database: Database = Depends(get_database)
) -> LessonService:
    return LessonService(db, OccurrenceMaterializer(db, database))


@router.post("/configure", response_model=dict, status_code=201)
async def configure_lesson(
    lesson_data: LessonConfigure,
    service: LessonService = Depends(get_lesson_service)
):
    """Configure a recurring lesson and generate its first weeks of occurrences"""
    lesson, generated = await service.configure(lesson_data.model_dump())
    return {
        "id": lesson.id,
        "message": "Lesson configured successfully",
        "generatedOccurrences": len(generated)
    }

@router.get("", response_model=dict)
async def list_lessons(service: LessonService = Depends(get_lesson_service)):
    lessons = await service.list_configured()
    return {"lessons": lessons}

@router.get("/{lesson_id}", response_model=dict)
async def get_lesson(
    lesson_id: int,
    service: LessonService = Depends(get_lesson_service)
):
    """Lesson details with teacher, weekdays and enrolled students"""
    return await service.get_details(lesson_id)

@router.put("/{lesson_id}", response_model=dict)
async def update_lesson(
    lesson_id: int,
    lesson_data: LessonUpdate,
    service: LessonService = Depends(get_lesson_service)
):
    await service.update_lesson(lesson_id, lesson_data.changes())
    return {"message": "Lesson updated successfully"}

@router.delete("/{lesson_id}", response_model=dict)
async def delete_lesson(
    lesson_id: int,
    service: LessonService = Depends(get_lesson_service)
):
    await service.delete(lesson_id)
    return {"message": "Lesson deleted successfully"}

@router.post("/{lesson_id}/generate-occurrences", response_model=dict)
async def generate_occurrences(
    lesson_id: int,
    request_data: Optional[GenerateOccurrences] = None,
    service: LessonService = Depends(get_lesson_service)
):
    """Generate missing occurrences for the next N weeks (default 4)"""
    weeks = request_data.weeks if request_data else None
    occurrences = await service.generate_occurrences(lesson_id, weeks)
    return {
        "message": f"Generated {len(occurrences)} occurrences",
        "occurrences": [
            {"id": occurrence["id"], "date": occurrence["date"].isoformat()}
            for occurrence in occurrences
        ]
    }

@router.get("/{lesson_id}/occurrences", response_model=dict)
async def get_lesson_occurrences(
    lesson_id: int,
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    db: AsyncSession = Depends(get_db)
):
    """Occurrences of a lesson, optionally limited to an inclusive date range"""
    service = OccurrenceService(db)
    occurrences = await service.list_for_lesson(lesson_id, date_from, date_to)
    return {"occurrences": occurrences}

@router.post("/{lesson_id}/students/{student_id}", response_model=dict, status_code=201)
async def enroll_student(
    lesson_id: int,
    student_id: int,
    service: LessonService = Depends(get_lesson_service)
):
    await service.enroll_student(lesson_id, student_id)
    return {"message": "Student enrolled successfully"}

@router.delete("/{lesson_id}/students/{student_id}", response_model=dict)
async def unenroll_student(
    lesson_id: int,
    student_id: int,
    service: LessonService = Depends(get_lesson_service)
):
    await service.unenroll_student(lesson_id, student_id)
    return {"message": "Student removed from lesson successfully"}
