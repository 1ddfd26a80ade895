from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.people_schemas import TeacherCreate, TeacherUpdate
from ..services.lesson_service import LessonService
from ..services.teacher_service import TeacherService, teacher_to_dict
from .lessons import get_lesson_service

router = APIRouter(prefix="/teachers", tags=["Teachers"])

@router.get("", response_model=dict)
async def get_teachers(db: AsyncSession = Depends(get_db)):
    """List all teachers"""
    service = TeacherService(db)
    teachers = await service.get_all()
    return {"teachers": [teacher_to_dict(teacher) for teacher in teachers]}

@router.post("", response_model=dict, status_code=201)
async def create_teacher(
    teacher_data: TeacherCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create new teacher"""
    service = TeacherService(db)
    teacher = await service.create(teacher_data.model_dump())
    return {
        "id": teacher.id,
        "message": "Teacher created successfully"
    }

@router.get("/{teacher_id}", response_model=dict)
async def get_teacher(
    teacher_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = TeacherService(db)
    teacher = await service.get_or_404(teacher_id)
    return teacher_to_dict(teacher)

@router.put("/{teacher_id}", response_model=dict)
async def update_teacher(
    teacher_id: int,
    teacher_data: TeacherUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update teacher fields sent by the client"""
    service = TeacherService(db)
    await service.update(teacher_id, teacher_data.changes())
    return {"message": "Teacher updated successfully"}

@router.delete("/{teacher_id}", response_model=dict)
async def delete_teacher(
    teacher_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Delete teacher together with their lessons"""
    service = TeacherService(db)
    await service.delete(teacher_id)
    return {"message": "Teacher deleted successfully"}

@router.get("/{teacher_id}/lessons", response_model=dict)
async def get_teacher_lessons(
    teacher_id: int,
    service: LessonService = Depends(get_lesson_service)
):
    """Lessons taught by a teacher, with weekdays and student totals"""
    lessons = await service.lessons_for_teacher(teacher_id)
    return {"lessons": lessons}
