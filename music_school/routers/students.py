from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.people_schemas import StudentCreate, StudentUpdate
from ..services.lesson_service import LessonService
from ..services.student_service import StudentService, student_to_dict
from .lessons import get_lesson_service

router = APIRouter(prefix="/students", tags=["Students"])

@router.get("", response_model=dict)
async def get_students(db: AsyncSession = Depends(get_db)):
    """List all students"""
    service = StudentService(db)
    students = await service.get_all()
    return {"students": [student_to_dict(student) for student in students]}

@router.post("", response_model=dict, status_code=201)
async def create_student(
    student_data: StudentCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create new student"""
    service = StudentService(db)
    student = await service.create(student_data.model_dump())
    return {
        "id": student.id,
        "message": "Student created successfully"
    }

@router.get("/{student_id}", response_model=dict)
async def get_student(
    student_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = StudentService(db)
    student = await service.get_or_404(student_id)
    return student_to_dict(student)

@router.put("/{student_id}", response_model=dict)
async def update_student(
    student_id: int,
    student_data: StudentUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = StudentService(db)
    await service.update(student_id, student_data.changes())
    return {"message": "Student updated successfully"}

@router.delete("/{student_id}", response_model=dict)
async def delete_student(
    student_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Delete student with enrollments and payments"""
    service = StudentService(db)
    await service.delete(student_id)
    return {"message": "Student deleted successfully"}

@router.get("/{student_id}/lessons", response_model=dict)
async def get_student_lessons(
    student_id: int,
    service: LessonService = Depends(get_lesson_service)
):
    """Lessons a student is enrolled in"""
    lessons = await service.lessons_for_student(student_id)
    return {"lessons": lessons}
