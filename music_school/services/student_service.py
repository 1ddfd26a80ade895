# music_school/services/student_service.py
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .base_service import BaseService
from ..core.exceptions import ConflictError, InvalidInputError
from ..models.student import Student

REQUIRED_FIELDS = ("name", "email")


def student_to_dict(student: Student) -> dict:
    return {
        "id": student.id,
        "name": student.name,
        "email": student.email,
        "phone": student.phone,
        "birthDate": student.birth_date.isoformat() if student.birth_date else None,
        "primaryInstrument": student.primary_instrument,
        "createdAt": student.created_at.isoformat() if student.created_at else None,
        "updatedAt": student.updated_at.isoformat() if student.updated_at else None,
    }


class StudentService(BaseService[Student]):
    resource_name = "Student"

    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)

    async def get_by_email(self, email: str) -> Optional[Student]:
        stmt = select(self.model).where(self.model.email == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Student]:
        return await self.get_multi(order_by="name")

    async def create(self, obj_in: dict) -> Student:
        """Create new student with email uniqueness check"""
        if await self.get_by_email(obj_in["email"]):
            raise ConflictError(f"Student with email {obj_in['email']} already exists")
        return await super().create(obj_in)

    async def update(self, id: int, obj_in: dict) -> Student:
        if not obj_in:
            raise InvalidInputError("No valid fields to update")
        for field in REQUIRED_FIELDS:
            if field in obj_in and obj_in[field] is None:
                raise InvalidInputError(f"Field {field} cannot be empty", field=field)

        student = await self.get_or_404(id)
        email = obj_in.get("email")
        if email and email != student.email:
            existing = await self.get_by_email(email)
            if existing and existing.id != student.id:
                raise ConflictError(f"Student with email {email} already exists")

        return await super().update(id, obj_in)
