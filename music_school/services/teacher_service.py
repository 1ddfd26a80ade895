# music_school/services/teacher_service.py
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .base_service import BaseService
from ..core.exceptions import ConflictError, InvalidInputError
from ..models.teacher import Teacher

REQUIRED_FIELDS = ("name", "email", "max_students", "revenue_share_percentage")


def teacher_to_dict(teacher: Teacher) -> dict:
    return {
        "id": teacher.id,
        "name": teacher.name,
        "email": teacher.email,
        "phone": teacher.phone,
        "specialty": teacher.specialty,
        "maxStudents": teacher.max_students,
        "revenueSharePercentage": teacher.revenue_share_percentage,
        "createdAt": teacher.created_at.isoformat() if teacher.created_at else None,
        "updatedAt": teacher.updated_at.isoformat() if teacher.updated_at else None,
    }


class TeacherService(BaseService[Teacher]):
    resource_name = "Teacher"

    def __init__(self, db: AsyncSession):
        super().__init__(Teacher, db)

    async def get_by_email(self, email: str) -> Optional[Teacher]:
        stmt = select(self.model).where(self.model.email == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Teacher]:
        return await self.get_multi(order_by="name")

    async def create(self, obj_in: dict) -> Teacher:
        """Create new teacher with email uniqueness check"""
        if await self.get_by_email(obj_in["email"]):
            raise ConflictError(f"Teacher with email {obj_in['email']} already exists")
        return await super().create(obj_in)

    async def update(self, id: int, obj_in: dict) -> Teacher:
        if not obj_in:
            raise InvalidInputError("No valid fields to update")
        for field in REQUIRED_FIELDS:
            if field in obj_in and obj_in[field] is None:
                raise InvalidInputError(f"Field {field} cannot be empty", field=field)

        teacher = await self.get_or_404(id)
        email = obj_in.get("email")
        if email and email != teacher.email:
            existing = await self.get_by_email(email)
            if existing and existing.id != teacher.id:
                raise ConflictError(f"Teacher with email {email} already exists")

        return await super().update(id, obj_in)
