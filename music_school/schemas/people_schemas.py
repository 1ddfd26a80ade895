# music_school/schemas/people_schemas.py
from typing import Optional
from datetime import date
from pydantic import Field
from .base import CamelModel

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class TeacherBase(CamelModel):
    phone: Optional[str] = Field(default=None, max_length=30)
    specialty: Optional[str] = Field(default=None, max_length=100)

class TeacherCreate(TeacherBase):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., max_length=120, pattern=EMAIL_PATTERN)
    max_students: int = Field(default=10, ge=1, le=20)
    revenue_share_percentage: int = Field(default=70, ge=1, le=100)

class TeacherUpdate(TeacherBase):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    email: Optional[str] = Field(default=None, max_length=120, pattern=EMAIL_PATTERN)
    max_students: Optional[int] = Field(default=None, ge=1, le=20)
    revenue_share_percentage: Optional[int] = Field(default=None, ge=1, le=100)


class StudentBase(CamelModel):
    phone: Optional[str] = Field(default=None, max_length=30)
    birth_date: Optional[date] = None
    primary_instrument: Optional[str] = Field(default=None, max_length=100)

class StudentCreate(StudentBase):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., max_length=120, pattern=EMAIL_PATTERN)

class StudentUpdate(StudentBase):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    email: Optional[str] = Field(default=None, max_length=120, pattern=EMAIL_PATTERN)
