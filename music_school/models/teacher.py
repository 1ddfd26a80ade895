# music_school/models/teacher.py
from sqlalchemy import Column, String, Integer, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base

class Teacher(Base):
    __tablename__ = "teachers"

    # Basic Information
    name = Column(String(120), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    phone = Column(String(30))
    specialty = Column(String(100))

    # Teaching limits and revenue share
    max_students = Column(Integer, default=10, nullable=False)
    revenue_share_percentage = Column(Integer, default=70, nullable=False)

    __table_args__ = (
        CheckConstraint('max_students BETWEEN 1 AND 20', name='ck_teachers_max_students'),
        CheckConstraint('revenue_share_percentage BETWEEN 1 AND 100', name='ck_teachers_revenue_share'),
    )

    # Relationships
    lessons = relationship("ConfiguredLesson", back_populates="teacher", passive_deletes=True)
