# music_school/models/student.py
from sqlalchemy import Column, String, Date
from sqlalchemy.orm import relationship
from .base import Base

class Student(Base):
    __tablename__ = "students"

    # Basic Information
    name = Column(String(120), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    phone = Column(String(30))
    birth_date = Column(Date)
    primary_instrument = Column(String(100))

    # Relationships
    enrollments = relationship("LessonEnrollment", back_populates="student", passive_deletes=True)
    payments = relationship("Payment", back_populates="student", passive_deletes=True)
