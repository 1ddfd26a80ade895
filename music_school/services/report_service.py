# music_school/services/report_service.py
import calendar
from typing import Callable
from datetime import date
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from ..models.lesson import ConfiguredLesson
from ..models.payment import Payment, PaymentStatus
from ..models.student import Student
from ..models.teacher import Teacher


class ReportService:
    def __init__(self, db: AsyncSession, today: Callable[[], date] = date.today):
        self.db = db
        self.today = today

    async def _count(self, model) -> int:
        result = await self.db.execute(select(func.count()).select_from(model))
        return result.scalar()

    async def monthly_revenue(self, reference: date) -> Decimal:
        """Sum of paid amounts with a payment date inside the reference month"""
        first_day = reference.replace(day=1)
        last_day = reference.replace(day=calendar.monthrange(reference.year, reference.month)[1])
        stmt = select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.status == PaymentStatus.PAID,
            Payment.payment_date >= first_day,
            Payment.payment_date <= last_day
        )
        result = await self.db.execute(stmt)
        return Decimal(result.scalar()).quantize(Decimal("0.01"))

    async def summary(self) -> dict:
        return {
            "totalStudents": await self._count(Student),
            "totalTeachers": await self._count(Teacher),
            "totalConfiguredLessons": await self._count(ConfiguredLesson),
            "monthlyRevenue": str(await self.monthly_revenue(self.today())),
        }
