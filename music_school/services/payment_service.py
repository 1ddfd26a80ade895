# music_school/services/payment_service.py
from typing import Callable, List, Optional, Tuple
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from .base_service import BaseService
from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError
from ..models.lesson import ConfiguredLesson, LessonEnrollment
from ..models.payment import Payment, PaymentStatus
from ..models.student import Student
from ..models.teacher import Teacher

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
REQUIRED_FIELDS = ("student_id", "amount", "due_date", "status")


def _money(value: Optional[Decimal]) -> Optional[str]:
    return str(Decimal(value).quantize(CENTS)) if value is not None else None


def payment_to_dict(payment: Payment, student_name: Optional[str] = None) -> dict:
    data = {
        "id": payment.id,
        "studentId": payment.student_id,
        "amount": _money(payment.amount),
        "dueDate": payment.due_date.isoformat(),
        "status": payment.status.value,
        "paymentDate": payment.payment_date.isoformat() if payment.payment_date else None,
        "revenueShareAmount": _money(payment.revenue_share_amount),
    }
    if student_name is not None:
        data["studentName"] = student_name
    return data


def revenue_share(amount: Decimal, percentage: Optional[int]) -> Decimal:
    """Teacher's cut of a payment, rounded half-up to cents."""
    if not percentage:
        return Decimal("0.00")
    return (Decimal(amount) * Decimal(percentage) / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)


class PaymentService(BaseService[Payment]):
    resource_name = "Payment"

    def __init__(self, db: AsyncSession, today: Callable[[], date] = date.today):
        super().__init__(Payment, db)
        self.today = today

    @staticmethod
    def _check_amount(amount) -> None:
        if amount is None or amount <= 0:
            raise InvalidInputError("Amount must be greater than zero", field="amount")

    async def _check_student(self, student_id: int) -> None:
        if await self.db.get(Student, student_id) is None:
            raise NotFoundError("Student", student_id)

    async def list_with_students(self) -> List[Tuple[Payment, str]]:
        stmt = (
            select(Payment, Student.name)
            .join(Student, Payment.student_id == Student.id)
            .order_by(Payment.due_date.desc(), Payment.id.desc())
        )
        result = await self.db.execute(stmt)
        return [(payment, name) for payment, name in result.all()]

    async def get_with_student(self, payment_id: int) -> Tuple[Payment, str]:
        stmt = (
            select(Payment, Student.name)
            .join(Student, Payment.student_id == Student.id)
            .where(Payment.id == payment_id)
        )
        result = await self.db.execute(stmt)
        row = result.first()
        if row is None:
            raise NotFoundError(self.resource_name, payment_id)
        return row[0], row[1]

    async def create(self, obj_in: dict) -> Payment:
        self._check_amount(obj_in.get("amount"))
        await self._check_student(obj_in["student_id"])
        return await super().create(obj_in)

    async def update(self, id: int, obj_in: dict) -> Payment:
        if not obj_in:
            raise InvalidInputError("No valid fields to update")
        for field in REQUIRED_FIELDS:
            if field in obj_in and obj_in[field] is None:
                raise InvalidInputError(f"Field {field} cannot be empty", field=field)
        if "amount" in obj_in:
            self._check_amount(obj_in["amount"])
        if "student_id" in obj_in:
            await self._check_student(obj_in["student_id"])
        return await super().update(id, obj_in)

    async def teacher_percentage_for(self, student_id: int) -> Optional[int]:
        """Revenue share of the teacher behind the student's first enrollment."""
        stmt = (
            select(Teacher.revenue_share_percentage)
            .select_from(LessonEnrollment)
            .join(ConfiguredLesson, LessonEnrollment.lesson_id == ConfiguredLesson.id)
            .join(Teacher, ConfiguredLesson.teacher_id == Teacher.id)
            .where(LessonEnrollment.student_id == student_id)
            .order_by(LessonEnrollment.id)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def process_payment(self, payment_id: int, payment_date: Optional[date] = None) -> Payment:
        """Mark a payment as paid and compute the teacher's revenue share"""
        payment = await self.get_or_404(payment_id)
        if payment.status == PaymentStatus.CANCELLED:
            raise ConflictError("Cancelled payments cannot be processed")

        percentage = await self.teacher_percentage_for(payment.student_id)
        payment.revenue_share_amount = revenue_share(payment.amount, percentage)
        payment.status = PaymentStatus.PAID
        payment.payment_date = payment_date or self.today()
        await self.commit()

        logger.info(
            f"Payment {payment_id} processed: amount {payment.amount}, "
            f"revenue share {payment.revenue_share_amount} ({percentage or 0}%)"
        )
        return payment
