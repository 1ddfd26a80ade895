# music_school/schemas/payment_schemas.py
from typing import Optional
from datetime import date
from decimal import Decimal
from pydantic import Field
from .base import CamelModel
from ..models.payment import PaymentStatus


class PaymentCreate(CamelModel):
    student_id: int
    # Positivity is checked by the payment service
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)
    due_date: date

class PaymentUpdate(CamelModel):
    student_id: Optional[int] = None
    amount: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    due_date: Optional[date] = None
    status: Optional[PaymentStatus] = None
    payment_date: Optional[date] = None
    revenue_share_amount: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)

class ProcessPayment(CamelModel):
    payment_date: Optional[date] = None
