# music_school/models/payment.py
from sqlalchemy import Column, Integer, Date, Numeric, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base
from .lesson import _enum_values
import enum


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class Payment(Base):
    __tablename__ = "payments"

    # Foreign Keys
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    # Payment Details
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    status = Column(
        Enum(PaymentStatus, name="payment_status", native_enum=False, values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        server_default=PaymentStatus.PENDING.value,
        nullable=False
    )
    payment_date = Column(Date)

    # Teacher share, computed when the payment is processed
    revenue_share_amount = Column(Numeric(10, 2))

    __table_args__ = (
        CheckConstraint('amount > 0', name='ck_payments_amount_positive'),
    )

    student = relationship("Student", back_populates="payments")
