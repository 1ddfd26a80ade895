from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.payment_schemas import PaymentCreate, PaymentUpdate, ProcessPayment
from ..services.payment_service import PaymentService, payment_to_dict

router = APIRouter(prefix="/payments", tags=["Payments"])

@router.get("", response_model=dict)
async def get_payments(db: AsyncSession = Depends(get_db)):
    """List payments, latest due date first"""
    service = PaymentService(db)
    payments = await service.list_with_students()
    return {"payments": [payment_to_dict(payment, student_name) for payment, student_name in payments]}

@router.post("", response_model=dict, status_code=201)
async def create_payment(
    payment_data: PaymentCreate,
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    payment = await service.create(payment_data.model_dump())
    return {
        "id": payment.id,
        "message": "Payment registered successfully"
    }

@router.get("/{payment_id}", response_model=dict)
async def get_payment(
    payment_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    payment, student_name = await service.get_with_student(payment_id)
    return payment_to_dict(payment, student_name)

@router.put("/{payment_id}", response_model=dict)
async def update_payment(
    payment_id: int,
    payment_data: PaymentUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    await service.update(payment_id, payment_data.changes())
    return {"message": "Payment updated successfully"}

@router.delete("/{payment_id}", response_model=dict)
async def delete_payment(
    payment_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    await service.delete(payment_id)
    return {"message": "Payment deleted successfully"}

@router.post("/{payment_id}/pay", response_model=dict)
async def process_payment(
    payment_id: int,
    request_data: Optional[ProcessPayment] = None,
    db: AsyncSession = Depends(get_db)
):
    """Mark payment as paid and compute the teacher's revenue share"""
    service = PaymentService(db)
    payment = await service.process_payment(
        payment_id, request_data.payment_date if request_data else None
    )
    return {
        "message": "Payment processed successfully",
        "revenueShareAmount": str(payment.revenue_share_amount)
    }
