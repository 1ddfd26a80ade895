from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])

@router.get("/summary", response_model=dict)
async def get_summary(db: AsyncSession = Depends(get_db)):
    """Dashboard totals and this month's revenue"""
    service = ReportService(db)
    return await service.summary()
