from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..services.occurrence_service import OccurrenceService

router = APIRouter(prefix="/agenda", tags=["Agenda"])

@router.get("/weekly", response_model=dict)
async def get_weekly_agenda(
    anchor: Optional[date] = Query(None, alias="from"),
    db: AsyncSession = Depends(get_db)
):
    """Monday-to-Sunday agenda for the week containing the given date (default: this week)"""
    service = OccurrenceService(db)
    return await service.weekly_agenda(anchor)
