from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.lesson_schemas import CancelOccurrence, RescheduleOccurrence
from ..services.occurrence_service import OccurrenceService

router = APIRouter(prefix="/occurrences", tags=["Occurrences"])

@router.get("/{occurrence_id}", response_model=dict)
async def get_occurrence(
    occurrence_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = OccurrenceService(db)
    return await service.get_detail(occurrence_id)

@router.put("/{occurrence_id}/cancel", response_model=dict)
async def cancel_occurrence(
    occurrence_id: int,
    request_data: Optional[CancelOccurrence] = None,
    db: AsyncSession = Depends(get_db)
):
    """Cancel an occurrence whatever its current status"""
    service = OccurrenceService(db)
    await service.cancel(occurrence_id, request_data.reason if request_data else None)
    return {"message": "Occurrence cancelled successfully"}

@router.put("/{occurrence_id}/reschedule", response_model=dict)
async def reschedule_occurrence(
    occurrence_id: int,
    request_data: RescheduleOccurrence,
    db: AsyncSession = Depends(get_db)
):
    """Move an occurrence to a future date"""
    service = OccurrenceService(db)
    replacement = await service.reschedule(occurrence_id, request_data.new_date, request_data.reason)
    return {
        "message": "Occurrence rescheduled successfully",
        "newOccurrenceId": replacement.id
    }

@router.put("/{occurrence_id}/held", response_model=dict)
async def mark_occurrence_held(
    occurrence_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = OccurrenceService(db)
    await service.mark_held(occurrence_id)
    return {"message": "Occurrence marked as held"}
