"""Completed date router - daily check-ins that feed streaks."""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.models.completed_date import CompletedDate, CompletedDateCreate
from app.routers.auth import get_current_user_id
from app.services.completed_date_service import CompletedDateService


router = APIRouter(prefix="/goals/{goal_id}/completed-dates", tags=["completed-dates"])


@router.get("", response_model=list[CompletedDate])
async def list_completed_dates(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List a goal's completed dates, oldest first."""
    service = CompletedDateService(db)
    try:
        return await service.list_completed_dates(user_id=user_id, goal_id=goal_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=CompletedDate, status_code=status.HTTP_201_CREATED)
async def add_completed_date(
    goal_id: str,
    body: CompletedDateCreate | None = None,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Mark a goal as done for a day (today if no date is given).

    - Marking the same day twice returns the existing record
    - Returns 404 if goal not found
    """
    service = CompletedDateService(db)
    day = body.completed_date if body else None
    try:
        return await service.add_completed_date(user_id=user_id, goal_id=goal_id, day=day)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{day}")
async def remove_completed_date(
    goal_id: str,
    day: date,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Remove a goal's completed date for a day (YYYY-MM-DD)."""
    service = CompletedDateService(db)
    try:
        return await service.remove_completed_date(user_id=user_id, goal_id=goal_id, day=day)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
