"""Action step router - checklist items under a goal."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.models.action_step import ActionStep, ActionStepCreate, ActionStepUpdate
from app.routers.auth import get_current_user_id
from app.services.action_step_service import ActionStepService


router = APIRouter(tags=["action-steps"])


@router.post(
    "/goals/{goal_id}/steps",
    response_model=ActionStep,
    status_code=status.HTTP_201_CREATED,
)
async def create_step(
    goal_id: str,
    step: ActionStepCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Add an action step to a goal.

    - Step starts incomplete; goal progress is recalculated
    - Returns 404 if goal not found
    """
    service = ActionStepService(db)
    try:
        return await service.create_step(user_id=user_id, goal_id=goal_id, step_create=step)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/goals/{goal_id}/steps", response_model=list[ActionStep])
async def list_steps(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List a goal's action steps."""
    service = ActionStepService(db)
    try:
        return await service.list_steps(user_id=user_id, goal_id=goal_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/steps/{step_id}", response_model=ActionStep)
async def update_step(
    step_id: str,
    step_update: ActionStepUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Rename an action step or toggle its completion.

    - Completing stamps today's date, un-completing clears it
    - Returns 404 if step not found
    """
    service = ActionStepService(db)
    try:
        return await service.update_step(user_id=user_id, step_id=step_id, step_update=step_update)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/steps/{step_id}")
async def delete_step(
    step_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Delete an action step; returns the goal's recalculated progress."""
    service = ActionStepService(db)
    try:
        return await service.delete_step(user_id=user_id, step_id=step_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
