"""Goal router - API endpoints for goal management."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.models.goal import DashboardStats, Goal, GoalCreate, GoalDetail, GoalUpdate
from app.routers.auth import get_current_user_id
from app.services.goal_service import GoalService


router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal: GoalCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new goal.

    - Requires authentication
    - Progress starts at 0 and is derived from action steps afterwards
    """
    service = GoalService(db)
    return await service.create_goal(user_id=user_id, goal_create=goal)


@router.get("", response_model=list[GoalDetail])
async def list_goals(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List goals for the authenticated user, newest first.

    Each goal includes its action steps, completed dates and streak stats.
    """
    service = GoalService(db)
    return await service.list_goals(user_id=user_id)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Aggregate progress and streak numbers across all goals."""
    service = GoalService(db)
    return await service.get_dashboard_stats(user_id=user_id)


@router.get("/{goal_id}", response_model=GoalDetail)
async def get_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a single goal with steps, completed dates and stats.

    - Returns 404 if goal not found
    """
    service = GoalService(db)
    try:
        return await service.get_goal(user_id=user_id, goal_id=goal_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{goal_id}", response_model=Goal)
async def update_goal(
    goal_id: str,
    goal_update: GoalUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a goal's title, description or target date.

    - Returns 404 if goal not found
    """
    service = GoalService(db)
    try:
        return await service.update_goal(
            user_id=user_id,
            goal_id=goal_id,
            goal_update=goal_update,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a goal and all of its action steps and completed dates.

    - Returns 404 if goal not found
    """
    service = GoalService(db)
    try:
        return await service.delete_goal(user_id=user_id, goal_id=goal_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
