"""Goal model definitions."""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.action_step import ActionStep
from app.models.completed_date import CompletedDate


class GoalBase(BaseModel):
    """Base goal fields."""

    title: str = Field(min_length=1)
    description: Optional[str] = None
    target_date: Optional[date] = None


class GoalCreate(GoalBase):
    """Goal creation model."""

    pass


class GoalUpdate(BaseModel):
    """Goal update model - all fields optional. Progress is derived, not set."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    target_date: Optional[date] = None


class Goal(GoalBase):
    """Full goal model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    progress: int = Field(default=0, ge=0, le=100)
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}


class GoalStats(BaseModel):
    """Display values computed from a goal's steps and completion history."""

    current_streak: int = 0
    longest_streak: int = 0
    marked_today: bool = False
    completed_steps: int = 0
    total_steps: int = 0
    days_until_target: Optional[int] = None
    target_label: Optional[str] = None


class GoalDetail(Goal):
    """Goal with its action steps, completed dates and computed stats."""

    action_steps: list[ActionStep] = Field(default_factory=list)
    completed_dates: list[CompletedDate] = Field(default_factory=list)
    stats: GoalStats = Field(default_factory=GoalStats)


class DashboardStats(BaseModel):
    """Aggregate numbers across all of a user's goals."""

    total_goals: int
    completed_actions: int
    total_actions: int
    average_progress: int
    best_current_streak: int
    longest_streak: int
