"""Action step model definitions."""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class ActionStepCreate(BaseModel):
    """Action step creation model. Steps always start incomplete."""

    title: str = Field(min_length=1)


class ActionStepUpdate(BaseModel):
    """Action step update model - all fields optional."""

    title: Optional[str] = Field(default=None, min_length=1)
    completed: Optional[bool] = None


class ActionStep(BaseModel):
    """Full action step model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    goal_id: str
    user_id: str
    title: str
    completed: bool = False
    completed_date: Optional[date] = None  # Set only while completed
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}
