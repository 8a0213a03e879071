"""Completed date model definitions (one engagement record per goal per day)."""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class CompletedDateCreate(BaseModel):
    """Mark a goal as engaged with on a day; defaults to today."""

    completed_date: Optional[date] = None


class CompletedDate(BaseModel):
    """Full completed date model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    goal_id: str
    user_id: str
    completed_date: date
    created_at: datetime

    model_config = {"populate_by_name": True}
