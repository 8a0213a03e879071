"""Conversions from MongoDB documents to API models."""
from app.models.action_step import ActionStep
from app.models.completed_date import CompletedDate
from app.models.goal import Goal
from app.utils.dates import from_datetime, to_calendar_date


def doc_to_goal(doc: dict) -> Goal:
    """
    Convert database document to Goal model.

    Handles datetime to date conversion for date fields.
    """
    return Goal(
        _id=str(doc["_id"]),
        user_id=doc["user_id"],
        title=doc["title"],
        description=doc.get("description"),
        target_date=from_datetime(doc.get("target_date")),
        progress=doc.get("progress", 0),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def doc_to_action_step(doc: dict) -> ActionStep:
    """Convert database document to ActionStep model."""
    return ActionStep(
        _id=str(doc["_id"]),
        goal_id=doc["goal_id"],
        user_id=doc["user_id"],
        title=doc["title"],
        completed=doc.get("completed", False),
        completed_date=from_datetime(doc.get("completed_date")),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def doc_to_completed_date(doc: dict) -> CompletedDate:
    """Convert database document to CompletedDate model."""
    return CompletedDate(
        _id=str(doc["_id"]),
        goal_id=doc["goal_id"],
        user_id=doc["user_id"],
        completed_date=to_calendar_date(doc["completed_date"]),
        created_at=doc["created_at"],
    )
