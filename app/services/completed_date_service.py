"""Completed date service - daily engagement records used for streaks."""
import logging
from datetime import date, datetime
from typing import Optional

from pymongo.errors import DuplicateKeyError

from app.models.completed_date import CompletedDate
from app.services.documents import doc_to_completed_date
from app.services.goal_service import GoalService
from app.utils.dates import current_date


logger = logging.getLogger(__name__)


def day_query(goal_id: str, day_key: str) -> dict:
    """
    Match a goal's record for a calendar day.

    Older records may hold a full ISO timestamp rather than a plain
    YYYY-MM-DD day, so the day is matched as a prefix.
    """
    return {"goal_id": goal_id, "completed_date": {"$regex": f"^{day_key}"}}


class CompletedDateService:
    """Service for marking goals as engaged with on a given day."""

    def __init__(self, db, goal_service: Optional[GoalService] = None):
        """Initialize service with database connection."""
        self.db = db
        self.completed_dates = db["completed_dates"]
        self.goal_service = goal_service or GoalService(db)

    async def add_completed_date(
        self,
        user_id: str,
        goal_id: str,
        day: Optional[date] = None,
    ) -> CompletedDate:
        """
        Record that the user engaged with a goal on a day.

        Adding a day that is already recorded is a no-op and returns the
        existing record.

        Args:
            user_id: User ID
            goal_id: Goal ID
            day: Calendar day; defaults to today

        Returns:
            The record for that goal and day

        Raises:
            ValueError: If goal not found
        """
        await self.goal_service.get_owned_goal_doc(user_id, goal_id)

        day_key = (day or current_date()).isoformat()
        query = day_query(goal_id, day_key)

        while True:
            existing = await self.completed_dates.find_one(query)
            if existing:
                return doc_to_completed_date(existing)

            record_doc = {
                "goal_id": goal_id,
                "user_id": user_id,
                "completed_date": day_key,
                "created_at": datetime.utcnow(),
            }

            try:
                result = await self.completed_dates.insert_one(record_doc)
            except DuplicateKeyError:
                # Lost a race with a concurrent insert; re-read, or insert again if it is gone
                logger.info("Completed date already recorded", extra={"goal_id": goal_id, "day": day_key})
                continue

            record_doc["_id"] = result.inserted_id
            return doc_to_completed_date(record_doc)

    async def remove_completed_date(
        self,
        user_id: str,
        goal_id: str,
        day: date,
    ) -> dict:
        """
        Remove the record for a goal and day, if any.

        Returns:
            Dictionary with deleted_count (0 when nothing was recorded)

        Raises:
            ValueError: If goal not found
        """
        await self.goal_service.get_owned_goal_doc(user_id, goal_id)

        result = await self.completed_dates.delete_many(day_query(goal_id, day.isoformat()))

        return {"deleted_count": result.deleted_count}

    async def list_completed_dates(self, user_id: str, goal_id: str) -> list[CompletedDate]:
        """
        List a goal's completed dates, oldest first.

        Raises:
            ValueError: If goal not found
        """
        await self.goal_service.get_owned_goal_doc(user_id, goal_id)

        cursor = self.completed_dates.find({"goal_id": goal_id}, sort=[("completed_date", 1)])
        date_docs = await cursor.to_list(length=None)

        return [doc_to_completed_date(doc) for doc in date_docs]
