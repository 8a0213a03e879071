"""Goal service - business logic for goal management."""
import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Optional

from app.models.goal import DashboardStats, Goal, GoalCreate, GoalDetail, GoalUpdate
from app.services.documents import doc_to_action_step, doc_to_completed_date, doc_to_goal
from app.services.goal_stats import compute_dashboard_stats, refresh_goal
from app.utils.dates import current_date, to_datetime
from app.utils.ids import parse_object_id
from app.utils.streaks import calculate_progress


logger = logging.getLogger(__name__)


class GoalService:
    """Service for handling goal operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.goals = db["goals"]
        self.action_steps = db["action_steps"]
        self.completed_dates = db["completed_dates"]

    async def get_owned_goal_doc(self, user_id: str, goal_id: str) -> dict:
        """
        Fetch a goal document belonging to the user.

        Raises:
            ValueError: If the ID is malformed or the goal doesn't exist
        """
        object_id = parse_object_id(goal_id, "goal")

        goal_doc = await self.goals.find_one({
            "_id": object_id,
            "user_id": user_id,
        })

        if not goal_doc:
            raise ValueError("Goal not found")

        return goal_doc

    def _build_detail(
        self,
        goal_doc: dict,
        step_docs: list[dict],
        date_docs: list[dict],
        today: date,
    ) -> GoalDetail:
        goal = doc_to_goal(goal_doc)
        detail = GoalDetail(
            **goal.model_dump(),
            action_steps=[doc_to_action_step(doc) for doc in step_docs],
            completed_dates=sorted(
                (doc_to_completed_date(doc) for doc in date_docs),
                key=lambda record: record.completed_date,
            ),
        )
        return refresh_goal(detail, today)

    async def create_goal(
        self,
        user_id: str,
        goal_create: GoalCreate,
    ) -> Goal:
        """
        Create a new goal.

        Args:
            user_id: User ID who owns the goal
            goal_create: Goal creation data

        Returns:
            Created goal object (progress starts at 0)
        """
        now = datetime.utcnow()

        goal_doc = {
            "user_id": user_id,
            "title": goal_create.title,
            "description": goal_create.description,
            "target_date": to_datetime(goal_create.target_date),
            "progress": 0,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.goals.insert_one(goal_doc)
        goal_doc["_id"] = result.inserted_id

        logger.info("Goal created", extra={"goal_id": str(result.inserted_id), "user_id": user_id})
        return doc_to_goal(goal_doc)

    async def list_goals(
        self,
        user_id: str,
        today: Optional[date] = None,
    ) -> list[GoalDetail]:
        """
        List a user's goals, newest first, with steps, dates and stats.

        Args:
            user_id: User ID
            today: Reference day for streaks; defaults to the configured today

        Returns:
            List of goal details
        """
        today = today or current_date()

        cursor = self.goals.find({"user_id": user_id}, sort=[("created_at", -1)])
        goal_docs = await cursor.to_list(length=None)
        if not goal_docs:
            return []

        goal_ids = [str(doc["_id"]) for doc in goal_docs]

        steps_by_goal = defaultdict(list)
        step_cursor = self.action_steps.find(
            {"goal_id": {"$in": goal_ids}},
            sort=[("created_at", 1)],
        )
        for doc in await step_cursor.to_list(length=None):
            steps_by_goal[doc["goal_id"]].append(doc)

        dates_by_goal = defaultdict(list)
        date_cursor = self.completed_dates.find({"goal_id": {"$in": goal_ids}})
        for doc in await date_cursor.to_list(length=None):
            dates_by_goal[doc["goal_id"]].append(doc)

        return [
            self._build_detail(doc, steps_by_goal[goal_id], dates_by_goal[goal_id], today)
            for doc, goal_id in zip(goal_docs, goal_ids)
        ]

    async def get_goal(
        self,
        user_id: str,
        goal_id: str,
        today: Optional[date] = None,
    ) -> GoalDetail:
        """
        Get a single goal with its steps, dates and stats.

        Raises:
            ValueError: If goal not found
        """
        goal_doc = await self.get_owned_goal_doc(user_id, goal_id)

        step_docs = await self.action_steps.find(
            {"goal_id": goal_id},
            sort=[("created_at", 1)],
        ).to_list(length=None)
        date_docs = await self.completed_dates.find({"goal_id": goal_id}).to_list(length=None)

        return self._build_detail(goal_doc, step_docs, date_docs, today or current_date())

    async def update_goal(
        self,
        user_id: str,
        goal_id: str,
        goal_update: GoalUpdate,
    ) -> Goal:
        """
        Update a goal's title, description or target date.

        Args:
            user_id: User ID
            goal_id: Goal ID
            goal_update: Update data

        Returns:
            Updated goal

        Raises:
            ValueError: If goal not found
        """
        existing = await self.get_owned_goal_doc(user_id, goal_id)

        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        fields = goal_update.model_dump(exclude_unset=True)
        if fields.get("title") is not None:
            update_doc["title"] = fields["title"]
        if "description" in fields:
            update_doc["description"] = fields["description"]
        if "target_date" in fields:
            update_doc["target_date"] = to_datetime(fields["target_date"])

        updated_doc = await self.goals.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        return doc_to_goal(updated_doc)

    async def delete_goal(
        self,
        user_id: str,
        goal_id: str,
    ) -> dict:
        """
        Delete a goal together with its action steps and completed dates.

        Returns:
            Dictionary with deletion counts

        Raises:
            ValueError: If goal not found
        """
        existing = await self.get_owned_goal_doc(user_id, goal_id)

        steps_result = await self.action_steps.delete_many({"goal_id": goal_id})
        dates_result = await self.completed_dates.delete_many({"goal_id": goal_id})
        result = await self.goals.delete_one({"_id": existing["_id"], "user_id": user_id})

        logger.info("Goal deleted", extra={"goal_id": goal_id, "user_id": user_id})
        return {
            "deleted_count": result.deleted_count,
            "action_steps_deleted": steps_result.deleted_count,
            "completed_dates_deleted": dates_result.deleted_count,
        }

    async def recalculate_progress(self, user_id: str, goal_id: str) -> int:
        """
        Recompute and store a goal's progress from its action steps.

        A goal without steps has progress 0.

        Returns:
            New progress percentage
        """
        existing = await self.get_owned_goal_doc(user_id, goal_id)

        total = await self.action_steps.count_documents({"goal_id": goal_id})
        completed = await self.action_steps.count_documents({
            "goal_id": goal_id,
            "completed": True,
        })
        progress = calculate_progress(completed, total)

        await self.goals.update_one(
            {"_id": existing["_id"]},
            {"$set": {"progress": progress, "updated_at": datetime.utcnow()}},
        )

        return progress

    async def get_dashboard_stats(
        self,
        user_id: str,
        today: Optional[date] = None,
    ) -> DashboardStats:
        """Aggregate progress and streak numbers across all the user's goals."""
        goals = await self.list_goals(user_id, today=today)
        return compute_dashboard_stats(goals)
