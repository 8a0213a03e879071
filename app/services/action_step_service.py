"""Action step service - checklist items that drive goal progress."""
from datetime import datetime
from typing import Optional

from app.models.action_step import ActionStep, ActionStepCreate, ActionStepUpdate
from app.services.documents import doc_to_action_step
from app.services.goal_service import GoalService
from app.utils.dates import current_date, to_datetime
from app.utils.ids import parse_object_id


class ActionStepService:
    """Service for handling action step operations."""

    def __init__(self, db, goal_service: Optional[GoalService] = None):
        """Initialize service with database connection."""
        self.db = db
        self.action_steps = db["action_steps"]
        self.goal_service = goal_service or GoalService(db)

    async def _get_owned_step_doc(self, user_id: str, step_id: str) -> dict:
        object_id = parse_object_id(step_id, "action step")

        step_doc = await self.action_steps.find_one({
            "_id": object_id,
            "user_id": user_id,
        })

        if not step_doc:
            raise ValueError("Action step not found")

        return step_doc

    async def create_step(
        self,
        user_id: str,
        goal_id: str,
        step_create: ActionStepCreate,
    ) -> ActionStep:
        """
        Add an action step to a goal.

        Args:
            user_id: User ID who owns the goal
            goal_id: Goal ID
            step_create: Step creation data

        Returns:
            Created action step (not completed)

        Raises:
            ValueError: If goal not found
        """
        await self.goal_service.get_owned_goal_doc(user_id, goal_id)

        now = datetime.utcnow()
        step_doc = {
            "goal_id": goal_id,
            "user_id": user_id,
            "title": step_create.title,
            "completed": False,
            "completed_date": None,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.action_steps.insert_one(step_doc)
        step_doc["_id"] = result.inserted_id

        # A new open step lowers the completed share
        await self.goal_service.recalculate_progress(user_id, goal_id)

        return doc_to_action_step(step_doc)

    async def list_steps(self, user_id: str, goal_id: str) -> list[ActionStep]:
        """
        List a goal's action steps in creation order.

        Raises:
            ValueError: If goal not found
        """
        await self.goal_service.get_owned_goal_doc(user_id, goal_id)

        cursor = self.action_steps.find({"goal_id": goal_id}, sort=[("created_at", 1)])
        step_docs = await cursor.to_list(length=None)

        return [doc_to_action_step(doc) for doc in step_docs]

    async def update_step(
        self,
        user_id: str,
        step_id: str,
        step_update: ActionStepUpdate,
    ) -> ActionStep:
        """
        Update an action step's title and/or completion.

        Args:
            user_id: User ID
            step_id: Action step ID
            step_update: Update data

        Returns:
            Updated action step

        Raises:
            ValueError: If step not found
        """
        existing = await self._get_owned_step_doc(user_id, step_id)

        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        if step_update.title is not None:
            update_doc["title"] = step_update.title
        if step_update.completed is not None:
            update_doc["completed"] = step_update.completed
            update_doc["completed_date"] = (
                to_datetime(current_date()) if step_update.completed else None
            )

        updated_doc = await self.action_steps.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        if step_update.completed is not None:
            await self.goal_service.recalculate_progress(user_id, existing["goal_id"])

        return doc_to_action_step(updated_doc)

    async def delete_step(self, user_id: str, step_id: str) -> dict:
        """
        Delete an action step and recalculate the goal's progress.

        Returns:
            Dictionary with deleted_count and the goal's new progress

        Raises:
            ValueError: If step not found
        """
        existing = await self._get_owned_step_doc(user_id, step_id)

        result = await self.action_steps.delete_one({"_id": existing["_id"], "user_id": user_id})
        progress = await self.goal_service.recalculate_progress(user_id, existing["goal_id"])

        return {"deleted_count": result.deleted_count, "progress": progress}
