"""
Optimistic updates as commands with undo.

A command changes a local ``GoalDetail`` snapshot immediately so the
dashboard can show the new progress and streak before the server answers.
``run_optimistic`` then performs the remote write; if it fails the command
puts the snapshot back exactly as it was.
"""
import logging
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

from app.models.action_step import ActionStep
from app.models.completed_date import CompletedDate
from app.models.goal import GoalDetail
from app.services.goal_stats import refresh_goal


logger = logging.getLogger(__name__)

T = TypeVar("T")

PENDING_ID = "pending"


class GoalCommand:
    """A reversible change to one goal snapshot."""

    def __init__(self, today: date):
        self.today = today

    def apply(self, goal: GoalDetail) -> None:
        raise NotImplementedError

    def undo(self, goal: GoalDetail) -> None:
        raise NotImplementedError

    def settle(self, goal: GoalDetail, result: Any) -> None:
        """Fold the server's answer into the snapshot after a successful write."""
        refresh_goal(goal, self.today)


class ToggleActionStep(GoalCommand):
    """Flip an action step between done and not done."""

    def __init__(self, step_id: str, today: date):
        super().__init__(today)
        self.step_id = step_id
        self.completed: Optional[bool] = None
        self._previous: Optional[tuple[bool, Optional[date]]] = None

    def _find(self, goal: GoalDetail) -> ActionStep:
        for step in goal.action_steps:
            if step.id == self.step_id:
                return step
        raise ValueError("Action step not found")

    def apply(self, goal: GoalDetail) -> None:
        step = self._find(goal)
        self._previous = (step.completed, step.completed_date)

        step.completed = not step.completed
        step.completed_date = self.today if step.completed else None
        self.completed = step.completed
        refresh_goal(goal, self.today)

    def undo(self, goal: GoalDetail) -> None:
        if self._previous is None:
            return
        step = self._find(goal)
        step.completed, step.completed_date = self._previous
        self._previous = None
        refresh_goal(goal, self.today)

    def settle(self, goal: GoalDetail, result: ActionStep) -> None:
        goal.action_steps = [
            result if step.id == self.step_id else step for step in goal.action_steps
        ]
        refresh_goal(goal, self.today)


class MarkCompletedDate(GoalCommand):
    """Record a check-in for a day; a no-op if the day is already recorded."""

    def __init__(self, day: date, today: date):
        super().__init__(today)
        self.day = day
        self._added: Optional[CompletedDate] = None

    def apply(self, goal: GoalDetail) -> None:
        if any(record.completed_date == self.day for record in goal.completed_dates):
            return

        self._added = CompletedDate(
            id=PENDING_ID,
            goal_id=goal.id,
            user_id=goal.user_id,
            completed_date=self.day,
            created_at=datetime.utcnow(),
        )
        goal.completed_dates = sorted(
            [*goal.completed_dates, self._added],
            key=lambda record: record.completed_date,
        )
        refresh_goal(goal, self.today)

    def undo(self, goal: GoalDetail) -> None:
        if self._added is None:
            return
        goal.completed_dates = [
            record for record in goal.completed_dates if record is not self._added
        ]
        self._added = None
        refresh_goal(goal, self.today)

    def settle(self, goal: GoalDetail, result: CompletedDate) -> None:
        if self._added is not None:
            goal.completed_dates = [
                result if record is self._added else record
                for record in goal.completed_dates
            ]
            self._added = None
        refresh_goal(goal, self.today)


class UnmarkCompletedDate(GoalCommand):
    """Remove the check-in for a day, if there is one."""

    def __init__(self, day: date, today: date):
        super().__init__(today)
        self.day = day
        self._removed: list[CompletedDate] = []

    def apply(self, goal: GoalDetail) -> None:
        self._removed = [
            record for record in goal.completed_dates if record.completed_date == self.day
        ]
        goal.completed_dates = [
            record for record in goal.completed_dates if record.completed_date != self.day
        ]
        refresh_goal(goal, self.today)

    def undo(self, goal: GoalDetail) -> None:
        if not self._removed:
            return
        goal.completed_dates = sorted(
            [*goal.completed_dates, *self._removed],
            key=lambda record: record.completed_date,
        )
        self._removed = []
        refresh_goal(goal, self.today)


async def run_optimistic(
    goal: GoalDetail,
    command: GoalCommand,
    remote_write: Callable[[], Awaitable[T]],
) -> T:
    """
    Apply ``command`` locally, then perform ``remote_write``.

    Args:
        goal: Local snapshot to change in place
        command: Reversible change to apply
        remote_write: Coroutine factory performing the authoritative write

    Returns:
        Whatever ``remote_write`` returned

    Raises:
        Exception: Anything ``remote_write`` raised, after the change is undone
    """
    command.apply(goal)
    try:
        result = await remote_write()
    except Exception:
        logger.warning(
            "Remote write failed, rolling back",
            extra={"goal_id": goal.id, "command": type(command).__name__},
        )
        command.undo(goal)
        raise

    command.settle(goal, result)
    return result
