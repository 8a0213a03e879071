"""Async API client that keeps a local dashboard snapshot in sync."""
from datetime import date
from typing import Optional

import httpx

from app.models.action_step import ActionStep
from app.models.completed_date import CompletedDate
from app.models.goal import DashboardStats, GoalDetail
from app.services.goal_stats import compute_dashboard_stats, refresh_goal
from app.utils.dates import today_in
from app.utils.optimistic import (
    MarkCompletedDate,
    ToggleActionStep,
    UnmarkCompletedDate,
    run_optimistic,
)


class CommandCentreClient:
    """
    Client for the Command Centre API.

    Holds the user's goals locally. Step toggles and daily check-ins are
    applied to the snapshot first and rolled back if the server rejects them.
    "Today" is resolved once when the client is created.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timezone: str = "UTC",
        today: Optional[date] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.headers = {"Authorization": f"Bearer {token}"}
        self.today = today or today_in(timezone)
        self.http = http_client or httpx.AsyncClient(base_url=base_url, timeout=30.0)
        self.goals: dict[str, GoalDetail] = {}

    async def __aenter__(self) -> "CommandCentreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self.http.request(method, url, headers=self.headers, **kwargs)
        response.raise_for_status()
        return response

    def get_goal(self, goal_id: str) -> GoalDetail:
        """Return a goal from the local snapshot."""
        try:
            return self.goals[goal_id]
        except KeyError:
            raise ValueError("Goal not found")

    async def load_goals(self) -> list[GoalDetail]:
        """Replace the local snapshot with the server's goals."""
        response = await self._request("GET", "/goals")
        goals = [refresh_goal(GoalDetail.model_validate(item), self.today) for item in response.json()]
        self.goals = {goal.id: goal for goal in goals}
        return goals

    def dashboard_stats(self) -> DashboardStats:
        """Aggregate stats computed locally from the snapshot."""
        return compute_dashboard_stats(list(self.goals.values()))

    async def toggle_step(self, goal_id: str, step_id: str) -> ActionStep:
        """Flip an action step's completion, optimistically."""
        goal = self.get_goal(goal_id)
        command = ToggleActionStep(step_id, today=self.today)

        async def write() -> ActionStep:
            response = await self._request(
                "PATCH",
                f"/steps/{step_id}",
                json={"completed": command.completed},
            )
            return ActionStep.model_validate(response.json())

        return await run_optimistic(goal, command, write)

    async def mark_done(self, goal_id: str, day: Optional[date] = None) -> CompletedDate:
        """Check in on a goal for a day (today by default), optimistically."""
        goal = self.get_goal(goal_id)
        day = day or self.today
        command = MarkCompletedDate(day, today=self.today)

        async def write() -> CompletedDate:
            response = await self._request(
                "POST",
                f"/goals/{goal_id}/completed-dates",
                json={"completed_date": day.isoformat()},
            )
            return CompletedDate.model_validate(response.json())

        return await run_optimistic(goal, command, write)

    async def unmark_done(self, goal_id: str, day: Optional[date] = None) -> dict:
        """Remove a check-in for a day (today by default), optimistically."""
        goal = self.get_goal(goal_id)
        day = day or self.today
        command = UnmarkCompletedDate(day, today=self.today)

        async def write() -> dict:
            response = await self._request(
                "DELETE",
                f"/goals/{goal_id}/completed-dates/{day.isoformat()}",
            )
            return response.json()

        return await run_optimistic(goal, command, write)

    async def ask(self, message: str) -> str:
        """Ask the goals assistant a question."""
        response = await self._request("POST", "/chat", json={"message": message})
        return response.json()["response"]
