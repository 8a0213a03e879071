"""Derive display values for a goal from its steps and completion history."""
from datetime import date
from typing import Iterable, Optional

from app.models.action_step import ActionStep
from app.models.completed_date import CompletedDate
from app.models.goal import DashboardStats, GoalDetail, GoalStats
from app.utils.dates import format_relative_date
from app.utils.streaks import (
    calculate_current_streak,
    calculate_longest_streak,
    calculate_progress,
    days_until_target,
    is_marked_today,
    rounded_div,
)


def compute_goal_stats(
    action_steps: Iterable[ActionStep],
    completed_dates: Iterable[CompletedDate],
    target_date: Optional[date],
    today: date,
) -> GoalStats:
    """Compute streaks, step counts and target distance as of ``today``."""
    steps = list(action_steps)
    days = [record.completed_date for record in completed_dates]

    return GoalStats(
        current_streak=calculate_current_streak(days, today=today),
        longest_streak=calculate_longest_streak(days),
        marked_today=is_marked_today(days, today=today),
        completed_steps=sum(1 for step in steps if step.completed),
        total_steps=len(steps),
        days_until_target=days_until_target(target_date, today=today) if target_date else None,
        target_label=format_relative_date(target_date, today=today) if target_date else None,
    )


def refresh_goal(goal: GoalDetail, today: date) -> GoalDetail:
    """Recompute ``progress`` and ``stats`` in place from the goal's own data."""
    goal.stats = compute_goal_stats(
        goal.action_steps,
        goal.completed_dates,
        goal.target_date,
        today,
    )
    goal.progress = calculate_progress(goal.stats.completed_steps, goal.stats.total_steps)
    return goal


def compute_dashboard_stats(goals: list[GoalDetail]) -> DashboardStats:
    """Aggregate totals across goals whose stats are already computed."""
    return DashboardStats(
        total_goals=len(goals),
        completed_actions=sum(goal.stats.completed_steps for goal in goals),
        total_actions=sum(goal.stats.total_steps for goal in goals),
        average_progress=rounded_div(sum(goal.progress for goal in goals), len(goals)),
        best_current_streak=max((goal.stats.current_streak for goal in goals), default=0),
        longest_streak=max((goal.stats.longest_streak for goal in goals), default=0),
    )
