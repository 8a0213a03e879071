"""Tests for Pydantic models."""
import pytest
from datetime import date, datetime
from pydantic import ValidationError


class TestGoalModel:
    """Tests for Goal models."""

    def test_goal_create_minimal(self):
        from app.models.goal import GoalCreate

        goal = GoalCreate(title="Learn to swim")

        assert goal.description is None
        assert goal.target_date is None

    def test_goal_create_empty_title(self):
        from app.models.goal import GoalCreate

        with pytest.raises(ValidationError):
            GoalCreate(title="")

    def test_goal_update_has_no_progress(self):
        from app.models.goal import GoalUpdate

        assert "progress" not in GoalUpdate.model_fields

    def test_goal_progress_bounds(self):
        from app.models.goal import Goal

        with pytest.raises(ValidationError):
            Goal(
                _id="g1",
                user_id="user123",
                title="X",
                progress=101,
                created_at=datetime.now(),
                updated_at=datetime.now(),
            )

    def test_goal_serializes_id(self):
        from app.models.goal import Goal

        goal = Goal(
            _id="g1",
            user_id="user123",
            title="X",
            created_at=datetime.now(),
            updated_at=datetime.now(),
        )

        assert goal.model_dump(by_alias=True)["id"] == "g1"

    def test_goal_detail_defaults(self):
        from app.models.goal import GoalDetail

        detail = GoalDetail(
            id="g1",
            user_id="user123",
            title="X",
            created_at=datetime.now(),
            updated_at=datetime.now(),
        )

        assert detail.action_steps == []
        assert detail.completed_dates == []
        assert detail.stats.current_streak == 0


class TestActionStepModel:
    """Tests for ActionStep models."""

    def test_step_defaults(self):
        from app.models.action_step import ActionStep

        step = ActionStep(
            _id="s1",
            goal_id="g1",
            user_id="user123",
            title="Buy goggles",
            created_at=datetime.now(),
            updated_at=datetime.now(),
        )

        assert step.completed is False
        assert step.completed_date is None

    def test_step_update_partial(self):
        from app.models.action_step import ActionStepUpdate

        update = ActionStepUpdate(completed=True)

        assert update.title is None
        assert update.completed is True


class TestCompletedDateModel:
    """Tests for CompletedDate models."""

    def test_parses_iso_day(self):
        from app.models.completed_date import CompletedDate

        record = CompletedDate(
            _id="d1",
            goal_id="g1",
            user_id="user123",
            completed_date="2025-01-15",
            created_at=datetime.now(),
        )

        assert record.completed_date == date(2025, 1, 15)

    def test_create_defaults_to_none(self):
        from app.models.completed_date import CompletedDateCreate

        assert CompletedDateCreate().completed_date is None
