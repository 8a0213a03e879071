"""Tests for GoalService."""
import pytest
from datetime import date, datetime
from unittest.mock import MagicMock
from bson import ObjectId

from tests.mocks import make_collection, make_db


TODAY = date(2025, 1, 21)


def goal_doc(goal_id=None, **overrides):
    doc = {
        "_id": goal_id or ObjectId(),
        "user_id": "user123",
        "title": "Run a marathon",
        "description": "Sub 4 hours",
        "target_date": datetime(2025, 4, 27),
        "progress": 0,
        "created_at": datetime(2025, 1, 1),
        "updated_at": datetime(2025, 1, 1),
    }
    doc.update(overrides)
    return doc


def step_doc(goal_id, title, completed=False):
    return {
        "_id": ObjectId(),
        "goal_id": goal_id,
        "user_id": "user123",
        "title": title,
        "completed": completed,
        "completed_date": datetime(2025, 1, 10) if completed else None,
        "created_at": datetime(2025, 1, 2),
        "updated_at": datetime(2025, 1, 2),
    }


def date_doc(goal_id, day):
    return {
        "_id": ObjectId(),
        "goal_id": goal_id,
        "user_id": "user123",
        "completed_date": day,
        "created_at": datetime(2025, 1, 2),
    }


@pytest.mark.asyncio
class TestGoalServiceCreate:
    """Tests for creating goals."""

    async def test_create_goal_success(self):
        """Test successful goal creation."""
        from app.services.goal_service import GoalService
        from app.models.goal import GoalCreate

        goals = make_collection()
        goals.insert_one.return_value = MagicMock(inserted_id=ObjectId())

        service = GoalService(make_db(goals=goals))
        goal = await service.create_goal(
            user_id="user123",
            goal_create=GoalCreate(title="Run a marathon", target_date=date(2025, 4, 27)),
        )

        assert goal.title == "Run a marathon"
        assert goal.progress == 0
        assert goal.target_date == date(2025, 4, 27)

        inserted = goals.insert_one.call_args[0][0]
        assert inserted["target_date"] == datetime(2025, 4, 27)
        assert inserted["user_id"] == "user123"

    async def test_create_goal_requires_title(self):
        """Test that an empty title is rejected by the model."""
        from pydantic import ValidationError
        from app.models.goal import GoalCreate

        with pytest.raises(ValidationError):
            GoalCreate(title="")


@pytest.mark.asyncio
class TestGoalServiceGet:
    """Tests for fetching goals with stats."""

    async def test_get_goal_with_stats(self):
        """Test goal detail carries steps, dates and computed stats."""
        from app.services.goal_service import GoalService

        oid = ObjectId()
        gid = str(oid)
        goals = make_collection()
        goals.find_one.return_value = goal_doc(oid, progress=67)
        steps = make_collection([[
            step_doc(gid, "Buy shoes", completed=True),
            step_doc(gid, "Register", completed=True),
            step_doc(gid, "Long run"),
        ]])
        dates = make_collection([[
            date_doc(gid, "2025-01-20"),
            date_doc(gid, "2025-01-15"),
            date_doc(gid, "2025-01-16"),
        ]])

        service = GoalService(make_db(goals=goals, action_steps=steps, completed_dates=dates))
        goal = await service.get_goal("user123", gid, today=TODAY)

        assert goal.progress == 67
        assert goal.stats.completed_steps == 2
        assert goal.stats.total_steps == 3
        assert goal.stats.longest_streak == 2
        assert goal.stats.current_streak == 1
        assert goal.stats.marked_today is False
        assert goal.stats.days_until_target == 96
        assert [d.completed_date for d in goal.completed_dates] == [
            date(2025, 1, 15), date(2025, 1, 16), date(2025, 1, 20),
        ]

    async def test_get_goal_not_found(self):
        """Test getting a goal that doesn't exist."""
        from app.services.goal_service import GoalService

        goals = make_collection()
        goals.find_one.return_value = None

        service = GoalService(make_db(goals=goals))

        with pytest.raises(ValueError, match="Goal not found"):
            await service.get_goal("user123", str(ObjectId()))

    async def test_get_goal_invalid_id(self):
        """Test malformed goal IDs are rejected."""
        from app.services.goal_service import GoalService

        service = GoalService(make_db())

        with pytest.raises(ValueError, match="Invalid goal ID format"):
            await service.get_goal("user123", "not-an-id")

    async def test_get_goal_scoped_to_user(self):
        """Test the lookup filters on user_id."""
        from app.services.goal_service import GoalService

        goals = make_collection()
        goals.find_one.return_value = None
        service = GoalService(make_db(goals=goals))

        with pytest.raises(ValueError):
            await service.get_goal("someone-else", str(ObjectId()))

        assert goals.find_one.call_args[0][0]["user_id"] == "someone-else"


@pytest.mark.asyncio
class TestGoalServiceList:
    """Tests for listing goals."""

    async def test_list_goals_empty(self):
        """Test listing when the user has no goals."""
        from app.services.goal_service import GoalService

        steps = make_collection()
        service = GoalService(make_db(action_steps=steps))

        assert await service.list_goals("user123", today=TODAY) == []
        steps.find.assert_not_called()

    async def test_list_goals_groups_children(self):
        """Test steps and dates are attached to the right goal."""
        from app.services.goal_service import GoalService

        first, second = ObjectId(), ObjectId()
        goals = make_collection([[goal_doc(first, title="A"), goal_doc(second, title="B")]])
        steps = make_collection([[step_doc(str(first), "a1", completed=True)]])
        dates = make_collection([[
            date_doc(str(second), "2025-01-21"),
            date_doc(str(second), "2025-01-20"),
        ]])

        service = GoalService(make_db(goals=goals, action_steps=steps, completed_dates=dates))
        result = await service.list_goals("user123", today=TODAY)

        assert [g.title for g in result] == ["A", "B"]
        assert result[0].progress == 100
        assert result[0].stats.current_streak == 0
        assert result[1].progress == 0
        assert result[1].stats.current_streak == 2
        assert result[1].stats.marked_today is True

        step_query = steps.find.call_args[0][0]
        assert step_query["goal_id"]["$in"] == [str(first), str(second)]


@pytest.mark.asyncio
class TestGoalServiceUpdate:
    """Tests for updating goals."""

    async def test_update_goal_fields(self):
        """Test updating title and clearing target date."""
        from app.services.goal_service import GoalService
        from app.models.goal import GoalUpdate

        oid = ObjectId()
        goals = make_collection()
        goals.find_one.return_value = goal_doc(oid)
        goals.find_one_and_update.return_value = goal_doc(oid, title="Run a half marathon", target_date=None)

        service = GoalService(make_db(goals=goals))
        goal = await service.update_goal(
            "user123",
            str(oid),
            GoalUpdate(title="Run a half marathon", target_date=None),
        )

        assert goal.title == "Run a half marathon"
        assert goal.target_date is None
        update = goals.find_one_and_update.call_args[0][1]["$set"]
        assert update["title"] == "Run a half marathon"
        assert update["target_date"] is None
        assert "description" not in update
        assert "progress" not in update

    async def test_update_goal_not_found(self):
        from app.services.goal_service import GoalService
        from app.models.goal import GoalUpdate

        goals = make_collection()
        goals.find_one.return_value = None
        service = GoalService(make_db(goals=goals))

        with pytest.raises(ValueError, match="Goal not found"):
            await service.update_goal("user123", str(ObjectId()), GoalUpdate(title="X"))


@pytest.mark.asyncio
class TestGoalServiceDelete:
    """Tests for deleting goals."""

    async def test_delete_goal_cascades(self):
        """Test deleting a goal removes its steps and dates."""
        from app.services.goal_service import GoalService

        oid = ObjectId()
        goals = make_collection()
        goals.find_one.return_value = goal_doc(oid)
        goals.delete_one.return_value = MagicMock(deleted_count=1)
        steps = make_collection()
        steps.delete_many.return_value = MagicMock(deleted_count=3)
        dates = make_collection()
        dates.delete_many.return_value = MagicMock(deleted_count=5)

        service = GoalService(make_db(goals=goals, action_steps=steps, completed_dates=dates))
        result = await service.delete_goal("user123", str(oid))

        assert result == {
            "deleted_count": 1,
            "action_steps_deleted": 3,
            "completed_dates_deleted": 5,
        }
        steps.delete_many.assert_awaited_once_with({"goal_id": str(oid)})
        dates.delete_many.assert_awaited_once_with({"goal_id": str(oid)})

    async def test_delete_goal_not_found(self):
        from app.services.goal_service import GoalService

        goals = make_collection()
        goals.find_one.return_value = None
        service = GoalService(make_db(goals=goals))

        with pytest.raises(ValueError, match="Goal not found"):
            await service.delete_goal("user123", str(ObjectId()))


@pytest.mark.asyncio
class TestGoalServiceProgress:
    """Tests for progress recalculation."""

    async def test_recalculate_progress(self):
        from app.services.goal_service import GoalService

        oid = ObjectId()
        goals = make_collection()
        goals.find_one.return_value = goal_doc(oid)
        steps = make_collection()
        steps.count_documents.side_effect = [3, 2]

        service = GoalService(make_db(goals=goals, action_steps=steps))
        progress = await service.recalculate_progress("user123", str(oid))

        assert progress == 67
        assert goals.update_one.call_args[0][1]["$set"]["progress"] == 67

    async def test_recalculate_progress_without_steps_is_zero(self):
        from app.services.goal_service import GoalService

        oid = ObjectId()
        goals = make_collection()
        goals.find_one.return_value = goal_doc(oid, progress=50)
        steps = make_collection()
        steps.count_documents.side_effect = [0, 0]

        service = GoalService(make_db(goals=goals, action_steps=steps))

        assert await service.recalculate_progress("user123", str(oid)) == 0
        assert goals.update_one.call_args[0][1]["$set"]["progress"] == 0


@pytest.mark.asyncio
class TestGoalServiceDashboard:
    """Tests for dashboard aggregates."""

    async def test_dashboard_stats(self):
        from app.services.goal_service import GoalService

        first, second = ObjectId(), ObjectId()
        goals = make_collection([[goal_doc(first), goal_doc(second)]])
        steps = make_collection([[
            step_doc(str(first), "a", completed=True),
            step_doc(str(first), "b"),
            step_doc(str(second), "c"),
        ]])
        dates = make_collection([[
            date_doc(str(first), "2025-01-20"),
            date_doc(str(second), "2025-01-01"),
            date_doc(str(second), "2025-01-02"),
            date_doc(str(second), "2025-01-03"),
        ]])

        service = GoalService(make_db(goals=goals, action_steps=steps, completed_dates=dates))
        stats = await service.get_dashboard_stats("user123", today=TODAY)

        assert stats.total_goals == 2
        assert stats.completed_actions == 1
        assert stats.total_actions == 3
        assert stats.average_progress == 25
        assert stats.best_current_streak == 1
        assert stats.longest_streak == 3

    async def test_dashboard_stats_no_goals(self):
        from app.services.goal_service import GoalService

        service = GoalService(make_db())
        stats = await service.get_dashboard_stats("user123", today=TODAY)

        assert stats.total_goals == 0
        assert stats.average_progress == 0
        assert stats.longest_streak == 0
