"""
Unit tests for the TaskAgent.
Tests intent handling, validation, priority derivation, ownership scoping
and error handling against a real temporary database.
"""

import json
import logging
import pytest
from datetime import timedelta
from unittest.mock import MagicMock

from organizer.agents.task_agent import TaskAgent
from organizer.agents.base_agent import AgentResponse
from organizer.core.models import format_timestamp


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def task_agent(temp_db, mock_config):
    """Create a TaskAgent instance with test database and config."""
    return TaskAgent(temp_db, mock_config)


@pytest.fixture
def add(task_agent, now):
    """Create a task through the agent and return the stored row."""

    def _add(title="Essay", task_type="assignment", due_in=timedelta(days=5),
             user_id="user-1", **extra):
        response = task_agent.process("add_task", {
            "user_id": user_id,
            "title": title,
            "type": task_type,
            "due_date": format_timestamp(now + due_in),
            "now": now,
            **extra,
        })
        assert response.success, response.message
        return response.data["task"]

    return _add


# =============================================================================
# Test Agent Initialization and Basic Properties
# =============================================================================

class TestTaskAgentInit:
    """Tests for TaskAgent initialization."""

    def test_agent_name_and_logger(self, task_agent):
        assert task_agent.name == "task"
        assert task_agent.logger.name == "agent.task"

    def test_get_supported_intents(self, task_agent):
        intents = task_agent.get_supported_intents()
        for intent in ["add_task", "list_tasks", "get_task", "update_task",
                       "complete_task", "reopen_task", "delete_task"]:
            assert intent in intents

    def test_can_handle(self, task_agent):
        assert task_agent.can_handle("add_task", {}) is True
        assert task_agent.can_handle("log_session", {}) is False

    def test_unknown_intent(self, task_agent):
        response = task_agent.process("fly_to_moon", {"user_id": "user-1"})
        assert response.success is False
        assert "Unknown intent" in response.message

    def test_user_id_required(self, task_agent):
        response = task_agent.process("list_tasks", {})
        assert response.success is False
        assert response.error_code == "invalid"
        assert "user_id" in response.message


# =============================================================================
# Test Task Creation
# =============================================================================

class TestAddTask:
    """Tests for add_task."""

    def test_creates_task_with_computed_priority(self, add):
        task = add(title="Midterm", task_type="exam", due_in=timedelta(days=2))

        assert task["title"] == "Midterm"
        assert task["type"] == "exam"
        assert task["priority"] == 100
        assert task["is_completed"] == 0
        assert task["completed_at"] is None
        assert task["user_id"] == "user-1"

    def test_36_hour_assignment(self, add):
        task = add(task_type="assignment", due_in=timedelta(hours=36), estimated_hours=8)
        assert task["priority"] == 90
        assert task["estimated_hours"] == 8

    def test_client_priority_is_ignored(self, add):
        task = add(task_type="other", due_in=timedelta(days=30), priority=99)
        assert task["priority"] == 50

    def test_timestamps_are_set(self, add, now):
        task = add()
        assert task["created_at"] == format_timestamp(now)
        assert task["updated_at"] == format_timestamp(now)

    def test_due_date_normalized_to_utc(self, task_agent, now):
        response = task_agent.process("add_task", {
            "user_id": "user-1",
            "title": "Quiz",
            "type": "exam",
            "due_date": "2025-03-12T10:00:00+02:00",
            "now": now,
        })
        assert response.data["task"]["due_date"] == "2025-03-12T08:00:00+00:00"

    @pytest.mark.parametrize("field,value", [
        ("title", ""),
        ("title", "x" * 201),
        ("type", "homework"),
        ("due_date", "someday"),
        ("estimated_hours", 0),
        ("estimated_hours", -2),
    ])
    def test_invalid_fields_rejected(self, task_agent, now, field, value):
        context = {
            "user_id": "user-1",
            "title": "Essay",
            "type": "assignment",
            "due_date": format_timestamp(now),
            "now": now,
        }
        context[field] = value
        response = task_agent.process("add_task", context)

        assert response.success is False
        assert response.error_code == "invalid"

    def test_missing_required_fields(self, task_agent):
        response = task_agent.process("add_task", {"user_id": "user-1", "title": "Essay"})
        assert response.success is False
        assert "type" in response.message
        assert "due_date" in response.message


# =============================================================================
# Test Listing and Lookup
# =============================================================================

class TestListAndGet:
    """Tests for list_tasks and get_task."""

    def test_list_orders_by_priority_then_due(self, task_agent, add):
        add(title="Reading", task_type="other", due_in=timedelta(days=20))
        add(title="Lab", task_type="assignment", due_in=timedelta(days=6))
        add(title="Essay", task_type="assignment", due_in=timedelta(days=5))

        response = task_agent.process("list_tasks", {"user_id": "user-1"})
        assert [t["title"] for t in response.data["tasks"]] == ["Essay", "Lab", "Reading"]

    def test_list_status_filter(self, task_agent, add, now):
        done = add(title="Done")
        add(title="Open")
        task_agent.process("complete_task", {"user_id": "user-1", "task_id": done["id"], "now": now})

        active = task_agent.process("list_tasks", {"user_id": "user-1", "status": "active"})
        completed = task_agent.process("list_tasks", {"user_id": "user-1", "status": "completed"})

        assert [t["title"] for t in active.data["tasks"]] == ["Open"]
        assert [t["title"] for t in completed.data["tasks"]] == ["Done"]

    def test_list_invalid_status(self, task_agent):
        response = task_agent.process("list_tasks", {"user_id": "user-1", "status": "later"})
        assert response.error_code == "invalid"

    def test_list_only_returns_own_tasks(self, task_agent, add):
        add(title="Mine")
        add(title="Theirs", user_id="user-2")

        response = task_agent.process("list_tasks", {"user_id": "user-1"})
        assert [t["title"] for t in response.data["tasks"]] == ["Mine"]

    def test_empty_list(self, task_agent):
        response = task_agent.process("list_tasks", {"user_id": "user-1"})
        assert response.success is True
        assert response.data == {"tasks": [], "count": 0}

    def test_get_task(self, task_agent, add):
        task = add(title="Essay")
        response = task_agent.process("get_task", {"user_id": "user-1", "task_id": task["id"]})
        assert response.data["task"]["title"] == "Essay"

    def test_get_other_users_task_is_not_found(self, task_agent, add):
        task = add(user_id="user-2")
        response = task_agent.process("get_task", {"user_id": "user-1", "task_id": task["id"]})
        assert response.success is False
        assert response.error_code == "not_found"


# =============================================================================
# Test Updates
# =============================================================================

class TestUpdateTask:
    """Tests for update_task, complete_task and reopen_task."""

    def test_title_update_keeps_priority(self, task_agent, add, now):
        task = add(task_type="other", due_in=timedelta(days=30))
        response = task_agent.process("update_task", {
            "user_id": "user-1", "task_id": task["id"], "title": "Renamed",
            "now": now + timedelta(days=25),
        })

        updated = response.data["task"]
        assert updated["title"] == "Renamed"
        assert updated["priority"] == task["priority"]

    def test_due_date_change_recomputes_priority(self, task_agent, add, now):
        task = add(task_type="assignment", due_in=timedelta(days=30))
        assert task["priority"] == 60

        response = task_agent.process("update_task", {
            "user_id": "user-1", "task_id": task["id"],
            "due_date": format_timestamp(now + timedelta(hours=12)), "now": now,
        })
        assert response.data["task"]["priority"] == 100

    def test_type_change_alone_recomputes_priority(self, task_agent, add, now):
        task = add(task_type="other", due_in=timedelta(days=5))
        assert task["priority"] == 70

        response = task_agent.process("update_task", {
            "user_id": "user-1", "task_id": task["id"], "type": "exam", "now": now,
        })
        assert response.data["task"]["priority"] == 100
        assert response.data["task"]["type"] == "exam"

    def test_complete_sets_and_reopen_clears_completed_at(self, task_agent, add, now):
        task = add()
        later = now + timedelta(hours=2)

        completed = task_agent.process("complete_task", {
            "user_id": "user-1", "task_id": task["id"], "now": later,
        }).data["task"]
        assert completed["is_completed"] == 1
        assert completed["completed_at"] == format_timestamp(later)
        assert completed["updated_at"] == format_timestamp(later)

        reopened = task_agent.process("reopen_task", {
            "user_id": "user-1", "task_id": task["id"], "now": later,
        }).data["task"]
        assert reopened["is_completed"] == 0
        assert reopened["completed_at"] is None

    def test_update_via_is_completed_flag(self, task_agent, add, now):
        task = add()
        response = task_agent.process("update_task", {
            "user_id": "user-1", "task_id": task["id"], "is_completed": True, "now": now,
        })
        assert response.data["task"]["is_completed"] == 1

    def test_update_bumps_updated_at_with_no_fields(self, task_agent, add, now):
        task = add()
        later = now + timedelta(minutes=5)
        response = task_agent.process("update_task", {
            "user_id": "user-1", "task_id": task["id"], "now": later,
        })
        assert response.data["task"]["updated_at"] == format_timestamp(later)

    def test_update_other_users_task_is_not_found(self, task_agent, add, temp_db):
        task = add(user_id="user-2", title="Theirs")
        response = task_agent.process("update_task", {
            "user_id": "user-1", "task_id": task["id"], "title": "Hijacked",
        })

        assert response.error_code == "not_found"
        row = temp_db.execute_one("SELECT title FROM tasks WHERE id = ?", (task["id"],))
        assert row["title"] == "Theirs"

    def test_invalid_update_rejected(self, task_agent, add):
        task = add()
        response = task_agent.process("update_task", {
            "user_id": "user-1", "task_id": task["id"], "type": "chore",
        })
        assert response.error_code == "invalid"


# =============================================================================
# Test Deletion
# =============================================================================

class TestDeleteTask:
    """Tests for delete_task."""

    def test_delete_is_permanent(self, task_agent, add, temp_db):
        task = add()
        response = task_agent.process("delete_task", {"user_id": "user-1", "task_id": task["id"]})

        assert response.success is True
        assert temp_db.count("tasks") == 0

    def test_delete_missing_task(self, task_agent):
        response = task_agent.process("delete_task", {"user_id": "user-1", "task_id": 999})
        assert response.error_code == "not_found"

    def test_delete_other_users_task(self, task_agent, add, temp_db):
        task = add(user_id="user-2")
        response = task_agent.process("delete_task", {"user_id": "user-1", "task_id": task["id"]})
        assert response.error_code == "not_found"
        assert temp_db.count("tasks") == 1


# =============================================================================
# Test Error Handling and Logging
# =============================================================================

class TestErrorHandling:
    """Tests for unexpected failures."""

    def test_database_error_becomes_internal(self, mock_config):
        db = MagicMock()
        db.execute.side_effect = RuntimeError("disk on fire")
        agent = TaskAgent(db, mock_config)

        response = agent.process("list_tasks", {"user_id": "user-1"})

        assert response.success is False
        assert response.error_code == "internal"
        assert "disk on fire" in response.message

    def test_log_action_emits_json(self, task_agent, caplog):
        with caplog.at_level(logging.INFO, logger="agent.task"):
            task_agent.process("list_tasks", {"user_id": "user-1"})

        agent_records = [r for r in caplog.records if r.name == "agent.task"]
        record = json.loads(agent_records[0].getMessage())
        assert record["agent"] == "task"
        assert record["action"] == "processing_list_tasks"


class TestAgentResponse:
    """Tests for the response factories."""

    def test_ok(self):
        response = AgentResponse.ok("done", data={"x": 1})
        assert response.success is True
        assert response.error_code is None

    def test_error_defaults_to_invalid(self):
        assert AgentResponse.error("bad").error_code == "invalid"

    def test_not_found(self):
        response = AgentResponse.not_found("gone")
        assert response.to_dict()["error_code"] == "not_found"
