"""
Unit tests for the FocusAgent.
"""

import pytest
from datetime import timedelta

from organizer.agents.focus_agent import FocusAgent


@pytest.fixture
def focus_agent(temp_db, mock_config):
    return FocusAgent(temp_db, mock_config)


class TestLogSession:
    """Tests for log_session."""

    def test_logs_session_for_today(self, focus_agent, now):
        response = focus_agent.process("log_session", {
            "user_id": "user-1", "duration_minutes": 25, "now": now,
        })

        assert response.success is True
        session = response.data["session"]
        assert session["duration_minutes"] == 25
        assert session["session_date"] == "2025-03-10"
        assert session["task_id"] is None
        assert session["user_id"] == "user-1"

    def test_links_owned_task(self, focus_agent, insert_task, now):
        task_id = insert_task(title="Essay")
        response = focus_agent.process("log_session", {
            "user_id": "user-1", "duration_minutes": 50, "task_id": task_id, "now": now,
        })
        assert response.data["session"]["task_id"] == task_id

    def test_foreign_task_is_not_found(self, focus_agent, insert_task, temp_db, now):
        task_id = insert_task(user_id="user-2")
        response = focus_agent.process("log_session", {
            "user_id": "user-1", "duration_minutes": 50, "task_id": task_id, "now": now,
        })

        assert response.error_code == "not_found"
        assert temp_db.count("focus_sessions") == 0

    @pytest.mark.parametrize("duration", [0, -25, "abc"])
    def test_invalid_duration(self, focus_agent, duration):
        response = focus_agent.process("log_session", {
            "user_id": "user-1", "duration_minutes": duration,
        })
        assert response.success is False
        assert response.error_code == "invalid"

    def test_duration_required(self, focus_agent):
        response = focus_agent.process("log_session", {"user_id": "user-1"})
        assert "duration_minutes" in response.message

    def test_session_survives_task_deletion(self, focus_agent, insert_task, temp_db, now):
        task_id = insert_task()
        focus_agent.process("log_session", {
            "user_id": "user-1", "duration_minutes": 25, "task_id": task_id, "now": now,
        })

        temp_db.execute_write("DELETE FROM tasks WHERE id = ?", (task_id,))

        row = temp_db.execute_one("SELECT task_id FROM focus_sessions")
        assert row["task_id"] is None


class TestListSessions:
    """Tests for list_sessions."""

    def test_newest_first(self, focus_agent, now):
        for minutes, offset in [(25, 0), (50, 2), (15, 1)]:
            focus_agent.process("log_session", {
                "user_id": "user-1",
                "duration_minutes": minutes,
                "now": now + timedelta(hours=offset),
            })

        response = focus_agent.process("list_sessions", {"user_id": "user-1"})

        assert response.data["count"] == 3
        assert [s["duration_minutes"] for s in response.data["sessions"]] == [50, 15, 25]

    def test_only_own_sessions(self, focus_agent, now):
        focus_agent.process("log_session", {"user_id": "user-2", "duration_minutes": 25, "now": now})
        response = focus_agent.process("list_sessions", {"user_id": "user-1"})
        assert response.data == {"sessions": [], "count": 0}

    def test_user_id_required(self, focus_agent):
        response = focus_agent.process("list_sessions", {})
        assert response.error_code == "invalid"
