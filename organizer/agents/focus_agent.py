"""
Focus Agent for Smart Student Organizer
Logs completed Pomodoro-style focus blocks and lists recent ones.
"""

from typing import Any, Dict, List

from .base_agent import BaseAgent, AgentResponse
from ..core.models import format_timestamp

RECENT_SESSION_LIMIT = 100


class FocusAgent(BaseAgent):
    """
    Specialized agent for focus sessions.

    Handles intents:
    - log_session: Record a finished focus block for today
    - list_sessions: Most recent sessions, newest first
    """

    INTENTS = ["log_session", "list_sessions"]

    def __init__(self, db, config):
        super().__init__(db, config, "focus")

    def get_supported_intents(self) -> List[str]:
        return self.INTENTS

    def process(self, intent: str, context: Dict[str, Any]) -> AgentResponse:
        """
        Process a focus-session intent.

        Args:
            intent: log_session or list_sessions
            context: Request parameters including ``user_id``

        Returns:
            AgentResponse with operation result
        """
        return self.dispatch(intent, context, {
            "log_session": self._handle_log_session,
            "list_sessions": self._handle_list_sessions,
        })

    def _handle_log_session(self, context: Dict[str, Any]) -> AgentResponse:
        """
        Record a focus session dated today (UTC).

        Context params:
            duration_minutes (int): Positive length of the session
            task_id (int, optional): Task the time was spent on; must be
                one of the user's tasks
        """
        missing = self.validate_required_params(context, ["duration_minutes"])
        if missing:
            return missing

        try:
            duration = int(context["duration_minutes"])
        except (TypeError, ValueError):
            return AgentResponse.error(f"Invalid duration: {context['duration_minutes']}")
        if duration <= 0:
            return AgentResponse.error("Duration must be a positive number of minutes")

        user_id = context["user_id"]
        task_id = context.get("task_id")
        if task_id is not None:
            owned = self.db.execute_one(
                "SELECT id FROM tasks WHERE id = ? AND user_id = ?",
                (task_id, user_id)
            )
            if not owned:
                return AgentResponse.not_found("Task not found")

        now = self.get_now(context)
        timestamp = format_timestamp(now)
        session_id = self.db.execute_write(
            """
            INSERT INTO focus_sessions (
                user_id, task_id, duration_minutes, session_date, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (user_id, task_id, duration, now.date().isoformat(), timestamp, timestamp)
        )
        session = self.db.row_to_dict(self.db.execute_one(
            "SELECT * FROM focus_sessions WHERE id = ?", (session_id,)
        ))

        self.log_action("session_logged", {"session_id": session_id, "minutes": duration})

        return AgentResponse.ok(
            message=f"Logged {duration} minute focus session",
            data={"session": session},
        )

    def _handle_list_sessions(self, context: Dict[str, Any]) -> AgentResponse:
        rows = self.db.execute(
            """
            SELECT * FROM focus_sessions
            WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
            LIMIT ?
            """,
            (context["user_id"], RECENT_SESSION_LIMIT)
        )
        sessions = self.db.rows_to_dicts(rows)
        return AgentResponse.ok(
            message=f"Found {len(sessions)} session(s)",
            data={"sessions": sessions, "count": len(sessions)},
        )
