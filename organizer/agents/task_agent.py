"""
Task Agent for Smart Student Organizer
Handles all task operations: create, list, get, update, complete, reopen
and delete. Every operation is scoped to the requesting user.

Priority is never accepted from callers. It is derived from due date and
type by ``calculate_priority`` whenever either of them is written.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from .base_agent import BaseAgent, AgentResponse
from ..core.models import TaskType, format_timestamp, parse_timestamp
from ..dashboard.prioritizer import calculate_priority

TITLE_MAX_LENGTH = 200

# Columns a caller may change through update_task
UPDATABLE_FIELDS = ("title", "description", "type", "due_date", "estimated_hours", "is_completed")

STATUS_FILTERS = {
    "all": "",
    "active": " AND is_completed = 0",
    "completed": " AND is_completed = 1",
}


class TaskAgent(BaseAgent):
    """
    Specialized agent for coursework tasks.

    Handles intents:
    - add_task: Create a task and compute its priority
    - list_tasks: List the user's tasks, optionally filtered by status
    - get_task: Fetch a single task
    - update_task: Partial update, recomputing priority when needed
    - complete_task / reopen_task: Toggle completion
    - delete_task: Hard delete
    """

    INTENTS = [
        "add_task",
        "list_tasks",
        "get_task",
        "update_task",
        "complete_task",
        "reopen_task",
        "delete_task",
    ]

    def __init__(self, db, config):
        """Initialize the Task Agent."""
        super().__init__(db, config, "task")

    def get_supported_intents(self) -> List[str]:
        """Return list of supported intents."""
        return self.INTENTS

    def process(self, intent: str, context: Dict[str, Any]) -> AgentResponse:
        """
        Process a task intent.

        Args:
            intent: One of the supported task intents
            context: Request parameters; ``user_id`` is always required and
                ``now`` may be passed to pin the current time

        Returns:
            AgentResponse with operation result
        """
        return self.dispatch(intent, context, {
            "add_task": self._handle_add_task,
            "list_tasks": self._handle_list_tasks,
            "get_task": self._handle_get_task,
            "update_task": self._handle_update_task,
            "complete_task": self._handle_complete_task,
            "reopen_task": self._handle_reopen_task,
            "delete_task": self._handle_delete_task,
        })

    # =========================================================================
    # Intent Handlers
    # =========================================================================

    def _handle_add_task(self, context: Dict[str, Any]) -> AgentResponse:
        """
        Handle task creation.

        Context params:
            user_id (str): Owner
            title (str): Task title, 1-200 characters
            type (str): assignment, project, exam or other
            due_date (str|datetime): When the task is due
            description (str, optional): Free text
            estimated_hours (float, optional): Positive effort estimate
        """
        missing = self.validate_required_params(context, ["title", "type", "due_date"])
        if missing:
            return missing

        fields, problem = self._clean_fields(context, UPDATABLE_FIELDS[:-1])
        if problem:
            return AgentResponse.error(problem)

        now = self.get_now(context)
        task_data = {
            "user_id": context["user_id"],
            "title": fields["title"],
            "description": fields.get("description"),
            "type": fields["type"],
            "due_date": fields["due_date"],
            "priority": calculate_priority(
                parse_timestamp(fields["due_date"]), fields["type"], now
            ),
            "estimated_hours": fields.get("estimated_hours"),
            "created_at": format_timestamp(now),
        }

        task_id = self._insert_task(task_data)
        created_task = self._get_task_by_id(task_id, context["user_id"])

        self.log_action("task_created", {"task_id": task_id, "priority": task_data["priority"]})

        return AgentResponse.ok(
            message=f"Task created: '{task_data['title']}'",
            data={"task_id": task_id, "task": created_task},
        )

    def _handle_list_tasks(self, context: Dict[str, Any]) -> AgentResponse:
        """
        List the user's tasks, highest priority first, then earliest due.

        Context params:
            status (str, optional): all (default), active or completed
        """
        status = context.get("status") or "all"
        if status not in STATUS_FILTERS:
            return AgentResponse.error(
                f"Invalid status '{status}'. Use one of: {', '.join(STATUS_FILTERS)}"
            )

        tasks = self._fetch_tasks(context["user_id"], status)
        if not tasks:
            return AgentResponse.ok(
                message="No tasks found",
                data={"tasks": [], "count": 0},
            )

        return AgentResponse.ok(
            message=f"Found {len(tasks)} task(s)",
            data={"tasks": tasks, "count": len(tasks)},
        )

    def _handle_get_task(self, context: Dict[str, Any]) -> AgentResponse:
        """Get a single task by ID."""
        missing = self.validate_required_params(context, ["task_id"])
        if missing:
            return missing

        task = self._get_task_by_id(context["task_id"], context["user_id"])
        if task:
            return AgentResponse.ok(
                message=f"Task: {task['title']}",
                data={"task": task},
            )
        return AgentResponse.not_found("Task not found")

    def _handle_update_task(self, context: Dict[str, Any]) -> AgentResponse:
        """
        Apply a partial update to a task.

        Context params:
            task_id (int): Task to update
            title, description, type, due_date, estimated_hours,
            is_completed: Any subset. Omitted (or None) fields are untouched.

        Priority is recomputed from the resulting due date and type whenever
        either one is supplied. ``completed_at`` follows ``is_completed``.
        ``updated_at`` is always bumped.
        """
        missing = self.validate_required_params(context, ["task_id"])
        if missing:
            return missing

        user_id = context["user_id"]
        task_id = context["task_id"]
        existing = self._get_task_by_id(task_id, user_id)
        if not existing:
            return AgentResponse.not_found("Task not found")

        fields, problem = self._clean_fields(context, UPDATABLE_FIELDS)
        if problem:
            return AgentResponse.error(problem)

        now = self.get_now(context)
        updates: Dict[str, Any] = dict(fields)

        if "due_date" in fields or "type" in fields:
            due_date = fields.get("due_date", existing["due_date"])
            task_type = fields.get("type", existing["type"])
            updates["priority"] = calculate_priority(parse_timestamp(due_date), task_type, now)

        if "is_completed" in fields:
            updates["is_completed"] = 1 if fields["is_completed"] else 0
            updates["completed_at"] = format_timestamp(now) if fields["is_completed"] else None

        updates["updated_at"] = format_timestamp(now)

        self._update_task(task_id, user_id, updates)
        task = self._get_task_by_id(task_id, user_id)

        self.log_action("task_updated", {"task_id": task_id, "fields": sorted(fields)})

        return AgentResponse.ok(
            message=f"Task {task_id} updated",
            data={"task": task, "updated_fields": sorted(updates)},
        )

    def _handle_complete_task(self, context: Dict[str, Any]) -> AgentResponse:
        """Mark a task as completed."""
        return self._set_completed(context, True)

    def _handle_reopen_task(self, context: Dict[str, Any]) -> AgentResponse:
        """Mark a completed task as open again."""
        return self._set_completed(context, False)

    def _handle_delete_task(self, context: Dict[str, Any]) -> AgentResponse:
        """Permanently delete a task."""
        missing = self.validate_required_params(context, ["task_id"])
        if missing:
            return missing

        task_id = context["task_id"]
        task = self._get_task_by_id(task_id, context["user_id"])
        if not task:
            return AgentResponse.not_found("Task not found")

        self.db.execute_write(
            "DELETE FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, context["user_id"])
        )
        self.log_action("task_deleted", {"task_id": task_id})

        return AgentResponse.ok(
            message=f"Deleted task: {task['title']}",
            data={"task_id": task_id},
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def _set_completed(self, context: Dict[str, Any], completed: bool) -> AgentResponse:
        scoped = {k: context[k] for k in ("user_id", "task_id", "now") if k in context}
        scoped["is_completed"] = completed
        return self._handle_update_task(scoped)

    def _clean_fields(self, context: Dict[str, Any],
                      allowed: Sequence[str]) -> Tuple[Dict[str, Any], Optional[str]]:
        """
        Validate and normalize the writable task fields present in context.

        Returns:
            (fields, problem): normalized values keyed by column, and an
            error message if any value is invalid
        """
        fields: Dict[str, Any] = {}

        for key in allowed:
            value = context.get(key)
            if value is None:
                continue

            if key == "title":
                title = str(value).strip()
                if not title or len(title) > TITLE_MAX_LENGTH:
                    return fields, f"Title must be 1-{TITLE_MAX_LENGTH} characters"
                fields["title"] = title
            elif key == "type":
                try:
                    fields["type"] = TaskType(value).value
                except ValueError:
                    valid = ", ".join(t.value for t in TaskType)
                    return fields, f"Invalid task type '{value}'. Use one of: {valid}"
            elif key == "due_date":
                try:
                    fields["due_date"] = format_timestamp(parse_timestamp(value))
                except (ValueError, OverflowError):
                    return fields, f"Invalid due date: {value}"
            elif key == "estimated_hours":
                try:
                    hours = float(value)
                except (TypeError, ValueError):
                    return fields, f"Invalid estimated hours: {value}"
                if hours <= 0:
                    return fields, "Estimated hours must be positive"
                fields["estimated_hours"] = hours
            elif key == "is_completed":
                fields["is_completed"] = bool(value)
            else:
                fields[key] = value

        return fields, None

    # =========================================================================
    # Database Helpers
    # =========================================================================

    def _insert_task(self, task_data: Dict[str, Any]) -> int:
        """Insert a new task and return its ID."""
        query = """
            INSERT INTO tasks (
                user_id, title, description, type, due_date, priority,
                estimated_hours, is_completed, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
        """
        params = (
            task_data["user_id"],
            task_data["title"],
            task_data.get("description"),
            task_data["type"],
            task_data["due_date"],
            task_data["priority"],
            task_data.get("estimated_hours"),
            task_data["created_at"],
            task_data["created_at"],
        )
        return self.db.execute_write(query, params)

    def _get_task_by_id(self, task_id: int, user_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single task owned by user_id."""
        row = self.db.execute_one(
            "SELECT * FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, user_id)
        )
        return self.db.row_to_dict(row)

    def _update_task(self, task_id: int, user_id: str, fields: Dict[str, Any]) -> bool:
        """Update specific columns of an owned task."""
        set_clause = ", ".join(f"{column} = ?" for column in fields)
        query = f"UPDATE tasks SET {set_clause} WHERE id = ? AND user_id = ?"
        params = tuple(fields.values()) + (task_id, user_id)
        return self.db.execute_write(query, params) > 0

    def _fetch_tasks(self, user_id: str, status: str = "all") -> List[Dict[str, Any]]:
        """Fetch the user's tasks in dashboard order."""
        query = (
            "SELECT * FROM tasks WHERE user_id = ?"
            + STATUS_FILTERS[status]
            + " ORDER BY priority DESC, due_date ASC"
        )
        return self.db.rows_to_dicts(self.db.execute(query, (user_id,)))
