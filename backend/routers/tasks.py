"""
Task management API endpoints.

CRUD over the signed-in user's tasks, delegating validation, priority
derivation and persistence to the TaskAgent.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from backend.dependencies import check_agent_response, get_current_user_id, get_task_agent
from backend.schemas import (
    SuccessResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from organizer.agents import TaskAgent

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def row_to_task_response(row: dict) -> TaskResponse:
    """Convert database row to TaskResponse schema."""
    return TaskResponse(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        description=row.get("description"),
        type=row["type"],
        due_date=row["due_date"],
        priority=row.get("priority", 50),
        estimated_hours=row.get("estimated_hours"),
        is_completed=int(row.get("is_completed") or 0),
        completed_at=row.get("completed_at"),
        created_at=row.get("created_at", ""),
        updated_at=row.get("updated_at", ""),
    )


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    status: Optional[str] = Query(None, description="all, active or completed"),
    user_id: str = Depends(get_current_user_id),
    agent: TaskAgent = Depends(get_task_agent),
):
    """List tasks, highest priority first, then earliest due date."""
    data = check_agent_response(
        agent.process("list_tasks", {"user_id": user_id, "status": status})
    )
    return [row_to_task_response(t) for t in data.get("tasks", [])]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    user_id: str = Depends(get_current_user_id),
    agent: TaskAgent = Depends(get_task_agent),
):
    """Get a single task by ID."""
    data = check_agent_response(
        agent.process("get_task", {"user_id": user_id, "task_id": task_id})
    )
    return row_to_task_response(data["task"])


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    task: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    agent: TaskAgent = Depends(get_task_agent),
):
    """
    Create a new task.

    Priority is computed from the due date and type.
    """
    context = task.model_dump()
    context["type"] = task.type.value
    context["user_id"] = user_id

    data = check_agent_response(agent.process("add_task", context))
    return row_to_task_response(data["task"])


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    updates: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    agent: TaskAgent = Depends(get_task_agent),
):
    """
    Partially update a task.

    Changing due_date or type recomputes priority. Setting is_completed
    stamps or clears completed_at.
    """
    context = updates.model_dump(exclude_unset=True)
    if updates.type is not None:
        context["type"] = updates.type.value
    context.update({"user_id": user_id, "task_id": task_id})

    data = check_agent_response(agent.process("update_task", context))
    return row_to_task_response(data["task"])


@router.delete("/{task_id}", response_model=SuccessResponse)
async def delete_task(
    task_id: int,
    user_id: str = Depends(get_current_user_id),
    agent: TaskAgent = Depends(get_task_agent),
):
    """Permanently delete a task."""
    check_agent_response(
        agent.process("delete_task", {"user_id": user_id, "task_id": task_id})
    )
    return SuccessResponse()
