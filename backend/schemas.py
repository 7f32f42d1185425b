"""
Pydantic schemas for API request/response validation.

Row-shaped responses (tasks, focus sessions) keep the database column
names. Stats and alerts use the camelCase keys the web client reads.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from organizer.core.models import TaskType


# =============================================================================
# Base Response Schemas
# =============================================================================

class SuccessResponse(BaseModel):
    """Bare acknowledgement."""
    success: bool = True


class ErrorResponse(BaseModel):
    """Error response for API errors."""
    detail: str


# =============================================================================
# Auth Schemas
# =============================================================================

class SessionCreate(BaseModel):
    """OAuth authorization code returned to the web client."""
    code: Optional[str] = None


class RedirectUrlResponse(BaseModel):
    redirectUrl: str


# =============================================================================
# Task Schemas
# =============================================================================

class TaskCreate(BaseModel):
    """
    Request body for creating a task.

    There is no priority field: priority is always derived server side and
    any client-supplied value is ignored.
    """
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    type: TaskType
    due_date: str
    estimated_hours: Optional[float] = Field(default=None, gt=0)


class TaskUpdate(BaseModel):
    """Request body for a partial task update."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    type: Optional[TaskType] = None
    due_date: Optional[str] = None
    estimated_hours: Optional[float] = Field(default=None, gt=0)
    is_completed: Optional[bool] = None


class TaskResponse(BaseModel):
    """Task row returned from API."""
    id: int
    user_id: str
    title: str
    description: Optional[str] = None
    type: str
    due_date: str
    priority: int
    estimated_hours: Optional[float] = None
    is_completed: int
    completed_at: Optional[str] = None
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True


# =============================================================================
# Focus Session Schemas
# =============================================================================

class FocusSessionCreate(BaseModel):
    """Request body for logging a finished focus block."""
    task_id: Optional[int] = None
    duration_minutes: int = Field(..., gt=0)


class FocusSessionResponse(BaseModel):
    id: int
    user_id: str
    task_id: Optional[int] = None
    duration_minutes: int
    session_date: str
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True


# =============================================================================
# Analytics Schemas
# =============================================================================

class StatsResponse(BaseModel):
    """Counts behind the four stats cards."""
    total_tasks: int = Field(..., alias="totalTasks")
    completed_tasks: int = Field(..., alias="completedTasks")
    overdue_tasks: int = Field(..., alias="overdueTasks")
    today_focus_minutes: int = Field(..., alias="todayFocusMinutes")

    class Config:
        populate_by_name = True


class AlertResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    priority: str
    task_id: Optional[int] = Field(default=None, alias="taskId")

    class Config:
        populate_by_name = True


class AlertListResponse(BaseModel):
    alerts: List[AlertResponse]
    total: int


class DashboardResponse(BaseModel):
    """Everything the dashboard page renders, in one round trip."""
    generated_at: datetime
    greeting: str
    tasks: List[TaskResponse]
    stats: StatsResponse
    alerts: List[AlertResponse]
    top_priorities: List[TaskResponse] = Field(default_factory=list)


UserResponse = Dict[str, Any]
