"""
Analytics, smart alerts and dashboard API endpoints.

Stats are aggregated on request. Alerts are derived on request from the
current task list and stats, never stored; the client passes back the ids
it has dismissed.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from backend.dependencies import get_current_user_id, get_dashboard_aggregator
from backend.routers.tasks import row_to_task_response
from backend.schemas import (
    AlertListResponse,
    AlertResponse,
    DashboardResponse,
    StatsResponse,
)
from organizer.core.models import DailyStats, Task, format_timestamp
from organizer.dashboard.aggregator import DashboardAggregator
from organizer.dashboard.alerts import Alert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analytics"])


def _stats_response(stats: DailyStats) -> StatsResponse:
    return StatsResponse(
        total_tasks=stats.total_tasks,
        completed_tasks=stats.completed_tasks,
        overdue_tasks=stats.overdue_tasks,
        today_focus_minutes=stats.today_focus_minutes,
    )


def _alert_response(alert: Alert) -> AlertResponse:
    return AlertResponse(**alert.to_dict())


def _task_response(task: Task):
    """Task dataclass back to its row shape."""
    return row_to_task_response({
        "id": task.id,
        "user_id": task.user_id,
        "title": task.title,
        "description": task.description,
        "type": task.type.value,
        "due_date": format_timestamp(task.due_date) if task.due_date else "",
        "priority": task.priority,
        "estimated_hours": task.estimated_hours,
        "is_completed": int(task.is_completed),
        "completed_at": format_timestamp(task.completed_at) if task.completed_at else None,
        "created_at": format_timestamp(task.created_at) if task.created_at else "",
        "updated_at": format_timestamp(task.updated_at) if task.updated_at else "",
    })


@router.get("/analytics/stats", response_model=StatsResponse)
async def get_stats(
    user_id: str = Depends(get_current_user_id),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
):
    """Total, completed and overdue task counts plus today's focus minutes."""
    return _stats_response(aggregator.get_stats(user_id))


@router.get("/alerts", response_model=AlertListResponse)
async def get_alerts(
    dismissed: List[str] = Query([], description="Alert ids to suppress"),
    user_id: str = Depends(get_current_user_id),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
):
    """
    Smart alerts for the signed-in user, ordered high -> medium -> low.

    Repeat ``dismissed`` for each alert id the client has dismissed.
    """
    data = aggregator.aggregate(user_id, dismissed=frozenset(dismissed))
    alerts = [_alert_response(a) for a in data.alerts]
    return AlertListResponse(alerts=alerts, total=len(alerts))


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    dismissed: List[str] = Query([]),
    user_id: str = Depends(get_current_user_id),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
):
    """Tasks, stats, alerts and top priorities in one snapshot."""
    data = aggregator.aggregate(user_id, dismissed=frozenset(dismissed))
    logger.debug(f"Dashboard for {user_id}: {len(data.tasks)} tasks, {len(data.alerts)} alerts")

    return DashboardResponse(
        generated_at=data.generated_at,
        greeting=data.greeting,
        tasks=[_task_response(t) for t in data.tasks],
        stats=_stats_response(data.stats),
        alerts=[_alert_response(a) for a in data.alerts],
        top_priorities=[_task_response(s.task) for s in data.top_priorities],
    )
