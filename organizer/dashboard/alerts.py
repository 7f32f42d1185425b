"""
Smart alert derivation for the dashboard.

Turns a snapshot of a user's tasks and daily stats into an ordered list
of transient notifications:

    overdue        (high)    incomplete task past its due date
    due_soon       (high)    incomplete task due within the next 24 hours
    start_working  (medium)  big task due in 1-3 days needing > 2h/day
    achievement    (low)     every 5th completed task, 2h+ focus today

Alerts are never stored. Each one carries a stable id built from its kind
and the task id (or the stat value), so a client can keep its own set of
dismissed ids and pass it back in.
"""

import math
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from enum import Enum
from typing import AbstractSet, Dict, Iterable, List, Optional

from organizer.core.models import DailyStats, Task, ensure_utc

DUE_SOON_WINDOW = timedelta(hours=24)
START_WORKING_WINDOW = timedelta(hours=72)
START_WORKING_HOURS_PER_DAY = 2
COMPLETION_MILESTONE = 5
FOCUS_MILESTONE_MINUTES = 120


class AlertType(str, Enum):
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    START_WORKING = "start_working"
    ACHIEVEMENT = "achievement"


class AlertPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


TIER_ORDER = {
    AlertPriority.HIGH: 0,
    AlertPriority.MEDIUM: 1,
    AlertPriority.LOW: 2,
}


@dataclass(frozen=True)
class Alert:
    """A derived, dismissible notification."""
    id: str
    type: AlertType
    title: str
    message: str
    priority: AlertPriority
    task_id: Optional[int] = None

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["type"] = self.type.value
        data["priority"] = self.priority.value
        return data


def _format_hours(hours: float) -> str:
    """8.0 -> '8', 2.5 -> '2.5'"""
    return f"{hours:g}"


def _overdue_alerts(tasks: List[Task], now: datetime) -> List[Alert]:
    alerts = []
    for task in tasks:
        if task.is_completed or not task.due_date:
            continue
        due = ensure_utc(task.due_date)
        if not due < now:
            continue
        days_past = math.floor((now - due) / timedelta(days=1))
        if days_past == 0:
            when = "today"
        else:
            when = f"{days_past} day{'s' if days_past > 1 else ''} ago"
        alerts.append(Alert(
            id=f"overdue-{task.id}",
            type=AlertType.OVERDUE,
            title="Overdue Task",
            message=f"{task.title} was due {when}",
            priority=AlertPriority.HIGH,
            task_id=task.id,
        ))
    return alerts


def _due_soon_alerts(tasks: List[Task], now: datetime) -> List[Alert]:
    alerts = []
    window_end = now + DUE_SOON_WINDOW
    for task in tasks:
        if task.is_completed or not task.due_date:
            continue
        due = ensure_utc(task.due_date)
        if not (now <= due <= window_end):
            continue
        hours_until_due = math.floor((due - now) / timedelta(hours=1))
        # Only hit when the task is due exactly 24h from now
        if hours_until_due < 24:
            when = f"{hours_until_due} hours"
        else:
            when = "less than 24 hours"
        alerts.append(Alert(
            id=f"due-soon-{task.id}",
            type=AlertType.DUE_SOON,
            title="Due Tomorrow",
            message=f"{task.title} is due in {when}",
            priority=AlertPriority.HIGH,
            task_id=task.id,
        ))
    return alerts


def _start_working_alerts(tasks: List[Task], now: datetime) -> List[Alert]:
    alerts = []
    window_start = now + DUE_SOON_WINDOW
    window_end = now + START_WORKING_WINDOW
    for task in tasks:
        if task.is_completed or not task.due_date or not task.estimated_hours:
            continue
        if task.estimated_hours <= 0:
            continue
        due = ensure_utc(task.due_date)
        if not (window_start < due <= window_end):
            continue
        days_until_due = math.ceil((due - now) / timedelta(days=1))
        hours_per_day = task.estimated_hours / max(days_until_due - 1, 1)
        if hours_per_day > START_WORKING_HOURS_PER_DAY:
            alerts.append(Alert(
                id=f"start-working-{task.id}",
                type=AlertType.START_WORKING,
                title="Consider Starting",
                message=(
                    f"{task.title} ({_format_hours(task.estimated_hours)}h) is due in "
                    f"{days_until_due} days. Consider starting soon!"
                ),
                priority=AlertPriority.MEDIUM,
                task_id=task.id,
            ))
    return alerts


def _achievement_alerts(stats: DailyStats) -> List[Alert]:
    alerts = []
    completed = stats.completed_tasks
    if completed > 0 and completed % COMPLETION_MILESTONE == 0:
        alerts.append(Alert(
            id=f"achievement-{completed}",
            type=AlertType.ACHIEVEMENT,
            title="Great Progress!",
            message=f"You've completed {completed} tasks! Keep up the excellent work!",
            priority=AlertPriority.LOW,
        ))

    if stats.today_focus_minutes >= FOCUS_MILESTONE_MINUTES:
        hours = math.floor(stats.today_focus_minutes / 60)
        alerts.append(Alert(
            id=f"focus-achievement-{hours}",
            type=AlertType.ACHIEVEMENT,
            title="Focus Champion!",
            message=f"You've focused for {hours} hours today. Excellent dedication!",
            priority=AlertPriority.LOW,
        ))
    return alerts


def derive_alerts(
    tasks: Iterable[Task],
    stats: DailyStats,
    now: datetime,
    dismissed: AbstractSet[str] = frozenset(),
) -> List[Alert]:
    """
    Derive the alerts to show for a task/stats snapshot.

    Args:
        tasks: The user's tasks
        stats: Aggregate stats (completed_tasks and today_focus_minutes are used)
        now: Current time, passed explicitly
        dismissed: Alert ids the caller has already dismissed

    Returns:
        Alerts ordered high -> medium -> low, rule order kept within a tier
    """
    now = ensure_utc(now)
    task_list = list(tasks)

    alerts = (
        _overdue_alerts(task_list, now)
        + _due_soon_alerts(task_list, now)
        + _start_working_alerts(task_list, now)
        + _achievement_alerts(stats)
    )

    visible = [alert for alert in alerts if alert.id not in dismissed]
    # sorted() is stable, so rule order survives within each tier
    return sorted(visible, key=lambda alert: TIER_ORDER[alert.priority])


def group_alerts(alerts: Iterable[Alert]) -> Dict[AlertPriority, List[Alert]]:
    """Split alerts into high/medium/low buckets for display."""
    grouped: Dict[AlertPriority, List[Alert]] = {tier: [] for tier in AlertPriority}
    for alert in alerts:
        grouped[alert.priority].append(alert)
    return grouped
