"""
Priority scoring algorithm for Smart Student Organizer.

Scores tasks from how soon they are due and what kind of coursework
they are. The score is stored on the task row and recomputed whenever
the due date or type changes.

Score formula:
    score = min(100, 50 + urgency_bonus(days_until_due) + importance_bonus(type))
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Dict, Any, Union

from organizer.core.models import Task, TaskType, ensure_utc

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

# (upper bound on days until due, bonus), checked most urgent first
URGENCY_BREAKPOINTS = [
    (1, 40),
    (3, 30),
    (7, 20),
    (14, 10),
]
OVERDUE_BONUS = 50

IMPORTANCE_BONUS = {
    TaskType.EXAM: 30,
    TaskType.PROJECT: 20,
    TaskType.ASSIGNMENT: 10,
    TaskType.OTHER: 0,
}


@dataclass
class ScoredTask:
    """Task with computed priority score and breakdown."""
    task: Task
    score: int
    urgency_bonus: int
    importance_bonus: int
    days_until_due: int
    breakdown: Dict[str, Any] = field(default_factory=dict)


def days_until_due(due_date: datetime, now: datetime) -> int:
    """
    Whole days until the due date, rounded up.

    Negative when the task is at least a full day late. A task due later
    today (or earlier today, less than a day ago) yields 0 or 1.
    """
    delta = ensure_utc(due_date) - ensure_utc(now)
    return math.ceil(delta / timedelta(days=1))


def calculate_urgency_bonus(days: int) -> int:
    """
    Urgency bonus from days until due.

    Scoring:
        - Overdue (< 0 days): +50
        - Within 1 day: +40
        - Within 3 days: +30
        - Within 7 days: +20
        - Within 14 days: +10
        - Later: +0
    """
    if days < 0:
        return OVERDUE_BONUS
    for limit, bonus in URGENCY_BREAKPOINTS:
        if days <= limit:
            return bonus
    return 0


def calculate_importance_bonus(task_type: Union[TaskType, str]) -> int:
    """
    Importance bonus from task type.

    Raises:
        ValueError: if task_type is not a known TaskType
    """
    return IMPORTANCE_BONUS[TaskType(task_type)]


def calculate_priority(
    due_date: datetime,
    task_type: Union[TaskType, str],
    now: datetime
) -> int:
    """
    Compute the stored priority (0-100) for a task.

    Args:
        due_date: When the task is due
        task_type: Task type (enum or its string value)
        now: Current time, passed explicitly so the result is deterministic

    Returns:
        Integer priority score between 0 and 100
    """
    days = days_until_due(due_date, now)
    score = BASE_SCORE + calculate_urgency_bonus(days) + calculate_importance_bonus(task_type)
    return max(MIN_SCORE, min(MAX_SCORE, score))


class Prioritizer:
    """
    Task ranking helper for the dashboard and terminal client.

    Re-scores tasks against a given moment (stored priorities can go stale
    as due dates approach) and orders them most urgent first.
    """

    def score_task(self, task: Task, now: datetime) -> ScoredTask:
        """
        Score a single task.

        Args:
            task: Task to score (must have a due date)
            now: Current datetime

        Returns:
            ScoredTask with computed scores
        """
        days = days_until_due(task.due_date, now)
        urgency = calculate_urgency_bonus(days)
        importance = calculate_importance_bonus(task.type)
        score = max(MIN_SCORE, min(MAX_SCORE, BASE_SCORE + urgency + importance))

        breakdown = {
            "base": BASE_SCORE,
            "urgency": {
                "bonus": urgency,
                "days_until_due": days,
                "due_date": task.due_date.isoformat() if task.due_date else None,
            },
            "importance": {
                "bonus": importance,
                "type": TaskType(task.type).value,
            },
            "clamped": BASE_SCORE + urgency + importance > MAX_SCORE,
        }

        return ScoredTask(
            task=task,
            score=score,
            urgency_bonus=urgency,
            importance_bonus=importance,
            days_until_due=days,
            breakdown=breakdown,
        )

    def rank_tasks(self, tasks: List[Task], now: datetime) -> List[ScoredTask]:
        """
        Score tasks and sort by score (descending) then due date (ascending).

        Tasks without a due date are skipped.
        """
        scored = [self.score_task(task, now) for task in tasks if task.due_date is not None]
        scored.sort(key=lambda s: (-s.score, s.task.due_date))
        return scored
