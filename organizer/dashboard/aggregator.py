"""
Data aggregation module for the Smart Student Organizer dashboard.

Collects a user's tasks and focus time into a unified DashboardData
structure: aggregate stats, the task list and the derived alerts.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import AbstractSet, List, Optional

from organizer.core.config import Config
from organizer.core.database import Database
from organizer.core.models import DailyStats, Task, format_timestamp, ensure_utc
from organizer.dashboard.alerts import Alert, derive_alerts
from organizer.dashboard.prioritizer import Prioritizer, ScoredTask


@dataclass
class DashboardData:
    """Complete dashboard data structure."""
    generated_at: datetime
    greeting: str
    tasks: List[Task]
    stats: DailyStats
    alerts: List[Alert]
    top_priorities: List[ScoredTask] = field(default_factory=list)


class DashboardAggregator:
    """
    Central data aggregation for the dashboard.

    Every query is scoped to a single user id.
    """

    def __init__(self, db: Database, config: Optional[Config] = None):
        """
        Initialize aggregator.

        Args:
            db: Database connection
            config: Configuration (creates default if not provided)
        """
        self.db = db
        self.config = config if config else Config()
        self.prioritizer = Prioritizer()

    def _get_greeting(self, now: datetime) -> str:
        """Greeting based on time of day."""
        hour = now.hour

        if hour < 12:
            return "Good Morning!"
        elif hour < 17:
            return "Good Afternoon!"
        elif hour < 21:
            return "Good Evening!"
        else:
            return "Good Night!"

    def get_tasks(self, user_id: str) -> List[Task]:
        """All of the user's tasks, highest stored priority first."""
        rows = self.db.execute(
            """
            SELECT * FROM tasks
            WHERE user_id = ?
            ORDER BY priority DESC, due_date ASC
            """,
            (user_id,)
        )
        return [Task.from_dict(dict(r)) for r in rows]

    def get_stats(self, user_id: str, now: Optional[datetime] = None) -> DailyStats:
        """
        Aggregate counts for the stats cards.

        Args:
            user_id: Owner of the tasks and sessions
            now: Current datetime (defaults to utcnow)

        Returns:
            DailyStats with total, completed, overdue and today's focus minutes
        """
        if now is None:
            now = datetime.now(timezone.utc)
        now = ensure_utc(now)

        total = self.db.count("tasks", "user_id = ?", (user_id,))
        completed = self.db.count("tasks", "user_id = ? AND is_completed = 1", (user_id,))
        overdue = self.db.count(
            "tasks",
            "user_id = ? AND is_completed = 0 AND due_date < ?",
            (user_id, format_timestamp(now))
        )

        focus_row = self.db.execute_one(
            """
            SELECT COALESCE(SUM(duration_minutes), 0) as total
            FROM focus_sessions
            WHERE user_id = ? AND session_date = ?
            """,
            (user_id, now.date().isoformat())
        )
        focus_minutes = int(focus_row["total"]) if focus_row and focus_row["total"] else 0

        return DailyStats(
            total_tasks=total,
            completed_tasks=completed,
            overdue_tasks=overdue,
            today_focus_minutes=focus_minutes,
        )

    def aggregate(
        self,
        user_id: str,
        now: Optional[datetime] = None,
        dismissed: AbstractSet[str] = frozenset(),
        top_n: int = 5,
    ) -> DashboardData:
        """
        Aggregate all dashboard data for a user.

        Args:
            user_id: Dashboard owner
            now: Current datetime (defaults to utcnow)
            dismissed: Alert ids the client has dismissed
            top_n: Number of open tasks to surface as top priorities

        Returns:
            DashboardData snapshot
        """
        if now is None:
            now = datetime.now(timezone.utc)
        now = ensure_utc(now)

        tasks = self.get_tasks(user_id)
        stats = self.get_stats(user_id, now)
        alerts = derive_alerts(tasks, stats, now, dismissed)

        open_tasks = [t for t in tasks if not t.is_completed]
        top_priorities = self.prioritizer.rank_tasks(open_tasks, now)[:top_n]

        return DashboardData(
            generated_at=now,
            greeting=self._get_greeting(now),
            tasks=tasks,
            stats=stats,
            alerts=alerts,
            top_priorities=top_priorities,
        )
