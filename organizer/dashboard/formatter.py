"""
Rich formatter module for the Smart Student Organizer dashboard.

Handles all Rich-based CLI formatting: stats, prioritized tasks and the
smart alerts panel.
"""

import math
from datetime import datetime, timedelta
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from organizer.core.models import DailyStats, Task, TaskType, ensure_utc
from organizer.dashboard.aggregator import DashboardData
from organizer.dashboard.alerts import Alert, AlertPriority, AlertType, group_alerts
from organizer.dashboard.prioritizer import ScoredTask


# Alert icons by kind
ALERT_ICONS = {
    AlertType.OVERDUE: "[red]⚠[/red]",
    AlertType.DUE_SOON: "[dark_orange]◷[/dark_orange]",
    AlertType.START_WORKING: "[blue]◷[/blue]",
    AlertType.ACHIEVEMENT: "[green]✓[/green]",
}

# Left border color per alert tier
TIER_COLORS = {
    AlertPriority.HIGH: "red",
    AlertPriority.MEDIUM: "blue",
    AlertPriority.LOW: "green",
}

TYPE_COLORS = {
    TaskType.EXAM: "magenta",
    TaskType.PROJECT: "blue",
    TaskType.ASSIGNMENT: "cyan",
    TaskType.OTHER: "dim",
}


def priority_color(priority: int) -> str:
    """Badge color for a 0-100 priority."""
    if priority >= 80:
        return "red bold"
    if priority >= 60:
        return "dark_orange"
    if priority >= 40:
        return "yellow"
    return "green"


class DashboardFormatter:
    """
    Rich-based formatter for the organizer dashboard.

    Every method that labels due dates takes ``now`` explicitly so output
    is reproducible in tests.
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize formatter.

        Args:
            console: Rich Console instance (creates default if not provided)
        """
        self.console = console or Console()

    def format_priority(self, priority: int) -> str:
        """Format priority as colored badge."""
        color = priority_color(priority)
        return f"[{color}]{priority}[/{color}]"

    def _format_type(self, task_type: TaskType) -> str:
        color = TYPE_COLORS.get(task_type, "dim")
        return f"[{color}]{TaskType(task_type).value}[/{color}]"

    def _format_minutes(self, minutes: int) -> str:
        """Format duration in human-readable format."""
        if minutes < 60:
            return f"{minutes}m"
        hours = minutes // 60
        mins = minutes % 60
        if mins == 0:
            return f"{hours}h"
        return f"{hours}h {mins}m"

    def format_due_date(self, task: Task, now: datetime) -> str:
        """Short due label: Overdue, Today, Tomorrow or 'Mon DD'."""
        if task.due_date is None:
            return "[dim]---[/dim]"

        due = ensure_utc(task.due_date)
        days = math.ceil((due - ensure_utc(now)) / timedelta(days=1))

        if task.is_completed:
            return f"[dim]{due.strftime('%b %d')}[/dim]"
        if days < 0 or due < ensure_utc(now):
            return "[red bold]Overdue[/red bold]"
        if days == 0:
            return "[yellow bold]Today[/yellow bold]"
        if days == 1:
            return "[yellow]Tomorrow[/yellow]"
        return f"[white]{due.strftime('%b %d')}[/white]"

    def format_header(self, data: DashboardData) -> Panel:
        """
        Create header panel with date and greeting.

        Args:
            data: Dashboard data

        Returns:
            Rich Panel with header content
        """
        content = Text()
        content.append(f"{data.greeting}\n", style="bold")
        content.append(data.generated_at.strftime("%A, %B %d, %Y"), style="dim")

        return Panel(
            content,
            title="[bold]Smart Student Organizer[/bold]",
            title_align="center",
            border_style="blue",
            padding=(0, 2),
        )

    def format_stats(self, stats: DailyStats) -> Table:
        """Four stat cards in a single row."""
        table = Table(show_header=True, box=None, expand=True, padding=(0, 2))
        table.add_column("Total Tasks", justify="center")
        table.add_column("Completed", justify="center")
        table.add_column("Overdue", justify="center")
        table.add_column("Today's Focus", justify="center")
        table.add_row(
            f"[bold]{stats.total_tasks}[/bold]",
            f"[green bold]{stats.completed_tasks}[/green bold]",
            f"[red bold]{stats.overdue_tasks}[/red bold]",
            f"[magenta bold]{self._format_minutes(stats.today_focus_minutes)}[/magenta bold]",
        )
        return table

    def format_alerts(self, alerts: List[Alert]) -> Optional[Panel]:
        """
        Create the smart alerts panel, grouped high -> medium -> low.

        Returns:
            Rich Panel or None if there is nothing to show
        """
        if not alerts:
            return None

        table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
        table.add_column("Tier", width=1)
        table.add_column("Icon", width=2)
        table.add_column("Alert", ratio=1)
        table.add_column("ID", justify="right", style="dim")

        for tier, tier_alerts in group_alerts(alerts).items():
            color = TIER_COLORS[tier]
            for alert in tier_alerts:
                table.add_row(
                    f"[{color}]▌[/{color}]",
                    ALERT_ICONS.get(alert.type, ""),
                    f"[bold]{alert.title}[/bold]\n{alert.message}",
                    alert.id,
                )

        count = len(alerts)
        return Panel(
            table,
            title=f"[bold]Smart Alerts[/bold] [dim]({count} notification{'s' if count != 1 else ''})[/dim]",
            border_style="blue",
            padding=(0, 1),
        )

    def format_task_table(self, tasks: List[Task], now: datetime, title: str = "Tasks") -> Panel:
        """
        Create panel with a task table.

        Args:
            tasks: Tasks to display, already ordered
            now: Current datetime for due labels
            title: Panel title

        Returns:
            Rich Panel
        """
        if not tasks:
            return Panel(
                Text("No tasks yet. Create your first task to get started!", justify="center", style="dim"),
                title=f"[bold]{title}[/bold]",
                border_style="white",
                padding=(0, 1),
            )

        table = Table(show_header=True, box=None, padding=(0, 1), expand=True)
        table.add_column("", width=2)
        table.add_column("ID", width=5, style="dim")
        table.add_column("Title", ratio=1)
        table.add_column("Type", width=10)
        table.add_column("Due", width=10, justify="right")
        table.add_column("Pri", width=4, justify="right")
        table.add_column("Est", width=5, justify="right")

        for task in tasks:
            icon = "[green]✓[/green]" if task.is_completed else "[dim]○[/dim]"
            title_str = task.title[:40] + "..." if len(task.title) > 40 else task.title
            if task.is_completed:
                title_str = f"[dim strike]{title_str}[/dim strike]"
            est = f"{task.estimated_hours:g}h" if task.estimated_hours else "[dim]---[/dim]"
            table.add_row(
                icon,
                f"#{task.id}",
                title_str,
                self._format_type(task.type),
                self.format_due_date(task, now),
                self.format_priority(task.priority),
                est,
            )

        return Panel(
            table,
            title=f"[bold]{title} ({len(tasks)})[/bold]",
            border_style="white",
            padding=(0, 1),
        )

    def format_top_priorities(self, priorities: List[ScoredTask], now: datetime) -> Panel:
        """Panel listing the highest-scoring open tasks."""
        if not priorities:
            return Panel(
                Text("No active tasks", justify="center", style="dim"),
                title="[bold]Focus Next[/bold]",
                border_style="green",
                padding=(0, 1),
            )

        table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
        table.add_column("#", width=3)
        table.add_column("ID", width=5, style="dim")
        table.add_column("Title", ratio=1)
        table.add_column("Due", width=10, justify="right")
        table.add_column("Score", width=5, justify="right")

        for i, scored in enumerate(priorities, 1):
            task = scored.task
            table.add_row(
                f"[bold]{i}.[/bold]",
                f"#{task.id}",
                task.title[:35] + "..." if len(task.title) > 35 else task.title,
                self.format_due_date(task, now),
                self.format_priority(scored.score),
            )

        return Panel(
            table,
            title="[bold]Focus Next[/bold]",
            border_style="green",
            padding=(0, 1),
        )

    def render_dashboard(self, data: DashboardData, verbose: bool = False) -> None:
        """
        Render the complete dashboard to console.

        Args:
            data: Complete dashboard data
            verbose: Also print the full task list
        """
        self.console.print(self.format_header(data))
        self.console.print(self.format_stats(data.stats))
        self.console.print()

        alerts_panel = self.format_alerts(data.alerts)
        if alerts_panel:
            self.console.print(alerts_panel)
            self.console.print()

        self.console.print(self.format_top_priorities(data.top_priorities, data.generated_at))

        if verbose:
            self.console.print()
            self.console.print(self.format_task_table(data.tasks, data.generated_at))
