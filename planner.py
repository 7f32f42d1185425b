#!/usr/bin/env python3
"""
Smart Student Organizer - Command Line Interface
Manage coursework tasks, log focus sessions and view the dashboard
without the web client.
"""

import typer
from rich.console import Console
from rich.table import Table
from datetime import datetime, timedelta, timezone
from typing import Optional

from organizer.core import Config, get_database
from organizer.core.models import Task, TaskType, format_timestamp, parse_timestamp
from organizer.agents import AgentResponse, FocusAgent, TaskAgent
from organizer.dashboard import DashboardAggregator, DashboardFormatter

# Initialize CLI app and console
app = typer.Typer(help="Smart Student Organizer - Coursework tasks, focus time and smart alerts")

console = Console()

_config: Optional[Config] = None
_db = None

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

USER_OPTION = typer.Option(None, "--user", "-u", help="User id (defaults to cli_user_id setting)")


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_db():
    """Open the database on first use so --help works without one."""
    global _db
    if _db is None:
        try:
            _db = get_database(get_config().get_database_path())
        except FileNotFoundError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
    return _db


def resolve_user(user: Optional[str]) -> str:
    return user or get_config().get("cli_user_id", default="local")


def parse_due(value: str, now: Optional[datetime] = None) -> datetime:
    """
    Parse a due date from the command line.

    Accepts "today", "tomorrow", a weekday name (next occurrence), "+N"
    days, or anything dateutil understands. Relative forms resolve to
    23:59 UTC on that day.

    Raises:
        ValueError: if the value cannot be parsed
    """
    now = now or datetime.now(timezone.utc)
    text = value.strip().lower()
    end_of_day = now.replace(hour=23, minute=59, second=0, microsecond=0)

    if text == "today":
        return end_of_day
    if text == "tomorrow":
        return end_of_day + timedelta(days=1)
    if text.startswith("+") and text[1:].isdigit():
        return end_of_day + timedelta(days=int(text[1:]))
    if text in WEEKDAYS:
        ahead = (WEEKDAYS.index(text) - now.weekday()) % 7 or 7
        return end_of_day + timedelta(days=ahead)
    return parse_timestamp(value)


def report(response: AgentResponse) -> None:
    """Print an agent failure and exit non-zero."""
    if not response.success:
        console.print(f"[red]✗[/red] {response.message}")
        raise typer.Exit(1)


def format_task(task: Task, formatter: DashboardFormatter, now: datetime) -> str:
    """One-line task summary for list output."""
    status = "[green]✓[/green]" if task.is_completed else "[dim]○[/dim]"
    estimate = f" [dim]~{task.estimated_hours:g}h[/dim]" if task.estimated_hours else ""
    return (
        f"{status} [dim]#{task.id}[/dim] {formatter.format_priority(task.priority)} "
        f"{task.title} [dim]({task.type.value})[/dim] "
        f"{formatter.format_due_date(task, now)}{estimate}"
    )


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    due: str = typer.Option(..., "--due", "-d", help="Due date (today, tomorrow, friday, +3, 2025-03-01T17:00)"),
    task_type: TaskType = typer.Option(TaskType.ASSIGNMENT, "--type", "-t", help="assignment, project, exam or other"),
    estimate: Optional[float] = typer.Option(None, "--estimate", "-e", help="Estimated hours"),
    description: Optional[str] = typer.Option(None, "--desc", help="Task description"),
    user: Optional[str] = USER_OPTION,
):
    """
    Add a new task

    Examples:
      planner add "Lab report" --due friday
      planner add "Midterm" -d 2025-03-10T09:00 -t exam -e 8
    """
    try:
        due_date = parse_due(due)
    except (ValueError, OverflowError):
        console.print(f"[red]Could not parse date: {due}[/red]")
        raise typer.Exit(1)

    agent = TaskAgent(get_db(), get_config())
    response = agent.process("add_task", {
        "user_id": resolve_user(user),
        "title": title,
        "type": task_type.value,
        "due_date": format_timestamp(due_date),
        "estimated_hours": estimate,
        "description": description,
    })
    report(response)

    task = response.data["task"]
    console.print(f"[green]✓[/green] Added task #{task['id']}: {task['title']}")
    console.print(f"  Due: {due_date.strftime('%A, %B %d %H:%M')} UTC")
    console.print(f"  Priority: {task['priority']}")
    if estimate:
        console.print(f"  Estimate: {estimate:g} hours")


@app.command("list")
def list_tasks(
    status: str = typer.Option("active", "--status", "-s", help="all, active or completed"),
    user: Optional[str] = USER_OPTION,
):
    """
    List tasks, highest priority first

    Examples:
      planner list
      planner list --status all
    """
    agent = TaskAgent(get_db(), get_config())
    response = agent.process("list_tasks", {"user_id": resolve_user(user), "status": status})
    report(response)

    tasks = [Task.from_dict(row) for row in response.data["tasks"]]
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    now = datetime.now(timezone.utc)
    formatter = DashboardFormatter(console)
    console.print(f"\n[bold]Tasks ({len(tasks)}):[/bold]\n")
    for task in tasks:
        console.print(f"  {format_task(task, formatter, now)}")
    console.print()


@app.command()
def done(
    task_id: int = typer.Argument(..., help="Task ID to mark as done"),
    user: Optional[str] = USER_OPTION,
):
    """
    Mark a task as done

    Example:
      planner done 5
    """
    agent = TaskAgent(get_db(), get_config())
    response = agent.process("complete_task", {"user_id": resolve_user(user), "task_id": task_id})
    report(response)
    console.print(f"[green]✓[/green] Completed: {response.data['task']['title']}")


@app.command()
def reopen(
    task_id: int = typer.Argument(..., help="Task ID to reopen"),
    user: Optional[str] = USER_OPTION,
):
    """Mark a completed task as open again"""
    agent = TaskAgent(get_db(), get_config())
    response = agent.process("reopen_task", {"user_id": resolve_user(user), "task_id": task_id})
    report(response)
    console.print(f"[green]✓[/green] Reopened: {response.data['task']['title']}")


@app.command()
def delete(
    task_id: int = typer.Argument(..., help="Task ID to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    user: Optional[str] = USER_OPTION,
):
    """Permanently delete a task"""
    if not yes and not typer.confirm(f"Delete task #{task_id}?"):
        raise typer.Exit(0)

    agent = TaskAgent(get_db(), get_config())
    response = agent.process("delete_task", {"user_id": resolve_user(user), "task_id": task_id})
    report(response)
    console.print(f"[green]✓[/green] {response.message}")


@app.command()
def focus(
    minutes: Optional[int] = typer.Argument(None, help="Session length (defaults to focus_minutes preference)"),
    task_id: Optional[int] = typer.Option(None, "--task", help="Task the time was spent on"),
    user: Optional[str] = USER_OPTION,
):
    """
    Log a finished focus session

    Examples:
      planner focus
      planner focus 50 --task 3
    """
    config = get_config()
    if minutes is None:
        minutes = config.get("focus_minutes", section="preferences", default=25)

    agent = FocusAgent(get_db(), config)
    response = agent.process("log_session", {
        "user_id": resolve_user(user),
        "duration_minutes": minutes,
        "task_id": task_id,
    })
    report(response)
    console.print(f"[green]✓[/green] {response.message}")


@app.command()
def stats(user: Optional[str] = USER_OPTION):
    """Show task and focus statistics"""
    aggregator = DashboardAggregator(get_db(), get_config())
    daily = aggregator.get_stats(resolve_user(user))

    table = Table(show_header=False, box=None)
    table.add_column("Stat", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total tasks", str(daily.total_tasks))
    table.add_row("Completed", f"[green]{daily.completed_tasks}[/green]")
    table.add_row("Overdue", f"[red]{daily.overdue_tasks}[/red]")
    table.add_row("Completion rate", f"{daily.completion_rate:.0%}")
    table.add_row("Today's focus", f"{daily.today_focus_minutes} min")

    console.print("\n[bold]Statistics:[/bold]\n")
    console.print(table)
    console.print()


@app.command()
def alerts(user: Optional[str] = USER_OPTION):
    """Show smart alerts (overdue, due soon, start working, milestones)"""
    aggregator = DashboardAggregator(get_db(), get_config())
    data = aggregator.aggregate(resolve_user(user))

    panel = DashboardFormatter(console).format_alerts(data.alerts)
    if panel is None:
        console.print("[green]✓[/green] All caught up! No alerts right now.")
        return
    console.print(panel)


@app.command()
def today(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Also show the full task list"),
    user: Optional[str] = USER_OPTION,
):
    """
    Show the dashboard

    Displays stats, smart alerts and the top priorities.
    """
    aggregator = DashboardAggregator(get_db(), get_config())
    data = aggregator.aggregate(resolve_user(user))

    formatter = DashboardFormatter(console)
    formatter.render_dashboard(data, verbose=verbose)


if __name__ == "__main__":
    app()
