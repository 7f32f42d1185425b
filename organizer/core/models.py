"""
Data models for Smart Student Organizer
Defines core data structures for tasks and focus sessions
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, Union

from dateutil import parser as date_parser


class TaskType(str, Enum):
    """Kind of coursework a task represents"""
    ASSIGNMENT = "assignment"
    PROJECT = "project"
    EXAM = "exam"
    OTHER = "other"


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, datetime, date]) -> datetime:
    """
    Parse a timestamp from client input or a database column.

    Accepts ISO strings (with or without offset), date-only strings and
    datetime/date objects. Naive values are interpreted as UTC.

    Raises:
        ValueError: if the string cannot be parsed
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")
    return ensure_utc(date_parser.parse(value))


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime as second-precision ISO-8601 UTC text."""
    return ensure_utc(value).isoformat(timespec="seconds")


@dataclass
class Task:
    """Task data model"""
    id: Optional[int] = None
    user_id: str = ""
    title: str = ""
    description: Optional[str] = None
    type: TaskType = TaskType.OTHER
    due_date: Optional[datetime] = None
    priority: int = 50  # 0-100, always computed by the prioritizer
    estimated_hours: Optional[float] = None
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        """Create Task from database row dictionary"""
        return cls(
            id=data.get('id'),
            user_id=data.get('user_id', ''),
            title=data.get('title', ''),
            description=data.get('description'),
            type=TaskType(data.get('type') or TaskType.OTHER.value),
            due_date=cls._parse_datetime(data.get('due_date')),
            priority=data.get('priority', 50),
            estimated_hours=data.get('estimated_hours'),
            is_completed=bool(data.get('is_completed', False)),
            completed_at=cls._parse_datetime(data.get('completed_at')),
            created_at=cls._parse_datetime(data.get('created_at')),
            updated_at=cls._parse_datetime(data.get('updated_at')),
        )

    def is_overdue(self, now: datetime) -> bool:
        """Check if task is past due and still open"""
        if self.due_date and not self.is_completed:
            return ensure_utc(now) > self.due_date
        return False

    @staticmethod
    def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
        """Parse datetime string from database"""
        if dt_str:
            try:
                return parse_timestamp(dt_str)
            except (ValueError, TypeError, OverflowError):
                return None
        return None


@dataclass
class FocusSession:
    """A logged block of focused study time"""
    id: Optional[int] = None
    user_id: str = ""
    task_id: Optional[int] = None
    duration_minutes: int = 0
    session_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FocusSession':
        """Create FocusSession from database row dictionary"""
        session_date = data.get('session_date')
        if isinstance(session_date, str):
            session_date = date.fromisoformat(session_date[:10])
        return cls(
            id=data.get('id'),
            user_id=data.get('user_id', ''),
            task_id=data.get('task_id'),
            duration_minutes=data.get('duration_minutes', 0),
            session_date=session_date,
            created_at=Task._parse_datetime(data.get('created_at')),
            updated_at=Task._parse_datetime(data.get('updated_at')),
        )


@dataclass
class DailyStats:
    """Aggregate task and focus counts for one user"""
    total_tasks: int = 0
    completed_tasks: int = 0
    overdue_tasks: int = 0
    today_focus_minutes: int = 0

    @property
    def completion_rate(self) -> float:
        """Share of tasks completed, 0.0 when there are none"""
        if self.total_tasks == 0:
            return 0.0
        return self.completed_tasks / self.total_tasks
