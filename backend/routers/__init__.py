"""
API routers for the Smart Student Organizer backend.

Each router handles a specific domain:
- auth: OAuth sign-in, session cookie, current user, logout
- tasks: Task CRUD
- focus_sessions: Focus session logging
- analytics: Stats, smart alerts and the dashboard snapshot
"""

from .auth import router as auth_router
from .tasks import router as tasks_router
from .focus_sessions import router as focus_sessions_router
from .analytics import router as analytics_router

__all__ = [
    'auth_router',
    'tasks_router',
    'focus_sessions_router',
    'analytics_router',
]
