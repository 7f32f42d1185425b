"""
Core module for Smart Student Organizer
Contains database, configuration, and model definitions
"""

from .config import Config
from .database import Database, get_database
from .models import Task, FocusSession, TaskType, DailyStats

__all__ = ['Config', 'Database', 'get_database', 'Task', 'FocusSession', 'TaskType', 'DailyStats']
