"""
Agent Layer for Smart Student Organizer

Each agent owns one domain and exposes it through ``process(intent, context)``:
- BaseAgent: Abstract base class defining the agent interface
- AgentResponse: Standard response structure for agent outputs
- TaskAgent: Task CRUD with derived priority
- FocusAgent: Focus session logging

Usage:
    from organizer.agents import TaskAgent
    from organizer.core import Config, get_database

    config = Config()
    agent = TaskAgent(get_database(config.get_database_path()), config)
    response = agent.process("add_task", {
        "user_id": "u1", "title": "Essay", "type": "assignment",
        "due_date": "2025-03-01T17:00:00Z",
    })
"""

from .base_agent import BaseAgent, AgentResponse
from .task_agent import TaskAgent
from .focus_agent import FocusAgent

__all__ = [
    'BaseAgent',
    'AgentResponse',
    'TaskAgent',
    'FocusAgent',
]
