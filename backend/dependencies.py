"""
Dependency injection for FastAPI endpoints.

Provides singleton Config, Database and users service client instances,
per-request agents, and the session-cookie authentication dependency.
"""

import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import Depends, HTTPException, Request

from organizer.core.config import Config
from organizer.core.database import Database, get_database as open_database
from organizer.agents import AgentResponse, FocusAgent, TaskAgent
from organizer.dashboard.aggregator import DashboardAggregator
from organizer.integrations.users_service import UsersServiceClient

logger = logging.getLogger(__name__)

# AgentResponse.error_code -> HTTP status
ERROR_STATUS = {
    "invalid": 400,
    "not_found": 404,
}


@lru_cache()
def get_config() -> Config:
    """
    Get cached Config instance.

    lru_cache ensures we only create one Config instance
    for the lifetime of the application.
    """
    return Config()


@lru_cache()
def get_database() -> Database:
    """
    Get cached Database instance.

    Picks PostgreSQL or SQLite from the environment; each query opens and
    closes its own connection.
    """
    return open_database(get_config().get_database_path())


@lru_cache()
def get_users_service() -> UsersServiceClient:
    """Get cached users service client built from env credentials."""
    config = get_config()
    return UsersServiceClient(config.users_service_api_url, config.users_service_api_key)


def get_session_cookie_name(config: Config = Depends(get_config)) -> str:
    return config.get("session_cookie_name", default="session_token")


def get_current_user(
    request: Request,
    cookie_name: str = Depends(get_session_cookie_name),
    users: UsersServiceClient = Depends(get_users_service),
) -> Dict[str, Any]:
    """
    Resolve the session cookie to the signed-in user.

    Raises:
        HTTPException: 401 when the cookie is missing or the session is invalid
    """
    token = request.cookies.get(cookie_name)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = users.get_current_user(token)
    if not user or not user.get("id"):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def get_current_user_id(user: Dict[str, Any] = Depends(get_current_user)) -> str:
    return str(user["id"])


def get_task_agent(
    db: Database = Depends(get_database),
    config: Config = Depends(get_config),
) -> TaskAgent:
    """Get TaskAgent for task operations."""
    return TaskAgent(db, config)


def get_focus_agent(
    db: Database = Depends(get_database),
    config: Config = Depends(get_config),
) -> FocusAgent:
    """Get FocusAgent for focus session operations."""
    return FocusAgent(db, config)


def get_dashboard_aggregator(
    db: Database = Depends(get_database),
    config: Config = Depends(get_config),
) -> DashboardAggregator:
    """Get DashboardAggregator for stats, alerts and dashboard data."""
    return DashboardAggregator(db, config)


def check_agent_response(response: AgentResponse) -> Dict[str, Any]:
    """
    Return the response payload, or raise the matching HTTPException.

    not_found -> 404, invalid -> 400, anything else -> 500.
    """
    if response.success:
        return response.data or {}

    status_code = ERROR_STATUS.get(response.error_code, 500)
    if status_code == 500:
        logger.error(f"Agent failure: {response.message}")
        raise HTTPException(status_code=500, detail="Internal server error")
    raise HTTPException(status_code=status_code, detail=response.message)
