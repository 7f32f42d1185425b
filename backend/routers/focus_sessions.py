"""
Focus session API endpoints.
"""

from typing import List
from fastapi import APIRouter, Depends

from backend.dependencies import check_agent_response, get_current_user_id, get_focus_agent
from backend.schemas import FocusSessionCreate, FocusSessionResponse
from organizer.agents import FocusAgent

router = APIRouter(prefix="/api/focus-sessions", tags=["focus"])


@router.get("", response_model=List[FocusSessionResponse])
async def list_focus_sessions(
    user_id: str = Depends(get_current_user_id),
    agent: FocusAgent = Depends(get_focus_agent),
):
    """The user's 100 most recent focus sessions, newest first."""
    data = check_agent_response(agent.process("list_sessions", {"user_id": user_id}))
    return [FocusSessionResponse(**row) for row in data.get("sessions", [])]


@router.post("", response_model=FocusSessionResponse, status_code=201)
async def log_focus_session(
    session: FocusSessionCreate,
    user_id: str = Depends(get_current_user_id),
    agent: FocusAgent = Depends(get_focus_agent),
):
    """Record a finished focus block, dated today (UTC)."""
    context = session.model_dump()
    context["user_id"] = user_id

    data = check_agent_response(agent.process("log_session", context))
    return FocusSessionResponse(**data["session"])
