"""
Base Agent for Smart Student Organizer

Agents own one slice of persistence (tasks, focus sessions) and expose it
through ``process(intent, context)``. The REST routers and the terminal
client both call agents, so validation and ownership rules live here once.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional
from datetime import datetime, timezone
import logging
import json

from ..core.models import ensure_utc, parse_timestamp

# Failure kinds carried on AgentResponse.error_code
INVALID = "invalid"
NOT_FOUND = "not_found"
INTERNAL = "internal"


@dataclass
class AgentResponse:
    """
    Outcome of one agent call.

    Attributes:
        success: True when the intent was carried out
        message: Short human-readable summary
        data: Payload (rows, counts) on success
        suggestions: Optional follow-up hints for the CLI
        error_code: INVALID, NOT_FOUND or INTERNAL when success is False
    """
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    suggestions: Optional[List[str]] = None
    error_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def ok(cls, message: str, data: Optional[Dict[str, Any]] = None,
           suggestions: Optional[List[str]] = None) -> 'AgentResponse':
        return cls(True, message, data, suggestions)

    @classmethod
    def error(cls, message: str, data: Optional[Dict[str, Any]] = None,
              error_code: str = INVALID) -> 'AgentResponse':
        return cls(False, message, data, error_code=error_code)

    @classmethod
    def not_found(cls, message: str) -> 'AgentResponse':
        """The resource is missing or belongs to another user."""
        return cls(False, message, error_code=NOT_FOUND)


Handler = Callable[[Dict[str, Any]], AgentResponse]


class BaseAgent(ABC):
    """
    Abstract base class for organizer agents.

    Subclasses declare their intents and route them through ``dispatch``,
    which enforces ``user_id`` and turns unexpected exceptions into
    INTERNAL responses.
    """

    def __init__(self, db, config, name: str):
        """
        Args:
            db: Database backend
            config: Config (or compatible) used for preferences
            name: Short agent name; the logger is ``agent.<name>``
        """
        self.db = db
        self.config = config
        self.name = name
        self.logger = logging.getLogger(f"agent.{name}")

    @abstractmethod
    def get_supported_intents(self) -> List[str]:
        """Intents accepted by ``process``."""

    @abstractmethod
    def process(self, intent: str, context: Dict[str, Any]) -> AgentResponse:
        """
        Carry out an intent.

        Args:
            intent: One of ``get_supported_intents()``
            context: Parameters; always includes ``user_id``

        Returns:
            AgentResponse describing the outcome
        """

    def can_handle(self, intent: str, context: Dict[str, Any]) -> bool:
        return intent in self.get_supported_intents()

    def dispatch(self, intent: str, context: Dict[str, Any],
                 handlers: Mapping[str, Handler]) -> AgentResponse:
        """Validate ``user_id``, run the handler and contain its failures."""
        self.log_action(f"processing_{intent}", {"context_keys": sorted(context)})

        handler = handlers.get(intent)
        if handler is None:
            return AgentResponse.error(f"Unknown intent: {intent}")

        problem = self.validate_required_params(context, ["user_id"])
        if problem:
            return problem

        try:
            return handler(context)
        except Exception as e:
            self.logger.error(f"Error processing {intent}: {e}", exc_info=True)
            return AgentResponse.error(f"Failed to process {intent}: {e}", error_code=INTERNAL)

    def log_action(self, action: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Emit one JSON line describing what the agent did."""
        record: Dict[str, Any] = {
            "agent": self.name,
            "action": action,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            record["details"] = details
        self.logger.info(json.dumps(record, default=str))

    def validate_required_params(self, context: Dict[str, Any],
                                 required: List[str]) -> Optional[AgentResponse]:
        """Return an INVALID response naming absent (or None) params, else None."""
        missing = [key for key in required if context.get(key) is None]
        if not missing:
            return None
        return AgentResponse.error(f"Missing required parameters: {', '.join(missing)}")

    def get_config_value(self, key: str, section: str = "preferences",
                         default: Any = None) -> Any:
        return self.config.get(key, section=section, default=default)

    def get_now(self, context: Dict[str, Any]) -> datetime:
        """``context["now"]`` when supplied, otherwise the current UTC time."""
        now = context.get("now")
        if now is None:
            return datetime.now(timezone.utc)
        if isinstance(now, datetime):
            return ensure_utc(now)
        return parse_timestamp(now)
