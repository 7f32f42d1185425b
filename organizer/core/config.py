"""
Configuration for the organizer service and CLI.

Settings live in two JSON files inside the config directory:

- settings.json: service settings (database, cookies, CORS, logging)
- preferences.json: per-install preferences (focus and break lengths)

Missing files are written with defaults on first load. Selected settings
can be overridden per deployment with ORGANIZER_<KEY> environment
variables, and users service credentials only ever come from the
environment.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

PROJECT_ROOT = Path(__file__).parent.parent.parent

DEFAULT_SETTINGS: Dict[str, Any] = {
    "database_path": "data/database/organizer.db",
    "timezone": "UTC",
    "log_level": "INFO",
    "session_cookie_name": "session_token",
    "session_max_age_days": 60,
    "cors_origins": [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ],
    "cli_user_id": "local",
}

DEFAULT_PREFERENCES: Dict[str, Any] = {
    "focus_minutes": 25,
    "break_minutes": 5,
}

# settings keys that ORGANIZER_<KEY> may override; lists are comma separated
ENV_OVERRIDES = ("database_path", "log_level", "cors_origins", "session_cookie_name")


def _read_json(path: Path, defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Load path over a copy of defaults, creating the file if missing."""
    if not path.exists():
        _write_json(path, defaults)
        return dict(defaults)
    with open(path, "r") as f:
        return {**defaults, **json.load(f)}


def _write_json(path: Path, data: Dict[str, Any]) -> None:
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


class Config:
    """Settings and preferences backed by JSON files."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Load (or create) the configuration files.

        Args:
            config_dir: Directory holding the JSON files. Defaults to
                $ORGANIZER_CONFIG_DIR, then <project>/config.
        """
        if config_dir is None:
            env_dir = os.environ.get("ORGANIZER_CONFIG_DIR")
            config_dir = Path(env_dir) if env_dir else PROJECT_ROOT / "config"

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.preferences_file = self.config_dir / "preferences.json"

        self.settings = _read_json(self.settings_file, DEFAULT_SETTINGS)
        self.preferences = _read_json(self.preferences_file, DEFAULT_PREFERENCES)

    def _sections(self) -> Dict[str, tuple]:
        return {
            "settings": (self.settings, self.settings_file),
            "preferences": (self.preferences, self.preferences_file),
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Look up a value.

        Args:
            key: Setting name
            section: "settings" or "preferences"
            default: Returned when the section or key is unknown

        Returns:
            The environment override if one applies, else the stored value
        """
        if section == "settings" and key in ENV_OVERRIDES:
            raw = os.environ.get(f"ORGANIZER_{key.upper()}")
            if raw:
                if isinstance(DEFAULT_SETTINGS[key], list):
                    return [item.strip() for item in raw.split(",") if item.strip()]
                return raw

        values, _ = self._sections().get(section, ({}, None))
        return values.get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """Store a value and write its section back to disk."""
        entry = self._sections().get(section)
        if entry is None:
            raise ValueError(f"Unknown config section: {section}")
        values, path = entry
        values[key] = value
        _write_json(path, values)

    def get_database_path(self) -> Path:
        """SQLite file location; relative paths resolve from the project root."""
        db_path = Path(self.get("database_path"))
        return db_path if db_path.is_absolute() else PROJECT_ROOT / db_path

    def get_cors_origins(self) -> List[str]:
        return list(self.get("cors_origins") or [])

    @property
    def users_service_api_url(self) -> str:
        return os.environ.get("USERS_SERVICE_API_URL", "")

    @property
    def users_service_api_key(self) -> str:
        return os.environ.get("USERS_SERVICE_API_KEY", "")
