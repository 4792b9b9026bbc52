"""
Pydantic v2 settings for the Snoocore client.

Values layer as: constructor keywords > ``SNOOCORE_*`` environment > defaults.
``browser`` switches between native behaviour (User-Agent and Cookie headers)
and browser behaviour (``app`` form field, no such headers).

NAVMAP:
- LogFormat: console or JSON log rendering
- SnoocoreSettings: client-wide configuration
- get_settings / reset_settings: cached process-wide instance
"""

from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "snoocore-default-User-Agent"
DEFAULT_THROTTLE_MS = 2000
DEFAULT_LOGOUT_URL = "http://www.reddit.com/logout"


class LogFormat(str, Enum):
    """Supported log output formats."""

    CONSOLE = "console"
    JSON = "json"


class SnoocoreSettings(BaseSettings):
    """Client-wide configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SNOOCORE_",
        case_sensitive=False,
        extra="ignore",
    )

    user_agent: str = Field(
        DEFAULT_USER_AGENT,
        description="User-Agent header (native) or `app` field (browser)",
    )
    throttle: int = Field(
        DEFAULT_THROTTLE_MS,
        description="Minimum spacing between dispatched calls (milliseconds)",
        ge=0,
    )
    browser: bool = Field(
        False,
        description="Behave like a browser host: no User-Agent or Cookie headers",
    )
    timeout: Optional[float] = Field(
        None,
        description="Transport timeout in seconds (None = wait indefinitely)",
        gt=0,
    )
    endpoints_file: Optional[Path] = Field(
        None,
        description="JSON/YAML descriptor table replacing the bundled one",
    )
    logout_url: str = Field(
        DEFAULT_LOGOUT_URL,
        description="Form endpoint that ends a cookie/modhash session",
    )
    log_level: str = Field("WARNING", description="Level for the Snoocore logger")
    log_format: LogFormat = Field(LogFormat.CONSOLE, description="Pretty console or JSON")

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        """Fall back to the placeholder agent when given a blank string."""
        return v.strip() or DEFAULT_USER_AGENT

    @field_validator("endpoints_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        """Expand user home for descriptor table paths."""
        if v is None or v == "":
            return None
        return Path(v).expanduser()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


_settings: Optional[SnoocoreSettings] = None
_settings_lock = threading.Lock()


def get_settings() -> SnoocoreSettings:
    """Return the cached process-wide settings, loading them on first use."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = SnoocoreSettings()
        return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next lookup re-reads the environment."""
    global _settings
    with _settings_lock:
        _settings = None


__all__ = [
    "DEFAULT_LOGOUT_URL",
    "DEFAULT_THROTTLE_MS",
    "DEFAULT_USER_AGENT",
    "LogFormat",
    "SnoocoreSettings",
    "get_settings",
    "reset_settings",
]
