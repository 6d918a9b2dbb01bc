"""
Remote Studio Configuration

Handles environment configuration for the workbench backend and the
remote workspace it fronts.
"""

import os
from dataclasses import dataclass
from typing import Optional


# Server configuration
HOST = os.getenv("REMOTE_STUDIO_HOST", "127.0.0.1")
PORT = int(os.getenv("REMOTE_STUDIO_PORT", "7777"))

# Remote workspace endpoint (the host that owns the files and the agent)
API_BASE_URL = os.getenv("REMOTE_STUDIO_API_BASE_URL", "http://localhost:8000")

# Activity log size shown in the sidebar
LOG_CAPACITY = int(os.getenv("REMOTE_STUDIO_LOG_CAPACITY", "10"))


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    """
    Parse the request timeout setting.

    An unset or empty value means no timeout: a hung request never resolves.

    Raises:
        ValueError: If the value is not a positive number
    """
    if raw is None or not raw.strip():
        return None
    value = float(raw)
    if value <= 0:
        raise ValueError(f"REMOTE_STUDIO_TIMEOUT must be positive, got {raw!r}")
    return value


REQUEST_TIMEOUT = _parse_timeout(os.getenv("REMOTE_STUDIO_TIMEOUT"))


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    host: str
    port: int
    api_base_url: str
    request_timeout: Optional[float]
    log_capacity: int


def get_settings() -> Settings:
    """Re-read the environment and return the current settings."""
    return Settings(
        host=os.getenv("REMOTE_STUDIO_HOST", HOST),
        port=int(os.getenv("REMOTE_STUDIO_PORT", str(PORT))),
        api_base_url=os.getenv("REMOTE_STUDIO_API_BASE_URL", API_BASE_URL).rstrip("/"),
        request_timeout=_parse_timeout(os.getenv("REMOTE_STUDIO_TIMEOUT")),
        log_capacity=int(os.getenv("REMOTE_STUDIO_LOG_CAPACITY", str(LOG_CAPACITY))),
    )
