"""Runtime settings for the bot access checker.

Values come from the environment; a ``.env`` file in the working directory
is loaded first when present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

_DEFAULT_CORS_ORIGINS = "http://localhost:3000"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    robots_timeout: float = 8.0
    probe_timeout: float = 10.0
    max_redirects: int = 3
    rate_limit_per_minute: int = 60
    cors_origins: list[str] = field(
        default_factory=lambda: [_DEFAULT_CORS_ORIGINS]
    )
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables, using defaults for
        anything unset."""
        origins = os.environ.get("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS)
        return cls(
            robots_timeout=_env_float("ROBOTS_TIMEOUT", 8.0),
            probe_timeout=_env_float("PROBE_TIMEOUT", 10.0),
            max_redirects=_env_int("PROBE_MAX_REDIRECTS", 3),
            rate_limit_per_minute=_env_int("RATE_LIMIT_PER_MINUTE", 60),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper()
            or "INFO",
            debug=_env_bool("DEBUG", False),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
