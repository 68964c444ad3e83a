"""Runtime settings for faultline.

Settings are read from ``FAULTLINE_*`` environment variables (and an optional
``.env`` file) through pydantic-settings, so a deployment can tune logging and
fault capture without code changes.

Fields
──────
log_level          : Level applied by ``configure_logging()`` when none is given
json_logs          : Force JSON (True) or console (False) output; None auto-detects
capture_location   : Record file/line/function/thread on captured faults
thread_name_prefix : Prefix for worker threads started by the barriers

Examples:
    >>> from faultline.core.settings import get_settings
    >>> get_settings().capture_location
    True

Tags:
    settings, configuration, pydantic, environment, faultline

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FaultlineSettings(BaseSettings):
    """Settings shared by every faultline barrier."""

    model_config = SettingsConfigDict(
        env_prefix="FAULTLINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    # ── Fault capture ────────────────────────────────────────────
    capture_location: bool = True
    thread_name_prefix: str = Field(
        default="faultline",
        min_length=1,
        description="Prefix for barrier worker thread names",
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> FaultlineSettings:
    """Return the process-wide settings, loading them on first use."""
    return FaultlineSettings()


def reset_settings() -> None:
    """Drop cached settings so the next ``get_settings()`` re-reads the environment."""
    get_settings.cache_clear()


def resolve_setting(name: str) -> Any:
    """Read one setting, falling back to the field default if the environment is invalid.

    Barriers call this while handling a fault, where a ``ValidationError`` from
    a bad ``FAULTLINE_*`` variable would replace the fault being returned.
    ``get_settings()`` still raises for callers that want to see the problem.
    """
    try:
        return getattr(get_settings(), name)
    except ValidationError:
        return FaultlineSettings.model_fields[name].default


__all__ = ["FaultlineSettings", "get_settings", "reset_settings", "resolve_setting"]
