"""Settings for plan-ledger.

Configuration is explicit, validated, and environment-driven.
``LedgerSettings`` reads ``PLANLEDGER_*`` environment variables and an
optional ``.env`` file.

Order of precedence (highest → lowest):
    1. Explicit constructor arguments
    2. Environment variables (``PLANLEDGER_MIRROR_TO_STDOUT``, etc.)
    3. ``.env`` file
    4. Defaults below

Examples:
    >>> from planledger.core.settings import LedgerSettings
    >>> LedgerSettings(mirror_to_stdout=True).mirror_to_stdout
    True

Tags:
    settings, configuration, pydantic, environment, plan-ledger

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from planledger.core.errors import ConfigError


class LedgerSettings(BaseSettings):
    """Settings for one diagnostics ledger.

    Fields
    ──────
    mirror_to_stdout : Echo every recorded message to the console
    publish_events   : Publish recorded messages on the event bus
    publish_timeout  : Seconds a synchronous publish may take before it is abandoned
    log_level        : Structlog log level
    log_format       : ``console`` or ``json`` log rendering
    """

    model_config = SettingsConfigDict(
        env_prefix="PLANLEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Output ───────────────────────────────────────────────────
    mirror_to_stdout: bool = Field(default=False, description="Echo recorded messages to the console")

    # ── Events ───────────────────────────────────────────────────
    publish_events: bool = Field(default=True, description="Publish message events")
    publish_timeout: float = Field(default=5.0, gt=0, description="Synchronous publish timeout (seconds)")

    # ── Observability ────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["console", "json"] = Field(default="console", description="Log rendering")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise to an upper-case stdlib level name."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings(**overrides: Any) -> LedgerSettings:
    """Build settings, raising :class:`ConfigError` on invalid values."""
    try:
        return LedgerSettings(**overrides)
    except PydanticValidationError as exc:
        raise ConfigError(
            f"Invalid ledger settings: {exc.error_count()} error(s)",
            cause=exc,
        ) from exc


@lru_cache(maxsize=1)
def get_settings() -> LedgerSettings:
    """Cached settings — loaded once per process."""
    return load_settings()


__all__ = ["LedgerSettings", "get_settings", "load_settings"]
