"""Settings for doc-spine hosts.

The engine itself takes plain constructor arguments. ``DocSpineSettings``
lets a host read the handful of tunables from the environment (or a ``.env``
file) and apply them consistently.

Fields
──────
log_level            : Structlog log level
log_json             : JSON output (True), console (False), auto (None)
service_name         : Service name stamped on every log line
history_max_entries  : Cap on each entity's undo history (None = unbounded)

Examples:
    >>> import os
    >>> os.environ["DOCSPINE_HISTORY_MAX_ENTRIES"] = "50"
    >>> settings = DocSpineSettings()
    >>> settings.history_max_entries
    50
    >>> entity = WorkflowEntity.from_settings(settings, "doc-1")

Tags:
    settings, configuration, pydantic, environment, doc-spine
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docspine.core.logging import configure_logging


class DocSpineSettings(BaseSettings):
    """Environment-driven settings, prefix ``DOCSPINE_``."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None
    service_name: str = "doc-spine"

    # ── Undo history ─────────────────────────────────────────────
    history_max_entries: int | None = Field(
        default=None,
        description="Maximum snapshots kept per entity; oldest are evicted first",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

    @field_validator("history_max_entries")
    @classmethod
    def _positive_cap(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("history_max_entries must be >= 1")
        return value


def configure_from_settings(settings: DocSpineSettings) -> None:
    """Apply the logging part of *settings*."""
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        service=settings.service_name,
    )


__all__ = ["DocSpineSettings", "configure_from_settings"]
