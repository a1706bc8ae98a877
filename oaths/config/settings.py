"""Typed settings model for the oaths library.

Purpose
-------
Carry the handful of process-level knobs (logging level, JSON mode, optional
log file) as a validated, immutable object.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()`` convenience.

Failure modes
-------------
- Invalid values raise ``pydantic.ValidationError`` when validated directly;
  the environment loader in ``oaths.config`` falls back per field instead.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class OathSettings(BaseModel):
    """Process-level settings.

    Attributes
    ----------
    log_level:
        Level name for the shared ``oaths`` logger. ``WARN`` is accepted as an
        alias for ``WARNING``.
    log_json:
        Emit one JSON object per line (default) or a plain text format.
    log_file:
        When set, a rotating file handler is attached to the shared logger.
    """

    model_config = ConfigDict(frozen=True)

    log_level: str = Field(default="INFO")
    log_json: bool = True
    log_file: Optional[str] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> str:
        text = str(value).strip().upper()
        if text == "WARN":
            text = "WARNING"
        if text not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value!r}")
        return text

    @field_validator("log_file", mode="before")
    @classmethod
    def _blank_file_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


__all__ = ["OathSettings", "LOG_LEVELS"]
