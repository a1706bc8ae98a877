"""Configuration layer for the oaths library.

Goals
-----
* Keep every tunable in one validated ``OathSettings`` object.
* Read the environment once and cache the result; re-read only when one of
  the watched variables changes, so tests can adjust settings with
  ``monkeypatch.setenv`` without reloading modules.
* Never fail on bad input: an invalid value falls back to that field's default.

Environment Variables
---------------------
OATHS_LOG_LEVEL   DEBUG | INFO | WARNING | ERROR | CRITICAL (``WARN`` alias)
OATHS_LOG_JSON    true/false, 1/0, yes/no, on/off
OATHS_LOG_FILE    path of a rotating log file (unset or blank disables it)

Public API
----------
* get_settings() -> OathSettings
* ENV_FIELD_MAP
"""
from __future__ import annotations

import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .settings import LOG_LEVELS, OathSettings

ENV_FIELD_MAP: Dict[str, str] = {
    "log_level": "OATHS_LOG_LEVEL",
    "log_json": "OATHS_LOG_JSON",
    "log_file": "OATHS_LOG_FILE",
}

_CACHED: Optional[OathSettings] = None
_ENV_GUARD: Optional[str] = None


def _read_env() -> Dict[str, str]:
    return {field: os.environ[var] for field, var in ENV_FIELD_MAP.items() if var in os.environ}


def _validated_fields(raw: Dict[str, str]) -> Dict[str, Any]:
    """Validate each field on its own so one bad value keeps the others."""
    accepted: Dict[str, Any] = {}
    for field, value in raw.items():
        try:
            single = OathSettings.model_validate({field: value})
        except ValidationError:
            continue
        accepted[field] = getattr(single, field)
    return accepted


def get_settings() -> OathSettings:
    """Return process-cached settings, refreshed when the environment changes."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    raw = _read_env()
    guard = "/".join(f"{k}={v}" for k, v in sorted(raw.items()))
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = OathSettings(**_validated_fields(raw))
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["OathSettings", "LOG_LEVELS", "ENV_FIELD_MAP", "get_settings"]
