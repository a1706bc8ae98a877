"""Structured logging utilities for the oaths library.

Rationale:
- One place configures the shared ``oaths`` logger so library modules only ask
  for a named child via ``get_logger``.
- Output is one JSON object per line by default; ``OATHS_LOG_JSON=0`` switches
  to a plain text format.
- Level, format and an optional rotating log file come from
  ``oaths.config.get_settings()`` and are re-applied on every ``get_logger``
  call, so environment changes take effect without a restart.

Events emitted by the library:
``oath.cleanup_failed`` and ``signal.listener_failed`` at WARNING,
``oath.broken`` and ``group.swept`` at DEBUG. Sibling failures suppressed by a
combinator are never logged.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from .config import get_settings
from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "oaths"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_BASE_LOGGER_ATTR = "_oaths_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_oaths_console_handler"
_FILE_HANDLER_ATTR = "_oaths_file_handler"
_ENV_FILE_HANDLER_ATTR = "_oaths_env_file_handler"


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(PLAIN_FORMAT)


def _parse_level(value: int | str | None, default: int = logging.INFO) -> int:
    """Parse a level name or number; unknown names fall back to ``default``."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def _ensure_base_logger() -> logging.Logger:
    """Initialize (or refresh) and return the shared ``oaths`` logger."""
    settings = get_settings()
    level = _parse_level(settings.log_level)
    logger = logging.getLogger(BASE_LOGGER_NAME)
    logger.setLevel(level)

    console = []
    for existing in [h for h in logger.handlers if getattr(h, _CONSOLE_HANDLER_ATTR, False)]:
        stream_obj = getattr(existing, "stream", None)
        if stream_obj is None or getattr(stream_obj, "closed", False):
            # a torn-down capture buffer cannot be flushed by setStream
            logger.removeHandler(existing)
            with contextlib.suppress(Exception):
                existing.close()
            continue
        console.append(existing)
    if not console:
        handler = logging.StreamHandler(sys.stderr)
        setattr(handler, _CONSOLE_HANDLER_ATTR, True)
        logger.addHandler(handler)
        console = [handler]
    for handler in console:
        handler.setLevel(level)
        # Follow sys.stderr replacements (pytest capture, redirection).
        if getattr(handler, "stream", None) is not sys.stderr:
            with contextlib.suppress(Exception):
                handler.setStream(sys.stderr)
        if isinstance(handler.formatter, JsonFormatter) != settings.log_json or handler.formatter is None:
            handler.setFormatter(_formatter(settings.log_json))

    if not getattr(logger, _BASE_LOGGER_ATTR, False):
        logger.propagate = False
        setattr(logger, _BASE_LOGGER_ATTR, True)
    if settings.log_file:
        _attach_file_handler(logger, settings.log_file, settings.log_json, from_env=True)
    else:
        _detach_file_handlers(logger, env_only=True)
    return logger


def _managed_file_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]


def _detach_file_handlers(logger: logging.Logger, *, env_only: bool = False) -> None:
    """Remove managed file handlers; ``env_only`` keeps ones set by ``configure_logger``."""
    for handler in _managed_file_handlers(logger):
        if env_only and not getattr(handler, _ENV_FILE_HANDLER_ATTR, False):
            continue
        logger.removeHandler(handler)
        with contextlib.suppress(OSError):
            handler.close()


def _attach_file_handler(
    logger: logging.Logger,
    file_path: str,
    json_mode: bool,
    *,
    from_env: bool = False,
) -> None:
    """Attach a managed rotating file handler, replacing one for another path."""
    abs_path = os.path.abspath(os.path.expanduser(file_path))
    for handler in _managed_file_handlers(logger):
        if getattr(handler, "baseFilename", None) == abs_path:
            handler.setLevel(logger.level)
            handler.setFormatter(_formatter(json_mode))
            return
    _detach_file_handlers(logger)
    os.makedirs(os.path.dirname(abs_path) or ".", exist_ok=True)
    # 5 x 10MB keeps long-running services bounded
    handler = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    setattr(handler, _FILE_HANDLER_ATTR, True)
    setattr(handler, _ENV_FILE_HANDLER_ATTR, from_env)
    handler.setLevel(logger.level)
    handler.setFormatter(_formatter(json_mode))
    logger.addHandler(handler)


def get_logger(name: str = BASE_LOGGER_NAME) -> logging.Logger:
    """Return ``name`` as a child of the configured ``oaths`` logger."""
    base = _ensure_base_logger()
    if name == BASE_LOGGER_NAME:
        return base
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: Optional[bool] = None,
) -> logging.Logger:
    """Reconfigure the shared logger at runtime.

    Parameters
    ----------
    level: int | str | None
        New level (number or name). ``None`` keeps the current level.
    file_path: Optional[str]
        Attach a rotating file handler writing to this path; ``None`` removes
        any file handler previously attached by this module.
    json_mode: Optional[bool]
        Switch every managed handler between JSON and plain text. ``None``
        keeps the configured format.

    Notes
    -----
    Handlers attached by callers are left untouched. A later ``get_logger``
    call re-applies the environment settings.
    """
    logger = _ensure_base_logger()
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level))
    if file_path is None:
        _detach_file_handlers(logger)
    else:
        mode = get_settings().log_json if json_mode is None else json_mode
        _attach_file_handler(logger, file_path, mode)
    for handler in logger.handlers:
        if getattr(handler, _CONSOLE_HANDLER_ATTR, False) or getattr(handler, _FILE_HANDLER_ATTR, False):
            handler.setLevel(logger.level)
            if json_mode is not None:
                handler.setFormatter(_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int | str = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit a structured log event as a single JSON message.

    Parameters
    ----------
    logger: logging.Logger
        Logger obtained from ``get_logger``.
    event: str
        Event name (e.g. ``oath.broken``).
    ctx: LogContext | None
        Shared oath/group context; merged shallowly.
    level: int | str
        Logging level for the record.
    keep_none: bool
        Preserve ``None``-valued fields (encoded as ``null``) instead of
        dropping them.
    **fields: Any
        Arbitrary JSON-serializable key/value pairs.
    """
    levelno = _parse_level(level)
    if not logger.isEnabledFor(levelno):
        return
    payload: dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(levelno, json.dumps(payload, ensure_ascii=False, default=repr))


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
]
