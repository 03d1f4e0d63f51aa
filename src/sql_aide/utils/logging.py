"""Structured logging for SQL Aide, built on structlog.

Every module logs through ``get_logger(__name__)``. Events are dotted
names (``table.declared``, ``render.completed``, ``erd.generated``) with
keyword fields, rendered as one JSON object per line with an ISO timestamp,
the logger name and the level.

Generated SQL can be long, so fields carrying SQL text (``fragment``,
``sql`` or any ``*_sql`` key) are shortened before rendering.

The level comes from ``Settings.log_level`` (``SQLA_LOG_LEVEL``).

Usage:
    >>> from sql_aide.utils.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("render.completed", tables_declared=7)
"""

import logging
import os
from typing import Any, MutableMapping

import structlog
from structlog.types import EventDict, Processor

from sql_aide.config import get_settings

MAX_SQL_FIELD_LENGTH = 200


def _is_sql_field(key: str) -> bool:
    return key in ("fragment", "sql") or key.endswith("_sql")


def shorten_sql_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> MutableMapping[str, Any]:
    """Structlog processor that truncates SQL text fields to a readable size."""
    for key, value in event_dict.items():
        if _is_sql_field(key) and isinstance(value, str) and len(value) > MAX_SQL_FIELD_LENGTH:
            hidden = len(value) - MAX_SQL_FIELD_LENGTH
            event_dict[key] = f"{value[:MAX_SQL_FIELD_LENGTH]}... [{hidden} more chars]"
    return event_dict


def _log_level() -> int:
    try:
        level_name = get_settings().log_level
    except Exception:
        # Invalid settings must not break logging itself
        level_name = os.getenv("SQLA_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure() -> None:
    level = _log_level()
    handler = logging.StreamHandler()
    handler.setLevel(level)
    logging.basicConfig(format="%(message)s", level=level, handlers=[handler])

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        shorten_sql_fields,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


_configure()


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> Any:
    """Logger with fields bound to every event it emits.

    Example:
        >>> logger = bind_context(dialect="sqlite", template="governed")
        >>> logger.debug("table.declared", table="publ_host")
    """
    return structlog.get_logger().bind(**kwargs)
