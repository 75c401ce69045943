"""
Logging setup shared by the CLI, the maintenance driver and the store.

Modules log through `get_logger(__name__)` and attach context with `extra=`
(record ids, batch sizes, thresholds). `configure_logging` chooses how those
lines are rendered: a compact console line for interactive use, or one JSON
object per line where the `extra=` fields become top-level keys.

    configure_logging(level="DEBUG", json_logs=True)
    get_logger("actionable_store.maintenance").info(
        "[MAINTENANCE COMPLETE]", extra={"deleted": 12, "attempts": 1}
    )
    # {"time": "...", "level": "INFO", "logger": "actionable_store.maintenance",
    #  "message": "[MAINTENANCE COMPLETE]", "deleted": 12, "attempts": 1}
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "extra"}

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def _record_to_dict(record: logging.LogRecord) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    for key, value in vars(record).items():
        if key not in _RESERVED_ATTRS and not key.startswith("_"):
            payload[key] = value
    # A literal `extra={"extra": {...}}` is flattened too.
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        payload.update(nested)
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return payload


class JsonFormatter(logging.Formatter):
    """One JSON object per line; non-serializable values fall back to `str()`."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return json.dumps(_record_to_dict(record), default=str)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Install a single stderr handler on the root logger.

    Parameters
    ----------
    level : str
        Level name applied to both the root logger and its handler.
    json_logs : bool
        Render with `JsonFormatter` instead of `CONSOLE_FORMAT`.
    force : bool
        When False and the root logger already has handlers (an embedding
        application configured logging first), leave the configuration alone.
    """
    if not force and logging.getLogger().handlers:
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": CONSOLE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if json_logs else "console",
                    "level": level,
                }
            },
            "root": {"handlers": ["stderr"], "level": level},
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
