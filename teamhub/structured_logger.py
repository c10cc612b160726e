"""
TeamHub logging setup.

Modules log through `logging.getLogger(__name__)`. This module configures
the `teamhub` logger tree and, when `structured_logs` is on, renders every
record as one JSON line tagged with the caller's request id.
"""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, UTC
from typing import Any, Dict, Optional

# The embedding service sets this per request (resolver, job, CLI command)
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StructuredLogFormatter(logging.Formatter):
    """Renders a record, its `extra=` fields and the current request id as JSON"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_ctx.get()
        if request_id:
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS:
                entry.setdefault(key, value)

        return json.dumps(entry, default=str)


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredLogFormatter())
    return handler


def get_logger(name: str, structured: bool = False) -> logging.Logger:
    """
    Named logger; with `structured=True` it gets its own JSON handler and
    stops propagating. Calling again never stacks a second handler.
    """
    logger = logging.getLogger(name)
    if structured and not logger.handlers:
        logger.addHandler(_json_handler())
        logger.propagate = False
    return logger


def configure_logging(settings=None) -> logging.Logger:
    """
    Configure the `teamhub` logger tree from settings.

    Plain-text output by default; JSON lines when `structured_logs` is on.
    Safe to call more than once.
    """
    if settings is None:
        from teamhub.config import get_settings
        settings = get_settings()

    root = logging.getLogger("teamhub")
    root.setLevel(settings.log_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if settings.structured_logs:
        handler = _json_handler()
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)
    root.propagate = False

    return root


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log `message` at `level` with `extra` fields plus the current request id.

        log_with_context(logger, "info", "Invitation sent", {"team_id": team_id})
    """
    fields = dict(extra or {})
    request_id = request_id_ctx.get()
    if request_id:
        fields["request_id"] = request_id

    logger.log(logging.getLevelName(level.upper()), message, extra=fields)
