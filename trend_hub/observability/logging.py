"""
Log output for the trend aggregation service.

Every record carries the fields bound with `log_context` for the current
task: the HTTP middleware binds `request_id` and `path`, and the aggregator
binds the `channels` it is fanning out to. In JSON mode those fields are
top-level keys of each line; in text mode they are appended as key=value
pairs.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

# Fields bound for the current task; never mutated in place
log_fields: ContextVar[Optional[Dict[str, Any]]] = ContextVar("log_fields", default=None)

# Keys the formatter owns; bound fields cannot overwrite them
RESERVED_KEYS = frozenset({"time", "level", "logger", "message", "error"})

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("aiohttp.access", "httpx", "openai", "asyncio")


def current_fields() -> Dict[str, Any]:
    return dict(log_fields.get() or {})


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """
    Bind fields to every log record emitted inside the block.

    Nested blocks add to (and may override) the outer fields; the outer
    fields are restored on exit.

    Example:
        with log_context(channels="weibo,zhihu"):
            logger.info("Aggregating")
    """
    merged = current_fields()
    merged.update(fields)
    token = log_fields.set(merged)
    try:
        yield merged
    finally:
        log_fields.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with bound fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in current_fields().items():
            if key not in RESERVED_KEYS:
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines for local development."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = current_fields()
        if not fields:
            return line

        suffix = " ".join(f"{key}={value}" for key, value in fields.items())
        head, sep, rest = line.partition("\n")
        return f"{head} [{suffix}]{sep}{rest}"


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Route all logging to stdout with the chosen formatter.

    Args:
        level: Root log level name; unknown names mean INFO
        json_format: JSON lines (True) or plain text (False)
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else TextFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured: level={level}, format={'json' if json_format else 'text'}"
    )
