"""
JSONL logging bootstrap.
Attaches a single JSONL file sink to the root logger early in CLI startup.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

DEFAULT_PATH = os.environ.get("AUTOLOAD_LOG_PATH", "./autoload.log.jsonl")
DEFAULT_LEVEL = os.environ.get("AUTOLOAD_LOG_LEVEL", "INFO").upper()

# Standard LogRecord attributes, everything else is an extra
_RESERVED = frozenset(
    (
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def build_payload(self, record: logging.LogRecord) -> dict:
        payload = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "schema": {"name": "autoload.log", "ver": "1.0.0"},
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.format_exception(record)
        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            payload.setdefault(key, value)
        return payload

    def format_exception(self, record: logging.LogRecord) -> str:
        return logging.Formatter().formatException(record.exc_info)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(self.build_payload(record), ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | Path | None = None, level: str | None = None) -> JsonlHandler:
    path = path or DEFAULT_PATH
    level = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    # Replace any earlier JSONL sink
    for h in list(root.handlers):
        if isinstance(h, JsonlHandler):
            root.removeHandler(h)
            h.close()
    handler = JsonlHandler(path)
    root.addHandler(handler)
    return handler
