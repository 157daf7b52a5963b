"""
Structured Logging

Plain text log lines by default, one JSON object per line when LOG_JSON is set.
"""
import json
import logging
import sys
from datetime import datetime, timezone

from ..config import LOG_JSON, LOG_LEVEL

# Attributes every LogRecord carries; anything else was passed through `extra=`
_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
    "processName", "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class StructuredJSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Log format:
    {
        "ts": "2024-01-01T00:00:00+00:00",
        "level": "WARNING",
        "logger": "fdaleads.services.gateway.api_client",
        "message": "openFDA unavailable, using sample applications",
        "error": null
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["error"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(json_lines: bool = LOG_JSON, level: str = LOG_LEVEL) -> logging.Logger:
    """Install a single stdout handler on the root logger."""
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if json_lines:
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    return root_logger
