"""
JSON structured logger setup
Compliant with 12-factor app logging principles
"""

from datetime import datetime, timezone
import json
import logging
import sys

EXTRA_FIELDS = (
    "request_id",
    "endpoint",
    "method",
    "ip",
    "mode",
    "card_id",
    "word_id",
    "status",
    "count",
    "error",
)


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""

    def __init__(self, service_name="unknown"):
        super().__init__()
        self.service_name = service_name

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add extra fields if they exist
        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logger(service_name, level="INFO"):
    """
    Setup structured JSON logging on stdout.

    The handler goes on the root logger so module loggers of the services
    (``logging.getLogger(__name__)``) share the same output.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service_name))

    root = logging.getLogger()
    # Remove existing handlers
    for existing in root.handlers[:]:
        if isinstance(existing.formatter, JSONFormatter):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    return logging.getLogger(service_name)
