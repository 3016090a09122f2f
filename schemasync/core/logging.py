"""Structured logging configuration for schemasync."""

import logging
import sys
from typing import Optional

try:
    from json_log_formatter import JSONFormatter
except ImportError:
    JSONFormatter = None  # type: ignore


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    project_name: Optional[str] = None,
) -> None:
    """Configure logging for schemasync.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; otherwise use normal format
        project_name: Optional project name to include in every log line
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("schemasync")
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if json_format:
        if JSONFormatter is None:
            raise ImportError(
                "json-log-formatter is required for JSON logging. "
                "Install it with: pip install schemasync[json-logs]"
            )
        formatter = JSONFormatter()
    else:
        formatter = StructuredFormatter(project_name=project_name)

    handler.setFormatter(formatter)
    logger.addHandler(handler)


class StructuredFormatter(logging.Formatter):
    """Structured formatter that prefixes messages with table/field identity."""

    def __init__(self, project_name: Optional[str] = None):
        super().__init__()
        self.project_name = project_name

    def format(self, record: logging.LogRecord) -> str:
        context = getattr(record, "context", {})

        parts = [f"[{record.levelname}]"]

        if self.project_name:
            parts.append(f"project={self.project_name}")

        if hasattr(record, "table"):
            parts.append(f"table={record.table}")

        if hasattr(record, "field"):
            parts.append(f"field={record.field}")

        for key, value in context.items():
            parts.append(f"{key}={value}")

        parts.append(record.getMessage())

        if record.exc_info:
            parts.append("\n" + self.formatException(record.exc_info))

        return " ".join(parts)
