"""Structured logging configuration.

This module provides structured logging with JSON formatting for production
environments and human-readable formatting for development. The level and
format come from the application settings (GE_LOG_LEVEL, GE_LOG_JSON).

Security Impact:
    - Admission decisions carry patient identifiers only, never names or
      record contents
    - Entity validation failures name the entity and field, not the value
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# Domain context attached to records through `extra=` by the registry and
# the entity validation boundary
CONTEXT_FIELDS = ("patient_id", "actor_role", "decision", "entity", "field")


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter for logs.

    Formats log records as JSON lines, adding whichever domain context
    fields the record carries.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Parameters:
            record: Log record to format

        Returns:
            JSON string representation of log record
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        return json.dumps(log_data, default=str)


def setup_logging(use_json: bool = False, log_level: str = "INFO") -> int:
    """Setup application logging.

    Parameters:
        use_json: Use JSON formatting (for production)
        log_level: Logging level name; unknown names fall back to INFO

    Returns:
        The numeric level applied to the root logger
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        logging.getLogger(__name__).warning(f"Unknown log level {log_level!r}, using INFO")
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if use_json:
        formatter = StructuredFormatter()
    else:
        # Human-readable format for development
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    return level


def configure_from_settings(settings, verbose: bool = False) -> int:
    """Apply the settings' log level and format; `verbose` forces DEBUG."""
    return setup_logging(
        use_json=settings.log_json,
        log_level="DEBUG" if verbose else settings.log_level,
    )
