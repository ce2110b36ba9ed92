"""
Logging Configuration Module

Structured logging for currency table loads, lookups and money operations.
Records may carry `currency`, `operation` and `details` attributes, which
the JSON formatter writes as top-level keys.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

STRUCTURED_FIELDS = ("currency", "operation", "details")


class JSONFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record):
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Plain text with the operation and currency appended when present"""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record):
        text = super().format(record)
        tags = [
            f"{field}={getattr(record, field)}"
            for field in ("operation", "currency")
            if getattr(record, field, None) is not None
        ]
        return f"{text} [{' '.join(tags)}]" if tags else text


def setup_logging(level: str = "INFO", logger_name: str = "moneykit",
                  log_format: str = "json") -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Logger to configure
        log_format: "json" for JSONFormatter, anything else for TextFormatter

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)

    # Repeated setup replaces the previous handler
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    return logger


def configure_from_settings(settings=None) -> logging.Logger:
    """Setup logging from MoneyConfig values"""
    if settings is None:
        from .config import get_config
        settings = get_config()
    return setup_logging(level=settings.log_level, log_format=settings.log_format)


def get_logger(name: str = "moneykit") -> logging.Logger:
    return logging.getLogger(name)


def log_operation(logger: logging.Logger, level: Union[str, int], message: str,
                  currency: Optional[str] = None, operation: Optional[str] = None,
                  details: Optional[dict] = None):
    """
    Log a money operation with structured attributes.

    Args:
        logger: Logger instance
        level: Level name ("debug", "info", ...) or number
        message: Log message
        currency: ISO code of the currency involved
        operation: Operation name, e.g. "convert"
        details: Additional structured data
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    logger.log(
        level, message, stacklevel=2,
        extra={"currency": currency, "operation": operation, "details": details}
    )
