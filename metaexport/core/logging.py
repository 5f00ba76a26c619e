"""Structured logging with secret redaction for metaexport.

Logs are written as JSON objects to stderr. Database credentials registered
through ``register_secret_for_redaction`` are replaced by ``[REDACTED]``
before a record is emitted.
"""

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from typing import Optional, Set


_SECRET_REGISTRY: Set[str] = set()
_SECRET_REGISTRY_LOCK = threading.Lock()

LOG_LEVEL_ENV_VAR = "METAEXPORT_LOG_LEVEL"


class SecretRedactionFilter(logging.Filter):
    """Logging filter that automatically redacts registered secrets."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log records to redact secrets."""
        if isinstance(record.msg, str):
            record.msg = redact_secrets(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    key: redact_secrets(value) if isinstance(value, str) else value
                    for key, value in record.args.items()
                }
            else:
                record.args = tuple(
                    redact_secrets(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry["exception"] = redact_secrets(self.formatException(record.exc_info))

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def init_logging(level: Optional[str] = None) -> None:
    """Initialize stderr logging with JSON format and secret redaction.

    Sets up the ``metaexport`` logger so that it:
    - writes JSON logs to stderr
    - redacts registered secrets
    - respects the METAEXPORT_LOG_LEVEL environment variable unless ``level``
      is given explicitly

    Args:
        level: Optional log level name overriding the environment
    """
    log_level = (level or os.getenv(LOG_LEVEL_ENV_VAR, "INFO")).upper()

    numeric_level = getattr(logging, log_level, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level = "INFO"

    package_logger = logging.getLogger("metaexport")
    package_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(numeric_level)
    stderr_handler.addFilter(SecretRedactionFilter())
    stderr_handler.setFormatter(JSONFormatter())
    package_logger.addHandler(stderr_handler)

    package_logger.debug("metaexport logging initialized", extra={
        "extra_fields": {
            "log_level": log_level,
            "handler": "stderr",
            "format": "json",
        }
    })


def register_secret_for_redaction(secret_value: Optional[str]) -> None:
    """Register a secret value for automatic redaction in logs.

    Args:
        secret_value: The secret string to redact from logs
    """
    if not secret_value or len(secret_value.strip()) == 0:
        return

    with _SECRET_REGISTRY_LOCK:
        _SECRET_REGISTRY.add(secret_value.strip())


def redact_secrets(text: str) -> str:
    """Redact all registered secrets from the given text.

    Args:
        text: The text to redact secrets from

    Returns:
        The text with secrets replaced by [REDACTED]
    """
    if not text:
        return text

    result = text
    with _SECRET_REGISTRY_LOCK:
        for secret in _SECRET_REGISTRY:
            if secret in result:
                result = result.replace(secret, "[REDACTED]")

    return result


def clear_secret_registry() -> None:
    """Clear all registered secrets (mainly for testing)."""
    with _SECRET_REGISTRY_LOCK:
        _SECRET_REGISTRY.clear()


def get_registered_secrets_count() -> int:
    """Get the number of registered secrets (for testing/debugging)."""
    with _SECRET_REGISTRY_LOCK:
        return len(_SECRET_REGISTRY)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance carrying the secret redaction filter.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        A configured logger instance with secret redaction
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, SecretRedactionFilter) for f in logger.filters):
        logger.addFilter(SecretRedactionFilter())

    return logger
