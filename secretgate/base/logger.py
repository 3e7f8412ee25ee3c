"""
Structured logging for Secretgate.

Provides a pre-configured logger that emits JSON-structured log records
with request context (request id, operation, secret name) on standard
error.  Standard output belongs to the CGI response and is never logged to.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via SecretGateLogger.log_operation
        for key in ("request_id", "operation", "secret"):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class SecretGateLogger:
    """Convenience wrapper around :mod:`logging` for secret operations.

    The dispatcher binds a request id and operation with :meth:`bind` so
    that every record emitted while serving one request can be correlated.
    """

    def __init__(self, name: str = "secretgate") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)
        self.request_id: str | None = None
        self.operation: str | None = None

    def bind(self, operation: str | None = None, request_id: str | None = None) -> str:
        """Set the context attached to subsequent records.

        Returns:
            The request id in effect, generated if not supplied.
        """
        self.request_id = request_id or uuid.uuid4().hex[:12]
        self.operation = operation
        return self.request_id

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        operation: str | None = None,
        secret: str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with request context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            operation: Secret operation; defaults to the bound one.
            secret: Secret name the record is about.
            request_id: Correlation ID; defaults to the bound one.
            exc_info: Whether to include exception info.
        """
        extra = {
            "operation": operation or self.operation,
            "secret": secret,
            "request_id": request_id or self.request_id,
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
sg_logger = SecretGateLogger()
