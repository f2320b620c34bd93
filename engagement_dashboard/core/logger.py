"""JSON event logging for the dashboard service.

Log calls pass a snake_case event name as the message and put details in
``extra=``. Each line is one JSON object: the event, a fixed service envelope,
and only the caller's extra fields (LogRecord bookkeeping is left out).
"""

from __future__ import annotations

import json
import logging
import os
import socket
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from .config import settings

REDACTED = "[REDACTED]"

# attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


class DashboardJsonFormatter(logging.Formatter):
    def __init__(
        self,
        service: str,
        environment: str,
        redaction_patterns: Iterable[str] = (),
    ):
        super().__init__()
        self.envelope = {
            "service": service,
            "environment": environment,
            "hostname": socket.gethostname(),
            "pid": os.getpid(),
        }
        self.patterns = [p.lower() for p in redaction_patterns]

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": self._event(record),
        }
        data.update(self.envelope)
        context = self._redact(record_context(record))
        if context:
            data["context"] = context
        if record.exc_info and record.exc_info[0] is not None:
            et, ev, tb = record.exc_info
            data["exception"] = {
                "type": et.__name__,
                "message": str(ev),
                "stack": traceback.format_tb(tb),
            }
        return json.dumps(data, default=str, ensure_ascii=False)

    def _sensitive(self, text: str) -> bool:
        text = text.lower()
        return any(p in text for p in self.patterns)

    def _event(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if self._sensitive(message):
            return "[REDACTED SENSITIVE LOG CONTENT]"
        return message

    def _redact(self, context: Dict[str, Any]) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for key, value in context.items():
            if self._sensitive(key):
                out[key] = REDACTED
            elif isinstance(value, dict):
                out[key] = self._redact(value)
            else:
                out[key] = value
        return out


_configured = False


def configure_logging(level: Optional[str] = None, force: bool = False):
    """Install one JSON handler on the root logger, once per process."""
    global _configured
    if _configured and not force:
        return logging.getLogger()
    handler = logging.StreamHandler()
    handler.setFormatter(
        DashboardJsonFormatter(
            service=settings.otel_service_name,
            environment=settings.app_environment,
            redaction_patterns=settings.app_log_redaction_patterns,
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel((level or settings.app_log_level).upper())
    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a named logger that propagates to the JSON root handler."""
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
