from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from restaurant_api.core.config import LOG_LEVEL
from restaurant_api.core.request_context import current_context

# campos opcionais passados via extra=...
EXTRA_FIELDS = ("endpoint", "method", "status_code", "reason")

_SECRET_KEYS = r"(?:password_hash|password|token|secret|jwt)"
_MASKS = (
    re.compile(r"(authorization\s*[:=]\s*bearer\s+)(\S+)", re.IGNORECASE),
    re.compile(r"(\b" + _SECRET_KEYS + r"\b[\"']?\s*[:=]\s*[\"']?)([^\s\"',}]+)", re.IGNORECASE),
)

QUIET_LOGGERS = {
    "sqlalchemy.engine": "WARNING",
    "alembic": "INFO",
}


def mask_secrets(text: str) -> str:
    for pattern in _MASKS:
        text = pattern.sub(r"\1***", text)
    return text


class JsonFormatter(logging.Formatter):
    """One JSON object per line; bearer tokens and passwords never reach the output."""

    def format(self, record: logging.LogRecord) -> str:
        context = current_context()
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", None) or context.request_id,
            "user_id": getattr(record, "user_id", None) or context.user_id,
            "module": record.name,
            "message": mask_secrets(record.getMessage()),
            "duration_ms": getattr(record, "duration_ms", None),
        }
        payload.update(
            {key: getattr(record, key) for key in EXTRA_FIELDS if getattr(record, key, None) is not None}
        )
        if record.exc_info:
            payload["exception"] = mask_secrets(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: Optional[str] = None) -> None:
    level = (level or LOG_LEVEL).upper()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(level)
    for logger_name, logger_level in QUIET_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(logger_level)
