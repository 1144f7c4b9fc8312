"""Application logging configuration utilities."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

AUDIT_LOGGER_NAME = "docseg.ingest.audit"
AUDIT_LOG_FILENAME = "segmentation_audit.log"


class MinimalJSONFormatter(logging.Formatter):
    """Serialize log records to a compact JSON string."""

    _RESERVED_KEYS = {
        "name",
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
        "message",
    }

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z")
        )

        log_record: dict[str, Any] = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
        }

        if isinstance(record.msg, dict):
            log_record.update(record.msg)
        else:
            message = record.getMessage()
            if message:
                log_record["message"] = message

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in self._RESERVED_KEYS or key.startswith("_"):
                continue
            log_record[key] = value

        return json.dumps(log_record, ensure_ascii=False, default=str)


def configure_logging(log_dir: Optional[Path] = None, level: str = "INFO") -> Path:
    """Configure JSON logging and the segmentation audit log; return the audit log path."""

    if log_dir is None:
        from docseg.settings import get_settings

        log_dir = get_settings().log_dir
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    audit_path = log_dir / AUDIT_LOG_FILENAME

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": MinimalJSONFormatter}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
                "segmentation_audit": {
                    "class": "logging.FileHandler",
                    "filename": str(audit_path),
                    "mode": "a",
                    "encoding": "utf-8",
                    "formatter": "json",
                },
            },
            "root": {
                "level": level,
                "handlers": ["default"],
            },
            "loggers": {
                AUDIT_LOGGER_NAME: {
                    "level": "INFO",
                    "handlers": ["segmentation_audit"],
                    "propagate": False,
                }
            },
        }
    )
    return audit_path
