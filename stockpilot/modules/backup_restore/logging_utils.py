"""
stockpilot/modules/backup_restore/logging_utils.py

Append-only JSON-lines log for export/import operations.

Public API
----------
- get_logger() -> logging.Logger
- log_event(logger, op, phase, message, extra: dict = {})
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from ...config import LOG_DIR

__all__ = ["get_logger", "log_event"]

_LOGGER_NAME = "stockpilot.backup_restore"
_LOG_FILE_NAME = "backup_restore.log"


def get_logger(file_path: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Logger writing JSON lines to LOG_DIR/backup_restore.log (or `file_path`).
    Repeated calls reuse the configured handlers.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if logger.handlers:
        return logger

    log_file = Path(file_path) if file_path else LOG_DIR / _LOG_FILE_NAME
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), mode="a", encoding="utf-8", delay=True)
    except OSError:
        # Read-only location: stderr only
        sh = logging.StreamHandler()
        sh.setLevel(level)
        sh.setFormatter(_JsonLineFormatter())
        logger.addHandler(sh)
        return logger

    fh.setLevel(level)
    fh.setFormatter(_JsonLineFormatter())
    logger.addHandler(fh)

    sh = logging.StreamHandler()
    sh.setLevel(logging.WARNING)
    sh.setFormatter(_JsonLineFormatter())
    logger.addHandler(sh)
    return logger


class _JsonLineFormatter(logging.Formatter):
    """
    {"ts":"2025-09-16T12:00:01.123Z","level":"INFO","name":"...","msg":"...","extra":{...}}
    """
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        extra = getattr(record, "extra_payload", None)
        if isinstance(extra, dict):
            payload["extra"] = extra
        return json.dumps(payload, ensure_ascii=False, default=str)


def log_event(
    logger: logging.Logger,
    op: str,
    phase: str,
    message: str,
    extra: Dict[str, object] | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Log one structured event.

    Args:
        op: "export" or "import".
        phase: e.g. "read", "validate", "merge", "write", "done".
        extra: additional key/values (paths, counts); never overrides op/phase.
    """
    extra_payload: Dict[str, object] = {"op": op, "phase": phase}
    for k, v in (extra or {}).items():
        extra_payload.setdefault(k, v)
    logger.log(level, message, extra={"extra_payload": extra_payload})
