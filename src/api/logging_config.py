"""
Review Desk Logging Configuration
=================================

Console logging for the API process, optionally as JSON lines and
optionally mirrored to a rotating file. Settings come from LoggingConfig
(LOG_LEVEL, LOG_JSON, LOG_FILE).

Review code attaches context with `extra=`:
    logger.info("Approval updated", extra={"review_id": "7453"})
Those keys show up as top-level fields in JSON output.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone

from ..data.config import LoggingConfig


# Context keys set through `extra=` by the review modules
CONTEXT_FIELDS = ("review_id", "channel", "source")

TEXT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)-28s | %(message)s"

# Libraries whose INFO chatter drowns the review logs
QUIET_LOGGERS = ("urllib3", "httpx", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, plus any context fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    config: LoggingConfig,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Replace the root handlers according to `config`.

    Returns the root logger. Unknown level names fall back to INFO.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    root.handlers.clear()

    formatter = build_formatter(config.json_logs)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if config.log_file:
        os.makedirs(os.path.dirname(config.log_file) or ".", exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug(
        f"Review logging ready: level={config.level} json={config.json_logs} "
        f"file={config.log_file or 'none'}"
    )
    return root
