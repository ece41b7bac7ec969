import datetime
import json
import logging
import os
import sys
from datetime import timezone
from logging.handlers import TimedRotatingFileHandler

LOGGER_NAME = "mongo_init"


# ---------- JSON logger to stdout ----------
class JsonFormatter(logging.Formatter):
    def format(self, record):
        ts = datetime.datetime.now(timezone.utc).isoformat()
        base = {
            "timestamp": ts,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
            "process": record.process,
            "thread": record.thread,
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            base.update(extra)
        return json.dumps(base, default=str, ensure_ascii=False)


def setup_logging(level: str = "INFO", log_dir: str = None) -> logging.Logger:
    """Configure the package logger once; later calls only adjust the level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if getattr(logger, "_json_configured", False):
        return logger

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(JsonFormatter())
    logger.addHandler(stream_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, "mongo-init.log")
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",  # rotate at midnight
            interval=1,
            backupCount=7,  # keep 7 days
        )
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)
        logger.debug("file_logging_enabled", extra={"extra": {"log_file": log_file}})

    logger._json_configured = True
    return logger


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
