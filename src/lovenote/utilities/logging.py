import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "lovenote"
LOG_FILENAME = "lovenote.log"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
LOG_DIR_ENV_VAR = "LOVENOTE_LOG_DIR"
MAX_LOG_BYTES = 1024 * 1024  # 1 MiB
BACKUP_COUNT = 1


def _log_directory() -> Path:
    log_dir = os.getenv(LOG_DIR_ENV_VAR)
    path = Path(log_dir).expanduser() if log_dir else Path.home() / ".lovenote"
    path.mkdir(parents=True, exist_ok=True)
    return path


def configure_logging(level: str | None = None, log_dir: Path | None = None) -> logging.Logger:
    """Attach console and file handlers to the ``lovenote`` package logger.

    Module loggers are its children and propagate to it, so a session
    writes one ``lovenote.log``. Calling this again replaces the handlers.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level_name = (level or os.getenv(LOG_LEVEL_ENV_VAR, "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    file_handler = RotatingFileHandler(
        (log_dir or _log_directory()) / LOG_FILENAME,
        maxBytes=MAX_LOG_BYTES,
        backupCount=BACKUP_COUNT,
    )
    for handler in (logging.StreamHandler(), file_handler):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()
    return logging.getLogger(name)
