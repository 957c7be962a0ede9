"""Logging configuration for the RAG chat application.

Everything goes to the root logger: INFO and up on stdout, DEBUG and up in
``rag_chat.log`` and errors with their call site and details in
``errors.log``, both rotated under ``LOGS_DIR``.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

from .config import LOGS_DIR

LOG_FILE = "rag_chat.log"
ERROR_LOG_FILE = "errors.log"
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# HTTP client libraries log every request at INFO
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "openai", "multipart")


class _DetailsFilter(logging.Filter):
    """Guarantee the ``details`` attribute used by the error formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "details"):
            record.details = {}
        return True


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter,
                      max_file_size: int, backup_count: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=max_file_size,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = True,
    log_to_console: bool = True,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    log_dir: str = LOGS_DIR
) -> None:
    """Replace the root logger's handlers with the application's."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt=DATE_FORMAT
    )

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_to_file:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(
            _rotating_handler(directory / LOG_FILE, logging.DEBUG, formatter, max_file_size, backup_count)
        )

        error_formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s\n'
                'Details: %(details)s\n'
                '---\n',
            datefmt=DATE_FORMAT
        )
        error_handler = _rotating_handler(
            directory / ERROR_LOG_FILE, logging.ERROR, error_formatter, max_file_size, backup_count
        )
        error_handler.addFilter(_DetailsFilter())
        root_logger.addHandler(error_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module."""
    return logging.getLogger(name)


def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).lower() == "true"


# Initialize logging when module is imported
setup_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_to_file=_env_flag("LOG_TO_FILE"),
    log_to_console=_env_flag("LOG_TO_CONSOLE")
)
