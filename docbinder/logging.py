"""Logging utilities for docbinder commands."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import WriteError

_LOGGER_NAME = "docbinder"
CONSOLE_FORMAT = "[%(stage)s] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a stage logger (``discovery``, ``pipeline``, ``export``) under docbinder."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class StageFormatter(logging.Formatter):
    """Console formatter that labels records with the pipeline stage that emitted them."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"{_LOGGER_NAME}."
        stage = record.name[len(prefix):] if record.name.startswith(prefix) else ""
        record.stage = f"{_LOGGER_NAME}:{stage}" if stage else _LOGGER_NAME
        return super().format(record)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure console output and, optionally, a log file.

    The console follows ``verbose``. The log file always records DEBUG so a
    failed export leaves the browser's full output behind.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    # main() may run more than once per process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(console_level)
    stream_handler.setFormatter(StageFormatter(CONSOLE_FORMAT))
    logger.addHandler(stream_handler)
    logger.setLevel(console_level)

    if log_file is not None:
        log_path = Path(log_file).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as exc:
            raise WriteError(
                f"Cannot open log file {log_path}: {exc}", path=log_path, cause=exc
            ) from exc
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["configure_logging", "get_logger", "StageFormatter"]
