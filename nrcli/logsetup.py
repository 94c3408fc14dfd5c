"""Logging setup for the CLI: console level and an optional log file."""

from __future__ import annotations

import datetime
import logging
import os
import re
import json
import sys
from pathlib import Path

__all__ = [
    "TRACE",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_FILE",
    "LOGGER_NAME",
    "FileLogHandler",
    "parse_level",
    "init_logger",
    "init_file_logger",
]

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "newrelic-cli.log"
LOGGER_NAME = "nrcli"

_LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}
_LEVEL_NAMES = {
    TRACE: "trace",
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}
_SAFE = re.compile(r"[A-Za-z0-9\-._/@^+]+")


def parse_level(name: str) -> int:
    """Map a level name to a logging level; unknown names mean INFO."""
    return _LEVELS.get(name.upper(), logging.INFO)


class _ConsoleHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at the time of each record."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def init_logger(level: str) -> logging.Logger:
    """Configure the package logger for console output at ``level``."""
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, _ConsoleHandler) for h in logger.handlers):
        handler = _ConsoleHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(parse_level(level))
    return logger


def _quote(text: str) -> str:
    if _SAFE.fullmatch(text):
        return text
    return json.dumps(text, ensure_ascii=False)


class _PlainFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = (
            datetime.datetime.fromtimestamp(record.created)
            .astimezone()
            .isoformat(timespec="seconds")
        )
        level = _LEVEL_NAMES.get(record.levelno, record.levelname.lower())
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f'time="{stamp}" level={level} msg={_quote(message)}'


class FileLogHandler(logging.Handler):
    """Appends plain-text log lines to a file; trace records are left out."""

    def __init__(self, path: str | os.PathLike, mode: int = 0o640) -> None:
        super().__init__(logging.DEBUG)
        try:
            fd = os.open(path, os.O_CREAT | os.O_APPEND | os.O_RDWR, mode)
        except OSError as exc:
            print(f"unable to write file on filehook {exc}", file=sys.stderr, end="")
            raise
        self.path = os.fspath(path)
        self._file = os.fdopen(fd, "a", encoding="utf-8")
        self.setFormatter(_PlainFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        try:
            self._file.write(line + "\n")
            self._file.flush()
        except (OSError, ValueError) as exc:
            print(
                f"unable to write file on filehook(entry.String){exc}",
                file=sys.stderr,
                end="",
            )

    def close(self) -> None:
        try:
            if not self._file.closed:
                self._file.close()
        finally:
            super().close()


def init_file_logger(config_dir: str | os.PathLike) -> FileLogHandler | None:
    """Attach a file handler writing to the CLI log file in ``config_dir``.

    Returns the handler, the one already attached, or None when the file
    cannot be opened.
    """
    logger = logging.getLogger(LOGGER_NAME)
    existing = next(
        (h for h in logger.handlers if isinstance(h, FileLogHandler)), None
    )
    if existing is not None:
        logger.debug("file logger already configured")
        return existing

    directory = Path(config_dir)
    if not directory.exists():
        try:
            directory.mkdir(mode=0o750, parents=True)
        except OSError as exc:
            logger.warning("Could not create log file folder: %s", exc)

    try:
        handler = FileLogHandler(directory / DEFAULT_LOG_FILE)
    except OSError:
        return None
    logger.addHandler(handler)
    return handler