"""Logging configuration."""

from __future__ import annotations

import logging
import sys
import threading
from types import TracebackType

from flask import Flask

logger = logging.getLogger("lottery")


def configure_logging(app: Flask) -> None:
    """Configure structured-ish JSON-friendly logs.

    Note: Using stdlib logging only (no extra deps).
    """

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Reduce noisy loggers if needed
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def _log_uncaught(
    exc_type: type[BaseException],
    exc: BaseException,
    tb: TracebackType | None,
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    # The interpreter exits with status 1 after this hook; a supervisor restarts us.
    logger.critical("Uncaught exception, shutting down", exc_info=(exc_type, exc, tb))


def _log_thread_exception(args: threading.ExceptHookArgs) -> None:
    if args.exc_type is SystemExit:
        return
    logger.error(
        "Uncaught exception in thread %s",
        args.thread.name if args.thread else "?",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),  # type: ignore[arg-type]
    )


def install_exception_hooks() -> None:
    """Log process-level faults.

    Main-thread faults terminate the process; background-thread faults are
    logged and the process keeps serving.
    """

    sys.excepthook = _log_uncaught
    threading.excepthook = _log_thread_exception
