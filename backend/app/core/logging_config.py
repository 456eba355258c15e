"""
Process-wide logging setup and last-resort exception hooks.

Both are installed once, at process start, from ``main.py``.
"""
import asyncio
import logging
import os
import sys
import threading

from app.core.config import settings

_hooks_installed = False


def setup_logging() -> logging.Logger:
    """Configure the root logger for console (container) output and an optional log file."""
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.LOG_DIR:
        try:
            os.makedirs(settings.LOG_DIR, exist_ok=True)
            file_handler = logging.FileHandler(os.path.join(settings.LOG_DIR, 'ecofinance.log'))
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Could not create file handler: {e}")

    return logging.getLogger("app")


def _log_uncaught(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logging.getLogger("app.process").critical(
        "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
    )


def _log_uncaught_thread(args):
    logging.getLogger("app.process").critical(
        f"Uncaught exception in thread {args.thread.name if args.thread else '?'}",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )


def _log_loop_exception(loop, context):
    logger = logging.getLogger("app.process")
    exc = context.get("exception")
    message = context.get("message", "Unhandled exception in event loop")
    if exc is not None:
        logger.error(f"Unhandled rejection: {message}", exc_info=exc)
    else:
        logger.error(f"Unhandled rejection: {message}")


def install_exception_hooks() -> None:
    """Route otherwise-unhandled exceptions from any thread into the log."""
    global _hooks_installed
    if _hooks_installed:
        return
    sys.excepthook = _log_uncaught
    threading.excepthook = _log_uncaught_thread
    _hooks_installed = True


def install_loop_exception_handler() -> None:
    """Attach the logging handler to the running event loop (called from the app lifespan)."""
    asyncio.get_running_loop().set_exception_handler(_log_loop_exception)
