"""
Logging Configuration
=====================
Sets up the 'chartgallery' logger and routes the chatter of the libraries
underneath it into the same handlers.

Why is this file needed?
------------------------
1. One place decides where log output goes (stdout and an optional file).
2. Qt prints its own diagnostics (e.g. "QWidget::repaint: Recursive repaint")
   straight to stderr; forwarding them to 'chartgallery.qt' keeps them in the log.
3. numpy and scipy report numerical trouble through the ``warnings`` module;
   captured warnings arrive on the 'py.warnings' logger, which gets the same
   handlers.
"""
import logging
import sys
from typing import Any, Optional

from PySide6.QtCore import QtMsgType, qInstallMessageHandler

LOGGER_NAME = "chartgallery"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def qt_message_handler(mode: QtMsgType, context: Any, message: str) -> None:
    """Forward one Qt diagnostic to the 'chartgallery.qt' logger."""
    level = _QT_LEVELS.get(mode, logging.WARNING)
    category = getattr(context, "category", None) or "default"
    logging.getLogger(f"{LOGGER_NAME}.qt").log(level, f"[{category}] {message}")


def _reset_handlers(logger: logging.Logger) -> None:
    # Re-running the app in the same interpreter must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _make_handlers(level: int, log_file: Optional[str]) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    capture_qt: bool = True,
    capture_warnings: bool = True
) -> None:
    """
    Configures the logger for the 'chartgallery' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file (overwritten).
        capture_qt: Install ``qt_message_handler`` as Qt's message handler.
        capture_warnings: Log Python warnings through the same handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    _reset_handlers(logger)

    handlers = _make_handlers(level, log_file)
    for handler in handlers:
        logger.addHandler(handler)

    if capture_warnings:
        logging.captureWarnings(True)
        warnings_logger = logging.getLogger("py.warnings")
        _reset_handlers(warnings_logger)
        for handler in handlers:
            warnings_logger.addHandler(handler)

    if capture_qt:
        qInstallMessageHandler(qt_message_handler)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
