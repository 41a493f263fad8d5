"""
Logging Configuration
Sets up the 'orgchart' logger and routes Qt's own diagnostics into it.
"""
import logging
import sys
from typing import Optional

from PySide6.QtCore import QtMsgType, qInstallMessageHandler

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def _qt_message_handler(msg_type: QtMsgType, context, message: str) -> None:
    level = _QT_LEVELS.get(msg_type, logging.WARNING)
    logging.getLogger("orgchart.qt").log(level, message)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    capture_qt: bool = True,
) -> None:
    """
    Configures the logger for the 'orgchart' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        capture_qt: Forward qDebug/qWarning output of the Qt runtime
            to the 'orgchart.qt' logger instead of stderr.
    """
    logger = logging.getLogger("orgchart")
    logger.setLevel(level)

    # Avoid duplicate handlers when setup runs twice (tests, re-launch)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if capture_qt:
        qInstallMessageHandler(_qt_message_handler)

    logger.info("Logging initialized.")
