# dfa_designer/utils/logging_setup.py

import html
import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot
from PyQt6.QtWidgets import QTextEdit

from .theme_config import theme_config

logger = logging.getLogger(__name__)

CONSOLE_FORMAT = '%(asctime)s.%(msecs)03d [%(levelname)-8s] [%(name)-20.20s] %(message)s'
CONSOLE_DATE_FORMAT = '%H:%M:%S'


class LogLevel(Enum):
    """Log levels with the colour used to render them in the log panel."""
    DEBUG = (logging.DEBUG, "#90A4AE")
    INFO = (logging.INFO, "#ECEFF1")
    WARNING = (logging.WARNING, "#FFC107")
    ERROR = (logging.ERROR, "#D32F2F")
    CRITICAL = (logging.CRITICAL, "#B71C1C")

    def __init__(self, level: int, color: str):
        self.level = level
        self.color = color

    @classmethod
    def for_record(cls, record: logging.LogRecord) -> 'LogLevel':
        return next((l for l in cls if l.level == record.levelno), cls.INFO)


class HtmlLogFormatter(logging.Formatter):
    """Formats a record as one HTML line for a QTextEdit."""

    def format(self, record: logging.LogRecord) -> str:
        level = LogLevel.for_record(record)
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]
        message = html.escape(record.getMessage())
        parts = [
            f"<span style='color:{theme_config.COLOR_TEXT_HOVER};'>[{timestamp}]</span>",
            f"<b style='color:{level.color};'>{level.name}</b>",
            f"<span style='font-style:italic;'>[{html.escape(record.name)}]</span>",
            f"<span style='color:{level.color};'>{message}</span>",
        ]
        if record.exc_info:
            parts.append(f"<pre style='color:{LogLevel.ERROR.color};'>"
                         f"{html.escape(self.formatException(record.exc_info))}</pre>")
        return f"<div style='font-family: Consolas, monospace;'>{' '.join(parts)}</div>"


class QtLogSignal(QObject):
    """Signal emitter so records logged from any thread reach the widget on the GUI thread."""
    log_received = pyqtSignal(str)


class QTextEditLogHandler(logging.Handler, QObject):
    """Appends formatted records to a QTextEdit."""

    def __init__(self, text_edit_widget: QTextEdit):
        logging.Handler.__init__(self)
        QObject.__init__(self)
        self.widget = text_edit_widget
        self.setFormatter(HtmlLogFormatter())
        self.log_signal_emitter = QtLogSignal()
        self.log_signal_emitter.log_received.connect(self._append_html)

    @pyqtSlot(str)
    def _append_html(self, text: str):
        self.widget.append(text)

    def emit(self, record: logging.LogRecord):
        try:
            self.log_signal_emitter.log_received.emit(self.format(record))
        except Exception:
            self.handleError(record)


def setup_global_logging(log_widget: Optional[QTextEdit] = None,
                         level: int = logging.DEBUG) -> Optional[QTextEditLogHandler]:
    """
    Sets up the root logger with a console handler and, when a QTextEdit is
    given, a handler that mirrors every record into that widget.
    Returns the widget handler, if one was installed.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers to prevent duplicate logs
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
    console_handler.setLevel(logging.INFO)  # Keep console less verbose
    root_logger.addHandler(console_handler)

    ui_handler = None
    if log_widget is not None:
        ui_handler = QTextEditLogHandler(log_widget)
        ui_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(ui_handler)

    logging.info("Global logging system initialized.")
    return ui_handler
