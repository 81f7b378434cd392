# tests/test_logging_setup.py
import logging

from PyQt6.QtCore import QObject
from PyQt6.QtWidgets import QTextEdit

from dfa_designer.utils.logging_setup import HtmlLogFormatter, LogLevel, setup_global_logging


def test_console_only_setup(restore_root_logger):
    handler = setup_global_logging()
    assert handler is None
    assert len(restore_root_logger.handlers) == 1
    assert restore_root_logger.level == logging.DEBUG


def test_records_reach_the_log_widget(qtbot, restore_root_logger):
    widget = QTextEdit()
    qtbot.addWidget(widget)
    handler = setup_global_logging(widget)
    assert isinstance(handler, QObject)
    assert handler in restore_root_logger.handlers

    logging.getLogger("dfa_designer.test").warning("state <Q1> moved")
    text = widget.toPlainText()
    assert "state <Q1> moved" in text
    assert "WARNING" in text


def test_setup_is_idempotent(qtbot, restore_root_logger):
    widget = QTextEdit()
    qtbot.addWidget(widget)
    setup_global_logging(widget)
    setup_global_logging(widget)
    assert len(restore_root_logger.handlers) == 2


def test_html_formatter_escapes_message():
    record = logging.LogRecord("dfa", logging.ERROR, __file__, 1, "a < b & c", None, None)
    html_line = HtmlLogFormatter().format(record)
    assert "a &lt; b &amp; c" in html_line
    assert LogLevel.ERROR.color in html_line


def test_unknown_level_uses_info_colour():
    record = logging.LogRecord("dfa", 25, __file__, 1, "custom", None, None)
    assert LogLevel.for_record(record) is LogLevel.INFO
