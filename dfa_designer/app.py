# dfa_designer/app.py
"""Minimal host window for the diagram canvas, used by the example scripts."""

import logging
import sys
from typing import Callable, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QApplication, QDockWidget, QMainWindow, QTextEdit

from .managers.settings_manager import SettingsManager
from .ui.graphics.render_orchestrator import RenderOrchestrator
from .utils import config
from .utils.logging_setup import setup_global_logging

logger = logging.getLogger(__name__)


class DiagramWindow(QMainWindow):
    """Canvas in the centre, log panel docked at the bottom."""

    def __init__(self, title: str = config.APP_NAME, settings_manager: Optional[SettingsManager] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"{title} - {config.APP_NAME} v{config.APP_VERSION}")

        self.settings_manager = settings_manager if settings_manager is not None else SettingsManager()
        self.orchestrator = RenderOrchestrator(
            self.settings_manager.get("canvas_width"),
            self.settings_manager.get("canvas_height"),
            settings_manager=self.settings_manager,
            parent=self,
        )
        self.setCentralWidget(self.orchestrator.get_canvas())

        self.log_output = QTextEdit()
        self.log_output.setReadOnly(True)
        log_dock = QDockWidget("Log", self)
        log_dock.setObjectName("LogDock")
        log_dock.setWidget(self.log_output)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, log_dock)

        self.orchestrator.transitionCommitted.connect(
            lambda t: self.statusBar().showMessage(f"Added transition {t.start_state.get_name()} -> {t.end_state.get_name()}", 3000))
        self.orchestrator.transitionAbandoned.connect(
            lambda t: self.statusBar().showMessage("Transition discarded: released outside a mount point", 3000))


def run_demo(build: Callable[[RenderOrchestrator], object], title: str) -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    app.setOrganizationName(config.ORGANIZATION_NAME)
    app.setApplicationName(config.APP_NAME)

    window = DiagramWindow(title)
    setup_global_logging(window.log_output)
    build(window.orchestrator)
    window.show()
    logger.info("%s ready", title)
    return app.exec()
