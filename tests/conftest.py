# tests/conftest.py
import logging
import os

# Must be set before the first QApplication is created.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QPointF, QSettings
from PyQt6.QtGui import QContextMenuEvent
from PyQt6.QtWidgets import QApplication

from dfa_designer.core.geometry import Point
from dfa_designer.managers.settings_manager import SettingsManager
from dfa_designer.ui.graphics.pointer import PointerEvent
from dfa_designer.ui.graphics.render_orchestrator import RenderOrchestrator


@pytest.fixture
def settings_manager(qapp, tmp_path):
    # Keep test settings out of the user's real settings file
    QSettings.setPath(QSettings.Format.IniFormat, QSettings.Scope.UserScope, str(tmp_path))
    sm = SettingsManager(app_name="DFA_Designer_Test")
    sm.settings.clear()
    yield sm
    sm.settings.clear()


@pytest.fixture
def orchestrator(settings_manager):
    return RenderOrchestrator(750, 750, settings_manager=settings_manager)


@pytest.fixture
def pointer(orchestrator):
    """Builds a PointerEvent for a canvas-local position."""
    def at(x, y):
        return PointerEvent.at(orchestrator.local_to_client(Point(x, y)))
    return at


@pytest.fixture
def q1(orchestrator):
    return orchestrator.add_state_from_config(name="Q1", x=210, y=340)


@pytest.fixture
def q2(orchestrator):
    return orchestrator.add_state_from_config(name="Q2", x=410, y=340)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def canvas(orchestrator, qtbot):
    view = orchestrator.get_canvas()
    qtbot.addWidget(view)
    view.show()
    qtbot.waitExposed(view)
    return view


@pytest.fixture
def view_pos(canvas):
    """Maps a canvas-local (scene) position to viewport widget coordinates."""
    def at(x, y):
        return canvas.mapFromScene(QPointF(x, y))
    return at


@pytest.fixture
def right_click(canvas, view_pos):
    """Sends a mouse context-menu event to the canvas viewport at a canvas-local position."""
    def at(x, y):
        pos = view_pos(x, y)
        event = QContextMenuEvent(QContextMenuEvent.Reason.Mouse, pos, canvas.viewport().mapToGlobal(pos))
        QApplication.sendEvent(canvas.viewport(), event)
        return event
    return at
