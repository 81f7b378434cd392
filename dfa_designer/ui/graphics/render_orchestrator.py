# dfa_designer/ui/graphics/render_orchestrator.py
"""
Owner of the diagram: its states, its transitions and the single interaction
session that may hold the pointer at any time.

States and transitions never reach into each other's collections. They ask the
orchestrator for coordinates (coords_to_local), for exclusivity (begin_*/end_*)
and for the document-level pointer stream (document_events), which the
DiagramScene feeds from Qt mouse events.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from PyQt6.QtCore import QLineF, QObject, QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QKeyEvent, QPainter, QPen
from PyQt6.QtWidgets import (
    QGraphicsItem, QGraphicsScene, QGraphicsSceneMouseEvent, QGraphicsView
)

from ...core.event_publisher import EventPublisher
from ...core.geometry import Point
from ...managers.settings_manager import SettingsManager
from ...utils import config
from ...utils.theme_config import theme_config
from .interaction import InteractionError, InteractionKind, InteractionSession, InteractionState
from .pointer import PointerEvent
from .state_view import POINTER_MOVE, POINTER_UP, StateView
from .transition_view import TransitionView

logger = logging.getLogger(__name__)


class DiagramScene(QGraphicsScene):
    """Scene that forwards every pointer move/release to the orchestrator."""

    def __init__(self, orchestrator: 'RenderOrchestrator', width: float, height: float, parent=None):
        super().__init__(parent)
        self.orchestrator = orchestrator
        self.settings_manager = orchestrator.settings_manager
        self.setSceneRect(0, 0, width, height)

        self.grid_pen_light = QPen(QColor(theme_config.COLOR_GRID_MINOR), 0.7, Qt.PenStyle.DotLine)
        self.apply_settings()

    def apply_settings(self):
        self.grid_size = self.settings_manager.get("grid_size")
        self.setBackgroundBrush(QColor(self.settings_manager.get("canvas_background_color")))
        self.update()

    def drawBackground(self, painter: QPainter, rect: QRectF):
        painter.fillRect(rect, self.backgroundBrush())
        if not self.settings_manager.get("view_show_grid") or self.grid_size < 5:
            return

        area = rect.intersected(self.sceneRect())
        left = int(area.left()) - (int(area.left()) % self.grid_size)
        top = int(area.top()) - (int(area.top()) % self.grid_size)

        lines = []
        x = left
        while x <= area.right():
            lines.append(QLineF(x, area.top(), x, area.bottom()))
            x += self.grid_size
        y = top
        while y <= area.bottom():
            lines.append(QLineF(area.left(), y, area.right(), y))
            y += self.grid_size

        if lines:
            painter.setPen(self.grid_pen_light)
            painter.drawLines(lines)

    def mouseMoveEvent(self, event: QGraphicsSceneMouseEvent):
        self.orchestrator.dispatch_pointer_move(PointerEvent.from_qt(event))
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent):
        self.orchestrator.dispatch_pointer_up(PointerEvent.from_qt(event))
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() == Qt.Key.Key_Escape and self.orchestrator.active_session() is not None:
            self.orchestrator.cancel_interaction()
            event.accept()
            return
        super().keyPressEvent(event)


class DiagramCanvas(QGraphicsView):
    """The drawable surface a host window adds to its layout. Always 1:1 with the scene."""

    def __init__(self, scene: DiagramScene, parent=None):
        super().__init__(scene, parent)
        self.setRenderHints(QPainter.RenderHint.Antialiasing | QPainter.RenderHint.TextAntialiasing)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.BoundingRectViewportUpdate)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        rect = scene.sceneRect()
        self.resize(int(rect.width()) + 2 * self.frameWidth(), int(rect.height()) + 2 * self.frameWidth())

    def scene_origin_on_screen(self) -> Point:
        origin = self.viewport().mapToGlobal(self.mapFromScene(QPointF(0, 0)))
        return Point(float(origin.x()), float(origin.y()))


class RenderOrchestrator(QObject):
    stateAdded = pyqtSignal(object)
    stateRemoved = pyqtSignal(object)
    transitionAdded = pyqtSignal(object)
    transitionRemoved = pyqtSignal(object)
    transitionCommitted = pyqtSignal(object)
    transitionAbandoned = pyqtSignal(object)
    sessionChanged = pyqtSignal(object)  # InteractionKind, or None when the session ends

    def __init__(self, width: float = config.DEFAULT_CANVAS_WIDTH, height: float = config.DEFAULT_CANVAS_HEIGHT,
                 settings_manager: Optional[SettingsManager] = None, parent=None):
        super().__init__(parent)
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")

        self.settings_manager = settings_manager if settings_manager is not None else SettingsManager()
        self.width = width
        self.height = height

        self._states: List[StateView] = []
        self._transitions: List[TransitionView] = []
        self._paint_order: List[QGraphicsItem] = []

        self._interaction = InteractionState()
        self.document_events = EventPublisher()
        self._new_transition: Optional[TransitionView] = None
        self._hovered_target: Optional[StateView] = None

        self._scene = DiagramScene(self, width, height)
        self._canvas = DiagramCanvas(self._scene)
        self.settings_manager.settingChanged.connect(self._on_setting_changed)

        logger.info("Render orchestrator created with a %sx%s canvas", width, height)

    def _on_setting_changed(self, key: str, value: Any):
        if key in ("view_show_grid", "grid_size", "canvas_background_color"):
            self._scene.apply_settings()
        elif key.startswith("state_"):
            for state in self._states:
                state.apply_settings()
        elif key.startswith("transition_"):
            for transition in self._transitions:
                transition.apply_settings()

    # ========================= CANVAS =========================

    def get_canvas(self) -> DiagramCanvas:
        return self._canvas

    @property
    def scene(self) -> DiagramScene:
        return self._scene

    def canvas_size(self) -> Tuple[float, float]:
        return self.width, self.height

    def coords_to_local(self, event: PointerEvent) -> Point:
        """
        Screen pointer position to canvas-local coordinates. The canvas origin
        is looked up on every call since the view may have moved or scrolled.
        """
        return event.client_point - self._canvas.scene_origin_on_screen()

    def local_to_client(self, point: Point) -> Point:
        return point + self._canvas.scene_origin_on_screen()

    # ========================= CONTROLS - STATE =========================

    def add_state(self, state: StateView) -> StateView:
        if state in self._states:
            logger.warning("State %r is already part of the diagram", state)
            return state
        self._states.append(state)
        self._scene.addItem(state)
        self._push_paint_order(state)
        logger.debug("Added state %r", state)
        self.stateAdded.emit(state)
        return state

    def add_state_from_config(self, config: Optional[Dict[str, Any]] = None, **kwargs) -> StateView:
        merged = dict(config or {})
        merged.update(kwargs)
        return self.add_state(StateView(self, merged))

    def remove_state(self, state: StateView):
        if state not in self._states:
            logger.warning("Cannot remove %r: not part of the diagram", state)
            return

        session = self._interaction.session
        if session is not None and (session.owner is state or
                                    (isinstance(session.owner, TransitionView) and session.owner.references(state))):
            self.cancel_interaction()

        attached = [t for t in self._transitions if t.references(state)]
        for transition in attached:
            self.remove_transition(transition)
        if attached:
            logger.info("Removed %d transition(s) attached to state '%s'", len(attached), state.get_name())

        self._states.remove(state)
        self._pop_paint_order(state)
        self._scene.removeItem(state)
        if state.subscriber_count() > 0:
            logger.warning("State '%s' still had %d position subscriber(s) after removal",
                           state.get_name(), state.subscriber_count())
            state.clear_subscribers()
        logger.info("Removed state '%s'", state.get_name())
        self.stateRemoved.emit(state)

    def states(self) -> List[StateView]:
        return list(self._states)

    def find_state(self, name: str) -> Optional[StateView]:
        return next((s for s in self._states if s.get_name() == name), None)

    # ========================= CONTROLS - TRANSITION =========================

    def add_transition(self, start: StateView, end: StateView,
                       start_index: int = config.DEFAULT_TRANSITION_START_INDEX,
                       end_index: int = config.DEFAULT_TRANSITION_END_INDEX) -> TransitionView:
        for state in (start, end):
            if state not in self._states:
                raise ValueError(f"State {state!r} is not part of the diagram")

        transition = TransitionView(self)
        transition.set_start_state(start, start_index)
        transition.set_end_state(end, end_index)
        self._register_transition(transition)
        logger.info("Added transition %r", transition)
        return transition

    def remove_transition(self, transition: TransitionView):
        if transition not in self._transitions:
            logger.warning("Cannot remove %r: not part of the diagram", transition)
            return

        session = self._interaction.session
        if session is not None and session.owner is transition:
            self.cancel_interaction()
            if transition not in self._transitions:
                return

        transition.detach()
        self._unregister_transition(transition)
        logger.debug("Removed transition %r", transition)
        self.transitionRemoved.emit(transition)

    def transitions(self) -> List[TransitionView]:
        return list(self._transitions)

    def committed_transitions(self) -> List[TransitionView]:
        return [t for t in self._transitions if t.is_committed()]

    def _register_transition(self, transition: TransitionView):
        self._transitions.append(transition)
        self._scene.addItem(transition)
        self._push_paint_order(transition)
        self.transitionAdded.emit(transition)

    def _unregister_transition(self, transition: TransitionView):
        self._transitions.remove(transition)
        self._pop_paint_order(transition)
        self._scene.removeItem(transition)

    # ========================= PAINT ORDER =========================

    def paint_order(self) -> List[QGraphicsItem]:
        return list(self._paint_order)

    def bring_to_top(self, item: QGraphicsItem):
        if item not in self._paint_order:
            logger.warning("Cannot raise %r: not part of the diagram", item)
            return
        self._paint_order.remove(item)
        self._paint_order.append(item)
        self._restack()

    def _push_paint_order(self, item: QGraphicsItem):
        self._paint_order.append(item)
        self._restack()

    def _pop_paint_order(self, item: QGraphicsItem):
        self._paint_order.remove(item)
        self._restack()

    def _restack(self):
        for z, item in enumerate(self._paint_order):
            item.setZValue(z)

    # ========================= HIT TESTING =========================

    def _states_top_first(self) -> List[StateView]:
        return [item for item in reversed(self._paint_order) if isinstance(item, StateView)]

    def state_at(self, point: Point, exclude: Optional[StateView] = None) -> Optional[StateView]:
        """Topmost state whose hover ring contains `point`."""
        for state in self._states_top_first():
            if state is exclude:
                continue
            if state.get_center_point().distance_to(point) <= state.config.r + state.config.hm:
                return state
        return None

    def attachment_at(self, point: Point,
                      exclude: Optional[Tuple[StateView, int]] = None) -> Optional[Tuple[StateView, int]]:
        """
        The mount point under `point` as (state, index), topmost state first.
        A mount point counts as hit within twice its drawn radius.
        """
        grab_radius = 2 * self.settings_manager.get("state_mount_point_radius")
        for state in self._states_top_first():
            index = state.get_closest_attachment_index(point)
            if exclude is not None and exclude[0] is state and exclude[1] == index:
                continue
            if state.get_absolute_attachment_points()[index].distance_to(point) <= grab_radius:
                return state, index
        return None

    # ========================= LISTENERS =========================

    def _switch_listeners(self, enable: bool, listenables: Iterable[Any],
                          excluded: Iterable[Any] = (), included: Iterable[Any] = ()):
        """
        Enables or disables a collection. When `included` is given only those
        items are switched; otherwise everything but `excluded` is.
        """
        included = list(included)
        excluded = list(excluded)
        targets = included if included else [l for l in listenables if l not in excluded]
        for listenable in targets:
            if enable:
                listenable.enable_listeners()
            else:
                listenable.disable_listeners()

    def _enable_all(self):
        self._switch_listeners(True, self._states)
        self._switch_listeners(True, self._transitions)

    # ========================= SESSIONS =========================

    def active_session(self) -> Optional[InteractionSession]:
        return self._interaction.session

    def _begin_session(self, kind: InteractionKind, owner: Any) -> InteractionSession:
        session = self._interaction.begin(kind, owner)
        logger.debug("Interaction session %s started by %r", kind.name, owner)
        self.sessionChanged.emit(kind)
        return session

    def _end_session(self, kind: InteractionKind) -> InteractionSession:
        session = self._interaction.end(kind)
        self._enable_all()
        logger.debug("Interaction session %s ended", kind.name)
        self.sessionChanged.emit(None)
        return session

    def begin_state_move(self, state: StateView):
        self._begin_session(InteractionKind.STATE_MOVE, state)
        self._switch_listeners(False, self._states, excluded=[state])
        self._switch_listeners(False, self._transitions)

    def end_state_move(self):
        self._end_session(InteractionKind.STATE_MOVE)

    def begin_curvature_edit(self, transition: TransitionView):
        self._begin_session(InteractionKind.CURVATURE_EDIT, transition)
        self._switch_listeners(False, self._states)
        self._switch_listeners(False, self._transitions, excluded=[transition])

    def end_curvature_edit(self):
        self._end_session(InteractionKind.CURVATURE_EDIT)

    def begin_new_transition(self, from_state: StateView, mount_point_index: int) -> TransitionView:
        """
        Starts drawing a transition from one of `from_state`'s mount points.
        The transition follows the document-level pointer stream until the
        pointer is released, then it is either committed or discarded.
        """
        if from_state not in self._states:
            raise ValueError(f"State {from_state!r} is not part of the diagram")
        points = from_state.get_absolute_attachment_points()
        if not 0 <= mount_point_index < len(points):
            raise IndexError(f"Mount point index {mount_point_index} out of range for state '{from_state.get_name()}'")
        if self._interaction.is_active():
            raise InteractionError(
                f"Cannot start a new transition: {self._interaction.session.kind.name} session is still active")

        transition = TransitionView(self, in_motion=True)
        self._begin_session(InteractionKind.NEW_TRANSITION, transition)
        self._switch_listeners(False, self._transitions)

        transition.set_start_state(from_state, mount_point_index)
        transition.update_end(points[mount_point_index])
        self._register_transition(transition)
        transition.disable_listeners()
        self._new_transition = transition

        self.document_events.subscribe(POINTER_MOVE, self._on_new_transition_move)
        self.document_events.subscribe(POINTER_UP, self._on_new_transition_up)
        logger.info("Drawing a new transition from '%s' mount point %d", from_state.get_name(), mount_point_index)
        return transition

    def _set_hovered_target(self, state: Optional[StateView]):
        if state is self._hovered_target:
            return
        if self._hovered_target is not None:
            self._hovered_target.highlight_as_target(False)
        self._hovered_target = state
        if state is not None:
            state.highlight_as_target(True)

    def _on_new_transition_move(self, event: PointerEvent):
        transition = self._new_transition
        if transition is None:
            return

        point = self.coords_to_local(event)
        target = self.attachment_at(point, exclude=(transition.start_state, transition.start_index))
        if target is not None:
            transition.set_end_state(*target)
            self._set_hovered_target(target[0])
        else:
            half_width = transition.get_stroke_width() / 2
            transition.update_end(Point(point.x - half_width, point.y - half_width))
            self._set_hovered_target(self.state_at(point, exclude=transition.start_state))

    def _on_new_transition_up(self, event: Optional[PointerEvent] = None):
        if self._new_transition is None:
            return
        if event is not None:
            self._on_new_transition_move(event)
        self._finish_new_transition(allow_commit=True)

    def _finish_new_transition(self, allow_commit: bool):
        transition = self._new_transition
        self._new_transition = None
        self.document_events.unsubscribe(POINTER_MOVE, self._on_new_transition_move)
        self.document_events.unsubscribe(POINTER_UP, self._on_new_transition_up)
        self._set_hovered_target(None)

        if allow_commit and transition.end_state is not None:
            transition.set_in_motion(False)
            self._end_session(InteractionKind.NEW_TRANSITION)
            logger.info("Committed transition %r", transition)
            self.transitionCommitted.emit(transition)
            return

        origin = transition.start_state.get_name() if transition.start_state else '?'
        self._unregister_transition(transition)
        transition.abandon()
        self._end_session(InteractionKind.NEW_TRANSITION)
        logger.info("Transition from '%s' released without a target; discarded", origin)
        self.transitionAbandoned.emit(transition)
        self.transitionRemoved.emit(transition)

    def cancel_interaction(self) -> bool:
        """
        Aborts the active session: a new transition is discarded, a moving
        state stays where it is, a curvature edit restores the old offset.
        Returns False when there was nothing to cancel.
        """
        session = self._interaction.session
        if session is None:
            return False

        logger.info("Cancelling %s session", session.kind.name)
        if session.kind == InteractionKind.STATE_MOVE and session.owner.is_dragging():
            session.owner.end_drag()
        elif session.kind == InteractionKind.CURVATURE_EDIT and session.owner.is_curvature_dragging():
            session.owner.cancel_curvature_drag()
        elif session.kind == InteractionKind.NEW_TRANSITION and self._new_transition is not None:
            self._finish_new_transition(allow_commit=False)
        else:
            # Opened through begin_* without a pointer gesture behind it
            self._end_session(session.kind)
        return True

    # ========================= DOCUMENT EVENTS =========================

    def dispatch_pointer_move(self, event: PointerEvent):
        self.document_events.publish(POINTER_MOVE, event)

    def dispatch_pointer_up(self, event: PointerEvent):
        self.document_events.publish(POINTER_UP, event)
