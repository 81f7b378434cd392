# dfa_designer/ui/graphics/transition_view.py
"""
Graphics item for one directed transition between two state mount points.

The transition observes its states through their 'position' event and never
owns them. Its path is a quadratic curve whose control point sits
`curvature_offset` pixels off the chord midpoint; a zero-length chord between
two bound ends is drawn as a loop instead.
"""

import logging
import math
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, Tuple

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QPainterPath, QPainterPathStroker, QPen, QPolygonF
from PyQt6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsPathItem, QGraphicsPolygonItem,
    QGraphicsSceneContextMenuEvent, QGraphicsSceneHoverEvent, QGraphicsSceneMouseEvent
)

from ...core.geometry import (
    EPSILON, Point, control_point, loop_apex, midpoint, perpendicular_unit, rotate,
    self_loop_controls, signed_distance_along, unit
)
from ...utils import config
from ...utils.theme_config import theme_config
from .pointer import PointerEvent
from .state_view import POINTER_MOVE, POINTER_UP, POSITION_EVENT, StateView

if TYPE_CHECKING:
    from .render_orchestrator import RenderOrchestrator

logger = logging.getLogger(__name__)


class TransitionPhase(Enum):
    IN_MOTION = auto()
    COMMITTED = auto()
    ABANDONED = auto()


def _qpoint(point: Point) -> QPointF:
    return QPointF(point.x, point.y)


class TransitionMarkerItem(QGraphicsEllipseItem):
    """Round marker centred on a point of the transition. Visual only."""

    Type = QGraphicsItem.UserType + 12

    def type(self): return TransitionMarkerItem.Type

    def __init__(self, parent: 'TransitionView', radius: float, color: str):
        super().__init__(-radius, -radius, 2 * radius, 2 * radius, parent)
        self.setBrush(QBrush(QColor(color)))
        self.setPen(QPen(Qt.PenStyle.NoPen))
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self.setVisible(False)

    def center(self) -> Point:
        return Point(self.pos().x(), self.pos().y())

    def set_radius(self, radius: float):
        self.setRect(-radius, -radius, 2 * radius, 2 * radius)

    def move_center_to(self, point: Point):
        self.setPos(_qpoint(point))


class CurvatureHandleItem(TransitionMarkerItem):
    """The one interactive marker: dragging it bends the transition."""

    Type = QGraphicsItem.UserType + 13

    def type(self): return CurvatureHandleItem.Type

    def __init__(self, parent: 'TransitionView', radius: float):
        super().__init__(parent, radius, theme_config.COLOR_ACCENT_PRIMARY)
        self.transition_view = parent
        self.setPen(QPen(QColor(theme_config.COLOR_TEXT_PRIMARY), 1.5))
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setAcceptedMouseButtons(Qt.MouseButton.LeftButton)

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            event.ignore()
            return
        if self.transition_view.begin_curvature_drag(PointerEvent.from_qt(event)):
            event.accept()
        else:
            event.ignore()


class TransitionView(QGraphicsPathItem):
    Type = QGraphicsItem.UserType + 2

    def type(self): return TransitionView.Type

    def __init__(self, orchestrator: 'RenderOrchestrator', in_motion: bool = False):
        super().__init__()
        self._orchestrator = orchestrator
        settings = orchestrator.settings_manager

        self._start_state: Optional[StateView] = None
        self._start_index: Optional[int] = None
        self._end_state: Optional[StateView] = None
        self._end_index: Optional[int] = None
        self._start_point = Point()
        self._end_point = Point()
        self._curvature_offset = 0.0

        self._in_motion = in_motion
        self._phase = TransitionPhase.IN_MOTION if in_motion else TransitionPhase.COMMITTED
        self._listeners_enabled = True
        self._hovered = False

        self._curvature_dragging = False
        self._drag_chord_mid = Point()
        self._drag_normal = Point(0.0, -1.0)
        self._drag_start_distance = 0.0
        self._drag_initial_offset = 0.0
        self._drag_restore_offset = 0.0

        self.line_width = settings.get("transition_default_line_width")
        self.line_style_qt = settings.pen_style()
        self.base_color = QColor(settings.get("transition_default_color"))
        self.arrow_size = config.DEFAULT_TRANSITION_ARROW_SIZE
        self.self_loop_extent = settings.get("transition_self_loop_extent")

        self.marker_radius = marker_radius = settings.get("transition_marker_radius")
        self._start_marker = TransitionMarkerItem(self, marker_radius, theme_config.COLOR_ITEM_TRANSITION_MARKER)
        self._end_marker = TransitionMarkerItem(self, marker_radius, theme_config.COLOR_ITEM_TRANSITION_MARKER)
        self._curvature_handle = CurvatureHandleItem(self, marker_radius)

        self._arrowhead = QGraphicsPolygonItem(self)
        self._arrowhead.setAcceptedMouseButtons(Qt.MouseButton.NoButton)

        self.setAcceptHoverEvents(not in_motion)
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self._refresh_pen()
        self.update_path()

    def __repr__(self):
        start = self._start_state.get_name() if self._start_state else None
        end = self._end_state.get_name() if self._end_state else None
        return f"<TransitionView {start}[{self._start_index}] -> {end}[{self._end_index}] {self._phase.name}>"

    def apply_settings(self):
        """Re-reads stroke width, style and colour, marker radius and self-loop extent."""
        settings = self._orchestrator.settings_manager
        self.line_width = settings.get("transition_default_line_width")
        self.line_style_qt = settings.pen_style()
        self.base_color = QColor(settings.get("transition_default_color"))
        self.self_loop_extent = settings.get("transition_self_loop_extent")
        self.marker_radius = settings.get("transition_marker_radius")
        for marker in (self._start_marker, self._end_marker, self._curvature_handle):
            marker.set_radius(self.marker_radius)
        self._refresh_pen()
        self.update_path()

    # ========================= ENDPOINTS =========================

    @staticmethod
    def _check_index(state: StateView, index: int):
        count = len(state.get_absolute_attachment_points())
        if not 0 <= index < count:
            raise IndexError(f"Mount point index {index} out of range for state '{state.get_name()}' ({count} points)")

    def set_start_state(self, state: StateView, index: int):
        self._check_index(state, index)
        if state is self._start_state and index == self._start_index:
            self._on_start_state_moved(state)
            return
        self.unset_start_state()
        self._start_state, self._start_index = state, index
        state.subscribe(POSITION_EVENT, self._on_start_state_moved)
        self._on_start_state_moved(state)

    def set_end_state(self, state: StateView, index: int):
        self._check_index(state, index)
        if state is self._end_state and index == self._end_index:
            self._on_end_state_moved(state)
            return
        self.unset_end_state()
        self._end_state, self._end_index = state, index
        state.subscribe(POSITION_EVENT, self._on_end_state_moved)
        self._on_end_state_moved(state)

    def unset_start_state(self):
        if self._start_state is not None:
            self._start_state.unsubscribe(POSITION_EVENT, self._on_start_state_moved)
        self._start_state, self._start_index = None, None

    def unset_end_state(self):
        if self._end_state is not None:
            self._end_state.unsubscribe(POSITION_EVENT, self._on_end_state_moved)
        self._end_state, self._end_index = None, None

    def _on_start_state_moved(self, state: StateView):
        self._start_point = state.get_absolute_attachment_points()[self._start_index]
        self.update_path()

    def _on_end_state_moved(self, state: StateView):
        self._end_point = state.get_absolute_attachment_points()[self._end_index]
        self.update_path()

    def update_start(self, point: Point):
        """Places a free start point. Any state bound to the start is released."""
        self.unset_start_state()
        self._start_point = point
        self.update_path()

    def update_end(self, point: Point):
        """Places a free end point. Any state bound to the end is released."""
        self.unset_end_state()
        self._end_point = point
        self.update_path()

    def detach(self):
        self.unset_start_state()
        self.unset_end_state()
        self.hide_hover_controls()

    def references(self, state: StateView) -> bool:
        return state is self._start_state or state is self._end_state

    @property
    def start_state(self) -> Optional[StateView]:
        return self._start_state

    @property
    def start_index(self) -> Optional[int]:
        return self._start_index

    @property
    def end_state(self) -> Optional[StateView]:
        return self._end_state

    @property
    def end_index(self) -> Optional[int]:
        return self._end_index

    @property
    def start_point(self) -> Point:
        return self._start_point

    @property
    def end_point(self) -> Point:
        return self._end_point

    # ========================= LIFE CYCLE =========================

    def phase(self) -> TransitionPhase:
        return self._phase

    def is_committed(self) -> bool:
        return self._phase == TransitionPhase.COMMITTED

    def is_in_motion(self) -> bool:
        return self._in_motion

    def set_in_motion(self, in_motion: bool):
        if in_motion == self._in_motion:
            return
        if in_motion:
            raise ValueError(f"{self._phase.name} transition cannot be put back in motion")
        if self._start_state is None or self._end_state is None:
            raise ValueError("Cannot commit a transition without both ends bound to a state")

        self._in_motion = False
        self._phase = TransitionPhase.COMMITTED
        self.setAcceptHoverEvents(self._listeners_enabled)
        self._refresh_pen()

    def abandon(self):
        if self._phase != TransitionPhase.IN_MOTION:
            raise ValueError(f"Only a transition in motion can be abandoned, this one is {self._phase.name}")
        self.detach()
        self._in_motion = False
        self._phase = TransitionPhase.ABANDONED

    # ========================= CURVATURE =========================

    def curvature_offset(self) -> float:
        return self._curvature_offset

    def set_curvature_offset(self, value: float):
        self._curvature_offset = float(value)
        self.update_path()

    def is_self_loop(self) -> bool:
        """True when both ends are bound and the chord has zero length."""
        return (self._start_state is not None and self._end_state is not None
                and self._start_point.distance_to(self._end_point) < EPSILON)

    def _loop_outward(self) -> Point:
        if self._start_state is None:
            return Point(0.0, -1.0)
        return unit(self._start_point - self._start_state.get_center_point())

    def _loop_extent(self) -> float:
        return max(self.self_loop_extent, abs(self._curvature_offset))

    def control_point(self) -> Point:
        if self.is_self_loop():
            return loop_apex(self._start_point, self._loop_outward(), self._loop_extent())
        return control_point(self._start_point, self._end_point, self._curvature_offset)

    def _chord_normal(self) -> Point:
        if self.is_self_loop():
            return self._loop_outward()
        return perpendicular_unit(self._start_point, self._end_point) or Point(0.0, -1.0)

    def begin_curvature_drag(self, event: PointerEvent) -> bool:
        """
        Starts bending the transition. The chord and the pointer's distance
        from it are frozen here; each move adds the change in that distance to
        the offset the drag started with.
        """
        if not self._listeners_enabled or self._in_motion or self._curvature_dragging:
            return False

        pointer = self._orchestrator.coords_to_local(event)
        self._drag_chord_mid = midpoint(self._start_point, self._end_point)
        self._drag_normal = self._chord_normal()
        self._drag_start_distance = signed_distance_along(self._drag_chord_mid, pointer, self._drag_normal)
        self._drag_restore_offset = self._curvature_offset
        # A one-point loop is drawn at no less than its minimum extent; bend from the drawn size.
        self._drag_initial_offset = self._loop_extent() if self.is_self_loop() else self._curvature_offset

        self._orchestrator.begin_curvature_edit(self)
        self._curvature_dragging = True

        document = self._orchestrator.document_events
        document.subscribe(POINTER_MOVE, self.on_curvature_drag_move)
        document.subscribe(POINTER_UP, self.end_curvature_drag)
        return True

    def on_curvature_drag_move(self, event: PointerEvent):
        if not self._curvature_dragging:
            return
        pointer = self._orchestrator.coords_to_local(event)
        distance = signed_distance_along(self._drag_chord_mid, pointer, self._drag_normal)
        if self.is_self_loop():
            # The loop only grows outward; its extent is the offset's magnitude.
            self.set_curvature_offset(max(0.0, self._drag_initial_offset + distance - self._drag_start_distance))
        else:
            self.set_curvature_offset(self._drag_initial_offset + distance - self._drag_start_distance)

    def end_curvature_drag(self, event: Optional[PointerEvent] = None):
        if not self._curvature_dragging:
            return
        document = self._orchestrator.document_events
        document.unsubscribe(POINTER_MOVE, self.on_curvature_drag_move)
        document.unsubscribe(POINTER_UP, self.end_curvature_drag)
        self._curvature_dragging = False
        self._orchestrator.end_curvature_edit()
        if not self._hovered:
            self.hide_hover_controls()
        logger.debug("Curvature of %r set to %.1f", self, self._curvature_offset)

    def cancel_curvature_drag(self):
        if not self._curvature_dragging:
            return
        self.set_curvature_offset(self._drag_restore_offset)
        self.end_curvature_drag()

    def is_curvature_dragging(self) -> bool:
        return self._curvature_dragging

    # ========================= PATH =========================

    def get_stroke_width(self) -> float:
        return self.line_width

    def _refresh_pen(self):
        color = QColor(theme_config.COLOR_ITEM_TRANSITION_IN_MOTION) if self._in_motion else self.base_color
        self.setPen(QPen(color, self.line_width, self.line_style_qt,
                         Qt.PenCapStyle.RoundCap, Qt.PenJoinStyle.RoundJoin))
        self._arrowhead.setPen(QPen(color, 1.0))
        self._arrowhead.setBrush(QBrush(color))

    def update_path(self):
        start, end = self._start_point, self._end_point
        path = QPainterPath(_qpoint(start))

        if self.is_self_loop():
            first, second = self_loop_controls(start, self._loop_outward(), self._loop_extent())
            path.cubicTo(_qpoint(first), _qpoint(second), _qpoint(end))
        elif self._curvature_offset == 0:
            path.lineTo(_qpoint(end))
        else:
            path.quadTo(_qpoint(self.control_point()), _qpoint(end))

        self.prepareGeometryChange()
        self.setPath(path)
        self._update_arrowhead(path)
        self._update_markers()

    def _update_arrowhead(self, path: QPainterPath):
        path_len = path.length()
        if path_len < EPSILON:
            self._arrowhead.setPolygon(QPolygonF())
            return

        tangent_percent = max(0.0, 1.0 - (self.arrow_size * 1.2 / (path_len + 1e-6)))
        if path_len < self.arrow_size * 1.5:
            tangent_percent = 0.8
        # angleAtPercent is counter-clockwise with y up; scene y points down.
        angle_rad = math.radians(path.angleAtPercent(tangent_percent))
        backward = Point(-math.cos(angle_rad), math.sin(angle_rad))

        tip = self._end_point
        left = tip + rotate(backward, -25) * self.arrow_size
        right = tip + rotate(backward, 25) * self.arrow_size
        self._arrowhead.setPolygon(QPolygonF([_qpoint(tip), _qpoint(left), _qpoint(right)]))

    def arrowhead_polygon(self) -> QPolygonF:
        return self._arrowhead.polygon()

    def shape(self) -> QPainterPath:
        """
        The stroked path plus the area between the curve and its control
        point, so the pointer can travel from the curve to the curvature
        handle without leaving the transition.
        """
        stroker = QPainterPathStroker()
        stroker.setWidth(self.line_width + 10)
        stroker.setCapStyle(Qt.PenCapStyle.RoundCap)
        stroker.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        shape = stroker.createStroke(self.path())

        if self._curvature_offset == 0 and not self.is_self_loop():
            return shape
        control = _qpoint(self.control_point())
        guide = QPainterPath(_qpoint(self._start_point))
        guide.lineTo(control)
        guide.lineTo(_qpoint(self._end_point))
        guide.closeSubpath()
        handle = QPainterPath()
        handle.addEllipse(control, self.marker_radius + 2, self.marker_radius + 2)
        return shape.united(guide).united(stroker.createStroke(guide)).united(handle)

    def boundingRect(self) -> QRectF:
        return super().boundingRect().united(self.shape().boundingRect())

    # ========================= HOVER CONTROLS =========================

    def _update_markers(self):
        self._start_marker.move_center_to(self._start_point)
        self._end_marker.move_center_to(self._end_point)
        self._curvature_handle.move_center_to(self.control_point())

    def show_hover_controls(self):
        if self._in_motion:
            return
        for marker in (self._start_marker, self._end_marker, self._curvature_handle):
            marker.setVisible(True)

    def hide_hover_controls(self):
        for marker in (self._start_marker, self._end_marker, self._curvature_handle):
            marker.setVisible(False)

    def hover_controls_visible(self) -> bool:
        return self._curvature_handle.isVisible()

    def curvature_handle(self) -> CurvatureHandleItem:
        return self._curvature_handle

    def marker_centers(self) -> Tuple[Point, Point, Point]:
        return (self._start_marker.center(), self._end_marker.center(), self._curvature_handle.center())

    def hoverEnterEvent(self, event: QGraphicsSceneHoverEvent):
        self._hovered = True
        if self._listeners_enabled:
            self.show_hover_controls()
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event: QGraphicsSceneHoverEvent):
        self._hovered = False
        if not self._curvature_dragging:
            self.hide_hover_controls()
        super().hoverLeaveEvent(event)

    # ========================= LISTENERS =========================

    def listeners_enabled(self) -> bool:
        return self._listeners_enabled

    def enable_listeners(self):
        self._listeners_enabled = True
        self.setAcceptHoverEvents(not self._in_motion)
        self._curvature_handle.setAcceptedMouseButtons(Qt.MouseButton.LeftButton)

    def disable_listeners(self):
        self._listeners_enabled = False
        self.setAcceptHoverEvents(False)
        self._curvature_handle.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        if not self._curvature_dragging:
            self.hide_hover_controls()

    def bring_to_top(self):
        self._orchestrator.bring_to_top(self)

    def contextMenuEvent(self, event: QGraphicsSceneContextMenuEvent):
        if not self._listeners_enabled or self._in_motion:
            event.ignore()
            return
        event.accept()
        self.bring_to_top()
