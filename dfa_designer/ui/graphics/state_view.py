# dfa_designer/ui/graphics/state_view.py
"""
Graphics item for one automaton state.

A StateView is the hover ring (the item itself) with a filled circle, a centred
label and a ring of mount point handles as children. Its position is the
top-left of the hover ring's bounding box. Transitions never look at a state's
internals: they subscribe to its 'position' event and read
get_absolute_attachment_points().
"""

import logging
import math
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPen
from PyQt6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsSceneContextMenuEvent,
    QGraphicsSceneHoverEvent, QGraphicsSceneMouseEvent, QGraphicsSimpleTextItem
)

from ...core.event_publisher import EventPublisher
from ...core.geometry import (
    Point, circle_points, clamp, closest_index, closest_point_on_circle, snap
)
from ...utils import config as app_config
from ...utils.theme_config import theme_config
from .pointer import PointerEvent

if TYPE_CHECKING:
    from .render_orchestrator import RenderOrchestrator

logger = logging.getLogger(__name__)

POSITION_EVENT = 'position'
POINTER_MOVE = 'pointer-move'
POINTER_UP = 'pointer-up'


@dataclass
class StateViewConfig:
    x: float = 0                # left of the circle's bounding box
    y: float = 0                # top of the circle's bounding box
    r: float = app_config.DEFAULT_STATE_RADIUS
    hm: float = app_config.DEFAULT_STATE_HOVER_MARGIN
    mount_points_number: int = app_config.DEFAULT_STATE_MOUNT_POINTS
    move_step: float = app_config.DEFAULT_STATE_MOVE_STEP
    name: str = ''

    ALIASES = {
        'radius': 'r',
        'hoverMargin': 'hm', 'hover_margin': 'hm',
        'mountPointsNumber': 'mount_points_number',
        'attachmentCount': 'mount_points_number', 'attachment_count': 'mount_points_number',
        'moveStep': 'move_step',
    }

    def __post_init__(self):
        if self.r <= 0:
            raise ValueError(f"State radius must be positive, got {self.r}")
        if self.hm < 0:
            raise ValueError(f"Hover margin cannot be negative, got {self.hm}")
        if self.move_step <= 0:
            raise ValueError(f"Move step must be positive, got {self.move_step}")
        if int(self.mount_points_number) != self.mount_points_number or self.mount_points_number <= 0:
            raise ValueError(f"Mount point count must be a positive integer, got {self.mount_points_number}")
        self.mount_points_number = int(self.mount_points_number)

    @classmethod
    def from_partial(cls, partial: Optional[Dict[str, Any]] = None) -> 'StateViewConfig':
        """
        Merges a partial config over the defaults. Accepts the camelCase names
        used by embedding pages as well as the field names; unknown keys are
        ignored with a warning.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in (partial or {}).items():
            field_name = cls.ALIASES.get(key, key)
            if field_name not in known:
                logger.warning("Ignoring unknown state config key '%s'", key)
                continue
            values[field_name] = value
        return cls(**values)


class MountPointItem(QGraphicsEllipseItem):
    """A handle on the state's perimeter. Pressing it starts a new transition."""

    Type = QGraphicsItem.UserType + 11

    def type(self): return MountPointItem.Type

    def __init__(self, state_view: 'StateView', index: int, center: Point, radius: float):
        super().__init__(center.x - radius, center.y - radius, 2 * radius, 2 * radius, state_view)
        self.state_view = state_view
        self.index = index
        self.setBrush(QBrush(QColor(theme_config.COLOR_ITEM_MOUNT_POINT)))
        self.setPen(QPen(Qt.PenStyle.NoPen))
        self.setCursor(Qt.CursorShape.CrossCursor)
        self.setAcceptedMouseButtons(Qt.MouseButton.LeftButton)
        self.setVisible(False)

    def set_radius(self, radius: float):
        center = self.rect().center()
        self.setRect(center.x() - radius, center.y() - radius, 2 * radius, 2 * radius)

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton or not self.state_view.listeners_enabled():
            event.ignore()
            return
        # Accepting here keeps the parent state from starting its own drag.
        event.accept()
        self.state_view.start_new_transition(self.index)


class StateView(QGraphicsEllipseItem):
    Type = QGraphicsItem.UserType + 1

    def type(self): return StateView.Type

    def __init__(self, orchestrator: 'RenderOrchestrator', config: Optional[Dict[str, Any]] = None):
        super().__init__()
        self._orchestrator = orchestrator
        self.config = config if isinstance(config, StateViewConfig) else StateViewConfig.from_partial(config)
        self._publisher = EventPublisher()

        self._listeners_enabled = True
        self._dragging = False
        self._grab_offset = Point()
        self._is_hovered = False
        self._is_potential_transition_target = False

        settings = orchestrator.settings_manager
        r, hm = self.config.r, self.config.hm
        size = 2 * (r + hm)

        self.setRect(0, 0, size, size)
        self.setPen(QPen(Qt.PenStyle.NoPen))
        self.setCursor(Qt.CursorShape.SizeAllCursor)
        self.setAcceptedMouseButtons(Qt.MouseButton.LeftButton)
        self.setAcceptHoverEvents(True)

        self._circle = QGraphicsEllipseItem(hm, hm, 2 * r, 2 * r, self)
        self._circle.setPen(QPen(Qt.PenStyle.NoPen))
        self._circle.setAcceptedMouseButtons(Qt.MouseButton.NoButton)

        self._label = QGraphicsSimpleTextItem(self.config.name, self)
        self._label.setAcceptedMouseButtons(Qt.MouseButton.NoButton)

        mount_radius = settings.get("state_mount_point_radius")
        local_center = Point(r + hm, r + hm)
        self._mount_points: List[MountPointItem] = [
            MountPointItem(self, i, p, mount_radius)
            for i, p in enumerate(circle_points(local_center, r, self.config.mount_points_number))
        ]

        self.apply_settings()
        self.setPos(self.config.x - hm, self.config.y - hm)

    def __repr__(self):
        return f"<StateView '{self.config.name}' at {self.position().as_tuple()}>"

    # ========================= UTILS =========================

    def get_name(self) -> str:
        return self.config.name

    def apply_settings(self):
        """Re-reads the state settings: fill colour, label font size and mount point radius."""
        settings = self._orchestrator.settings_manager
        self._circle.setBrush(QBrush(QColor(settings.get("state_default_color"))))
        self._label.setFont(QFont(app_config.DEFAULT_STATE_LABEL_FONT_FAMILY, settings.get("state_default_font_size")))
        self._center_label()
        mount_radius = settings.get("state_mount_point_radius")
        for mount_point in self._mount_points:
            mount_point.set_radius(mount_radius)
        self._refresh_colors()

    def circle_item(self) -> QGraphicsEllipseItem:
        return self._circle

    def label_item(self) -> QGraphicsSimpleTextItem:
        return self._label

    def _center_label(self):
        text_rect = self._label.boundingRect()
        center = self.config.r + self.config.hm
        self._label.setPos(center - text_rect.width() / 2, center - text_rect.height() / 2)

    def _refresh_colors(self):
        if self._is_potential_transition_target:
            ring_color = theme_config.COLOR_ITEM_STATE_TARGET_RING
            label_color = theme_config.COLOR_TEXT_HOVER
        elif self._is_hovered:
            ring_color = theme_config.COLOR_ITEM_STATE_HOVER_RING_ACTIVE
            label_color = theme_config.COLOR_TEXT_HOVER
        else:
            ring_color = theme_config.COLOR_ITEM_STATE_HOVER_RING
            label_color = theme_config.COLOR_TEXT_PRIMARY
        self.setBrush(QBrush(QColor(ring_color)))
        self._label.setBrush(QBrush(QColor(label_color)))

    # ========================= LISTENERS =========================

    def listeners_enabled(self) -> bool:
        return self._listeners_enabled

    def enable_listeners(self):
        self._set_listeners(True)

    def disable_listeners(self):
        self._set_listeners(False)

    def _set_listeners(self, enabled: bool):
        self._listeners_enabled = enabled
        buttons = Qt.MouseButton.LeftButton if enabled else Qt.MouseButton.NoButton
        self.setAcceptedMouseButtons(buttons)
        self.setAcceptHoverEvents(enabled)
        for mount_point in self._mount_points:
            mount_point.setAcceptedMouseButtons(buttons)

    def bring_to_top(self):
        self._orchestrator.bring_to_top(self)

    def contextMenuEvent(self, event: QGraphicsSceneContextMenuEvent):
        if not self._listeners_enabled:
            event.ignore()
            return
        event.accept()
        self.bring_to_top()

    # ========================= HOVER / MOUNT POINTS =========================

    def hoverEnterEvent(self, event: QGraphicsSceneHoverEvent):
        self._is_hovered = True
        self.show_attachment_points()
        self._refresh_colors()
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event: QGraphicsSceneHoverEvent):
        self._is_hovered = False
        if not self._is_potential_transition_target:
            self.hide_attachment_points()
        self._refresh_colors()
        super().hoverLeaveEvent(event)

    def show_attachment_points(self):
        for mount_point in self._mount_points:
            mount_point.setVisible(True)

    def hide_attachment_points(self):
        for mount_point in self._mount_points:
            mount_point.setVisible(False)

    def attachment_points_visible(self) -> bool:
        return any(mount_point.isVisible() for mount_point in self._mount_points)

    def mount_point_items(self) -> List[MountPointItem]:
        return list(self._mount_points)

    def highlight_as_target(self, is_target: bool):
        if self._is_potential_transition_target == is_target:
            return
        self._is_potential_transition_target = is_target
        if is_target:
            self.show_attachment_points()
        elif not self._is_hovered:
            self.hide_attachment_points()
        self._refresh_colors()

    def is_potential_transition_target(self) -> bool:
        return self._is_potential_transition_target

    # ========================= TRANSITION =========================

    def start_new_transition(self, mount_point_index: int):
        return self._orchestrator.begin_new_transition(self, mount_point_index)

    # ========================= MOVING =========================

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            event.ignore()
            return
        if self.begin_drag(PointerEvent.from_qt(event)):
            event.accept()
        else:
            event.ignore()

    def is_dragging(self) -> bool:
        return self._dragging

    def begin_drag(self, event: PointerEvent) -> bool:
        """
        Starts moving this state with the pointer. The grab offset keeps the
        point under the cursor fixed relative to the state while dragging.
        """
        if not self._listeners_enabled or self._dragging:
            return False

        pointer = self._orchestrator.coords_to_local(event)
        self._grab_offset = pointer - self.position()
        self._orchestrator.begin_state_move(self)
        self._dragging = True

        document = self._orchestrator.document_events
        document.subscribe(POINTER_MOVE, self.on_drag_move)
        document.subscribe(POINTER_UP, self.end_drag)
        return True

    def on_drag_move(self, event: PointerEvent):
        if not self._dragging:
            return
        pointer = self._orchestrator.coords_to_local(event)
        self.set_position(pointer - self._grab_offset)

    def end_drag(self, event: Optional[PointerEvent] = None):
        if not self._dragging:
            return
        document = self._orchestrator.document_events
        document.unsubscribe(POINTER_MOVE, self.on_drag_move)
        document.unsubscribe(POINTER_UP, self.end_drag)
        self._dragging = False
        self._orchestrator.end_state_move()
        logger.debug("State '%s' dropped at %s", self.config.name, self.position().as_tuple())

    def _position_bounds(self):
        """
        Allowed top-left range, snapped inward to the move grid. The circle
        stays on the canvas; the hover margin may stick out.
        """
        r, hm, step = self.config.r, self.config.hm, self.config.move_step
        width, height = self._orchestrator.canvas_size()

        def snapped_range(low, high):
            snapped_low = math.ceil(low / step) * step
            snapped_high = math.floor(high / step) * step
            if snapped_low > snapped_high:
                return low, high
            return snapped_low, snapped_high

        min_x, max_x = snapped_range(-hm, width - 2 * r - hm)
        min_y, max_y = snapped_range(-hm, height - 2 * r - hm)
        return min_x, max_x, min_y, max_y

    def set_position(self, top_left: Point):
        """Snaps to the move step, clamps to the canvas, and publishes the change."""
        step = self.config.move_step
        min_x, max_x, min_y, max_y = self._position_bounds()
        x = clamp(snap(top_left.x, step), min_x, max_x)
        y = clamp(snap(top_left.y, step), min_y, max_y)

        if (x, y) != (self.pos().x(), self.pos().y()):
            self.setPos(x, y)
        self.publish_position_update()

    def move_to(self, x: float, y: float):
        self.set_position(Point(x, y))

    # ========================= EVENTING =========================

    def subscribe(self, event: str, listener):
        self._publisher.subscribe(event, listener)

    def unsubscribe(self, event: str, listener):
        self._publisher.unsubscribe(event, listener)

    def subscriber_count(self, event: str = POSITION_EVENT) -> int:
        return self._publisher.subscriber_count(event)

    def publish_position_update(self):
        self._publisher.publish(POSITION_EVENT, self)

    def clear_subscribers(self):
        self._publisher.clear()

    # ========================= POINT UTILS =========================

    def position(self) -> Point:
        """Top-left of the hover ring's bounding box, in canvas coordinates."""
        return Point(self.pos().x(), self.pos().y())

    def get_center_point(self) -> Point:
        offset = self.config.r + self.config.hm
        return self.position() + Point(offset, offset)

    def get_absolute_attachment_points(self) -> List[Point]:
        return circle_points(self.get_center_point(), self.config.r, self.config.mount_points_number)

    def get_closest_attachment_index(self, point: Point) -> int:
        return closest_index(self.get_absolute_attachment_points(), point)

    def get_closest_point_on_circle(self, point: Point) -> Point:
        return closest_point_on_circle(self.get_center_point(), self.config.r, point)

    def get_closest_point_on_hover(self, point: Point) -> Point:
        return closest_point_on_circle(self.get_center_point(), self.config.r + self.config.hm, point)

    def canvas_rect(self) -> QRectF:
        return self.sceneBoundingRect()
