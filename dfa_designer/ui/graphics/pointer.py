# dfa_designer/ui/graphics/pointer.py
"""
Pointer events as the diagram engine sees them.

Qt delivers scene mouse events whose coordinates depend on the receiving item;
the engine only needs the raw screen position and the button, so handlers
convert Qt events to PointerEvent first. Tests construct PointerEvents directly.
"""

from dataclasses import dataclass

from PyQt6.QtCore import Qt

from ...core.geometry import Point


@dataclass(frozen=True)
class PointerEvent:
    """Raw (screen) pointer position, before conversion to canvas coordinates."""
    client_x: float
    client_y: float
    button: Qt.MouseButton = Qt.MouseButton.LeftButton

    @property
    def client_point(self) -> Point:
        return Point(self.client_x, self.client_y)

    @classmethod
    def at(cls, point: Point, button: Qt.MouseButton = Qt.MouseButton.LeftButton) -> 'PointerEvent':
        return cls(point.x, point.y, button)

    @classmethod
    def from_qt(cls, event) -> 'PointerEvent':
        """Builds a PointerEvent from a QGraphicsSceneMouseEvent or QGraphicsSceneHoverEvent."""
        screen_pos = event.screenPos()
        button = event.button() if hasattr(event, 'button') else Qt.MouseButton.NoButton
        return cls(float(screen_pos.x()), float(screen_pos.y()), button)
