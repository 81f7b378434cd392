# dfa_designer/core/geometry.py
"""
Plain geometry helpers used by the diagram views.

All coordinates are canvas-local: the origin is the top-left corner of the
scene and the y axis points down, as in every Qt graphics scene.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

EPSILON = 1e-9


@dataclass(frozen=True)
class Point:
    """A 2-D canvas coordinate. Value type, no identity."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> 'Point':
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def dot(self, other: 'Point') -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def circle_points(center: Point, radius: float, count: int) -> List[Point]:
    """
    Samples `count` points on a circle at equal angular steps.

    The first point sits at angle 0 (along +x from the centre); angles grow
    clockwise on screen because the y axis points down.
    """
    if count <= 0:
        raise ValueError(f"Point count must be positive, got {count}")

    angle_step = 360 / count
    points = []
    for i in range(count):
        radians = math.radians(angle_step * i)
        points.append(Point(center.x + radius * math.cos(radians),
                            center.y + radius * math.sin(radians)))
    return points


def closest_index(points: Sequence[Point], target: Point) -> int:
    """Index of the point nearest to `target`. The first one wins on ties."""
    if not points:
        raise ValueError("Cannot pick the closest of an empty point sequence")

    best_index = 0
    best_distance = points[0].distance_to(target)
    for i in range(1, len(points)):
        distance = points[i].distance_to(target)
        if distance < best_distance:
            best_index, best_distance = i, distance
    return best_index


def closest_point_on_circle(center: Point, radius: float, point: Point) -> Point:
    """Projects `point` radially onto the circle."""
    dx = point.x - center.x
    dy = point.y - center.y
    distance = math.hypot(dx, dy)
    if distance < EPSILON:
        # Every point of the circle is equally close; use angle 0.
        return Point(center.x + radius, center.y)

    ratio = radius / distance
    return Point(center.x + dx * ratio, center.y + dy * ratio)


def perpendicular_unit(start: Point, end: Point) -> Optional[Point]:
    """
    Unit normal of the chord between `start` and `end`.

    The endpoints are ordered by (x, y) first so the result does not depend on
    which of them is the logical start. Horizontal chords get a normal pointing
    up, vertical chords one pointing right. Returns None for a zero-length
    chord.
    """
    a, b = sorted((start, end), key=lambda p: (p.x, p.y))
    dx = b.x - a.x
    dy = b.y - a.y

    if abs(dx) < EPSILON and abs(dy) < EPSILON:
        return None
    if abs(dy) < EPSILON:
        return Point(0.0, -1.0)
    if abs(dx) < EPSILON:
        return Point(1.0, 0.0)

    length = math.hypot(dx, dy)
    return Point(dy / length, -dx / length)


def control_point(start: Point, end: Point, offset: float,
                  fallback_direction: Optional[Point] = None) -> Point:
    """
    Quadratic Bezier control point: chord midpoint moved `offset` along the
    chord normal. A degenerate chord uses `fallback_direction` (straight up
    when none is given).
    """
    direction = perpendicular_unit(start, end)
    if direction is None:
        direction = fallback_direction or Point(0.0, -1.0)
    return midpoint(start, end) + direction * offset


def signed_distance_along(origin: Point, point: Point, direction: Point) -> float:
    """Length of the projection of `point - origin` onto the unit `direction`."""
    return (point - origin).dot(direction)


def unit(vector: Point, fallback: Point = Point(0.0, -1.0)) -> Point:
    length = vector.length()
    if length < EPSILON:
        return fallback
    return Point(vector.x / length, vector.y / length)


def rotate(vector: Point, degrees: float) -> Point:
    radians = math.radians(degrees)
    cos_a, sin_a = math.cos(radians), math.sin(radians)
    return Point(vector.x * cos_a - vector.y * sin_a,
                 vector.x * sin_a + vector.y * cos_a)


def self_loop_controls(anchor: Point, outward: Point, extent: float,
                       spread_deg: float = 30.0) -> Tuple[Point, Point]:
    """
    Two cubic control points that draw a loop leaving and re-entering
    `anchor`, bulging `extent` pixels along the unit `outward` direction.
    """
    first = anchor + rotate(outward, -spread_deg) * extent
    second = anchor + rotate(outward, spread_deg) * extent
    return first, second


def loop_apex(anchor: Point, outward: Point, extent: float,
              spread_deg: float = 30.0) -> Point:
    """The point at t=0.5 of the loop built by `self_loop_controls`."""
    # B(0.5) of a cubic whose ends coincide is (P + 3*C1 + 3*C2 + P) / 8.
    first, second = self_loop_controls(anchor, outward, extent, spread_deg)
    return Point((2 * anchor.x + 3 * first.x + 3 * second.x) / 8,
                 (2 * anchor.y + 3 * first.y + 3 * second.y) / 8)


def snap(value: float, step: float) -> float:
    """Rounds half up to the nearest multiple of `step`."""
    if step <= 0:
        raise ValueError(f"Snap step must be positive, got {step}")
    return math.floor(value / step + 0.5) * step


def clamp(value: float, low: float, high: float) -> float:
    if high < low:
        # Canvas smaller than the item: pin to the lower edge.
        return low
    return max(low, min(high, value))
