# tests/test_geometry.py
import math

import pytest

from dfa_designer.core.geometry import (
    Point, circle_points, clamp, closest_index, closest_point_on_circle, control_point,
    loop_apex, midpoint, perpendicular_unit, self_loop_controls, signed_distance_along, snap
)


def assert_point(actual, x, y):
    assert actual.x == pytest.approx(x, abs=1e-9)
    assert actual.y == pytest.approx(y, abs=1e-9)


def test_point_arithmetic():
    a, b = Point(1, 2), Point(4, 6)
    assert a + b == Point(5, 8)
    assert b - a == Point(3, 4)
    assert a * 2 == Point(2, 4)
    assert 2 * a == Point(2, 4)
    assert a.distance_to(b) == 5
    assert b.as_tuple() == (4, 6)
    assert midpoint(a, b) == Point(2.5, 4)


def test_circle_points_start_at_angle_zero():
    points = circle_points(Point(0, 0), 10, 4)
    assert len(points) == 4
    assert_point(points[0], 10, 0)
    assert_point(points[1], 0, 10)
    assert_point(points[2], -10, 0)
    assert_point(points[3], 0, -10)


@pytest.mark.parametrize("count", [1, 5, 12, 17])
def test_circle_points_lie_on_circle(count):
    center = Point(250, 380)
    for i, p in enumerate(circle_points(center, 40, count)):
        assert p.distance_to(center) == pytest.approx(40)
        angle = math.degrees(math.atan2(p.y - center.y, p.x - center.x)) % 360
        assert angle == pytest.approx(i * 360 / count % 360, abs=1e-6)


def test_circle_points_rejects_non_positive_count():
    with pytest.raises(ValueError):
        circle_points(Point(0, 0), 10, 0)


def test_closest_index_first_wins_on_ties():
    points = [Point(0, 0), Point(2, 0), Point(5, 5)]
    assert closest_index(points, Point(1, 0)) == 0
    assert closest_index(points, Point(4, 4)) == 2


def test_closest_index_empty():
    with pytest.raises(ValueError):
        closest_index([], Point(0, 0))


def test_closest_point_on_circle():
    assert_point(closest_point_on_circle(Point(0, 0), 10, Point(0, 5)), 0, 10)
    assert_point(closest_point_on_circle(Point(0, 0), 10, Point(-30, 0)), -10, 0)
    # The centre itself has no direction; angle 0 is used.
    assert_point(closest_point_on_circle(Point(3, 3), 10, Point(3, 3)), 13, 3)


def test_perpendicular_unit_horizontal_and_vertical():
    assert perpendicular_unit(Point(0, 0), Point(10, 0)) == Point(0.0, -1.0)
    assert perpendicular_unit(Point(10, 0), Point(0, 0)) == Point(0.0, -1.0)
    assert perpendicular_unit(Point(0, 0), Point(0, 10)) == Point(1.0, 0.0)
    assert perpendicular_unit(Point(0, 10), Point(0, 0)) == Point(1.0, 0.0)


def test_perpendicular_unit_does_not_depend_on_direction():
    forward = perpendicular_unit(Point(0, 0), Point(10, 10))
    backward = perpendicular_unit(Point(10, 10), Point(0, 0))
    assert forward == backward
    assert forward.length() == pytest.approx(1.0)
    assert forward.dot(Point(10, 10)) == pytest.approx(0.0)


def test_perpendicular_unit_zero_length():
    assert perpendicular_unit(Point(3, 3), Point(3, 3)) is None


def test_control_point():
    assert control_point(Point(0, 0), Point(10, 0), 0) == midpoint(Point(0, 0), Point(10, 0))
    assert_point(control_point(Point(0, 0), Point(10, 0), 5), 5, -5)
    assert_point(control_point(Point(10, 0), Point(0, 0), 5), 5, -5)
    assert_point(control_point(Point(0, 0), Point(0, 10), 5), 5, 5)


def test_control_point_degenerate_chord():
    assert_point(control_point(Point(3, 3), Point(3, 3), 2), 3, 1)
    assert_point(control_point(Point(3, 3), Point(3, 3), 2, Point(1, 0)), 5, 3)


def test_signed_distance_along():
    assert signed_distance_along(Point(0, 0), Point(3, 4), Point(0, 1)) == 4
    assert signed_distance_along(Point(0, 0), Point(3, -4), Point(0, 1)) == -4


def test_self_loop_controls_are_symmetric():
    anchor, outward = Point(250, 420), Point(0, 1)
    first, second = self_loop_controls(anchor, outward, 60)
    assert first.y == pytest.approx(second.y)
    assert first.x - anchor.x == pytest.approx(anchor.x - second.x)
    assert first.y > anchor.y

    apex = loop_apex(anchor, outward, 60)
    assert apex.x == pytest.approx(anchor.x)
    assert apex.y > anchor.y


def test_snap_rounds_half_up():
    assert snap(15, 10) == 20
    assert snap(14.9, 10) == 10
    assert snap(-15, 10) == -10
    assert snap(203, 10) == 200
    with pytest.raises(ValueError):
        snap(5, 0)


def test_clamp():
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10
    assert clamp(7, 5, 2) == 5
