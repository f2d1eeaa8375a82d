import math

import pytest

from angle_solver.geometry import (
    are_angles_linear_pair,
    are_angles_overlapping,
    are_points_collinear,
    are_same_angle,
    build_overlapping_angles_map,
    calculate_angle_degrees,
    find_base_angle,
    find_same_angle_groups,
    find_triangles,
    is_equilateral_by_circles,
    is_equilateral_by_label,
    is_same_ray,
    isosceles_vertex_angle,
    measure_angle,
    triangle_angles,
)
from angle_solver.model import Angle, Circle, Line, Point, angle_name, angle_value


def _angle(angle_id, vertex, p1, p2, **kwargs):
    return Angle(id=angle_id, point_id=vertex, sidepoints=(p1, p2), **kwargs)


def test_angle_name_puts_vertex_in_the_middle():
    assert angle_name("B", "A", "C") == "∠ABC"


@pytest.mark.parametrize("raw, expected", [(None, None), (0, None), (float("nan"), None), ("45", 45.0), (30, 30.0)])
def test_angle_value_normalises_unknowns(raw, expected):
    assert angle_value(raw) == expected


def test_calculate_angle_degrees_folds_reflex_angles():
    o = Point("O", 0, 0)
    assert math.isclose(calculate_angle_degrees(o, Point("A", 1, 0), Point("B", 0, 1)), 90.0)
    assert math.isclose(calculate_angle_degrees(o, Point("B", 0, 1), Point("A", 1, 0)), 90.0)
    assert math.isclose(calculate_angle_degrees(o, Point("A", 1, 0), Point("C", -1, -1)), 135.0)


def test_measure_angle_rounds_and_skips_degenerate_spans():
    o = Point("O", 0, 0)
    assert measure_angle(o, Point("A", 100, 0), Point("B", 100, 100)) == 45
    assert measure_angle(o, Point("A", 100, 0), Point("B", -100, 0)) is None
    assert measure_angle(o, Point("A", 100, 0), Point("B", 100, 1)) is None


def test_is_same_ray_uses_line_order():
    lines = [Line("l", ["O", "P", "Q"]), Line("m", ["X", "O", "Y"])]
    assert is_same_ray("P", "Q", "O", lines)
    assert not is_same_ray("X", "Y", "O", lines)
    assert is_same_ray("X", "X", "O", lines)
    assert not is_same_ray("P", "X", "O", lines)


def test_are_same_angle_and_groups():
    lines = [Line("l", ["O", "P", "P2"])]
    a1 = _angle("1", "O", "P", "Q")
    a2 = _angle("2", "O", "Q", "P2")
    a3 = _angle("3", "O", "P", "R")
    assert are_same_angle(a1, a2, lines)
    assert not are_same_angle(a1, a3, lines)
    assert find_same_angle_groups([a1, a2, a3], lines) == [[a1, a2]]


def test_overlap_and_linear_pair():
    lines = [Line("l", ["X", "O", "W", "V"])]
    xz = _angle("1", "O", "X", "Z")
    zw = _angle("2", "O", "Z", "W")
    zv = _angle("3", "O", "Z", "V")
    assert are_angles_linear_pair(xz, zw, lines)
    assert not are_angles_overlapping(xz, zw, lines)
    assert are_angles_overlapping(zw, zv, lines)
    overlaps = build_overlapping_angles_map([xz, zw, zv], lines)
    assert overlaps == {"2": {"3"}, "3": {"2"}}


def test_are_points_collinear():
    lines = [Line("l", ["A", "B", "C"])]
    assert are_points_collinear("C", "A", "B", lines)
    assert not are_points_collinear("A", "B", "D", lines)


def test_find_triangles_skips_collinear_and_adds_apex_triangles():
    adjacent = {"A": {"B", "C"}, "B": {"A", "C", "D"}, "C": {"A", "B"}, "D": {"B"}}
    lines = [Line("l", ["B", "D", "C"])]
    triangles = find_triangles(adjacent, lines)
    keys = {tuple(sorted(t)) for t in triangles}
    assert ("A", "B", "C") in keys
    assert ("B", "C", "D") not in keys


def test_find_base_angle_accepts_collinear_stand_in():
    lines = [Line("l", ["B", "D", "C"])]
    angle = _angle("1", "B", "A", "D")
    assert find_base_angle([angle], "B", "A", "C", lines) is angle
    assert find_base_angle([angle], "B", "A", "X", lines) is None


def test_triangle_angles_collects_one_angle_per_vertex():
    angles = [_angle("1", "A", "B", "C"), _angle("2", "B", "A", "C"), _angle("3", "C", "A", "B")]
    assert triangle_angles(("A", "B", "C"), angles, []) == angles


def test_equilateral_detection():
    assert is_equilateral_by_label(["x", "x", "x"])
    assert not is_equilateral_by_label(["", "", ""])
    assert not is_equilateral_by_label(["x", "x", "y"])

    circles = [
        Circle("A", "A", 0, 0, 10, points_on_line=["B", "C"]),
        Circle("B", "B", 10, 0, 10, points_on_line=["A", "C"]),
    ]
    assert is_equilateral_by_circles(("A", "B", "C"), circles)
    assert not is_equilateral_by_circles(("A", "B", "C"), circles[:1])


def test_isosceles_vertex_angle_finds_apex_at_circle_center():
    circle = Circle("A", "A", 0, 0, 10, points_on_line=["B", "C"])
    apex = _angle("1", "A", "B", "C")
    base = _angle("2", "B", "A", "C")
    assert isosceles_vertex_angle([base, apex], circle, ("A", "B", "C")) is apex
    assert isosceles_vertex_angle([base, apex], circle, ("B", "C", "D")) is None
