import math

from angle_solver.theorems.composed import apply_composed_angles
from angle_solver.theorems.full_circle import apply_full_angle_sum
from angle_solver.theorems.mirror import apply_mirror_angle
from angle_solver.theorems.same_angles import apply_same_angles
from angle_solver.theorems.same_label import apply_same_label_angles
from angle_solver.theorems.supplementary import apply_supplementary_angles, supplementary_groups
from angle_solver.theorems.triangle_sum import apply_triangle_angle_sum

from conftest import COMPOSED, build, by_name, context_for


def _values(outcome):
    return {a.angle.name: a.value for a in outcome.assignments if a.value is not None}


def test_rules_do_not_mutate_the_model(right_triangle):
    outcome = apply_triangle_angle_sum(context_for(right_triangle))
    assert _values(outcome) == {"∠ACB": 45}
    assert by_name(right_triangle, "∠ACB").value is None


def test_same_label_copies_known_value():
    model = build(
        {
            "points": [
                {"id": "A", "x": 0, "y": 0},
                {"id": "B", "x": 100, "y": 0},
                {"id": "C", "x": 0, "y": 100},
                {"id": "D", "x": 300, "y": 0},
                {"id": "E", "x": 400, "y": 0},
                {"id": "F", "x": 300, "y": 100},
            ],
            "angles": [
                {"id": "A", "p": ["B", "C"], "v": 40, "l": "x"},
                {"id": "D", "p": ["E", "F"], "l": "x", "t": 1},
            ],
        }
    )
    outcome = apply_same_label_angles(context_for(model))
    assert outcome.changed
    assert _values(outcome) == {"∠EDF": 40}


def test_same_angles_share_label_and_value():
    model = build(
        {
            "points": [
                {"id": "O", "x": 0, "y": 0},
                {"id": "P", "x": 100, "y": 0},
                {"id": "P2", "x": 200, "y": 0},
                {"id": "Q", "x": 100, "y": 100},
            ],
            "angles": [
                {"id": "O", "p": ["P", "Q"], "v": 45, "l": "β"},
                {"id": "O", "p": ["P2", "Q"], "t": 1},
            ],
            "lines": [["O", "P", "P2"]],
        }
    )
    outcome = apply_same_angles(context_for(model))
    labels = {a.angle.name: a.label for a in outcome.assignments if a.label}
    assert labels == {"∠P2OQ": "β"}
    assert _values(outcome) == {"∠P2OQ": 45}


def test_supplementary_solves_remaining_angle(straight_line):
    ctx = context_for(straight_line)
    groups = supplementary_groups(ctx)
    assert ([a.name for a in groups[0][0]], groups[0][1]) == (["∠XYZ", "∠ZYW"], 180.0)
    assert _values(apply_supplementary_angles(context_for(straight_line))) == {"∠ZYW": 60}


def test_supplementary_same_label_split():
    model = build(
        {
            "points": [
                {"id": "X", "x": -100, "y": 0},
                {"id": "Y", "x": 0, "y": 0},
                {"id": "W", "x": 100, "y": 0},
                {"id": "Z", "x": 0, "y": 100},
            ],
            "angles": [
                {"id": "Y", "p": ["X", "Z"], "l": "k"},
                {"id": "Y", "p": ["Z", "W"], "l": "k", "t": 1},
            ],
            "lines": [["X", "Y", "W"]],
        }
    )
    assert _values(apply_supplementary_angles(context_for(model))) == {"∠XYZ": 90, "∠ZYW": 90}


def test_full_circle_vertical_pair(crossing):
    outcome = apply_full_angle_sum(context_for(crossing))
    assert _values(outcome) == {"∠BOD": 35}


def test_full_circle_last_unknown(crossing):
    by_name(crossing, "∠COB").value = 145
    by_name(crossing, "∠BOD").value = 35
    assert _values(apply_full_angle_sum(context_for(crossing))) == {"∠AOD": 145}


def test_mirror_completes_crossing(crossing):
    outcome = apply_mirror_angle(context_for(crossing))
    assert _values(outcome) == {"∠BOD": 35, "∠AOD": 145, "∠COB": 145}


def test_triangle_isosceles_by_label(labelled_isosceles):
    values = _values(apply_triangle_angle_sum(context_for(labelled_isosceles)))
    assert values == {"∠ACB": 44, "∠CBA": 44}


def test_triangle_equilateral_by_label(labelled_isosceles):
    for angle in labelled_isosceles.angles:
        angle.value = None
        angle.label = "e"
    values = _values(apply_triangle_angle_sum(context_for(labelled_isosceles)))
    assert set(values) == {"∠ACB", "∠CBA", "∠CAB"}
    assert all(math.isclose(v, 60.0) for v in values.values())


def test_triangle_isosceles_by_circle_from_apex(circle_isosceles):
    values = _values(apply_triangle_angle_sum(context_for(circle_isosceles)))
    assert values == {"∠ABC": 70, "∠ACB": 70}


def test_triangle_isosceles_by_circle_from_base(circle_isosceles):
    by_name(circle_isosceles, "∠BAC").value = None
    by_name(circle_isosceles, "∠ABC").value = 70
    values = _values(apply_triangle_angle_sum(context_for(circle_isosceles)))
    assert values == {"∠BAC": 40, "∠ACB": 70}


def test_composed_child_from_parent(composed):
    assert _values(apply_composed_angles(context_for(composed))) == {"∠QOR": 60}


def test_composed_parent_from_children():
    model = build(COMPOSED)
    by_name(model, "∠POR").value = None
    by_name(model, "∠QOR").value = 50
    assert _values(apply_composed_angles(context_for(model))) == {"∠POR": 80}


def test_rule_without_matches_reports_no_change(right_triangle):
    outcome = apply_mirror_angle(context_for(right_triangle))
    assert not outcome.changed
    assert outcome.assignments == []
