import logging

from angle_solver import SolveOptions
from angle_solver.theorems import RULES, Rule, RuleKind, RuleOutcome, are_all_triangles_valid, solve_with_theorems

from conftest import by_name


def test_rule_order_and_scores_are_fixed():
    assert [(rule.name, rule.score) for rule in RULES] == [
        ("same_label_angles", 1),
        ("same_angles", 0),
        ("supplementary_angles", 2),
        ("full_angle_sum", 3),
        ("triangle_angle_sum", 3),
        ("composed_angles", 2),
        ("mirror_angle", 1),
    ]


def test_solves_triangle_and_reports_steps(right_triangle):
    steps = []
    result = solve_with_theorems(
        right_triangle,
        SolveOptions(set_angle=lambda angle, reason, rule: steps.append((angle.name, rule))),
    )
    assert result.solved
    assert result.all_solved
    assert result.score == 3
    assert result.solved_angles == {"∠ACB": 45}
    assert by_name(right_triangle, "∠ACB").value == 45
    assert steps == [("∠ACB", "triangle_angle_sum")]


def test_crossing_solves_every_region(crossing):
    result = solve_with_theorems(crossing)
    assert result.solved
    assert result.solved_angles == {"∠COB": 145, "∠AOD": 145, "∠BOD": 35}


def test_second_run_is_idempotent(crossing):
    solve_with_theorems(crossing)
    before = [a.value for a in crossing.angles]
    again = solve_with_theorems(crossing)
    assert again.solved_angles == {}
    assert again.score == 0
    assert again.iterations == 1
    assert [a.value for a in crossing.angles] == before


def test_iteration_cap_returns_partial_result(right_triangle, caplog):
    busy = Rule(RuleKind.MIRROR, 1, lambda ctx: RuleOutcome(changed=True))
    with caplog.at_level(logging.WARNING):
        result = solve_with_theorems(right_triangle, SolveOptions(max_iterations=3), rules=(busy,))
    assert result.iterations == 3
    assert result.score == 3
    assert not result.solved
    assert "max iterations" in caplog.text


def test_unsolvable_model_stops_when_nothing_changes(composed):
    by_name(composed, "∠POR").value = None
    result = solve_with_theorems(composed)
    assert not result.solved
    assert not result.changes_made
    assert result.iterations == 1


def test_triangle_check_requires_every_angle(right_triangle):
    assert not are_all_triangles_valid(right_triangle, right_triangle.triangles, 10.0)
    by_name(right_triangle, "∠ACB").value = 45
    assert are_all_triangles_valid(right_triangle, right_triangle.triangles, 10.0)
    assert not are_all_triangles_valid(right_triangle, [], 10.0)
