import math

import numpy as np
import pytest

from angle_solver import SolveOptions, get_solver_config
from angle_solver.equations import solve_with_equation_hybrid, solve_with_equations, solve_with_equations_rref
from angle_solver.equations.crosscheck import cross_check, determined_variables
from angle_solver.equations.hybrid import substitute
from angle_solver.equations.linalg import format_constant, format_number, gauss_jordan, inconsistent_rows
from angle_solver.equations.parser import equations_to_augmented_matrix, parse_equation
from angle_solver.equations.rref import extract_partial_solution

from conftest import by_name


def _rref(equations, targets):
    variables, matrix = equations_to_augmented_matrix(equations)
    return solve_with_equations_rref(variables, matrix, targets)


def test_gauss_jordan_reduces_to_identity():
    reduced, pivots = gauss_jordan(np.array([[1.0, 1.0, 180.0], [1.0, -1.0, 0.0]]), pivot_eps=1e-12)
    assert pivots == [0, 1]
    assert np.allclose(reduced, [[1.0, 0.0, 90.0], [0.0, 1.0, 90.0]])


def test_gauss_jordan_keeps_inconsistent_row():
    reduced, pivots = gauss_jordan(np.array([[1.0, 1.0], [1.0, 2.0]]), pivot_eps=1e-12)
    assert pivots == [0]
    assert inconsistent_rows(reduced, 1e-10) == [1]


def test_format_helpers():
    config = get_solver_config()
    assert format_number(44.0000000001, config) == 44.0
    assert format_number(1 / 3, config) == 0.3333333
    assert format_number(1e-15, config) == 0.0
    assert format_constant(145.0) == "145"
    assert format_constant(87.5) == "87.5"


def test_substitution_chains_single_variable_equations():
    remaining, solution = substitute([parse_equation("a+b=180"), parse_equation("a=35")])
    assert solution == {"a": 35.0, "b": 145.0}
    assert remaining == []


def test_hybrid_solves_chain():
    result = solve_with_equation_hybrid(["a+b=180", "a=35"], ["b"])
    assert result.solved
    assert result.all_solved
    assert result.score == 2
    assert result.solution == {"a": 35.0, "b": 145.0}


def test_hybrid_uses_elimination_for_coupled_rows():
    result = solve_with_equation_hybrid(["b+a+a=180", "b=92", "a=α"], ["a"])
    assert result.solution == {"b": 92.0, "a": 44.0, "α": 44.0}


def test_hybrid_partial_solution():
    result = solve_with_equation_hybrid(["a+b+c=180", "c=40"], ["a"])
    assert not result.solved
    assert result.solution == {"c": 40.0}


def test_rref_unique():
    result = _rref(["a+b=180", "a-b=20"], ["a", "b"])
    assert result.classification == "unique"
    assert result.solution == {"a": 100.0, "b": 80.0}
    assert result.solved and result.all_solved


def test_rref_infinite_keeps_only_determined_pivots():
    result = _rref(["a+b+c=180", "a=b", "d=30"], ["d"])
    assert result.classification == "infinite"
    assert result.free_variables == ["c"]
    assert result.solution == {"d": 30.0}
    assert result.solved
    assert not result.all_solved


def test_rref_inconsistent():
    result = _rref(["a=1", "a=2"], ["a"])
    assert result.classification == "none"
    assert result.solution == {}
    assert not result.solved


def test_rref_empty_system():
    result = solve_with_equations_rref([], np.zeros((0, 1)), [])
    assert result.classification == "unique"
    assert not result.solved


def test_partial_solution_reads_isolated_pivots_only():
    reduced = np.array([[1.0, 0.0, 0.5, 90.0], [0.0, 1.0, 0.0, 20.0]])
    partial = extract_partial_solution(reduced, ["a", "b", "c"], get_solver_config())
    assert partial.unique == {"b": 20.0}
    assert partial.free == ["c"]


@pytest.mark.parametrize(
    "equations",
    [
        ["a+b=180", "a=35"],
        ["b+a+a=180", "b=92", "a=α"],
        ["a+b+c=180", "a=b", "c=50", "d+e=90"],
        ["a+b+a+b=360", "a+b=180", "a=35"],
    ],
)
def test_both_solvers_agree_on_determined_variables(equations):
    hybrid = solve_with_equation_hybrid(equations, [])
    variables, matrix = equations_to_augmented_matrix(equations)
    rref = solve_with_equations_rref(variables, matrix, [])
    report = cross_check(variables, matrix, hybrid.solution, rref.solution)
    assert report.consistent
    assert report.mismatches == []
    for name, value in report.determined.items():
        assert math.isclose(rref.solution[name], value, abs_tol=1e-6)


def test_determined_variables_uses_null_space():
    variables, matrix = equations_to_augmented_matrix(["a+b+c=180", "c=50"])
    determined = determined_variables(variables, matrix)
    assert set(determined) == {"c"}
    assert math.isclose(determined["c"], 50.0)
    inconsistent = equations_to_augmented_matrix(["a=1", "a=2"])
    assert determined_variables(*inconsistent) == {}


def test_cross_check_reports_conflicts():
    variables, matrix = equations_to_augmented_matrix(["a+b=180", "a=35"])
    report = cross_check(variables, matrix, {"a": 35.0, "b": 145.0}, {"a": 35.0, "b": 146.0})
    assert not report.consistent
    assert report.conflicts == [{"symbol": "b", "hybrid": 145.0, "rref": 146.0}]
    assert report.mismatches == ["b"]


def test_cross_check_compares_against_least_squares_reference():
    variables, matrix = equations_to_augmented_matrix(["a=35", "a+b=180"])
    report = cross_check(variables, matrix, {"a": 36.0, "b": 144.0}, {})
    assert report.conflicts == []
    assert report.mismatches == ["a", "b"]
    assert not report.consistent
    loose = cross_check(variables, matrix, {"a": 36.0, "b": 144.0}, {}, reference_tolerance=2.0)
    assert loose.mismatches == []
    assert loose.consistent


def test_solve_with_equations_writes_values(crossing):
    reasons = []
    options = SolveOptions(set_angle=lambda angle, reason, rule: reasons.append((angle.name, reason, rule)))
    outcome = solve_with_equations(crossing, options)
    assert outcome.solved_angles == {"∠BOD": 35.0, "∠AOD": 145.0, "∠COB": 145.0}
    assert by_name(crossing, "∠AOD").value == 145.0
    assert outcome.hybrid.solved
    assert outcome.rref.classification == "unique"
    assert outcome.cross_check.consistent
    assert ("∠AOD", "Solved by equations, b = 145.0°", "equation") in reasons


def test_solve_with_equations_labelled_isosceles(labelled_isosceles):
    outcome = solve_with_equations(labelled_isosceles)
    assert outcome.simplified.equations == ["b+a+a=180", "b=92", "a=α"]
    assert outcome.solved_angles == {"∠ACB": 44.0, "∠CBA": 44.0}
