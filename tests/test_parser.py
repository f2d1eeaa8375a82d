import pytest

from angle_solver.equations.parser import (
    EquationParseError,
    collect_variables,
    equations_to_augmented_matrix,
    is_valid_variable_name,
    parse_equation,
    parse_term,
)


def test_parse_simple_sum():
    eq = parse_equation("a+b+c=180")
    assert eq.coefficients == {"a": 1.0, "b": 1.0, "c": 1.0}
    assert eq.constant == 180.0


def test_parse_moves_terms_across_sides():
    eq = parse_equation("a=180-b-c")
    assert eq.coefficients == {"a": 1.0, "b": 1.0, "c": 1.0}
    assert eq.constant == 180.0


def test_parse_coefficients_and_repeats():
    eq = parse_equation("2a+b+a=1.5c0")
    assert eq.coefficients == {"a": 3.0, "b": 1.0, "c0": -1.5}
    assert eq.constant == 0.0


def test_parse_term_variants():
    assert parse_term("-a").coefficient == -1.0
    assert parse_term("0.5α").variable == "α"
    assert parse_term("-12.5").is_constant


@pytest.mark.parametrize("text", ["a+b", "a=b=c", "=5", "a=", "∠ABC=5", "a=b+?"])
def test_malformed_equations_raise(text):
    with pytest.raises(EquationParseError):
        parse_equation(text)


def test_validator_restricts_variables():
    with pytest.raises(EquationParseError):
        parse_equation("a+d=1", validator={"a", "b"}.__contains__)


def test_variable_names():
    assert is_valid_variable_name("a")
    assert is_valid_variable_name("b12")
    assert is_valid_variable_name("θ")
    assert not is_valid_variable_name("2x")
    assert not is_valid_variable_name("ab")
    assert collect_variables(["b+a=180", "a=α"]) == ["a", "b", "α"]


def test_augmented_matrix():
    names, matrix = equations_to_augmented_matrix(["a+b=180", "a-b=20"])
    assert names == ["a", "b"]
    assert matrix.tolist() == [[1.0, 1.0, 180.0], [1.0, -1.0, 20.0]]
