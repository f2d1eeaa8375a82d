"""Grammar of the linear equations exchanged between extraction and the solvers.

An equation has exactly one ``=``.  Each side is a ``+``-joined list of terms
once every ``-`` has been rewritten as ``+-``.  A term is either a signed
number or an optional signed coefficient immediately followed by a variable
(a Greek or Latin letter, optionally followed by digits).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

GREEK_LETTERS: Tuple[Tuple[str, str], ...] = (
    ("α", "alpha"),
    ("β", "beta"),
    ("γ", "gamma"),
    ("δ", "delta"),
    ("ε", "epsilon"),
    ("ζ", "zeta"),
    ("η", "eta"),
    ("θ", "theta"),
    ("ι", "iota"),
    ("κ", "kappa"),
    ("λ", "lambda"),
    ("μ", "mu"),
    ("ν", "nu"),
    ("ξ", "xi"),
    ("ο", "omicron"),
    ("π", "pi"),
    ("ρ", "rho"),
    ("σ", "sigma"),
    ("τ", "tau"),
    ("υ", "upsilon"),
    ("φ", "phi"),
    ("χ", "chi"),
    ("ψ", "psi"),
    ("ω", "omega"),
)

_GREEK = "".join(letter for letter, _ in GREEK_LETTERS)
VARIABLE_PATTERN = re.compile(rf"[{_GREEK}a-z]\d*", re.IGNORECASE)
_CONSTANT = re.compile(r"^-?\d+(\.\d+)?$")
_COEFFICIENT_TERM = re.compile(r"^(-?\d*(?:\.\d+)?)(.+)$")


class EquationParseError(ValueError):
    """Raised for malformed equations: a missing side or an unrecognised variable."""


@dataclass
class Term:
    coefficient: float
    variable: Optional[str] = None

    @property
    def is_constant(self) -> bool:
        return self.variable is None


@dataclass
class LinearEquation:
    """``sum(coefficients[v] * v) == constant``."""

    coefficients: Dict[str, float] = field(default_factory=dict)
    constant: float = 0.0
    source: str = ""


def is_valid_variable_name(name: str) -> bool:
    return VARIABLE_PATTERN.fullmatch(name) is not None


def parse_term(term: str, validator: Optional[Callable[[str], bool]] = None) -> Term:
    if _CONSTANT.match(term):
        return Term(coefficient=float(term))

    match = _COEFFICIENT_TERM.match(term)
    if match is None:
        raise EquationParseError(f"Invalid term: {term!r}")
    coeff_text, variable = match.groups()
    check = validator or is_valid_variable_name
    if not check(variable):
        raise EquationParseError(f"Unknown variable {variable!r} in term {term!r}")

    if coeff_text in ("", "+"):
        coefficient = 1.0
    elif coeff_text == "-":
        coefficient = -1.0
    else:
        coefficient = float(coeff_text)
    return Term(coefficient=coefficient, variable=variable)


def parse_equation_side(
    side: str, sign: float, validator: Optional[Callable[[str], bool]] = None
) -> List[Term]:
    terms = [part for part in side.replace("-", "+-").split("+") if part]
    parsed = []
    for text in terms:
        term = parse_term(text, validator)
        term.coefficient *= sign
        parsed.append(term)
    return parsed


def parse_equation(equation: str, validator: Optional[Callable[[str], bool]] = None) -> LinearEquation:
    clean = re.sub(r"\s+", "", equation)
    parts = clean.split("=")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise EquationParseError(f"Invalid equation: {equation!r}")
    lhs, rhs = parts

    result = LinearEquation(source=equation)
    constant = 0.0
    for term in parse_equation_side(lhs, 1.0, validator) + parse_equation_side(rhs, -1.0, validator):
        if term.is_constant:
            constant += term.coefficient
        else:
            result.coefficients[term.variable] = result.coefficients.get(term.variable, 0.0) + term.coefficient
    result.constant = -constant
    return result


def collect_variables(equations: Iterable[str]) -> List[str]:
    """Every valid variable token mentioned by ``equations``, sorted."""

    found = set()
    for equation in equations:
        for token in VARIABLE_PATTERN.findall(equation):
            if is_valid_variable_name(token):
                found.add(token)
    return sorted(found)


def equations_to_augmented_matrix(
    equations: Sequence[str], variables: Optional[Sequence[str]] = None
) -> Tuple[List[str], np.ndarray]:
    """Build ``[A | b]`` with one row per equation over sorted ``variables``."""

    names = list(variables) if variables is not None else collect_variables(equations)
    index = {name: i for i, name in enumerate(names)}
    matrix = np.zeros((len(equations), len(names) + 1), dtype=float)
    for row, equation in enumerate(equations):
        parsed = parse_equation(equation, validator=index.__contains__)
        for name, coefficient in parsed.coefficients.items():
            matrix[row, index[name]] += coefficient
        matrix[row, -1] = parsed.constant
    return names, matrix


__all__ = [
    "EquationParseError",
    "GREEK_LETTERS",
    "LinearEquation",
    "Term",
    "VARIABLE_PATTERN",
    "collect_variables",
    "equations_to_augmented_matrix",
    "is_valid_variable_name",
    "parse_equation",
    "parse_equation_side",
    "parse_term",
]
