"""Result and option containers shared by the solving strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Literal, Optional, TypedDict

from .config import SolverConfig
from .model import Angle

SetAngleCallback = Callable[[Angle, str, str], None]
Classification = Literal["none", "unique", "infinite"]


def _noop_set_angle(angle: Angle, reason: str, rule: str) -> None:
    return None


@dataclass
class SolveOptions:
    """Caller hooks and overrides for :func:`angle_solver.solve`.

    ``set_angle`` is invoked after every committed value with a human readable
    reason and the name of the rule (or ``"equation"``) that produced it.
    """

    set_angle: SetAngleCallback = _noop_set_angle
    max_iterations: Optional[int] = None
    config: Optional[SolverConfig] = None


@dataclass
class TheoremSolverResult:
    solved: bool = False
    all_solved: bool = False
    score: int = 0
    execution_time: float = 0.0
    iterations: int = 0
    changes_made: bool = False
    solved_angles: Dict[str, float] = field(default_factory=dict)


@dataclass
class EquationSolverResult:
    solved: bool = False
    all_solved: bool = False
    score: int = 0
    execution_time: float = 0.0
    solution: Dict[str, float] = field(default_factory=dict)
    classification: Optional[Classification] = None
    free_variables: List[str] = field(default_factory=list)


class AngleConflict(TypedDict):
    angle: str
    theorems: float
    equations: float


class SymbolConflict(TypedDict):
    symbol: str
    hybrid: float
    rref: float


class AgreementReport(TypedDict):
    agreed: bool
    compared: int
    conflicts: List[AngleConflict]
    solver_conflicts: List[SymbolConflict]
    mismatches: List[str]
    determined: List[str]


def empty_agreement() -> AgreementReport:
    return {
        "agreed": True,
        "compared": 0,
        "conflicts": [],
        "solver_conflicts": [],
        "mismatches": [],
        "determined": [],
    }


@dataclass
class SolverResults:
    theorems: TheoremSolverResult = field(default_factory=TheoremSolverResult)
    equation_hybrid: EquationSolverResult = field(default_factory=EquationSolverResult)
    equation_rref: EquationSolverResult = field(default_factory=EquationSolverResult)
    solved_angles_with_equations: Dict[str, float] = field(default_factory=dict)
    solved: bool = False
    score: int = 0
    execution_time: float = 0.0
    agreement: AgreementReport = field(default_factory=empty_agreement)
    equations: List[str] = field(default_factory=list)
    simplified_equations: List[str] = field(default_factory=list)
    symbol_to_names: Dict[str, List[str]] = field(default_factory=dict)


__all__ = [
    "AgreementReport",
    "AngleConflict",
    "Classification",
    "EquationSolverResult",
    "SetAngleCallback",
    "SolveOptions",
    "SolverResults",
    "SymbolConflict",
    "TheoremSolverResult",
    "empty_agreement",
]
