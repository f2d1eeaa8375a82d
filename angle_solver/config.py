"""Configuration helpers for the angle solver."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Tolerances and limits shared by the rule engine and the equation solvers.

    The degree tolerances gate which geometric relationships are trusted: a
    candidate sum of ``calculated_value`` readings must land within the
    tolerance of its expected total before the relationship is used.
    """

    supplementary_tolerance: float = 10.0
    extraction_supplementary_tolerance: float = 15.0
    composed_tolerance: float = 15.0
    full_circle_tolerance: float = 30.0
    triangle_check_tolerance: float = 10.0
    validation_tolerance: float = 0.5
    max_iterations: int = 100
    hybrid_pivot_eps: float = 1e-10
    rref_pivot_eps: float = 1e-12
    rref_zero_eps: float = 1e-10
    snap_eps: float = 1e-9
    zero_eps: float = 1e-12
    round_decimals: int = 7
    agreement_tolerance: float = 1e-6
    null_space_tolerance: float = 1e-9
    reference_tolerance: float = 1e-4


_SOLVER_CONFIG = SolverConfig()


def get_solver_config() -> SolverConfig:
    return copy.deepcopy(_SOLVER_CONFIG)


def set_solver_config(config: SolverConfig) -> None:
    global _SOLVER_CONFIG
    _SOLVER_CONFIG = copy.deepcopy(config)


__all__ = ["SolverConfig", "get_solver_config", "set_solver_config"]
