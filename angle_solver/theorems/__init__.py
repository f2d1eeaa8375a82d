"""Theorem rule engine."""

from .context import Assignment, RuleContext, RuleOutcome
from .engine import RULES, Rule, RuleKind, are_all_triangles_valid, solve_with_theorems

__all__ = [
    "Assignment",
    "RULES",
    "Rule",
    "RuleContext",
    "RuleKind",
    "RuleOutcome",
    "are_all_triangles_valid",
    "solve_with_theorems",
]
