"""Replace angle names by short symbols, one symbol per group of equal angles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set

from ..geometry import find_same_angle_groups
from ..model import GeometryModel
from ..partitions import Relations
from .extract import EquationTokens, LabelToken, render_equation
from .parser import is_valid_variable_name

logger = logging.getLogger(__name__)


def symbol_name(index: int) -> str:
    """``a`` .. ``z`` first, then ``a0`` .. ``a9``, ``b0`` .. and so on."""

    if index < 26:
        return chr(97 + index)
    rest = index - 26
    letter = chr(97 + (rest // 10) % 26)
    return f"{letter}{rest % 10 + 10 * (rest // 260)}"


class _EqualityGroups:
    """Ordered union of names known to be equal."""

    def __init__(self) -> None:
        self.groups: List[List[str]] = []
        self._index: Dict[str, int] = {}

    def union(self, first: str, second: str) -> None:
        g1 = self._index.get(first)
        g2 = self._index.get(second)
        if g1 is None and g2 is None:
            self.groups.append([first, second] if first != second else [first])
            self._index[first] = self._index[second] = len(self.groups) - 1
        elif g1 is not None and g2 is None:
            self.groups[g1].append(second)
            self._index[second] = g1
        elif g1 is None and g2 is not None:
            self.groups[g2].append(first)
            self._index[first] = g2
        elif g1 != g2:
            merged = self.groups[g2]
            self.groups[g1].extend(merged)
            self.groups[g2] = []
            for name in merged:
                self._index[name] = g1

    def ordered(self) -> List[List[str]]:
        return [group for group in self.groups if group]


@dataclass
class SymbolTable:
    name_to_symbol: Dict[str, str] = field(default_factory=dict)
    symbol_to_names: Dict[str, List[str]] = field(default_factory=dict)
    label_tokens: Dict[str, str] = field(default_factory=dict)

    def rewrite(self, tokens: Sequence[str]) -> str:
        parts = []
        for token in tokens:
            if isinstance(token, LabelToken):
                parts.append(self.label_tokens.get(token, token))
            else:
                parts.append(self.name_to_symbol.get(token, token))
        return render_equation(parts)


@dataclass
class SimplifiedSystem:
    equations: List[str] = field(default_factory=list)
    name_to_symbol: Dict[str, str] = field(default_factory=dict)
    symbol_to_names: Dict[str, List[str]] = field(default_factory=dict)


def build_symbol_table(model: GeometryModel, relations: Relations) -> SymbolTable:
    groups = _EqualityGroups()
    for vertex_angles in model.angles_by_vertex().values():
        if len(vertex_angles) < 2:
            continue
        for same in find_same_angle_groups(vertex_angles, model.lines):
            for other in same[1:]:
                groups.union(same[0].name, other.name)

    by_label: Dict[str, List[str]] = {}
    for angle in model.angles:
        if angle.label:
            by_label.setdefault(angle.label, []).append(angle.name)
    for names in by_label.values():
        for other in names[1:]:
            groups.union(names[0], other)

    for crossing in relations.crossings:
        for a1, a2 in crossing.pairs:
            groups.union(a1.name, a2.name)

    table = SymbolTable()
    for group in groups.ordered():
        symbol = symbol_name(len(table.symbol_to_names))
        table.symbol_to_names[symbol] = list(group)
        for name in group:
            table.name_to_symbol[name] = symbol
    for angle in model.angles:
        if angle.name in table.name_to_symbol:
            continue
        symbol = symbol_name(len(table.symbol_to_names))
        table.symbol_to_names[symbol] = [angle.name]
        table.name_to_symbol[angle.name] = symbol

    symbols: Set[str] = set(table.symbol_to_names)
    for label, names in by_label.items():
        if is_valid_variable_name(label) and label not in symbols:
            table.label_tokens[label] = label
        else:
            table.label_tokens[label] = table.name_to_symbol[names[0]]
    return table


def simplify_equations(
    equations: Sequence[EquationTokens], model: GeometryModel, relations: Relations
) -> SimplifiedSystem:
    """Rewrite extracted equations over symbols and drop the duplicates this creates."""

    table = build_symbol_table(model, relations)
    rewritten: List[str] = []
    seen: Set[str] = set()
    for tokens in equations:
        text = table.rewrite(tokens)
        lhs, _, rhs = text.partition("=")
        if text in seen or lhs == rhs:
            continue
        seen.add(text)
        rewritten.append(text)
    logger.debug(
        "Simplified %d equation(s) to %d over %d symbol(s)",
        len(equations),
        len(rewritten),
        len(table.symbol_to_names),
    )
    return SimplifiedSystem(
        equations=rewritten,
        name_to_symbol=dict(table.name_to_symbol),
        symbol_to_names={s: list(n) for s, n in table.symbol_to_names.items()},
    )


__all__ = [
    "SimplifiedSystem",
    "SymbolTable",
    "build_symbol_table",
    "simplify_equations",
    "symbol_name",
]
