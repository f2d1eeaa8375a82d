"""Per-rule view over the model that records proposals without committing them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import SolverConfig
from ..model import Angle, Circle, GeometryModel, Line, Triangle
from ..partitions import Relations
from ..validation import validate_angle_value


@dataclass
class Assignment:
    """A proposed write: ``value`` and/or ``label`` for ``angle``."""

    angle: Angle
    value: Optional[float] = None
    label: Optional[str] = None
    reason: str = ""


@dataclass
class RuleOutcome:
    changed: bool = False
    assignments: List[Assignment] = field(default_factory=list)


class RuleContext:
    """Read access to the model plus an overlay of this rule's own proposals.

    Rules observe their earlier proposals through :meth:`value_of` and
    :meth:`label_of`, so a rule behaves as if it had written sequentially,
    while the model itself stays untouched until the engine commits.
    """

    def __init__(self, model: GeometryModel, relations: Relations, config: SolverConfig):
        self.model = model
        self.relations = relations
        self.config = config
        self._values: Dict[str, float] = {}
        self._labels: Dict[str, str] = {}
        self._assignments: List[Assignment] = []

    @property
    def angles(self) -> List[Angle]:
        return self.model.angles

    @property
    def lines(self) -> List[Line]:
        return self.model.lines

    @property
    def circles(self) -> List[Circle]:
        return self.model.circles

    @property
    def triangles(self) -> List[Triangle]:
        return self.model.triangles

    def value_of(self, angle: Angle) -> Optional[float]:
        if angle.id in self._values:
            return self._values[angle.id]
        return angle.known_value

    def label_of(self, angle: Angle) -> str:
        if angle.id in self._labels:
            return self._labels[angle.id]
        return angle.label or ""

    def is_known(self, angle: Angle) -> bool:
        return self.value_of(angle) is not None

    def unknown(self, angles: Sequence[Angle]) -> List[Angle]:
        return [a for a in angles if self.value_of(a) is None]

    def known_sum(self, angles: Sequence[Angle]) -> float:
        return sum(v for v in (self.value_of(a) for a in angles) if v is not None)

    def validate(self, angle: Angle, value: float) -> bool:
        return validate_angle_value(angle, value, self, self.relations).valid

    def propose(self, angle: Angle, value: float, reason: str) -> bool:
        """Record ``value`` for ``angle`` if it is still unknown and passes validation."""

        if self.is_known(angle) or not self.validate(angle, value):
            return False
        self._values[angle.id] = value
        self._assignments.append(Assignment(angle=angle, value=value, reason=reason))
        return True

    def propose_all(self, proposals: Sequence[Tuple[Angle, float]], reason: str) -> bool:
        """Record every proposal or none, validating each against the current view."""

        pending = [(a, v) for a, v in proposals if not self.is_known(a)]
        if not pending or not all(self.validate(a, v) for a, v in pending):
            return False
        for angle, value in pending:
            self._values[angle.id] = value
            self._assignments.append(Assignment(angle=angle, value=value, reason=reason))
        return True

    def propose_label(self, angle: Angle, label: str, reason: str) -> bool:
        if not label or self.label_of(angle):
            return False
        self._labels[angle.id] = label
        self._assignments.append(Assignment(angle=angle, label=label, reason=reason))
        return True

    def outcome(self) -> RuleOutcome:
        return RuleOutcome(changed=bool(self._assignments), assignments=list(self._assignments))


def solve_group_sum(
    ctx: RuleContext, angles: Sequence[Angle], total: float, reason: str, *, upper: float = 180.0
) -> bool:
    """Solve ``angles`` that must add up to ``total``.

    One unknown gets the remainder; several unknowns sharing one label split
    it evenly.  Results outside ``(0, upper]`` are discarded.
    """

    unknown = ctx.unknown(angles)
    if not unknown:
        return False
    remaining = total - ctx.known_sum(angles)
    if len(unknown) == 1:
        if remaining <= 0 or remaining > upper:
            return False
        return ctx.propose(unknown[0], remaining, reason.format(angle=unknown[0].name, value=remaining))
    label = ctx.label_of(unknown[0])
    if not label or any(ctx.label_of(a) != label for a in unknown):
        return False
    share = remaining / len(unknown)
    if share <= 0 or share > upper:
        return False
    return ctx.propose_all([(a, share) for a in unknown], reason.format(angle=label, value=share))


__all__ = ["Assignment", "RuleContext", "RuleOutcome", "solve_group_sum"]
