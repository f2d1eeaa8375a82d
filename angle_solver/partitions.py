"""Combinatorial enumeration of angle relationships around a vertex.

Both solving strategies discover relationships here so that they cannot
drift apart: the rule engine and the equation extractor consume the same
groups and differ only in what they do with them.

Discovery is purely geometric.  A candidate group is trusted only when the
``calculated_value`` readings of its members sum to the expected total within
a tolerance; the tolerances live in :class:`angle_solver.config.SolverConfig`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from .config import SolverConfig
from .geometry import polar_angle, triangle_angles
from .model import Angle, GeometryModel, Line, Point, PointId, Triangle

logger = logging.getLogger(__name__)


def calculated_sum(angles: Sequence[Angle]) -> float:
    return sum(a.calculated_value or 0.0 for a in angles)


def within(total: float, expected: float, tolerance: float) -> bool:
    return abs(total - expected) <= tolerance


def contiguous_splits(seq: Sequence[Angle]) -> Iterator[Tuple[List[Angle], List[Angle]]]:
    """Yield ``(slice, complement)`` for every proper contiguous slice of ``seq``."""

    n = len(seq)
    if n < 2:
        return
    for start in range(n):
        for length in range(1, n):
            end = start + length
            if end > n:
                break
            yield list(seq[start:end]), list(seq[:start]) + list(seq[end:])


def cyclic_splits(seq: Sequence[Angle]) -> Iterator[Tuple[List[Angle], List[Angle]]]:
    """Like :func:`contiguous_splits` but slices may wrap around the end."""

    n = len(seq)
    for start in range(n):
        for length in range(1, n):
            subset = [seq[(start + i) % n] for i in range(length)]
            complement = [seq[(start + i) % n] for i in range(length, n)]
            yield subset, complement


@dataclass
class ComposedGroup:
    parent: Angle
    children: List[Angle]


@dataclass
class SpanningPath:
    """Consecutive angles at ``vertex`` leading from one side of ``line`` to the other."""

    vertex: PointId
    line_id: str
    angles: List[Angle]


@dataclass
class Crossing:
    """Two lines crossing at ``vertex``.

    ``pairs`` holds the vertical (mirror) angle pairs found in the model and
    ``adjacent`` one pair of neighbouring regions when both exist.
    """

    vertex: PointId
    pairs: List[Tuple[Angle, Angle]] = field(default_factory=list)
    adjacent: Optional[Tuple[Angle, Angle]] = None

    @property
    def angles(self) -> List[Angle]:
        return [a for pair in self.pairs for a in pair]


class RayFan:
    """Angles sharing one vertex, with their rays sorted by direction."""

    def __init__(self, vertex: Point, angles: Sequence[Angle], points: Mapping[PointId, Point]):
        self.vertex = vertex
        self.angles = list(angles)
        ray_ids: List[PointId] = []
        for angle in self.angles:
            for ray in angle.sidepoints:
                if ray not in ray_ids:
                    ray_ids.append(ray)
        known = [r for r in ray_ids if r in points]
        self.rays: List[PointId] = sorted(known, key=lambda r: polar_angle(vertex, points[r]))

    def angle_between(self, ray1: PointId, ray2: PointId) -> Optional[Angle]:
        for angle in self.angles:
            if angle.has_ray(ray1) and angle.has_ray(ray2):
                return angle
        return None

    def decompositions(self, start: int, end: int) -> List[List[Angle]]:
        """Every way to cover rays ``start..end`` with consecutive existing angles."""

        if start == end:
            return [[]]
        results: List[List[Angle]] = []
        for mid in range(start + 1, end + 1):
            angle = self.angle_between(self.rays[start], self.rays[mid])
            if angle is None:
                continue
            for rest in self.decompositions(mid, end):
                results.append([angle] + rest)
        return results

    def composed_groups(self, tolerance: float) -> List[ComposedGroup]:
        groups: List[ComposedGroup] = []
        n = len(self.rays)
        for i in range(n):
            for j in range(i + 2, n):
                parent = self.angle_between(self.rays[i], self.rays[j])
                if parent is None:
                    continue
                for children in self.decompositions(i, j):
                    if len(children) < 2:
                        continue
                    if within(calculated_sum(children), parent.calculated_value or 0.0, tolerance):
                        groups.append(ComposedGroup(parent=parent, children=children))
        return groups

    def elementary_cycle(self) -> List[Angle]:
        """Angles between cyclically consecutive rays; complete when one per ray."""

        n = len(self.rays)
        if n < 3:
            return []
        cycle: List[Angle] = []
        for i in range(n):
            angle = self.angle_between(self.rays[i], self.rays[(i + 1) % n])
            if angle is not None:
                cycle.append(angle)
        return cycle

    def full_circle(self, tolerance: float) -> List[Angle]:
        cycle = self.elementary_cycle()
        if len(cycle) < 3 or len(cycle) != len(self.rays):
            return []
        if not within(calculated_sum(cycle), 360.0, tolerance):
            return []
        return cycle

    def cyclic_partitions(self) -> List[List[Angle]]:
        """All ways to go once around the vertex with 3+ existing angles.

        A partition picks ray indices ``i0 < i1 < ... < ik`` and needs an angle
        between every consecutive pick plus the wrap from ``ik`` back to ``i0``.
        The elementary cycle, when present, comes first.
        """

        n = len(self.rays)
        if n < 3:
            return []
        found: List[List[Angle]] = []

        def _extend(path_idx: List[int], path: List[Angle]) -> None:
            last = path_idx[-1]
            if len(path) >= 2:
                wrap = self.angle_between(self.rays[last], self.rays[path_idx[0]])
                if wrap is not None:
                    found.append(path + [wrap])
            for nxt in range(last + 1, n):
                angle = self.angle_between(self.rays[last], self.rays[nxt])
                if angle is None:
                    continue
                path_idx.append(nxt)
                path.append(angle)
                _extend(path_idx, path)
                path.pop()
                path_idx.pop()

        for start in range(n):
            _extend([start], [])

        elementary = self.elementary_cycle()
        if len(elementary) == n:
            found.insert(0, elementary)

        unique: List[List[Angle]] = []
        seen: Set[Tuple[str, ...]] = set()
        for partition in found:
            key = tuple(sorted(a.id for a in partition))
            if key in seen:
                continue
            seen.add(key)
            unique.append(partition)
        return unique

    def spanning_paths(self, before_side: Sequence[PointId], after_side: Sequence[PointId]) -> List[List[Angle]]:
        """Chains of angles walking from a ray on ``before_side`` to one on ``after_side``."""

        before_rays = [r for r in self.rays if r in before_side]
        if not before_rays or not any(r in after_side for r in self.rays):
            return []
        paths: List[List[Angle]] = []

        def _walk(current: PointId, path: List[Angle], visited: Set[str]) -> None:
            if current in after_side:
                if path:
                    paths.append(list(path))
                return
            for angle in self.angles:
                if not angle.has_ray(current):
                    continue
                other = angle.other_ray(current)
                if other in before_side or angle.id in visited:
                    continue
                visited.add(angle.id)
                path.append(angle)
                _walk(other, path, visited)
                path.pop()
                visited.discard(angle.id)

        for start in before_rays:
            _walk(start, [], set())
        return paths


def _line_sides(line: Line, vertex: PointId) -> Optional[Tuple[List[PointId], List[PointId]]]:
    idx = line.index(vertex)
    if idx < 1 or idx == len(line.points) - 1:
        return None
    return line.points[:idx], line.points[idx + 1:]


def mirror_crossings(model: GeometryModel) -> List[Crossing]:
    """Vertical angle pairs at every vertex where two lines cross."""

    crossings: List[Crossing] = []
    if len(model.lines) < 2:
        return crossings
    for vertex, vertex_angles in model.angles_by_vertex().items():
        if len(vertex_angles) < 2:
            continue
        through = [line for line in model.lines if vertex in line]
        for i in range(len(through)):
            for j in range(i + 1, len(through)):
                sides1 = _line_sides(through[i], vertex)
                sides2 = _line_sides(through[j], vertex)
                if sides1 is None or sides2 is None:
                    continue
                p1_before, p1_after = sides1[0][-1], sides1[1][0]
                p2_before, p2_after = sides2[0][-1], sides2[1][0]
                fan = _PairLookup(vertex_angles)
                crossing = Crossing(vertex=vertex)
                for side1, side2 in (
                    ((p1_before, p2_before), (p1_after, p2_after)),
                    ((p1_before, p2_after), (p1_after, p2_before)),
                ):
                    a1 = fan.find(*side1)
                    a2 = fan.find(*side2)
                    if a1 is not None and a2 is not None:
                        crossing.pairs.append((a1, a2))
                first = fan.find(p1_before, p2_before)
                second = fan.find(p1_before, p2_after)
                if first is not None and second is not None:
                    crossing.adjacent = (first, second)
                if crossing.pairs:
                    crossings.append(crossing)
    return crossings


class _PairLookup:
    def __init__(self, angles: Sequence[Angle]):
        self._angles = angles

    def find(self, ray1: PointId, ray2: PointId) -> Optional[Angle]:
        for angle in self._angles:
            if angle.has_ray(ray1) and angle.has_ray(ray2):
                return angle
        return None


class Relations:
    """Geometry-only relationships of a model, computed once per solve.

    Values never influence what is stored here, so the cache stays valid
    while angles are being solved.
    """

    def __init__(self, model: GeometryModel, config: SolverConfig):
        self.config = config
        points = model.points_by_id()
        self.fans: Dict[PointId, RayFan] = {}
        for vertex_id, vertex_angles in model.angles_by_vertex().items():
            vertex = points.get(vertex_id)
            if vertex is None:
                continue
            self.fans[vertex_id] = RayFan(vertex, vertex_angles, points)

        self.composed: List[ComposedGroup] = []
        for fan in self.fans.values():
            if len(fan.angles) >= 3:
                self.composed.extend(fan.composed_groups(config.composed_tolerance))

        self.full_circles: Dict[PointId, List[Angle]] = {}
        self.circle_partitions: Dict[PointId, List[List[Angle]]] = {}
        for vertex_id, fan in self.fans.items():
            if len(fan.angles) < 3:
                continue
            cycle = fan.full_circle(config.full_circle_tolerance)
            if not cycle:
                continue
            self.full_circles[vertex_id] = cycle
            self.circle_partitions[vertex_id] = [
                p
                for p in fan.cyclic_partitions()
                if within(calculated_sum(p), 360.0, config.full_circle_tolerance)
            ]

        self.spanning: List[SpanningPath] = []
        for vertex_id, fan in self.fans.items():
            if len(fan.angles) < 2:
                continue
            for line in model.lines:
                sides = _line_sides(line, vertex_id)
                if sides is None:
                    continue
                for path in fan.spanning_paths(sides[0], sides[1]):
                    self.spanning.append(SpanningPath(vertex=vertex_id, line_id=line.id, angles=path))

        self.crossings: List[Crossing] = mirror_crossings(model)

        self.triangles: List[Tuple[Triangle, List[Angle]]] = []
        for triangle in model.triangles:
            found = triangle_angles(triangle, model.angles, model.lines)
            if len(found) == 3:
                self.triangles.append((triangle, found))
            else:
                logger.debug("Triangle %s does not have exactly 3 angles", ",".join(triangle))

        logger.debug(
            "Relations: %d composed group(s), %d full circle(s), %d spanning path(s), %d crossing(s), %d triangle(s)",
            len(self.composed),
            len(self.full_circles),
            len(self.spanning),
            len(self.crossings),
            len(self.triangles),
        )

    def supplementary_paths(self, tolerance: float) -> List[SpanningPath]:
        return [p for p in self.spanning if within(calculated_sum(p.angles), 180.0, tolerance)]


__all__ = [
    "ComposedGroup",
    "Crossing",
    "RayFan",
    "Relations",
    "SpanningPath",
    "calculated_sum",
    "contiguous_splits",
    "cyclic_splits",
    "mirror_crossings",
    "within",
]
