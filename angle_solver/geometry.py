"""Geometric relation primitives computed from coordinates and line membership."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .model import Angle, Circle, Line, Point, PointId, Triangle

_TWO_PI = 2.0 * math.pi
_MIN_SPAN_RAD = 0.1
_MAX_SPAN_DEG = 179


def polar_angle(vertex: Point, point: Point) -> float:
    """Direction of the ray ``vertex -> point`` in radians, in ``(-pi, pi]``."""

    return math.atan2(point.y - vertex.y, point.x - vertex.x)


def calculate_angle_degrees(vertex: Point, point1: Point, point2: Point) -> float:
    """Angle between the rays towards ``point1`` and ``point2``, folded to ``[0, 180]``."""

    diff = polar_angle(vertex, point2) - polar_angle(vertex, point1)
    if diff < 0:
        diff += _TWO_PI
    if diff > _TWO_PI:
        diff -= _TWO_PI
    degrees = math.degrees(diff)
    if degrees > 180:
        degrees = 360 - degrees
    return degrees


def measure_angle(vertex: Point, point1: Point, point2: Point) -> Optional[int]:
    """Whole-degree reading used when enriching loaded data.

    Returns ``None`` for degenerate spans (nearly zero or nearly straight)."""

    diff = (polar_angle(vertex, point2) - polar_angle(vertex, point1)) % _TWO_PI
    if diff > math.pi:
        diff = _TWO_PI - diff
    degrees = int(round(math.degrees(diff)))
    if not (0 < diff < math.pi and diff > _MIN_SPAN_RAD and degrees < _MAX_SPAN_DEG):
        return None
    return degrees


def are_points_collinear(
    point_id1: PointId, point_id2: PointId, point_id3: PointId, lines: Iterable[Line]
) -> bool:
    return any(
        point_id1 in line and point_id2 in line and point_id3 in line for line in lines
    )


def is_same_ray(p1: PointId, p2: PointId, vertex: PointId, lines: Iterable[Line]) -> bool:
    """True if ``p1`` and ``p2`` lie on the same ray from ``vertex``."""

    if p1 == p2:
        return True
    for line in lines:
        if vertex not in line or p1 not in line or p2 not in line:
            continue
        vi = line.index(vertex)
        i1 = line.index(p1)
        i2 = line.index(p2)
        if (i1 < vi and i2 < vi) or (i1 > vi and i2 > vi):
            return True
    return False


def are_same_angle(a1: Angle, a2: Angle, lines: Sequence[Line]) -> bool:
    if a1.point_id != a2.point_id:
        return False
    if a1.id == a2.id:
        return True
    v = a1.point_id
    p1, p2 = a1.sidepoints
    q1, q2 = a2.sidepoints
    same_order = is_same_ray(p1, q1, v, lines) and is_same_ray(p2, q2, v, lines)
    swapped = is_same_ray(p1, q2, v, lines) and is_same_ray(p2, q1, v, lines)
    return same_order or swapped


def find_same_angle_groups(angles: Sequence[Angle], lines: Sequence[Line]) -> List[List[Angle]]:
    """Groups of geometrically identical angles, one group per leading angle."""

    groups: List[List[Angle]] = []
    for i, current in enumerate(angles):
        same: List[Angle] = []
        for other in angles[i + 1:]:
            if are_same_angle(current, other, lines):
                if not same:
                    same.append(current)
                same.append(other)
        if same:
            groups.append(same)
    return groups


def _side_relation(vertex: PointId, a: PointId, b: PointId, lines: Iterable[Line]) -> Optional[bool]:
    """``True`` if ``a`` and ``b`` are on the same side of ``vertex`` on a shared line,
    ``False`` if on opposite sides, ``None`` if they share no line with it."""

    for line in lines:
        if vertex in line and a in line and b in line:
            vi = line.index(vertex)
            ia = line.index(a)
            ib = line.index(b)
            return (ia < vi and ib < vi) or (ia > vi and ib > vi)
    return None


def _split_shared_ray(a1: Angle, a2: Angle) -> Optional[tuple]:
    if a1.point_id != a2.point_id:
        return None
    shared = [p for p in a1.sidepoints if p in a2.sidepoints]
    if len(shared) != 1:
        return None
    return a1.other_ray(shared[0]), a2.other_ray(shared[0])


def are_angles_overlapping(a1: Angle, a2: Angle, lines: Sequence[Line]) -> bool:
    split = _split_shared_ray(a1, a2)
    if split is None:
        return False
    return _side_relation(a1.point_id, split[0], split[1], lines) is True


def are_angles_linear_pair(a1: Angle, a2: Angle, lines: Sequence[Line]) -> bool:
    split = _split_shared_ray(a1, a2)
    if split is None:
        return False
    return _side_relation(a1.point_id, split[0], split[1], lines) is False


def find_overlapping_angles(
    vertex: PointId,
    neighbor1: PointId,
    neighbor2: PointId,
    angles: Iterable[Angle],
    lines: Sequence[Line],
) -> List[Angle]:
    """Angles at ``vertex`` sharing exactly one ray with ``neighbor1/neighbor2`` whose
    other rays point the same way along a line."""

    candidate = Angle(id="__candidate__", point_id=vertex, sidepoints=(neighbor1, neighbor2))
    return [
        existing
        for existing in angles
        if existing.point_id == vertex and are_angles_overlapping(existing, candidate, lines)
    ]


def build_overlapping_angles_map(angles: Sequence[Angle], lines: Sequence[Line]) -> Dict[str, Set[str]]:
    overlaps: Dict[str, Set[str]] = {}
    for angle in angles:
        others = [a for a in angles if a.id != angle.id]
        found = find_overlapping_angles(
            angle.point_id, angle.sidepoints[0], angle.sidepoints[1], others, lines
        )
        if found:
            overlaps[angle.id] = {a.id for a in found}
    return overlaps


def has_direct_edge(p1: PointId, p2: PointId, adjacent: Mapping[PointId, Set[PointId]]) -> bool:
    return p2 in adjacent.get(p1, set()) or p1 in adjacent.get(p2, set())


def are_connected_via_line(
    p1: PointId, p2: PointId, lines: Sequence[Line], adjacent: Mapping[PointId, Set[PointId]]
) -> bool:
    for line in lines:
        i1 = line.index(p1)
        i2 = line.index(p2)
        if i1 < 0 or i2 < 0:
            continue
        start, end = min(i1, i2), max(i1, i2)
        if all(
            has_direct_edge(line.points[i], line.points[i + 1], adjacent)
            for i in range(start, end)
        ):
            return True
    return False


def _connected(
    p1: PointId, p2: PointId, adjacent: Mapping[PointId, Set[PointId]], lines: Sequence[Line]
) -> bool:
    return has_direct_edge(p1, p2, adjacent) or are_connected_via_line(p1, p2, lines, adjacent)


def find_triangles(adjacent: Mapping[PointId, Set[PointId]], lines: Sequence[Line]) -> List[Triangle]:
    """Explicit triangles plus apex triangles over a line, deduplicated by point set."""

    triangles: List[Triangle] = []
    seen: Set[tuple] = set()

    def _add(tri: Triangle) -> None:
        key = tuple(sorted(tri))
        if key not in seen:
            seen.add(key)
            triangles.append(tri)

    ids = list(adjacent.keys())
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            for k in range(j + 1, len(ids)):
                p1, p2, p3 = ids[i], ids[j], ids[k]
                if not (
                    _connected(p1, p2, adjacent, lines)
                    and _connected(p1, p3, adjacent, lines)
                    and _connected(p2, p3, adjacent, lines)
                ):
                    continue
                if are_points_collinear(p1, p2, p3, lines):
                    continue
                _add((p1, p2, p3))

    for line in lines:
        if len(line.points) < 2:
            continue
        for apex in ids:
            if apex in line:
                continue
            apex_adjacent = adjacent.get(apex, set())
            for i in range(len(line.points)):
                for j in range(i + 1, len(line.points)):
                    lp1, lp2 = line.points[i], line.points[j]
                    to_p1 = lp1 in apex_adjacent or are_connected_via_line(apex, lp1, lines, adjacent)
                    to_p2 = lp2 in apex_adjacent or are_connected_via_line(apex, lp2, lines, adjacent)
                    if to_p1 and to_p2:
                        _add((apex, lp1, lp2))
    return triangles


def find_base_angle(
    angles: Iterable[Angle], vertex: PointId, side1: PointId, side2: PointId, lines: Sequence[Line]
) -> Optional[Angle]:
    """Angle at ``vertex`` spanning ``side1``/``side2``, accepting collinear stand-ins."""

    candidates = [a for a in angles if a.point_id == vertex]
    for angle in candidates:
        if side1 in angle.sidepoints and side2 in angle.sidepoints:
            return angle
    for angle in candidates:
        sp1, sp2 = angle.sidepoints
        direct = is_same_ray(sp1, side1, vertex, lines) and is_same_ray(sp2, side2, vertex, lines)
        swapped = is_same_ray(sp1, side2, vertex, lines) and is_same_ray(sp2, side1, vertex, lines)
        if direct or swapped:
            return angle
    return None


def triangle_angles(triangle: Sequence[PointId], angles: Sequence[Angle], lines: Sequence[Line]) -> List[Angle]:
    found: List[Angle] = []
    for vertex in triangle:
        others = [p for p in triangle if p != vertex]
        angle = find_base_angle(angles, vertex, others[0], others[1], lines)
        if angle is not None:
            found.append(angle)
    return found


def is_equilateral_by_label(labels: Sequence[str]) -> bool:
    if len(labels) != 3:
        return False
    return bool(labels[0]) and all(label == labels[0] for label in labels)


def is_equilateral_by_circles(triangle: Sequence[PointId], circles: Sequence[Circle]) -> bool:
    """Two circles centred on triangle vertices that both pass through the third vertex."""

    if len(circles) < 2:
        return False
    for c1 in circles:
        if c1.center_point not in triangle:
            continue
        c2 = next(
            (c for c in circles if c.center_point != c1.center_point and c.center_point in triangle),
            None,
        )
        if c2 is None:
            continue
        rest = [p for p in triangle if p not in (c1.center_point, c2.center_point)]
        if not rest:
            continue
        apex = rest[-1]
        if apex in c1.points_on_line and apex in c2.points_on_line:
            return True
    return False


def isosceles_vertex_angle(
    angles_in_triangle: Sequence[Angle], circle: Circle, triangle: Sequence[PointId]
) -> Optional[Angle]:
    """Apex angle of a triangle whose apex is ``circle``'s centre and whose other
    two vertices lie on the circle."""

    if circle.center_point not in triangle:
        return None
    base_points = [p for p in triangle if p != circle.center_point]
    if not all(p in circle.points_on_line for p in base_points):
        return None
    for angle in angles_in_triangle:
        if angle.point_id == circle.center_point:
            return angle
    return None


__all__ = [
    "are_angles_linear_pair",
    "are_angles_overlapping",
    "are_connected_via_line",
    "are_points_collinear",
    "are_same_angle",
    "build_overlapping_angles_map",
    "calculate_angle_degrees",
    "find_base_angle",
    "find_overlapping_angles",
    "find_same_angle_groups",
    "find_triangles",
    "has_direct_edge",
    "is_equilateral_by_circles",
    "is_equilateral_by_label",
    "is_same_ray",
    "isosceles_vertex_angle",
    "measure_angle",
    "polar_angle",
    "triangle_angles",
]
