"""Core data structures for the angle solver."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

PointId = str
Triangle = Tuple[PointId, PointId, PointId]


def angle_name(vertex: PointId, side1: PointId, side2: PointId) -> str:
    """Return the display/token name ``∠<side1><vertex><side2>``."""

    return f"∠{side1}{vertex}{side2}"


def angle_value(value: Optional[float]) -> Optional[float]:
    """Normalise a stored angle value: missing, zero or NaN means unknown."""

    if value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(parsed) or parsed == 0:
        return None
    return parsed


@dataclass
class Point:
    id: PointId
    x: float
    y: float
    hide: bool = False


@dataclass
class Edge:
    points: Tuple[PointId, PointId]
    hide: bool = False


@dataclass
class Line:
    """Ordered collinear points; the order encodes which side of a vertex a ray lies on."""

    id: str
    points: List[PointId]

    def index(self, point_id: PointId) -> int:
        try:
            return self.points.index(point_id)
        except ValueError:
            return -1

    def __contains__(self, point_id: object) -> bool:
        return point_id in self.points


@dataclass
class Circle:
    id: str
    center_point: PointId
    center_x: float
    center_y: float
    radius: float
    points_on_line: List[PointId] = field(default_factory=list)
    hide: bool = False


@dataclass
class Angle:
    """Named angle at ``point_id`` between the rays towards ``sidepoints``.

    ``calculated_value`` is derived from coordinates only; ``value`` is the
    single field written while solving.
    """

    id: str
    point_id: PointId
    sidepoints: Tuple[PointId, PointId]
    value: Optional[float] = None
    calculated_value: Optional[float] = None
    label: str = ""
    target: bool = False
    hide: bool = False

    @property
    def name(self) -> str:
        return angle_name(self.point_id, self.sidepoints[0], self.sidepoints[1])

    @property
    def known_value(self) -> Optional[float]:
        return angle_value(self.value)

    def has_ray(self, point_id: PointId) -> bool:
        return point_id in self.sidepoints

    def other_ray(self, point_id: PointId) -> PointId:
        return self.sidepoints[1] if self.sidepoints[0] == point_id else self.sidepoints[0]


@dataclass
class GeometryModel:
    """Enriched runtime diagram owned by one solve call."""

    points: List[Point] = field(default_factory=list)
    angles: List[Angle] = field(default_factory=list)
    lines: List[Line] = field(default_factory=list)
    circles: List[Circle] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    triangles: List[Triangle] = field(default_factory=list)
    adjacent_points: Dict[PointId, Set[PointId]] = field(default_factory=dict)
    overlapping_angles: Dict[str, Set[str]] = field(default_factory=dict)

    def point(self, point_id: PointId) -> Optional[Point]:
        for pt in self.points:
            if pt.id == point_id:
                return pt
        return None

    def points_by_id(self) -> Dict[PointId, Point]:
        return {pt.id: pt for pt in self.points}

    def angle(self, angle_id: str) -> Optional[Angle]:
        for ang in self.angles:
            if ang.id == angle_id:
                return ang
        return None

    def angles_by_vertex(self) -> Dict[PointId, List[Angle]]:
        grouped: Dict[PointId, List[Angle]] = {}
        for ang in self.angles:
            grouped.setdefault(ang.point_id, []).append(ang)
        return grouped

    def target_angles(self) -> List[Angle]:
        return [ang for ang in self.angles if ang.target]

    # The validator and the rules read values and labels through these two
    # accessors so a rule context can overlay uncommitted proposals.
    def value_of(self, angle: Angle) -> Optional[float]:
        return angle.known_value

    def label_of(self, angle: Angle) -> str:
        return angle.label or ""


__all__ = [
    "Angle",
    "Circle",
    "Edge",
    "GeometryModel",
    "Line",
    "Point",
    "PointId",
    "Triangle",
    "angle_name",
    "angle_value",
]
