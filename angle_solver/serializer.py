"""Compact JSON diagram format: loading, validation, enrichment and saving.

The compact form uses one-letter keys::

    {
      "points":  [{"id": "A", "x": 0, "y": 0, "h": 1}],
      "edges":   [{"p": ["A", "B"]}],
      "circles": [{"id": "O", "x": 0, "y": 0, "r": 50, "p": ["A", "B"]}],
      "angles":  [{"id": "B", "p": ["A", "C"], "v": 60, "l": "α", "t": 1}],
      "lines":   [["A", "B", "C"]]
    }

``h`` hides an element, ``t`` marks a target angle and ``v: "?"`` is the
legacy way of marking a target.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .geometry import build_overlapping_angles_map, find_triangles, measure_angle
from .model import Angle, Circle, Edge, GeometryModel, Line, Point, PointId

logger = logging.getLogger(__name__)

_TARGET_MARKER = "?"


class GeometryDataError(ValueError):
    """Raised when loaded diagram data fails validation."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors) or "Invalid geometry data")
        self.errors = list(errors)


def _round(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return int(math.floor(value + 0.5))
    return value


def _parse_value(raw: Any) -> Tuple[Optional[float], bool]:
    """Return ``(value, legacy_target)`` for a compact ``v`` entry."""

    if raw is None or raw == "" or raw == 0:
        return None, False
    if raw == _TARGET_MARKER:
        return None, True
    try:
        return float(raw), False
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric angle value %r", raw)
        return None, False


def deserialize_geometry_data(json_data: Mapping[str, Any]) -> Dict[str, List[Any]]:
    """Expand the compact form into a normalised dictionary of plain records."""

    normalized: Dict[str, List[Any]] = {
        "points": [],
        "edges": [],
        "circles": [],
        "angles": [],
        "lines": [],
        "triangles": [],
    }

    for data in json_data.get("points") or []:
        normalized["points"].append(
            {
                "id": data.get("id") or data.get("name") or "",
                "x": _round(data.get("x")),
                "y": _round(data.get("y")),
                "hide": bool(data.get("h")),
            }
        )

    for data in json_data.get("edges") or []:
        normalized["edges"].append({"points": data.get("p"), "hide": bool(data.get("h"))})

    for data in json_data.get("circles") or []:
        normalized["circles"].append(
            {
                "id": data.get("id"),
                "center_point": data.get("id"),
                "center_x": _round(data.get("x")),
                "center_y": _round(data.get("y")),
                "radius": _round(data.get("r")),
                "points_on_line": list(data.get("p") or []),
                "hide": bool(data.get("h")),
            }
        )

    for data in json_data.get("angles") or []:
        value, legacy_target = _parse_value(data.get("v"))
        normalized["angles"].append(
            {
                "point_id": data.get("id"),
                "sidepoints": data.get("p"),
                "value": value,
                "label": data.get("l") or "",
                "hide": bool(data.get("h")),
                "target": bool(data.get("t")) or legacy_target,
            }
        )

    for line in json_data.get("lines") or []:
        normalized["lines"].append(list(line))

    for triangle in json_data.get("triangles") or []:
        normalized["triangles"].append(list(triangle) if isinstance(triangle, (list, tuple)) else [])

    return normalized


def validate_geometry_data(data: Optional[Mapping[str, Any]]) -> Tuple[bool, List[str]]:
    """Check the normalised records; returns ``(is_valid, errors)``."""

    errors: List[str] = []
    if data is None:
        return False, ["Data is null or undefined"]

    points = data.get("points")
    if points is not None:
        if not isinstance(points, list):
            errors.append("points must be an array")
        else:
            for index, point in enumerate(points):
                if not point.get("id"):
                    errors.append(f"Point at index {index} missing id")
                for axis in ("x", "y"):
                    coord = point.get(axis)
                    if not isinstance(coord, (int, float)) or isinstance(coord, bool):
                        errors.append(f"Point {point.get('id')} has invalid {axis} coordinate")

    edges = data.get("edges")
    if edges is not None:
        if not isinstance(edges, list):
            errors.append("edges must be an array")
        else:
            for index, edge in enumerate(edges):
                pts = edge.get("points")
                if not isinstance(pts, (list, tuple)) or len(pts) != 2:
                    errors.append(f"Edge at index {index} has invalid points array")

    circles = data.get("circles")
    if circles is not None:
        if not isinstance(circles, list):
            errors.append("circles must be an array")
        else:
            for index, circle in enumerate(circles):
                if not circle.get("center_point"):
                    errors.append(f"Circle at index {index} missing center point")
                radius = circle.get("radius")
                if not isinstance(radius, (int, float)) or isinstance(radius, bool):
                    errors.append(f"Circle at index {index} has invalid radius")

    angles = data.get("angles")
    if angles is not None:
        if not isinstance(angles, list):
            errors.append("angles must be an array")
        else:
            for index, angle in enumerate(angles):
                if not angle.get("point_id"):
                    errors.append(f"Angle at index {index} missing vertex point")
                sides = angle.get("sidepoints")
                if not isinstance(sides, (list, tuple)) or len(sides) != 2:
                    errors.append(f"Angle at index {index} has invalid sidepoints")
                elif len({angle.get("point_id"), *sides}) != 3:
                    errors.append(f"Angle at index {index} has repeated points")

    return not errors, errors


def enrich_geometry_data(data: Mapping[str, Any]) -> GeometryModel:
    """Build a :class:`GeometryModel` with adjacency, triangles and measured angles."""

    model = GeometryModel()
    points: Dict[PointId, Point] = {}
    for record in data.get("points", []):
        point = Point(id=record["id"], x=_round(record["x"]), y=_round(record["y"]), hide=bool(record.get("hide")))
        model.points.append(point)
        points[point.id] = point

    for index, line_points in enumerate(data.get("lines", [])):
        model.lines.append(Line(id=f"line{index}", points=list(line_points)))

    for record in data.get("edges", []):
        p1, p2 = record["points"]
        if p1 not in points or p2 not in points:
            logger.warning("Skipping edge %s-%s with an unknown endpoint", p1, p2)
            continue
        model.edges.append(Edge(points=(p1, p2), hide=bool(record.get("hide"))))
        model.adjacent_points.setdefault(p1, set()).add(p2)
        model.adjacent_points.setdefault(p2, set()).add(p1)

    for record in data.get("circles", []):
        center = record["center_point"]
        if center not in points:
            logger.warning("Skipping circle with unknown center %s", center)
            continue
        model.circles.append(
            Circle(
                id=record.get("id") or f"Circle_{center}",
                center_point=center,
                center_x=_round(record.get("center_x", points[center].x)),
                center_y=_round(record.get("center_y", points[center].y)),
                radius=_round(record["radius"]),
                points_on_line=[p for p in record.get("points_on_line", []) if p in points],
                hide=bool(record.get("hide")),
            )
        )

    model.triangles = find_triangles(model.adjacent_points, model.lines)

    seen = set()
    for index, record in enumerate(data.get("angles", [])):
        vertex_id = record["point_id"]
        side1, side2 = record["sidepoints"]
        vertex, point1, point2 = points.get(vertex_id), points.get(side1), points.get(side2)
        if vertex is None or point1 is None or point2 is None:
            logger.warning("Skipping angle at %s with an unknown point", vertex_id)
            continue
        key = (vertex_id, frozenset((side1, side2)))
        if key in seen:
            logger.debug("Skipping duplicate angle %s", key)
            continue
        seen.add(key)
        angle = Angle(
            id=f"angle{index}",
            point_id=vertex_id,
            sidepoints=(side1, side2),
            value=record.get("value"),
            label=record.get("label") or "",
            target=bool(record.get("target")),
            hide=bool(record.get("hide")),
        )
        measured = measure_angle(vertex, point1, point2)
        if measured is None:
            logger.warning("Angle %s is degenerate; leaving it without a calculated value", angle.name)
        else:
            angle.calculated_value = float(measured)
        model.angles.append(angle)

    visible = [a for a in model.angles if not a.hide]
    model.overlapping_angles = build_overlapping_angles_map(visible, model.lines)
    logger.info(
        "Loaded diagram: %d point(s), %d angle(s), %d line(s), %d triangle(s)",
        len(model.points),
        len(model.angles),
        len(model.lines),
        len(model.triangles),
    )
    return model


def load_geometry(source: Union[str, Path, Mapping[str, Any]]) -> GeometryModel:
    """Load a compact diagram from a path or an already parsed mapping.

    Raises :class:`GeometryDataError` when validation fails.
    """

    if isinstance(source, Mapping):
        raw = source
    else:
        with open(source, encoding="utf-8") as fin:
            raw = json.load(fin)
    normalized = deserialize_geometry_data(raw)
    is_valid, errors = validate_geometry_data(normalized)
    if not is_valid:
        raise GeometryDataError(errors)
    return enrich_geometry_data(normalized)


def serialize_geometry_data(model: GeometryModel) -> Dict[str, Any]:
    """Inverse of :func:`load_geometry`; optional keys are only written when set."""

    points = []
    for point in model.points:
        entry: Dict[str, Any] = {"id": point.id, "x": _round(point.x), "y": _round(point.y)}
        if point.hide:
            entry["h"] = 1
        points.append(entry)

    edges = []
    for edge in model.edges:
        entry = {"p": list(edge.points)}
        if edge.hide:
            entry["h"] = 1
        edges.append(entry)

    circles = []
    for circle in model.circles:
        entry = {
            "id": circle.center_point,
            "x": _round(circle.center_x),
            "y": _round(circle.center_y),
            "r": _round(circle.radius),
        }
        if circle.points_on_line:
            entry["p"] = list(circle.points_on_line)
        if circle.hide:
            entry["h"] = 1
        circles.append(entry)

    angles = []
    for angle in model.angles:
        entry = {"id": angle.point_id, "p": list(angle.sidepoints)}
        if angle.value is not None:
            entry["v"] = angle.value
        if angle.label:
            entry["l"] = angle.label
        if angle.hide:
            entry["h"] = 1
        if angle.target:
            entry["t"] = 1
        angles.append(entry)

    return {
        "points": points,
        "edges": edges,
        "circles": circles,
        "angles": angles,
        "lines": [list(line.points) for line in model.lines],
    }


__all__ = [
    "GeometryDataError",
    "deserialize_geometry_data",
    "enrich_geometry_data",
    "load_geometry",
    "serialize_geometry_data",
    "validate_geometry_data",
]
