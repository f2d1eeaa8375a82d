from angle_solver import get_solver_config
from angle_solver.model import Angle
from angle_solver.partitions import (
    Relations,
    contiguous_splits,
    cyclic_splits,
    mirror_crossings,
    within,
)

from conftest import by_name


def _names(angles):
    return [a.name for a in angles]


def _ids(pairs):
    return [([a.id for a in subset], [a.id for a in rest]) for subset, rest in pairs]


def test_contiguous_splits_yield_every_proper_slice():
    seq = [Angle(str(i), "O", ("A", "B")) for i in range(3)]
    assert _ids(contiguous_splits(seq)) == [
        (["0"], ["1", "2"]),
        (["0", "1"], ["2"]),
        (["1"], ["0", "2"]),
        (["1", "2"], ["0"]),
        (["2"], ["0", "1"]),
    ]
    assert list(contiguous_splits(seq[:1])) == []


def test_cyclic_splits_wrap_around():
    seq = [Angle(str(i), "O", ("A", "B")) for i in range(3)]
    assert (["2", "0"], ["1"]) in _ids(cyclic_splits(seq))
    assert len(list(cyclic_splits(seq))) == 6


def test_within_is_inclusive():
    assert within(190.0, 180.0, 10.0)
    assert not within(190.5, 180.0, 10.0)


def test_composed_group_found_at_shared_vertex(composed):
    relations = Relations(composed, get_solver_config())
    assert len(relations.composed) == 1
    group = relations.composed[0]
    assert group.parent.name == "∠POR"
    assert _names(group.children) == ["∠POQ", "∠QOR"]
    assert relations.full_circles == {}


def test_crossing_fan_gives_full_circle(crossing):
    relations = Relations(crossing, get_solver_config())
    fan = relations.fans["O"]
    assert fan.rays == ["D", "B", "C", "A"]
    cycle = relations.full_circles["O"]
    assert _names(cycle) == ["∠BOD", "∠COB", "∠AOC", "∠AOD"]
    assert relations.circle_partitions["O"][0] == cycle
    assert relations.composed == []


def test_crossing_spanning_paths_cover_both_lines(crossing):
    relations = Relations(crossing, get_solver_config())
    paths = {tuple(sorted(_names(p.angles))) for p in relations.supplementary_paths(10.0)}
    assert paths == {
        ("∠AOC", "∠COB"),
        ("∠AOD", "∠BOD"),
        ("∠AOC", "∠AOD"),
        ("∠BOD", "∠COB"),
    }


def test_mirror_crossings_pair_vertical_angles(crossing):
    crossings = mirror_crossings(crossing)
    assert len(crossings) == 1
    found = crossings[0]
    assert found.vertex == "O"
    assert [tuple(_names(pair)) for pair in found.pairs] == [("∠AOC", "∠BOD"), ("∠AOD", "∠COB")]
    assert tuple(_names(found.adjacent)) == ("∠AOC", "∠AOD")


def test_straight_line_spanning_path(straight_line):
    relations = Relations(straight_line, get_solver_config())
    assert [_names(p.angles) for p in relations.spanning] == [["∠XYZ", "∠ZYW"]]
    assert relations.crossings == []


def test_relations_keep_only_complete_triangles(right_triangle):
    relations = Relations(right_triangle, get_solver_config())
    assert len(relations.triangles) == 1
    triangle, angles = relations.triangles[0]
    assert set(triangle) == {"A", "B", "C"}
    assert {a.name for a in angles} == {"∠BAC", "∠ABC", "∠ACB"}
    assert by_name(right_triangle, "∠ACB") in angles
