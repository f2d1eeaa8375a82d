import copy

import pytest

from angle_solver import get_solver_config, load_geometry
from angle_solver.partitions import Relations
from angle_solver.theorems import RuleContext

RIGHT_TRIANGLE = {
    "points": [
        {"id": "A", "x": 0, "y": 0},
        {"id": "B", "x": 100, "y": 0},
        {"id": "C", "x": 0, "y": 100},
    ],
    "edges": [{"p": ["A", "B"]}, {"p": ["B", "C"]}, {"p": ["C", "A"]}],
    "angles": [
        {"id": "A", "p": ["B", "C"], "v": 90},
        {"id": "B", "p": ["A", "C"], "v": 45},
        {"id": "C", "p": ["A", "B"], "t": 1},
    ],
    "lines": [],
}

STRAIGHT_LINE = {
    "points": [
        {"id": "X", "x": -100, "y": 0},
        {"id": "Y", "x": 0, "y": 0},
        {"id": "W", "x": 100, "y": 0},
        {"id": "Z", "x": 58, "y": 100},
    ],
    "angles": [
        {"id": "Y", "p": ["X", "Z"], "v": 120},
        {"id": "Y", "p": ["Z", "W"], "t": 1},
    ],
    "lines": [["X", "Y", "W"]],
}

CROSSING = {
    "points": [
        {"id": "O", "x": 0, "y": 0},
        {"id": "A", "x": -100, "y": 0},
        {"id": "B", "x": 100, "y": 0},
        {"id": "C", "x": -82, "y": 57},
        {"id": "D", "x": 82, "y": -57},
    ],
    "angles": [
        {"id": "O", "p": ["A", "C"], "v": 35},
        {"id": "O", "p": ["C", "B"]},
        {"id": "O", "p": ["B", "D"], "t": 1},
        {"id": "O", "p": ["A", "D"], "t": 1},
    ],
    "lines": [["A", "O", "B"], ["C", "O", "D"]],
}

COMPOSED = {
    "points": [
        {"id": "O", "x": 0, "y": 0},
        {"id": "P", "x": 100, "y": 0},
        {"id": "Q", "x": 100, "y": 100},
        {"id": "R", "x": 0, "y": 100},
    ],
    "angles": [
        {"id": "O", "p": ["P", "Q"], "v": 30},
        {"id": "O", "p": ["Q", "R"], "t": 1},
        {"id": "O", "p": ["P", "R"], "v": 90},
    ],
    "lines": [],
}

LABELLED_ISOSCELES = {
    "points": [
        {"id": "A", "x": 436, "y": 254},
        {"id": "B", "x": 282, "y": 444},
        {"id": "C", "x": 522, "y": 479},
    ],
    "edges": [{"p": ["A", "C"]}, {"p": ["C", "B"]}, {"p": ["B", "A"]}],
    "angles": [
        {"id": "C", "p": ["A", "B"], "l": "α", "t": 1},
        {"id": "B", "p": ["C", "A"], "l": "α"},
        {"id": "A", "p": ["C", "B"], "v": "92"},
    ],
    "lines": [],
}

CIRCLE_ISOSCELES = {
    "points": [
        {"id": "A", "x": 0, "y": 0},
        {"id": "B", "x": 100, "y": 0},
        {"id": "C", "x": 77, "y": 64},
    ],
    "edges": [{"p": ["A", "B"]}, {"p": ["B", "C"]}, {"p": ["C", "A"]}],
    "circles": [{"id": "A", "x": 0, "y": 0, "r": 100, "p": ["B", "C"]}],
    "angles": [
        {"id": "A", "p": ["B", "C"], "v": 40},
        {"id": "B", "p": ["A", "C"], "t": 1},
        {"id": "C", "p": ["A", "B"]},
    ],
    "lines": [],
}


def build(diagram):
    return load_geometry(copy.deepcopy(diagram))


def context_for(model):
    config = get_solver_config()
    return RuleContext(model, Relations(model, config), config)


def by_name(model, name):
    return next(a for a in model.angles if a.name == name)


@pytest.fixture
def right_triangle():
    return build(RIGHT_TRIANGLE)


@pytest.fixture
def straight_line():
    return build(STRAIGHT_LINE)


@pytest.fixture
def crossing():
    return build(CROSSING)


@pytest.fixture
def composed():
    return build(COMPOSED)


@pytest.fixture
def labelled_isosceles():
    return build(LABELLED_ISOSCELES)


@pytest.fixture
def circle_isosceles():
    return build(CIRCLE_ISOSCELES)
