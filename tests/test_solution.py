import math

import pytest

from plater.geometry import Face, Point3, Volume
from plater.model import Model
from plater.part import Part
from plater.placed_part import PlacedPart
from plater.plate import PlateMode
from plater.solution import Solution
from plater.stl import save_binary


@pytest.fixture
def part(tmp_path):
    size = 10000
    faces = [
        Face(Point3(0, 0, 0), Point3(size, 0, 0), Point3(size, size, 0)),
        Face(Point3(0, 0, 0), Point3(size, size, 0), Point3(0, size, 0)),
    ]
    path = tmp_path / "square.stl"
    save_binary(str(path), Model([Volume(faces)]))
    loaded = Part()
    loaded.load(str(path), 500, math.pi / 2, 1500, "bottom", 150000, 150000)
    return loaded


def _solution(mode=PlateMode.RECTANGLE):
    return Solution(30000, 20000, 25000, mode, 500)


def test_empty_solution():
    solution = _solution()
    assert solution.count_plates() == 0
    assert solution.plate(0) is None
    with pytest.raises(IndexError):
        solution.last_plate()


def test_add_plate():
    solution = _solution()
    plate = solution.add_plate()
    assert solution.count_plates() == 1
    assert solution.plate(0) is plate
    assert solution.last_plate() is plate
    assert solution.plate(-1) is None
    assert (plate.width, plate.height) == (30000, 20000)


def test_circle_plates():
    plate = _solution(PlateMode.CIRCLE).add_plate()
    assert plate.width == plate.height == 25000


def test_score_empty_plate():
    solution = _solution()
    solution.add_plate()
    assert solution.score() == 1.0


def test_score_with_part(part):
    solution = _solution()
    solution.add_plate().place(PlacedPart(part))
    assert solution.score() == 1.5


def test_score_grows_with_plates():
    solution = _solution()
    solution.add_plate()
    solution.add_plate()
    assert solution.score() == solution.count_plates()
    last = solution.add_plate()
    assert solution.last_plate() is last
    assert solution.score() == solution.count_plates()