import math
from collections import Counter
from types import SimpleNamespace

import pytest

from plater.geometry import Face, Point3, Volume
from plater.model import Model
from plater.part import Part
from plater.placer import GravityMode, Placer, SortMode
from plater.plate import Plate, PlateMode
from plater.stl import save_binary


def _square_part(directory, size, name, plate):
    faces = [
        Face(Point3(0, 0, 0), Point3(size, 0, 0), Point3(size, size, 0)),
        Face(Point3(0, 0, 0), Point3(size, size, 0), Point3(0, size, 0)),
    ]
    path = directory / name
    save_binary(str(path), Model([Volume(faces)]))
    part = Part()
    part.load(str(path), 500, math.pi / 2, 1500, "bottom", plate, plate)
    return part


def _request(parts, quantities, plate=40000):
    return SimpleNamespace(
        parts=parts,
        quantities=quantities,
        plate_width=plate,
        plate_height=plate,
        plate_diameter=0,
        plate_mode=PlateMode.RECTANGLE,
        precision=500,
        delta=1000,
        delta_r=math.pi / 2,
    )


@pytest.fixture(scope="module")
def parts_dir(tmp_path_factory):
    return tmp_path_factory.mktemp("parts")


@pytest.fixture(scope="module")
def big(parts_dir):
    return _square_part(parts_dir, 10000, "big.stl", 40000)


@pytest.fixture(scope="module")
def small(parts_dir):
    return _square_part(parts_dir, 5000, "small.stl", 40000)


def _all_parts(solution):
    return [p for plate in solution.plates for p in plate.parts]


def test_queue_holds_every_copy(big, small):
    placer = Placer(_request({big.filename: big, small.filename: small},
                             {big.filename: 2, small.filename: 3}))
    names = Counter(p.name for p in placer.parts)
    assert names == {big.filename: 2, small.filename: 3}


def test_next_part_empty(big):
    placer = Placer(_request({big.filename: big}, {big.filename: 1}))
    placer.next_part()
    with pytest.raises(IndexError):
        placer.next_part()


def test_sort_modes(big, small):
    request = _request({big.filename: big, small.filename: small},
                       {big.filename: 1, small.filename: 1})
    placer = Placer(request)
    placer.sort_parts(SortMode.SURFACE_DEC)
    assert placer.next_part().surface == max(big.surface, small.surface)

    placer = Placer(request)
    placer.sort_parts(SortMode.SURFACE_INC)
    assert placer.next_part().surface == min(big.surface, small.surface)


def test_shuffle_keeps_parts(big, small):
    placer = Placer(_request({big.filename: big, small.filename: small},
                             {big.filename: 3, small.filename: 4}))
    before = Counter(p.name for p in placer.parts)
    placer.sort_parts(SortMode.SHUFFLE + 2)
    assert Counter(p.name for p in placer.parts) == before


def test_gravity_coefficients(big):
    placer = Placer(_request({big.filename: big}, {big.filename: 1}))
    assert (placer.x_coef, placer.y_coef) == (1, 10)
    placer.set_gravity_mode(GravityMode.XY)
    assert (placer.x_coef, placer.y_coef) == (10, 1)
    placer.set_gravity_mode(GravityMode.EQ)
    assert placer.x_coef == placer.y_coef == 1


def test_places_everything_on_one_plate(big):
    placer = Placer(_request({big.filename: big}, {big.filename: 3}))
    solution = placer.place()
    assert placer.solution is solution
    assert placer.parts == []
    assert solution.count_plates() == 1
    assert len(_all_parts(solution)) == 3


def test_small_plate_needs_more_plates(parts_dir):
    part = _square_part(parts_dir, 10000, "tight.stl", 20000)
    solution = Placer(_request({part.filename: part}, {part.filename: 3}, plate=20000)).place()
    assert solution.count_plates() == 3
    assert all(plate.count_parts() == 1 for plate in solution.plates)


def test_placed_parts_do_not_overlap(big, small):
    request = _request({big.filename: big, small.filename: small},
                       {big.filename: 3, small.filename: 4})
    solution = Placer(request).place()
    assert len(_all_parts(solution)) == 7
    for plate in solution.plates:
        replay = Plate(plate.width, plate.height, 0, PlateMode.RECTANGLE, 500)
        for placed in plate.parts:
            assert replay.can_place(placed)
            replay.place(placed)


def test_gravity_yx_fills_along_x(big):
    solution = Placer(_request({big.filename: big}, {big.filename: 2})).place()
    first, second = solution.plate(0).parts
    assert (first.x, first.y) == (0.0, 0.0)
    assert second.y == 0.0
    assert second.x > 0.0


def test_gravity_xy_fills_along_y(big):
    placer = Placer(_request({big.filename: big}, {big.filename: 2}))
    placer.set_gravity_mode(GravityMode.XY)
    first, second = placer.place().plate(0).parts
    assert (first.x, first.y) == (0.0, 0.0)
    assert second.x == 0.0
    assert second.y > 0.0


def test_threaded_placement(big):
    placer = Placer(_request({big.filename: big}, {big.filename: 2}))
    placer.rotate_direction = 1
    placer.rotate_offset = 1
    placer.place_threaded()
    placer.join()
    assert placer.solution is not None
    assert len(_all_parts(placer.solution)) == 2