import math

import pytest

from plater.geometry import Face, Point3, Volume
from plater.model import Model
from plater.part import Part
from plater.placed_part import PlacedPart
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


def test_defaults(part):
    placed = PlacedPart(part)
    assert (placed.x, placed.y, placed.rotation) == (0.0, 0.0, 0)
    assert placed.name == part.filename
    assert placed.surface == part.surface


def test_bitmap_follows_rotation(part):
    placed = PlacedPart(part)
    placed.rotation = 1
    assert placed.bitmap is part.bitmap(1)


def test_offset_moves_center(part):
    placed = PlacedPart(part)
    placed.set_offset(3000, 4000)
    assert (placed.x, placed.y) == (3000, 4000)
    assert placed.center_x == 3000 + part.precision * placed.bitmap.center_x
    assert placed.center_y == 4000 + part.precision * placed.bitmap.center_y


def test_gravity_center(part):
    placed = PlacedPart(part)
    bmp = placed.bitmap
    assert placed.g_x == pytest.approx(bmp.s_x / bmp.pixels * part.precision)
    assert placed.g_y == pytest.approx(bmp.s_y / bmp.pixels * part.precision)
    assert 0 < placed.g_x < bmp.width * part.precision


def test_g_dist_is_minimum(part):
    placed = PlacedPart(part)
    dist = placed.g_dist()
    assert dist > 0
    for bmp in part.bitmaps:
        assert dist <= (bmp.s_x / bmp.pixels) ** 2 + (bmp.s_y / bmp.pixels) ** 2 + 1e-6


def test_create_model_centred_on_part(part):
    placed = PlacedPart(part)
    placed.set_offset(20000, 30000)
    model = placed.create_model()
    lo, hi = model.min(), model.max()
    assert abs((lo.x + hi.x) / 2 - placed.center_x) <= 1
    assert abs((lo.y + hi.y) / 2 - placed.center_y) <= 1
    assert lo.z == 0