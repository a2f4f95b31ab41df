import io
import math
import sys

import pytest

from plater.cli import build_request, main
from plater.geometry import Face, Point3, Volume
from plater.model import Model
from plater.plate import PlateMode
from plater.request import OutputMode, SortStrategy
from plater.stl import save_binary
from plater.util import verbose_level


def _square_model(size=10000.0):
    a = Point3(0, 0, 0)
    b = Point3(size, 0, 0)
    c = Point3(size, size, 0)
    d = Point3(0, size, 0)
    return Model([Volume([Face(a, b, c), Face(a, c, d)])])


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    save_binary(str(tmp_path / "square.stl"), _square_model())
    (tmp_path / "plater.conf").write_text("square.stl 1\n")
    return tmp_path


def test_plate_dimensions_and_spacing():
    request, filename = build_request(["-W", "100", "-H", "80", "-s", "2", "conf"])
    assert filename == "conf"
    assert request.plate_width == pytest.approx(100000)
    assert request.plate_height == pytest.approx(80000)
    assert request.spacing == pytest.approx(2000)


def test_circular_plate():
    request, _ = build_request(["-D", "120", "conf"])
    assert request.plate_mode == PlateMode.CIRCLE
    assert request.plate_diameter == pytest.approx(120000)


def test_rotation_in_degrees():
    request, _ = build_request(["-r", "45", "conf"])
    assert request.delta_r == pytest.approx(math.pi / 4)


def test_flags_and_integers():
    request, _ = build_request(
        ["-p", "-S", "-R", "5", "-t", "3", "-c", "-o", "out_%d", "-j", "0.25", "-d", "2", "c"]
    )
    assert request.mode == OutputMode.PPM
    assert request.sort_mode == SortStrategy.MULTIPLE
    assert request.random_iterations == 5
    assert request.nb_threads == 3
    assert request.plates_info is True
    assert request.pattern == "out_%d"
    assert request.precision == pytest.approx(250)
    assert request.delta == pytest.approx(2000)


def test_options_after_filename_are_parsed():
    request, filename = build_request(["conf", "-p"])
    assert filename == "conf"
    assert request.mode == OutputMode.PPM


def test_non_numeric_value_reads_as_zero():
    request, _ = build_request(["-s", "abc", "-W", "2.5mm", "conf"])
    assert request.spacing == 0
    assert request.plate_width == pytest.approx(2500)


def test_verbose_flag_raises_level():
    before = verbose_level()
    build_request(["-v", "conf"])
    assert verbose_level() == before + 1


def test_stdin_marker_kept_as_filename():
    _, filename = build_request(["-"])
    assert filename == "-"


def test_main_without_file_shows_usage(capsys):
    assert main([]) == 1
    assert "Usage: plater" in capsys.readouterr().err


def test_main_help(capsys):
    assert main(["-h", "conf"]) == 1
    assert "Usage: plater" in capsys.readouterr().err


def test_main_unknown_option(capsys):
    assert main(["-x", "conf"]) == 1
    assert "Usage: plater" in capsys.readouterr().err


def test_main_places_parts_from_file(workdir):
    assert main(["-p", "-W", "30", "-H", "30", str(workdir / "plater.conf")]) == 0
    assert (workdir / "plate_001.ppm").read_text().startswith("P2\n")


def test_main_reads_stdin(workdir, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO(f"{workdir / 'square.stl'} 1\n"))
    assert main(["-W", "30", "-H", "30", "-o", str(workdir / "p_%d"), "-"]) == 0
    assert (workdir / "p_1.stl").stat().st_size > 84


def test_main_missing_configuration(workdir, capsys):
    assert main([str(workdir / "missing.conf")]) == 1
    assert "Can't open configuration file" in capsys.readouterr().err


def test_main_part_too_big(workdir, capsys):
    assert main(["-W", "5", "-H", "5", str(workdir / "plater.conf")]) == 1
    assert "too big" in capsys.readouterr().err