"""Placement requests: reading part lists, running placers and exporting plates."""

from __future__ import annotations

import io
import math
import sys
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Iterable

from plater.part import Part
from plater.placer import GravityMode, Placer, SortMode
from plater.plate import Plate, PlateMode
from plater.solution import Solution
from plater.stl import StlError, save_binary
from plater.util import (
    chdir_file,
    get_basename,
    is_numeric,
    log_error,
    log_info,
    ms_sleep,
    split,
    trim,
)

_POLL_MS = 50
_PLATES_INFO_FILE = "plates.csv"


class OutputMode(IntEnum):
    STL = 0
    PPM = 1


class SortStrategy(IntEnum):
    SINGLE = 0
    MULTIPLE = 1


class RequestError(Exception):
    """Raised when a request cannot be read, processed or exported."""


def get_chunks(line: str) -> list[str]:
    """Split a part line into [filename, quantity, orientation...].

    The filename may contain spaces: it is everything before the last
    numeric field (never counting the first field).
    """
    fields = split(line, " ")
    if not fields:
        return fields

    quantity_index = len(fields) - 1
    while quantity_index > 0 and not is_numeric(fields[quantity_index]):
        quantity_index -= 1

    filename = ""
    for piece in fields[:quantity_index]:
        filename = f"{filename} {piece}" if filename else piece
    return [filename, *fields[quantity_index:]]


def _quantity(text: str) -> int:
    return int(text) if text and is_numeric(text) else 0


def _plate_filename(pattern: str, number: int) -> str:
    try:
        return pattern % number
    except TypeError:
        pass
    except ValueError as exc:
        raise RequestError(f"Invalid output pattern {pattern!r}") from exc
    try:
        return pattern % ()
    except (TypeError, ValueError) as exc:
        raise RequestError(f"Invalid output pattern {pattern!r}") from exc


@dataclass(eq=False)
class Request:
    """A set of parts to place and the settings used to place and export them."""

    plate_mode: PlateMode = PlateMode.RECTANGLE
    plate_width: float = 150000.0
    plate_height: float = 150000.0
    plate_diameter: float = 0.0
    random_iterations: int = 3
    mode: OutputMode = OutputMode.STL
    sort_mode: SortStrategy = SortStrategy.SINGLE
    precision: float = 500.0
    delta: float = 1000.0
    delta_r: float = math.pi / 2
    spacing: float = 1500.0
    pattern: str = "plate_%03d"
    plates_info: bool = False
    nb_threads: int = 1
    cancel: bool = False
    quantities: dict[str, int] = field(default_factory=dict)
    parts: dict[str, Part] = field(default_factory=dict)
    plates: int = 0
    generated_files: list[str] = field(default_factory=list)
    placers_count: int = 0
    placer_current: int = 0
    solution: Solution | None = None

    def set_plate_size(self, w: float, h: float) -> None:
        """Set the plate dimensions, given in millimetres."""
        self.plate_width = w * 1000
        self.plate_height = h * 1000

    def add_part(self, filename: str, quantity: int, orientation: str = "bottom") -> None:
        """Load a part and record how many copies to place."""
        if self.cancel or not filename or quantity == 0:
            return
        log_info(f"- Loading {filename} (quantity {quantity}, orientation {orientation})...\n")
        part = Part()
        try:
            loaded = part.load(
                filename,
                self.precision,
                self.delta_r,
                self.spacing,
                orientation,
                self.plate_width,
                self.plate_height,
            )
        except StlError as exc:
            raise RequestError(str(exc)) from exc
        self.parts[filename] = part
        self.quantities[filename] = quantity
        if loaded == 0:
            raise RequestError(
                f"Part {filename} is too big for the plate "
                " (bed too small? try more angles?)"
            )

    def read_parts(self, stream: Iterable[str]) -> None:
        """Read part lines ("file quantity [orientation]") from *stream*."""
        self.parts.clear()
        self.quantities.clear()
        for raw in stream:
            line = raw.rstrip("\n")
            if line.startswith("#"):
                continue
            chunks = get_chunks(trim(line))
            if not chunks:
                continue
            filename = chunks[0]
            quantity = _quantity(chunks[1]) if len(chunks) >= 2 else 1
            orientation = chunks[2] if len(chunks) >= 3 else "bottom"
            self.add_part(filename, quantity, orientation)

    def read_parts_from_string(self, text: str) -> None:
        """Read part lines from a string."""
        self.read_parts(io.StringIO(text))

    def read_from_file(self, filename: str) -> None:
        """Change into the file's directory and read part lines from it."""
        if not chdir_file(filename):
            log_error(f"! Can't go to the directory of {filename}\n")
        try:
            handle = open(get_basename(filename), encoding="utf-8")
        except OSError as exc:
            raise RequestError(f"Can't open configuration file {filename}") from exc
        with handle:
            log_error(f"* Reading from {filename}\n")
            self.read_parts(handle)

    def read_from_stdin(self) -> None:
        """Read part lines from standard input."""
        log_info("* Reading request from stdin\n")
        self.read_parts(sys.stdin)

    def write_stl(self, plate: Plate, filename: str) -> None:
        """Export the plate's parts as a binary STL file."""
        model = plate.create_model()
        try:
            save_binary(filename, model)
        except StlError as exc:
            raise RequestError(str(exc)) from exc

    def write_ppm(self, plate: Plate, filename: str) -> None:
        """Export the plate's bitmap as a grey-map image."""
        try:
            Path(filename).write_text(plate.bitmap.to_ppm(), encoding="ascii")
        except OSError as exc:
            log_error(f"Error: can't write to {filename}\n")
            raise RequestError(f"Can't write to {filename}") from exc

    def write_plates_info(self, solution: Solution) -> None:
        """Write plates.csv listing every placed part with its position and angle."""
        lines = ["plate,part,posX,posY,rotation"]
        for number, plate in enumerate(solution.plates, start=1):
            for placed in plate.parts:
                angle = placed.rotation * placed.part.delta_r * 180.0 / math.pi
                lines.append(
                    f"{number},{placed.name},"
                    f"{placed.center_x / 1000.0:g},"
                    f"{placed.center_y / 1000.0:g},"
                    f"{angle:g}"
                )
        Path(_PLATES_INFO_FILE).write_text("\n".join(lines) + "\n", encoding="utf-8")

    def write_files(self, solution: Solution) -> None:
        """Export every plate of *solution* following the output pattern."""
        self.generated_files.clear()
        log_info("* Exporting\n")
        extension = ".ppm" if self.mode == OutputMode.PPM else ".stl"
        pattern = self.pattern + extension

        if self.plates_info:
            log_info(f"- Exporting {_PLATES_INFO_FILE}...\n")
            self.write_plates_info(solution)

        for number, plate in enumerate(solution.plates, start=1):
            filename = _plate_filename(pattern, number)
            log_info(f"- Exporting {filename}...\n")
            self.generated_files.append(filename)
            if self.mode == OutputMode.PPM:
                self.write_ppm(plate, filename)
            else:
                self.write_stl(plate, filename)

    def _build_placers(self) -> list[Placer]:
        if self.sort_mode == SortStrategy.SINGLE:
            last_sort = int(SortMode.SURFACE_DEC)
        else:
            last_sort = int(SortMode.SHUFFLE) + self.random_iterations

        placers = []
        for sort_mode in range(last_sort + 1):
            for rotate_offset in range(2):
                for rotate_direction in range(2):
                    for gravity in range(GravityMode.EQ):
                        placer = Placer(self)
                        placer.sort_parts(sort_mode)
                        placer.set_gravity_mode(gravity)
                        placer.rotate_direction = rotate_direction
                        placer.rotate_offset = rotate_offset
                        placers.append(placer)
        return placers

    def process(self) -> None:
        """Run every placer strategy, keep the best solution and export it."""
        self.solution = None
        if self.cancel:
            return

        if self.plate_mode == PlateMode.RECTANGLE:
            log_info(f"- Plate size: {self.plate_width:g} x {self.plate_height:g} microm\n")
        else:
            log_info(f"- Plate size: {self.plate_diameter:g} microm (circle)\n")

        pending = self._build_placers()
        self.placers_count = len(pending)
        self.placer_current = 0
        threads = max(1, int(self.nb_threads))
        stop = False
        workers: list[Placer] = []

        while pending or workers:
            while pending and len(workers) < threads:
                placer = pending.pop()
                if not stop and not self.cancel:
                    workers.append(placer)
                    placer.place_threaded()

            for placer in [w for w in workers if w.solution is not None]:
                placer.join()
                candidate = placer.solution
                if self.solution is None or candidate.score() < self.solution.score():
                    self.solution = candidate
                if self.solution.count_plates() == 1:
                    stop = True
                self.placer_current += 1
                workers.remove(placer)

            if workers:
                ms_sleep(_POLL_MS)

        if not self.cancel and self.solution is not None:
            log_info("* Solution\n")
            log_info(f"- Plates: {self.solution.count_plates()}\n")
            log_info(f"- Score: {self.solution.score():g}\n")
            self.write_files(self.solution)
            self.plates = self.solution.count_plates()