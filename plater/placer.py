"""Greedy brute-force placement of parts onto plates."""

from __future__ import annotations

import math
import random
import threading
from enum import IntEnum
from typing import Any, Iterator

from plater.placed_part import PlacedPart
from plater.plate import Plate
from plater.solution import Solution
from plater.util import log_info


class SortMode(IntEnum):
    SURFACE_DEC = 0
    SURFACE_INC = 1
    SHUFFLE = 2


class GravityMode(IntEnum):
    YX = 0
    XY = 1
    EQ = 2


_GRAVITY_COEFS = {
    GravityMode.YX: (1, 10),
    GravityMode.XY: (10, 1),
    GravityMode.EQ: (1, 1),
}


def _steps(limit: float, step: float) -> Iterator[float]:
    value = 0.0
    while value < limit:
        yield value
        value += step


class Placer:
    """Places every requested part copy onto as few plates as it can."""

    def __init__(self, request: Any) -> None:
        self.request = request
        self.solution: Solution | None = None
        self.rotate_direction = 0
        self.rotate_offset = 0
        self.parts: list[PlacedPart] = [
            PlacedPart(request.parts[name])
            for name, quantity in sorted(request.quantities.items())
            for _ in range(quantity)
        ]
        self._full: set[tuple[Plate, str]] = set()
        self._thread: threading.Thread | None = None
        self.x_coef = 1
        self.y_coef = 10
        self.set_gravity_mode(GravityMode.YX)

    def sort_parts(self, sort_type: int) -> None:
        """Order the queue; parts are taken from its end."""
        if sort_type == SortMode.SURFACE_INC:
            self.parts.sort(key=lambda p: p.surface, reverse=True)
        elif sort_type == SortMode.SURFACE_DEC:
            self.parts.sort(key=lambda p: p.surface)
        else:
            random.shuffle(self.parts)

    def set_gravity_mode(self, gravity_mode: int) -> None:
        """Choose which axis placement prefers to keep low; unknown modes are ignored."""
        coefs = _GRAVITY_COEFS.get(gravity_mode)
        if coefs is not None:
            self.x_coef, self.y_coef = coefs

    def next_part(self) -> PlacedPart:
        """Take the next part from the end of the queue."""
        return self.parts.pop()

    def _place_part(self, plate: Plate, part: PlacedPart) -> bool:
        key = (plate, part.name)
        if key in self._full:
            return False

        delta = self.request.delta
        rotations = math.ceil(math.pi * 2 / self.request.delta_r)
        order = range(rotations - 1, -1, -1) if self.rotate_direction else range(rotations)
        best: tuple[float, float, float, int] | None = None

        for r in order:
            rotation = (r + self.rotate_offset) % rotations
            part.rotation = rotation
            if part.bitmap is None:
                continue
            g_x, g_y = part.g_x, part.g_y
            for x in _steps(plate.width, delta):
                for y in _steps(plate.height, delta):
                    score = (g_y + y) * self.y_coef + (g_x + x) * self.x_coef
                    if best is None or score < best[0]:
                        part.set_offset(x, y)
                        if plate.can_place(part):
                            best = (score, x, y, rotation)

        if best is None:
            self._full.add(key)
            return False

        _, x, y, rotation = best
        part.rotation = rotation
        part.set_offset(x, y)
        plate.place(part)
        return True

    def place(self) -> Solution:
        """Place all queued parts and return the resulting solution."""
        request = self.request
        solution = Solution(
            request.plate_width,
            request.plate_height,
            request.plate_diameter,
            request.plate_mode,
            request.precision,
        )
        solution.add_plate()

        log_info("* Placer\n")
        while self.parts:
            part = self.next_part()
            index = 0
            while not self._place_part(solution.plate(index), part):
                if index + 1 == solution.count_plates():
                    solution.add_plate()
                index += 1

        log_info(f"- Solution with {solution.count_plates()} plates\n")
        self.solution = solution
        return solution

    def place_threaded(self) -> None:
        """Run place() in a background thread."""
        self._thread = threading.Thread(target=self.place, daemon=True)
        self._thread.start()

    def join(self) -> None:
        """Wait for a background placement to finish."""
        if self._thread is not None:
            self._thread.join()
            self._thread = None