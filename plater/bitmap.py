"""Bitmaps used to rasterise parts and plates."""

from __future__ import annotations

import math
from typing import Iterator

_PPM_SHADES = {0: 6, 1: 4, 2: 0}


def _round(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


class Bitmap:
    """A grid of small integer pixel values with running pixel statistics."""

    def __init__(self, width: int, height: int) -> None:
        width, height = int(width), int(height)
        if width < 0 or height < 0:
            raise ValueError(f"invalid bitmap size {width}x{height}")
        self.width = width
        self.height = height
        self.s_x = 0
        self.s_y = 0
        self.pixels = 0
        self.center_x = float(width // 2)
        self.center_y = float(height // 2)
        self._data = bytearray(width * height)

    def copy(self) -> Bitmap:
        """Return an independent copy of this bitmap."""
        other = Bitmap(self.width, self.height)
        other._data = bytearray(self._data)
        other.s_x, other.s_y, other.pixels = self.s_x, self.s_y, self.pixels
        other.center_x, other.center_y = self.center_x, self.center_y
        return other

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_point(self, x: int, y: int) -> int:
        """Pixel value at (x, y); 0 outside the bitmap."""
        if not self._inside(x, y):
            return 0
        return self._data[self.width * y + x]

    def set_point(self, x: int, y: int, value: int) -> None:
        """Set the pixel at (x, y); points outside the bitmap are ignored."""
        if not self._inside(x, y):
            return
        value = int(value) & 0xFF
        self._data[self.width * y + x] = value
        if value:
            self.s_x += x
            self.s_y += y
            self.pixels += 1

    def _points(self) -> Iterator[tuple[int, int, int]]:
        """Yield (x, y, value) for every non-zero pixel."""
        width = self.width
        for index, value in enumerate(self._data):
            if value:
                yield index % width, index // width, value

    def to_ppm(self) -> str:
        """Render the bitmap as a plain grey-map (P2) image."""
        header = ["P2", "# Generated by Plater", f"{self.width} {self.height}", "6"]
        rows = (
            " ".join(
                str(_PPM_SHADES.get(v, 0))
                for v in self._data[y * self.width:(y + 1) * self.width]
            )
            for y in range(self.height)
        )
        return "\n".join(header) + "\n" + "".join(row + "\n" for row in rows)

    def dilatation(self, iterations: float) -> None:
        """Grow the set pixels by one pixel in every direction, *iterations* times."""
        for _ in range(int(iterations)):
            old = bytes(self._data)
            targets: set[tuple[int, int]] = set()
            for x, y, _value in self._points_of(old):
                for dx in (-1, 0, 1):
                    for dy in (-1, 0, 1):
                        nx, ny = x + dx, y + dy
                        if self._inside(nx, ny) and not old[ny * self.width + nx]:
                            targets.add((nx, ny))
            for x, y in targets:
                self.set_point(x, y, 1)

    def _points_of(self, data: bytes) -> Iterator[tuple[int, int, int]]:
        width = self.width
        for index, value in enumerate(data):
            if value:
                yield index % width, index // width, value

    def overlaps(self, other: Bitmap, offx: float, offy: float) -> bool:
        """Whether any set pixel here meets a set pixel of *other* shifted by the offset."""
        offx, offy = int(offx), int(offy)
        return any(other.get_point(x + offx, y + offy) for x, y, _v in self._points())

    def write(self, other: Bitmap, offx: float, offy: float) -> None:
        """Copy every set pixel of *other* into this bitmap at the given offset."""
        offx, offy = int(offx), int(offy)
        for x, y, value in list(other._points()):
            self.set_point(x + offx, y + offy, value)

    def rotated(self, r: float) -> Bitmap:
        """Return a new bitmap rotated around its center by *r* radians."""
        r = -r
        w = float(self.width)
        h = float(self.height)
        cos_r, sin_r = math.cos(r), math.sin(r)

        a_x = math.ceil(w * cos_r - h * sin_r)
        a_y = math.ceil(w * sin_r + h * cos_r)
        b_x = math.ceil(-h * sin_r)
        b_y = math.ceil(h * cos_r)
        c_x = math.ceil(w * cos_r)
        c_y = math.ceil(w * sin_r)

        width = max(0, a_x, b_x, c_x) - min(0, a_x, b_x, c_x)
        height = max(0, a_y, b_y, c_y) - min(0, a_y, b_y, c_y)

        rotated = Bitmap(width, height)
        for y in range(height):
            for x in range(width):
                cx = _round(x - rotated.center_x)
                cy = _round(y - rotated.center_y)
                src_x = _round(cos_r * cx - sin_r * cy + self.center_x)
                src_y = _round(sin_r * cx + cos_r * cy + self.center_y)
                value = self.get_point(src_x, src_y)
                if value:
                    rotated.set_point(x, y, value)
        return rotated

    def trimmed(self) -> Bitmap:
        """Return a new bitmap with the empty border around the set pixels removed."""
        points = list(self._points())
        if points:
            min_x = min(p[0] for p in points)
            max_x = max(p[0] for p in points)
            min_y = min(p[1] for p in points)
            max_y = max(p[1] for p in points)
        else:
            min_x = max_x = min_y = max_y = 0

        delta_x = max_x - min_x
        delta_y = max_y - min_y
        trimmed = Bitmap(delta_x, delta_y)
        trimmed.center_x = self.center_x - min_x
        trimmed.center_y = self.center_y - min_y
        for x, y, value in points:
            tx, ty = x - min_x, y - min_y
            if tx < delta_x and ty < delta_y:
                trimmed.set_point(tx, ty, value)
        return trimmed