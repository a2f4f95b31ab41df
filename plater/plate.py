"""A build plate holding placed parts and their combined bitmap."""

from __future__ import annotations

import math
from enum import IntEnum

from plater.bitmap import Bitmap
from plater.model import Model
from plater.placed_part import PlacedPart


class PlateMode(IntEnum):
    RECTANGLE = 0
    CIRCLE = 1


_OUTSIDE = 2


class Plate:
    """A rectangular or circular plate rasterised at a given precision."""

    def __init__(
        self, width: float, height: float, diameter: float, mode: int, precision: float
    ) -> None:
        self.mode = PlateMode(mode)
        self.diameter = diameter
        self.precision = precision
        if self.mode == PlateMode.CIRCLE:
            width = height = diameter
        self.width = width
        self.height = height
        self.parts: list[PlacedPart] = []
        self.bitmap = Bitmap(width / precision, height / precision)

        if self.mode == PlateMode.CIRCLE:
            bmp = self.bitmap
            radius = diameter / 2
            for x in range(bmp.width):
                dx = (x - bmp.center_x) * precision
                for y in range(bmp.height):
                    dy = (y - bmp.center_y) * precision
                    if math.sqrt(dx * dx + dy * dy) > radius:
                        bmp.set_point(x, y, _OUTSIDE)

    def can_place(self, placed_part: PlacedPart) -> bool:
        """Whether the part fits inside the plate without touching other parts."""
        part_bmp = placed_part.bitmap
        x, y = placed_part.x, placed_part.y
        if x + part_bmp.width * self.precision > self.width:
            return False
        if y + part_bmp.height * self.precision > self.height:
            return False
        return not part_bmp.overlaps(self.bitmap, x / self.precision, y / self.precision)

    def place(self, placed_part: PlacedPart) -> None:
        """Add the part to the plate and mark its pixels."""
        self.parts.append(placed_part)
        self.bitmap.write(
            placed_part.bitmap,
            placed_part.x / self.precision,
            placed_part.y / self.precision,
        )

    def count_parts(self) -> int:
        return len(self.parts)

    def create_model(self) -> Model:
        """The combined mesh of all placed parts, centred."""
        model = Model()
        for part in self.parts:
            model.merge(part.create_model())
        return model.center()