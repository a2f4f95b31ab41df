"""A part instance with a position and a rotation on a plate."""

from __future__ import annotations

import math

from plater.bitmap import Bitmap
from plater.model import Model
from plater.part import Part


def _mean(total: int, count: int) -> float:
    return total / count if count else math.nan


class PlacedPart:
    """One copy of a part, offset on a plate and turned by a rotation step."""

    def __init__(self, part: Part) -> None:
        self.part = part
        self.x = 0.0
        self.y = 0.0
        self.rotation = 0

    @property
    def name(self) -> str:
        return self.part.filename

    @property
    def surface(self) -> float:
        return self.part.surface

    @property
    def bitmap(self) -> Bitmap | None:
        """The part's bitmap for the current rotation."""
        return self.part.bitmap(self.rotation)

    @property
    def center_x(self) -> float:
        return self.x + self.part.precision * self.bitmap.center_x

    @property
    def center_y(self) -> float:
        return self.y + self.part.precision * self.bitmap.center_y

    @property
    def g_x(self) -> float:
        """X of the bitmap's centre of gravity, in plate units."""
        bitmap = self.bitmap
        return _mean(bitmap.s_x, bitmap.pixels) * self.part.precision

    @property
    def g_y(self) -> float:
        """Y of the bitmap's centre of gravity, in plate units."""
        bitmap = self.bitmap
        return _mean(bitmap.s_y, bitmap.pixels) * self.part.precision

    def set_offset(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def g_dist(self) -> float:
        """Smallest squared centre-of-gravity distance over all usable rotations."""
        scores = [
            _mean(b.s_x, b.pixels) ** 2 + _mean(b.s_y, b.pixels) ** 2
            for b in self.part.bitmaps
            if b is not None
        ]
        best = 0.0
        for i, score in enumerate(scores):
            if i == 0 or score < best:
                best = score
        return best

    def create_model(self) -> Model:
        """The part's mesh turned and moved to where it sits on the plate."""
        model = self.part.model.center().rotate_z(self.part.delta_r * self.rotation)
        return model.translate(self.center_x, self.center_y)