"""Parts loaded from mesh files and rasterised at every allowed rotation."""

from __future__ import annotations

import math

from plater.bitmap import Bitmap
from plater.model import Model
from plater.stl import load_model


class Part:
    """A mesh together with its top-view bitmaps, one per rotation step."""

    def __init__(self) -> None:
        self.model = Model()
        self.filename = ""
        self.precision = 0.0
        self.delta_r = 0.0
        self.width = 0.0
        self.height = 0.0
        self.surface = 0.0
        self.bitmaps: list[Bitmap | None] = []

    def load(
        self,
        filename: str,
        precision: float,
        delta_r: float,
        spacing: float,
        orientation: str,
        plate_width: float,
        plate_height: float,
    ) -> int:
        """Load and rasterise the part; return how many rotations fit on the plate."""
        self.precision = precision
        self.delta_r = delta_r
        self.filename = filename
        count = math.ceil((math.pi * 2) / delta_r)

        self.model = load_model(filename).put_face_on_plate(orientation)
        base = self.model.pixelize(precision, spacing)
        self.surface = 0.0

        min_p, max_p = self.model.min(), self.model.max()
        self.width = max_p.x - min_p.x + 2 * spacing
        self.height = max_p.y - min_p.y + 2 * spacing

        candidates = [base] + [base.rotated(k * delta_r).trimmed() for k in range(1, count)]

        self.bitmaps = []
        correct = 0
        for bitmap in candidates:
            if bitmap.width * precision < plate_width and bitmap.height * precision < plate_height:
                self.surface += bitmap.width * bitmap.height
                correct += 1
                self.bitmaps.append(bitmap)
            else:
                self.bitmaps.append(None)

        if correct > 0:
            self.surface /= float(correct)
        return correct

    def bitmap(self, index: int) -> Bitmap | None:
        """Bitmap for rotation step *index*, or None when it does not fit the plate."""
        return self.bitmaps[index]

    def density(self, index: int) -> int:
        """Set pixels per bitmap area for rotation *index*, in whole units."""
        bitmap = self.bitmaps[index]
        if bitmap is None:
            raise ValueError(f"rotation {index} does not fit on the plate")
        return bitmap.pixels // (bitmap.width * bitmap.height)