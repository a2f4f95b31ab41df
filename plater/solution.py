"""A placement result: an ordered list of plates."""

from __future__ import annotations

from plater.plate import Plate


class Solution:
    """Plates produced by one placement run."""

    def __init__(
        self,
        plate_width: float,
        plate_height: float,
        plate_diameter: float,
        plate_mode: int,
        precision: float,
    ) -> None:
        self.plate_width = plate_width
        self.plate_height = plate_height
        self.plate_diameter = plate_diameter
        self.plate_mode = plate_mode
        self.precision = precision
        self.plates: list[Plate] = []

    def score(self) -> float:
        """Number of plates, plus a fraction growing with the last plate's fill."""
        return self.count_plates() + (1 - 1 / float(1 + self.last_plate().count_parts()))

    def count_plates(self) -> int:
        return len(self.plates)

    def plate(self, index: int) -> Plate | None:
        """Plate at *index*, or None when there is no such plate."""
        if 0 <= index < len(self.plates):
            return self.plates[index]
        return None

    def last_plate(self) -> Plate:
        return self.plates[-1]

    def add_plate(self) -> Plate:
        """Append an empty plate and return it."""
        plate = Plate(
            self.plate_width,
            self.plate_height,
            self.plate_diameter,
            self.plate_mode,
            self.precision,
        )
        self.plates.append(plate)
        return plate