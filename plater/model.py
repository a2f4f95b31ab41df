"""Triangle meshes made of volumes, with transforms and rasterisation."""

from __future__ import annotations

import math
from typing import Callable, Iterable

from plater.bitmap import Bitmap
from plater.geometry import Face, FPoint2, Point3, QuadTree, Triangle, Volume
from plater.util import deg2rad

_TREE_DEPTH = 6


class Model:
    """A mesh made of one or more volumes."""

    def __init__(self, volumes: Iterable[Volume] | None = None) -> None:
        self.volumes: list[Volume] = list(volumes) if volumes is not None else []
        self._tree: QuadTree | None = None

    def _map_vertices(self, fn: Callable[[Point3], Point3]) -> Model:
        return Model(
            Volume([Face(*(fn(p) for p in face)) for face in volume.faces])
            for volume in self.volumes
        )

    def min(self) -> Point3:
        """Lowest coordinates over all volumes, truncated to integers."""
        if not self.volumes:
            return Point3(0, 0, 0)
        mins = [volume.min() for volume in self.volumes]
        return Point3(
            min(int(p.x) for p in mins),
            min(int(p.y) for p in mins),
            min(int(p.z) for p in mins),
        )

    def max(self) -> Point3:
        """Highest coordinates over all volumes, truncated to integers."""
        if not self.volumes:
            return Point3(0, 0, 0)
        maxs = [volume.max() for volume in self.volumes]
        return Point3(
            max(int(p.x) for p in maxs),
            max(int(p.y) for p in maxs),
            max(int(p.z) for p in maxs),
        )

    def _build_tree(self) -> QuadTree:
        min_p, max_p = self.min(), self.max()
        tree = QuadTree(min_p.x, min_p.y, max_p.x, max_p.y, _TREE_DEPTH)
        for volume in self.volumes:
            for face in volume.faces:
                tree.add(Triangle(*(FPoint2(p.x, p.y) for p in face)))
        return tree

    def contains(self, x: float, y: float) -> bool:
        """Whether the top-view projection of the mesh covers (x, y)."""
        if self._tree is None:
            self._tree = self._build_tree()
        return self._tree.test(x, y)

    def pixelize(self, precision: float, dilatation: float) -> Bitmap:
        """Rasterise the top view at *precision*, grown by *dilatation*."""
        min_p, max_p = self.min(), self.max()
        x_min, y_min = min_p.x - dilatation, min_p.y - dilatation
        x_max, y_max = max_p.x + dilatation, max_p.y + dilatation
        width = int((x_max - x_min) / precision)
        height = int((y_max - y_min) / precision)
        bitmap = Bitmap(width, height)

        for x in range(width):
            big_x = (x + 1) * precision - dilatation + min_p.x
            for y in range(height):
                big_y = (y + 1) * precision - dilatation + min_p.y
                if min_p.x < big_x < max_p.x and min_p.y < big_y < max_p.y:
                    bitmap.set_point(x, y, 2 if self.contains(big_x, big_y) else 0)

        bitmap.dilatation(int(dilatation / precision))
        return bitmap

    def translate(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Model:
        """Return a copy moved by (x, y, z)."""
        return self._map_vertices(lambda p: Point3(p.x + x, p.y + y, p.z + z))

    def merge(self, other: Model) -> None:
        """Append the volumes of *other* to this model."""
        self.volumes.extend(Volume(list(v.faces)) for v in other.volumes)
        self._tree = None

    def rotate_z(self, r: float) -> Model:
        """Return a copy rotated by *r* radians around the Z axis."""
        c, s = math.cos(r), math.sin(r)
        return self._map_vertices(lambda p: Point3(c * p.x - s * p.y, s * p.x + c * p.y, p.z))

    def rotate_y(self, r: float) -> Model:
        """Return a copy rotated by *r* radians around the Y axis."""
        c, s = math.cos(r), math.sin(r)
        return self._map_vertices(lambda p: Point3(c * p.x - s * p.z, p.y, s * p.x + c * p.z))

    def rotate_x(self, r: float) -> Model:
        """Return a copy rotated by *r* radians around the X axis."""
        c, s = math.cos(r), math.sin(r)
        return self._map_vertices(lambda p: Point3(p.x, c * p.y - s * p.z, s * p.y + c * p.z))

    def center(self) -> Model:
        """Return a copy centred on X and Y and resting on Z = 0."""
        min_p, max_p = self.min(), self.max()
        x = (min_p.x + max_p.x) / 2.0
        y = (min_p.y + max_p.y) / 2.0
        return self.translate(-x, -y, -min_p.z)

    def put_face_on_plate(self, orientation: str) -> Model:
        """Return a copy turned so the named face lies on the plate."""
        if orientation == "front":
            return self.rotate_x(deg2rad(90))
        if orientation == "top":
            return self.rotate_x(deg2rad(180))
        if orientation == "back":
            return self.rotate_x(deg2rad(270))
        if orientation == "left":
            return self.rotate_y(deg2rad(90))
        if orientation == "right":
            return self.rotate_y(deg2rad(-90))
        return Model(Volume(list(v.faces)) for v in self.volumes)