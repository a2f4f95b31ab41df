"""Basic geometric primitives: points, faces, volumes, rectangles, triangles, quad trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class Point3:
    """A point in space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class FPoint2:
    """A point in the plane."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Face:
    """A triangular face made of three vertices."""

    v0: Point3 = field(default_factory=Point3)
    v1: Point3 = field(default_factory=Point3)
    v2: Point3 = field(default_factory=Point3)

    @property
    def vertices(self) -> tuple[Point3, Point3, Point3]:
        return (self.v0, self.v1, self.v2)

    def __iter__(self) -> Iterator[Point3]:
        return iter(self.vertices)


@dataclass
class Volume:
    """A collection of faces."""

    faces: list[Face] = field(default_factory=list)

    def add_face(self, face: Face) -> None:
        self.faces.append(face)

    def _vertices(self) -> Iterator[Point3]:
        for face in self.faces:
            yield from face

    def min(self) -> Point3:
        """Lowest coordinates of all vertices, truncated to integers."""
        if not self.faces:
            return Point3(0, 0, 0)
        first = self.faces[0].v0
        xmin, ymin, zmin = int(first.x), int(first.y), int(first.z)
        for p in self._vertices():
            if p.x < xmin:
                xmin = int(p.x)
            if p.y < ymin:
                ymin = int(p.y)
            if p.z < zmin:
                zmin = int(p.z)
        return Point3(xmin, ymin, zmin)

    def max(self) -> Point3:
        """Highest coordinates of all vertices, truncated to integers."""
        if not self.faces:
            return Point3(0, 0, 0)
        first = self.faces[0].v0
        xmax, ymax, zmax = int(first.x), int(first.y), int(first.z)
        for p in self._vertices():
            if p.x > xmax:
                xmax = int(p.x)
            if p.y > ymax:
                ymax = int(p.y)
            if p.z > zmax:
                zmax = int(p.z)
        return Point3(xmax, ymax, zmax)


@dataclass
class Rectangle:
    """An axis-aligned rectangle with inclusive bounds."""

    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    def overlaps(self, other: Rectangle) -> bool:
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def contains(self, x: float, y: float) -> bool:
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2


def _side(pt: FPoint2, normal: FPoint2, segment: FPoint2) -> bool:
    scalar_n = normal.x * pt.x + normal.y * pt.y
    if scalar_n == 0:
        return segment.x * pt.x + segment.y * pt.y > 0
    return scalar_n < 0


class Triangle:
    """A plane triangle supporting point and rectangle containment tests."""

    def __init__(self, a: FPoint2, b: FPoint2, c: FPoint2) -> None:
        self.box = Rectangle()
        self.set_points(a, b, c)

    def set_points(self, a: FPoint2, b: FPoint2, c: FPoint2) -> None:
        self.a, self.b, self.c = a, b, c
        self._ab = FPoint2(b.x - a.x, b.y - a.y)
        self._bc = FPoint2(c.x - b.x, c.y - b.y)
        self._ca = FPoint2(a.x - c.x, a.y - c.y)
        self._n_ab = FPoint2(self._ab.y, -self._ab.x)
        self._n_bc = FPoint2(self._bc.y, -self._bc.x)
        self._n_ca = FPoint2(self._ca.y, -self._ca.x)
        self.box = Rectangle(
            min(a.x, b.x, c.x),
            min(a.y, b.y, c.y),
            max(a.x, b.x, c.x),
            max(a.y, b.y, c.y),
        )

    def contains(self, x: float, y: float) -> bool:
        a, b, c = self.a, self.b, self.c
        return (
            _side(FPoint2(x - a.x, y - a.y), self._n_ab, self._ab)
            and _side(FPoint2(x - b.x, y - b.y), self._n_bc, self._bc)
            and _side(FPoint2(x - c.x, y - c.y), self._n_ca, self._ca)
        )

    def contains_point(self, p: FPoint2) -> bool:
        return self.contains(p.x, p.y)

    def contains_rectangle(self, rect: Rectangle) -> bool:
        return (
            self.contains(rect.x1, rect.y1)
            and self.contains(rect.x1, rect.y2)
            and self.contains(rect.x2, rect.y1)
            and self.contains(rect.x2, rect.y2)
        )


class QuadTree:
    """A fixed-depth quad tree indexing triangles for point tests."""

    def __init__(self, x1: float, y1: float, x2: float, y2: float, depth: int) -> None:
        self.depth = depth
        self.rect = Rectangle(x1, y1, x2, y2)
        self.black = False
        self.triangles: list[Triangle] = []
        self.children: list[QuadTree] = []
        if depth > 0:
            xm = (x1 + x2) / 2.0
            ym = (y1 + y2) / 2.0
            self.children = [
                QuadTree(x1, y1, xm, ym, depth - 1),
                QuadTree(xm, y1, x2, ym, depth - 1),
                QuadTree(x1, ym, xm, y2, depth - 1),
                QuadTree(xm, ym, x2, y2, depth - 1),
            ]

    def add(self, triangle: Triangle) -> None:
        if self.depth <= 0:
            self.triangles.append(triangle)
            return
        if self.black:
            return
        if triangle.contains_rectangle(self.rect):
            self.black = True
            self.children = []
            return
        if triangle.box.overlaps(self.rect):
            for child in self.children:
                child.add(triangle)

    def get(self, x: float, y: float) -> list[Triangle]:
        """Triangles stored in the leaves that contain (x, y)."""
        if not self.rect.contains(x, y):
            return []
        if self.depth > 0:
            return [t for child in self.children for t in child.get(x, y)]
        return list(self.triangles)

    def test(self, x: float, y: float) -> bool:
        """Whether (x, y) lies inside any indexed triangle."""
        if not self.rect.contains(x, y):
            return False
        if self.black:
            return True
        if self.depth > 0:
            return any(child.test(x, y) for child in self.children)
        return any(t.contains(x, y) for t in self.triangles)