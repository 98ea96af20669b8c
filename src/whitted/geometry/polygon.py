"""Convex polygon and triangle primitives.

Polygon accepts any number (>= 3) of coplanar vertices that form a convex
shape, listed in order around the boundary. Construction validates all of
this up front so intersection never has to deal with a malformed polygon.

Triangle is not a Polygon subclass. It wraps a three-vertex Polygon, which
gives it the same construction checks and supporting plane, and tests
containment with barycentric coordinates instead of the N-gon edge walk.

Both primitives exclude hits on an edge or a vertex: containment is strict.
"""

from __future__ import annotations

from src.whitted.core.color import Color
from src.whitted.core.ray import Point, Ray, Vector, align_zero, is_zero
from src.whitted.geometry.base import DEFAULT_MATERIAL, Geometry, Intersection
from src.whitted.geometry.plane import Plane
from src.whitted.materials.material import Material


class Polygon(Geometry):
    """A convex planar polygon.

    Args:
        *vertices: The polygon corners, ordered along the boundary
            (either orientation).

    Raises:
        ValueError: If there are fewer than 3 vertices, the vertices are not
            coplanar, the polygon is not convex or the order is inconsistent.
        InvalidVector: If adjacent vertices coincide or three consecutive
            vertices are collinear.
    """

    def __init__(
        self,
        *vertices: Point,
        emission: Color = Color.BLACK,
        material: Material = DEFAULT_MATERIAL,
    ) -> None:
        if len(vertices) < 3:
            raise ValueError("A polygon can't have less than 3 vertices")
        super().__init__(emission=emission, material=material)
        self.vertices: tuple[Point, ...] = tuple(vertices)
        self.plane = Plane.from_points(vertices[0], vertices[1], vertices[2])

        size = len(vertices)
        if size == 3:
            return

        normal = self.plane.normal
        # Every pair of consecutive edges must turn the same way around the normal
        edge1 = vertices[size - 1] - vertices[size - 2]
        edge2 = vertices[0] - vertices[size - 1]
        positive = edge1.cross(edge2).dot(normal) > 0
        for i in range(1, size):
            if not is_zero((vertices[i] - vertices[0]).dot(normal)):
                raise ValueError("All vertices of a polygon must lie in the same plane")
            edge1 = edge2
            edge2 = vertices[i] - vertices[i - 1]
            if positive != (edge1.cross(edge2).dot(normal) > 0):
                raise ValueError("All vertices must be ordered and the polygon must be convex")

    @property
    def normal(self) -> Vector:
        return self.plane.normal

    def normal_at(self, point: Point) -> Vector:
        return self.plane.normal

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        t = self.plane.intersect_t(ray)
        if t is None:
            return None

        head = ray.head
        direction = ray.direction
        size = len(self.vertices)
        sign = 0.0
        for i in range(size):
            v1 = self.vertices[i] - head
            v2 = self.vertices[(i + 1) % size] - head
            side = align_zero(direction.dot(v1.cross(v2)))
            if side == 0.0:
                return None
            if sign == 0.0:
                sign = side
            elif (side > 0) != (sign > 0):
                return None
        return self._hits(ray.get_point(t))

    def __repr__(self) -> str:
        return f"Polygon{self.vertices!r}"


class Triangle(Geometry):
    """A triangle with vertices p1, p2, p3.

    Raises:
        InvalidVector: If the vertices are collinear or coincide.
    """

    def __init__(
        self,
        p1: Point,
        p2: Point,
        p3: Point,
        *,
        emission: Color = Color.BLACK,
        material: Material = DEFAULT_MATERIAL,
    ) -> None:
        super().__init__(emission=emission, material=material)
        self._polygon = Polygon(p1, p2, p3, emission=emission, material=material)
        self.p1, self.p2, self.p3 = p1, p2, p3
        self._edge1 = p2 - p1
        self._edge2 = p3 - p1
        self._d00 = self._edge1.dot(self._edge1)
        self._d01 = self._edge1.dot(self._edge2)
        self._d11 = self._edge2.dot(self._edge2)
        self._denominator = self._d00 * self._d11 - self._d01 * self._d01

    @property
    def vertices(self) -> tuple[Point, ...]:
        return self._polygon.vertices

    @property
    def normal(self) -> Vector:
        return self._polygon.normal

    def normal_at(self, point: Point) -> Vector:
        return self._polygon.normal

    def barycentric(self, point: Point) -> tuple[float, float, float]:
        """Barycentric weights (w1, w2, w3) of a point in the triangle plane."""
        if point == self.p1:
            return (1.0, 0.0, 0.0)
        w = point - self.p1
        d20 = w.dot(self._edge1)
        d21 = w.dot(self._edge2)
        beta = (self._d11 * d20 - self._d01 * d21) / self._denominator
        gamma = (self._d00 * d21 - self._d01 * d20) / self._denominator
        return (1.0 - beta - gamma, beta, gamma)

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        t = self._polygon.plane.intersect_t(ray)
        if t is None:
            return None

        point = ray.get_point(t)
        if point in (self.p1, self.p2, self.p3):
            return None

        alpha, beta, gamma = (align_zero(w) for w in self.barycentric(point))
        if alpha <= 0 or beta <= 0 or gamma <= 0:
            return None
        if align_zero(beta + gamma - 1.0) > 0:
            return None
        return self._hits(point)

    def __repr__(self) -> str:
        return f"Triangle({self.p1!r}, {self.p2!r}, {self.p3!r})"
