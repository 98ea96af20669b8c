"""Sphere primitive with geometric ray-sphere intersection.

The intersection uses the geometric (projection) form rather than the
quadratic formula:

    u  = center - head
    tm = dir . u              (projection of the center onto the ray)
    d2 = |u|^2 - tm^2         (squared distance from center to the ray)
    th = sqrt(r^2 - d2)
    t1 = tm - th, t2 = tm + th

Only positive roots are hits; a root of exactly zero (the head lies on the
sphere) is not. A ray whose head is the center cannot form u, so it is
handled first and always yields the single point head + r * dir.

Example:
    >>> from src.whitted.core.ray import Point, Ray, Vector
    >>> from src.whitted.geometry.sphere import Sphere
    >>> sphere = Sphere(Point(0.0, 0.0, 0.0), 1.0)
    >>> ray = Ray(Point(0.0, 0.0, -2.0), Vector(0.0, 0.0, 1.0))
    >>> sphere.find_intersections(ray)
    [Point(0.0, 0.0, -1.0), Point(0.0, 0.0, 1.0)]
"""

from __future__ import annotations

import math

from src.whitted.core.color import Color
from src.whitted.core.ray import Point, Ray, Vector, align_zero
from src.whitted.geometry.base import DEFAULT_MATERIAL, Geometry, Intersection
from src.whitted.materials.material import Material


class Sphere(Geometry):
    """A sphere defined by center point and radius.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive float).

    Raises:
        ValueError: If the radius is not positive.
    """

    def __init__(
        self,
        center: Point,
        radius: float,
        *,
        emission: Color = Color.BLACK,
        material: Material = DEFAULT_MATERIAL,
    ) -> None:
        if radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        super().__init__(emission=emission, material=material)
        self.center = center
        self.radius = float(radius)

    def normal_at(self, point: Point) -> Vector:
        return (point - self.center).normalize()

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        head = ray.head
        direction = ray.direction

        if head == self.center:
            return self._hits(head + direction.scale(self.radius))

        u = self.center - head
        tm = align_zero(direction.dot(u))
        d2 = align_zero(u.length_squared() - tm * tm)
        r2 = self.radius * self.radius
        if align_zero(d2 - r2) > 0:
            return None

        th = align_zero(math.sqrt(max(r2 - d2, 0.0)))
        t1 = align_zero(tm - th)
        t2 = align_zero(tm + th)

        if t1 > 0 and t2 > 0:
            return self._hits(ray.get_point(t1), ray.get_point(t2))
        if t1 > 0:
            return self._hits(ray.get_point(t1))
        if t2 > 0:
            return self._hits(ray.get_point(t2))
        return None

    def __repr__(self) -> str:
        return f"Sphere(center={self.center!r}, radius={self.radius})"
