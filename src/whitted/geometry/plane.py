"""Infinite plane primitive.

A plane is stored as a reference point q and a unit normal n. A ray
head + t * dir meets it at

    t = n . (q - head) / (n . dir)

The ray misses when it starts exactly on q, when n . dir aligns to zero
(parallel, including rays lying in the plane) and when t <= 0 (the plane is
behind the head or the head is on the plane).
"""

from __future__ import annotations

from src.whitted.core.color import Color
from src.whitted.core.ray import Point, Ray, Vector, align_zero
from src.whitted.geometry.base import DEFAULT_MATERIAL, Geometry, Intersection
from src.whitted.materials.material import Material


class Plane(Geometry):
    """A plane through q with normal n.

    Args:
        q: A reference point on the plane.
        normal: The plane normal. Stored normalized.
    """

    def __init__(
        self,
        q: Point,
        normal: Vector,
        *,
        emission: Color = Color.BLACK,
        material: Material = DEFAULT_MATERIAL,
    ) -> None:
        super().__init__(emission=emission, material=material)
        self.q = q
        self.normal = normal.normalize()

    @classmethod
    def from_points(
        cls,
        p1: Point,
        p2: Point,
        p3: Point,
        *,
        emission: Color = Color.BLACK,
        material: Material = DEFAULT_MATERIAL,
    ) -> Plane:
        """Build the plane through three points.

        The normal is (p2 - p1) x (p3 - p1), normalized.

        Raises:
            InvalidVector: If two points coincide or all three are collinear.
        """
        normal = (p2 - p1).cross(p3 - p1)
        return cls(p1, normal, emission=emission, material=material)

    def normal_at(self, point: Point) -> Vector:
        return self.normal

    def intersect_t(self, ray: Ray) -> float | None:
        """Distance along the ray to the plane, or None on a miss."""
        if ray.head == self.q:
            return None

        n_dir = align_zero(self.normal.dot(ray.direction))
        if n_dir == 0.0:
            return None

        t = align_zero(self.normal.dot(self.q - ray.head) / n_dir)
        if t <= 0.0:
            return None
        return t

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        t = self.intersect_t(ray)
        if t is None:
            return None
        return self._hits(ray.get_point(t))

    def __repr__(self) -> str:
        return f"Plane(q={self.q!r}, normal={self.normal!r})"
