"""Tube (infinite cylinder) and capped cylinder primitives.

Both are described by a radius and an axis ray (head o, unit direction v).
The normal at a surface point p comes from its foot point on the axis:

    t = v . (p - o),  foot = o + t * v,  normal = normalize(p - foot)

Intersection projects the ray onto the plane perpendicular to the axis and
solves a * t^2 + b * t + c = 0 with

    a = 1 - (d . v)^2
    b = 2 * (d . w - (d . v) * (w . v))
    c = |w|^2 - (w . v)^2 - r^2

where d is the ray direction and w = head - o. The coefficients are built
from raw components so a ray starting on the axis head does not have to
form a zero vector.
"""

from __future__ import annotations

import math

from src.whitted.core.color import Color
from src.whitted.core.ray import Point, Ray, Vector, align_zero
from src.whitted.geometry.base import DEFAULT_MATERIAL, Geometry, Intersection
from src.whitted.geometry.plane import Plane
from src.whitted.materials.material import Material


def _offset(p: Point, q: Point) -> tuple[float, float, float]:
    return (p.x - q.x, p.y - q.y, p.z - q.z)


def _dot(a: tuple[float, float, float], v: Point) -> float:
    return a[0] * v.x + a[1] * v.y + a[2] * v.z


class Tube(Geometry):
    """An infinite cylinder around an axis.

    Args:
        radius: The tube radius (positive).
        axis: The central axis. Its head is the reference point of the tube.

    Raises:
        ValueError: If the radius is not positive.
    """

    def __init__(
        self,
        radius: float,
        axis: Ray,
        *,
        emission: Color = Color.BLACK,
        material: Material = DEFAULT_MATERIAL,
    ) -> None:
        if radius <= 0:
            raise ValueError(f"Tube radius must be positive, got {radius}")
        super().__init__(emission=emission, material=material)
        self.radius = float(radius)
        self.axis = axis

    def axial_projection(self, point: Point) -> float:
        """Signed distance of a point's foot along the axis from its head."""
        return self.axis.direction.dot(point - self.axis.head) if point != self.axis.head else 0.0

    def normal_at(self, point: Point) -> Vector:
        t = self.axial_projection(point)
        return (point - self.axis.get_point(t)).normalize()

    def _lateral_roots(self, ray: Ray) -> list[float]:
        """Positive ray distances where the ray crosses the lateral surface."""
        v = self.axis.direction
        d = ray.direction
        w = _offset(ray.head, self.axis.head)

        d_v = d.dot(v)
        w_v = _dot(w, v)
        a = align_zero(1.0 - d_v * d_v)
        if a == 0.0:
            return []

        b = 2.0 * (_dot(w, d) - d_v * w_v)
        c = (w[0] * w[0] + w[1] * w[1] + w[2] * w[2]) - w_v * w_v - self.radius * self.radius
        discriminant = align_zero(b * b - 4.0 * a * c)
        if discriminant <= 0.0:
            return []

        root = math.sqrt(discriminant)
        t1 = align_zero((-b - root) / (2.0 * a))
        t2 = align_zero((-b + root) / (2.0 * a))
        return [t for t in (t1, t2) if t > 0]

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        roots = self._lateral_roots(ray)
        if not roots:
            return None
        return self._hits(*(ray.get_point(t) for t in roots))

    def __repr__(self) -> str:
        return f"Tube(radius={self.radius}, axis={self.axis!r})"


class Cylinder(Tube):
    """A finite cylinder: a tube segment closed by two flat caps.

    The bottom cap lies in the plane through the axis head, the top cap at
    distance height along the axis.

    Args:
        radius: The cylinder radius (positive).
        axis: The central axis; its head is the center of the bottom cap.
        height: The distance between the caps (positive).

    Raises:
        ValueError: If the radius or the height is not positive.
    """

    def __init__(
        self,
        radius: float,
        axis: Ray,
        height: float,
        *,
        emission: Color = Color.BLACK,
        material: Material = DEFAULT_MATERIAL,
    ) -> None:
        if height <= 0:
            raise ValueError(f"Cylinder height must be positive, got {height}")
        super().__init__(radius, axis, emission=emission, material=material)
        self.height = float(height)
        direction = axis.direction
        self._bottom = Plane(axis.head, direction)
        self._top = Plane(axis.get_point(self.height), direction)

    def normal_at(self, point: Point) -> Vector:
        direction = self.axis.direction
        if point == self.axis.head:
            return -direction

        # Cap points from intersect() can project a hair inside the segment
        t = align_zero(self.axial_projection(point))
        if t <= 0:
            return -direction
        if align_zero(t - self.height) >= 0:
            return direction
        return (point - self.axis.get_point(t)).normalize()

    def _cap_hit(self, cap: Plane, ray: Ray) -> float | None:
        t = cap.intersect_t(ray)
        if t is None:
            return None
        point = ray.get_point(t)
        if align_zero(point.distance_squared(cap.q) - self.radius * self.radius) >= 0:
            return None
        return t

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        distances = []
        for t in self._lateral_roots(ray):
            projection = align_zero(self.axial_projection(ray.get_point(t)))
            if 0 < projection and align_zero(projection - self.height) < 0:
                distances.append(t)

        for cap in (self._bottom, self._top):
            t = self._cap_hit(cap, ray)
            if t is not None:
                distances.append(t)

        if not distances:
            return None
        distances.sort()
        return self._hits(*(ray.get_point(t) for t in distances))

    def __repr__(self) -> str:
        return f"Cylinder(radius={self.radius}, axis={self.axis!r}, height={self.height})"
