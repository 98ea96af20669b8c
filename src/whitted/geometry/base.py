"""Intersection contract shared by all geometries.

Every shape answers two questions about a ray:

    intersect(ray) -> list[Intersection] | None
    normal_at(point) -> Vector

A miss is always reported as None, never as an empty list, so callers can
test the result directly. The composite Geometries container implements
intersect() as well but has no surface normal, which is why the contract
is split between Intersectable and Geometry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from src.whitted.core.color import Color
from src.whitted.core.ray import Point, Ray, Vector
from src.whitted.materials.material import Material

DEFAULT_MATERIAL = Material()


@dataclass(frozen=True, eq=False)
class Intersection:
    """A hit of a ray against a geometry.

    Attributes:
        geometry: The geometry that was hit.
        point: The world-space hit point.
    """

    geometry: Geometry
    point: Point

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return self.geometry is other.geometry and self.point == other.point

    def __hash__(self) -> int:
        return hash((id(self.geometry), self.point))


class Intersectable(ABC):
    """Anything a ray can be tested against."""

    @abstractmethod
    def intersect(self, ray: Ray) -> list[Intersection] | None:
        """Find all hits of a ray in front of its head.

        Args:
            ray: The ray to test.

        Returns:
            The list of intersections, or None when the ray misses.
        """

    def find_intersections(self, ray: Ray) -> list[Point] | None:
        """Like intersect(), but returns only the hit points."""
        intersections = self.intersect(ray)
        if intersections is None:
            return None
        return [hit.point for hit in intersections]


class Geometry(Intersectable):
    """A single surface with an emission color and a material.

    Args:
        emission: Light emitted by the surface itself. Default black.
        material: Phong coefficients. Default is the ambient-only material.
    """

    def __init__(self, *, emission: Color = Color.BLACK, material: Material = DEFAULT_MATERIAL) -> None:
        if not isinstance(emission, Color):
            raise TypeError(f"emission must be a Color, got {type(emission).__name__}")
        if not isinstance(material, Material):
            raise TypeError(f"material must be a Material, got {type(material).__name__}")
        self.emission = emission
        self.material = material

    @abstractmethod
    def normal_at(self, point: Point) -> Vector:
        """Return the outward unit normal at a point on the surface."""

    def _hits(self, *points: Point) -> list[Intersection]:
        return [Intersection(self, point) for point in points]
