"""Geometry module for analytic surface primitives.

This module provides the shapes a scene is built from and the ray
intersection contract they share:

Components:
    base: Intersectable/Geometry interfaces and the Intersection record
    plane: Infinite plane
    sphere: Sphere with geometric ray-sphere intersection
    polygon: Convex polygon and triangle (strict containment)
    tube: Infinite tube and capped cylinder
    geometries: Composite container (brute-force linear scan)

Ray-object intersection follows the pattern:
    hits = shape.intersect(ray)   # list[Intersection] or None on a miss
"""

from .base import Geometry, Intersectable, Intersection
from .geometries import Geometries
from .plane import Plane
from .polygon import Polygon, Triangle
from .sphere import Sphere
from .tube import Cylinder, Tube

__all__ = [
    "Intersectable",
    "Geometry",
    "Intersection",
    "Geometries",
    "Plane",
    "Sphere",
    "Polygon",
    "Triangle",
    "Tube",
    "Cylinder",
]
