"""Points, vectors and rays for the recursive ray tracer.

This module provides the immutable geometric primitives every other module is
built on. Points and vectors are plain Python objects holding three floats;
they compare by exact value and are safe to share between render threads.

A Vector is a Point that may never be the zero vector. The check runs after
the base Point constructor has stored the coordinates, so any operation that
would produce (0, 0, 0) raises InvalidVector instead of silently yielding a
direction-less vector.

Near-zero comparisons go through align_zero()/is_zero() so rounding noise
from normalization and dot products does not leak into intersection tests.

Example:
    >>> from src.whitted.core.ray import Point, Ray, Vector
    >>> ray = Ray(Point(0.0, 0.0, -1.0), Vector(0.0, 0.0, 5.0))
    >>> ray.direction
    Vector(0.0, 0.0, 1.0)
    >>> ray.get_point(2.0)
    Point(0.0, 0.0, 1.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.whitted.geometry.base import Intersection

# Values with a magnitude below this are treated as exactly zero
ZERO_EPSILON = 1e-10

# Distance a secondary ray head is moved along the surface normal
DELTA = 1e-4


class InvalidVector(ValueError):
    """Raised when an operation would produce the zero vector."""


def align_zero(value: float) -> float:
    """Snap a value to zero when it is within ZERO_EPSILON of it.

    Args:
        value: The number to align.

    Returns:
        0.0 if |value| < ZERO_EPSILON, otherwise value unchanged.
    """
    return 0.0 if abs(value) < ZERO_EPSILON else value


def is_zero(value: float) -> bool:
    """Check whether a value aligns to zero."""
    return align_zero(value) == 0.0


# =============================================================================
# Point and Vector
# =============================================================================


class Point:
    """An immutable position in 3D space.

    Attributes:
        x: X coordinate.
        y: Y coordinate.
        z: Z coordinate.
    """

    __slots__ = ("_x", "_y", "_z")

    ZERO: Point

    def __init__(self, x: float, y: float, z: float) -> None:
        object.__setattr__(self, "_x", float(x))
        object.__setattr__(self, "_y", float(y))
        object.__setattr__(self, "_z", float(z))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def z(self) -> float:
        return self._z

    @property
    def xyz(self) -> tuple[float, float, float]:
        """The coordinates as an (x, y, z) tuple."""
        return (self._x, self._y, self._z)

    def __sub__(self, other: Point) -> Vector:
        """Vector from other to this point.

        Raises:
            InvalidVector: If both points coincide.
        """
        return Vector(self._x - other._x, self._y - other._y, self._z - other._z)

    def __add__(self, vector: Vector) -> Point:
        """Move this point by a vector."""
        return Point(self._x + vector._x, self._y + vector._y, self._z + vector._z)

    def distance_squared(self, other: Point) -> float:
        """Squared Euclidean distance to another point."""
        dx = self._x - other._x
        dy = self._y - other._y
        dz = self._z - other._z
        return dx * dx + dy * dy + dz * dz

    def distance(self, other: Point) -> float:
        """Euclidean distance to another point."""
        return math.sqrt(self.distance_squared(other))

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Point):
            return NotImplemented
        return self._x == other._x and self._y == other._y and self._z == other._z

    def __hash__(self) -> int:
        return hash((self._x, self._y, self._z))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._x}, {self._y}, {self._z})"


Point.ZERO = Point(0.0, 0.0, 0.0)


class Vector(Point):
    """A non-zero direction in 3D space.

    Raises:
        InvalidVector: On construction if all three components are zero.
    """

    __slots__ = ()

    AXIS_X: Vector
    AXIS_Y: Vector
    AXIS_Z: Vector

    def __init__(self, x: float, y: float, z: float) -> None:
        super().__init__(x, y, z)
        if self._x == 0.0 and self._y == 0.0 and self._z == 0.0:
            raise InvalidVector("Cannot create the zero vector")

    def __add__(self, other: Vector) -> Vector:
        return Vector(self._x + other._x, self._y + other._y, self._z + other._z)

    def __neg__(self) -> Vector:
        return Vector(-self._x, -self._y, -self._z)

    def __mul__(self, scalar: float) -> Vector:
        return self.scale(scalar)

    __rmul__ = __mul__

    def scale(self, scalar: float) -> Vector:
        """Multiply every component by a scalar.

        Raises:
            InvalidVector: If the scalar is zero.
        """
        return Vector(self._x * scalar, self._y * scalar, self._z * scalar)

    def dot(self, other: Point) -> float:
        """Dot product with another vector."""
        return self._x * other._x + self._y * other._y + self._z * other._z

    def cross(self, other: Vector) -> Vector:
        """Cross product with another vector.

        Raises:
            InvalidVector: If the vectors are parallel.
        """
        return Vector(
            self._y * other._z - self._z * other._y,
            self._z * other._x - self._x * other._z,
            self._x * other._y - self._y * other._x,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self) -> Vector:
        """Return the unit vector with the same direction.

        Raises:
            InvalidVector: If the length aligns to zero.
        """
        length = align_zero(self.length())
        if length == 0.0:
            raise InvalidVector(f"Cannot normalize {self!r}")
        return Vector(self._x / length, self._y / length, self._z / length)


Vector.AXIS_X = Vector(1.0, 0.0, 0.0)
Vector.AXIS_Y = Vector(0.0, 1.0, 0.0)
Vector.AXIS_Z = Vector(0.0, 0.0, 1.0)


# =============================================================================
# Ray
# =============================================================================


class Ray:
    """A half-line with a head point and a unit direction.

    When a surface normal is supplied, the head is pushed DELTA along the
    normal, toward the side the direction points to. Secondary rays built this
    way do not re-hit the surface they start on.

    Attributes:
        head: The starting point of the ray.
        direction: The unit direction of the ray.
    """

    __slots__ = ("head", "direction")

    def __init__(self, head: Point, direction: Vector, normal: Vector | None = None) -> None:
        if normal is not None:
            n_dir = align_zero(normal.dot(direction))
            if n_dir != 0.0:
                head = head + normal.scale(DELTA if n_dir > 0 else -DELTA)
        self.head = head
        self.direction = direction.normalize()

    def get_point(self, t: float) -> Point:
        """Compute the point at distance t along the ray."""
        if is_zero(t):
            return self.head
        return self.head + self.direction.scale(t)

    def find_closest_point(self, points: Iterable[Point] | None) -> Point | None:
        """Return the point nearest to the ray head, or None for no points."""
        if not points:
            return None
        return min(points, key=self.head.distance_squared)

    def find_closest_intersection(
        self, intersections: Iterable[Intersection] | None
    ) -> Intersection | None:
        """Return the intersection nearest to the ray head, or None."""
        if not intersections:
            return None
        return min(intersections, key=lambda hit: self.head.distance_squared(hit.point))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ray):
            return NotImplemented
        return self.head == other.head and self.direction == other.direction

    def __hash__(self) -> int:
        return hash((self.head, self.direction))

    def __repr__(self) -> str:
        return f"Ray(head={self.head!r}, direction={self.direction!r})"
