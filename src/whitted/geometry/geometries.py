"""Composite container of intersectable shapes.

Geometries treats a collection of shapes as one Intersectable. Its
intersect() is a brute-force linear scan: every member is asked in
insertion order and the results are concatenated without sorting. The
closest hit is chosen later by the caller (Ray.find_closest_intersection).
"""

from __future__ import annotations

from collections.abc import Iterator

from src.whitted.core.ray import Ray
from src.whitted.geometry.base import Intersectable, Intersection


class Geometries(Intersectable):
    """An ordered collection of geometries (or nested Geometries)."""

    def __init__(self, *members: Intersectable) -> None:
        self._members: list[Intersectable] = []
        self.add(*members)

    def add(self, *members: Intersectable) -> Geometries:
        """Append members to the collection.

        Raises:
            TypeError: If a member is not Intersectable.
        """
        for member in members:
            if not isinstance(member, Intersectable):
                raise TypeError(f"Cannot add {type(member).__name__} to Geometries")
            self._members.append(member)
        return self

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        result: list[Intersection] | None = None
        for member in self._members:
            hits = member.intersect(ray)
            if hits is not None:
                if result is None:
                    result = []
                result.extend(hits)
        return result

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Intersectable]:
        return iter(self._members)

    def __repr__(self) -> str:
        return f"Geometries({len(self._members)} members)"
