"""Light sources for Phong shading.

Lights come in two flavours:

    AmbientLight: uniform background illumination, scaled per geometry by kA
    LightSource:  positional or directional lights that produce diffuse and
                  specular terms and cast shadows

Every LightSource answers three questions about a surface point p:

    intensity_at(p)  -> Color   radiance arriving at p
    direction_at(p)  -> Vector  unit direction from the light toward p
    distance(p)      -> float   how far a shadow ray must travel

Point and spot lights fall off as 1 / (kc + kl * d + kq * d^2).

Example:
    >>> from src.whitted.core.color import Color
    >>> from src.whitted.core.ray import Point
    >>> light = PointLight(Color(255.0, 255.0, 255.0), Point(0.0, 0.0, 5.0), kl=0.1)
    >>> light.intensity_at(Point(0.0, 0.0, 0.0))
    Color(r=170.0, g=170.0, b=170.0)
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from src.whitted.core.color import Color, Double3
from src.whitted.core.ray import Point, Vector


@dataclass(frozen=True)
class AmbientLight:
    """Uniform ambient illumination.

    Attributes:
        color: The ambient light color. Default black (no ambient light).
        ka: Per-channel attenuation of the ambient color. Default 1.
    """

    color: Color = Color.BLACK
    ka: Double3 | float = Double3.ONE

    def __post_init__(self) -> None:
        object.__setattr__(self, "ka", Double3.of(self.ka))

    @property
    def intensity(self) -> Color:
        return self.color.scale(self.ka)


class LightSource(ABC):
    """A light that illuminates points from a direction."""

    @abstractmethod
    def intensity_at(self, point: Point) -> Color:
        """Radiance arriving at a point."""

    @abstractmethod
    def direction_at(self, point: Point) -> Vector:
        """Unit vector from the light toward a point.

        Raises:
            InvalidVector: If the point coincides with the light position.
        """

    @abstractmethod
    def distance(self, point: Point) -> float:
        """Distance from the light to a point (math.inf for directional)."""


def _check_attenuation(kc: float, kl: float, kq: float) -> None:
    if kc < 0 or kl < 0 or kq < 0:
        raise ValueError(f"Attenuation factors must be non-negative, got kc={kc}, kl={kl}, kq={kq}")
    if kc == 0 and kl == 0 and kq == 0:
        raise ValueError("At least one attenuation factor must be positive")


@dataclass(frozen=True)
class DirectionalLight(LightSource):
    """A light infinitely far away, shining along one direction.

    Attributes:
        color: The light intensity.
        direction: Direction the light travels. Stored normalized.
    """

    color: Color
    direction: Vector

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", self.direction.normalize())

    def intensity_at(self, point: Point) -> Color:
        return self.color

    def direction_at(self, point: Point) -> Vector:
        return self.direction

    def distance(self, point: Point) -> float:
        return math.inf


@dataclass(frozen=True)
class PointLight(LightSource):
    """An omnidirectional light at a position, with distance falloff.

    Attributes:
        color: The light intensity at distance zero.
        position: Where the light is.
        kc: Constant attenuation factor. Default 1.
        kl: Linear attenuation factor. Default 0.
        kq: Quadratic attenuation factor. Default 0.
    """

    color: Color
    position: Point
    kc: float = 1.0
    kl: float = 0.0
    kq: float = 0.0

    def __post_init__(self) -> None:
        _check_attenuation(self.kc, self.kl, self.kq)

    def attenuation(self, point: Point) -> float:
        d = self.position.distance(point)
        return self.kc + self.kl * d + self.kq * d * d

    def intensity_at(self, point: Point) -> Color:
        return self.color.reduce(self.attenuation(point))

    def direction_at(self, point: Point) -> Vector:
        return (point - self.position).normalize()

    def distance(self, point: Point) -> float:
        return self.position.distance(point)


@dataclass(frozen=True, kw_only=True)
class SpotLight(PointLight):
    """A point light that shines mostly along one direction.

    The point-light intensity is scaled by max(0, l . direction) raised to
    narrow_beam; larger exponents give a tighter beam.

    Attributes:
        direction: The beam axis. Stored normalized.
        narrow_beam: Beam exponent (>= 1). Default 1.
    """

    direction: Vector
    narrow_beam: float = 1.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.narrow_beam < 1:
            raise ValueError(f"Narrow beam exponent must be >= 1, got {self.narrow_beam}")
        object.__setattr__(self, "direction", self.direction.normalize())

    def intensity_at(self, point: Point) -> Color:
        factor = max(0.0, self.direction_at(point).dot(self.direction))
        if factor == 0.0:
            return Color.BLACK
        return super().intensity_at(point).scale(factor**self.narrow_beam)
