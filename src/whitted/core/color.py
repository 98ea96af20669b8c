"""Three-channel coefficients and RGB colors.

Double3 carries per-channel material and attenuation coefficients (kA, kD,
kS, kT, kR and the running attenuation factor k). Color carries radiance.
Both are immutable so scenes and intermediate shading results can be shared
freely across render threads.

Color channels use the 0-255 display scale (Color.WHITE is 255 on every
channel) but are unbounded while tracing. Clamping and tone mapping happen
only when the image sink writes a file.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Double3:
    """An immutable triple of floats used as per-channel coefficients.

    Attributes:
        d1: First channel (red).
        d2: Second channel (green).
        d3: Third channel (blue).
    """

    d1: float
    d2: float
    d3: float

    ZERO: ClassVar[Double3]
    ONE: ClassVar[Double3]

    @classmethod
    def of(cls, value: float | Double3) -> Double3:
        """Promote a scalar to a uniform triple; triples pass through."""
        if isinstance(value, Double3):
            return value
        return cls(float(value), float(value), float(value))

    def __add__(self, other: Double3) -> Double3:
        return Double3(self.d1 + other.d1, self.d2 + other.d2, self.d3 + other.d3)

    def __sub__(self, other: Double3) -> Double3:
        return Double3(self.d1 - other.d1, self.d2 - other.d2, self.d3 - other.d3)

    def __mul__(self, other: float | Double3) -> Double3:
        if isinstance(other, Double3):
            return self.product(other)
        return self.scale(other)

    def scale(self, factor: float) -> Double3:
        return Double3(self.d1 * factor, self.d2 * factor, self.d3 * factor)

    def product(self, other: Double3) -> Double3:
        """Per-channel product."""
        return Double3(self.d1 * other.d1, self.d2 * other.d2, self.d3 * other.d3)

    def reduce(self, divisor: float) -> Double3:
        return Double3(self.d1 / divisor, self.d2 / divisor, self.d3 / divisor)

    def lower_than(self, k: float) -> bool:
        """Check whether every channel is strictly below k."""
        return self.d1 < k and self.d2 < k and self.d3 < k

    def is_non_negative(self) -> bool:
        return self.d1 >= 0.0 and self.d2 >= 0.0 and self.d3 >= 0.0


Double3.ZERO = Double3(0.0, 0.0, 0.0)
Double3.ONE = Double3(1.0, 1.0, 1.0)


@dataclass(frozen=True)
class Color:
    """An immutable RGB radiance value.

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
    """

    r: float
    g: float
    b: float

    BLACK: ClassVar[Color]
    WHITE: ClassVar[Color]

    @property
    def rgb(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def add(self, *colors: Color) -> Color:
        """Sum this color with any number of others."""
        r, g, b = self.r, self.g, self.b
        for color in colors:
            r += color.r
            g += color.g
            b += color.b
        return Color(r, g, b)

    def __add__(self, other: Color) -> Color:
        return self.add(other)

    def scale(self, factor: float | Double3) -> Color:
        """Scale by a scalar or per channel by a Double3."""
        if isinstance(factor, Double3):
            return Color(self.r * factor.d1, self.g * factor.d2, self.b * factor.d3)
        return Color(self.r * factor, self.g * factor, self.b * factor)

    def reduce(self, divisor: float) -> Color:
        if divisor == 0:
            raise ZeroDivisionError("Cannot reduce a color by zero")
        return Color(self.r / divisor, self.g / divisor, self.b / divisor)

    def distance(self, other: Color) -> float:
        """Euclidean distance between two colors in RGB space."""
        return math.sqrt(
            (self.r - other.r) ** 2 + (self.g - other.g) ** 2 + (self.b - other.b) ** 2
        )

    def is_non_negative(self) -> bool:
        return self.r >= 0.0 and self.g >= 0.0 and self.b >= 0.0


Color.BLACK = Color(0.0, 0.0, 0.0)
Color.WHITE = Color(255.0, 255.0, 255.0)
