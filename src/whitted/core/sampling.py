"""Sub-pixel sampling for anti-aliasing.

Two strategies smooth jagged edges by tracing more than one ray per pixel:

Fixed anti-aliasing traces resolution x resolution rays per pixel at
offsets produced by a Blackboard:

    GRID:     the center of every cell of a regular grid
    RANDOM:   uniform random offsets anywhere in the pixel
    JITTERED: one uniform random offset inside every grid cell

Adaptive supersampling samples the four corners of the pixel. If they agree
the pixel is flat and their average is used. Otherwise the pixel is split
into four quarters and each quarter is handled the same way, down to a fixed
depth where the center of the sub-region is sampled. Flat regions cost four
rays while edges get up to 4^depth.

Sub-pixel offsets are fractions of the pixel in [0, 1]: (0, 0) is the top
left corner, (0.5, 0.5) the center.

Example:
    >>> blackboard = Blackboard(SamplingType.GRID, 2)
    >>> blackboard.generate_samples().tolist()
    [[0.25, 0.25], [0.75, 0.25], [0.25, 0.75], [0.75, 0.75]]
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import numpy as np
import numpy.typing as npt

from src.whitted.core.color import Color

# Callback returning the color seen through a sub-pixel offset (x, y)
SampleFunction = Callable[[float, float], Color]


class SamplingType(Enum):
    """How a Blackboard places sub-pixel offsets."""

    GRID = "grid"
    RANDOM = "random"
    JITTERED = "jittered"


# =============================================================================
# Sampling Settings
# =============================================================================


@dataclass(frozen=True)
class AntiAliasing:
    """Fixed anti-aliasing settings.

    Attributes:
        sampling: Offset pattern.
        resolution: Samples per pixel side; a pixel gets resolution^2 rays.
    """

    sampling: SamplingType = SamplingType.JITTERED
    resolution: int = 4

    def __post_init__(self) -> None:
        if not isinstance(self.sampling, SamplingType):
            raise ValueError(f"Unknown sampling type: {self.sampling!r}")
        if self.resolution <= 0:
            raise ValueError(f"Anti-aliasing resolution must be positive, got {self.resolution}")


@dataclass(frozen=True)
class AdaptiveSupersampling:
    """Adaptive supersampling settings.

    Attributes:
        depth: Maximum number of subdivisions of a pixel.
        color_tolerance: Corners closer than this (Euclidean RGB distance on
            the 0-255 scale) count as the same color. Default 1.0.
    """

    depth: int
    color_tolerance: float = 1.0

    def __post_init__(self) -> None:
        if self.depth <= 0:
            raise ValueError(f"Adaptive supersampling depth must be positive, got {self.depth}")
        if self.color_tolerance < 0:
            raise ValueError(f"Color tolerance must be non-negative, got {self.color_tolerance}")


# =============================================================================
# Fixed Pattern Sampling
# =============================================================================


class Blackboard:
    """Generator of sub-pixel offsets for fixed anti-aliasing.

    Args:
        sampling: Offset pattern.
        resolution: Samples per pixel side.
        seed: Optional random seed for RANDOM and JITTERED patterns.

    Raises:
        ValueError: If the resolution is not positive.
    """

    def __init__(self, sampling: SamplingType, resolution: int, seed: int | None = None) -> None:
        if resolution <= 0:
            raise ValueError(f"Blackboard resolution must be positive, got {resolution}")
        self.sampling = sampling
        self.resolution = resolution
        self._rng = np.random.default_rng(seed)
        # Generator objects are not safe to share between threads
        self._lock = threading.Lock()

    @property
    def sample_count(self) -> int:
        return self.resolution * self.resolution

    def generate_samples(self) -> npt.NDArray[np.float64]:
        """Generate one set of offsets.

        Returns:
            Array of shape (resolution^2, 2) with (x, y) offsets in [0, 1).
            Grid-based patterns are ordered row by row.
        """
        n = self.resolution
        rows, cols = np.indices((n, n), dtype=np.float64)
        cells = np.stack([cols.ravel(), rows.ravel()], axis=1)

        if self.sampling is SamplingType.GRID:
            return (cells + 0.5) / n

        with self._lock:
            jitter = self._rng.random((n * n, 2))
        if self.sampling is SamplingType.RANDOM:
            return jitter
        return (cells + jitter) / n


def average_samples(sample: SampleFunction, offsets: npt.NDArray[np.float64]) -> Color:
    """Trace every offset and return the mean color."""
    total = Color.BLACK.add(*(sample(float(x), float(y)) for x, y in offsets))
    return total.scale(1.0 / len(offsets))


# =============================================================================
# Adaptive Supersampling
# =============================================================================


def _similar(colors: tuple[Color, ...], tolerance: float) -> bool:
    return all(
        colors[i].distance(colors[j]) < tolerance
        for i in range(len(colors))
        for j in range(i + 1, len(colors))
    )


def adaptive_supersample(
    sample: SampleFunction,
    depth: int,
    tolerance: float,
    x: float = 0.0,
    y: float = 0.0,
    size: float = 1.0,
    level: int = 0,
) -> Color:
    """Recursively supersample a square region of a pixel.

    Args:
        sample: Returns the color through a sub-pixel offset.
        depth: Maximum subdivision depth.
        tolerance: Color distance under which corners are considered equal.
        x: Left edge of the region, as a pixel fraction.
        y: Top edge of the region, as a pixel fraction.
        size: Side of the region, as a pixel fraction.
        level: Current subdivision depth.

    Returns:
        The estimated average color of the region.
    """
    if level >= depth:
        half = size / 2.0
        return sample(x + half, y + half)

    corners = (
        sample(x, y),
        sample(x + size, y),
        sample(x, y + size),
        sample(x + size, y + size),
    )
    if _similar(corners, tolerance):
        return corners[0].add(*corners[1:]).scale(0.25)

    half = size / 2.0
    quarters = [
        adaptive_supersample(sample, depth, tolerance, qx, qy, half, level + 1)
        for qx, qy in ((x, y), (x + half, y), (x, y + half), (x + half, y + half))
    ]
    return quarters[0].add(*quarters[1:]).scale(0.25)
