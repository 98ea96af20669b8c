"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Points, vectors, rays and the near-zero helpers
    color: Double3 coefficients and RGB colors
    integrator: Recursive shading engine (Whitted-style ray tracer)
    sampling: Sub-pixel sample generation and adaptive supersampling
    scheduler: Pixel dispatch (sequential, data-parallel, worker pool)

Only the algebra types are re-exported here.
"""

from .color import Color, Double3
from .ray import (
    DELTA,
    ZERO_EPSILON,
    InvalidVector,
    Point,
    Ray,
    Vector,
    align_zero,
    is_zero,
)

# Note: integrator and scheduler are NOT imported here to avoid circular imports.
# Import directly from src.whitted.core.integrator or src.whitted.core.scheduler.

__all__ = [
    "Point",
    "Vector",
    "Ray",
    "InvalidVector",
    "align_zero",
    "is_zero",
    "DELTA",
    "ZERO_EPSILON",
    "Color",
    "Double3",
]
