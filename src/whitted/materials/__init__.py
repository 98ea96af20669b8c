"""Materials module for Phong surface coefficients.

Components:
    material: The Material dataclass (kA, kD, kS, kT, kR, shininess)

A Material is attached to every geometry and read by the shading engine.
Materials are immutable and validated on construction.
"""

from .material import Material

__all__ = ["Material"]
