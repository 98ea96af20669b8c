"""Phong material coefficients for scene geometries.

Each geometry carries one Material describing how it responds to light:

    kA: ambient reflection (scales the scene's ambient light)
    kD: diffuse reflection (Lambert term, |l . n|)
    kS: specular reflection (Phong term, (-v . r) ** shininess)
    kT: transmittance (refraction ray weight and shadow transparency)
    kR: reflectance (mirror ray weight)

The defaults describe a fully ambient, opaque, matte surface. Coefficients
may be given as a single float (applied to all three channels) or as a
Double3 for per-channel control.

Example:
    >>> from src.whitted.materials.material import Material
    >>> glass = Material(kd=0.2, ks=0.2, shininess=30, kt=0.6)
    >>> glass.kt
    Double3(d1=0.6, d2=0.6, d3=0.6)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.color import Double3

_COEFFICIENTS = ("ka", "kd", "ks", "kt", "kr")


@dataclass(frozen=True)
class Material:
    """Reflectance coefficients of a surface.

    Attributes:
        ka: Ambient coefficient. Default 1 on every channel.
        kd: Diffuse coefficient. Default 0.
        ks: Specular coefficient. Default 0.
        kt: Transmittance coefficient. Default 0 (opaque).
        kr: Reflectance coefficient. Default 0 (no mirror reflection).
        shininess: Specular exponent. Default 0.

    Raises:
        ValueError: If any coefficient channel or the shininess is negative.
    """

    ka: Double3 | float = Double3.ONE
    kd: Double3 | float = Double3.ZERO
    ks: Double3 | float = Double3.ZERO
    kt: Double3 | float = Double3.ZERO
    kr: Double3 | float = Double3.ZERO
    shininess: int = 0

    def __post_init__(self) -> None:
        for name in _COEFFICIENTS:
            value = Double3.of(getattr(self, name))
            if not value.is_non_negative():
                raise ValueError(f"Material coefficient {name} = {value} has a negative channel.")
            object.__setattr__(self, name, value)

        if self.shininess < 0:
            raise ValueError(f"Shininess = {self.shininess} is negative.")

    @property
    def is_opaque(self) -> bool:
        return self.kt == Double3.ZERO
