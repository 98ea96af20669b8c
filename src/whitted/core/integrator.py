"""Recursive Whitted-style shading.

This module implements the ray tracers that turn a camera ray into a color.
SimpleRayTracer follows the classic recursive model:

    color = ambient * kA
          + emission
          + sum over lights of  I(p) * ktr * (kD * |l.n| + kS * max(0, -v.r)^shininess)
          + kR * trace(reflected ray) + kT * trace(refracted ray)

The reflected and refracted contributions recurse with an attenuation
factor k (the running product of kR/kT along the path). Recursion stops when
the level counter reaches 1 or when k drops below min_k in every channel.
Shadows are partial: a shadow ray toward each light multiplies the kT of
every surface in between, so transparent occluders let light through.

Per-hit shading state lives in two small frozen records, SurfacePoint and
LightSample, built fresh for every computation. Nothing is written back to
the scene, which keeps trace_ray safe to call from many threads at once.

Example:
    >>> from src.whitted.core.color import Color
    >>> from src.whitted.core.ray import Point, Ray, Vector
    >>> from src.whitted.geometry.sphere import Sphere
    >>> from src.whitted.scene.lights import AmbientLight
    >>> from src.whitted.scene.scene import Scene
    >>> scene = Scene("ambient", ambient_light=AmbientLight(Color(40.0, 40.0, 40.0)))
    >>> _ = scene.add_geometries(Sphere(Point(0.0, 0.0, -5.0), 1.0))
    >>> tracer = SimpleRayTracer(scene)
    >>> tracer.trace_ray(Ray(Point.ZERO, Vector(0.0, 0.0, -1.0)))
    Color(r=40.0, g=40.0, b=40.0)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass

from src.whitted.core.color import Color, Double3
from src.whitted.core.ray import InvalidVector, Point, Ray, Vector, align_zero
from src.whitted.geometry.base import Geometry, Intersection
from src.whitted.materials.material import Material
from src.whitted.scene.lights import LightSource
from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Recursion depth for reflection/refraction rays
MAX_LEVEL = 10

# Attenuation threshold below which a contribution is dropped
MIN_K = 0.001


# =============================================================================
# Shading Records
# =============================================================================


@dataclass(frozen=True)
class SurfacePoint:
    """Shading inputs for one ray-surface hit.

    Attributes:
        geometry: The surface that was hit.
        point: The hit point.
        normal: Unit surface normal at the point.
        v: Unit direction of the incoming ray.
        v_n: v . normal, aligned to zero. Never zero for a shaded point.
        material: The surface material.
    """

    geometry: Geometry
    point: Point
    normal: Vector
    v: Vector
    v_n: float
    material: Material


@dataclass(frozen=True)
class LightSample:
    """One light as seen from a SurfacePoint.

    Attributes:
        light: The light source.
        l: Unit direction from the light toward the point.
        l_n: l . normal, aligned to zero.
    """

    light: LightSource
    l: Vector
    l_n: float


# =============================================================================
# Ray Tracers
# =============================================================================


class RayTracerBase(ABC):
    """Computes the color seen along a ray.

    Args:
        scene: The scene to trace against (None only for NullRayTracer).
    """

    def __init__(self, scene: Scene | None) -> None:
        self.scene = scene

    @abstractmethod
    def trace_ray(self, ray: Ray) -> Color:
        """Return the color seen along a ray."""


class NullRayTracer(RayTracerBase):
    """A tracer over no scene at all; every ray is black."""

    def __init__(self) -> None:
        super().__init__(None)

    def trace_ray(self, ray: Ray) -> Color:
        return Color.BLACK


class SimpleRayTracer(RayTracerBase):
    """Recursive Phong tracer with shadows, reflection and refraction.

    Args:
        scene: The scene to render.
        max_level: Recursion depth; 1 means local shading only. Default 10.
        min_k: Attenuation threshold for dropping contributions. Default 0.001.

    Raises:
        ValueError: If max_level < 1 or min_k is not positive.
    """

    def __init__(self, scene: Scene, max_level: int = MAX_LEVEL, min_k: float = MIN_K) -> None:
        if max_level < 1:
            raise ValueError(f"max_level must be at least 1, got {max_level}")
        if min_k <= 0:
            raise ValueError(f"min_k must be positive, got {min_k}")
        super().__init__(scene)
        self.max_level = max_level
        self.min_k = min_k

    def trace_ray(self, ray: Ray) -> Color:
        try:
            hit = self._find_closest(ray)
            if hit is None:
                return self.scene.background
            return self._calc_color(hit, ray, self.max_level, Double3.ONE)
        except InvalidVector as exc:
            logger.debug("Degenerate geometry while tracing %r: %s", ray, exc)
            return self.scene.background

    def _find_closest(self, ray: Ray) -> Intersection | None:
        return ray.find_closest_intersection(self.scene.geometries.intersect(ray))

    # -------------------------------------------------------------------------
    # Shading
    # -------------------------------------------------------------------------

    def _surface_point(self, hit: Intersection, ray: Ray) -> SurfacePoint | None:
        """Build the shading record for a hit, or None for a grazing hit."""
        normal = hit.geometry.normal_at(hit.point)
        v = ray.direction
        v_n = align_zero(v.dot(normal))
        if v_n == 0.0:
            return None
        return SurfacePoint(hit.geometry, hit.point, normal, v, v_n, hit.geometry.material)

    def _calc_color(self, hit: Intersection, ray: Ray, level: int, k: Double3) -> Color:
        surface = self._surface_point(hit, ray)
        if surface is None:
            return hit.geometry.emission

        color = self.scene.ambient_light.intensity.scale(surface.material.ka)
        color = color + self._local_effects(surface, k)
        if level > 1:
            color = color + self._global_effects(surface, level, k)
        return color

    def _light_samples(self, surface: SurfacePoint) -> Iterator[LightSample]:
        for light in self.scene.lights:
            try:
                l = light.direction_at(surface.point)
            except InvalidVector:
                # The point sits on the light itself
                continue
            l_n = align_zero(l.dot(surface.normal))
            if l_n * surface.v_n > 0:
                yield LightSample(light, l, l_n)

    def _local_effects(self, surface: SurfacePoint, k: Double3) -> Color:
        material = surface.material
        color = surface.geometry.emission
        for sample in self._light_samples(surface):
            ktr = self._transparency(surface, sample)
            if (ktr * k).lower_than(self.min_k):
                continue
            intensity = sample.light.intensity_at(surface.point)
            diffuse = material.kd.scale(abs(sample.l_n))
            specular = self._specular(surface, sample)
            color = color + intensity.scale(ktr * (diffuse + specular))
        return color

    def _specular(self, surface: SurfacePoint, sample: LightSample) -> Double3:
        n = surface.normal
        r = sample.l + n.scale(-2.0 * sample.l_n)
        minus_v_r = align_zero(-surface.v.dot(r))
        if minus_v_r <= 0:
            return Double3.ZERO
        return surface.material.ks.scale(minus_v_r**surface.material.shininess)

    def _transparency(self, surface: SurfacePoint, sample: LightSample) -> Double3:
        """Product of kT over every surface between the point and the light."""
        shadow_ray = Ray(surface.point, -sample.l, surface.normal)
        hits = self.scene.geometries.intersect(shadow_ray)
        if hits is None:
            return Double3.ONE

        light_distance = sample.light.distance(surface.point)
        ktr = Double3.ONE
        for hit in hits:
            if align_zero(hit.point.distance(surface.point) - light_distance) < 0:
                ktr = ktr * hit.geometry.material.kt
        return ktr

    def _global_effects(self, surface: SurfacePoint, level: int, k: Double3) -> Color:
        v = surface.v
        n = surface.normal
        material = surface.material

        reflected = Ray(surface.point, v + n.scale(-2.0 * surface.v_n), n)
        refracted = Ray(surface.point, v, n)
        return self._global_effect(reflected, material.kr, level, k).add(
            self._global_effect(refracted, material.kt, level, k)
        )

    def _global_effect(self, ray: Ray, kx: Double3, level: int, k: Double3) -> Color:
        kkx = k * kx
        if kkx.lower_than(self.min_k):
            return Color.BLACK
        try:
            hit = self._find_closest(ray)
            if hit is None:
                return self.scene.background.scale(kx)
            return self._calc_color(hit, ray, level - 1, kkx).scale(kx)
        except InvalidVector as exc:
            # Drop only this secondary contribution
            logger.debug("Degenerate geometry on secondary ray %r: %s", ray, exc)
            return Color.BLACK
