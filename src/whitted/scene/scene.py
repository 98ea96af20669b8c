"""Scene container: geometry, lights, ambient light and background.

A Scene is assembled once, before rendering, and treated as read-only while
pixels are traced. Nothing here is global: a scene without ambient light
simply keeps the default AmbientLight().

Example:
    >>> from src.whitted.core.color import Color
    >>> from src.whitted.core.ray import Point
    >>> from src.whitted.geometry.sphere import Sphere
    >>> from src.whitted.scene.lights import PointLight
    >>> scene = Scene("demo", background=Color(20.0, 20.0, 20.0))
    >>> scene.add_geometries(Sphere(Point(0.0, 0.0, -5.0), 1.0)).add_lights(
    ...     PointLight(Color(255.0, 255.0, 255.0), Point(0.0, 5.0, 0.0))
    ... ).validate()
    >>> len(scene.geometries), len(scene.lights)
    (1, 1)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.whitted.core.color import Color
from src.whitted.geometry.base import Intersectable
from src.whitted.geometry.geometries import Geometries
from src.whitted.scene.lights import AmbientLight, LightSource


class SceneError(ValueError):
    """Raised when a scene holds content the tracer cannot render."""


@dataclass
class Scene:
    """Everything a ray tracer needs to shade a ray.

    Attributes:
        name: Human readable scene name, used in log messages.
        background: Color returned for rays that hit nothing.
        ambient_light: Uniform ambient light. Default is no ambient light.
        geometries: Composite holding every surface in the scene.
        lights: Light sources; all of them contribute to every hit.
    """

    name: str
    background: Color = Color.BLACK
    ambient_light: AmbientLight = field(default_factory=AmbientLight)
    geometries: Geometries = field(default_factory=Geometries)
    lights: list[LightSource] = field(default_factory=list)

    def add_geometries(self, *geometries: Intersectable) -> Scene:
        self.geometries.add(*geometries)
        return self

    def add_lights(self, *lights: LightSource) -> Scene:
        self.lights.extend(lights)
        return self

    def validate(self) -> None:
        """Check that the scene is well formed before rendering.

        Raises:
            SceneError: If any field holds a value of the wrong type.
        """
        if not isinstance(self.background, Color):
            raise SceneError(f"Scene {self.name!r}: background must be a Color")
        if not isinstance(self.ambient_light, AmbientLight):
            raise SceneError(f"Scene {self.name!r}: ambient_light must be an AmbientLight")
        if not isinstance(self.geometries, Geometries):
            raise SceneError(f"Scene {self.name!r}: geometries must be a Geometries container")
        for light in self.lights:
            if not isinstance(light, LightSource):
                raise SceneError(
                    f"Scene {self.name!r}: {type(light).__name__} is not a LightSource"
                )
