"""Scene module for scene description and lighting.

This module holds everything a ray tracer reads while shading:

Components:
    scene: Scene container (geometries, lights, ambient light, background)
    lights: Ambient, directional, point and spot lights
    cornell_box: Ready-made Cornell box scene and camera configuration

Scenes are built before rendering and are read-only while pixels are
traced, so render threads share them without locking.
"""

from .cornell_box import (
    BOX_SIZE,
    CornellBoxParams,
    create_cornell_box_scene,
)
from .lights import (
    AmbientLight,
    DirectionalLight,
    LightSource,
    PointLight,
    SpotLight,
)
from .scene import Scene, SceneError

__all__ = [
    # Scene container
    "Scene",
    "SceneError",
    # Lights
    "AmbientLight",
    "LightSource",
    "DirectionalLight",
    "PointLight",
    "SpotLight",
    # Cornell box module
    "CornellBoxParams",
    "create_cornell_box_scene",
    "BOX_SIZE",
]
