"""A Cornell box built from triangles, spheres and local lights.

The box is the usual smoke test for a Whitted tracer: every shading path
shows up somewhere in one frame.

Contents:
- Five open-front walls made of two triangles each. The left wall is red,
  the right wall green, and back, floor and ceiling are white.
- Three spheres: plain diffuse, mirror, and glass.
- A point light below the ceiling, plus an optional spot light that
  points at the glass sphere.

The box spans 0 to box_size on every axis, with the back wall at z=0 and the
open front at z=box_size. The camera sits outside the open front and looks
down -Z.

Example:
    >>> from src.whitted.camera.pinhole import build_camera
    >>> from src.whitted.core.integrator import SimpleRayTracer
    >>> from src.whitted.core.scheduler import Renderer
    >>> from src.whitted.scene.cornell_box import CornellBoxParams, create_cornell_box_scene
    >>>
    >>> scene, config = create_cornell_box_scene(CornellBoxParams(resolution=(200, 200)))
    >>> renderer = Renderer(build_camera(config), SimpleRayTracer(scene))
    >>> renderer.render_image().write_to_image("cornell_box")
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.camera.pinhole import CameraConfig
from src.whitted.core.color import Color, Double3
from src.whitted.core.ray import Point, Vector
from src.whitted.geometry.polygon import Triangle
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import Material
from src.whitted.scene.lights import AmbientLight, PointLight, SpotLight
from src.whitted.scene.scene import Scene

# =============================================================================
# Cornell Box Constants
# =============================================================================

# Classic Cornell box dimensions (approximately 555x555x555 units)
BOX_SIZE = 555.0

# Wall colors (normalized RGB values matching original Cornell box measurements)
RED_WALL_ALBEDO = (0.65, 0.05, 0.05)
GREEN_WALL_ALBEDO = (0.12, 0.45, 0.15)
WHITE_WALL_ALBEDO = (0.73, 0.73, 0.73)

# Light falloff, tuned for a box of about BOX_SIZE units
LIGHT_KL = 0.0005
LIGHT_KQ = 0.0000025

# Camera distance in front of the open face of the box
CAMERA_DISTANCE = 800.0


# =============================================================================
# Cornell Box Parameters
# =============================================================================


@dataclass
class CornellBoxParams:
    """Parameters for configuring a Cornell box scene.

    All parameters have defaults matching the classic Cornell box
    configuration.

    Attributes:
        box_size: The size of the box in each dimension. Default 555.
        light_intensity: Brightness of the lights on the 0-255 color scale.
            Default is 300.0, which lights the walls without saturating.
        light_color: RGB color of the light (each component in [0, 1]).
            Default is white (1.0, 1.0, 1.0).
        left_wall_color: RGB albedo of the left wall. Default red.
        right_wall_color: RGB albedo of the right wall. Default green.
        back_wall_color: RGB albedo of the back wall, floor and ceiling.
            Default white.
        ambient: Ambient light level on the 0-255 scale. Default 25.
        spot_light: Whether to add the spot light on the glass sphere.
        resolution: Image size (nx, ny) for the returned camera config.

    Example:
        >>> params = CornellBoxParams()
        >>> params.light_intensity
        300.0
        >>> custom = CornellBoxParams(
        ...     light_intensity=400.0,
        ...     light_color=(1.0, 0.9, 0.8),  # Warm light
        ...     left_wall_color=(0.2, 0.2, 0.8),  # Blue wall
        ... )
    """

    box_size: float = BOX_SIZE
    light_intensity: float = 300.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    left_wall_color: tuple[float, float, float] = RED_WALL_ALBEDO
    right_wall_color: tuple[float, float, float] = GREEN_WALL_ALBEDO
    back_wall_color: tuple[float, float, float] = WHITE_WALL_ALBEDO
    ambient: float = 25.0
    spot_light: bool = True
    resolution: tuple[int, int] = (500, 500)

    def __post_init__(self) -> None:
        if self.box_size <= 0:
            raise ValueError(f"box_size must be positive, got {self.box_size}")
        if self.light_intensity < 0:
            raise ValueError(f"light_intensity must be non-negative, got {self.light_intensity}")
        if self.ambient < 0:
            raise ValueError(f"ambient must be non-negative, got {self.ambient}")
        for name in ("light_color", "left_wall_color", "right_wall_color", "back_wall_color"):
            if any(c < 0 for c in getattr(self, name)):
                raise ValueError(f"{name} components must be non-negative")


# =============================================================================
# Cornell Box Factory
# =============================================================================


def _wall_material(albedo: tuple[float, float, float]) -> Material:
    coefficients = Double3(*albedo)
    return Material(ka=coefficients, kd=coefficients, ks=0.05, shininess=10)


def _wall(corners: tuple[Point, Point, Point, Point], material: Material) -> list[Triangle]:
    """Split a rectangle given by its corners in boundary order into two triangles."""
    p0, p1, p2, p3 = corners
    return [Triangle(p0, p1, p2, material=material), Triangle(p0, p2, p3, material=material)]


def create_cornell_box_scene(
    params: CornellBoxParams | None = None,
) -> tuple[Scene, CameraConfig]:
    """Create a Cornell box scene with standard configuration.

    The coordinate system places the box origin at (0, 0, 0) with:
    - X-axis: left to right (0 to box_size)
    - Y-axis: floor to ceiling (0 to box_size)
    - Z-axis: back to front (0 to box_size), camera looks toward -Z

    Args:
        params: Optional CornellBoxParams for customizing light and wall colors.
            If None, uses default CornellBoxParams().

    Returns:
        A tuple of (Scene, CameraConfig) where:
        - Scene contains all geometry and lights
        - CameraConfig is set up for the standard view; pass it to
          build_camera()

    Example:
        >>> scene, config = create_cornell_box_scene()
        >>> len(scene.geometries), len(scene.lights)
        (13, 2)
    """
    # Use default params if none provided
    if params is None:
        params = CornellBoxParams()
    b = params.box_size

    scene = Scene(
        "Cornell box",
        ambient_light=AmbientLight(Color(params.ambient, params.ambient, params.ambient)),
    )

    # =========================================================================
    # Walls (5 rectangles forming the box)
    # =========================================================================

    red = _wall_material(params.left_wall_color)
    green = _wall_material(params.right_wall_color)
    white = _wall_material(params.back_wall_color)

    # Left wall - YZ plane at x=0
    scene.add_geometries(
        *_wall((Point(0, 0, 0), Point(0, b, 0), Point(0, b, b), Point(0, 0, b)), red)
    )
    # Right wall - YZ plane at x=box_size
    scene.add_geometries(
        *_wall((Point(b, 0, 0), Point(b, 0, b), Point(b, b, b), Point(b, b, 0)), green)
    )
    # Back wall - XY plane at z=0
    scene.add_geometries(
        *_wall((Point(0, 0, 0), Point(b, 0, 0), Point(b, b, 0), Point(0, b, 0)), white)
    )
    # Floor - XZ plane at y=0
    scene.add_geometries(
        *_wall((Point(0, 0, 0), Point(0, 0, b), Point(b, 0, b), Point(b, 0, 0)), white)
    )
    # Ceiling - XZ plane at y=box_size
    scene.add_geometries(
        *_wall((Point(0, b, 0), Point(b, b, 0), Point(b, b, b), Point(0, b, b)), white)
    )

    # =========================================================================
    # Spheres (3 spheres with different materials)
    # =========================================================================

    radius = b * 0.15

    # Diffuse sphere (white) - left side, on floor, toward the front
    scene.add_geometries(
        Sphere(
            Point(b * 0.27, radius, b * 0.65),
            radius,
            emission=Color(30.0, 30.0, 30.0),
            material=Material(ka=0.5, kd=0.6, ks=0.3, shininess=50),
        )
    )

    # Mirror sphere - right side, on floor, toward the front
    scene.add_geometries(
        Sphere(
            Point(b * 0.73, radius, b * 0.65),
            radius,
            material=Material(ka=0.1, kd=0.1, ks=0.6, shininess=200, kr=0.8),
        )
    )

    # Glass sphere - center, toward the back
    glass_center = Point(b * 0.5, radius * 1.5, b * 0.35)
    scene.add_geometries(
        Sphere(
            glass_center,
            radius,
            emission=Color(0.0, 15.0, 30.0),
            material=Material(ka=0.1, kd=0.1, ks=0.6, shininess=300, kt=0.7),
        )
    )

    # =========================================================================
    # Lights
    # =========================================================================

    light = Color(*params.light_color).scale(params.light_intensity)
    scene.add_lights(
        PointLight(light, Point(b * 0.5, b * 0.95, b * 0.5), kl=LIGHT_KL, kq=LIGHT_KQ)
    )
    if params.spot_light:
        spot_position = Point(b * 0.2, b * 0.8, b * 0.9)
        scene.add_lights(
            SpotLight(
                light,
                spot_position,
                kl=LIGHT_KL,
                kq=LIGHT_KQ,
                direction=glass_center - spot_position,
                narrow_beam=4.0,
            )
        )

    # =========================================================================
    # Camera Setup
    # =========================================================================

    # Camera positioned outside the box, looking in through the open front
    config = CameraConfig(
        location=Point(b / 2.0, b / 2.0, b + CAMERA_DISTANCE),
        v_to=Vector(0.0, 0.0, -1.0),
        v_up=Vector(0.0, 1.0, 0.0),
        vp_width=b * 1.05,
        vp_height=b * 1.05,
        vp_distance=CAMERA_DISTANCE,
        resolution=params.resolution,
    )

    return scene, config
