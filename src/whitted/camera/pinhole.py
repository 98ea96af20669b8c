"""Pinhole camera model for perspective projection ray generation.

The camera is a point (the pinhole) plus a view plane at distance
vp_distance along the view direction v_to. The view plane is vp_width by
vp_height world units and is split into an nx by ny pixel grid. A primary
ray starts at the pinhole and passes through a point inside one pixel.

The camera builds an orthonormal basis (v_right, v_up, v_to):
- v_to: view direction
- v_up: up in the image plane
- v_right: v_to x v_up, right in the image plane

Row 0 is the top row of the image, so the row axis runs against v_up.

Configuration goes through CameraConfig and build_camera(), which checks
everything once. A Camera that exists is always valid.

Example:
    >>> from src.whitted.core.ray import Point, Vector
    >>> config = CameraConfig(
    ...     location=Point(0.0, 0.0, 0.0),
    ...     v_to=Vector(0.0, 0.0, -1.0),
    ...     v_up=Vector(0.0, 1.0, 0.0),
    ...     vp_width=3.0,
    ...     vp_height=3.0,
    ...     vp_distance=1.0,
    ...     resolution=(3, 3),
    ... )
    >>> camera = build_camera(config)
    >>> camera.construct_ray(3, 3, 1, 1).direction
    Vector(0.0, 0.0, -1.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.ray import InvalidVector, Point, Ray, Vector, is_zero

# =============================================================================
# Camera Configuration
# =============================================================================


class MissingCameraFieldError(ValueError):
    """Raised by build_camera() when a required setting was never given.

    Attributes:
        field_name: Name of the missing CameraConfig field.
    """

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Missing rendering data: Camera.{field_name}")
        self.field_name = field_name


@dataclass
class CameraConfig:
    """Settings for a pinhole camera.

    The orientation is given either as an explicit orthogonal pair
    (v_to, v_up) or as a target point to look at, optionally with an
    approximate up vector (default +Y) that is orthogonalized against the
    view direction.

    Attributes:
        location: Camera position (the pinhole).
        v_to: View direction. Must be orthogonal to v_up.
        v_up: Up direction.
        target: Point to look at, used when v_to/v_up are not given.
        up: Approximate up vector for target mode.
        vp_width: View plane width in world units.
        vp_height: View plane height in world units.
        vp_distance: Distance from the pinhole to the view plane.
        resolution: Image size (nx, ny) in pixels.
    """

    location: Point | None = None
    v_to: Vector | None = None
    v_up: Vector | None = None
    target: Point | None = None
    up: Vector | None = None
    vp_width: float = 0.0
    vp_height: float = 0.0
    vp_distance: float = 0.0
    resolution: tuple[int, int] = (1, 1)


# =============================================================================
# Camera
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """An immutable, validated pinhole camera. Build with build_camera()."""

    location: Point
    v_to: Vector
    v_up: Vector
    v_right: Vector
    vp_width: float
    vp_height: float
    vp_distance: float
    nx: int
    ny: int

    def construct_ray(
        self,
        nx: int,
        ny: int,
        col: int,
        row: int,
        offset_x: float = 0.5,
        offset_y: float = 0.5,
    ) -> Ray:
        """Build the primary ray through a point inside a pixel.

        Args:
            nx: Number of pixel columns.
            ny: Number of pixel rows.
            col: Pixel column, 0 at the left.
            row: Pixel row, 0 at the top.
            offset_x: Horizontal position inside the pixel in [0, 1].
                Default 0.5 (pixel center).
            offset_y: Vertical position inside the pixel in [0, 1], growing
                downward. Default 0.5 (pixel center).

        Returns:
            A ray from the camera location through the sample point.
        """
        pixel_width = self.vp_width / nx
        pixel_height = self.vp_height / ny
        x_j = (col - (nx - 1) / 2.0 + offset_x - 0.5) * pixel_width
        y_i = -(row - (ny - 1) / 2.0 + offset_y - 0.5) * pixel_height

        p_ij = self.location + self.v_to.scale(self.vp_distance)
        if not is_zero(x_j):
            p_ij = p_ij + self.v_right.scale(x_j)
        if not is_zero(y_i):
            p_ij = p_ij + self.v_up.scale(y_i)
        return Ray(self.location, p_ij - self.location)


# =============================================================================
# Camera Setup
# =============================================================================

DEFAULT_UP = Vector(0.0, 1.0, 0.0)


def _orientation(config: CameraConfig, location: Point) -> tuple[Vector, Vector]:
    if config.v_to is not None or config.v_up is not None:
        if config.v_to is None:
            raise MissingCameraFieldError("v_to")
        if config.v_up is None:
            raise MissingCameraFieldError("v_up")
        if not is_zero(config.v_to.dot(config.v_up)):
            raise ValueError("Camera v_to and v_up must be orthogonal")
        return config.v_to.normalize(), config.v_up.normalize()

    if config.target is None:
        raise MissingCameraFieldError("v_to")
    if config.target == location:
        raise ValueError("Camera target must differ from its location")
    v_to = (config.target - location).normalize()
    up = config.up if config.up is not None else DEFAULT_UP
    try:
        v_right = v_to.cross(up).normalize()
    except InvalidVector as exc:
        raise ValueError("Camera up vector must not be parallel to the view direction") from exc
    return v_to, v_right.cross(v_to).normalize()


def build_camera(config: CameraConfig) -> Camera:
    """Validate a configuration and build the camera.

    Args:
        config: The camera settings.

    Returns:
        The validated camera.

    Raises:
        MissingCameraFieldError: If the location, the orientation or a view
            plane dimension was not set.
        ValueError: If a view plane dimension or the resolution is not
            positive, or the basis is not orthonormal.
    """
    if config.location is None:
        raise MissingCameraFieldError("location")
    v_to, v_up = _orientation(config, config.location)

    for name in ("vp_width", "vp_height", "vp_distance"):
        value = getattr(config, name)
        if is_zero(value):
            raise MissingCameraFieldError(name)
        if value < 0:
            raise ValueError(f"Camera {name} must be positive, got {value}")

    nx, ny = config.resolution
    if nx <= 0 or ny <= 0:
        raise ValueError(f"Camera resolution must be positive, got {config.resolution}")

    v_right = v_to.cross(v_up).normalize()
    if not (is_zero(v_to.dot(v_right)) and is_zero(v_to.dot(v_up)) and is_zero(v_up.dot(v_right))):
        raise ValueError("Camera basis vectors must be orthogonal")
    for vector in (v_to, v_up, v_right):
        if not is_zero(vector.length() - 1.0):
            raise ValueError("Camera basis vectors must be normalized")

    return Camera(
        location=config.location,
        v_to=v_to,
        v_up=v_up,
        v_right=v_right,
        vp_width=float(config.vp_width),
        vp_height=float(config.vp_height),
        vp_distance=float(config.vp_distance),
        nx=int(nx),
        ny=int(ny),
    )
