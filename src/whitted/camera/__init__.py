"""Camera module for view and ray generation.

Components:
    pinhole: Pinhole (perspective) camera with a rectangular view plane

Camera responsibilities:
    - Validate the view configuration once, at build time
    - Map a pixel (col, row) and a sub-pixel offset to a world-space ray

Image coordinates:
    col in [0, nx): left to right across the image
    row in [0, ny): top to bottom across the image
"""

from .pinhole import (
    Camera,
    CameraConfig,
    MissingCameraFieldError,
    build_camera,
)

__all__ = [
    "Camera",
    "CameraConfig",
    "MissingCameraFieldError",
    "build_camera",
]
