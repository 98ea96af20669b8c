"""Preview module for image output.

Components:
    image_writer: Thread-safe pixel buffer used as the render sink
    display: Tone mapping and gamma pipeline (Taichi kernel)
    export: 8-bit export and reload via Pillow, image comparison

Features:
    - Tonemapping for HDR output (Reinhard, exposure-based)
    - Gamma-correct 8-bit PNG export
    - RMSE comparison between renders

Example:
    >>> from src.whitted.preview import ImageWriter
    >>> writer = ImageWriter(800, 500)
    >>> writer.print_grid(50, Color(255.0, 0.0, 0.0))
    >>> writer.write_to_image("grid", "images")
"""

from src.whitted.preview.display import ToneMapMethod, process_image_for_display
from src.whitted.preview.export import compute_rmse, image_to_uint8, load_image, save_png
from src.whitted.preview.image_writer import ImageWriter

__all__ = [
    # Sink
    "ImageWriter",
    # Display pipeline
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "save_png",
    "image_to_uint8",
    "load_image",
    "compute_rmse",
]
