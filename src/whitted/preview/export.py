"""Writing rendered images to disk and reading them back.

Rendered images are linear float arrays of shape (H, W, 3). On the way
out they pass through the display pipeline (tone mapping, gamma, clamp)
and are quantized to 8 bits per channel. Pillow picks the file format from
the path suffix, so .png, .bmp and .tif all work; PNG is what the renderer
itself writes.

load_image() undoes the quantization (not the tone mapping), which is
enough to compare a written file against a fresh render with compute_rmse().

Example:
    >>> from src.whitted.preview.export import compute_rmse, load_image, save_png
    >>> save_png(writer.get_image_numpy(), "spheres.png", gamma=1.0)
    >>> compute_rmse(load_image("spheres.png"), writer.get_image_numpy())
"""

from __future__ import annotations

import os
from typing import Any

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.whitted.preview.display import ToneMapMethod, process_image_for_display

FloatImage = npt.NDArray[np.floating[Any]]


def image_to_uint8(
    image: FloatImage,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Run the display pipeline and round every channel to 0..255."""
    display = process_image_for_display(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    return np.round(display * 255).astype(np.uint8)


def save_png(
    image: FloatImage,
    filepath: str | os.PathLike[str],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Write a linear image as an 8-bit RGB file.

    The keyword arguments are handed to process_image_for_display(); see
    there for their meaning. The format follows the suffix of filepath.

    Raises:
        ValueError: If Pillow does not know the suffix, or the display
            pipeline rejects the image or its settings.
    """
    rgb = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(rgb).save(filepath)


def load_image(filepath: str | os.PathLike[str]) -> npt.NDArray[np.float32]:
    """Read an 8-bit image file as a float32 (H, W, 3) array in [0, 1]."""
    with PILImage.open(filepath) as img:
        rgb = np.asarray(img.convert("RGB"), dtype=np.float32)
    return rgb / 255.0


def compute_rmse(image_a: FloatImage, image_b: FloatImage) -> float:
    """Root mean squared difference between two images of the same shape.

    Raises:
        ValueError: If the shapes differ.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = np.subtract(image_a, image_b, dtype=np.float64)
    return float(np.sqrt(np.mean(np.square(diff))))
