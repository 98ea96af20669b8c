"""In-memory image sink for the renderer.

ImageWriter collects pixel colors in a float32 numpy buffer of shape
(ny, nx, 3) and writes the result as a PNG. Colors arrive on the 0-255
scale used by the tracer and are stored divided by 255, so the buffer is a
linear image where 1.0 is full white. Values above 1.0 are kept until the
image is written, where tone mapping or clamping brings them into range.

write_pixel() may be called from several render threads at once and in any
order.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.whitted.core.color import Color
from src.whitted.preview.display import ToneMapMethod
from src.whitted.preview.export import save_png

logger = logging.getLogger(__name__)

# Color channel value that maps to full white in the output image
COLOR_SCALE = 255.0


class ImageWriter:
    """A pixel buffer that can be written to a PNG file.

    Args:
        nx: Image width in pixels.
        ny: Image height in pixels.

    Raises:
        ValueError: If either dimension is not positive.
    """

    def __init__(self, nx: int, ny: int) -> None:
        if nx <= 0 or ny <= 0:
            raise ValueError(f"Image dimensions must be positive, got {nx}x{ny}")
        self.nx = nx
        self.ny = ny
        self._buffer = np.zeros((ny, nx, 3), dtype=np.float32)
        self._lock = threading.Lock()

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        """Store the color of pixel (x, y); x is the column, y the row.

        Raises:
            IndexError: If the pixel lies outside the image.
        """
        if not (0 <= x < self.nx and 0 <= y < self.ny):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.nx}x{self.ny} image")
        with self._lock:
            self._buffer[y, x] = np.array(color.rgb, dtype=np.float32) / COLOR_SCALE

    def print_grid(self, interval: int, color: Color) -> None:
        """Overwrite every interval-th row and column with a color."""
        if interval <= 0:
            raise ValueError(f"Grid interval must be positive, got {interval}")
        value = np.array(color.rgb, dtype=np.float32) / COLOR_SCALE
        with self._lock:
            self._buffer[::interval, :] = value
            self._buffer[:, ::interval] = value

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Return a copy of the linear image, shape (ny, nx, 3)."""
        with self._lock:
            return self._buffer.copy()

    def write_to_image(
        self,
        name: str,
        directory: str | Path = ".",
        *,
        tone_map: ToneMapMethod = "none",
        gamma: float = 1.0,
        exposure: float = 1.0,
    ) -> Path:
        """Write the image to <directory>/<name>.png.

        The directory is created if needed.

        Args:
            name: File name without extension.
            directory: Output directory. Default is the working directory.
            tone_map: Tone mapping method ("none", "reinhard", or "exposure").
            gamma: Gamma correction value. Default 1.0 writes colors as traced.
            exposure: Exposure value for exposure tone mapping.

        Returns:
            The path of the written file.
        """
        path = Path(directory) / f"{name}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        save_png(
            self.get_image_numpy(), path, tone_map=tone_map, gamma=gamma, exposure=exposure
        )
        logger.info("Wrote %dx%d image to %s", self.nx, self.ny, path)
        return path
