"""Pixel scheduling: turning a camera and a ray tracer into an image.

The Renderer owns the render loop. For every pixel it builds one or more
primary rays with the camera, traces them, and writes the resulting color
to the image sink. Pixels are independent, so they can be computed in any
order and on any thread. Only two pieces of state are shared:

    the image buffer      ImageWriter.write_pixel() is lock-protected
    the progress counter  PixelManager.pixel_done() is lock-protected

Thread modes (RenderSettings.threads):

    0   sequential double loop on the calling thread
    -1  data-parallel: rows are fanned out over a ThreadPoolExecutor
    -2  worker pool sized from the CPU count
    N   N worker threads pull pixels from a shared PixelManager queue

Example:
    >>> renderer = Renderer(camera, SimpleRayTracer(scene),
    ...                     settings=RenderSettings(threads=4, print_interval=10))
    >>> renderer.render_image().write_to_image("spheres", "images")
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from src.whitted.camera.pinhole import Camera
from src.whitted.core.color import Color
from src.whitted.core.integrator import NullRayTracer, RayTracerBase
from src.whitted.core.sampling import (
    AdaptiveSupersampling,
    AntiAliasing,
    Blackboard,
    adaptive_supersample,
    average_samples,
)
from src.whitted.preview.image_writer import ImageWriter

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (pixels_done, total_pixels)
ProgressCallback = Callable[[int, int], None]

# Cores left free when the thread count is chosen automatically
SPARE_THREADS = 2


# =============================================================================
# Render Settings
# =============================================================================


@dataclass(frozen=True)
class RenderSettings:
    """How pixels are sampled and scheduled.

    Attributes:
        anti_aliasing: Fixed anti-aliasing, or None for one ray per pixel.
        adaptive_supersampling: Adaptive supersampling, or None. Takes
            priority over anti_aliasing when both are set.
        threads: 0 sequential, -1 data-parallel, -2 automatic worker count,
            N >= 1 worker threads. Default 0.
        print_interval: Log progress every this many percent; 0 disables.
    """

    anti_aliasing: AntiAliasing | None = None
    adaptive_supersampling: AdaptiveSupersampling | None = None
    threads: int = 0
    print_interval: float = 0.0

    def __post_init__(self) -> None:
        if self.threads < -2:
            raise ValueError(f"threads must be -2 or higher, got {self.threads}")
        if self.print_interval < 0:
            raise ValueError(f"print_interval must be non-negative, got {self.print_interval}")

    def resolved_threads(self) -> int:
        """The effective thread mode, with -2 replaced by a worker count."""
        if self.threads != -2:
            return self.threads
        cores = (os.cpu_count() or 1) - SPARE_THREADS
        return 1 if cores <= 2 else cores


# =============================================================================
# Pixel Manager
# =============================================================================


class PixelManager:
    """Shared work queue and progress counter for one render.

    Pixels are handed out row by row from a single counter, so any number of
    workers can pull from the same manager.

    Args:
        nx: Image width in pixels.
        ny: Image height in pixels.
        print_interval: Log progress every this many percent; 0 disables.
        callback: Optional function called with (done, total) after every
            finished pixel.
    """

    def __init__(
        self,
        nx: int,
        ny: int,
        print_interval: float = 0.0,
        callback: ProgressCallback | None = None,
    ) -> None:
        self.nx = nx
        self.ny = ny
        self.total = nx * ny
        self.print_interval = print_interval
        self._callback = callback
        self._lock = threading.Lock()
        self._next = 0
        self._done = 0
        self._last_logged = 0.0

    @property
    def done(self) -> int:
        with self._lock:
            return self._done

    def next_pixel(self) -> tuple[int, int] | None:
        """Claim the next pixel as (col, row), or None when all are claimed."""
        with self._lock:
            if self._next >= self.total:
                return None
            index = self._next
            self._next += 1
        return index % self.nx, index // self.nx

    def pixel_done(self) -> None:
        """Record one finished pixel."""
        with self._lock:
            self._done += 1
            done = self._done
            percent = 100.0 * done / self.total
            report = self.print_interval > 0 and (
                percent - self._last_logged >= self.print_interval or done == self.total
            )
            if report:
                self._last_logged = percent
        if report:
            logger.info("Rendered %.1f%% (%d/%d pixels)", percent, done, self.total)
        if self._callback is not None:
            self._callback(done, self.total)


# =============================================================================
# Renderer
# =============================================================================


class Renderer:
    """Renders a camera view of a scene into an image sink.

    Args:
        camera: The validated camera; its resolution sets the image size.
        ray_tracer: Tracer for primary rays. Default is NullRayTracer,
            which renders black.
        image_writer: Destination for pixel colors. Default is a new
            ImageWriter of the camera resolution.
        settings: Sampling and threading settings.
        callback: Optional progress callback receiving (done, total).
    """

    def __init__(
        self,
        camera: Camera,
        ray_tracer: RayTracerBase | None = None,
        image_writer: ImageWriter | None = None,
        settings: RenderSettings | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        self.camera = camera
        self.ray_tracer = ray_tracer if ray_tracer is not None else NullRayTracer()
        self.image_writer = (
            image_writer if image_writer is not None else ImageWriter(camera.nx, camera.ny)
        )
        self.settings = settings if settings is not None else RenderSettings()
        self._callback = callback

        anti_aliasing = self.settings.anti_aliasing
        self._blackboard = (
            Blackboard(anti_aliasing.sampling, anti_aliasing.resolution)
            if anti_aliasing is not None
            else None
        )
        self._cancelled = threading.Event()
        self.pixel_manager = self._new_pixel_manager()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Ask running workers to stop after their current pixel."""
        self._cancelled.set()

    def _new_pixel_manager(self) -> PixelManager:
        return PixelManager(
            self.camera.nx, self.camera.ny, self.settings.print_interval, self._callback
        )

    # -------------------------------------------------------------------------
    # Per-pixel work
    # -------------------------------------------------------------------------

    def _sample(self, col: int, row: int, offset_x: float, offset_y: float) -> Color:
        ray = self.camera.construct_ray(
            self.camera.nx, self.camera.ny, col, row, offset_x, offset_y
        )
        return self.ray_tracer.trace_ray(ray)

    def pixel_color(self, col: int, row: int) -> Color:
        """Compute the color of one pixel without writing it."""
        adaptive = self.settings.adaptive_supersampling
        if adaptive is not None:
            return adaptive_supersample(
                lambda x, y: self._sample(col, row, x, y),
                adaptive.depth,
                adaptive.color_tolerance,
            )
        if self._blackboard is not None:
            return average_samples(
                lambda x, y: self._sample(col, row, x, y),
                self._blackboard.generate_samples(),
            )
        return self._sample(col, row, 0.5, 0.5)

    def cast_ray(self, col: int, row: int) -> Color:
        """Compute one pixel, write it to the sink and record progress."""
        color = self.pixel_color(col, row)
        self.image_writer.write_pixel(col, row, color)
        self.pixel_manager.pixel_done()
        return color

    # -------------------------------------------------------------------------
    # Render loops
    # -------------------------------------------------------------------------

    def render_image(self) -> Renderer:
        """Render every pixel of the image.

        The scene is validated before any ray is traced. Worker exceptions
        are re-raised here once all workers have stopped.

        Returns:
            self, for chaining with write_to_image().

        Raises:
            SceneError: If the scene is malformed.
        """
        scene = self.ray_tracer.scene
        if scene is not None:
            scene.validate()

        self._cancelled.clear()
        self.pixel_manager = self._new_pixel_manager()
        threads = self.settings.resolved_threads()
        name = scene.name if scene is not None else "<no scene>"
        logger.info(
            "Rendering %r at %dx%d (threads=%d)", name, self.camera.nx, self.camera.ny, threads
        )

        start = time.perf_counter()
        if threads == 0:
            self._render_sequential()
        elif threads == -1:
            self._render_parallel()
        else:
            self._render_workers(threads)
        elapsed = time.perf_counter() - start

        if self.cancelled:
            logger.info(
                "Render of %r cancelled after %d/%d pixels",
                name,
                self.pixel_manager.done,
                self.pixel_manager.total,
            )
        else:
            logger.info("Rendered %r in %.2fs", name, elapsed)
        return self

    def _render_sequential(self) -> None:
        for row in range(self.camera.ny):
            for col in range(self.camera.nx):
                if self.cancelled:
                    return
                self.cast_ray(col, row)

    def _render_row(self, row: int) -> None:
        for col in range(self.camera.nx):
            if self.cancelled:
                return
            self.cast_ray(col, row)

    def _render_parallel(self) -> None:
        with ThreadPoolExecutor() as pool:
            # Consuming the iterator re-raises the first worker exception
            try:
                for _ in pool.map(self._render_row, range(self.camera.ny)):
                    pass
            except Exception:
                self._cancelled.set()
                raise

    def _render_workers(self, count: int) -> None:
        errors: list[BaseException] = []
        errors_lock = threading.Lock()

        def work() -> None:
            try:
                while not self.cancelled:
                    pixel = self.pixel_manager.next_pixel()
                    if pixel is None:
                        return
                    self.cast_ray(*pixel)
            except Exception as exc:
                with errors_lock:
                    errors.append(exc)
                self._cancelled.set()

        workers = [
            threading.Thread(target=work, name=f"render-worker-{i}", daemon=True)
            for i in range(count)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        if errors:
            raise errors[0]

    # -------------------------------------------------------------------------
    # Sink helpers
    # -------------------------------------------------------------------------

    def print_grid(self, interval: int, color: Color) -> Renderer:
        """Draw a grid line every interval pixels onto the image."""
        self.image_writer.print_grid(interval, color)
        return self

    def write_to_image(self, name: str, directory: str = ".", **kwargs) -> Renderer:
        """Write the image to <directory>/<name>.png. See ImageWriter.write_to_image."""
        self.image_writer.write_to_image(name, directory, **kwargs)
        return self
