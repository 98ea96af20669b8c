"""Unit tests for the render loop and pixel scheduling.

Tests cover:
- RenderSettings validation and automatic thread counts
- PixelManager work distribution and progress reporting
- Renderer output across thread modes, sampling modes and cancellation
- Error propagation from worker threads
"""

import logging
import threading

import numpy as np
import pytest


def _lit_scene():
    """A small scene with a shaded sphere over a floor."""
    from src.whitted.core.color import Color
    from src.whitted.core.ray import Point, Vector
    from src.whitted.geometry.plane import Plane
    from src.whitted.geometry.sphere import Sphere
    from src.whitted.materials.material import Material
    from src.whitted.scene.lights import AmbientLight, PointLight
    from src.whitted.scene.scene import Scene

    scene = Scene(
        "test",
        background=Color(5.0, 5.0, 20.0),
        ambient_light=AmbientLight(Color(30.0, 30.0, 30.0), ka=0.2),
    )
    scene.add_geometries(
        Sphere(Point(0.0, 0.0, -4.0), 1.0, material=Material(kd=0.6, ks=0.3, shininess=20, kr=0.2)),
        Plane(Point(0.0, -1.0, 0.0), Vector(0.0, 1.0, 0.0), material=Material(kd=0.5)),
    )
    scene.add_lights(PointLight(Color(200.0, 200.0, 200.0), Point(2.0, 4.0, 0.0), kl=0.05))
    return scene


def _camera(n=8):
    from src.whitted.camera.pinhole import CameraConfig, build_camera
    from src.whitted.core.ray import Point, Vector

    return build_camera(
        CameraConfig(
            location=Point(0.0, 0.0, 0.0),
            v_to=Vector(0.0, 0.0, -1.0),
            v_up=Vector(0.0, 1.0, 0.0),
            vp_width=2.0,
            vp_height=2.0,
            vp_distance=1.0,
            resolution=(n, n),
        )
    )


def _render(settings=None, **kwargs):
    from src.whitted.core.integrator import SimpleRayTracer
    from src.whitted.core.scheduler import Renderer

    renderer = Renderer(_camera(), SimpleRayTracer(_lit_scene()), settings=settings, **kwargs)
    return renderer.render_image()


class TestRenderSettings:
    """Tests for RenderSettings."""

    @pytest.mark.parametrize("kwargs", [{"threads": -3}, {"print_interval": -1.0}])
    def test_invalid(self, kwargs):
        from src.whitted.core.scheduler import RenderSettings

        with pytest.raises(ValueError):
            RenderSettings(**kwargs)

    @pytest.mark.parametrize("threads", [0, -1, 1, 7])
    def test_explicit_threads_unchanged(self, threads):
        from src.whitted.core.scheduler import RenderSettings

        assert RenderSettings(threads=threads).resolved_threads() == threads

    @pytest.mark.parametrize("cpus,expected", [(16, 14), (5, 3), (4, 1), (2, 1), (None, 1)])
    def test_automatic_threads(self, monkeypatch, cpus, expected):
        """-2 leaves two cores free, and falls back to one worker on small machines."""
        from src.whitted.core import scheduler
        from src.whitted.core.scheduler import RenderSettings

        monkeypatch.setattr(scheduler.os, "cpu_count", lambda: cpus)
        assert RenderSettings(threads=-2).resolved_threads() == expected


class TestPixelManager:
    """Tests for PixelManager."""

    def test_hands_out_every_pixel_once(self):
        """Pixels come out row by row, then None."""
        from src.whitted.core.scheduler import PixelManager

        manager = PixelManager(3, 2)
        pixels = []
        while (pixel := manager.next_pixel()) is not None:
            pixels.append(pixel)
        assert pixels == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]
        assert manager.next_pixel() is None

    def test_concurrent_claims_are_unique(self):
        """Many threads pulling at once never get the same pixel."""
        from src.whitted.core.scheduler import PixelManager

        manager = PixelManager(20, 20)
        claimed = []
        lock = threading.Lock()

        def pull():
            while (pixel := manager.next_pixel()) is not None:
                with lock:
                    claimed.append(pixel)

        workers = [threading.Thread(target=pull) for _ in range(4)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        assert len(claimed) == 400
        assert len(set(claimed)) == 400

    def test_progress_callback(self):
        """The callback receives (done, total) after every pixel."""
        from src.whitted.core.scheduler import PixelManager

        seen = []
        manager = PixelManager(2, 2, callback=lambda done, total: seen.append((done, total)))
        for _ in range(4):
            manager.pixel_done()
        assert seen == [(1, 4), (2, 4), (3, 4), (4, 4)]
        assert manager.done == 4

    def test_progress_logging(self, caplog):
        """Progress is logged every print_interval percent and at the end."""
        from src.whitted.core.scheduler import PixelManager

        manager = PixelManager(2, 2, print_interval=50.0)
        with caplog.at_level(logging.INFO, logger="src.whitted.core.scheduler"):
            for _ in range(4):
                manager.pixel_done()
        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["Rendered 50.0% (2/4 pixels)", "Rendered 100.0% (4/4 pixels)"]

    def test_no_logging_when_disabled(self, caplog):
        from src.whitted.core.scheduler import PixelManager

        manager = PixelManager(2, 2)
        with caplog.at_level(logging.INFO, logger="src.whitted.core.scheduler"):
            for _ in range(4):
                manager.pixel_done()
        assert caplog.records == []


class TestRenderer:
    """Tests for Renderer."""

    def test_default_tracer_renders_black(self):
        """Without a tracer every pixel is black."""
        from src.whitted.core.scheduler import Renderer

        renderer = Renderer(_camera(4)).render_image()
        image = renderer.image_writer.get_image_numpy()
        assert image.shape == (4, 4, 3)
        assert not image.any()

    def test_center_pixel_matches_tracer(self):
        """Without sampling each pixel is the color of its center ray."""
        from src.whitted.core.integrator import SimpleRayTracer

        renderer = _render()
        tracer = SimpleRayTracer(_lit_scene())
        expected = tracer.trace_ray(renderer.camera.construct_ray(8, 8, 3, 5))
        pixel = renderer.image_writer.get_image_numpy()[5, 3]
        np.testing.assert_allclose(pixel, np.array(expected.rgb) / 255.0, rtol=1e-6)

    @pytest.mark.parametrize("threads", [-1, 1, 3, -2])
    def test_thread_modes_agree(self, threads):
        """Every thread mode produces the same image as the sequential loop."""
        from src.whitted.core.sampling import AntiAliasing, SamplingType
        from src.whitted.core.scheduler import RenderSettings
        from src.whitted.preview.export import compute_rmse

        aa = AntiAliasing(SamplingType.GRID, 2)
        sequential = _render(RenderSettings(anti_aliasing=aa, threads=0))
        threaded = _render(RenderSettings(anti_aliasing=aa, threads=threads))
        a = sequential.image_writer.get_image_numpy()
        b = threaded.image_writer.get_image_numpy()
        np.testing.assert_array_equal(a, b)
        assert compute_rmse(a, b) == 0.0

    @pytest.mark.parametrize("threads", [0, -1, 2])
    def test_progress_callback_per_pixel(self, threads):
        """The callback fires once per pixel and ends at the total."""
        from src.whitted.core.scheduler import RenderSettings

        seen = []
        _render(RenderSettings(threads=threads), callback=lambda done, total: seen.append((done, total)))
        assert len(seen) == 64
        assert max(seen) == (64, 64)

    def test_adaptive_supersampling_takes_priority(self):
        """With both sampling modes set, adaptive supersampling is used."""
        from src.whitted.core.sampling import AdaptiveSupersampling, AntiAliasing, SamplingType
        from src.whitted.core.scheduler import RenderSettings

        adaptive = AdaptiveSupersampling(depth=2)
        both = _render(
            RenderSettings(anti_aliasing=AntiAliasing(SamplingType.GRID, 3), adaptive_supersampling=adaptive)
        )
        only_adaptive = _render(RenderSettings(adaptive_supersampling=adaptive))
        np.testing.assert_array_equal(
            both.image_writer.get_image_numpy(), only_adaptive.image_writer.get_image_numpy()
        )

    def test_render_logs_start_and_finish(self, caplog):
        with caplog.at_level(logging.INFO, logger="src.whitted.core.scheduler"):
            _render()
        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "Rendering 'test' at 8x8 (threads=0)"
        assert messages[-1].startswith("Rendered 'test' in ")

    def test_cancel_stops_sequential_render(self, caplog):
        """Cancelling from the progress callback stops before the next pixel."""
        from src.whitted.core.integrator import SimpleRayTracer
        from src.whitted.core.scheduler import Renderer

        renderer = None

        def stop_after_three(done, total):
            if done == 3:
                renderer.cancel()

        renderer = Renderer(_camera(), SimpleRayTracer(_lit_scene()), callback=stop_after_three)
        with caplog.at_level(logging.INFO, logger="src.whitted.core.scheduler"):
            renderer.render_image()

        assert renderer.cancelled
        assert renderer.pixel_manager.done == 3
        assert "cancelled after 3/64 pixels" in caplog.records[-1].getMessage()

    @pytest.mark.parametrize("threads", [-1, 2])
    def test_cancel_stops_threaded_render(self, threads):
        from src.whitted.core.integrator import SimpleRayTracer
        from src.whitted.core.scheduler import Renderer, RenderSettings

        renderer = None

        def stop_early(done, total):
            if done == 3:
                renderer.cancel()

        renderer = Renderer(
            _camera(),
            SimpleRayTracer(_lit_scene()),
            settings=RenderSettings(threads=threads),
            callback=stop_early,
        )
        renderer.render_image()
        assert renderer.cancelled
        assert renderer.pixel_manager.done < 64

    @pytest.mark.parametrize("threads", [0, -1, 1, 3])
    def test_worker_errors_propagate(self, threads):
        """An exception in any pixel is re-raised by render_image."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import RayTracerBase
        from src.whitted.core.scheduler import Renderer, RenderSettings

        class FailingTracer(RayTracerBase):
            def __init__(self):
                super().__init__(_lit_scene())
                self.calls = 0
                self._lock = threading.Lock()

            def trace_ray(self, ray):
                with self._lock:
                    self.calls += 1
                    if self.calls == 10:
                        raise RuntimeError("tracer failed")
                return Color.BLACK

        renderer = Renderer(_camera(), FailingTracer(), settings=RenderSettings(threads=threads))
        with pytest.raises(RuntimeError, match="tracer failed"):
            renderer.render_image()

    def test_invalid_scene_rejected_before_tracing(self):
        """render_image validates the scene before any pixel is computed."""
        from src.whitted.core.integrator import SimpleRayTracer
        from src.whitted.core.scheduler import Renderer
        from src.whitted.scene.scene import Scene, SceneError

        seen = []
        scene = Scene("broken").add_lights("lamp")
        renderer = Renderer(_camera(), SimpleRayTracer(scene), callback=lambda d, t: seen.append(d))
        with pytest.raises(SceneError):
            renderer.render_image()
        assert seen == []

    def test_write_to_image(self, tmp_path):
        """The rendered image is written as a PNG of the camera resolution."""
        from PIL import Image

        renderer = _render()
        assert renderer.write_to_image("spheres", tmp_path / "out") is renderer
        with Image.open(tmp_path / "out" / "spheres.png") as img:
            assert img.size == (8, 8)
            assert img.mode == "RGB"

    def test_print_grid_chains(self):
        from src.whitted.core.color import Color
        from src.whitted.core.scheduler import Renderer

        renderer = Renderer(_camera(4)).print_grid(2, Color(255.0, 0.0, 0.0))
        image = renderer.image_writer.get_image_numpy()
        np.testing.assert_allclose(image[0, 1], [1.0, 0.0, 0.0])
        np.testing.assert_allclose(image[1, 1], [0.0, 0.0, 0.0])
