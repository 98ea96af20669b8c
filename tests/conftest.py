"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def unit_sphere():
    """A unit sphere centered at the origin."""
    from src.whitted.core.ray import Point
    from src.whitted.geometry.sphere import Sphere

    return Sphere(Point(0.0, 0.0, 0.0), 1.0)


@pytest.fixture
def straight_camera():
    """A 3x3 camera at the origin looking down -Z, view plane at distance 1."""
    from src.whitted.camera.pinhole import CameraConfig, build_camera
    from src.whitted.core.ray import Point, Vector

    return build_camera(
        CameraConfig(
            location=Point(0.0, 0.0, 0.0),
            v_to=Vector(0.0, 0.0, -1.0),
            v_up=Vector(0.0, 1.0, 0.0),
            vp_width=3.0,
            vp_height=3.0,
            vp_distance=1.0,
            resolution=(3, 3),
        )
    )
