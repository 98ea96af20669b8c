"""Recursive Whitted-style ray tracer.

This package renders scenes of analytic surfaces with Phong shading, hard
and partially transparent shadows, mirror reflection and straight-through
refraction, using a recursive ray tracer on the CPU.

Subpackages:
    core: Vector algebra, colors, the shading engine, sampling and the
        pixel scheduler
    geometry: Shape primitives and intersection algorithms
    materials: Phong material coefficients
    scene: Scene container, light sources and the Cornell box
    camera: Pinhole camera with ray generation
    preview: Image sink, tone mapping and PNG export
"""

__version__ = "0.1.0"
