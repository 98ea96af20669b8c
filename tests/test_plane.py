"""Unit tests for the infinite plane."""

import pytest


class TestPlaneConstruction:
    """Tests for building planes and their normals."""

    def test_from_points_normal(self):
        """The normal is a unit vector orthogonal to the spanning edges."""
        from src.whitted.core.ray import Point, is_zero
        from src.whitted.geometry.plane import Plane

        p1, p2, p3 = Point(1.0, 1.0, 1.0), Point(3.0, 2.0, 1.0), Point(2.0, 5.0, 3.0)
        plane = Plane.from_points(p1, p2, p3)
        normal = plane.normal_at(p1)

        assert normal.length() == pytest.approx(1.0)
        assert is_zero(normal.dot(p2 - p1))
        assert is_zero(normal.dot(p3 - p1))

    def test_normal_is_constant(self):
        """Every point of the plane has the same normal."""
        from src.whitted.core.ray import Point, Vector
        from src.whitted.geometry.plane import Plane

        plane = Plane(Point(0.0, 0.0, 0.0), Vector(0.0, 0.0, 5.0))
        assert plane.normal == Vector(0.0, 0.0, 1.0)
        assert plane.normal_at(Point(10.0, -3.0, 0.0)) == plane.normal

    @pytest.mark.parametrize(
        "points",
        [
            ((1, 2, 3), (1, 2, 3), (4, 5, 6)),
            ((1, 2, 3), (4, 5, 6), (1, 2, 3)),
            ((4, 5, 6), (1, 2, 3), (1, 2, 3)),
            ((1, 1, 1), (1, 1, 1), (1, 1, 1)),
            ((0, 0, 0), (1, 1, 1), (2, 2, 2)),
        ],
        ids=["first-second", "first-third", "second-third", "all-same", "collinear"],
    )
    def test_degenerate_points_rejected(self, points):
        """Coinciding or collinear points do not define a plane."""
        from src.whitted.core.ray import Point
        from src.whitted.geometry.plane import Plane

        with pytest.raises(ValueError):
            Plane.from_points(*(Point(*p) for p in points))


class TestPlaneIntersection:
    """Tests for ray-plane intersection against the z=1 plane."""

    @pytest.fixture
    def plane(self):
        from src.whitted.core.ray import Point
        from src.whitted.geometry.plane import Plane

        return Plane.from_points(Point(1.0, 0.0, 1.0), Point(0.0, 1.0, 1.0), Point(1.0, 1.0, 1.0))

    def test_oblique_hit(self, plane):
        """A slanted ray toward the plane hits it once."""
        from src.whitted.core.ray import Point, Ray, Vector

        points = plane.find_intersections(Ray(Point(0.0, 0.5, 0.0), Vector(1.0, 0.0, 1.0)))
        assert len(points) == 1
        assert points[0].xyz == pytest.approx((1.0, 0.5, 1.0))

    def test_oblique_away(self, plane):
        """A slanted ray moving away from the plane misses."""
        from src.whitted.core.ray import Point, Ray, Vector

        assert plane.intersect(Ray(Point(1.0, 0.5, 2.0), Vector(1.0, 2.0, 5.0))) is None

    def test_parallel_rays(self, plane):
        """Parallel rays miss, whether inside the plane or beside it."""
        from src.whitted.core.ray import Point, Ray, Vector

        assert plane.intersect(Ray(Point(1.0, 2.0, 1.0), Vector(1.0, 0.0, 0.0))) is None
        assert plane.intersect(Ray(Point(1.0, 2.0, 2.0), Vector(1.0, 0.0, 0.0))) is None

    def test_orthogonal_rays(self, plane):
        """Orthogonal rays hit only when they start before the plane."""
        from src.whitted.core.ray import Point, Ray, Vector

        up = Vector(0.0, 0.0, 1.0)
        assert plane.find_intersections(Ray(Point(1.0, 1.0, 0.0), up)) == [Point(1.0, 1.0, 1.0)]
        assert plane.intersect(Ray(Point(1.0, 2.0, 1.0), up)) is None
        assert plane.intersect(Ray(Point(1.0, 2.0, 2.0), up)) is None

    def test_head_on_plane(self, plane):
        """Rays starting on the plane, including at its reference point, miss."""
        from src.whitted.core.ray import Point, Ray, Vector

        assert plane.intersect(Ray(Point(2.0, 4.0, 1.0), Vector(2.0, 3.0, 5.0))) is None
        assert plane.intersect(Ray(Point(1.0, 0.0, 1.0), Vector(2.0, 3.0, 5.0))) is None

    def test_intersect_t(self, plane):
        """intersect_t reports the distance along the ray."""
        from src.whitted.core.ray import Point, Ray, Vector

        ray = Ray(Point(0.0, 0.0, -2.0), Vector(0.0, 0.0, 1.0))
        assert plane.intersect_t(ray) == pytest.approx(3.0)
