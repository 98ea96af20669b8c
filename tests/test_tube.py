"""Unit tests for the infinite tube and the capped cylinder.

Both shapes in these tests use the z axis through the origin.
"""

import pytest


@pytest.fixture
def z_axis():
    from src.whitted.core.ray import Point, Ray, Vector

    return Ray(Point(0.0, 0.0, 0.0), Vector(0.0, 0.0, 1.0))


class TestTube:
    """Tests for Tube."""

    def test_radius_must_be_positive(self, z_axis):
        from src.whitted.geometry.tube import Tube

        with pytest.raises(ValueError):
            Tube(0.0, z_axis)

    @pytest.mark.parametrize(
        "point,expected",
        [((1.0, 0.0, 0.0), (1.0, 0.0, 0.0)), ((0.0, 1.0, 0.0), (0.0, 1.0, 0.0)), ((1.0, 0.0, 3.0), (1.0, 0.0, 0.0))],
        ids=["at-head", "at-head-rotated", "along-axis"],
    )
    def test_normal(self, z_axis, point, expected):
        """The normal is the unit vector from the axis foot point, orthogonal to the axis."""
        from src.whitted.core.ray import Point, Vector
        from src.whitted.geometry.tube import Tube

        tube = Tube(1.0, z_axis)
        normal = tube.normal_at(Point(*point))
        assert normal == Vector(*expected)
        assert normal.dot(z_axis.direction) == 0.0

    def test_crossing_ray(self, z_axis):
        """A ray crossing the axis hits both walls in order."""
        from src.whitted.core.ray import Point, Ray, Vector
        from src.whitted.geometry.tube import Tube

        tube = Tube(1.0, z_axis)
        ray = Ray(Point(-2.0, 0.0, 1.0), Vector(1.0, 0.0, 0.0))
        assert tube.find_intersections(ray) == [Point(-1.0, 0.0, 1.0), Point(1.0, 0.0, 1.0)]

    def test_ray_from_axis_head(self, z_axis):
        """A ray starting on the axis hits the wall once."""
        from src.whitted.core.ray import Point, Ray, Vector
        from src.whitted.geometry.tube import Tube

        tube = Tube(1.0, z_axis)
        ray = Ray(Point(0.0, 0.0, 0.0), Vector(1.0, 0.0, 0.0))
        assert tube.find_intersections(ray) == [Point(1.0, 0.0, 0.0)]

    @pytest.mark.parametrize(
        "head,direction",
        [
            ((0.5, 0.0, 0.0), (0.0, 0.0, 1.0)),
            ((-2.0, 2.0, 0.0), (1.0, 0.0, 0.0)),
            ((-2.0, 1.0, 0.0), (1.0, 0.0, 0.0)),
            ((2.0, 0.0, 0.0), (1.0, 0.0, 0.0)),
        ],
        ids=["parallel", "miss", "tangent", "behind"],
    )
    def test_misses(self, z_axis, head, direction):
        """Parallel, missing, tangent and receding rays have no hits."""
        from src.whitted.core.ray import Point, Ray, Vector
        from src.whitted.geometry.tube import Tube

        tube = Tube(1.0, z_axis)
        assert tube.intersect(Ray(Point(*head), Vector(*direction))) is None


class TestCylinder:
    """Tests for Cylinder of radius 1 and height 5."""

    @pytest.fixture
    def cylinder(self, z_axis):
        from src.whitted.geometry.tube import Cylinder

        return Cylinder(1.0, z_axis, 5.0)

    def test_height_must_be_positive(self, z_axis):
        from src.whitted.geometry.tube import Cylinder

        with pytest.raises(ValueError):
            Cylinder(1.0, z_axis, 0.0)

    @pytest.mark.parametrize(
        "point,expected",
        [
            ((1.0, 0.0, 3.0), (1.0, 0.0, 0.0)),
            ((0.5, 0.5, 0.0), (0.0, 0.0, -1.0)),
            ((0.5, 0.5, 5.0), (0.0, 0.0, 1.0)),
            ((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)),
            ((0.0, 0.0, 5.0), (0.0, 0.0, 1.0)),
        ],
        ids=["side", "bottom", "top", "bottom-center", "top-center"],
    )
    def test_normal(self, cylinder, point, expected):
        """Side points get the radial normal, cap points the axis direction."""
        from src.whitted.core.ray import Point, Vector

        normal = cylinder.normal_at(Point(*point))
        assert normal.length() == pytest.approx(1.0)
        assert normal == Vector(*expected)

    def test_along_axis_hits_both_caps(self, cylinder):
        """A ray along the axis enters through the bottom and leaves through the top."""
        from src.whitted.core.ray import Point, Ray, Vector

        ray = Ray(Point(0.0, 0.0, -1.0), Vector(0.0, 0.0, 1.0))
        assert cylinder.find_intersections(ray) == [Point(0.0, 0.0, 0.0), Point(0.0, 0.0, 5.0)]

    def test_side_hits(self, cylinder):
        """A ray crossing the side between the caps hits the wall twice."""
        from src.whitted.core.ray import Point, Ray, Vector

        ray = Ray(Point(-2.0, 0.0, 2.0), Vector(1.0, 0.0, 0.0))
        assert cylinder.find_intersections(ray) == [Point(-1.0, 0.0, 2.0), Point(1.0, 0.0, 2.0)]

    def test_above_top_misses(self, cylinder):
        """The lateral surface beyond the caps does not exist."""
        from src.whitted.core.ray import Point, Ray, Vector

        assert cylinder.intersect(Ray(Point(-2.0, 0.0, 6.0), Vector(1.0, 0.0, 0.0))) is None

    def test_cap_outside_radius_misses(self, cylinder):
        """A ray through the cap plane outside the disk misses."""
        from src.whitted.core.ray import Point, Ray, Vector

        assert cylinder.intersect(Ray(Point(3.0, 0.0, -1.0), Vector(0.0, 0.0, 1.0))) is None

    def test_cap_normals_on_tilted_cylinder(self):
        """Cap hits on a skewed axis get the axis normal, even with rounding on the projection."""
        from src.whitted.core.ray import Point, Ray, Vector
        from src.whitted.geometry.tube import Cylinder

        axis = Ray(Point(0.3, -0.7, 1.1), Vector(1.0, 2.0, 3.0))
        cylinder = Cylinder(1.0, axis, 2.7)
        v = axis.direction
        u = Vector(2.0, -1.0, 0.0).normalize()
        w = v.cross(u)

        checked = 0
        for i in range(-4, 5):
            for j in range(-4, 5):
                a, b = i * 0.21, j * 0.21
                if a * a + b * b >= 0.8:
                    continue
                head = axis.get_point(-1.0)
                if a:
                    head = head + u.scale(a)
                if b:
                    head = head + w.scale(b)
                hits = cylinder.intersect(Ray(head, v))
                assert hits is not None and len(hits) == 2
                bottom, top = hits
                assert cylinder.normal_at(bottom.point).dot(v) == pytest.approx(-1.0)
                assert cylinder.normal_at(top.point).dot(v) == pytest.approx(1.0)
                checked += 1
        assert checked > 40
