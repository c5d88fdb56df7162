"""Unit tests for nearest-hit selection and shadow tests."""

import logging

import numpy as np
import pytest

from intersection import Intersection
from light import Light
from ray import Ray
from scene import SHADOW_EPSILON, Scene, intersect_surface
from surfaces.geometry import Geometry
from surfaces.sphere import Sphere


class Unimplemented(Geometry):
    """Surface whose intersection was never written."""


class DividesByZero(Geometry):
    def intersect(self, ray, min_dist, max_dist):
        return 1 / 0


class ReportsFailure(Geometry):
    def intersect(self, ray, min_dist, max_dist):
        return Intersection.failure(self, "no data")


class Broken(Geometry):
    def intersect(self, ray, min_dist, max_dist):
        raise TypeError("bug")


def light_at(position):
    return Light(position, (1, 1, 1), (1, 1, 1), (1, 1, 1), 1)


@pytest.fixture
def forward_ray():
    return Ray((0, 0, 0), (0, 0, 1))


class TestIntersectSurface:
    def test_passes_results_through(self, forward_ray):
        sphere = Sphere((0, 0, 3), 1)
        assert intersect_surface(sphere, forward_ray, 0, 100).t == pytest.approx(2.0)

    @pytest.mark.parametrize("surface", [Geometry(), Unimplemented(), DividesByZero(), Broken()])
    def test_failures_become_results(self, surface, forward_ray):
        intr = intersect_surface(surface, forward_ray, 0, 100)
        assert intr.failed
        assert not intr.is_hit
        assert intr.geometry is surface

    def test_failure_keeps_error_message(self, forward_ray):
        intr = intersect_surface(Broken(), forward_ray, 0, 100)
        assert "bug" in str(intr.error)


class TestFindNearest:
    @pytest.mark.parametrize("reverse", [False, True])
    def test_nearest_regardless_of_order(self, forward_ray, reverse):
        near = Sphere((0, 0, 3), 1)
        far = Sphere((0, 0, 6), 1)
        surfaces = [far, near] if reverse else [near, far]

        intr = Scene(surfaces).find_nearest(forward_ray, 0.0, 100.0)

        assert intr.geometry is near
        assert intr.t == pytest.approx(2.0)

    def test_range_excludes_nearer_surface(self, forward_ray):
        near = Sphere((0, 0, 3), 1)
        far = Sphere((0, 0, 10), 1)
        intr = Scene([near, far]).find_nearest(forward_ray, 4.5, 100.0)
        assert intr.geometry is far
        assert intr.t == pytest.approx(9.0)

    def test_tie_keeps_first(self, forward_ray):
        first = Sphere((0, 0, 3), 1)
        second = Sphere((0, 0, 3), 1)
        assert Scene([first, second]).find_nearest(forward_ray, 0, 100).geometry is first

    def test_no_hit(self, forward_ray):
        scene = Scene([Sphere((0, 5, 3), 1)])
        assert scene.find_nearest(forward_ray, 0, 100) is Intersection.NONE

    def test_empty_scene(self, forward_ray):
        assert Scene([]).find_nearest(forward_ray, 0, 100) is Intersection.NONE

    @pytest.mark.parametrize("failing", [Unimplemented(), DividesByZero(), ReportsFailure(), Broken()])
    def test_failing_surface_skipped(self, forward_ray, failing):
        sphere = Sphere((0, 0, 3), 1)
        intr = Scene([failing, sphere]).find_nearest(forward_ray, 0, 100)
        assert intr.geometry is sphere

    def test_failure_logged_once(self, forward_ray, caplog):
        scene = Scene([Unimplemented(), Sphere((0, 0, 3), 1)])
        with caplog.at_level(logging.DEBUG, logger="scene"):
            for _ in range(3):
                scene.find_nearest(forward_ray, 0, 100)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Surface 0" in warnings[0].getMessage()

    def test_failure_reporting_does_not_change_results(self, forward_ray):
        sphere = Sphere((0, 0, 3), 1)
        surfaces = [Unimplemented(), sphere]
        scene = Scene(surfaces, [light_at((0, 10, 0))])

        first = scene.find_nearest(forward_ray, 0, 100)
        second = scene.find_nearest(forward_ray, 0, 100)

        assert first.geometry is second.geometry is sphere
        assert first.t == second.t
        assert scene.surfaces == surfaces
        assert len(scene.lights) == 1

    def test_hit_within_range(self, forward_ray):
        scene = Scene([Sphere((0, 0, z), 0.5) for z in (2, 4, 8)])
        intr = scene.find_nearest(forward_ray, 0.1, 10)
        assert 0.1 <= intr.t <= 10
        assert intr.t == pytest.approx(1.5)


class TestIsLit:
    point = np.array([0.0, 0.0, 0.0])

    def test_unoccluded(self):
        assert Scene([]).is_lit(self.point, light_at((0, 10, 0)))

    def test_occluder_between(self):
        scene = Scene([Sphere((0, 5, 0), 1)])
        assert not scene.is_lit(self.point, light_at((0, 10, 0)))

    def test_occluder_beyond_light(self):
        scene = Scene([Sphere((0, 15, 0), 1)])
        assert scene.is_lit(self.point, light_at((0, 10, 0)))

    def test_occluder_behind_point(self):
        scene = Scene([Sphere((0, -5, 0), 1)])
        assert scene.is_lit(self.point, light_at((0, 10, 0)))

    def test_surface_does_not_shadow_itself(self):
        sphere = Sphere((0, 0, 0), 1)
        assert Scene([sphere]).is_lit(np.array([0.0, 1.0, 0.0]), light_at((0, 5, 0)))

    def test_surface_shadows_far_side(self):
        sphere = Sphere((0, 0, 0), 1)
        assert not Scene([sphere]).is_lit(np.array([0.0, 1.0, 0.0]), light_at((0, -5, 0)))

    def test_failing_surface_does_not_block(self):
        scene = Scene([Unimplemented()])
        assert scene.is_lit(self.point, light_at((0, 10, 0)))

    def test_epsilon(self):
        assert SHADOW_EPSILON == 0.001
