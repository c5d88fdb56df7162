"""Nearest-hit queries and shadow tests over an ordered list of surfaces."""

import logging

import numpy as np

from intersection import Intersection
from ray import Ray

logger = logging.getLogger(__name__)


# Shadow rays start this far from the surface to avoid hitting it again
SHADOW_EPSILON = 0.001


def intersect_surface(surface, ray, min_dist, max_dist):
    """
    Intersect one surface, turning a computation failure into a failure result.

    Any exception raised by the surface (not implemented, numeric breakdown,
    bad data) becomes ``Intersection.failure`` so one broken surface never
    aborts a render.
    """
    try:
        return surface.intersect(ray, min_dist, max_dist)
    except Exception as e:
        return Intersection.failure(surface, e)


class Scene:
    def __init__(self, surfaces, lights=()):
        self.surfaces = list(surfaces)
        self.lights = list(lights)
        self._reported = set()

    def find_nearest(self, ray, min_dist, max_dist):
        """
        Find the nearest visible intersection along the ray.

        Returns:
            The hit with the smallest t in [min_dist, max_dist], the first one
            seen on ties, or Intersection.NONE.
        """
        nearest = Intersection.NONE

        for index, surface in enumerate(self.surfaces):
            intr = intersect_surface(surface, ray, min_dist, max_dist)

            if intr.failed:
                self._report_failure(index, intr)
                continue
            if not intr.is_hit:
                continue

            if not nearest.is_hit or intr.t < nearest.t:
                nearest = intr

        return nearest

    def is_lit(self, point, light):
        """Check whether nothing blocks the segment from point to the light."""
        to_light = light.position - point
        max_dist = np.linalg.norm(to_light)
        if max_dist == 0:
            return True
        direction = to_light / max_dist

        shadow_ray = Ray(point + direction * SHADOW_EPSILON, direction)
        return not self.find_nearest(shadow_ray, SHADOW_EPSILON, max_dist).is_hit

    def _report_failure(self, index, intr):
        if index in self._reported:
            logger.debug("Skipping surface %d: %s", index, intr.error)
            return
        self._reported.add(index)
        logger.warning("Surface %d (%r) cannot be intersected, skipping it: %s",
                       index, intr.geometry, intr.error)
