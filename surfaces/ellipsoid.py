import numpy as np
from numba import njit

from intersection import Intersection
from surfaces.geometry import Geometry


@njit(cache=True)
def _ellipsoid_roots(origin, direction, center, semi_axes):
    """
    Solve |(origin + t*direction - center) / semi_axes|^2 = 1 for t (JIT-compiled).

    The scaled direction is not renormalized, so the roots are in the units of
    the caller's ray. Returns (hit, t1, t2) with t1 <= t2.
    """
    ox = (origin[0] - center[0]) / semi_axes[0]
    oy = (origin[1] - center[1]) / semi_axes[1]
    oz = (origin[2] - center[2]) / semi_axes[2]

    dx = direction[0] / semi_axes[0]
    dy = direction[1] / semi_axes[1]
    dz = direction[2] / semi_axes[2]

    a = dx*dx + dy*dy + dz*dz
    if a == 0.0:
        return False, 0.0, 0.0

    b = 2.0 * (ox*dx + oy*dy + oz*dz)
    c = ox*ox + oy*oy + oz*oz - 1.0

    discriminant = b*b - 4*a*c
    if discriminant < 0:
        return False, 0.0, 0.0

    sqrt_disc = np.sqrt(discriminant)
    t1 = (-b - sqrt_disc) / (2*a)
    t2 = (-b + sqrt_disc) / (2*a)
    return True, t1, t2


class Ellipsoid(Geometry):
    def __init__(self, center, semi_axes, radius=1.0, material=None, color=(0.0, 0.0, 0.0)):
        super().__init__(material, color)
        self.center = np.array(center, dtype=np.float64)
        self.semi_axes = np.array(semi_axes, dtype=np.float64)
        self.radius = float(radius)
        if self.radius <= 0 or np.any(self.semi_axes <= 0):
            raise ValueError(f"Ellipsoid needs positive semi-axes and radius, got {self.semi_axes} * {radius}")

        # Effective semi-axis lengths
        self.axes = self.semi_axes * self.radius

    def intersect(self, ray, min_dist, max_dist):
        """Compute the nearest ray-ellipsoid intersection in [min_dist, max_dist]."""
        hit, t1, t2 = _ellipsoid_roots(ray.origin, ray.direction, self.center, self.axes)
        if not hit:
            return Intersection.NONE

        # Negated comparisons so NaN roots are rejected too
        if not (t2 >= min_dist and t1 <= max_dist):
            return Intersection.NONE

        t = t1 if t1 >= min_dist else t2
        if not (min_dist <= t <= max_dist):
            return Intersection.NONE

        normal = self.normal(ray.at(t))
        return Intersection.hit(self, ray, t, normal, self.material, self.color)

    def normal(self, point):
        """Outward unit normal: gradient of the implicit surface at point."""
        gradient = (point - self.center) / (self.axes * self.axes)
        return gradient / np.linalg.norm(gradient)

    def __repr__(self):
        return f"Ellipsoid(center={self.center.tolist()}, axes={self.axes.tolist()})"
