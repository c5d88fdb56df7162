import numpy as np
from numba import njit

from intersection import Intersection
from surfaces.geometry import Geometry
from volume import load_density_field


# Direction components smaller than this are treated as parallel to the slab
PARALLEL_EPSILON = 1e-12


@njit(cache=True)
def _slab_interval(origin, direction, min_bound, max_bound):
    """
    Ray-box entry/exit distances using the slab method (JIT-compiled).

    Returns (hit, t_min, t_max).
    """
    t_min = -np.inf
    t_max = np.inf

    for axis in range(3):
        d = direction[axis]
        o = origin[axis]

        if abs(d) < PARALLEL_EPSILON:
            # Ray parallel to slab
            if o < min_bound[axis] or o > max_bound[axis]:
                return False, 0.0, 0.0
            continue

        t1 = (min_bound[axis] - o) / d
        t2 = (max_bound[axis] - o) / d
        if t1 > t2:
            t1, t2 = t2, t1

        if t_min > t2 or t1 > t_max:
            return False, 0.0, 0.0

        t_min = max(t_min, t1)
        t_max = min(t_max, t2)

    return True, t_min, t_max


class RawCtMask(Geometry):
    """A CT scan rendered as the axis-aligned box enclosing its density field.

    The box spans ``position`` to ``position + resolution * thickness * scale``.
    Hits are colored by passing the density of the voxel under the entry
    point through ``color_map``.
    """

    def __init__(self, field, position, scale, color_map, material=None):
        super().__init__(material)
        self.field = field
        self.position = np.array(position, dtype=np.float64)
        self.scale = float(scale)
        self.color_map = color_map
        if self.scale <= 0 or np.any(field.thickness <= 0):
            raise ValueError(f"RawCtMask needs positive scale and slice thickness, got {scale} and {field.thickness}")

        self.min_bound = self.position
        self.max_bound = self.position + np.array(field.resolution, dtype=np.float64) * field.thickness * self.scale

    @classmethod
    def from_files(cls, dat_file, raw_file, position, scale, color_map, material=None):
        return cls(load_density_field(dat_file, raw_file), position, scale, color_map, material)

    def intersect(self, ray, min_dist, max_dist):
        """Compute the ray-box entry point within [min_dist, max_dist]."""
        if not np.any(ray.direction) or not np.all(np.isfinite(ray.direction)):
            return Intersection.NONE

        hit, t_min, t_max = _slab_interval(ray.origin, ray.direction, self.min_bound, self.max_bound)
        if not hit:
            return Intersection.NONE

        t_min = max(t_min, min_dist)
        t_max = min(t_max, max_dist)
        if not (t_min <= t_max):
            return Intersection.NONE

        idx = self.indexes(ray.at(t_min))
        color = self.color_map(self.field.value(*idx))
        normal = self.field.gradient(*idx)
        return Intersection.hit(self, ray, t_min, normal, self.material, color)

    def indexes(self, point):
        """Voxel (x, y, z) containing a world-space point."""
        return tuple(int(i) for i in np.floor((point - self.position) / self.field.thickness / self.scale))

    def __repr__(self):
        return f"RawCtMask(min_bound={self.min_bound.tolist()}, max_bound={self.max_bound.tolist()})"
