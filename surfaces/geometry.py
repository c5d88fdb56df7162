import numpy as np


class Geometry:
    """Base class of everything a ray can hit.

    Subclasses implement ``intersect(ray, min_dist, max_dist)`` returning an
    :class:`~intersection.Intersection`.
    """

    def __init__(self, material=None, color=(0.0, 0.0, 0.0)):
        self.material = material
        self.color = np.array(color, dtype=np.float64)

    def intersect(self, ray, min_dist, max_dist):
        raise NotImplementedError(f"{type(self).__name__} does not implement intersect")

    def __repr__(self):
        return f"{type(self).__name__}()"
