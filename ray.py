import numpy as np


# Directions shorter than this are treated as zero-length
EPSILON = 1e-12


def normalize(v):
    """Normalize a vector. Zero-length vectors are returned unchanged."""
    norm = np.linalg.norm(v)
    if norm < EPSILON:
        return v
    return v / norm


def _frozen(v):
    arr = np.array(v, dtype=np.float64)
    arr.flags.writeable = False
    return arr


class Ray:
    """A half-line ``origin + t * direction``.

    Parametric distances returned by the surfaces are measured in units of
    ``direction``; rays built with :meth:`through` have a unit direction, so
    ``t`` is the euclidean distance from the origin.
    """

    def __init__(self, origin, direction):
        self.origin = _frozen(origin)
        self.direction = _frozen(direction)

    @classmethod
    def through(cls, origin, point):
        """Build the ray starting at ``origin`` and passing through ``point``."""
        origin = np.asarray(origin, dtype=np.float64)
        direction = normalize(np.asarray(point, dtype=np.float64) - origin)
        return cls(origin, direction)

    def at(self, t):
        """Point on the ray at parametric distance t."""
        return self.origin + t * self.direction

    def __repr__(self):
        return f"Ray(origin={self.origin.tolist()}, direction={self.direction.tolist()})"
