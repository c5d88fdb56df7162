"""Result of intersecting a ray with a surface.

A result is one of three things:

* ``Intersection.NONE``: the ray misses the surface in the requested range.
* a hit: ``valid`` and ``visible`` are set and ``t``, ``normal``,
  ``material`` and ``color`` describe the surface point.
* a failure (``Intersection.failure``): the surface could not compute its
  intersection at all. The scene skips such surfaces.
"""


class Intersection:
    NONE = None

    def __init__(self, valid, visible, geometry, ray, t, normal, material, color, error=None):
        self.valid = valid
        self.visible = visible
        self.geometry = geometry
        self.ray = ray
        self.t = t
        self.normal = normal
        self.material = material
        self.color = color
        self.error = error

    @classmethod
    def hit(cls, geometry, ray, t, normal, material, color):
        return cls(True, True, geometry, ray, t, normal, material, color)

    @classmethod
    def failure(cls, geometry, error):
        return cls(False, False, geometry, None, None, None, None, None, error=str(error))

    @property
    def is_hit(self):
        return self.valid and self.visible

    @property
    def failed(self):
        return self.error is not None

    @property
    def position(self):
        return self.ray.at(self.t)

    def __repr__(self):
        if self is Intersection.NONE:
            return "Intersection.NONE"
        if self.failed:
            return f"Intersection.failure({self.geometry!r}, {self.error!r})"
        return f"Intersection(t={self.t}, geometry={self.geometry!r})"


Intersection.NONE = Intersection(False, False, None, None, None, None, None, None)
