from surfaces.ellipsoid import Ellipsoid


class Sphere(Ellipsoid):
    def __init__(self, center, radius, material=None, color=(0.0, 0.0, 0.0)):
        super().__init__(center, (1.0, 1.0, 1.0), radius, material, color)

    def __repr__(self):
        return f"Sphere(center={self.center.tolist()}, radius={self.radius})"
