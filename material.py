import numpy as np


class Material:
    def __init__(self, ambient, diffuse, specular, shininess):
        self.ambient = np.array(ambient, dtype=np.float64)
        self.diffuse = np.array(diffuse, dtype=np.float64)
        self.specular = np.array(specular, dtype=np.float64)
        self.shininess = float(shininess)

    @classmethod
    def from_color(cls, color):
        """Material for self-colored surfaces that carry no material of their own."""
        color = np.array(color, dtype=np.float64)
        return cls(color * 0.1, color, (0.2, 0.2, 0.2), 10.0)

    def __repr__(self):
        return (f"Material(ambient={self.ambient.tolist()}, diffuse={self.diffuse.tolist()}, "
                f"specular={self.specular.tolist()}, shininess={self.shininess})")
