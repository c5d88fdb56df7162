import numpy as np


class Light:
    def __init__(self, position, ambient, diffuse, specular, intensity):
        self.position = np.array(position, dtype=np.float64)
        self.ambient = np.array(ambient, dtype=np.float64)
        self.diffuse = np.array(diffuse, dtype=np.float64)
        self.specular = np.array(specular, dtype=np.float64)
        self.intensity = float(intensity)

    def __repr__(self):
        return f"Light(position={self.position.tolist()}, intensity={self.intensity})"
