import numpy as np

from ray import Ray, normalize


class Camera:
    def __init__(self, position, direction, up, view_plane_distance, view_plane_width,
                 view_plane_height, front_plane_distance, back_plane_distance):
        self.position = np.array(position, dtype=np.float64)
        self.direction = np.array(direction, dtype=np.float64)
        self.up = np.array(up, dtype=np.float64)
        self.view_plane_distance = float(view_plane_distance)
        self.view_plane_width = float(view_plane_width)
        self.view_plane_height = float(view_plane_height)
        self.front_plane_distance = float(front_plane_distance)
        self.back_plane_distance = float(back_plane_distance)

        self.right = None

    def normalize(self):
        """
        Compute the orthonormal camera basis (direction, up, right).

        Raises:
            ValueError: if direction is zero or parallel to up.
        """
        if np.linalg.norm(self.direction) == 0:
            raise ValueError("Camera direction must be a non-zero vector")
        self.direction = normalize(self.direction)

        self.right = np.cross(self.direction, self.up)
        right_norm = np.linalg.norm(self.right)
        if right_norm == 0:
            raise ValueError(f"Camera up {self.up.tolist()} is zero or parallel to the direction")
        self.right = self.right / right_norm

        self.up = np.cross(self.right, self.direction)
        self.up = self.up / np.linalg.norm(self.up)

    @staticmethod
    def image_to_view_plane(n, img_size, view_plane_size):
        """Map pixel index n to a view-plane coordinate, +size/2 at n = 0."""
        return view_plane_size / 2 - n * view_plane_size / img_size

    def view_plane_point(self, i, j, image_width, image_height):
        """Point on the view plane that pixel (i, j) looks through."""
        x = self.image_to_view_plane(i, image_width, self.view_plane_width)
        y = self.image_to_view_plane(j, image_height, self.view_plane_height)

        return (self.position + self.direction * self.view_plane_distance
                + self.right * x + self.up * y)

    def primary_ray(self, i, j, image_width, image_height):
        """Generate the ray through pixel (i, j)."""
        return Ray.through(self.position, self.view_plane_point(i, j, image_width, image_height))
