"""Phong-style local illumination with hard shadows.

The color of a hit is a fold over the scene's lights starting from black.
For every light that reaches the point, the ambient, diffuse and specular
terms are added to the running total and the *whole* running total is then
scaled by the light's intensity. Lights that are blocked leave the total
untouched.
"""

from functools import reduce

import numpy as np

from material import Material
from ray import normalize


BLACK = np.zeros(3)


def light_contribution(total, light, material, normal, light_dir, view_dir):
    """Add one light's ambient, diffuse and specular terms, then scale by its intensity."""
    ambient = material.ambient * light.ambient

    n_dot_l = np.dot(normal, light_dir)
    diffuse = material.diffuse * light.diffuse * max(0.0, n_dot_l)

    reflection = 2 * n_dot_l * normal - light_dir
    specular_factor = max(0.0, np.dot(view_dir, reflection)) ** material.shininess
    specular = material.specular * light.specular * specular_factor

    return (total + ambient + diffuse + specular) * light.intensity


def shade(scene, intersection, eye):
    """
    Color of a visible intersection seen from eye.

    Args:
        scene: Scene providing the lights and the shadow test.
        intersection: a hit returned by Scene.find_nearest.
        eye: position the hit is viewed from.
    """
    point = intersection.position
    normal = intersection.normal
    material = intersection.material
    if material is None:
        material = Material.from_color(intersection.color)
    view_dir = normalize(eye - point)

    def step(total, light):
        if not scene.is_lit(point, light):
            return total
        light_dir = normalize(light.position - point)
        return light_contribution(total, light, material, normal, light_dir, view_dir)

    return reduce(step, scene.lights, BLACK.copy())
