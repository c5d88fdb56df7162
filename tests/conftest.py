"""Shared fixtures for the ray caster tests."""

import numpy as np
import pytest

from camera import Camera
from light import Light
from material import Material
from volume import DensityField


@pytest.fixture
def white_diffuse():
    """Purely diffuse white material."""
    return Material((0, 0, 0), (1, 1, 1), (0, 0, 0), 1)


@pytest.fixture
def white_light():
    """White light above the origin."""
    return Light((0, 5, 0), (1, 1, 1), (1, 1, 1), (1, 1, 1), 1)


@pytest.fixture
def top_camera():
    """Camera at (0, 3, 0) looking down -Y at the origin."""
    return Camera(
        position=(0, 3, 0),
        direction=(0, -1, 0),
        up=(0, 0, 1),
        view_plane_distance=1,
        view_plane_width=2,
        view_plane_height=2,
        front_plane_distance=0.1,
        back_plane_distance=100,
    )


@pytest.fixture
def cube_field():
    """4x4x4 density field with unit voxels and a gradient along x."""
    data = np.zeros((4, 4, 4), dtype=np.uint8)
    for x in range(4):
        data[:, :, x] = 10 * (x + 1)
    return DensityField((4, 4, 4), (1.0, 1.0, 1.0), data)


@pytest.fixture
def volume_files(tmp_path):
    """Write a 2x3x4 .dat/.raw pair and return their paths."""
    dat = tmp_path / "scan.dat"
    raw = tmp_path / "scan.raw"
    dat.write_text("ObjectFileName: scan.raw\nResolution:\t2 3 4\nSliceThickness: 0.5 0.5 1.0\nFormat: UCHAR\n")
    raw.write_bytes(bytes(range(24)))
    return dat, raw
