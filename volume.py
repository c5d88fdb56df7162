"""Voxel density fields loaded from ``.dat``/``.raw`` CT scan pairs.

The ``.dat`` file is a small text header::

    Resolution:     256 256 256
    SliceThickness: 0.1 0.1 0.1

and the ``.raw`` file holds ``x * y * z`` unsigned bytes, x varying fastest.
"""

import logging
import re

import numpy as np
from numba import njit

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[:\t ]+")


class InvalidDataError(ValueError):
    """The raw density data does not match its header."""


@njit(cache=True)
def _voxel_value(data, x, y, z):
    if x < 0 or y < 0 or z < 0 or x >= data.shape[2] or y >= data.shape[1] or z >= data.shape[0]:
        return 0
    return int(data[z, y, x])


@njit(cache=True)
def _voxel_gradient(data, x, y, z):
    gx = float(_voxel_value(data, x + 1, y, z) - _voxel_value(data, x - 1, y, z))
    gy = float(_voxel_value(data, x, y + 1, z) - _voxel_value(data, x, y - 1, z))
    gz = float(_voxel_value(data, x, y, z + 1) - _voxel_value(data, x, y, z - 1))
    norm = np.sqrt(gx * gx + gy * gy + gz * gz)
    out = np.zeros(3)
    if norm > 0.0:
        out[0] = gx / norm
        out[1] = gy / norm
        out[2] = gz / norm
    return out


class DensityField:
    def __init__(self, resolution, thickness, data):
        self.resolution = tuple(int(r) for r in resolution)
        self.thickness = np.array(thickness, dtype=np.float64)
        x, y, z = self.resolution
        self.data = np.array(data, dtype=np.uint8).reshape((z, y, x))

    def value(self, x, y, z):
        """Density at voxel (x, y, z); 0 outside the grid."""
        return _voxel_value(self.data, int(x), int(y), int(z))

    def gradient(self, x, y, z):
        """Normalized central-difference density gradient at voxel (x, y, z)."""
        return _voxel_gradient(self.data, int(x), int(y), int(z))


def read_metadata(source):
    """Parse resolution and slice thickness from a ``.dat`` header.

    Args:
        source: path or open text file.

    Returns:
        (resolution, thickness) tuples; missing keys stay zero.
    """
    resolution = [0, 0, 0]
    thickness = [0.0, 0.0, 0.0]

    lines = _read_lines(source)
    for line in lines:
        kv = _SEPARATORS.sub(":", line.strip()).split(":")
        if kv[0] == "Resolution":
            resolution = [int(v) for v in kv[1:4]]
        elif kv[0] == "SliceThickness":
            thickness = [float(v) for v in kv[1:4]]

    return tuple(resolution), tuple(thickness)


def load_density_field(dat_source, raw_source):
    """Load a density field from a header and a raw byte source.

    Raises:
        InvalidDataError: if the raw source holds fewer bytes than the
            header's resolution implies.
    """
    resolution, thickness = read_metadata(dat_source)
    expected = resolution[0] * resolution[1] * resolution[2]

    if hasattr(raw_source, "read"):
        raw = raw_source.read(expected)
    else:
        with open(raw_source, "rb") as f:
            raw = f.read(expected)

    if len(raw) != expected:
        raise InvalidDataError(f"Failed to read the {expected}-byte raw data (got {len(raw)} bytes)")

    logger.info("Loaded %dx%dx%d density field", *resolution)
    return DensityField(resolution, thickness, np.frombuffer(raw, dtype=np.uint8))


def _read_lines(source):
    if hasattr(source, "read"):
        return source.read().splitlines()
    with open(source, "r") as f:
        return f.read().splitlines()
