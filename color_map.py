import numpy as np


class ColorMap:
    """Maps a byte density sample to an RGB color.

    Colors are interpolated linearly between ``(value, color)`` stops and
    cached in a 256-entry lookup table.
    """

    def __init__(self, stops=((0, (0.0, 0.0, 0.0)), (255, (1.0, 1.0, 1.0)))):
        stops = sorted(stops, key=lambda s: s[0])
        if not stops:
            raise ValueError("ColorMap needs at least one stop")
        values = np.array([s[0] for s in stops], dtype=np.float64)
        colors = np.array([s[1] for s in stops], dtype=np.float64)
        samples = np.arange(256, dtype=np.float64)
        self.table = np.stack(
            [np.interp(samples, values, colors[:, channel]) for channel in range(3)],
            axis=1,
        )

    def __call__(self, value):
        return self.table[min(max(int(value), 0), 255)].copy()

    get_color = __call__
