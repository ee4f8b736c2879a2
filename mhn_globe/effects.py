"""Decorative passthrough layers. Drawn only into empty background cells."""

import numpy as np

RAIN_GLYPH = "|"
MAX_RAIN_SPEED = 1.5


class MatrixRain:
    """Falling columns of glyphs behind the globe."""

    def __init__(self, width, height, density=5, rng=None):
        self.width = max(1, width)
        self.height = max(1, height)
        self.density = density
        self.enabled = False
        self._rng = rng if rng is not None else np.random.default_rng()

        n = (self.width * density) // 10
        self.xs = self._rng.integers(0, self.width, size=n)
        self.ys = self._rng.integers(0, self.height, size=n).astype(np.float64) - self.height
        self.speeds = 0.3 + self._rng.random(n) * MAX_RAIN_SPEED
        self.lengths = self._rng.integers(5, 20, size=n)

    def __len__(self):
        return len(self.xs)

    def update(self):
        self.ys += self.speeds
        # Columns whose tail has left the bottom restart above the top
        gone = (self.ys - self.lengths) >= self.height
        if gone.any():
            self.ys[gone] = -self._rng.integers(0, self.height, size=int(gone.sum()))
            self.xs[gone] = self._rng.integers(0, self.width, size=int(gone.sum()))

    def resize(self, width, height):
        rain = MatrixRain(width, height, self.density, self._rng)
        rain.enabled = self.enabled
        return rain

    def cells(self):
        """(x, y, glyph) for every visible rain cell."""
        if not self.enabled:
            return []
        out = []
        for x, head, length in zip(self.xs.tolist(), self.ys.tolist(), self.lengths.tolist()):
            head = int(head)
            for y in range(head - length + 1, head + 1):
                if 0 <= y < self.height:
                    out.append((x, y, RAIN_GLYPH))
        return out
