"""
Equirectangular land/ocean raster and the surface sampler.

Rows run north to south and columns west to east. '#' is land, any other
non-space character is variant land and a space is ocean.
"""

import logging
from pathlib import Path

import numpy as np

from .errors import TerrainError

log = logging.getLogger("mhn_globe.terrain")

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_TERRAIN_FILE = DATA_DIR / "earth_120x60.txt"

LAND = "#"
OCEAN = " "

LAND_WEIGHT = 1.0
VARIANT_WEIGHT = 0.8

# Mean brightness above this is water in the source image
BRIGHTNESS_THRESHOLD = 128


def terrain_weight(char: str) -> float:
    if char == LAND:
        return LAND_WEIGHT
    if char == OCEAN:
        return 0.0
    return VARIANT_WEIGHT


class TerrainRaster:
    """Immutable character bitmap of the Earth's surface."""

    def __init__(self, rows):
        rows = [str(r) for r in rows]
        if not rows:
            raise TerrainError("terrain raster has no rows")
        width = max(len(r) for r in rows)
        if width == 0:
            raise TerrainError("terrain raster has no columns")

        self._rows = tuple(r.ljust(width, OCEAN) for r in rows)
        self.width = width
        self.height = len(self._rows)

        self._chars = np.array([list(r) for r in self._rows], dtype="<U1")
        self._weights = np.where(
            self._chars == LAND, LAND_WEIGHT,
            np.where(self._chars == OCEAN, 0.0, VARIANT_WEIGHT),
        ).astype(np.float64)
        self._chars.setflags(write=False)
        self._weights.setflags(write=False)

    @property
    def rows(self):
        return self._rows

    @property
    def shape(self):
        return self.height, self.width

    def _indices(self, lat, lon):
        lat_norm = (np.asarray(lat, dtype=np.float64) + 90.0) / 180.0
        lon_norm = (np.asarray(lon, dtype=np.float64) + 180.0) / 360.0

        lat_idx = np.floor(lat_norm * (self.height - 1)).astype(np.int64)
        col = np.floor(lon_norm * (self.width - 1)).astype(np.int64)
        lat_idx = np.clip(lat_idx, 0, self.height - 1)
        col = np.clip(col, 0, self.width - 1)

        # Latitude counts up from the southern (last) row
        row = (self.height - 1) - lat_idx
        return row, col

    def sample_at(self, lat: float, lon: float) -> str:
        """Terrain character under a geographic point."""
        row, col = self._indices(lat, lon)
        return self._rows[int(row)][int(col)]

    def weight_at(self, lat: float, lon: float) -> float:
        return terrain_weight(self.sample_at(lat, lon))

    def weights_at(self, lats, lons):
        """Vectorized terrain weights for arrays of latitudes/longitudes."""
        row, col = self._indices(lats, lons)
        return self._weights[row, col]

    def land_fraction(self) -> float:
        return float(np.count_nonzero(self._weights) / self._weights.size)

    def __repr__(self):
        return f"TerrainRaster({self.width}x{self.height})"


def load_terrain(path) -> TerrainRaster:
    """Load a raster from a text file, one row per line."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TerrainError(f"cannot read terrain file {path}: {e}") from e

    rows = text.split("\n")
    # A trailing newline is not an extra row
    while rows and rows[-1].strip("\r") == "":
        rows.pop()
    rows = [r.rstrip("\r") for r in rows]

    raster = TerrainRaster(rows)
    log.debug("Loaded terrain %s from %s (%.0f%% land)",
              raster, path, raster.land_fraction() * 100)
    return raster


_default_terrain = None


def default_terrain() -> TerrainRaster:
    """The built-in 120x60 Earth bitmap (loaded once)."""
    global _default_terrain
    if _default_terrain is None:
        _default_terrain = load_terrain(DEFAULT_TERRAIN_FILE)
    return _default_terrain


def raster_from_pixels(pixels, width=120, height=60, threshold=BRIGHTNESS_THRESHOLD):
    """Build a raster from an equirectangular image array.

    Args:
        pixels: (H, W) grayscale or (H, W, C) colour array, 0-255 values
        width, height: Target raster dimensions
        threshold: Mean brightness above which a pixel is ocean

    Nearest-pixel sampling with a fixed brightness cutoff; coastlines are
    coarse by construction.
    """
    img = np.asarray(pixels)
    if img.ndim == 3:
        img = img[:, :, :3].mean(axis=2)
    elif img.ndim != 2:
        raise TerrainError(f"expected a 2D or 3D image array, got shape {img.shape}")
    if width <= 0 or height <= 0:
        raise TerrainError(f"invalid target size {width}x{height}")

    src_h, src_w = img.shape
    scale_x = src_w / width
    scale_y = src_h / height

    ys = (np.arange(height) * scale_y).astype(np.int64)
    xs = (np.arange(width) * scale_x).astype(np.int64)
    sampled = img[ys[:, None], xs[None, :]]

    land = sampled <= threshold
    rows = ["".join(LAND if cell else OCEAN for cell in row) for row in land]
    return TerrainRaster(rows)
