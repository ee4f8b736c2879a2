"""
Per-cell ink accumulation for the globe body.

Every viewport cell inside the sphere is inverse-projected and sampled
against the terrain raster. Land adds its weight times the light intensity to
the cell and a small bleed to its eight neighbours; a ring at the sphere's
edge adds a fixed amount so the outline shows over the ocean.
"""

import numpy as np

from .charsets import densities_to_chars
from .lighting import intensity
from .projection import unproject_grid

NEIGHBOUR_BLEED = 0.05
RING_DENSITY = 0.2
RING_HALF_WIDTH = 0.5

_NEIGHBOURS = [(dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)]


class DensityField:
    """Result of one accumulation pass."""

    def __init__(self, density, land, ring):
        self.density = density
        self.land = land
        self.ring = ring

    @property
    def shape(self):
        return self.density.shape

    def to_chars(self, charset):
        return densities_to_chars(self.density, charset)


def _spread_to_neighbours(values):
    """Sum of each cell's eight neighbours, treating out-of-grid as zero."""
    h, w = values.shape
    padded = np.pad(values, 1, mode='constant')
    total = np.zeros_like(values)
    for dy, dx in _NEIGHBOURS:
        total += padded[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
    return total


def accumulate_density(state, terrain, rotation, lighting):
    """Accumulate terrain, bleed and outline ink for every viewport cell.

    Args:
        state: SphereState (must not be empty)
        terrain: TerrainRaster
        rotation: Globe rotation in radians
        lighting: LightingConfig

    Returns:
        DensityField
    """
    grid = unproject_grid(state, rotation)
    on_sphere = grid['on_sphere']

    weights = np.zeros(on_sphere.shape, dtype=np.float64)
    light = np.zeros(on_sphere.shape, dtype=np.float64)
    if on_sphere.any():
        lats = grid['lat'][on_sphere]
        lons = grid['lon'][on_sphere]
        weights[on_sphere] = terrain.weights_at(lats, lons)
        light[on_sphere] = intensity(lats, lons, rotation, lighting)

    land = weights > 0
    direct = np.where(land, weights * light, 0.0)
    bleed = np.where(land, NEIGHBOUR_BLEED * light, 0.0)

    density = direct + _spread_to_neighbours(bleed)

    er = state.effective_radius
    distance = grid['distance']
    ring = (distance > er - RING_HALF_WIDTH) & (distance < er + RING_HALF_WIDTH)
    density[ring] += RING_DENSITY

    return DensityField(density, land, ring)
