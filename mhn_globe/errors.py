"""Exception types raised outside the render path.

The engine itself clamps its inputs and never raises; these cover loading
terrain data and validating user configuration.
"""


class GlobeError(Exception):
    """Base class for mhn_globe errors."""


class TerrainError(GlobeError):
    """A terrain raster could not be built from the given source."""


class ConfigError(GlobeError):
    """A configuration value is out of range or unknown."""
