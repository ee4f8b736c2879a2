"""Lambertian diffuse lighting with an ambient floor."""

import math

import numpy as np

from .models import LightingConfig
from .projection import surface_vector

AMBIENT_FLOOR = 0.2
AXIAL_TILT_DEG = 23.5


def light_position(lighting: LightingConfig, rotation: float):
    """(lat, lon) of the light source for this frame, in degrees."""
    if lighting.follow:
        # Light counter-rotates with the globe
        return AXIAL_TILT_DEG, -math.degrees(rotation)
    return lighting.lat, lighting.lon


def light_direction(lighting: LightingConfig, rotation: float):
    light_lat, light_lon = light_position(lighting, rotation)
    lat_rad = math.radians(light_lat)
    lon_rad = math.radians(light_lon)
    return (
        math.cos(lat_rad) * math.cos(lon_rad),
        math.sin(lat_rad),
        math.cos(lat_rad) * math.sin(lon_rad),
    )


def intensity(lat, lon, rotation: float, lighting: LightingConfig):
    """Diffuse intensity in [0.2, 1.0] for a point or an array of points.

    Returns 1.0 everywhere when lighting is disabled.
    """
    if not lighting.enabled:
        if np.ndim(lat) == 0:
            return 1.0
        return np.ones(np.shape(lat), dtype=np.float64)

    nx, ny, nz = surface_vector(lat, lon, rotation)
    lx, ly, lz = light_direction(lighting, rotation)
    dot = nx * lx + ny * ly + nz * lz
    result = np.clip(dot, AMBIENT_FLOOR, 1.0)
    if np.ndim(result) == 0:
        return float(result)
    return result
