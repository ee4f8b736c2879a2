"""
Orthographic sphere projection between geographic and screen coordinates.

Screen space has x growing right and y growing down, with the sphere centred
on (width // 2, height // 2) plus the pan offsets. Character cells are taller
than they are wide, so the vertical axis is compressed by the aspect ratio.
"""

import math

import numpy as np
from pydantic import BaseModel, ConfigDict, field_validator

MIN_RADIUS = 1.0
RADIUS_DIVISOR = 2.5


def normalize_lon(lon):
    """Wrap a longitude (scalar or array) into [-180, 180)."""
    return (lon + 180.0) % 360.0 - 180.0


class SphereState(BaseModel):
    """Viewport geometry for one frame. Rebuilt on resize."""

    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    aspect_ratio: float = 2.0
    radius: float = MIN_RADIUS
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    @field_validator("radius")
    @classmethod
    def _floor_radius(cls, v):
        return max(MIN_RADIUS, v)

    @field_validator("aspect_ratio")
    @classmethod
    def _positive_aspect(cls, v):
        if v <= 0:
            raise ValueError("aspect_ratio must be positive")
        return v

    @classmethod
    def for_viewport(cls, width, height, aspect_ratio=2.0, **view):
        """Size the sphere to fit a width x height character viewport."""
        radius = min(width / RADIUS_DIVISOR, height * aspect_ratio / RADIUS_DIVISOR)
        return cls(width=width, height=height, aspect_ratio=aspect_ratio,
                   radius=radius, **view)

    def with_view(self, **changes):
        return self.model_copy(update=changes)

    def resized(self, width, height):
        """New state for a resized viewport, keeping zoom and pan."""
        return SphereState.for_viewport(width, height, self.aspect_ratio,
                                        zoom=self.zoom, pan_x=self.pan_x, pan_y=self.pan_y)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def effective_radius(self) -> float:
        return self.radius * self.zoom

    @property
    def center(self):
        return self.width // 2, self.height // 2


def _view_lon_rad(lon, rotation):
    # Raster longitudes run opposite to the rotation direction, offset a quarter turn
    adjusted = normalize_lon(-lon + 90.0)
    return np.radians(adjusted + np.degrees(rotation))


def surface_vector(lat, lon, rotation):
    """Unit vector (x, y, z) of a surface point in view space, z toward the viewer."""
    lat_rad = np.radians(lat)
    lon_rad = _view_lon_rad(lon, rotation)
    cos_lat = np.cos(lat_rad)
    return cos_lat * np.cos(lon_rad), np.sin(lat_rad), cos_lat * np.sin(lon_rad)


def project(state: SphereState, lat: float, lon: float, rotation: float):
    """Forward-project a geographic point.

    Returns:
        (screen_x, screen_y, visible). Points on the far hemisphere or
        outside the viewport come back as (0, 0, False).
    """
    lat_rad = math.radians(lat)
    lon_rad = math.radians(normalize_lon(-lon + 90.0) + math.degrees(rotation))

    x = math.cos(lat_rad) * math.cos(lon_rad)
    y = math.sin(lat_rad)
    z = math.cos(lat_rad) * math.sin(lon_rad)

    if z < 0:
        return 0, 0, False

    er = state.effective_radius
    cx, cy = state.center
    screen_x = math.floor(x * er + state.pan_x + cx)
    screen_y = math.floor(-y * er / state.aspect_ratio + state.pan_y + cy)

    if not (0 <= screen_x < state.width and 0 <= screen_y < state.height):
        return 0, 0, False

    return screen_x, screen_y, True


def project_points(state: SphereState, lats, lons, rotation: float):
    """Vectorized project(); returns (xs, ys, visible) int/bool arrays."""
    x, y, z = surface_vector(np.asarray(lats, dtype=np.float64),
                             np.asarray(lons, dtype=np.float64), rotation)
    er = state.effective_radius
    cx, cy = state.center

    xs = np.floor(x * er + state.pan_x + cx).astype(np.int64)
    ys = np.floor(-y * er / state.aspect_ratio + state.pan_y + cy).astype(np.int64)

    visible = (z >= 0) & (xs >= 0) & (xs < state.width) & (ys >= 0) & (ys < state.height)
    return xs, ys, visible


def unproject(state: SphereState, screen_x: float, screen_y: float, rotation: float):
    """Inverse-project a screen position to (lat, lon), or None off the sphere."""
    er = state.effective_radius
    cx, cy = state.center

    nx = ((screen_x - cx) - state.pan_x) / er
    ny = ((screen_y - cy) - state.pan_y) * state.aspect_ratio / er

    rest = 1.0 - nx * nx - ny * ny
    if rest < 0:
        return None

    nz = math.sqrt(rest)
    # Screen y points down, latitude points up
    lat = math.degrees(math.asin(-ny))
    lon = normalize_lon(math.degrees(math.atan2(nx, nz)) + math.degrees(rotation))
    return lat, lon


def unproject_grid(state: SphereState, rotation: float):
    """Inverse-project every cell of the viewport at once.

    Returns:
        dict with:
            - distance: aspect/pan corrected distance from the sphere centre
            - on_sphere: bool mask of cells that map to a surface point
            - lat, lon: degrees, valid where on_sphere
    """
    er = state.effective_radius
    cx, cy = state.center

    py_grid, px_grid = np.mgrid[0:state.height, 0:state.width]
    dx = (px_grid - cx) - state.pan_x
    dy = ((py_grid - cy) - state.pan_y) * state.aspect_ratio
    distance = np.sqrt(dx * dx + dy * dy)

    nx = dx / er
    ny = dy / er
    rest = 1.0 - nx * nx - ny * ny
    on_sphere = (distance <= er) & (rest >= 0)

    nz = np.sqrt(np.maximum(rest, 0.0))
    lat = np.degrees(np.arcsin(np.clip(-ny, -1.0, 1.0)))
    lon = normalize_lon(np.degrees(np.arctan2(nx, nz)) + math.degrees(rotation))

    return {
        'distance': distance,
        'on_sphere': on_sphere,
        'lat': lat,
        'lon': lon,
    }
