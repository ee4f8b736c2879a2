"""ASCII globe renderer for honeypot attack feeds."""

from .charsets import Charset, density_to_char
from .compositor import Frame, Tag
from .models import AttackArc, AttackMarker, LightingConfig, RenderParams
from .projection import SphereState, project, unproject
from .renderer import render_frame
from .terrain import TerrainRaster, default_terrain, load_terrain

__version__ = "0.1.0"

__all__ = [
    'AttackArc',
    'AttackMarker',
    'Charset',
    'Frame',
    'LightingConfig',
    'RenderParams',
    'SphereState',
    'Tag',
    'TerrainRaster',
    'default_terrain',
    'density_to_char',
    'load_terrain',
    'project',
    'render_frame',
    'unproject',
]
