"""
Globe frame renderer.

render_frame() is a pure function of its arguments: the viewport geometry,
the terrain, the per-frame parameters and immutable marker/arc snapshots.
It does no I/O and keeps no state between calls.
"""

import logging
import time

from .arcs import ARC_GLYPH, arc_draws
from .compositor import Frame, compose, density_tags
from .density import accumulate_density
from .markers import marker_draws

log = logging.getLogger("mhn_globe.renderer")


def render_frame(state, terrain, params, markers=None, arcs=(), now=None, decorations=()):
    """Render one globe frame.

    Args:
        state: SphereState for the current viewport
        terrain: TerrainRaster
        params: RenderParams (rotation, lighting, charset, arc style, glyphs)
        markers: Snapshot mapping of id -> AttackMarker
        arcs: Snapshot sequence of AttackArc
        now: Timestamp used to age arcs (same clock as arc.created_at)
        decorations: (x, y, glyph) cells from passthrough effects

    Returns:
        Frame. A 1x1 blank frame when the viewport is empty.
    """
    if state.is_empty:
        log.debug("Empty viewport %dx%d, returning blank frame", state.width, state.height)
        return Frame.blank()

    if now is None:
        now = time.monotonic()

    t_start = time.perf_counter()
    field = accumulate_density(state, terrain, params.rotation, params.lighting)
    chars = field.to_chars(params.charset)
    tags = density_tags(chars, field.land, field.ring)
    t_density = time.perf_counter()

    arc_cells = arc_draws(state, arcs, params.rotation, params.arc_style, now)
    t_arcs = time.perf_counter()

    hits = marker_draws(state, markers or {}, params.rotation, params.protocol_glyphs)
    t_markers = time.perf_counter()

    frame = compose(chars, tags, arc_cells, decorations, hits, arc_glyph=ARC_GLYPH)
    t_end = time.perf_counter()

    frame.timings = {
        'density': (t_density - t_start) * 1000,
        'arcs': (t_arcs - t_density) * 1000,
        'markers': (t_markers - t_arcs) * 1000,
        'compose': (t_end - t_markers) * 1000,
        'total': (t_end - t_start) * 1000,
    }
    return frame
