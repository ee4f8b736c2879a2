"""
Attack arc trails: path sampling, fading, and the arc owner.

Arcs are sampled at a fixed number of steps between source and destination,
either along a straight lat/lon line or a cubic Bezier bowed toward the north.
Later samples (closer to the destination) are brighter, and the whole trail
fades linearly over the arc's TTL.
"""

import logging
import threading

import numpy as np

from .models import AttackArc
from .projection import project_points

log = logging.getLogger("mhn_globe.arcs")

ARC_STEPS = 30
ARC_HEIGHT = 20.0
MIN_VISIBILITY = 0.3
ARC_GLYPH = "·"

# Kansas City
DEFAULT_DST_LAT = 39.0997
DEFAULT_DST_LON = -94.5786
DEFAULT_TRAIL_MS = 1200


def bezier_point(t, p0, p1, p2, p3):
    u = 1 - t
    return u * u * u * p0 + 3 * u * u * t * p1 + 3 * u * t * t * p2 + t * t * t * p3


def fade_factor(arc: AttackArc, now: float) -> float:
    """1.0 for a fresh arc, falling to 0.0 at its TTL."""
    if arc.ttl <= 0:
        return 0.0
    return 1.0 - arc.age(now) / arc.ttl


def arc_path(arc: AttackArc, style: str, steps: int = ARC_STEPS):
    """Sample an arc's path.

    Returns:
        (t, lats, lons) arrays of steps + 1 samples from source to destination
    """
    t = np.linspace(0.0, 1.0, steps + 1)

    if style == "curved":
        mid_lat = (arc.src_lat + arc.dst_lat) / 2
        mid_lon = (arc.src_lon + arc.dst_lon) / 2

        cp1_lat = arc.src_lat + (mid_lat - arc.src_lat) * 0.5 + ARC_HEIGHT
        cp1_lon = arc.src_lon + (mid_lon - arc.src_lon) * 0.5
        cp2_lat = mid_lat + (arc.dst_lat - mid_lat) * 0.5 + ARC_HEIGHT
        cp2_lon = mid_lon + (arc.dst_lon - mid_lon) * 0.5

        lats = bezier_point(t, arc.src_lat, cp1_lat, cp2_lat, arc.dst_lat)
        lons = bezier_point(t, arc.src_lon, cp1_lon, cp2_lon, arc.dst_lon)
    else:
        lats = arc.src_lat + t * (arc.dst_lat - arc.src_lat)
        lons = arc.src_lon + t * (arc.dst_lon - arc.src_lon)

    return t, lats, lons


def arc_draws(state, arcs, rotation, style, now):
    """Screen cells covered by the visible part of every live arc.

    Returns:
        List of (x, y) cells in draw order. The compositor only paints the
        ones that are still background.
    """
    if style == "off" or not arcs:
        return []

    cells = []
    for arc in arcs:
        fade = fade_factor(arc, now)
        if fade <= 0:
            log.debug("Skipping stale arc from (%.2f, %.2f)", arc.src_lat, arc.src_lon)
            continue

        t, lats, lons = arc_path(arc, style)
        xs, ys, visible = project_points(state, lats, lons, rotation)
        bright = fade * (0.3 + 0.7 * t) > MIN_VISIBILITY

        keep = visible & bright
        cells.extend(zip(xs[keep].tolist(), ys[keep].tolist()))

    return cells


class ArcManager:
    """Owns live arcs. Producers add, the frame loop prunes and snapshots."""

    def __init__(self, trail_ms=DEFAULT_TRAIL_MS,
                 dst_lat=DEFAULT_DST_LAT, dst_lon=DEFAULT_DST_LON):
        self._arcs: list[AttackArc] = []
        self._lock = threading.Lock()
        self.ttl = trail_ms / 1000.0
        self.dst_lat = dst_lat
        self.dst_lon = dst_lon

    def add_arc(self, src_lat: float, src_lon: float, protocol, now: float) -> AttackArc:
        arc = AttackArc(
            src_lat=src_lat,
            src_lon=src_lon,
            dst_lat=self.dst_lat,
            dst_lon=self.dst_lon,
            created_at=now,
            ttl=self.ttl,
            protocol=protocol,
        )
        with self._lock:
            self._arcs.append(arc)
        return arc

    def cleanup_expired(self, now: float) -> int:
        """Drop arcs whose age has reached their TTL. Returns the number dropped."""
        with self._lock:
            before = len(self._arcs)
            self._arcs = [a for a in self._arcs if a.age(now) < a.ttl]
            dropped = before - len(self._arcs)
        if dropped:
            log.debug("Pruned %d expired arcs", dropped)
        return dropped

    def snapshot(self) -> tuple:
        with self._lock:
            return tuple(self._arcs)

    def clear(self):
        with self._lock:
            self._arcs = []

    def __len__(self):
        with self._lock:
            return len(self._arcs)
