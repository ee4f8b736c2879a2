"""
Attack marker overlay and the marker store.

Markers are drawn last and win over every other layer.
"""

import logging
import math
import threading
from collections import OrderedDict
from types import MappingProxyType

from .compositor import Tag
from .models import AttackMarker
from .projection import project

log = logging.getLogger("mhn_globe.markers")

ATTACK_GLYPH = "*"
DEFAULT_PROTOCOL_GLYPH = "!"

PROTOCOL_GLYPHS = {
    'ssh': '#',
    'telnet': '~',
    'smtp': '@',
    'http': ':',
    'https': ':',
    'ftp': '%',
}

DEFAULT_CAPACITY = 1000


def protocol_glyph(protocol: str) -> str:
    return PROTOCOL_GLYPHS.get(protocol.lower(), DEFAULT_PROTOCOL_GLYPH)


def marker_draws(state, markers, rotation, protocol_glyphs=False):
    """Project valid markers onto the grid.

    Args:
        markers: Mapping of id -> AttackMarker, or an iterable of markers

    Returns:
        List of (x, y, glyph, tag)
    """
    if hasattr(markers, 'values'):
        markers = markers.values()

    draws = []
    for marker in markers:
        if not marker.valid:
            continue
        # Unvalidated (model_construct) markers can still carry NaN or inf
        if not (math.isfinite(marker.latitude) and math.isfinite(marker.longitude)):
            continue
        x, y, visible = project(state, marker.latitude, marker.longitude, rotation)
        if not visible:
            continue
        if protocol_glyphs and marker.protocol:
            draws.append((x, y, protocol_glyph(marker.protocol), Tag.GLYPH))
        else:
            draws.append((x, y, ATTACK_GLYPH, Tag.ATTACK))
    return draws


class MarkerStore:
    """Bounded id -> marker map shared between producers and the frame loop.

    Oldest entries are evicted first once capacity is reached. Snapshots
    only carry resolved (valid) markers.
    """

    def __init__(self, capacity=DEFAULT_CAPACITY):
        self._markers: OrderedDict[str, AttackMarker] = OrderedDict()
        self._lock = threading.Lock()
        self.capacity = capacity

    def put(self, marker_id: str, marker: AttackMarker):
        with self._lock:
            self._markers[marker_id] = marker
            self._markers.move_to_end(marker_id)
            while len(self._markers) > self.capacity:
                evicted, _ = self._markers.popitem(last=False)
                log.debug("Evicted marker %s", evicted)

    def remove(self, marker_id: str):
        with self._lock:
            self._markers.pop(marker_id, None)

    def clear(self):
        with self._lock:
            self._markers.clear()

    def snapshot(self):
        with self._lock:
            valid = {k: m for k, m in self._markers.items() if m.valid}
        return MappingProxyType(valid)

    def __len__(self):
        with self._lock:
            return len(self._markers)
