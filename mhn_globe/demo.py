"""Synthetic attack generator for demos and testing without a live feed."""

import logging
import random
import threading
import time

from .models import AttackMarker

log = logging.getLogger("mhn_globe.demo")

PROTOCOLS = ["ssh", "telnet", "http", "ftp", "smtp"]

# (lat, lon) of typical attack sources
SOURCE_CITIES = {
    'Beijing': (39.9042, 116.4074),
    'Moscow': (55.7558, 37.6173),
    'Sao Paulo': (-23.5505, -46.6333),
    'Lagos': (6.5244, 3.3792),
    'Mumbai': (19.0760, 72.8777),
    'Jakarta': (-6.2088, 106.8456),
    'Frankfurt': (50.1109, 8.6821),
    'Amsterdam': (52.3676, 4.9041),
    'Seoul': (37.5665, 126.9780),
    'Hanoi': (21.0278, 105.8342),
    'Tehran': (35.6892, 51.3890),
    'Kyiv': (50.4501, 30.5234),
    'Singapore': (1.3521, 103.8198),
    'Ashburn': (39.0438, -77.4874),
    'Sydney': (-33.8688, 151.2093),
    'Johannesburg': (-26.2041, 28.0473),
    'Mexico City': (19.4326, -99.1332),
    'Bucharest': (44.4268, 26.1025),
}


def random_ip(rng) -> str:
    return ".".join(str(rng.randrange(256)) for _ in range(4))


class DemoStorm:
    """Emits random attacks into a MarkerStore and an ArcManager."""

    def __init__(self, markers, arcs, rate=10, rng=None, clock=time.monotonic):
        self.markers = markers
        self.arcs = arcs
        self.rate = max(1, rate)
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._stop = threading.Event()
        self._thread = None

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def emit(self, now=None):
        """Generate a single attack. Returns (ip, marker)."""
        if now is None:
            now = self._clock()
        city = self._rng.choice(list(SOURCE_CITIES))
        lat, lon = SOURCE_CITIES[city]
        # Scatter around the city so repeated hits do not stack on one cell
        lat += self._rng.uniform(-2.0, 2.0)
        lon += self._rng.uniform(-2.0, 2.0)
        protocol = self._rng.choice(PROTOCOLS)
        ip = random_ip(self._rng)

        marker = AttackMarker(latitude=lat, longitude=lon, valid=True, protocol=protocol)
        self.markers.put(ip, marker)
        self.arcs.add_arc(lat, lon, protocol, now)
        log.debug("Demo attack %s from %s via %s", ip, city, protocol)
        return ip, marker

    def _run(self):
        interval = 1.0 / self.rate
        while not self._stop.wait(interval):
            self.emit()

    def start(self):
        if self.active:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="demo-storm", daemon=True)
        self._thread.start()
        log.info("Demo storm started at %d attacks/s", self.rate)

    def stop(self):
        if not self.active:
            return
        self._stop.set()
        self._thread.join(timeout=1.0)
        self._thread = None
        log.info("Demo storm stopped")
