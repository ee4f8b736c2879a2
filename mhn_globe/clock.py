"""Wall-clock driven globe rotation."""

import math
import time

MIN_SPIN = 0.1
MAX_SPIN = 5.0
SPIN_STEP = 0.1


class RotationClock:
    """Rotation angle as a function of elapsed time.

    The angle is computed from an anchor (time, angle) rather than
    accumulated per frame, so late or skipped ticks never cause drift.
    Pausing or changing speed re-anchors at the current angle.
    """

    def __init__(self, period=30.0, spin_speed=1.0, start=None):
        if period <= 0:
            raise ValueError("rotation period must be positive")
        self.period = period
        self.spin_speed = spin_speed
        self.paused = False
        self._anchor_time = time.monotonic() if start is None else start
        self._anchor_angle = 0.0

    def rotation(self, now=None) -> float:
        if now is None:
            now = time.monotonic()
        if self.paused:
            return self._anchor_angle
        elapsed = now - self._anchor_time
        return self._anchor_angle - (elapsed / self.period) * 2 * math.pi * self.spin_speed

    def _reanchor(self, now):
        self._anchor_angle = self.rotation(now)
        self._anchor_time = now

    def pause(self, now=None):
        if now is None:
            now = time.monotonic()
        if not self.paused:
            self._reanchor(now)
            self.paused = True

    def resume(self, now=None):
        if now is None:
            now = time.monotonic()
        if self.paused:
            self._anchor_time = now
            self.paused = False

    def toggle_pause(self, now=None):
        if self.paused:
            self.resume(now)
        else:
            self.pause(now)

    def set_spin_speed(self, speed, now=None):
        if now is None:
            now = time.monotonic()
        self._reanchor(now)
        self.spin_speed = round(min(MAX_SPIN, max(MIN_SPIN, speed)), 1)

    def faster(self, now=None):
        self.set_spin_speed(self.spin_speed + SPIN_STEP, now)

    def slower(self, now=None):
        self.set_spin_speed(self.spin_speed - SPIN_STEP, now)
