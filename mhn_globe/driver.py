"""
Frame loop driver.

The driver owns every piece of mutable view state (sphere geometry, render
parameters, rotation clock, theme, effects). Input handlers never touch that
state directly: they post commands, and the single render-owning task drains
the queue at the start of each tick.
"""

import enum
import logging
import queue
import time

import numpy as np

from .arcs import ArcManager
from .charsets import next_charset
from .clock import RotationClock
from .markers import MarkerStore
from .models import RenderParams
from .projection import SphereState
from .renderer import render_frame
from .themes import next_theme

log = logging.getLogger("mhn_globe.driver")

ZOOM_STEP = 0.1
MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
PAN_STEP = 2.0


class Command(str, enum.Enum):
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    PAN_UP = "pan_up"
    PAN_DOWN = "pan_down"
    PAN_LEFT = "pan_left"
    PAN_RIGHT = "pan_right"
    RESET_VIEW = "reset_view"
    TOGGLE_LIGHTING = "toggle_lighting"
    CYCLE_CHARSET = "cycle_charset"
    TOGGLE_ARCS = "toggle_arcs"
    TOGGLE_GLYPHS = "toggle_glyphs"
    TOGGLE_RAIN = "toggle_rain"
    CYCLE_THEME = "cycle_theme"
    TOGGLE_PAUSE = "toggle_pause"
    SPIN_FASTER = "spin_faster"
    SPIN_SLOWER = "spin_slower"


class Resize:
    """Viewport resize command."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    def __repr__(self):
        return f"Resize({self.width}, {self.height})"


class Layer(enum.Flag):
    """Parts of the screen that need repainting."""

    NONE = 0
    GLOBE = 1
    STATUS = 2
    ALL = 3


class FrameLoop:

    def __init__(self, terrain, state: SphereState, params: RenderParams,
                 clock: RotationClock = None, markers: MarkerStore = None,
                 arcs: ArcManager = None, rain=None, recorder=None,
                 theme='default', scanlines=False, time_source=time.monotonic):
        self.terrain = terrain
        self.state = state
        self.params = params
        self.clock = clock if clock is not None else RotationClock()
        self.markers = markers if markers is not None else MarkerStore()
        self.arcs = arcs if arcs is not None else ArcManager()
        self.rain = rain
        self.recorder = recorder
        self.theme = theme
        self.scanlines = scanlines

        self.commands = queue.SimpleQueue()
        self.dirty = Layer.ALL
        self.last_frame = None
        self._last_status = None
        self._time = time_source
        self._saved_arc_style = params.arc_style if params.arc_style != "off" else "curved"

    # --- Input side ---

    def post(self, command):
        """Queue a Command or Resize. Safe to call from any thread."""
        self.commands.put(command)

    # --- Render side ---

    def _apply(self, command, now):
        p = self.params
        s = self.state

        if isinstance(command, Resize):
            self.state = s.resized(command.width, command.height)
            if self.rain is not None:
                self.rain = self.rain.resize(command.width, command.height)
            log.debug("Resized viewport to %dx%d", command.width, command.height)
            return

        if command is Command.ZOOM_IN:
            self.state = s.with_view(zoom=round(min(MAX_ZOOM, s.zoom + ZOOM_STEP), 2))
        elif command is Command.ZOOM_OUT:
            self.state = s.with_view(zoom=round(max(MIN_ZOOM, s.zoom - ZOOM_STEP), 2))
        elif command is Command.PAN_UP:
            self.state = s.with_view(pan_y=s.pan_y - PAN_STEP)
        elif command is Command.PAN_DOWN:
            self.state = s.with_view(pan_y=s.pan_y + PAN_STEP)
        elif command is Command.PAN_LEFT:
            self.state = s.with_view(pan_x=s.pan_x - PAN_STEP)
        elif command is Command.PAN_RIGHT:
            self.state = s.with_view(pan_x=s.pan_x + PAN_STEP)
        elif command is Command.RESET_VIEW:
            self.state = s.with_view(zoom=1.0, pan_x=0.0, pan_y=0.0)
        elif command is Command.TOGGLE_LIGHTING:
            lighting = p.lighting.model_copy(update={'enabled': not p.lighting.enabled})
            self.params = p.model_copy(update={'lighting': lighting})
        elif command is Command.CYCLE_CHARSET:
            self.params = p.model_copy(update={'charset': next_charset(p.charset)})
        elif command is Command.TOGGLE_ARCS:
            if p.arc_style == "off":
                self.params = p.model_copy(update={'arc_style': self._saved_arc_style})
            else:
                self._saved_arc_style = p.arc_style
                self.params = p.model_copy(update={'arc_style': "off"})
        elif command is Command.TOGGLE_GLYPHS:
            self.params = p.model_copy(update={'protocol_glyphs': not p.protocol_glyphs})
        elif command is Command.TOGGLE_RAIN:
            if self.rain is not None:
                self.rain.enabled = not self.rain.enabled
        elif command is Command.CYCLE_THEME:
            self.theme = next_theme(self.theme)
        elif command is Command.TOGGLE_PAUSE:
            self.clock.toggle_pause(now)
        elif command is Command.SPIN_FASTER:
            self.clock.faster(now)
        elif command is Command.SPIN_SLOWER:
            self.clock.slower(now)
        else:
            log.warning("Ignoring unknown command %r", command)
            return

        log.debug("Applied %s", command)

    def drain_commands(self, now=None) -> int:
        if now is None:
            now = self._time()
        applied = 0
        while True:
            try:
                command = self.commands.get_nowait()
            except queue.Empty:
                break
            self._apply(command, now)
            applied += 1
        if applied:
            self.dirty |= Layer.ALL
        return applied

    def tick(self, now=None):
        """Produce the next frame."""
        if now is None:
            now = self._time()

        self.drain_commands(now)
        self.arcs.cleanup_expired(now)

        decorations = ()
        if self.rain is not None and self.rain.enabled:
            self.rain.update()
            decorations = self.rain.cells()

        self.params = self.params.model_copy(update={'rotation': self.clock.rotation(now)})
        frame = render_frame(
            self.state,
            self.terrain,
            self.params,
            markers=self.markers.snapshot(),
            arcs=self.arcs.snapshot(),
            now=now,
            decorations=decorations,
        )

        last = self.last_frame
        if last is None or not np.array_equal(frame.chars, last.chars) \
                or not np.array_equal(frame.tags, last.tags):
            self.dirty |= Layer.GLOBE
        self.last_frame = frame

        status = self.status_line()
        if status != self._last_status:
            self.dirty |= Layer.STATUS
            self._last_status = status

        if self.recorder is not None:
            self.recorder.record_frame(frame, now)

        return frame

    def consume_dirty(self) -> Layer:
        dirty = self.dirty
        self.dirty = Layer.NONE
        return dirty

    def status_line(self) -> str:
        p = self.params
        lighting = "on" if p.lighting.enabled else "off"
        paused = "  PAUSED" if self.clock.paused else ""
        return (f"zoom {self.state.zoom:.1f}  charset {p.charset.value}  "
                f"arcs {p.arc_style}  light {lighting}  theme {self.theme}  "
                f"spin {self.clock.spin_speed:.1f}x  markers {len(self.markers)}{paused}")
