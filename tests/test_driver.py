import json
import math

import numpy as np
import pytest

from mhn_globe.arcs import ArcManager
from mhn_globe.charsets import Charset
from mhn_globe.clock import RotationClock
from mhn_globe.compositor import Tag
from mhn_globe.driver import Command, FrameLoop, Layer, Resize
from mhn_globe.effects import MatrixRain
from mhn_globe.markers import MarkerStore
from mhn_globe.models import AttackMarker, RenderParams
from mhn_globe.recorder import AsciinemaRecorder


@pytest.fixture
def loop(small_state, all_land):
    return FrameLoop(
        all_land,
        small_state,
        RenderParams(arc_style="curved"),
        clock=RotationClock(period=30.0, start=0.0),
        markers=MarkerStore(),
        arcs=ArcManager(),
        time_source=lambda: 0.0,
    )


def test_tick_uses_clock_rotation(loop):
    loop.tick(now=7.5)
    assert loop.params.rotation == pytest.approx(-math.pi / 2)


def test_markers_from_store_are_drawn(loop):
    loop.markers.put('1.2.3.4', AttackMarker(latitude=0.0, longitude=0.0))
    frame = loop.tick(now=0.0)
    assert frame.cell(20, 10) == ("*", Tag.ATTACK)


def test_zoom_is_clamped(loop):
    for _ in range(40):
        loop.post(Command.ZOOM_IN)
    loop.drain_commands(0.0)
    assert loop.state.zoom == 3.0
    for _ in range(40):
        loop.post(Command.ZOOM_OUT)
    loop.drain_commands(0.0)
    assert loop.state.zoom == 0.5


def test_pan_and_reset(loop):
    loop.post(Command.PAN_RIGHT)
    loop.post(Command.PAN_RIGHT)
    loop.post(Command.PAN_UP)
    loop.drain_commands(0.0)
    assert (loop.state.pan_x, loop.state.pan_y) == (4.0, -2.0)

    loop.post(Command.ZOOM_IN)
    loop.post(Command.RESET_VIEW)
    loop.drain_commands(0.0)
    assert (loop.state.zoom, loop.state.pan_x, loop.state.pan_y) == (1.0, 0.0, 0.0)


def test_commands_apply_only_on_tick(loop):
    loop.post(Command.CYCLE_CHARSET)
    assert loop.params.charset is Charset.ASCII
    frame = loop.tick(now=0.0)
    assert loop.params.charset is Charset.BLOCKS
    assert frame.cell(20, 10)[0] == "█"


def test_toggle_arcs_restores_previous_style(loop):
    loop.params = loop.params.model_copy(update={'arc_style': 'straight'})
    loop.post(Command.TOGGLE_ARCS)
    loop.drain_commands(0.0)
    assert loop.params.arc_style == "off"
    loop.post(Command.TOGGLE_ARCS)
    loop.drain_commands(0.0)
    assert loop.params.arc_style == "straight"


def test_toggles(loop):
    for command in (Command.TOGGLE_LIGHTING, Command.TOGGLE_GLYPHS, Command.CYCLE_THEME):
        loop.post(command)
    loop.drain_commands(0.0)
    assert loop.params.lighting.enabled
    assert loop.params.protocol_glyphs
    assert loop.theme == "matrix"


def test_pause_and_spin(loop):
    loop.post(Command.SPIN_FASTER)
    loop.post(Command.TOGGLE_PAUSE)
    loop.drain_commands(3.0)
    assert loop.clock.spin_speed == 1.1
    assert loop.clock.paused
    first = loop.tick(now=3.0)
    assert loop.params.rotation == pytest.approx(-math.pi / 5)
    loop.tick(now=20.0)
    assert loop.params.rotation == pytest.approx(-math.pi / 5)
    assert first is not None


def test_resize_rebuilds_state(loop):
    loop.post(Command.ZOOM_IN)
    loop.post(Resize(60, 30))
    frame = loop.tick(now=0.0)
    assert (frame.width, frame.height) == (60, 30)
    assert loop.state.zoom == 1.1


def test_resize_to_nothing(loop):
    loop.post(Resize(0, 0))
    frame = loop.tick(now=0.0)
    assert (frame.width, frame.height) == (1, 1)


def test_rain_layer(small_state, all_ocean):
    rain = MatrixRain(40, 20, density=10, rng=np.random.default_rng(1))
    loop = FrameLoop(all_ocean, small_state, RenderParams(),
                     clock=RotationClock(start=0.0), rain=rain)
    loop.post(Command.TOGGLE_RAIN)
    seen = 0
    for i in range(60):
        seen += loop.tick(now=float(i)).count(Tag.EFFECT)
    assert loop.rain.enabled
    assert seen > 0


def test_expired_arcs_are_pruned(loop):
    loop.arcs.add_arc(0.0, 0.0, None, now=0.0)
    loop.tick(now=0.5)
    assert len(loop.arcs) == 1
    loop.tick(now=5.0)
    assert len(loop.arcs) == 0


def test_dirty_flags(loop):
    assert loop.consume_dirty() == Layer.ALL
    assert loop.consume_dirty() == Layer.NONE

    loop.tick(now=0.0)
    assert Layer.GLOBE in loop.consume_dirty()

    # Pausing only changes the status line
    loop.clock.pause(now=0.0)
    loop.tick(now=0.0)
    assert loop.consume_dirty() == Layer.STATUS

    # Nothing moved, nothing to repaint
    loop.tick(now=1.0)
    assert loop.consume_dirty() == Layer.NONE

    loop.markers.put('a', AttackMarker(latitude=0.0, longitude=0.0))
    loop.tick(now=2.0)
    assert loop.consume_dirty() == Layer.ALL

    loop.post(Command.CYCLE_THEME)
    loop.tick(now=0.0)
    assert loop.consume_dirty() == Layer.ALL


def test_status_line(loop):
    loop.markers.put('a', AttackMarker(latitude=0.0, longitude=0.0))
    line = loop.status_line()
    assert "zoom 1.0" in line
    assert "charset ascii" in line
    assert "markers 1" in line
    assert "PAUSED" not in line
    loop.clock.pause(now=0.0)
    assert "PAUSED" in loop.status_line()


def test_frames_are_recorded(tmp_path, small_state, all_land):
    path = tmp_path / "globe.cast"
    times = iter([0.0])
    with AsciinemaRecorder(path, 40, 20, clock=lambda: next(times)) as recorder:
        loop = FrameLoop(all_land, small_state, RenderParams(),
                         clock=RotationClock(start=0.0), recorder=recorder)
        loop.tick(now=0.5)
        loop.tick(now=1.0)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert json.loads(lines[0])["width"] == 40
    assert json.loads(lines[2])[0] == pytest.approx(1.0)
