#!/usr/bin/env python3
"""
Rotating ASCII globe with live attack markers and arc trails.

Interactive controls:
  Space: Pause/resume rotation
  [ / ]: Slower / faster spin
  +/=, -: Zoom in / out
  Arrow keys: Pan
  h: Reset view
  l: Toggle lighting
  c: Cycle charset (ascii, blocks, braille)
  g: Toggle arcs
  p: Toggle protocol glyphs
  r: Toggle rain
  t: Cycle theme
  q: Quit
"""

import argparse
import logging
import shutil

from .app import GlobeApp
from .arcs import ArcManager
from .clock import RotationClock
from .config import load_config
from .demo import DemoStorm
from .driver import FrameLoop
from .effects import MatrixRain
from .errors import ConfigError, TerrainError
from .markers import MarkerStore
from .projection import SphereState
from .recorder import AsciinemaRecorder
from .terrain import default_terrain, load_terrain

log = logging.getLogger("mhn_globe.main")


def build_parser():
    parser = argparse.ArgumentParser(description='Rotating ASCII globe of honeypot attacks')
    parser.add_argument('--config', help='Load settings from a TOML file')
    parser.add_argument('--terrain', help='Terrain raster text file (default: built-in 120x60)')
    parser.add_argument('-d', '--debug-log', metavar='FILE', help='Write debug log to FILE')

    display = parser.add_argument_group('display')
    display.add_argument('-s', dest='rotation_period', type=int,
                         help='Globe rotation period in seconds (default: 30)')
    display.add_argument('-r', dest='refresh_ms', type=int,
                         help='Refresh interval in milliseconds (default: 100)')
    display.add_argument('-a', dest='aspect_ratio', type=float,
                         help='Character aspect ratio (default: 2.0)')
    display.add_argument('-m', '--mono', action='store_true', help='Monochrome theme')
    display.add_argument('--charset', choices=['ascii', 'blocks', 'braille'])
    display.add_argument('--theme')

    effects = parser.add_argument_group('effects')
    effects.add_argument('--arcs', dest='arc_style', choices=['curved', 'straight', 'off'])
    effects.add_argument('--trail-ms', type=int, help='Arc trail persistence in milliseconds')
    effects.add_argument('--rain', action='store_true', default=None, help='Enable rain effect')
    effects.add_argument('--rain-density', type=int, help='Rain density 0-10')
    effects.add_argument('--protocol-glyphs', action='store_true', default=None,
                         help='Draw per-protocol glyphs for markers')
    effects.add_argument('--crt', action='store_true', default=None,
                         help='Dim every other row like CRT scanlines')

    lighting = parser.add_argument_group('lighting')
    lighting.add_argument('--lighting', action='store_true', default=None)
    lighting.add_argument('--light-lon', type=float)
    lighting.add_argument('--light-lat', type=float)
    lighting.add_argument('--light-follow', action='store_true', default=None)

    demo = parser.add_argument_group('demo')
    demo.add_argument('--demo-storm', action='store_true', default=None,
                      help='Generate synthetic attacks')
    demo.add_argument('--demo-rate', type=int, help='Synthetic attacks per second')

    parser.add_argument('--record', metavar='FILE', help='Record frames to an asciinema file')
    return parser


def _setup_logging(path):
    if not path:
        return
    handler = logging.FileHandler(path)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("mhn_globe")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def configure(args):
    """Merge defaults, the config file and command line flags."""
    config = load_config(args.config)
    config.apply_overrides("display", {
        "rotation_period": args.rotation_period,
        "refresh_ms": args.refresh_ms,
        "aspect_ratio": args.aspect_ratio,
        "charset": args.charset,
        "theme": "mono" if args.mono else args.theme,
    })
    config.apply_overrides("effects", {
        "arc_style": args.arc_style,
        "trail_ms": args.trail_ms,
        "rain_enabled": args.rain,
        "rain_density": args.rain_density,
        "protocol_glyphs": args.protocol_glyphs,
        "crt_enabled": args.crt,
    })
    config.apply_overrides("lighting", {
        "enabled": args.lighting,
        "lon": args.light_lon,
        "lat": args.light_lat,
        "follow": args.light_follow,
    })
    config.apply_overrides("demo", {
        "enabled": args.demo_storm,
        "rate": args.demo_rate,
    })
    return config.validate()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.debug_log)

    try:
        config = configure(args)
        terrain = load_terrain(args.terrain) if args.terrain else default_terrain()
    except (ConfigError, TerrainError) as e:
        parser.error(str(e))

    log.info("Starting with charset=%s theme=%s arcs=%s",
             config.display["charset"], config.display["theme"], config.effects["arc_style"])

    width, height = shutil.get_terminal_size()
    height = max(1, height - 1)
    state = SphereState.for_viewport(width, height, config.display["aspect_ratio"])

    markers = MarkerStore()
    arcs = ArcManager(trail_ms=config.effects["trail_ms"])
    rain = MatrixRain(width, height, config.effects["rain_density"])
    rain.enabled = bool(config.effects["rain_enabled"])
    recorder = AsciinemaRecorder(args.record, width, height) if args.record else None

    loop = FrameLoop(
        terrain,
        state,
        config.to_render_params(),
        clock=RotationClock(period=config.display["rotation_period"]),
        markers=markers,
        arcs=arcs,
        rain=rain,
        recorder=recorder,
        theme=config.display["theme"],
        scanlines=bool(config.effects["crt_enabled"]),
    )

    storm = None
    if config.demo["enabled"]:
        storm = DemoStorm(markers, arcs, rate=config.demo["rate"])
        storm.start()

    app = GlobeApp(loop, refresh_interval=config.display["refresh_ms"] / 1000.0)
    try:
        app.run()
    finally:
        if storm:
            storm.stop()
        if recorder:
            recorder.close()
        log.info("Shutting down")


if __name__ == '__main__':
    main()
