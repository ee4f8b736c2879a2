"""
Configuration manager.
Holds defaults, overlays user TOML overrides, then CLI flags, and validates.
"""

import copy
import logging
import math
from pathlib import Path

import tomlkit

from .charsets import Charset
from .errors import ConfigError
from .models import LightingConfig, RenderParams
from .themes import THEMES

log = logging.getLogger("mhn_globe.config")

DEFAULTS = {
    "display": {
        "theme": "default",
        "charset": "ascii",
        "rotation_period": 30,
        "refresh_ms": 100,
        "aspect_ratio": 2.0,
    },
    "effects": {
        "arc_style": "off",
        "trail_ms": 1200,
        "rain_enabled": False,
        "rain_density": 5,
        "protocol_glyphs": False,
        "crt_enabled": False,
    },
    "lighting": {
        "enabled": False,
        "lon": 0.0,
        "lat": 0.0,
        "follow": False,
    },
    "demo": {
        "enabled": False,
        "rate": 10,
    },
}

ARC_STYLES = ("curved", "straight", "off")

NUMERIC_KEYS = [
    ("display", "rotation_period", float),
    ("display", "refresh_ms", int),
    ("display", "aspect_ratio", float),
    ("effects", "trail_ms", int),
    ("effects", "rain_density", int),
    ("lighting", "lon", float),
    ("lighting", "lat", float),
    ("demo", "rate", int),
]


class GlobeConfig:

    def __init__(self, path=None):
        self._values = copy.deepcopy(DEFAULTS)

        # User overrides only, as read from TOML
        self._user_overrides = {}
        self.path = Path(path) if path else None

        if self.path is not None:
            self._load()

    # --- Loading ---

    def _load(self):
        if not self.path.exists():
            log.warning("Config file %s not found, using defaults", self.path)
            return

        try:
            raw = self.path.read_text(encoding="utf-8")
            doc = tomlkit.parse(raw)
        except Exception as e:
            log.warning("Ignoring unreadable config %s: %s", self.path, e)
            return

        self._apply_toml(doc)

    def _apply_toml(self, doc):
        for section, defaults in self._values.items():
            table = doc.get(section)
            if not hasattr(table, "items"):
                continue
            for key, val in table.items():
                if key not in defaults:
                    log.warning("Unknown config key [%s] %s", section, key)
                    continue
                # tomlkit items unwrap to plain Python values
                val = val.unwrap() if hasattr(val, "unwrap") else val
                defaults[key] = val
                self._user_overrides.setdefault(section, {})
                self._user_overrides[section][key] = val

    def apply_overrides(self, section: str, overrides: dict):
        """Apply non-None values, e.g. from command line flags."""
        for key, val in overrides.items():
            if val is None:
                continue
            if key not in self._values[section]:
                raise ConfigError(f"unknown setting {section}.{key}")
            self._values[section][key] = val

    # --- Read API ---

    def get(self, section: str, key: str):
        return self._values[section][key]

    @property
    def display(self) -> dict:
        return self._values["display"]

    @property
    def effects(self) -> dict:
        return self._values["effects"]

    @property
    def lighting(self) -> dict:
        return self._values["lighting"]

    @property
    def demo(self) -> dict:
        return self._values["demo"]

    @property
    def user_overrides(self) -> dict:
        return self._user_overrides

    # --- Validation ---

    def _coerce(self, section, key, kind):
        val = self._values[section][key]
        # bool is an int subclass but never a valid number here
        if isinstance(val, bool) or not isinstance(val, (int, float, str)):
            raise ConfigError(f"{section}.{key} must be a number, got {val!r}")
        try:
            number = kind(val)
        except (ValueError, OverflowError):
            raise ConfigError(f"{section}.{key} must be a number, got {val!r}") from None
        if not math.isfinite(number):
            raise ConfigError(f"{section}.{key} must be finite, got {val!r}")
        self._values[section][key] = number

    def validate(self):
        """Raise ConfigError for out-of-range or mistyped values. Unknown themes fall back."""
        for section, key, kind in NUMERIC_KEYS:
            self._coerce(section, key, kind)

        d = self.display
        e = self.effects

        if not 10 <= d["rotation_period"] <= 300:
            raise ConfigError("rotation period must be between 10 and 300 seconds")
        if not 50 <= d["refresh_ms"] <= 1000:
            raise ConfigError("refresh rate must be between 50 and 1000 milliseconds")
        if not 1.0 <= d["aspect_ratio"] <= 4.0:
            raise ConfigError("aspect ratio must be between 1.0 and 4.0")
        try:
            Charset(d["charset"])
        except ValueError:
            raise ConfigError(f"unknown charset {d['charset']!r} (ascii|blocks|braille)") from None
        if e["arc_style"] not in ARC_STYLES:
            raise ConfigError(f"unknown arc style {e['arc_style']!r} (curved|straight|off)")
        if e["trail_ms"] <= 0:
            raise ConfigError("arc trail must be a positive number of milliseconds")
        if not 0 <= e["rain_density"] <= 10:
            raise ConfigError("rain density must be between 0 and 10")
        if self.demo["rate"] < 1:
            raise ConfigError("demo rate must be at least 1 attack per second")

        if not isinstance(d["theme"], str) or d["theme"] not in THEMES:
            log.warning("Unknown theme %r, using default", d["theme"])
            d["theme"] = "default"
        return self

    # --- Conversion ---

    def lighting_config(self) -> LightingConfig:
        lt = self.lighting
        return LightingConfig(
            enabled=bool(lt["enabled"]),
            lon=float(lt["lon"]),
            lat=float(lt["lat"]),
            follow=bool(lt["follow"]),
        )

    def to_render_params(self) -> RenderParams:
        return RenderParams(
            rotation=0.0,
            lighting=self.lighting_config(),
            charset=Charset(self.display["charset"]),
            arc_style=self.effects["arc_style"],
            protocol_glyphs=bool(self.effects["protocol_glyphs"]),
        )


def load_config(path=None) -> GlobeConfig:
    return GlobeConfig(path)
