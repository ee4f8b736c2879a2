"""
Density-to-glyph palettes.

Each palette is a list of (threshold, glyph) pairs ordered from the heaviest
glyph down. A density selects the first glyph whose threshold it strictly
exceeds; anything at or below the last threshold is blank.
"""

import enum

import numpy as np


class Charset(str, enum.Enum):
    ASCII = "ascii"
    BLOCKS = "blocks"
    BRAILLE = "braille"


BLANK = " "

PALETTES = {
    Charset.ASCII: [
        (1.0, "@"),
        (0.8, "#"),
        (0.6, "%"),
        (0.4, "o"),
        (0.3, "="),
        (0.2, "+"),
        (0.15, "-"),
        (0.1, "."),
        (0.05, "`"),
    ],
    Charset.BLOCKS: [
        (1.0, "█"),    # full block
        (0.875, "▓"),  # dark shade
        (0.75, "▒"),   # medium shade
        (0.625, "░"),  # light shade
        (0.5, "▄"),    # lower half
        (0.375, "▃"),  # lower 3/8
        (0.25, "▂"),   # lower 1/4
        (0.125, "▁"),  # lower 1/8
    ],
    Charset.BRAILLE: [
        (1.0, "⣿"),
        (0.9, "⣾"),
        (0.8, "⣶"),
        (0.7, "⣦"),
        (0.6, "⣤"),
        (0.5, "⣀"),
        (0.4, "⡀"),
        (0.3, "⠄"),
        (0.2, "⠂"),
        (0.15, "⠁"),
    ],
}

# Ascending thresholds and glyph lookup tables for the vectorized path.
# Index 0 is the blank glyph, index n the heaviest.
_TABLES = {}
for _charset, _palette in PALETTES.items():
    _ascending = list(reversed(_palette))
    _TABLES[_charset] = (
        np.array([t for t, _ in _ascending], dtype=np.float64),
        np.array([BLANK] + [g for _, g in _ascending], dtype="<U1"),
    )


def palette_for(charset) -> list:
    return PALETTES[Charset(charset)]


def heaviest_glyph(charset) -> str:
    return palette_for(charset)[0][1]


def density_to_char(density: float, charset=Charset.ASCII) -> str:
    """Map a single density value to a glyph of the given palette."""
    for threshold, glyph in palette_for(charset):
        if density > threshold:
            return glyph
    return BLANK


def densities_to_chars(density, charset=Charset.ASCII):
    """Vectorized density_to_char over a numpy array of any shape."""
    thresholds, glyphs = _TABLES[Charset(charset)]
    # side='left' counts thresholds strictly below each value, matching '>'
    levels = np.searchsorted(thresholds, np.asarray(density, dtype=np.float64), side="left")
    return glyphs[levels]


def next_charset(charset) -> Charset:
    order = list(Charset)
    return order[(order.index(Charset(charset)) + 1) % len(order)]
