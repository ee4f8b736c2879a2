"""Frame type and the layer merge."""

import enum

import numpy as np

BLANK = " "


class Tag(enum.IntEnum):
    """Semantic tag of a frame cell, used by the drawing layer for styling."""

    BACKGROUND = 0
    LAND = 1
    BORDER = 2
    ATTACK = 3
    GLYPH = 4
    EFFECT = 5

    @property
    def label(self) -> str:
        return self.name.lower()


class Frame:
    """width x height grid of (glyph, tag)."""

    def __init__(self, chars, tags, timings=None):
        self.chars = chars
        self.tags = tags
        self.timings = timings or {}

    @classmethod
    def blank(cls, width=1, height=1):
        width = max(1, width)
        height = max(1, height)
        return cls(
            np.full((height, width), BLANK, dtype="<U1"),
            np.full((height, width), Tag.BACKGROUND, dtype=np.uint8),
        )

    @property
    def width(self) -> int:
        return self.chars.shape[1]

    @property
    def height(self) -> int:
        return self.chars.shape[0]

    def cell(self, x: int, y: int):
        return str(self.chars[y, x]), Tag(int(self.tags[y, x]))

    def rows(self) -> list[str]:
        return ["".join(row) for row in self.chars.tolist()]

    def count(self, tag: Tag) -> int:
        return int(np.count_nonzero(self.tags == tag))

    def __str__(self):
        return "\n".join(self.rows())


def density_tags(chars, land, ring):
    """Tag density glyphs: sampled land, then outline, then land bleed."""
    tags = np.full(chars.shape, Tag.BACKGROUND, dtype=np.uint8)
    inked = chars != BLANK
    tags[inked] = Tag.LAND
    tags[inked & ring & ~land] = Tag.BORDER
    return tags


def compose(chars, tags, arc_cells=(), decorations=(), markers=(), arc_glyph="·"):
    """Merge overlay layers onto the density layer.

    Args:
        chars, tags: Density glyphs and tags (copied, not modified)
        arc_cells: (x, y) arc samples; painted only onto background cells
        decorations: (x, y, glyph) passthrough effects; background cells only
        markers: (x, y, glyph, tag) marker hits; always painted

    Precedence is marker > arc > density > decoration > background.
    """
    chars = chars.copy()
    tags = tags.copy()
    height, width = chars.shape

    for x, y in arc_cells:
        if 0 <= x < width and 0 <= y < height and tags[y, x] == Tag.BACKGROUND:
            chars[y, x] = arc_glyph
            tags[y, x] = Tag.ATTACK

    for x, y, glyph in decorations:
        if 0 <= x < width and 0 <= y < height and tags[y, x] == Tag.BACKGROUND:
            chars[y, x] = glyph
            tags[y, x] = Tag.EFFECT

    for x, y, glyph, tag in markers:
        if 0 <= x < width and 0 <= y < height:
            chars[y, x] = glyph
            tags[y, x] = tag

    return Frame(chars, tags)
