"""Convert rendered frames to styled Rich text."""

from rich.text import Text

from .compositor import Tag
from .themes import get_theme, land_color


def frame_to_text(frame, theme_name='default', scanlines=False):
    """Colour a frame with a theme.

    Returns:
        List of Rich Text objects, one per frame row. Adjacent cells with the
        same style are merged into one span. With scanlines on, even rows
        are dimmed like a CRT.
    """
    theme = get_theme(theme_name)
    tag_styles = {
        Tag.BACKGROUND: None,
        Tag.LAND: theme['land'],
        Tag.BORDER: theme['border'],
        Tag.ATTACK: theme['attack'],
        Tag.GLYPH: theme['glyph'],
        Tag.EFFECT: theme['effect'],
    }

    result = []
    tag_rows = frame.tags.tolist()
    for y, (row_chars, row_tags) in enumerate(zip(frame.chars.tolist(), tag_rows)):
        row_text = Text()
        current_style = None
        current_chars = []

        for x, (char, tag) in enumerate(zip(row_chars, row_tags)):
            style = tag_styles[tag]
            if tag == Tag.LAND:
                style = land_color(theme_name, x, y) or style
            if scanlines and style and y % 2 == 0:
                style = f"{style} dim"

            if style == current_style:
                current_chars.append(char)
            else:
                if current_chars:
                    row_text.append(''.join(current_chars), style=current_style)
                current_chars = [char]
                current_style = style

        if current_chars:
            row_text.append(''.join(current_chars), style=current_style)

        result.append(row_text)

    return result


def frame_to_renderable(frame, theme_name='default', scanlines=False) -> Text:
    """Whole frame as a single Text, rows joined by newlines."""
    return Text("\n").join(frame_to_text(frame, theme_name, scanlines))
