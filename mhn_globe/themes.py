"""
Colour themes.
Rich style strings per frame tag; looked up by name with 'default' as fallback.
"""

THEMES = {
    'default': {
        'land': 'green',
        'border': 'rgb(0,100,0)',
        'attack': 'bold red',
        'glyph': 'bold rgb(255,100,100)',
        'effect': 'green',
        'text': 'white',
    },
    'matrix': {
        'land': 'rgb(0,255,65)',
        'border': 'rgb(0,150,40)',
        'attack': 'bold rgb(0,255,100)',
        'glyph': 'bold rgb(100,255,100)',
        'effect': 'rgb(0,255,65)',
        'text': 'rgb(0,255,65)',
    },
    'amber': {
        'land': 'rgb(255,176,0)',
        'border': 'rgb(180,120,0)',
        'attack': 'bold rgb(255,200,50)',
        'glyph': 'bold rgb(255,220,100)',
        'effect': 'rgb(255,176,0)',
        'text': 'rgb(255,176,0)',
    },
    'solarized': {
        'land': 'rgb(42,161,152)',
        'border': 'rgb(30,110,105)',
        'attack': 'bold rgb(220,50,47)',
        'glyph': 'bold rgb(255,100,97)',
        'effect': 'rgb(42,161,152)',
        'text': 'rgb(131,148,150)',
    },
    'nord': {
        'land': 'rgb(136,192,208)',
        'border': 'rgb(94,129,172)',
        'attack': 'bold rgb(191,97,106)',
        'glyph': 'bold rgb(235,147,156)',
        'effect': 'rgb(136,192,208)',
        'text': 'rgb(216,222,233)',
    },
    'dracula': {
        'land': 'rgb(80,250,123)',
        'border': 'rgb(50,150,80)',
        'attack': 'bold rgb(255,85,85)',
        'glyph': 'bold rgb(255,121,198)',
        'effect': 'rgb(189,147,249)',
        'text': 'rgb(248,248,242)',
    },
    'mono': {
        'land': 'white',
        'border': 'grey50',
        'attack': 'bold white',
        'glyph': 'bold white',
        'effect': 'white',
        'text': 'white',
    },
    'rainbow': {
        'land': 'red',
        'border': 'rgb(128,0,0)',
        'attack': 'bold white',
        'glyph': 'bold rgb(255,255,100)',
        'effect': 'cyan',
        'text': 'white',
    },
    'skittles': {
        'land': 'red',
        'border': 'rgb(128,0,0)',
        'attack': 'bold yellow',
        'glyph': 'bold rgb(255,200,0)',
        'effect': 'cyan',
        'text': 'white',
    },
}

THEME_NAMES = list(THEMES)

RAINBOW_COLORS = [
    'rgb(255,0,0)',
    'rgb(255,127,0)',
    'rgb(255,255,0)',
    'rgb(0,255,0)',
    'rgb(0,0,255)',
    'rgb(75,0,130)',
    'rgb(148,0,211)',
]


def get_theme(name: str) -> dict:
    return THEMES.get(name, THEMES['default'])


def next_theme(name: str) -> str:
    idx = THEME_NAMES.index(name) if name in THEMES else -1
    return THEME_NAMES[(idx + 1) % len(THEME_NAMES)]


def land_color(theme_name: str, x: int, y: int):
    """Per-cell land colour for the patterned themes, None for the rest."""
    if theme_name == 'rainbow':
        # diagonal stripes
        return RAINBOW_COLORS[(x + y) % len(RAINBOW_COLORS)]
    if theme_name == 'skittles':
        return RAINBOW_COLORS[(x * 73 + y * 37) % len(RAINBOW_COLORS)]
    return None
