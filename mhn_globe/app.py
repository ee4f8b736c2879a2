"""Main GlobeApp Textual application."""

from textual.app import App, ComposeResult

from .driver import Command, Layer, Resize
from .widgets import GlobeView, StatusBar

STATUS_HEIGHT = 1


class GlobeApp(App):
    """Textual TUI showing the rotating attack globe."""

    CSS = """
    Screen {
        background: black;
    }

    GlobeView {
        width: 100%;
        height: 1fr;
    }

    StatusBar {
        dock: bottom;
        height: 1;
        width: 100%;
        color: $text-muted;
    }
    """

    TITLE = "MHN Globe"
    BINDINGS = [
        ("space", "command('toggle_pause')", "Pause"),
        ("left_square_bracket", "command('spin_slower')", "Slower"),
        ("right_square_bracket", "command('spin_faster')", "Faster"),
        ("plus,equals_sign", "command('zoom_in')", "Zoom+"),
        ("minus,underscore", "command('zoom_out')", "Zoom-"),
        ("up", "command('pan_up')", "Up"),
        ("down", "command('pan_down')", "Down"),
        ("left", "command('pan_left')", "Left"),
        ("right", "command('pan_right')", "Right"),
        ("h", "command('reset_view')", "Reset"),
        ("l", "command('toggle_lighting')", "Lighting"),
        ("c", "command('cycle_charset')", "Charset"),
        ("g", "command('toggle_arcs')", "Arcs"),
        ("p", "command('toggle_glyphs')", "Glyphs"),
        ("r", "command('toggle_rain')", "Rain"),
        ("t", "command('cycle_theme')", "Theme"),
        ("q,x,escape", "quit", "Quit"),
    ]

    def __init__(self, loop, refresh_interval=0.1):
        super().__init__()
        self.loop = loop
        self.refresh_interval = refresh_interval

    def compose(self) -> ComposeResult:
        self.globe_view = GlobeView(self.loop)
        self.status_bar = StatusBar()
        yield self.globe_view
        yield self.status_bar

    def on_mount(self):
        self._sync_viewport()
        self.set_interval(self.refresh_interval, self._tick)

    def on_resize(self, event):
        self._sync_viewport()

    def _sync_viewport(self):
        size = self.size
        self.loop.post(Resize(size.width, max(1, size.height - STATUS_HEIGHT)))

    def action_command(self, name: str):
        self.loop.post(Command(name))

    def _tick(self):
        frame = self.loop.tick()
        dirty = self.loop.consume_dirty()
        if dirty & Layer.GLOBE:
            self.globe_view.show_frame(frame)
        if dirty & Layer.STATUS:
            self.status_bar.show_status(self.loop.status_line())
