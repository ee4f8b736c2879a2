"""Globe display widget."""

from textual.widgets import Static

from ..display import frame_to_renderable


class GlobeView(Static):
    """Shows the latest frame produced by the frame loop."""

    def __init__(self, loop, **kwargs):
        super().__init__(**kwargs)
        self.loop = loop

    def show_frame(self, frame):
        self.update(frame_to_renderable(frame, self.loop.theme, self.loop.scanlines))


class StatusBar(Static):
    """One-line summary of the current view settings."""

    def show_status(self, text: str):
        self.update(text)
