"""Widget components for the globe viewer application."""

from .globe_view import GlobeView, StatusBar

__all__ = [
    'GlobeView',
    'StatusBar',
]
