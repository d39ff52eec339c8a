"""Presentation layer for whichkey."""

from .panel import PanelPresenter, TextualTimerFactory, WhichKeyPanel
from .presenter import Presenter, StreamPresenter, format_disclosure

__all__ = [
    "PanelPresenter",
    "Presenter",
    "StreamPresenter",
    "TextualTimerFactory",
    "WhichKeyPanel",
    "format_disclosure",
]
