"""Storyboard TUI: versioned storyboards of pages in the terminal."""

from .constants import VERSION as __version__

__all__ = ["__version__"]
