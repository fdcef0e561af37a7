"""Persistence layer – each store owns its file path, data format, and I/O."""

from .storyboards import StoryboardRecord, StoryboardStore

__all__ = [
    "StoryboardRecord",
    "StoryboardStore",
]
