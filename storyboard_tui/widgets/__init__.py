"""Widget classes for Storyboard TUI."""

from .page_table import PageTable, blob_summary
from .screens import (
    ConfirmScreen,
    PromptScreen,
    RecentScreen,
    SetupScreen,
    SlideshowScreen,
)
from .tabs import TabBar, TabButton

__all__ = [
    "ConfirmScreen",
    "PageTable",
    "PromptScreen",
    "RecentScreen",
    "SetupScreen",
    "SlideshowScreen",
    "TabBar",
    "TabButton",
    "blob_summary",
]
