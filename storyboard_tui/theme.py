"""Theme definitions for Storyboard TUI.

One Textual Theme per color mode; the mode name is what the preferences
file stores.
"""

from textual.theme import Theme

# Keys match preferences.COLOR_MODES.
TEXTUAL_THEMES: dict[str, Theme] = {
    "dark": Theme(
        name="storyboard-dark",
        primary="#cc7700",
        secondary="#5599dd",
        accent="#445566",
        background="black",
        surface="#111111",
        panel="#555555",
        success="#5599dd",
        warning="#aaaa00",
        error="#cc3333",
        dark=True,
    ),
    "light": Theme(
        name="storyboard-light",
        primary="#cc6600",
        secondary="#4488aa",
        accent="#667788",
        background="#fafafa",
        surface="#f0f0f0",
        panel="#cccccc",
        success="#338855",
        warning="#aa8800",
        error="#cc3333",
        dark=False,
    ),
}


def theme_for(color_mode: str) -> Theme:
    """Return the Textual theme for *color_mode* (dark when unknown)."""
    return TEXTUAL_THEMES.get(color_mode, TEXTUAL_THEMES["dark"])
