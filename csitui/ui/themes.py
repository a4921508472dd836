"""
csitui theme definitions.

Custom themes are registered with the Textual app at startup; the theme
cycle also visits two of Textual's built-in themes. The active theme name
is what a saved template carries as its display preference.
"""

from typing import Any, Optional

from textual.theme import Theme

from csitui.config.constants import DEFAULT_THEME

CSI_DARK = Theme(
    name="csi-dark",
    primary="#0178D4",      # Blue - focused pane border
    secondary="#004578",
    accent="#ffa62b",       # Orange - drag highlight
    foreground="#e0e0e0",
    background="#121212",
    surface="#1e1e1e",
    panel="#252526",
    boost="#2d2d2d",        # Hotkey bar
    success="#4EBF71",
    warning="#ffa62b",
    error="#ba3c5b",
    dark=True,
)

CSI_LIGHT = Theme(
    name="csi-light",
    primary="#0969DA",
    secondary="#8250DF",
    accent="#BF3989",
    foreground="#1F2328",
    background="#FFFFFF",
    surface="#F6F8FA",
    panel="#F0F2F5",
    boost="#DFE3E8",
    success="#1A7F37",
    warning="#9A6700",
    error="#CF222E",
    dark=False,
)

CSI_NORDIC = Theme(
    name="csi-nordic",
    primary="#88C0D0",
    secondary="#81A1C1",
    accent="#B48EAD",
    foreground="#ECEFF4",
    background="#2E3440",
    surface="#3B4252",
    panel="#434C5E",
    boost="#4C566A",
    success="#A3BE8C",
    warning="#EBCB8B",
    error="#BF616A",
    dark=True,
)

CSI_THEMES: dict[str, Theme] = {
    "csi-dark": CSI_DARK,
    "csi-light": CSI_LIGHT,
    "csi-nordic": CSI_NORDIC,
}

# Order visited by the "next theme" key
THEME_CYCLE: list[str] = [
    "csi-dark",
    "csi-light",
    "csi-nordic",
    "gruvbox",
    "catppuccin-mocha",
]


def register_all_themes(app: Any) -> None:
    for theme in CSI_THEMES.values():
        app.register_theme(theme)


def next_theme_name(current: str) -> str:
    """Theme after `current` in the cycle; unknown names restart the cycle."""
    if current not in THEME_CYCLE:
        return THEME_CYCLE[0]
    return THEME_CYCLE[(THEME_CYCLE.index(current) + 1) % len(THEME_CYCLE)]


def theme_from_display(display: Any) -> Optional[str]:
    """Extract the theme name from a template's display payload, if any."""
    if isinstance(display, dict):
        name = display.get("theme")
        if isinstance(name, str) and name:
            return name
    return None


def display_for_theme(theme_name: Optional[str]) -> dict[str, Any]:
    return {"theme": theme_name or DEFAULT_THEME}
