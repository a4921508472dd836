"""
csitui dashboard application.

Wires the tiling layout engine to the terminal: a hotkey/status bar, the
tiling area and Textual's footer, plus modal overlays for choosing views
and managing layout templates.
"""

import copy
import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Static

from csitui.config.constants import DEFAULT_THEME, KEYBOARD_RESIZE_STEP, MAX_PANES
from csitui.exceptions import TemplateError
from csitui.ui.layout.templates import TemplateCatalog
from csitui.ui.layout.tree import SplitAxis, TilingManager, ViewType
from csitui.ui.modals import (
    MENU_THEME,
    HelpScreen,
    LoadTemplateScreen,
    MainMenuScreen,
    QuitConfirmScreen,
    SaveTemplateScreen,
    ThemePickerScreen,
    ViewSelectorScreen,
)
from csitui.ui.themes import (
    THEME_CYCLE,
    display_for_theme,
    next_theme_name,
    register_all_themes,
    theme_from_display,
)
from csitui.ui.tiling_view import PaneRenderer, TilingView

logger = logging.getLogger(__name__)

HOTKEYS = (
    " [Shift+Arrow] Split | [Del] Close | [Drag] Resize | [0-9] Focus"
    " | [Enter] View | [Space] Fullscreen | [S]ave [L]oad | [M]enu [H]elp | [Q]uit "
)
FULLSCREEN_HOTKEYS = " [Space/Esc] Exit Fullscreen | [T] Theme | [Q] Quit "


class CsiTuiApp(App):
    """Tiling dashboard for CSI measurement streams."""

    TITLE = "csitui"

    CSS = """
    #status {
        dock: top;
        height: 1;
        width: 100%;
        background: $boost;
        color: $text;
        text-style: bold;
        content-align: center middle;
    }
    """

    BINDINGS = [
        Binding("shift+left", "split('horizontal')", "Split", show=False),
        Binding("shift+right", "split('horizontal')", "Split", show=False),
        Binding("shift+up", "split('vertical')", "Split", show=False),
        Binding("shift+down", "split('vertical')", "Split", show=False),
        Binding("delete", "close_pane", "Close pane"),
        Binding("enter", "select_view", "View"),
        Binding("space", "toggle_fullscreen", "Fullscreen"),
        Binding("escape", "exit_fullscreen", "Exit fullscreen", show=False),
        Binding("ctrl+left", f"resize('horizontal', {-KEYBOARD_RESIZE_STEP})", "Resize", show=False),
        Binding("ctrl+right", f"resize('horizontal', {KEYBOARD_RESIZE_STEP})", "Resize", show=False),
        Binding("ctrl+up", f"resize('vertical', {-KEYBOARD_RESIZE_STEP})", "Resize", show=False),
        Binding("ctrl+down", f"resize('vertical', {KEYBOARD_RESIZE_STEP})", "Resize", show=False),
        Binding("t", "next_theme", "Theme"),
        Binding("m", "main_menu", "Menu"),
        Binding("h", "help", "Help"),
        Binding("s", "save_template", "Save"),
        Binding("l", "load_template", "Load"),
        Binding("q", "request_quit", "Quit"),
    ] + [Binding(digit, f"focus_slot('{digit}')", "Focus", show=False) for digit in "0123456789"]

    def __init__(
        self,
        manager: Optional[TilingManager] = None,
        catalog: Optional[TemplateCatalog] = None,
        renderer: Optional[PaneRenderer] = None,
        theme_name: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.catalog = catalog or TemplateCatalog()
        self.manager = manager if manager is not None else self.catalog.load_startup()
        self._renderer = renderer
        self._requested_theme = theme_name

    def compose(self) -> ComposeResult:
        yield Static(HOTKEYS, id="status", markup=False)
        yield TilingView(self.manager, renderer=self._renderer, id="tiling")
        yield Footer()

    def on_mount(self) -> None:
        register_all_themes(self)
        self._apply_theme(
            self._requested_theme or theme_from_display(self.manager.display) or DEFAULT_THEME
        )
        self.tiling.focus()
        self._update_status()
        logger.info(f"Dashboard started with {self.manager.pane_count()} pane(s)")

    @property
    def tiling(self) -> TilingView:
        return self.query_one("#tiling", TilingView)

    def _apply_theme(self, name: str) -> None:
        if name in self.available_themes:
            self.theme = name
        else:
            logger.warning(f"Unknown theme '{name}', keeping {self.theme}")

    def _update_status(self) -> None:
        tiling = self.tiling
        if tiling.fullscreen_pane_id is not None:
            self.query_one("#status", Static).update(FULLSCREEN_HOTKEYS)
            return
        focused = self.manager.focused_pane_id
        view = self.manager.find_view(focused) or ViewType.EMPTY
        self.query_one("#status", Static).update(
            f" #{focused} {view.label} · {self.manager.pane_count()}/{MAX_PANES} |{HOTKEYS}"
        )

    def _layout_changed(self) -> None:
        self.tiling.layout_changed()

    def on_tiling_view_changed(self, message: TilingView.Changed) -> None:
        self._update_status()

    # ------------------------------------------------------------------
    # Layout actions
    # ------------------------------------------------------------------

    def action_split(self, axis: str) -> None:
        if self.tiling.fullscreen_pane_id is not None:
            return
        self.manager.split(SplitAxis(axis))
        self._layout_changed()

    def action_close_pane(self) -> None:
        if self.tiling.fullscreen_pane_id is not None:
            return
        self.manager.close_focused_pane()
        self._layout_changed()

    def action_focus_next_pane(self) -> None:
        if self.tiling.fullscreen_pane_id is not None:
            return
        self.manager.focus_next()
        self._layout_changed()

    def action_focus_slot(self, key: str) -> None:
        if self.tiling.fullscreen_pane_id is not None:
            return
        self.tiling.focus_slot(key)

    def action_resize(self, axis: str, delta: int) -> None:
        path = self.manager.ancestor_split_path(self.manager.focused_pane_id, SplitAxis(axis))
        if path is None:
            return
        self.manager.adjust_split_ratio(path, delta)
        self._layout_changed()

    def action_toggle_fullscreen(self) -> None:
        self.tiling.toggle_fullscreen()

    def action_exit_fullscreen(self) -> None:
        if self.tiling.fullscreen_pane_id is not None:
            self.tiling.toggle_fullscreen()

    def action_select_view(self) -> None:
        def apply_view(view: Optional[ViewType]) -> None:
            if view is not None:
                self.manager.set_current_view(view)
                self._layout_changed()

        current = self.manager.find_view(self.manager.focused_pane_id)
        self.push_screen(ViewSelectorScreen(current), apply_view)

    def action_next_theme(self) -> None:
        self._apply_theme(next_theme_name(self.theme))
        self.tiling.refresh()

    def action_main_menu(self) -> None:
        def choose(item: Optional[str]) -> None:
            if item == MENU_THEME:
                self.push_screen(ThemePickerScreen(THEME_CYCLE, self.theme), pick_theme)

        def pick_theme(name: Optional[str]) -> None:
            if name:
                self._apply_theme(name)
                self.tiling.refresh()

        self.push_screen(MainMenuScreen(), choose)

    def action_help(self) -> None:
        self.push_screen(HelpScreen())

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def action_save_template(self) -> None:
        def save(name: Optional[str]) -> None:
            if not name:
                return
            self.save_template(name)

        self.push_screen(SaveTemplateScreen(), save)

    def save_template(self, name: str) -> bool:
        """Save the current layout and theme under `name`.

        The default flag is kept only when overwriting the template that
        already holds it, so saving never creates a second default.
        """
        try:
            stem = self.catalog.path_for(name).stem
        except TemplateError as e:
            logger.warning(f"Refusing to save template: {e}")
            self.notify(f"Invalid template name '{name}'", severity="error")
            return False

        snapshot = copy.copy(self.manager)
        snapshot.display = display_for_theme(self.theme)
        snapshot.is_default = any(
            entry.name == stem and entry.is_default for entry in self.catalog.list()
        )
        if self.catalog.save(stem, snapshot) is None:
            self.notify(f"Could not save template '{stem}'", severity="error")
            return False

        self.manager.display = snapshot.display
        self.manager.is_default = snapshot.is_default
        self.notify(f"Saved template '{stem}'")
        return True

    def action_load_template(self) -> None:
        def load(name: Optional[str]) -> None:
            if name:
                self.load_template(name)

        self.push_screen(LoadTemplateScreen(self.catalog), load)

    def load_template(self, name: str) -> bool:
        try:
            manager = self.catalog.load(name)
        except TemplateError as e:
            logger.warning(f"Failed to load template '{name}': {e}")
            self.notify(f"Could not load template '{name}'", severity="error")
            return False

        self.manager = manager
        self.tiling.set_manager(manager)
        theme_name = theme_from_display(manager.display)
        if theme_name:
            self._apply_theme(theme_name)
        self.notify(f"Loaded template '{name}'")
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def action_request_quit(self) -> None:
        def maybe_quit(confirmed: Optional[bool]) -> None:
            if confirmed:
                self.exit()

        self.push_screen(QuitConfirmScreen(), maybe_quit)

    def on_app_blur(self) -> None:
        self.tiling.cancel_drag()
