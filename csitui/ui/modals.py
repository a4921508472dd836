"""
Modal screens for the csitui dashboard.

- ViewSelectorScreen: pick the view shown in the focused pane
- SaveTemplateScreen: name the current layout and save it
- LoadTemplateScreen: pick a saved layout, or flag one as default
- HelpScreen: key reference
- MainMenuScreen, ThemePickerScreen: menu and theme choice
- QuitConfirmScreen: confirm leaving the dashboard
"""

import logging
from typing import List, Optional

from textual.app import ComposeResult
from textual.containers import Grid, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from csitui.ui.layout.templates import TemplateCatalog
from csitui.ui.layout.tree import ViewType

logger = logging.getLogger(__name__)


_PICKER_CSS = """
    {screen} {{
        align: center middle;
    }}

    .picker {{
        width: 50;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }}

    .picker-title {{
        width: 100%;
        text-align: center;
        text-style: bold;
        padding-bottom: 1;
    }}

    .picker OptionList {{
        height: auto;
        max-height: 16;
        border: solid $primary;
    }}

    .picker-help {{
        margin-top: 1;
        text-align: center;
        color: $text-muted;
    }}
"""


class ViewSelectorScreen(ModalScreen[Optional[ViewType]]):
    """Choose a view for the focused pane."""

    CSS = _PICKER_CSS.format(screen="ViewSelectorScreen")

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("q", "cancel", "Cancel"),
    ]

    def __init__(self, current: Optional[ViewType] = None) -> None:
        super().__init__()
        self.current = current

    def compose(self) -> ComposeResult:
        with Vertical(classes="picker"):
            yield Label("Select View", classes="picker-title")
            yield OptionList(
                *[Option(view.label, id=view.value) for view in ViewType],
                id="view-list",
            )
            yield Static("Enter Select • Esc Cancel", classes="picker-help")

    def on_mount(self) -> None:
        option_list = self.query_one("#view-list", OptionList)
        views = list(ViewType)
        if self.current in views:
            option_list.highlighted = views.index(self.current)
        option_list.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id:
            self.dismiss(ViewType(event.option.id))

    def action_cancel(self) -> None:
        self.dismiss(None)


class SaveTemplateScreen(ModalScreen[Optional[str]]):
    """Ask for a template name."""

    CSS = _PICKER_CSS.format(screen="SaveTemplateScreen")

    BINDINGS = [("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        with Vertical(classes="picker"):
            yield Label("Save Layout Template", classes="picker-title")
            yield Input(placeholder="template name", id="template-name")
            yield Static("Enter Save • Esc Cancel", classes="picker-help")

    def on_mount(self) -> None:
        self.query_one("#template-name", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        name = event.value.strip()
        self.dismiss(name or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class LoadTemplateScreen(ModalScreen[Optional[str]]):
    """Pick a saved template. `d` flags the highlighted one as default."""

    CSS = _PICKER_CSS.format(screen="LoadTemplateScreen")

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("q", "cancel", "Cancel"),
        ("d", "set_default", "Set default"),
    ]

    def __init__(self, catalog: TemplateCatalog) -> None:
        super().__init__()
        self.catalog = catalog

    def compose(self) -> ComposeResult:
        with Vertical(classes="picker"):
            yield Label("Load Layout Template", classes="picker-title")
            yield OptionList(id="template-list")
            yield Static("Enter Load • d Set default • Esc Cancel", classes="picker-help")

    def on_mount(self) -> None:
        self._populate()
        self.query_one("#template-list", OptionList).focus()

    def _populate(self, highlight: Optional[str] = None) -> None:
        option_list = self.query_one("#template-list", OptionList)
        option_list.clear_options()
        entries = self.catalog.list()
        if not entries:
            option_list.add_option(Option("No saved templates", disabled=True))
            return
        for entry in entries:
            marker = "★ " if entry.is_default else "  "
            option_list.add_option(Option(f"{marker}{entry.name}", id=entry.name))
        names = [entry.name for entry in entries]
        option_list.highlighted = names.index(highlight) if highlight in names else 0

    def _highlighted_name(self) -> Optional[str]:
        option_list = self.query_one("#template-list", OptionList)
        if option_list.highlighted is None:
            return None
        return option_list.get_option_at_index(option_list.highlighted).id

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id:
            self.dismiss(event.option.id)

    def action_set_default(self) -> None:
        name = self._highlighted_name()
        if not name:
            return
        if self.catalog.set_default(name):
            self.notify(f"'{name}' will load at startup")
        else:
            self.notify(f"Could not set '{name}' as default", severity="error")
        self._populate(highlight=name)

    def action_cancel(self) -> None:
        self.dismiss(None)


HELP_TEXT = """\
NAVIGATION
  Shift+Arrows   Split pane
  Tab            Cycle focus
  Delete         Close pane
  0-9 / Click    Select pane
  Drag divider   Resize split
  Ctrl+Arrows    Resize split

ACTIONS
  Enter          Select view
  Space          Fullscreen pane
  T              Next theme
  M              Main menu
  S / L          Save / load template
  H              Toggle help
  Q              Quit"""


class HelpScreen(ModalScreen[None]):
    """Key reference. `h` closes it again."""

    CSS = _PICKER_CSS.format(screen="HelpScreen")

    BINDINGS = [
        ("h", "close", "Close"),
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(classes="picker"):
            yield Label("Help", classes="picker-title")
            yield Static(HELP_TEXT, id="help-text", markup=False)
            yield Static("H / Esc Close", classes="picker-help")

    def action_close(self) -> None:
        self.dismiss(None)


MENU_THEME = "theme"
MENU_CLOSE = "close"


class MainMenuScreen(ModalScreen[Optional[str]]):
    """Top-level menu. Dismisses with the chosen item id, None when closed."""

    CSS = _PICKER_CSS.format(screen="MainMenuScreen")

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("m", "cancel", "Close"),
        ("q", "cancel", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(classes="picker"):
            yield Label("Main Menu", classes="picker-title")
            yield OptionList(
                Option("Change Theme", id=MENU_THEME),
                Option("Close Menu", id=MENU_CLOSE),
                id="menu-list",
            )
            yield Static("Enter Select • Esc Close", classes="picker-help")

    def on_mount(self) -> None:
        option_list = self.query_one("#menu-list", OptionList)
        option_list.highlighted = 0
        option_list.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        choice = event.option.id
        self.dismiss(None if choice == MENU_CLOSE else choice)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ThemePickerScreen(ModalScreen[Optional[str]]):
    """Pick a theme from the cycle; the current one is marked."""

    CSS = _PICKER_CSS.format(screen="ThemePickerScreen")

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("q", "cancel", "Cancel"),
    ]

    def __init__(self, themes: List[str], current: Optional[str] = None) -> None:
        super().__init__()
        self.themes = themes
        self.current = current

    def compose(self) -> ComposeResult:
        with Vertical(classes="picker"):
            yield Label("Select Theme", classes="picker-title")
            yield OptionList(id="theme-list")
            yield Static("Enter Select • Esc Cancel", classes="picker-help")

    def on_mount(self) -> None:
        option_list = self.query_one("#theme-list", OptionList)
        for name in self.themes:
            marker = "● " if name == self.current else "  "
            option_list.add_option(Option(f"{marker}{name}", id=name))
        if self.current in self.themes:
            option_list.highlighted = self.themes.index(self.current)
        option_list.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id:
            self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss(None)


class QuitConfirmScreen(ModalScreen[bool]):
    """Modal screen for quit confirmation."""

    CSS = """
    QuitConfirmScreen {
        align: center middle;
    }

    #dialog {
        grid-size: 2;
        grid-gutter: 1 2;
        grid-rows: 1fr 3;
        padding: 0 2;
        width: 50;
        height: 9;
        border: thick $background 80%;
        background: $surface;
    }

    #question {
        column-span: 2;
        height: 3;
        width: 100%;
        content-align: center middle;
        text-style: bold;
    }

    Button {
        width: 100%;
    }
    """

    BINDINGS = [
        ("y", "confirm", "Yes"),
        ("n", "cancel", "No"),
        ("escape", "cancel", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        with Grid(id="dialog"):
            yield Label(
                "Quit csitui?\n[dim]Press [bold]y[/bold] to quit, [bold]n[/bold] to stay[/dim]",
                id="question",
            )
            yield Button("Stay (n)", variant="primary", id="cancel")
            yield Button("Quit (y)", variant="error", id="quit")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "quit")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
