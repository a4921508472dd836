"""
Tiling area widget.

`TilingView` re-solves the layout geometry on every render, publishes the
result to the `InteractionController` and draws each pane through a
`PaneRenderer`. Pointer events are resolved against the geometry of the
frame on screen; if the tree or the widget size changed since that frame,
the geometry is solved again first.
"""

import logging
from typing import List, Optional, Protocol, Tuple

from rich.style import Style
from rich.text import Text
from textual import events
from textual.app import RenderResult
from textual.binding import Binding
from textual.geometry import Region
from textual.message import Message
from textual.widget import Widget

from csitui.ui.layout.geometry import LayoutGeometry, solve_layout
from csitui.ui.layout.interaction import InteractionController, InteractionState
from csitui.ui.layout.tree import Pane, TilingManager, ViewType

logger = logging.getLogger(__name__)
input_logger = logging.getLogger("input_events")


class PaneCanvas:
    """Character grid the pane renderers draw into."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._rows: List[List[Tuple[str, Optional[Style]]]] = [
            [(" ", None)] * self.width for _ in range(self.height)
        ]

    def put(self, x: int, y: int, text: str, style: Optional[Style] = None) -> None:
        """Write `text` starting at (x, y), cropped to the canvas."""
        if not 0 <= y < self.height:
            return
        row = self._rows[y]
        for offset, char in enumerate(text):
            column = x + offset
            if 0 <= column < self.width:
                row[column] = (char, style)

    def to_text(self) -> Text:
        text = Text(no_wrap=True, overflow="crop", end="")
        for index, row in enumerate(self._rows):
            if index:
                text.append("\n")
            run: List[str] = []
            run_style: Optional[Style] = None
            for char, style in row:
                if style != run_style and run:
                    text.append("".join(run), run_style)
                    run = []
                run_style = style
                run.append(char)
            if run:
                text.append("".join(run), run_style)
        return text


class PaneRenderer(Protocol):
    """Draws one pane's content. Visualizations plug in here."""

    def draw(
        self,
        canvas: PaneCanvas,
        pane_id: int,
        view: ViewType,
        region: Region,
        is_focused: bool,
        accent: Style,
    ) -> None: ...


class PlaceholderRenderer:
    """Titled box per pane, used when no visualization is attached."""

    NORMAL_BOX = "┌┐└┘─│"
    FOCUSED_BOX = "┏┓┗┛━┃"

    def draw(
        self,
        canvas: PaneCanvas,
        pane_id: int,
        view: ViewType,
        region: Region,
        is_focused: bool,
        accent: Style,
    ) -> None:
        x, y, width, height = region
        if width < 2 or height < 2:
            return

        tl, tr, bl, br, horizontal, vertical = self.FOCUSED_BOX if is_focused else self.NORMAL_BOX
        border = accent if is_focused else Style(dim=True)

        canvas.put(x, y, tl + horizontal * (width - 2) + tr, border)
        for row in range(y + 1, y + height - 1):
            canvas.put(x, row, vertical, border)
            canvas.put(x + width - 1, row, vertical, border)
        canvas.put(x, y + height - 1, bl + horizontal * (width - 2) + br, border)

        title = f" {pane_id}: {view.label} "
        canvas.put(x + 2, y, title[: max(0, width - 4)], border + Style(bold=True))

        if height >= 3:
            if view is ViewType.EMPTY:
                hint = "Press Enter to choose a view"
            else:
                hint = f"{view.label}: waiting for data"
            hint = hint[: max(0, width - 2)]
            canvas.put(x + (width - len(hint)) // 2, y + height // 2, hint, Style(dim=True))


class TilingView(Widget, can_focus=True):
    """Widget owning the tiling area of the screen."""

    DEFAULT_CSS = """
    TilingView {
        width: 1fr;
        height: 1fr;
    }
    """

    # Only active while the tiling area has focus, never behind a modal
    BINDINGS = [Binding("tab", "app.focus_next_pane", "Next pane")]

    class Changed(Message):
        """Posted after input changed focus, structure or ratios."""

    def __init__(
        self,
        manager: TilingManager,
        renderer: Optional[PaneRenderer] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.manager = manager
        self.controller = InteractionController(manager)
        self.renderer: PaneRenderer = renderer or PlaceholderRenderer()
        self.fullscreen_pane_id: Optional[int] = None
        self._solved_key: Optional[tuple] = None

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def set_manager(self, manager: TilingManager) -> None:
        """Swap in a new tree (e.g. a loaded template)."""
        self.controller.cancel()
        self.manager = manager
        self.controller = InteractionController(manager)
        self.fullscreen_pane_id = None
        self._solved_key = None
        self.layout_changed()

    def _layout_key(self) -> tuple:
        return (self.size.width, self.size.height, self.fullscreen_pane_id, self.manager.revision)

    def _root_for_frame(self):
        if self.fullscreen_pane_id is not None:
            view = self.manager.find_view(self.fullscreen_pane_id)
            if view is not None:
                return Pane(self.fullscreen_pane_id, view)
            self.fullscreen_pane_id = None
        return self.manager.root

    def solve(self, canvas: Optional[PaneCanvas] = None) -> LayoutGeometry:
        """Solve this frame's geometry, optionally drawing into `canvas`, and publish it."""
        render = None
        if canvas is not None:
            accent = self._accent_style()

            def render(pane_id: int, view: ViewType, region: Region, is_focused: bool) -> None:
                self.renderer.draw(canvas, pane_id, view, region, is_focused, accent)

        geometry = solve_layout(
            self._root_for_frame(),
            Region(0, 0, self.size.width, self.size.height),
            focused_pane_id=self.manager.focused_pane_id,
            render=render,
            revision=self.manager.revision,
        )
        self.controller.publish(geometry)
        self._solved_key = self._layout_key()
        return geometry

    def ensure_geometry(self) -> LayoutGeometry:
        """Geometry matching the current tree and size, re-solved if stale."""
        if self._solved_key != self._layout_key() or not self.controller.is_fresh():
            return self.solve()
        return self.controller.geometry

    def _accent_style(self) -> Style:
        color = self.app.current_theme.primary
        return Style(color=color, bold=True) if color else Style(bold=True)

    def render(self) -> RenderResult:
        canvas = PaneCanvas(self.size.width, self.size.height)
        self.solve(canvas)
        return canvas.to_text()

    def layout_changed(self) -> None:
        self.refresh()
        self.post_message(self.Changed())

    # ------------------------------------------------------------------
    # Fullscreen
    # ------------------------------------------------------------------

    def toggle_fullscreen(self) -> None:
        self.controller.cancel()
        if self.fullscreen_pane_id is None:
            self.fullscreen_pane_id = self.manager.focused_pane_id
        else:
            self.fullscreen_pane_id = None
        self.layout_changed()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def focus_slot(self, key: str) -> bool:
        self.ensure_geometry()
        if self.controller.focus_slot(key):
            self.layout_changed()
            return True
        return False

    def cancel_drag(self) -> None:
        if self.controller.state is InteractionState.DRAGGING:
            self.controller.cancel()
            self.release_mouse()

    def on_mouse_down(self, event: events.MouseDown) -> None:
        if event.button != 1:
            return
        self.ensure_geometry()
        input_logger.debug(f"mouse down at ({event.x}, {event.y})")
        if self.controller.pointer_down(event.x, event.y):
            if self.controller.state is InteractionState.DRAGGING:
                self.capture_mouse()
            self.layout_changed()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.controller.pointer_move(event.x, event.y):
            self.layout_changed()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self.controller.state is InteractionState.DRAGGING:
            self.controller.pointer_up()
            self.release_mouse()

    def on_mouse_release(self, event: events.MouseRelease) -> None:
        self.controller.cancel()

    def on_resize(self, event: events.Resize) -> None:
        self.cancel_drag()
        self.refresh()

    def on_blur(self, event: events.Blur) -> None:
        self.cancel_drag()
