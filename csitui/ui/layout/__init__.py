"""
Tiling layout engine for the csitui dashboard.

Provides:
- A binary pane/split tree with total, self-repairing mutations
- A geometry solver that tiles a terminal region exactly every frame
- A pointer/keyboard interaction state machine (click-to-focus, drag-to-resize)
- A YAML template catalog with a validating loader

Example usage:
    from csitui.ui.layout import SplitAxis, TilingManager, solve_layout

    manager = TilingManager()
    manager.split(SplitAxis.HORIZONTAL)
    geometry = solve_layout(manager.root, Region(0, 0, 120, 40))
"""

from .geometry import (
    LayoutGeometry,
    PaneRegion,
    SplitterRegion,
    solve_layout,
)
from .interaction import (
    DragState,
    InteractionController,
    InteractionState,
)
from .templates import (
    TemplateCatalog,
    TemplateEntry,
    manager_from_dict,
    manager_to_dict,
)
from .tree import (
    LayoutNode,
    Pane,
    Split,
    SplitAxis,
    TilingManager,
    ViewType,
)

__all__ = [
    # Tree
    "LayoutNode",
    "Pane",
    "Split",
    "SplitAxis",
    "TilingManager",
    "ViewType",
    # Geometry
    "LayoutGeometry",
    "PaneRegion",
    "SplitterRegion",
    "solve_layout",
    # Interaction
    "DragState",
    "InteractionController",
    "InteractionState",
    # Persistence
    "TemplateCatalog",
    "TemplateEntry",
    "manager_from_dict",
    "manager_to_dict",
]
