"""
Layout tree for the tiling pane manager.

The screen is described by a binary tree: leaves are panes showing one
view each, inner nodes split their rectangle in two along one axis at a
percentage ratio. `TilingManager` owns the tree and every mutation on it.

Mutations are total. Stale focus ids, stale split paths, the pane cap and
closing the last pane are all answered with "do nothing".
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from csitui.config.constants import (
    DEFAULT_SPLIT_RATIO,
    MAX_PANES,
    MAX_SPLIT_RATIO,
    MIN_SPLIT_RATIO,
)

logger = logging.getLogger(__name__)


class ViewType(Enum):
    """What a pane displays. The layout engine only passes it through."""

    EMPTY = "empty"
    DASHBOARD = "dashboard"
    POLAR = "polar"
    ISOMETRIC = "isometric"
    SPECTROGRAM = "spectrogram"
    PHASE = "phase"
    CAMERA = "camera"
    RAW_SCATTER = "raw_scatter"

    @property
    def label(self) -> str:
        return _VIEW_LABELS[self]


_VIEW_LABELS = {
    ViewType.EMPTY: "Empty Pane",
    ViewType.DASHBOARD: "Dashboard Stats",
    ViewType.POLAR: "Polar Scatter",
    ViewType.ISOMETRIC: "3D Isometric",
    ViewType.SPECTROGRAM: "Spectrogram",
    ViewType.PHASE: "Phase Plot",
    ViewType.CAMERA: "Camera Feed",
    ViewType.RAW_SCATTER: "Multipath Scatter",
}


class SplitAxis(Enum):
    """Direction along which a split subdivides its rectangle.

    HORIZONTAL divides the width (children side by side), VERTICAL
    divides the height (children stacked).
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class Pane:
    """Leaf of the layout tree."""

    id: int
    view: ViewType = ViewType.EMPTY


@dataclass
class Split:
    """Inner node: first child takes `ratio` percent along `axis`.

    Attributes:
        axis: Direction of the subdivision
        ratio: Percentage given to the first child, kept in [10, 90]
        children: Exactly two child nodes, owned by this split
    """

    axis: SplitAxis
    ratio: int = DEFAULT_SPLIT_RATIO
    children: List["LayoutNode"] = field(default_factory=list)


LayoutNode = Union[Pane, Split]

Path = List[int]


def clamp_ratio(value: int) -> int:
    """Clamp a split ratio into the allowed percentage range."""
    return max(MIN_SPLIT_RATIO, min(MAX_SPLIT_RATIO, int(value)))


def iter_panes(node: LayoutNode) -> Iterator[Pane]:
    """Yield panes in left-to-right depth-first order."""
    if isinstance(node, Pane):
        yield node
    else:
        for child in node.children:
            yield from iter_panes(child)


def resolve_path(node: LayoutNode, path: Sequence[int]) -> Optional[LayoutNode]:
    """Follow child indices from `node`; None if the path leaves the tree."""
    current = node
    for index in path:
        if not isinstance(current, Split) or not 0 <= index < len(current.children):
            return None
        current = current.children[index]
    return current


def _remove_pane(node: LayoutNode, target_id: int) -> Optional[LayoutNode]:
    """Remove the pane with `target_id`, collapsing splits left with one child."""
    if isinstance(node, Pane):
        return None if node.id == target_id else node

    survivors = []
    for child in node.children:
        kept = _remove_pane(child, target_id)
        if kept is not None:
            survivors.append(kept)

    if not survivors:
        return None
    if len(survivors) == 1:
        return survivors[0]
    node.children = survivors
    return node


class TilingManager:
    """Owns the layout tree, the focused pane and id allocation.

    Attributes:
        root: Root node of the layout tree
        focused_pane_id: Id of the pane receiving keyboard actions
        next_id: Next unused pane id
        is_default: Whether this layout is the catalog's startup template
        display: Opaque display preferences persisted with the layout
        revision: Bumped on every change that can move a rectangle; not persisted
    """

    def __init__(
        self,
        root: Optional[LayoutNode] = None,
        focused_pane_id: int = 1,
        next_id: Optional[int] = None,
        is_default: bool = False,
        display: Any = None,
    ) -> None:
        self.root: LayoutNode = root if root is not None else Pane(1)
        self.focused_pane_id = focused_pane_id
        self.next_id = next_id if next_id is not None else max(self.pane_ids()) + 1
        self.is_default = is_default
        self.display = display
        self.revision = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def pane_count(self) -> int:
        return sum(1 for _ in iter_panes(self.root))

    def pane_ids(self) -> List[int]:
        """Pane ids in traversal order."""
        return [pane.id for pane in iter_panes(self.root)]

    def has_pane(self, pane_id: int) -> bool:
        return any(pane.id == pane_id for pane in iter_panes(self.root))

    def find_pane(self, pane_id: int) -> Optional[Pane]:
        for pane in iter_panes(self.root):
            if pane.id == pane_id:
                return pane
        return None

    def find_view(self, pane_id: int) -> Optional[ViewType]:
        pane = self.find_pane(pane_id)
        return pane.view if pane else None

    def node_at(self, path: Sequence[int]) -> Optional[LayoutNode]:
        return resolve_path(self.root, path)

    def ancestor_split_path(self, pane_id: int, axis: SplitAxis) -> Optional[Path]:
        """Path of the nearest split along `axis` that encloses the pane.

        Returns:
            The split's path, or None if the pane is missing or no
            enclosing split has that axis.
        """
        pane_path = self._pane_path(self.root, pane_id, [])
        if pane_path is None:
            return None

        for depth in range(len(pane_path) - 1, -1, -1):
            node = self.node_at(pane_path[:depth])
            if isinstance(node, Split) and node.axis is axis:
                return pane_path[:depth]
        return None

    def _pane_path(self, node: LayoutNode, pane_id: int, prefix: Path) -> Optional[Path]:
        if isinstance(node, Pane):
            return prefix if node.id == pane_id else None
        for index, child in enumerate(node.children):
            found = self._pane_path(child, pane_id, prefix + [index])
            if found is not None:
                return found
        return None

    # ------------------------------------------------------------------
    # Structural mutations
    # ------------------------------------------------------------------

    def split(self, axis: SplitAxis) -> None:
        """Split the focused pane, giving focus to the new empty pane."""
        if self.pane_count() >= MAX_PANES:
            logger.debug("Split ignored: pane limit reached")
            return

        target = self.focused_pane_id
        new_id = self.next_id

        if isinstance(self.root, Pane):
            if self.root.id != target:
                return
            self.root = Split(axis, DEFAULT_SPLIT_RATIO, [self.root, Pane(new_id)])
        else:
            parent = self._parent_of(self.root, target)
            if parent is None:
                logger.debug(f"Split ignored: focused pane {target} not in tree")
                return
            split_node, index = parent
            old = split_node.children[index]
            split_node.children[index] = Split(axis, DEFAULT_SPLIT_RATIO, [old, Pane(new_id)])

        self.focused_pane_id = new_id
        self.next_id += 1
        self.revision += 1
        logger.debug(f"Split pane {target} {axis.value}ly, new pane {new_id}")

    def _parent_of(self, node: Split, pane_id: int) -> Optional[Tuple[Split, int]]:
        for index, child in enumerate(node.children):
            if isinstance(child, Pane):
                if child.id == pane_id:
                    return node, index
            else:
                found = self._parent_of(child, pane_id)
                if found is not None:
                    return found
        return None

    def close_focused_pane(self) -> None:
        """Remove the focused pane and renumber the survivors 1..N."""
        if self.pane_count() <= 1:
            return

        remaining = _remove_pane(self.root, self.focused_pane_id)
        if remaining is not None:
            self.root = remaining

        if not self.has_pane(self.focused_pane_id):
            self.focused_pane_id = next(iter_panes(self.root)).id

        self.reindex()
        self.revision += 1

    def reindex(self) -> None:
        """Renumber panes 1..N in traversal order, keeping focus on the same pane."""
        new_focus = self.focused_pane_id
        focus_mapped = False
        counter = 1
        for pane in iter_panes(self.root):
            if not focus_mapped and pane.id == self.focused_pane_id:
                new_focus = counter
                focus_mapped = True
            pane.id = counter
            counter += 1

        self.focused_pane_id = new_focus if focus_mapped else 1
        self.next_id = counter

    def set_current_view(self, view: ViewType) -> None:
        pane = self.find_pane(self.focused_pane_id)
        if pane is not None:
            pane.view = view

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    def focus_next(self) -> None:
        """Move focus to the next existing id, wrapping past next_id."""
        max_id = self.next_id
        check_id = self.focused_pane_id + 1
        for _ in range(max_id):
            if check_id >= max_id:
                check_id = 1
            if self.has_pane(check_id):
                self.focused_pane_id = check_id
                return
            check_id += 1

    def focus_pane(self, pane_id: int) -> bool:
        """Focus `pane_id` if it exists. Returns whether focus changed hands."""
        if not self.has_pane(pane_id):
            return False
        self.focused_pane_id = pane_id
        return True

    def repair_focus(self) -> None:
        """Point focus at the first pane if it names a pane that is gone."""
        if not self.has_pane(self.focused_pane_id):
            self.focused_pane_id = next(iter_panes(self.root)).id

    # ------------------------------------------------------------------
    # Ratios
    # ------------------------------------------------------------------

    def set_split_ratio(self, path: Sequence[int], value: int) -> None:
        node = resolve_path(self.root, path)
        if isinstance(node, Split):
            node.ratio = clamp_ratio(value)
            self.revision += 1

    def adjust_split_ratio(self, path: Sequence[int], delta: int) -> None:
        node = resolve_path(self.root, path)
        if isinstance(node, Split):
            node.ratio = clamp_ratio(node.ratio + delta)
            self.revision += 1
