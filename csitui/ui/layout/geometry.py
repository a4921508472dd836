"""
Geometry solver: layout tree + outer region -> per-pane regions.

Runs every frame. The terminal size and split ratios both change between
frames, so nothing here is cached across calls; callers keep the returned
`LayoutGeometry` only until the tree or the area changes.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from textual.geometry import Region

from .tree import LayoutNode, Pane, Path, SplitAxis, ViewType

# render(pane_id, view, region, is_focused)
RenderCallback = Callable[[int, ViewType, Region, bool], None]


@dataclass(frozen=True)
class PaneRegion:
    """Screen region assigned to one pane in one frame."""

    pane_id: int
    region: Region


@dataclass(frozen=True)
class SplitterRegion:
    """One-cell strip at a split boundary that starts a resize drag.

    Attributes:
        path: Child indices from the root to the split
        region: The strip's screen region
        axis: The split's axis
        ratio: The split's ratio when this frame was solved
        container_length: Length of the split's region along its axis
    """

    path: Tuple[int, ...]
    region: Region
    axis: SplitAxis
    ratio: int
    container_length: int


@dataclass
class LayoutGeometry:
    """Hit-testing caches for a single frame."""

    area: Region
    panes: List[PaneRegion] = field(default_factory=list)
    splitters: List[SplitterRegion] = field(default_factory=list)
    revision: int = 0

    def pane_at(self, x: int, y: int) -> Optional[PaneRegion]:
        for pane in self.panes:
            if pane.region.contains(x, y):
                return pane
        return None

    def splitter_at(self, x: int, y: int) -> Optional[SplitterRegion]:
        """Splitter under the point; the outermost split wins where strips cross."""
        for splitter in self.splitters:
            if splitter.region.contains(x, y):
                return splitter
        return None

    def has_pane(self, pane_id: int) -> bool:
        return any(pane.pane_id == pane_id for pane in self.panes)


def split_region(region: Region, axis: SplitAxis, ratio: int) -> Tuple[Region, Region, int]:
    """Divide `region` along `axis` so the two parts always sum to the whole.

    Returns:
        (first, second, container_length)
    """
    x, y, width, height = region
    if axis is SplitAxis.HORIZONTAL:
        first = width * ratio // 100
        return (
            Region(x, y, first, height),
            Region(x + first, y, width - first, height),
            width,
        )
    first = height * ratio // 100
    return (
        Region(x, y, width, first),
        Region(x, y + first, width, height - first),
        height,
    )


def splitter_strip(region: Region, second: Region, axis: SplitAxis) -> Region:
    """The 1-cell strip on the first line of the second part."""
    if axis is SplitAxis.HORIZONTAL:
        return Region(second.x, region.y, 1, region.height)
    return Region(region.x, second.y, region.width, 1)


def solve_layout(
    root: LayoutNode,
    area: Region,
    *,
    focused_pane_id: Optional[int] = None,
    render: Optional[RenderCallback] = None,
    revision: int = 0,
) -> LayoutGeometry:
    """Compute pane and splitter regions for the whole tree.

    Args:
        root: Root of the layout tree
        area: Outer region of the tiling area for this frame
        focused_pane_id: Pane reported as focused to `render`
        render: Optional callback invoked once per pane, in traversal order
        revision: Tree revision the result is valid for

    Returns:
        LayoutGeometry with every pane and splitter of this frame
    """
    geometry = LayoutGeometry(area=area, revision=revision)
    _solve_node(root, area, [], geometry, focused_pane_id, render)
    return geometry


def _solve_node(
    node: LayoutNode,
    region: Region,
    path: Path,
    geometry: LayoutGeometry,
    focused_pane_id: Optional[int],
    render: Optional[RenderCallback],
) -> None:
    if isinstance(node, Pane):
        geometry.panes.append(PaneRegion(node.id, region))
        if render is not None:
            render(node.id, node.view, region, node.id == focused_pane_id)
        return

    first, second, length = split_region(region, node.axis, node.ratio)
    geometry.splitters.append(
        SplitterRegion(
            path=tuple(path),
            region=splitter_strip(region, second, node.axis),
            axis=node.axis,
            ratio=node.ratio,
            container_length=length,
        )
    )
    for index, (child, child_region) in enumerate(zip(node.children, (first, second))):
        _solve_node(child, child_region, path + [index], geometry, focused_pane_id, render)

