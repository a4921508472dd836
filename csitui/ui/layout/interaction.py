"""
Pointer and keyboard interaction with the tiling layout.

`InteractionController` resolves one input event at a time against the
geometry of the current frame and turns it into at most one mutation on
the `TilingManager`:

- click on a pane focuses it
- digit keys focus the pane shown in that slot
- pressing on a splitter strip and dragging resizes that split

A drag addresses its split by path, captured at pointer-down. The
splitter's rectangle moves every frame while the path stays valid for the
whole drag. Every move is applied relative to the ratio captured at
pointer-down so repeated moves never compound rounding.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .geometry import LayoutGeometry
from .tree import SplitAxis, TilingManager

logger = logging.getLogger(__name__)
input_logger = logging.getLogger("input_events")


class InteractionState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DragState:
    """Everything a drag needs, captured when the pointer went down."""

    path: Tuple[int, ...]
    axis: SplitAxis
    start_ratio: int
    start_x: int
    start_y: int
    container_length: int


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def slot_for_key(key: str) -> Optional[int]:
    """Map "1".."9" to slots 1..9 and "0" to slot 10."""
    if len(key) != 1 or not key.isdigit():
        return None
    return 10 if key == "0" else int(key)


class InteractionController:
    """IDLE/DRAGGING state machine over a TilingManager.

    The owning widget must `publish()` the geometry of each frame before
    feeding events. Hit-tests are only answered from geometry solved for
    the manager's current revision; stale caches make them no-ops.
    """

    def __init__(self, manager: TilingManager) -> None:
        self.manager = manager
        self.geometry: Optional[LayoutGeometry] = None
        self.drag: Optional[DragState] = None

    @property
    def state(self) -> InteractionState:
        return InteractionState.DRAGGING if self.drag is not None else InteractionState.IDLE

    def publish(self, geometry: LayoutGeometry) -> None:
        """Install this frame's pane and splitter caches."""
        self.geometry = geometry

    def is_fresh(self) -> bool:
        return self.geometry is not None and self.geometry.revision == self.manager.revision

    def pointer_down(self, x: int, y: int) -> bool:
        """Start a drag on a splitter, or focus the pane under the pointer.

        Returns:
            True if focus or drag state changed
        """
        if self.drag is not None:
            input_logger.debug("pointer_down while dragging, dropping stale drag")
            self.drag = None

        if not self.is_fresh():
            return False

        splitter = self.geometry.splitter_at(x, y)
        if splitter is not None:
            self.drag = DragState(
                path=splitter.path,
                axis=splitter.axis,
                start_ratio=splitter.ratio,
                start_x=x,
                start_y=y,
                container_length=splitter.container_length,
            )
            input_logger.debug(f"Drag start on split {list(splitter.path)} at ({x}, {y})")
            return True

        pane = self.geometry.pane_at(x, y)
        if pane is None:
            return False
        changed = pane.pane_id != self.manager.focused_pane_id
        self.manager.focus_pane(pane.pane_id)
        return changed

    def pointer_move(self, x: int, y: int) -> bool:
        """Apply the drag displacement; no-op unless dragging.

        Returns:
            True if a ratio was written
        """
        drag = self.drag
        if drag is None or drag.container_length <= 0:
            return False

        if drag.axis is SplitAxis.HORIZONTAL:
            displacement = x - drag.start_x
        else:
            displacement = y - drag.start_y

        delta = round_half_away(displacement / drag.container_length * 100)
        self.manager.set_split_ratio(drag.path, drag.start_ratio + delta)
        return True

    def pointer_up(self) -> None:
        if self.drag is not None:
            input_logger.debug(f"Drag end on split {list(self.drag.path)}")
        self.drag = None

    def cancel(self) -> None:
        """Abandon any drag; ratios already written stay as they are."""
        if self.drag is not None:
            logger.debug("Drag cancelled")
        self.drag = None

    def focus_slot(self, key: str) -> bool:
        """Focus the pane in the slot named by a digit key, if it is on screen."""
        slot = slot_for_key(key)
        if slot is None or not self.is_fresh():
            return False
        if not self.geometry.has_pane(slot):
            return False
        return self.manager.focus_pane(slot)
