"""
Node Interaction Controller
===========================
Handles pointer gestures that start on a card: dragging it to a new place or
clicking it to open its details. Both share the same press/release pair and
are told apart by how far the pointer travelled in between.

Manual positions are kept in an override map keyed by unit id. The layout
nodes themselves are never modified, so resetting the view simply forgets the
overrides.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple
import logging

from orgchart.config import CLICK_THRESHOLD_PX
from orgchart.controller.transform import Point, to_world
from orgchart.controller.viewport import ViewportState
from orgchart.model.layout import LayoutNode, iter_nodes

logger = logging.getLogger(__name__)


@dataclass
class DragSession:
    node_id: int
    grab_offset: Point  # world vector: pointer - node origin at grab time
    press_screen: Point
    moved: bool = False


@dataclass(frozen=True)
class DragResult:
    node_id: int
    was_click: bool


class NodeInteractionController:
    def __init__(self, click_threshold: float = CLICK_THRESHOLD_PX) -> None:
        self.click_threshold = click_threshold
        self.overrides: Dict[int, Tuple[float, float]] = {}
        self.session: Optional[DragSession] = None

    @property
    def is_dragging(self) -> bool:
        return self.session is not None

    @property
    def dragged_id(self) -> Optional[int]:
        """Id of the card currently being moved (not just pressed)."""
        if self.session is None or not self.session.moved:
            return None
        return self.session.node_id

    def position_of(self, node: LayoutNode) -> Tuple[float, float]:
        return self.overrides.get(node.id, node.position)

    def hit_test(self, nodes: Sequence[LayoutNode], world: Point) -> Optional[LayoutNode]:
        """Topmost card under a world point (later cards are drawn on top)."""
        hit: Optional[LayoutNode] = None
        for node in iter_nodes(nodes):
            x, y = self.position_of(node)
            if x <= world.x <= x + node.width and y <= world.y <= y + node.height:
                hit = node
        return hit

    def begin_drag(self, node: LayoutNode, screen: Point, viewport: ViewportState) -> None:
        origin = Point(*self.position_of(node))
        self.session = DragSession(
            node_id=node.id,
            grab_offset=to_world(screen, viewport) - origin,
            press_screen=screen,
        )
        logger.debug(f"Pressed unit {node.id}.")

    def drag_to(self, screen: Point, viewport: ViewportState) -> bool:
        """
        Move the grabbed card so the grab point stays under the pointer.

        Movement below the click threshold is ignored so a slightly shaky
        click does not nudge the card.

        Returns:
            True if the card moved.
        """
        session = self.session
        if session is None:
            return False
        if not session.moved:
            if (screen - session.press_screen).magnitude <= self.click_threshold:
                return False
            session.moved = True
            logger.debug(f"Dragging unit {session.node_id}.")

        self.overrides[session.node_id] = (to_world(screen, viewport) - session.grab_offset).as_tuple()
        return True

    def end_drag(self) -> Optional[DragResult]:
        """Finish the gesture. Returns None if no gesture was in progress."""
        session = self.session
        if session is None:
            return None
        self.session = None
        if session.moved:
            logger.debug(f"Unit {session.node_id} moved to {self.overrides.get(session.node_id)}.")
        return DragResult(node_id=session.node_id, was_click=not session.moved)

    def cancel(self) -> bool:
        """Drop the gesture without producing a click."""
        if self.session is None:
            return False
        self.session = None
        return True

    def clear_overrides(self) -> None:
        self.overrides.clear()

    def prune(self, valid_ids: Iterable[int]) -> None:
        """Forget overrides of units that are no longer in the tree."""
        keep = set(valid_ids)
        stale = [unit_id for unit_id in self.overrides if unit_id not in keep]
        for unit_id in stale:
            del self.overrides[unit_id]
        if stale:
            logger.debug(f"Dropped {len(stale)} stale position overrides.")
