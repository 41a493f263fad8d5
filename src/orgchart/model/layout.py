"""
Tree Layout Engine
==================
Turns a tree of organizational units into positioned diagram nodes.

The algorithm runs in two passes over an explicit worklist:
1. Post-order: every subtree gets its width, i.e. the horizontal footprint
   needed to place the unit and all its descendants without overlap.
2. Pre-order: subtrees are packed left to right and every card is centered
   over the span of its children.

No recursion is used, so pathologically deep org charts are not limited by
the interpreter's recursion depth.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple
import logging

import numpy as np

from orgchart.config import (
    NODE_WIDTH, NODE_HEIGHT, HORIZONTAL_SPACING, VERTICAL_SPACING, DIAGRAM_MARGIN
)
from orgchart.model.units import Unit

logger = logging.getLogger(__name__)

PositionLookup = Callable[["LayoutNode"], Tuple[float, float]]


class LayoutError(ValueError):
    """Raised when the input is not a tree (a unit is reachable twice)."""


@dataclass(eq=False)
class LayoutNode:
    """
    A unit placed in world space.

    (x, y) is the top-left corner of the card. subtree_x/subtree_width
    describe the horizontal span reserved for the whole subtree.
    """
    unit: Unit
    level: int
    x: float = 0.0
    y: float = 0.0
    width: float = NODE_WIDTH
    height: float = NODE_HEIGHT
    subtree_x: float = 0.0
    subtree_width: float = NODE_WIDTH
    children: List[LayoutNode] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.unit.id

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def span(self) -> Tuple[float, float]:
        return self.subtree_x, self.subtree_x + self.subtree_width


def _children_span(children: Sequence[LayoutNode]) -> float:
    if not children:
        return 0.0
    return sum(c.subtree_width for c in children) + (len(children) - 1) * HORIZONTAL_SPACING


def layout(roots: Optional[Sequence[Unit]]) -> List[LayoutNode]:
    """
    Compute the diagram layout for a forest of units.

    Args:
        roots: Top-level units, in display order. None is treated as empty.

    Returns:
        The top-level layout nodes (children reachable via .children).

    Raises:
        LayoutError: If a unit object occurs more than once in the input
            (a cycle or a shared subtree).
    """
    if not roots:
        return []

    top_level: List[LayoutNode] = []
    preorder: List[LayoutNode] = []
    seen: set[int] = set()

    # --- 1. Build nodes (pre-order) ---
    stack: List[Tuple[Unit, int, Optional[LayoutNode]]] = [
        (unit, 0, None) for unit in reversed(roots)
    ]
    while stack:
        unit, level, parent = stack.pop()
        if id(unit) in seen:
            raise LayoutError(
                f"Unit {unit.id} ('{unit.name}') appears more than once in the tree; "
                "the organizational structure must be acyclic."
            )
        seen.add(id(unit))

        node = LayoutNode(unit=unit, level=level, y=level * (NODE_HEIGHT + VERTICAL_SPACING))
        (parent.children if parent is not None else top_level).append(node)
        preorder.append(node)

        for child in reversed(unit.children):
            stack.append((child, level + 1, node))

    # --- 2. Subtree widths (children before parents) ---
    for node in reversed(preorder):
        node.subtree_width = max(NODE_WIDTH, _children_span(node.children))

    # --- 3. Positions (parents before children) ---
    cursor = 0.0
    for node in top_level:
        node.subtree_x = cursor
        cursor += node.subtree_width + HORIZONTAL_SPACING

    for node in preorder:
        node.x = node.subtree_x + (node.subtree_width - node.width) / 2
        child_x = node.subtree_x + (node.subtree_width - _children_span(node.children)) / 2
        for child in node.children:
            child.subtree_x = child_x
            child_x += child.subtree_width + HORIZONTAL_SPACING

    logger.debug(f"Layout computed for {len(preorder)} units ({len(top_level)} roots).")
    return top_level


def iter_nodes(nodes: Sequence[LayoutNode]) -> Iterator[LayoutNode]:
    """Pre-order traversal (parents are yielded before their children)."""
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_edges(nodes: Sequence[LayoutNode]) -> Iterator[Tuple[LayoutNode, LayoutNode]]:
    """All (parent, child) pairs in pre-order."""
    for node in iter_nodes(nodes):
        for child in node.children:
            yield node, child


def find_node(nodes: Sequence[LayoutNode], unit_id: int) -> Optional[LayoutNode]:
    for node in iter_nodes(nodes):
        if node.id == unit_id:
            return node
    return None


def index_nodes(nodes: Sequence[LayoutNode]) -> Dict[int, LayoutNode]:
    """Map unit id -> node for the whole forest."""
    return {node.id: node for node in iter_nodes(nodes)}


def diagram_extent(
    nodes: Sequence[LayoutNode],
    position_of: Optional[PositionLookup] = None,
    margin: float = DIAGRAM_MARGIN,
) -> Tuple[float, float]:
    """
    Total size of the diagram, measured from the world origin.

    Args:
        nodes: Top-level layout nodes.
        position_of: Optional lookup returning the effective (x, y) of a node,
            e.g. including manual drag overrides. Defaults to the pure layout.
        margin: Extra space added to the right and bottom.

    Returns:
        (width, height); (0, 0) when there are no nodes.
    """
    flat = list(iter_nodes(nodes))
    if not flat:
        return 0.0, 0.0

    lookup = position_of or (lambda n: n.position)
    corners = np.array([lookup(n) for n in flat], dtype=np.float64)
    sizes = np.array([(n.width, n.height) for n in flat], dtype=np.float64)
    far = (corners + sizes).max(axis=0)
    return float(far[0] + margin), float(far[1] + margin)
