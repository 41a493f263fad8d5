"""
Chart Controller
================
The single entry point of the diagram engine. It owns the laid-out tree, the
viewport, the node interaction state and the selection, and routes pointer
input to whichever of them is responsible.

Pointer routing:
    press on a card       -> node drag / click (the background never sees it)
    press on background   -> viewport pan
    move / release        -> whichever mode was claimed at press time
    leave                 -> force-end the active mode, release the wheel

Views subscribe to `changed` and repaint; collaborators get `unit_selected`
(or the callback passed to set_units) when a card is clicked.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging

from PySide6.QtCore import QObject, Signal

from orgchart.controller.interaction import NodeInteractionController
from orgchart.controller.transform import Point, to_world
from orgchart.controller.viewport import ViewportController, ViewportState
from orgchart.model.layout import LayoutNode, diagram_extent, index_nodes, layout
from orgchart.model.units import Unit

logger = logging.getLogger(__name__)

UnitCallback = Callable[[Unit], None]


class InteractionMode(Enum):
    IDLE = "idle"
    PANNING = "panning"
    DRAGGING = "dragging"


class ChartController(QObject):
    changed = Signal()
    unit_selected = Signal(object)
    selection_cleared = Signal()

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.viewport = ViewportController()
        self.interaction = NodeInteractionController()

        self._units: List[Unit] = []
        self._nodes: List[LayoutNode] = []
        self._index: Dict[int, LayoutNode] = {}
        self._on_unit_select: Optional[UnitCallback] = None
        self._selected_id: Optional[int] = None

        self._container: Tuple[float, float] = (0.0, 0.0)
        self._fit_pending: bool = False

    # ------------------------------------------------------------------
    # Input contract
    # ------------------------------------------------------------------

    def set_units(
        self,
        units: Optional[Sequence[Unit]],
        on_unit_select: Optional[UnitCallback] = None,
    ) -> None:
        """
        Replace the displayed tree.

        The layout is recomputed from scratch. A drag in progress is dropped,
        manual positions of units that still exist are kept, and the view is
        refitted when the number of units changed.

        Raises:
            LayoutError: If the units do not form a tree. The previous tree
                stays displayed in that case.
        """
        nodes = layout(units)
        previous_count = len(self._index)

        self._units = list(units or [])
        self._nodes = nodes
        self._index = index_nodes(nodes)
        self._on_unit_select = on_unit_select

        self.interaction.cancel()
        self.viewport.end_pan()
        self.interaction.prune(self._index.keys())

        if self._selected_id is not None and self._selected_id not in self._index:
            self._selected_id = None
            self.selection_cleared.emit()

        logger.info(f"Chart loaded with {len(self._index)} units.")

        if len(self._index) != previous_count:
            self._fit_pending = True
            self.fit_to_container()
        self.changed.emit()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def units(self) -> List[Unit]:
        return self._units

    @property
    def nodes(self) -> List[LayoutNode]:
        return self._nodes

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    @property
    def state(self) -> ViewportState:
        return self.viewport.state

    @property
    def selected_id(self) -> Optional[int]:
        return self._selected_id

    @property
    def selected_unit(self) -> Optional[Unit]:
        node = self._index.get(self._selected_id) if self._selected_id is not None else None
        return node.unit if node is not None else None

    @property
    def dragged_id(self) -> Optional[int]:
        return self.interaction.dragged_id

    @property
    def mode(self) -> InteractionMode:
        if self.interaction.is_dragging:
            return InteractionMode.DRAGGING
        if self.viewport.is_panning:
            return InteractionMode.PANNING
        return InteractionMode.IDLE

    def node(self, unit_id: int) -> Optional[LayoutNode]:
        return self._index.get(unit_id)

    def position_of(self, node: LayoutNode) -> Tuple[float, float]:
        return self.interaction.position_of(node)

    def extent(self) -> Tuple[float, float]:
        return diagram_extent(self._nodes, self.position_of)

    # ------------------------------------------------------------------
    # Pointer input (screen coordinates)
    # ------------------------------------------------------------------

    def pointer_down(self, x: float, y: float) -> InteractionMode:
        # A second press without a release (e.g. another button) restarts cleanly
        self._end_active(allow_click=False)

        screen = Point(x, y)
        node = self.interaction.hit_test(self._nodes, to_world(screen, self.viewport.state))
        if node is not None:
            self.interaction.begin_drag(node, screen, self.viewport.state)
            return InteractionMode.DRAGGING

        self.viewport.begin_pan(x, y)
        return InteractionMode.PANNING

    def pointer_move(self, x: float, y: float) -> bool:
        if self.interaction.is_dragging:
            moved = self.interaction.drag_to(Point(x, y), self.viewport.state)
        else:
            moved = self.viewport.pan_to(x, y)
        if moved:
            self.changed.emit()
        return moved

    def pointer_up(self) -> None:
        self._end_active(allow_click=True)

    def pointer_enter(self) -> None:
        self.viewport.claim_wheel()

    def pointer_leave(self) -> None:
        self.viewport.release_wheel()
        self._end_active(allow_click=False)

    def cancel_gesture(self) -> None:
        """End a drag or pan without a click; the wheel claim is untouched."""
        self._end_active(allow_click=False)

    def wheel(self, delta_y: float) -> bool:
        """Returns True if the chart consumed the wheel event."""
        before = self.viewport.state.scale
        consumed = self.viewport.wheel(delta_y)
        if self.viewport.state.scale != before:
            self.changed.emit()
        return consumed

    def _end_active(self, allow_click: bool) -> None:
        if self.viewport.end_pan():
            self.changed.emit()
            return

        result = self.interaction.end_drag()
        if result is None:
            return
        if result.was_click:
            if allow_click:
                self.select(result.node_id)
        else:
            self.changed.emit()

    # ------------------------------------------------------------------
    # View operations
    # ------------------------------------------------------------------

    def zoom_in(self) -> None:
        if self.viewport.zoom_in():
            self.changed.emit()

    def zoom_out(self) -> None:
        if self.viewport.zoom_out():
            self.changed.emit()

    def reset_view(self) -> None:
        """Scale 1, no offset, every card back at its computed position."""
        self.interaction.cancel()
        self.interaction.clear_overrides()
        self.viewport.reset()
        logger.debug("View reset.")
        self.changed.emit()

    def set_container_size(self, width: float, height: float) -> None:
        self._container = (width, height)
        if self._fit_pending:
            self.fit_to_container()

    def fit_to_container(self) -> bool:
        if self.is_empty:
            return False
        width, height = self.extent()
        if not self.viewport.fit_to_container(*self._container, width, height):
            return False
        self._fit_pending = False
        self.changed.emit()
        return True

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, unit_id: int) -> None:
        node = self._index.get(unit_id)
        if node is None:
            logger.debug(f"Ignoring selection of unknown unit {unit_id}.")
            return
        self._selected_id = unit_id
        logger.info(f"Selected unit {unit_id} ('{node.unit.name}').")
        if self._on_unit_select is not None:
            self._on_unit_select(node.unit)
        self.unit_selected.emit(node.unit)
        self.changed.emit()

    def clear_selection(self) -> None:
        if self._selected_id is None:
            return
        self._selected_id = None
        self.selection_cleared.emit()
        self.changed.emit()
