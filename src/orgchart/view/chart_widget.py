"""
Organizational Chart Widget
===========================
Qt event surface of the diagram engine. It translates mouse, wheel, enter/leave
and resize events into ChartController calls and repaints whenever the
controller reports a change.

Wheel isolation: the widget only accepts wheel events while the controller
holds the wheel claim (pointer inside the chart). Accepted events never reach
an enclosing QScrollArea, ignored ones do, so the page keeps scrolling
normally outside the chart and never scrolls while zooming inside it.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QMouseEvent, QPainter, QPaintEvent, QResizeEvent, QWheelEvent
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton, QToolButton, QWidget

from orgchart.controller.chart import ChartController, InteractionMode, UnitCallback
from orgchart.model.layout import LayoutError
from orgchart.model.units import Unit
from orgchart.view.detail_panel import UnitDetailPanel
from orgchart.view.renderer import ChartRenderer

logger = logging.getLogger(__name__)

OVERLAY_MARGIN = 16

EMPTY_TITLE = "Nema podataka za prikaz"
EMPTY_SUBTITLE = "Dodajte organizacione jedinice da biste videli grafikon"
INVALID_TREE_TITLE = "Struktura se ne može prikazati"

INSTRUCTIONS = (
    "• Kliknite na jedinicu za detalje\n"
    "• Skrolujte za zoom\n"
    "• Prevlačite pozadinu za pomeranje\n"
    "• Prevucite jedinicu da je premestite"
)


class OrgChartWidget(QWidget):
    """Pan/zoom/drag view of an organizational tree."""
    unit_selected = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(400, 300)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setCursor(Qt.OpenHandCursor)

        self.controller = ChartController(self)
        self.renderer = ChartRenderer()
        self._error_message: Optional[str] = None

        # --- overlays ---
        self.toolbar = self._build_toolbar()

        self.lbl_instructions = QLabel(INSTRUCTIONS, self)
        self.lbl_instructions.setStyleSheet(
            "background: rgba(255, 255, 255, 230); color: #4B5563; font-size: 11px;"
            "border: 1px solid #E2E8F0; border-radius: 6px; padding: 8px;"
        )
        self.lbl_instructions.adjustSize()

        self.detail_panel = UnitDetailPanel(self)

        # --- signals ---
        self.controller.changed.connect(self._on_changed)
        self.controller.unit_selected.connect(self._on_unit_selected)
        self.controller.selection_cleared.connect(self._on_selection_cleared)
        self.detail_panel.close_requested.connect(self.controller.clear_selection)

        self._on_changed()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_units(self, units: Optional[Sequence[Unit]], on_unit_select: Optional[UnitCallback] = None) -> None:
        """
        Display a new unit tree.

        Invalid trees (a unit reachable twice) are reported in the empty state
        instead of raising into the caller's event handler.
        """
        try:
            self.controller.set_units(units, on_unit_select)
            self._error_message = None
        except LayoutError as e:
            logger.error(f"Cannot display organizational structure: {e}")
            self._error_message = str(e)
            self.controller.set_units([], on_unit_select)
        self._on_changed()

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    def zoom_in(self) -> None:
        self.controller.zoom_in()

    def zoom_out(self) -> None:
        self.controller.zoom_out()

    def reset_view(self) -> None:
        self.controller.reset_view()

    def fit_to_container(self) -> None:
        self.controller.fit_to_container()

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            if self.controller.is_empty:
                title = INVALID_TREE_TITLE if self._error_message else EMPTY_TITLE
                subtitle = self._error_message or EMPTY_SUBTITLE
                self.renderer.paint_placeholder(painter, self.width(), self.height(), title, subtitle)
                return
            self.renderer.paint(
                painter,
                self.width(),
                self.height(),
                self.controller.nodes,
                self.controller.position_of,
                self.controller.state,
                selected_id=self.controller.selected_id,
                dragged_id=self.controller.dragged_id,
            )
        finally:
            painter.end()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.controller.set_container_size(self.width(), self.height())
        self._place_overlays()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton or self.controller.is_empty:
            super().mousePressEvent(event)
            return
        pos = event.position()
        mode = self.controller.pointer_down(pos.x(), pos.y())
        self.setCursor(Qt.SizeAllCursor if mode == InteractionMode.DRAGGING else Qt.ClosedHandCursor)
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self.controller.mode == InteractionMode.IDLE:
            super().mouseMoveEvent(event)
            return
        pos = event.position()
        # The implicit mouse grab keeps delivering moves outside the widget;
        # leaving the chart ends the gesture just like a release would.
        if not self.rect().contains(pos.toPoint()):
            self.controller.cancel_gesture()
            self.setCursor(Qt.OpenHandCursor)
        else:
            self.controller.pointer_move(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self.controller.pointer_up()
        if self.rect().contains(event.position().toPoint()):
            self.controller.pointer_enter()
        self.setCursor(Qt.OpenHandCursor)
        event.accept()

    def enterEvent(self, event) -> None:
        self.controller.pointer_enter()
        super().enterEvent(event)

    def leaveEvent(self, event) -> None:
        self._pointer_left()
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        # Qt reports "away from the user" as positive; the controller expects
        # page direction (positive = scroll down = zoom out).
        if self.controller.wheel(-event.angleDelta().y()):
            event.accept()
        else:
            event.ignore()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _pointer_left(self) -> None:
        self.controller.pointer_leave()
        self.setCursor(Qt.OpenHandCursor)

    def _build_toolbar(self) -> QFrame:
        bar = QFrame(self)
        bar.setObjectName("chartToolbar")
        bar.setStyleSheet(
            "QFrame#chartToolbar { background: white; border: 1px solid #E2E8F0; border-radius: 8px; }"
        )
        h = QHBoxLayout(bar)
        h.setContentsMargins(4, 4, 4, 4)
        h.setSpacing(4)

        self.btn_zoom_out = QToolButton(bar)
        self.btn_zoom_out.setText("−")
        self.btn_zoom_out.setToolTip("Umanji")
        self.btn_zoom_out.clicked.connect(self.zoom_out)

        self.lbl_zoom = QLabel("100%", bar)
        self.lbl_zoom.setMinimumWidth(48)
        self.lbl_zoom.setAlignment(Qt.AlignCenter)

        self.btn_zoom_in = QToolButton(bar)
        self.btn_zoom_in.setText("+")
        self.btn_zoom_in.setToolTip("Uvećaj")
        self.btn_zoom_in.clicked.connect(self.zoom_in)

        self.btn_fit = QPushButton("Prilagodi", bar)
        self.btn_fit.clicked.connect(self.fit_to_container)

        self.btn_reset = QToolButton(bar)
        self.btn_reset.setText("⟲")
        self.btn_reset.setToolTip("Vrati početni prikaz")
        self.btn_reset.clicked.connect(self.reset_view)

        for w in (self.btn_zoom_out, self.lbl_zoom, self.btn_zoom_in, self.btn_fit, self.btn_reset):
            h.addWidget(w)
        bar.adjustSize()
        return bar

    def _place_overlays(self) -> None:
        self.toolbar.adjustSize()
        self.toolbar.move(self.width() - self.toolbar.width() - OVERLAY_MARGIN, OVERLAY_MARGIN)
        self.lbl_instructions.move(OVERLAY_MARGIN, OVERLAY_MARGIN)
        if self.detail_panel.isVisible():
            self.detail_panel.adjustSize()
            self.detail_panel.move(
                OVERLAY_MARGIN,
                max(OVERLAY_MARGIN, self.height() - self.detail_panel.height() - OVERLAY_MARGIN),
            )

    def _on_changed(self) -> None:
        empty = self.controller.is_empty
        self.toolbar.setVisible(not empty)
        self.lbl_instructions.setVisible(not empty)
        self.lbl_zoom.setText(f"{self.controller.state.zoom_percent}%")
        self.update()

    def _on_unit_selected(self, unit: Unit) -> None:
        self.detail_panel.set_unit(unit)
        self._place_overlays()
        self.unit_selected.emit(unit)

    def _on_selection_cleared(self) -> None:
        self.detail_panel.set_unit(None)
