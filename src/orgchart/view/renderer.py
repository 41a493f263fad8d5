"""
Chart Renderer
==============
Draws the organizational chart with QPainter. The renderer keeps no state of
its own: everything it needs (nodes, effective positions, viewport, selection
and the card being dragged) is passed to paint().

Paint order:
    1. background grid (fixed world pitch, so it pans and zooms with content)
    2. connectors (orthogonal three-segment polylines)
    3. unit cards
The detail panel is a regular child widget of the chart and is not painted
here, since it stays in a fixed screen corner regardless of zoom.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple
import math

import numpy as np
from PySide6.QtCore import QLineF, QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPainterPath, QPen, QPolygonF

from orgchart.config import CORNER_RADIUS, GRID_PITCH, HEADER_HEIGHT
from orgchart.controller.transform import Point, to_world
from orgchart.controller.viewport import ViewportState
from orgchart.model.layout import LayoutNode, iter_edges, iter_nodes

PositionLookup = Callable[[LayoutNode], Tuple[float, float]]

# Palette
BACKGROUND_COLOR = "#F9FAFB"
GRID_COLOR = "#E2E8F0"
CONNECTOR_COLOR = "#CBD5E1"
CARD_FILL = "#FFFFFF"
CARD_BORDER = "#E2E8F0"
DRAG_OUTLINE = "#64748B"
TEXT_MUTED = "#6B7280"
TEXT_DARK = "#374151"

# Character limits before text on a card is cut off
NAME_LIMIT = 25
MANAGER_LIMIT = 20
PHONE_LIMIT = 15


# -------------------------------------------------------------------------------
# Geometry helpers
# -------------------------------------------------------------------------------

def truncate(text: Optional[str], limit: int) -> str:
    """Cut text longer than `limit` characters, ending it with '...'."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return f"{text[:max(0, limit - 3)]}..."


def connector_polyline(
    parent_pos: Tuple[float, float],
    parent_size: Tuple[float, float],
    child_pos: Tuple[float, float],
    child_size: Tuple[float, float],
) -> List[Tuple[float, float]]:
    """
    Orthogonal connector from the bottom-center of the parent card to the
    top-center of the child card.

    Returns the four corner points of the three segments: vertical drop,
    horizontal run halfway between the cards, vertical drop into the child.
    """
    px = parent_pos[0] + parent_size[0] / 2
    parent_bottom = parent_pos[1] + parent_size[1]
    cx = child_pos[0] + child_size[0] / 2
    child_top = child_pos[1]
    mid_y = (parent_bottom + child_top) / 2
    return [(px, parent_bottom), (px, mid_y), (cx, mid_y), (cx, child_top)]


def grid_lines(
    bounds: Tuple[float, float, float, float],
    pitch: float = GRID_PITCH,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    World coordinates of the grid lines covering the given bounds.

    Args:
        bounds: (x_min, x_max, y_min, y_max) in world units.
        pitch: Distance between lines in world units.

    Returns:
        (xs, ys): x positions of vertical lines and y positions of horizontal lines.
    """
    if pitch <= 0:
        return np.empty(0), np.empty(0)
    x_min, x_max, y_min, y_max = bounds
    xs = np.arange(math.floor(x_min / pitch) * pitch, x_max + pitch, pitch)
    ys = np.arange(math.floor(y_min / pitch) * pitch, y_max + pitch, pitch)
    return xs, ys


def visible_world_bounds(width: float, height: float, viewport: ViewportState) -> Tuple[float, float, float, float]:
    top_left = to_world(Point(0.0, 0.0), viewport)
    bottom_right = to_world(Point(width, height), viewport)
    return top_left.x, bottom_right.x, top_left.y, bottom_right.y


def _font(pixel_size: int, weight: QFont.Weight = QFont.Weight.Normal) -> QFont:
    font = QFont()
    font.setPixelSize(pixel_size)
    font.setWeight(weight)
    return font


# -------------------------------------------------------------------------------
# Renderer
# -------------------------------------------------------------------------------

class ChartRenderer:
    def paint(
        self,
        painter: QPainter,
        width: float,
        height: float,
        nodes: Sequence[LayoutNode],
        position_of: PositionLookup,
        viewport: ViewportState,
        selected_id: Optional[int] = None,
        dragged_id: Optional[int] = None,
    ) -> None:
        painter.save()
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(QRectF(0, 0, width, height), QColor(BACKGROUND_COLOR))

        painter.translate(viewport.offset_x, viewport.offset_y)
        painter.scale(viewport.scale, viewport.scale)

        self._draw_grid(painter, visible_world_bounds(width, height, viewport))
        self._draw_connectors(painter, nodes, position_of)

        dragged: Optional[LayoutNode] = None
        for node in iter_nodes(nodes):
            if node.id == dragged_id:
                dragged = node
                continue
            self._draw_card(painter, node, position_of(node), node.id == selected_id, False)
        # The dragged card floats above everything else
        if dragged is not None:
            self._draw_card(painter, dragged, position_of(dragged), dragged.id == selected_id, True)

        painter.restore()

    def paint_placeholder(self, painter: QPainter, width: float, height: float, title: str, subtitle: str) -> None:
        """Empty state shown instead of the canvas."""
        painter.save()
        painter.fillRect(QRectF(0, 0, width, height), QColor(BACKGROUND_COLOR))

        painter.setPen(QPen(QColor(TEXT_MUTED)))
        painter.setFont(_font(18, QFont.Weight.Medium))
        painter.drawText(QRectF(0, 0, width, height / 2 + 12), Qt.AlignHCenter | Qt.AlignBottom, title)
        painter.setFont(_font(13))
        painter.drawText(QRectF(0, height / 2 + 20, width, 24), Qt.AlignHCenter | Qt.AlignTop, subtitle)
        painter.restore()

    # ---- layers ----

    @staticmethod
    def _draw_grid(painter: QPainter, bounds: Tuple[float, float, float, float]) -> None:
        xs, ys = grid_lines(bounds)
        x_min, x_max, y_min, y_max = bounds

        pen = QPen(QColor(GRID_COLOR))
        pen.setCosmetic(True)
        pen.setWidthF(1.0)
        painter.setPen(pen)

        lines = [QLineF(float(x), y_min, float(x), y_max) for x in xs]
        lines.extend(QLineF(x_min, float(y), x_max, float(y)) for y in ys)
        if lines:
            painter.drawLines(lines)

    @staticmethod
    def _draw_connectors(painter: QPainter, nodes: Sequence[LayoutNode], position_of: PositionLookup) -> None:
        pen = QPen(QColor(CONNECTOR_COLOR))
        pen.setWidthF(2.0)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)

        for parent, child in iter_edges(nodes):
            points = connector_polyline(
                position_of(parent), (parent.width, parent.height),
                position_of(child), (child.width, child.height),
            )
            painter.drawPolyline(QPolygonF([QPointF(x, y) for x, y in points]))

    def _draw_card(
        self,
        painter: QPainter,
        node: LayoutNode,
        position: Tuple[float, float],
        selected: bool,
        dragged: bool,
    ) -> None:
        unit = node.unit
        x, y = position
        w, h = node.width, node.height
        unit_color = QColor(unit.color)

        # --- body ---
        body = QRectF(x, y, w, h)
        if dragged:
            border = QPen(QColor(DRAG_OUTLINE))
            border.setWidthF(2.0)
            border.setStyle(Qt.DashLine)
        elif selected:
            border = QPen(unit_color)
            border.setWidthF(3.0)
        else:
            border = QPen(QColor(CARD_BORDER))
            border.setWidthF(1.0)
        painter.setPen(border)
        painter.setBrush(QBrush(QColor(CARD_FILL)))
        painter.drawRoundedRect(body, CORNER_RADIUS, CORNER_RADIUS)

        # --- header (rounded on top only) ---
        header = QPainterPath()
        header.addRoundedRect(QRectF(x, y, w, HEADER_HEIGHT), CORNER_RADIUS, CORNER_RADIUS)
        header.addRect(QRectF(x, y + HEADER_HEIGHT / 2, w, HEADER_HEIGHT / 2))
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(unit_color))
        painter.drawPath(header.simplified())

        # icon
        icon = QColor("white")
        icon.setAlphaF(0.9)
        painter.setBrush(QBrush(icon))
        painter.drawEllipse(QPointF(x + 16, y + 16), 8, 8)

        # type badge
        badge = QColor("white")
        badge.setAlphaF(0.2)
        badge_rect = QRectF(x + w - 80, y + 6, 70, 20)
        painter.setBrush(QBrush(badge))
        painter.drawRoundedRect(badge_rect, 10, 10)

        painter.setPen(QPen(QColor("white")))
        painter.setFont(_font(10))
        painter.drawText(badge_rect, Qt.AlignCenter, unit.type_label)

        painter.setFont(_font(14, QFont.Weight.DemiBold))
        painter.drawText(QPointF(x + 32, y + 21), truncate(unit.name, NAME_LIMIT))

        # --- details ---
        painter.setPen(QPen(QColor(TEXT_MUTED)))
        painter.setFont(_font(12, QFont.Weight.Medium))
        painter.drawText(QPointF(x + 12, y + 50), unit.code)

        if unit.manager_name:
            painter.setPen(QPen(QColor(TEXT_DARK)))
            painter.setFont(_font(11))
            painter.drawText(QPointF(x + 12, y + 68), truncate(unit.manager_name, MANAGER_LIMIT))

        painter.setPen(QPen(QColor(TEXT_MUTED)))
        painter.setFont(_font(11))
        painter.drawText(QPointF(x + 12, y + 86), f"{unit.employee_count} zaposlenih")

        if unit.phone:
            painter.setFont(_font(10))
            painter.drawText(QPointF(x + 12, y + 104), f"Tel: {truncate(unit.phone, PHONE_LIMIT)}")

        if dragged:
            self._draw_drag_handle(painter, x + w - 22, y + h - 26)

    @staticmethod
    def _draw_drag_handle(painter: QPainter, left: float, top: float) -> None:
        """Two columns of three dots."""
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(DRAG_OUTLINE)))
        for col in range(2):
            for row in range(3):
                painter.drawEllipse(QPointF(left + 4 + col * 6, top + 4 + row * 6), 1.5, 1.5)
