"""
Viewport Controller
===================
Owns the pan offset and zoom scale of the chart.

States:
    IDLE    - nothing in progress
    PANNING - the background is being dragged

Zooming is a plain state change and has no mode of its own. The wheel is only
consumed while the pointer is inside the chart (claimed on enter, released on
leave), so scrolling the surrounding page keeps working everywhere else.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from orgchart.config import (
    MIN_SCALE, MAX_SCALE, ZOOM_STEP, WHEEL_ZOOM_IN, WHEEL_ZOOM_OUT, FIT_PADDING
)
from orgchart.controller.transform import Point

logger = logging.getLogger(__name__)


class ViewportMode(Enum):
    IDLE = "idle"
    PANNING = "panning"


@dataclass
class ViewportState:
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def offset(self) -> Point:
        return Point(self.offset_x, self.offset_y)

    @property
    def zoom_percent(self) -> int:
        return round(self.scale * 100)


@dataclass(frozen=True)
class _PanAnchor:
    pointer: Point
    offset: Point


class ViewportController:
    def __init__(self, min_scale: float = MIN_SCALE, max_scale: float = MAX_SCALE) -> None:
        if min_scale <= 0 or min_scale > max_scale:
            raise ValueError(f"Invalid scale bounds [{min_scale}, {max_scale}].")
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.state = ViewportState()
        self._anchor: Optional[_PanAnchor] = None
        self._wheel_claimed: bool = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def mode(self) -> ViewportMode:
        return ViewportMode.PANNING if self._anchor is not None else ViewportMode.IDLE

    @property
    def is_panning(self) -> bool:
        return self._anchor is not None

    @property
    def wheel_claimed(self) -> bool:
        return self._wheel_claimed

    def clamp_scale(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, scale))

    # ------------------------------------------------------------------
    # Panning (screen-linear, no division by scale)
    # ------------------------------------------------------------------

    def begin_pan(self, x: float, y: float) -> None:
        self._anchor = _PanAnchor(pointer=Point(x, y), offset=self.state.offset)

    def pan_to(self, x: float, y: float) -> bool:
        """Move the offset with the pointer. Returns False when not panning."""
        if self._anchor is None:
            return False
        new_offset = self._anchor.offset + (Point(x, y) - self._anchor.pointer)
        self.state.offset_x, self.state.offset_y = new_offset.as_tuple()
        return True

    def end_pan(self) -> bool:
        if self._anchor is None:
            return False
        self._anchor = None
        return True

    # ------------------------------------------------------------------
    # Zooming
    # ------------------------------------------------------------------

    def set_scale(self, scale: float) -> bool:
        """Apply a clamped scale. Returns True if the scale changed."""
        new_scale = self.clamp_scale(scale)
        if new_scale == self.state.scale:
            return False
        self.state.scale = new_scale
        return True

    def zoom_in(self) -> bool:
        return self.set_scale(self.state.scale * ZOOM_STEP)

    def zoom_out(self) -> bool:
        return self.set_scale(self.state.scale / ZOOM_STEP)

    def claim_wheel(self) -> None:
        self._wheel_claimed = True

    def release_wheel(self) -> None:
        self._wheel_claimed = False

    def wheel(self, delta_y: float) -> bool:
        """
        Zoom by one wheel notch.

        Args:
            delta_y: Scroll delta in page direction (> 0 scrolls down / zooms out).

        Returns:
            True if the gesture was consumed by the chart, False if it should be
            left to the surrounding page.
        """
        if not self._wheel_claimed:
            return False
        if delta_y > 0:
            self.set_scale(self.state.scale * WHEEL_ZOOM_OUT)
        elif delta_y < 0:
            self.set_scale(self.state.scale * WHEEL_ZOOM_IN)
        return True

    # ------------------------------------------------------------------
    # Reset / fit
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.state.scale = 1.0
        self.state.offset_x = 0.0
        self.state.offset_y = 0.0
        self._anchor = None

    def fit_to_container(
        self,
        container_width: float,
        container_height: float,
        diagram_width: float,
        diagram_height: float,
    ) -> bool:
        """
        Scale and center the diagram so it is fully visible with some margin.

        Degenerate sizes leave the current state untouched.

        Returns:
            True if the viewport was updated.
        """
        if min(container_width, container_height, diagram_width, diagram_height) <= 0:
            logger.debug(
                f"Fit skipped: container {container_width}x{container_height}, "
                f"diagram {diagram_width}x{diagram_height}."
            )
            return False

        fit = min(container_width / diagram_width, container_height / diagram_height, 1.0)
        scale = self.clamp_scale(fit * FIT_PADDING)

        self.state.scale = scale
        self.state.offset_x = (container_width - diagram_width * scale) / 2
        self.state.offset_y = (container_height - diagram_height * scale) / 2
        logger.debug(f"Fit to container: scale={scale:.3f}")
        return True
