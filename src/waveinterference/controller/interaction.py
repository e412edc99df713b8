"""
Drag Interaction
================
Hit-testing and dragging of wave sources from pointer or touch input.

Positions arriving here are already in canvas backing coordinates; the
canvas widget is responsible for converting from widget coordinates.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from waveinterference import config
from waveinterference.model.state import SceneState

logger = logging.getLogger(__name__)


class DragController:
    """Moves at most one source at a time in a SceneState."""

    def __init__(self, state: SceneState, hit_radius: float = config.HIT_RADIUS) -> None:
        self.state = state
        self.hit_radius = hit_radius
        self._dragged_id: Optional[int] = None
        self._offset: tuple[float, float] = (0.0, 0.0)

    @property
    def dragged_id(self) -> Optional[int]:
        return self._dragged_id

    @property
    def is_dragging(self) -> bool:
        return self._dragged_id is not None

    def hit_test(self, x: float, y: float) -> Optional[int]:
        """Id of the topmost source within hit_radius of (x, y), if any."""
        # Last listed is drawn on top, so it wins overlaps
        for src in reversed(self.state.sources):
            if src.distance_to(x, y) <= self.hit_radius:
                return src.id
        return None

    # --- POINTER ---

    def pointer_down(self, x: float, y: float) -> bool:
        """Start dragging the source under the pointer. Returns True on a hit."""
        hit = self.hit_test(x, y)
        if hit is None:
            return False
        src = self.state.get(hit)
        self._dragged_id = hit
        self._offset = (x - src.x, y - src.y)
        logger.debug(f"Picked up source {hit}")
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        """Move the dragged source with the pointer. Returns True if a source moved."""
        if self._dragged_id is None:
            return False
        if self.state.get(self._dragged_id) is None:
            # Source was removed mid-drag
            self.pointer_up()
            return False
        ox, oy = self._offset
        self.state.move_source(self._dragged_id, x - ox, y - oy)
        return True

    def pointer_up(self) -> None:
        if self._dragged_id is not None:
            logger.debug(f"Released source {self._dragged_id}")
        self._dragged_id = None
        self._offset = (0.0, 0.0)

    # --- TOUCH (first point only) ---

    def touch_start(self, points: Sequence[tuple[float, float]]) -> bool:
        if not points:
            return False
        return self.pointer_down(*points[0])

    def touch_move(self, points: Sequence[tuple[float, float]]) -> bool:
        if not points:
            return False
        return self.pointer_move(*points[0])

    def touch_end(self) -> None:
        self.pointer_up()

    def touch_cancel(self) -> None:
        self.pointer_up()
