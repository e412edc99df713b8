"""
Frame Driver
============
Advances simulation time on every display tick and renders a fresh frame.

Why is this file needed?
------------------------
1. Timing: `t` is derived from a monotonic clock, so frames stay correct
   even when ticks arrive late or irregularly.
2. Cancellation: The loop is an explicit QTimer with `start()` / `stop()`,
   so tearing down the window cannot leak a recurring callback.
3. Signals: Rendered buffers and failures reach the GUI via Qt Signals.

Classes:
    FrameDriver: The cancellable render loop.
    FrameStats: Rolling frame-time average.
"""
from __future__ import annotations

import collections
import logging
import time
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from waveinterference import config
from waveinterference.kernel.renderer import FieldRenderer
from waveinterference.model.state import SceneState

logger = logging.getLogger(__name__)


class FrameStats:
    """Rolling average of the last `window` frame render times."""

    def __init__(self, window: int = config.FPS_WINDOW) -> None:
        self._samples: collections.deque[float] = collections.deque(maxlen=window)

    def add(self, seconds: float) -> None:
        self._samples.append(seconds)

    @property
    def mean_frame_time(self) -> float:
        if not self._samples:
            return 0.0
        return sum(self._samples) / len(self._samples)

    @property
    def fps(self) -> float:
        mean = self.mean_frame_time
        return 1.0 / mean if mean > 0 else 0.0

    def clear(self) -> None:
        self._samples.clear()


class FrameDriver(QObject):
    # Signals to update the UI: (buffer, t)
    frame_ready = Signal(object, float)
    error_occurred = Signal(str)
    running_changed = Signal(bool)

    def __init__(
        self,
        state: SceneState,
        renderer: FieldRenderer,
        interval_ms: int = config.FRAME_INTERVAL_MS,
        clock: Callable[[], float] = time.perf_counter,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.state = state
        self.renderer = renderer
        self._clock = clock
        self._start_time: Optional[float] = None
        self._last_t: float = 0.0
        self._frames: int = 0
        self.stats = FrameStats()

        self.timer = QTimer(self)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self.tick)

    @property
    def is_running(self) -> bool:
        return self.timer.isActive()

    @property
    def elapsed(self) -> float:
        """Simulation time of the most recent frame (s)."""
        return self._last_t

    def start(self) -> None:
        if self.is_running:
            return
        # Resume from the last frame time instead of jumping back to 0
        self._start_time = self._clock() - self._last_t
        self.stats.clear()
        self.timer.start()
        logger.info("Frame loop started.")
        self.running_changed.emit(True)

    def stop(self) -> None:
        if not self.is_running:
            return
        self.timer.stop()
        logger.info(f"Frame loop stopped at t={self._last_t:.2f} s.")
        self.running_changed.emit(False)

    def restart_clock(self) -> None:
        """Reset simulation time to 0 on the next frame."""
        self._last_t = 0.0
        self._start_time = self._clock()

    def tick(self) -> None:
        """Render one frame from the current time and a fresh scene snapshot."""
        if self._start_time is None:
            self._start_time = self._clock()
        self._render(self._clock() - self._start_time)

    def render_still(self) -> None:
        """
        Re-render the scene at the paused time so edits show up without
        advancing the animation. Does nothing while the loop is running.
        """
        if self.is_running:
            return
        self._render(self._last_t)

    def _render(self, t: float) -> None:
        try:
            snapshot = self.state.snapshot()

            if (self.renderer.width, self.renderer.height) != (self.state.width, self.state.height):
                self.renderer.resize(self.state.width, self.state.height)

            frame_start = time.perf_counter()
            buffer = self.renderer.render(t, snapshot)
            self.stats.add(time.perf_counter() - frame_start)
        except Exception as e:
            logger.exception("Frame rendering failed, stopping frame loop")
            self.stop()
            self.error_occurred.emit(str(e))
            return

        self._last_t = t
        self._frames += 1
        if self._frames % config.FPS_WINDOW == 0:
            logger.debug(f"t={t:.2f} s, {self.stats.fps:.1f} fps ({self.stats.mean_frame_time * 1000:.1f} ms/frame)")
        self.frame_ready.emit(buffer, t)
