"""
Rendering Surface
=================
Owns the output buffer and dispatches the numba kernels for each frame.

Why is this file needed?
------------------------
1. Initialization: The kernels are JIT-compiled on first use. Doing that
   eagerly in `initialize()` turns a compile failure into one clear,
   reportable error instead of a crash in the middle of the frame loop.
2. Buffer ownership: It keeps a reusable uint8 buffer sized to the canvas.

Classes:
    FieldRenderer: `initialize()`, `resize()`, `render()`, `field()`.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Optional

import numba as nb
import numpy as np

from waveinterference import config
from waveinterference.exceptions import RendererInitError
from waveinterference.kernel.dither import dither_frame
from waveinterference.kernel.field import field_grid, field_line
from waveinterference.model.sources import FrameSnapshot

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class FieldRenderer:
    def __init__(self, width: int = config.DEFAULT_CANVAS_SIZE[0],
                 height: int = config.DEFAULT_CANVAS_SIZE[1],
                 threads: Optional[int] = None) -> None:
        self.width: int = max(int(width), 1)
        self.height: int = max(int(height), 1)
        self.threads = threads
        self.is_ready: bool = False
        self._buffer: npt.NDArray[np.uint8] = np.zeros((self.height, self.width), dtype=np.uint8)

    def initialize(self) -> None:
        """
        Compile and warm up the kernels on a tiny surface.

        Raises:
            RendererInitError: if numba cannot compile the kernels or the
                thread count is invalid.
        """
        start = time.perf_counter()
        try:
            if self.threads is not None:
                nb.set_num_threads(int(self.threads))

            probe = np.zeros((2, 2), dtype=np.uint8)
            snap = FrameSnapshot.empty()
            dither_frame(probe, 0.0, 0, snap.xs, snap.ys, snap.wavenumbers,
                         snap.angular_frequencies, snap.amplitude, snap.decay_factor, snap.dot_density)
            field_line(np.zeros(1), 0.0, 0.0, 0, snap.xs, snap.ys, snap.wavenumbers,
                       snap.angular_frequencies, snap.amplitude, snap.decay_factor)
        except Exception as e:
            self.is_ready = False
            logger.exception("Kernel initialization failed")
            raise RendererInitError(f"Could not initialize the rendering kernel: {e}") from e

        self.is_ready = True
        logger.info(
            f"Renderer ready in {time.perf_counter() - start:.2f} s "
            f"({nb.get_num_threads()} threads, {self.width}x{self.height})"
        )

    def resize(self, width: int, height: int) -> None:
        """Reallocate the output buffer for a new canvas size (min 1x1)."""
        width = max(int(width), 1)
        height = max(int(height), 1)
        if (width, height) == (self.width, self.height):
            return
        self.width, self.height = width, height
        self._buffer = np.zeros((height, width), dtype=np.uint8)
        logger.debug(f"Renderer resized to {width}x{height}")

    def render(self, t: float, snapshot: FrameSnapshot) -> npt.NDArray[np.uint8]:
        """
        Render one frame.

        Args:
            t: Seconds since the first frame.
            snapshot: Sources and parameters for this frame.

        Returns:
            The (height, width) uint8 buffer: LIT_VALUE or UNLIT_VALUE per pixel.
            The same array object is reused on the next call.
        """
        self._require_ready()
        dither_frame(
            self._buffer,
            float(t),
            snapshot.count,
            snapshot.xs,
            snapshot.ys,
            snapshot.wavenumbers,
            snapshot.angular_frequencies,
            snapshot.amplitude,
            snapshot.decay_factor,
            snapshot.dot_density,
        )
        return self._buffer

    def field(self, t: float, snapshot: FrameSnapshot) -> npt.NDArray[np.float64]:
        """Continuous field values for the whole canvas (no dithering)."""
        self._require_ready()
        return field_grid(
            self.width, self.height, float(t), snapshot.count,
            snapshot.xs, snapshot.ys, snapshot.wavenumbers, snapshot.angular_frequencies,
            snapshot.amplitude, snapshot.decay_factor,
        )

    def profile(self, t: float, snapshot: FrameSnapshot, y: float,
                samples: int = 400) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Field along the horizontal line y. Returns (x positions, values)."""
        self._require_ready()
        line_xs = np.linspace(0.0, float(self.width), max(int(samples), 2))
        values = field_line(
            line_xs, float(y), float(t), snapshot.count,
            snapshot.xs, snapshot.ys, snapshot.wavenumbers, snapshot.angular_frequencies,
            snapshot.amplitude, snapshot.decay_factor,
        )
        return line_xs, values

    def _require_ready(self) -> None:
        if not self.is_ready:
            raise RendererInitError("Renderer used before initialize() succeeded.")
