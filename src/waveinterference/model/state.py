"""
Scene State (Source Store)
==========================
This module defines the central data structure for the running visualization.

Why is this file needed?
------------------------
1. State Management: It holds the wave sources, the global parameters and the
   canvas bounds in one place.
2. Decoupling: Controls and the drag controller write to this object; the
   frame driver only reads a snapshot of it.
3. Capacity: It enforces the fixed source cap so the kernel's per-source
   arrays can never overflow.

Classes:
    SceneState: The mutable source store.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Optional

from waveinterference import config
from waveinterference.model.sources import FrameSnapshot, GlobalParameters, WaveSource
from waveinterference.utils import clamp_to_range

logger = logging.getLogger(__name__)


@dataclass
class SceneState:
    """
    Holds every source plus the global parameters.
    Pass this instance to the frame driver, the drag controller and the panels.
    """
    width: int = config.DEFAULT_CANVAS_SIZE[0]
    height: int = config.DEFAULT_CANVAS_SIZE[1]

    sources: list[WaveSource] = field(default_factory=list)
    params: GlobalParameters = field(default_factory=GlobalParameters)

    _ids: itertools.count = field(default_factory=itertools.count, init=False, repr=False)

    def __post_init__(self) -> None:
        self.width = max(int(self.width), 1)
        self.height = max(int(self.height), 1)

    @classmethod
    def with_defaults(cls, width: int = config.DEFAULT_CANVAS_SIZE[0],
                      height: int = config.DEFAULT_CANVAS_SIZE[1]) -> SceneState:
        state = cls(width=width, height=height)
        state._add_default_sources()
        return state

    # --- SOURCES ---

    @property
    def is_full(self) -> bool:
        return len(self.sources) >= config.MAX_SOURCES

    def add_source(
        self,
        x: float,
        y: float,
        wavelength: float = config.DEFAULT_WAVELENGTH,
        frequency: float = config.DEFAULT_FREQUENCY,
    ) -> Optional[WaveSource]:
        """
        Append a new source. Returns None (and changes nothing) when the
        store already holds MAX_SOURCES sources.
        """
        if self.is_full:
            logger.warning(f"Source limit of {config.MAX_SOURCES} reached, ignoring add.")
            return None

        source = WaveSource(
            id=next(self._ids),
            x=0.0,
            y=0.0,
            wavelength=wavelength,
            frequency=frequency,
            color=self._free_color(),
        )
        source.move_to(x, y, self.width, self.height)
        self.sources.append(source)
        logger.debug(f"Added source {source.id} at ({source.x:.1f}, {source.y:.1f})")
        return source

    def remove_source(self, source_id: int) -> bool:
        for i, src in enumerate(self.sources):
            if src.id == source_id:
                del self.sources[i]
                logger.debug(f"Removed source {source_id}")
                return True
        return False

    def get(self, source_id: int) -> Optional[WaveSource]:
        for src in self.sources:
            if src.id == source_id:
                return src
        return None

    def move_source(self, source_id: int, x: float, y: float) -> None:
        self._require(source_id).move_to(x, y, self.width, self.height)

    def set_wavelength(self, source_id: int, wavelength: float) -> None:
        self._require(source_id).wavelength = clamp_to_range(float(wavelength), config.WAVELENGTH_RANGE)

    def set_frequency(self, source_id: int, frequency: float) -> None:
        self._require(source_id).frequency = clamp_to_range(float(frequency), config.FREQUENCY_RANGE)

    # --- GLOBAL PARAMETERS ---

    def set_amplitude(self, amplitude: float) -> None:
        self.params = GlobalParameters(amplitude, self.params.decay_factor, self.params.dot_density)

    def set_decay_factor(self, decay: float) -> None:
        self.params.decay_factor = clamp_to_range(float(decay), config.DECAY_RANGE)

    def set_dot_density(self, density: float) -> None:
        self.params.dot_density = clamp_to_range(float(density), config.DOT_DENSITY_RANGE)

    # --- CANVAS ---

    def resize(self, width: int, height: int, rescale: bool = False) -> None:
        """
        Update canvas bounds and pull every source back inside them.
        With rescale=True positions keep their relative place on the canvas.
        """
        new_w = max(int(width), 1)
        new_h = max(int(height), 1)
        sx = new_w / self.width if rescale else 1.0
        sy = new_h / self.height if rescale else 1.0
        self.width, self.height = new_w, new_h
        for src in self.sources:
            src.move_to(src.x * sx, src.y * sy, self.width, self.height)

    def snapshot(self) -> FrameSnapshot:
        return FrameSnapshot.from_sources(self.sources, self.params)

    def reset(self) -> None:
        """Restore the two default sources and default parameters."""
        self.sources = []
        self.params = GlobalParameters()
        self._add_default_sources()
        logger.info("Scene state has been reset.")

    # --- INTERNALS ---

    def _add_default_sources(self) -> None:
        for fx, fy in config.DEFAULT_SOURCE_POSITIONS:
            self.add_source(fx * self.width, fy * self.height)

    def _free_color(self) -> str:
        used = {s.color for s in self.sources}
        for color in config.SOURCE_PALETTE:
            if color not in used:
                return color
        # Unreachable while len(SOURCE_PALETTE) >= MAX_SOURCES
        return config.SOURCE_PALETTE[len(self.sources) % len(config.SOURCE_PALETTE)]

    def _require(self, source_id: int) -> WaveSource:
        src = self.get(source_id)
        if src is None:
            raise KeyError(f"Source with id '{source_id}' not found.")
        return src
