"""
Wave Sources & Global Parameters
================================
Data classes describing what the renderer draws.

Classes:
    WaveSource: One point emitter (position, wavelength, frequency, colour).
    GlobalParameters: Amplitude, decay exponent and dot density.
    FrameSnapshot: Read-only, fixed-capacity arrays handed to the kernel.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np

from waveinterference import config
from waveinterference.utils import clamp, clamp_to_range

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass
class WaveSource:
    """A point emitting a cosine wave with its own wavelength and frequency."""
    id: int
    x: float
    y: float
    wavelength: float = config.DEFAULT_WAVELENGTH
    frequency: float = config.DEFAULT_FREQUENCY
    color: str = config.SOURCE_PALETTE[0]

    def __post_init__(self) -> None:
        self.wavelength = clamp_to_range(float(self.wavelength), config.WAVELENGTH_RANGE)
        self.frequency = clamp_to_range(float(self.frequency), config.FREQUENCY_RANGE)

    @property
    def wavenumber(self) -> float:
        """k = 2π / λ (rad/px)."""
        return 2.0 * math.pi / self.wavelength

    @property
    def angular_frequency(self) -> float:
        """ω = 2π f (rad/s)."""
        return 2.0 * math.pi * self.frequency

    def move_to(self, x: float, y: float, width: float, height: float) -> None:
        """Set the position, clamped to [0, width] x [0, height]."""
        self.x = clamp(float(x), 0.0, float(width))
        self.y = clamp(float(y), 0.0, float(height))

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(x - self.x, y - self.y)


@dataclass
class GlobalParameters:
    amplitude: float = config.DEFAULT_AMPLITUDE
    decay_factor: float = config.DEFAULT_DECAY
    dot_density: float = config.DEFAULT_DOT_DENSITY

    def __post_init__(self) -> None:
        amplitude = float(self.amplitude)
        if math.isnan(amplitude):
            amplitude = config.DEFAULT_AMPLITUDE
        self.amplitude = max(amplitude, config.MIN_AMPLITUDE)
        self.decay_factor = clamp_to_range(float(self.decay_factor), config.DECAY_RANGE)
        self.dot_density = clamp_to_range(float(self.dot_density), config.DOT_DENSITY_RANGE)


@dataclass(frozen=True)
class FrameSnapshot:
    """
    Effectively-immutable copy of the scene for one frame.

    The per-source arrays always have MAX_SOURCES entries; only the first
    `count` are meaningful. This keeps the kernel's memory access uniform.
    """
    count: int
    xs: npt.NDArray[np.float64]
    ys: npt.NDArray[np.float64]
    wavenumbers: npt.NDArray[np.float64]
    angular_frequencies: npt.NDArray[np.float64]
    amplitude: float = config.DEFAULT_AMPLITUDE
    decay_factor: float = config.DEFAULT_DECAY
    dot_density: float = config.DEFAULT_DOT_DENSITY

    @classmethod
    def from_sources(cls, sources: Sequence[WaveSource], params: GlobalParameters) -> FrameSnapshot:
        if len(sources) > config.MAX_SOURCES:
            raise ValueError(f"At most {config.MAX_SOURCES} sources fit in a frame, got {len(sources)}.")

        xs = np.zeros(config.MAX_SOURCES, dtype=np.float64)
        ys = np.zeros(config.MAX_SOURCES, dtype=np.float64)
        ks = np.zeros(config.MAX_SOURCES, dtype=np.float64)
        omegas = np.zeros(config.MAX_SOURCES, dtype=np.float64)
        for i, src in enumerate(sources):
            xs[i] = src.x
            ys[i] = src.y
            ks[i] = src.wavenumber
            omegas[i] = src.angular_frequency

        for arr in (xs, ys, ks, omegas):
            arr.flags.writeable = False

        return cls(
            count=len(sources),
            xs=xs,
            ys=ys,
            wavenumbers=ks,
            angular_frequencies=omegas,
            amplitude=params.amplitude,
            decay_factor=params.decay_factor,
            dot_density=params.dot_density,
        )

    @classmethod
    def empty(cls, params: GlobalParameters | None = None) -> FrameSnapshot:
        return cls.from_sources([], params or GlobalParameters())
