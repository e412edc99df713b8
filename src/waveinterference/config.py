"""
Configuration & Global Constants
================================
This module serves as the central registry for parameter domains, defaults
and rendering constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (slider ranges, hit radii, the
   source cap) scattered throughout the model, kernel and view.
2. Consistency: The kernel, the store and the sliders all clamp against the
   same domains.

Exports:
    MAX_SOURCES (int): Hard cap on simultaneous wave sources.
    WAVELENGTH_RANGE, FREQUENCY_RANGE, DECAY_RANGE, DOT_DENSITY_RANGE: Domains.
    SOURCE_RADIUS, HIT_RADIUS (float): Overlay marker and pick radius in px.
"""
from __future__ import annotations

# Capacity of the per-source arrays handed to the kernel
MAX_SOURCES: int = 8

# Distance floor used by the field evaluator (pixels)
MIN_DISTANCE: float = 0.001

# Parameter domains (min, max)
WAVELENGTH_RANGE: tuple[float, float] = (10.0, 150.0)
FREQUENCY_RANGE: tuple[float, float] = (0.1, 2.0)
DECAY_RANGE: tuple[float, float] = (0.0, 2.0)
DOT_DENSITY_RANGE: tuple[float, float] = (0.1, 3.0)

# Smallest amplitude accepted by the store, keeps the normalisation finite
MIN_AMPLITUDE: float = 1e-6

# Defaults
DEFAULT_WAVELENGTH: float = 60.0
DEFAULT_FREQUENCY: float = 1.0
DEFAULT_AMPLITUDE: float = 1.0
DEFAULT_DECAY: float = 0.0
DEFAULT_DOT_DENSITY: float = 1.0

# Default source positions as fractions of the canvas size
DEFAULT_SOURCE_POSITIONS: tuple[tuple[float, float], ...] = (
    (0.3, 0.5),
    (0.7, 0.5),
)

# One display colour per slot, so colours stay unique up to the cap
SOURCE_PALETTE: tuple[str, ...] = (
    "#FF5A5F",
    "#3FA7FF",
    "#7CD65A",
    "#FFC43D",
    "#B47CFF",
    "#2EC4B6",
    "#FF8C42",
    "#F15BB5",
)

# Overlay / interaction
SOURCE_RADIUS: float = 10.0
HIT_RADIUS: float = 2.5 * SOURCE_RADIUS
DRAG_RING_COLOR: str = "#FFFFFF"

# Canvas & frame loop
DEFAULT_CANVAS_SIZE: tuple[int, int] = (1000, 400)
FRAME_INTERVAL_MS: int = 16
PROFILE_REFRESH_MS: int = 100
FPS_WINDOW: int = 60

# Buffer values
LIT_VALUE: int = 255
UNLIT_VALUE: int = 0
