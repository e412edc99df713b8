# field.py
from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt
import numba as nb

from waveinterference.config import MIN_DISTANCE

# ---- JIT’d wave superposition kernels (scalar + batched) ----

@nb.njit(cache=True, fastmath=True)
def source_amplitude(dist: float, amplitude: float, decay: float) -> float:
    """
    Distance-attenuated amplitude of a single source.

    Args:
        dist:      Distance from the source in px (already floored).
        amplitude: Base amplitude.
        decay:     Inverse-power exponent; 0 disables attenuation.
    """
    if decay > 0.0:
        return amplitude / dist ** decay
    return amplitude


@nb.njit(cache=True, fastmath=True)
def field_value(
    px: float,
    py: float,
    t: float,
    count: int,
    xs: npt.NDArray[np.float64],
    ys: npt.NDArray[np.float64],
    ks: npt.NDArray[np.float64],
    omegas: npt.NDArray[np.float64],
    amplitude: float,
    decay: float,
) -> float:
    """
    Superposed wave value at (px, py) and time t.

        total = sum_i A_i(d_i) * cos(k_i * d_i - w_i * t)

    Args:
        px, py:    Evaluation point in canvas pixels.
        t:         Seconds since the first frame.
        count:     Number of active entries in the per-source arrays.
        xs, ys:    Source positions, shape (MAX_SOURCES,).
        ks:        Wavenumbers 2π/λ, shape (MAX_SOURCES,).
        omegas:    Angular frequencies 2πf, shape (MAX_SOURCES,).
        amplitude: Base amplitude per source.
        decay:     Distance decay exponent (negative values act as 0).

    Returns:
        Signed scalar in roughly [-count*amplitude, count*amplitude] when decay is 0.
    """
    total = 0.0
    for i in range(count):
        dx = px - xs[i]
        dy = py - ys[i]
        dist = math.sqrt(dx * dx + dy * dy)
        if dist < MIN_DISTANCE:
            dist = MIN_DISTANCE
        total += source_amplitude(dist, amplitude, decay) * math.cos(ks[i] * dist - omegas[i] * t)
    return total


@nb.njit(cache=True, fastmath=True, parallel=True)
def field_grid(
    width: int,
    height: int,
    t: float,
    count: int,
    xs: npt.NDArray[np.float64],
    ys: npt.NDArray[np.float64],
    ks: npt.NDArray[np.float64],
    omegas: npt.NDArray[np.float64],
    amplitude: float,
    decay: float,
) -> npt.NDArray[np.float64]:
    """
    Field value for every pixel, shape (height, width). Rows run in parallel.
    Pixel (row, col) is sampled at canvas coordinate (col, row).
    """
    out = np.empty((height, width), np.float64)
    for row in nb.prange(height):
        for col in range(width):
            out[row, col] = field_value(
                float(col), float(row), t, count, xs, ys, ks, omegas, amplitude, decay
            )
    return out


@nb.njit(cache=True, fastmath=True)
def field_line(
    line_xs: npt.NDArray[np.float64],
    y: float,
    t: float,
    count: int,
    xs: npt.NDArray[np.float64],
    ys: npt.NDArray[np.float64],
    ks: npt.NDArray[np.float64],
    omegas: npt.NDArray[np.float64],
    amplitude: float,
    decay: float,
) -> npt.NDArray[np.float64]:
    """Field value along the horizontal line y, sampled at line_xs."""
    n = line_xs.size
    out = np.empty(n, np.float64)
    for i in range(n):
        out[i] = field_value(line_xs[i], y, t, count, xs, ys, ks, omegas, amplitude, decay)
    return out
