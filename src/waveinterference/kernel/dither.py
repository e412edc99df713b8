# dither.py
from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt
import numba as nb

from waveinterference.config import LIT_VALUE, UNLIT_VALUE
from waveinterference.kernel.field import field_value

# Hash constants (classic fract(sin(dot(p, k)) * C) shader noise)
_HASH_KX = 12.9898
_HASH_KY = 78.233
_HASH_KT = 37.719
_HASH_SCALE = 43758.5453


@nb.njit(cache=True)
def hash_noise(px: float, py: float, t: float) -> float:
    """
    Deterministic pseudo-random value in [0, 1) for a pixel and frame time.
    Not cryptographic; only needs to look decorrelated between neighbours.
    """
    v = math.sin(px * _HASH_KX + py * _HASH_KY + t * _HASH_KT) * _HASH_SCALE
    r = v - math.floor(v)
    # floor() rounding can land exactly on 1.0 for tiny negative v
    if r >= 1.0:
        r = 0.0
    return r


@nb.njit(cache=True, fastmath=True)
def lit_probability(total: float, count: int, amplitude: float, dot_density: float) -> float:
    """
    Map a field value to the probability that its pixel is lit.

    Args:
        total:       Field value from field_value().
        count:       Number of sources contributing.
        amplitude:   Base amplitude per source.
        dot_density: Brightness multiplier applied after normalisation.

    Returns:
        Probability in [0, 1]; always 0 when there are no sources.
    """
    if count <= 0 or amplitude <= 0.0:
        return 0.0
    max_amplitude = count * amplitude
    normalized = (total + max_amplitude) / (2.0 * max_amplitude)
    normalized = min(max(normalized, 0.0), 1.0)
    return min(max(normalized * dot_density, 0.0), 1.0)


@nb.njit(cache=True)
def is_lit(px: float, py: float, t: float, probability: float) -> bool:
    return hash_noise(px, py, t) < probability


@nb.njit(cache=True, parallel=True)
def dither_frame(
    out: npt.NDArray[np.uint8],
    t: float,
    count: int,
    xs: npt.NDArray[np.float64],
    ys: npt.NDArray[np.float64],
    ks: npt.NDArray[np.float64],
    omegas: npt.NDArray[np.float64],
    amplitude: float,
    decay: float,
    dot_density: float,
) -> None:
    """
    Fill `out` (shape (height, width)) with LIT_VALUE / UNLIT_VALUE.

    Runs field evaluation and dithering fused per pixel; rows are split
    across numba's worker threads. The buffer is modified in-place.
    """
    height, width = out.shape
    for row in nb.prange(height):
        py = float(row)
        for col in range(width):
            px = float(col)
            total = field_value(px, py, t, count, xs, ys, ks, omegas, amplitude, decay)
            p = lit_probability(total, count, amplitude, dot_density)
            if hash_noise(px, py, t) < p:
                out[row, col] = LIT_VALUE
            else:
                out[row, col] = UNLIT_VALUE
