import math


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value into [lo, hi]. NaN collapses to lo."""
    if math.isnan(value):
        return lo
    return max(lo, min(hi, value))


def clamp_to_range(value: float, bounds: tuple[float, float]) -> float:
    """Clamp value into a (min, max) domain tuple from config."""
    return clamp(value, bounds[0], bounds[1])
