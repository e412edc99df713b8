import math

import numpy as np
import pytest

from waveinterference.kernel.field import field_grid, field_line, field_value, source_amplitude
from waveinterference.model.sources import FrameSnapshot, GlobalParameters, WaveSource


def _eval(snap: FrameSnapshot, px: float, py: float, t: float, decay: float | None = None) -> float:
    return field_value(
        px, py, t, snap.count, snap.xs, snap.ys, snap.wavenumbers, snap.angular_frequencies,
        snap.amplitude, snap.decay_factor if decay is None else decay,
    )


def _single(x=0.0, y=0.0, wavelength=50.0, frequency=0.5, amplitude=1.0, decay=0.0) -> FrameSnapshot:
    src = WaveSource(id=0, x=x, y=y, wavelength=wavelength, frequency=frequency)
    return FrameSnapshot.from_sources([src], GlobalParameters(amplitude, decay, 1.0))


@pytest.mark.parametrize("px, py, t", [
    (10.0, 0.0, 0.0),
    (37.5, 12.25, 0.3),
    (123.0, 456.0, 2.75),
    (0.0, 80.0, 10.0),
])
def test_single_source_without_decay_is_plain_cosine(px, py, t):
    snap = _single(wavelength=50.0, frequency=0.5, amplitude=1.5)
    d = math.hypot(px, py)
    k = 2 * math.pi / 50.0
    w = 2 * math.pi * 0.5
    assert _eval(snap, px, py, t) == pytest.approx(1.5 * math.cos(k * d - w * t), abs=1e-9)


def test_decay_makes_amplitude_strictly_decrease_with_distance():
    # At t=0 and d = n * wavelength the cosine is 1, so the value is the envelope
    snap = _single(wavelength=100.0, frequency=1.0, decay=1.0)
    values = [_eval(snap, d, 0.0, 0.0) for d in (100.0, 200.0, 300.0, 400.0)]
    assert all(a > b for a, b in zip(values, values[1:]))
    assert values[0] == pytest.approx(1.0 / 100.0, rel=1e-9)

    envelope = [source_amplitude(d, 1.0, 0.5) for d in (1.0, 2.0, 10.0, 1000.0)]
    assert all(a > b for a, b in zip(envelope, envelope[1:]))


def test_zero_sources_give_zero_field():
    snap = FrameSnapshot.empty()
    for px, py, t in [(0.0, 0.0, 0.0), (500.0, 200.0, 3.3), (999.0, 399.0, 100.0)]:
        assert _eval(snap, px, py, t) == 0.0

    grid = field_grid(8, 4, 1.0, 0, snap.xs, snap.ys, snap.wavenumbers,
                      snap.angular_frequencies, 1.0, 0.0)
    assert np.all(grid == 0.0)


def test_midpoint_of_equal_sources_adds_constructively(two_source_scene):
    snap = two_source_scene.snapshot()
    k = 2 * math.pi / 100.0
    expected = 2 * 1.0 * math.cos(k * 200.0)
    assert _eval(snap, 500.0, 200.0, 0.0) == pytest.approx(expected, abs=1e-9)
    assert _eval(snap, 500.0, 200.0, 0.0) == pytest.approx(2.0, abs=1e-9)


def test_distance_below_floor_uses_floor():
    snap = _single(x=0.0, y=0.0, wavelength=100.0, frequency=1.0, decay=2.0)
    k = 2 * math.pi / 100.0
    expected = (1.0 / 0.001 ** 2) * math.cos(k * 0.001)
    value = _eval(snap, 0.0005, 0.0, 0.0)
    assert math.isfinite(value)
    assert value == pytest.approx(expected, rel=1e-9)

    # Exactly on the source is also finite and identical
    assert _eval(snap, 0.0, 0.0, 0.0) == pytest.approx(expected, rel=1e-9)


def test_negative_decay_acts_as_no_decay():
    snap = _single(wavelength=40.0, frequency=1.0)
    assert _eval(snap, 80.0, 0.0, 0.0, decay=-1.0) == pytest.approx(_eval(snap, 80.0, 0.0, 0.0, decay=0.0))


def test_identical_in_phase_sources_scale_linearly():
    sources = [WaveSource(id=i, x=100.0, y=100.0, wavelength=50.0, frequency=1.0) for i in range(3)]
    snap = FrameSnapshot.from_sources(sources, GlobalParameters())
    single = _single(x=100.0, y=100.0, wavelength=50.0, frequency=1.0)
    for px, py, t in [(130.0, 100.0, 0.0), (140.0, 120.0, 0.25)]:
        assert _eval(snap, px, py, t) == pytest.approx(3 * _eval(single, px, py, t), abs=1e-9)


def test_grid_matches_pointwise_evaluation(two_source_scene):
    snap = two_source_scene.snapshot()
    t = 0.37
    grid = field_grid(20, 10, t, snap.count, snap.xs, snap.ys, snap.wavenumbers,
                      snap.angular_frequencies, snap.amplitude, 0.5)
    assert grid.shape == (10, 20)
    for row, col in [(0, 0), (5, 7), (9, 19)]:
        assert grid[row, col] == pytest.approx(_eval(snap, float(col), float(row), t, decay=0.5), abs=1e-9)


def test_line_matches_pointwise_evaluation(two_source_scene):
    snap = two_source_scene.snapshot()
    xs = np.linspace(0.0, 1000.0, 11)
    values = field_line(xs, 200.0, 1.2, snap.count, snap.xs, snap.ys, snap.wavenumbers,
                        snap.angular_frequencies, snap.amplitude, snap.decay_factor)
    for x, v in zip(xs, values):
        assert v == pytest.approx(_eval(snap, x, 200.0, 1.2), abs=1e-9)
