import numpy as np
import pytest

from waveinterference.config import LIT_VALUE, UNLIT_VALUE
from waveinterference.exceptions import RendererInitError, WaveInterferenceError
from waveinterference.kernel.renderer import FieldRenderer
from waveinterference.model.sources import FrameSnapshot
from waveinterference.model.state import SceneState


def test_render_before_initialize_raises():
    renderer = FieldRenderer(10, 10)
    with pytest.raises(RendererInitError):
        renderer.render(0.0, FrameSnapshot.empty())
    assert issubclass(RendererInitError, WaveInterferenceError)


def test_invalid_thread_count_is_an_init_error():
    renderer = FieldRenderer(10, 10, threads=0)
    with pytest.raises(RendererInitError):
        renderer.initialize()
    assert not renderer.is_ready


def test_render_shape_values_and_determinism(ready_renderer):
    state = SceneState.with_defaults(64, 32)
    ready_renderer.resize(64, 32)

    a = ready_renderer.render(0.8, state.snapshot()).copy()
    b = ready_renderer.render(0.8, state.snapshot()).copy()
    assert a.shape == (32, 64)
    assert a.dtype == np.uint8
    assert set(np.unique(a)) <= {LIT_VALUE, UNLIT_VALUE}
    np.testing.assert_array_equal(a, b)


def test_empty_scene_renders_black(ready_renderer):
    ready_renderer.resize(64, 32)
    frame = ready_renderer.render(3.0, FrameSnapshot.empty())
    assert not frame.any()


def test_resize_changes_buffer_and_clamps_to_one(ready_renderer):
    ready_renderer.resize(17, 9)
    assert ready_renderer.render(0.0, FrameSnapshot.empty()).shape == (9, 17)

    ready_renderer.resize(0, -4)
    assert (ready_renderer.width, ready_renderer.height) == (1, 1)
    assert ready_renderer.render(0.0, FrameSnapshot.empty()).shape == (1, 1)


def test_field_and_profile(ready_renderer, two_source_scene):
    ready_renderer.resize(1000, 400)
    snap = two_source_scene.snapshot()

    xs, values = ready_renderer.profile(0.0, snap, y=200.0, samples=1001)
    assert xs.shape == values.shape == (1001,)
    # x = 500 is the midpoint of the two sources: constructive, +2
    assert values[500] == pytest.approx(2.0, abs=1e-9)

    ready_renderer.resize(20, 10)
    grid = ready_renderer.field(0.0, snap)
    assert grid.shape == (10, 20)
