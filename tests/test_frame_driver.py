import numpy as np
import pytest

from waveinterference.controller.frame_driver import FrameDriver, FrameStats
from waveinterference.kernel.renderer import FieldRenderer
from waveinterference.model.state import SceneState


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def scene() -> SceneState:
    return SceneState.with_defaults(48, 24)


def test_time_follows_clock_not_tick_count(qtbot, scene, ready_renderer):
    clock = FakeClock(100.0)
    driver = FrameDriver(scene, ready_renderer, clock=clock)

    with qtbot.waitSignal(driver.frame_ready) as blocker:
        driver.tick()
    buffer, t = blocker.args
    assert t == pytest.approx(0.0)
    assert buffer.shape == (24, 48)

    # Irregular gaps between ticks
    for now, expected in [(100.016, 0.016), (100.5, 0.5), (103.25, 3.25)]:
        clock.now = now
        with qtbot.waitSignal(driver.frame_ready) as blocker:
            driver.tick()
        assert blocker.args[1] == pytest.approx(expected)
    assert driver.elapsed == pytest.approx(3.25)


def test_frames_are_recomputed_from_current_state(qtbot, scene, ready_renderer):
    clock = FakeClock()
    driver = FrameDriver(scene, ready_renderer, clock=clock)

    with qtbot.waitSignal(driver.frame_ready) as blocker:
        driver.tick()
    first = blocker.args[0].copy()

    for src in list(scene.sources):
        scene.remove_source(src.id)
    with qtbot.waitSignal(driver.frame_ready) as blocker:
        driver.tick()
    assert not blocker.args[0].any()
    assert first.shape == blocker.args[0].shape


def test_renderer_follows_scene_size(qtbot, scene, ready_renderer):
    driver = FrameDriver(scene, ready_renderer, clock=FakeClock())
    scene.resize(30, 12)
    with qtbot.waitSignal(driver.frame_ready) as blocker:
        driver.tick()
    assert blocker.args[0].shape == (12, 30)


def test_start_and_stop_are_idempotent(qtbot, scene, ready_renderer):
    driver = FrameDriver(scene, ready_renderer, interval_ms=5)
    with qtbot.waitSignal(driver.running_changed) as blocker:
        driver.start()
    assert blocker.args == [True]
    driver.start()
    assert driver.is_running

    qtbot.waitSignal(driver.frame_ready, timeout=2000).wait()

    driver.stop()
    driver.stop()
    assert not driver.is_running


def test_render_failure_stops_loop_and_reports(qtbot, scene):
    broken = FieldRenderer(8, 8)  # never initialized
    driver = FrameDriver(scene, broken, interval_ms=5)
    driver.start()
    with qtbot.waitSignal(driver.error_occurred, timeout=2000) as blocker:
        pass
    assert "initialize" in blocker.args[0]
    assert not driver.is_running


def test_frame_stats():
    stats = FrameStats(window=4)
    assert stats.fps == 0.0
    for s in (0.01, 0.01, 0.03, 0.03):
        stats.add(s)
    assert stats.mean_frame_time == pytest.approx(0.02)
    assert stats.fps == pytest.approx(50.0)
    stats.add(0.03)
    assert stats.mean_frame_time == pytest.approx(0.025)


def test_render_still_redraws_paused_time(qtbot, scene, ready_renderer):
    clock = FakeClock(100.0)
    driver = FrameDriver(scene, ready_renderer, clock=clock)
    clock.now = 102.5
    driver.tick()
    assert driver.elapsed == pytest.approx(2.5)

    for src in list(scene.sources):
        scene.remove_source(src.id)
    clock.now = 110.0
    with qtbot.waitSignal(driver.frame_ready) as blocker:
        driver.render_still()
    buffer, t = blocker.args
    assert t == pytest.approx(2.5)
    assert not buffer.any()
    assert driver.elapsed == pytest.approx(2.5)


def test_render_still_is_ignored_while_running(qtbot, scene, ready_renderer):
    driver = FrameDriver(scene, ready_renderer, interval_ms=10_000, clock=FakeClock())
    driver.start()
    with qtbot.assertNotEmitted(driver.frame_ready):
        driver.render_still()
    driver.stop()
