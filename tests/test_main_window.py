import pytest
from PySide6.QtWidgets import QMessageBox

from waveinterference.kernel.renderer import FieldRenderer
from waveinterference.model.state import SceneState
from waveinterference.view.main_window import MainWindow


@pytest.fixture
def shown_errors(monkeypatch):
    calls = []
    monkeypatch.setattr(QMessageBox, "critical", lambda *args, **kwargs: calls.append(args))
    return calls


def test_window_starts_and_stops_frame_loop(qtbot, ready_renderer, shown_errors):
    state = SceneState.with_defaults(200, 100)
    window = MainWindow(state, ready_renderer, interval_ms=5)
    qtbot.addWidget(window)
    window.show()

    assert window.start()
    assert window.driver.is_running
    qtbot.waitUntil(lambda: window._last_buffer is not None, timeout=3000)

    window.close()
    assert not window.driver.is_running
    assert shown_errors == []


def test_renderer_init_failure_is_reported_not_raised(qtbot, shown_errors):
    state = SceneState.with_defaults(200, 100)
    window = MainWindow(state, FieldRenderer(200, 100, threads=0))
    qtbot.addWidget(window)

    assert not window.start()
    assert not window.driver.is_running
    assert len(shown_errors) == 1
    assert "could not be started" in window.canvas._error
    assert not window.act_pause.isEnabled()


def test_reset_restores_two_sources(qtbot, ready_renderer, shown_errors):
    state = SceneState.with_defaults(200, 100)
    window = MainWindow(state, ready_renderer)
    qtbot.addWidget(window)

    window.controls.on_add_clicked()
    assert len(state.sources) == 3
    window.on_reset()
    assert len(state.sources) == 2
    assert len(window.controls._source_groups) == 2


def test_dragging_while_paused_redraws_frame_and_profile(qtbot, ready_renderer, shown_errors):
    state = SceneState.with_defaults(200, 100)
    window = MainWindow(state, ready_renderer, interval_ms=5)
    qtbot.addWidget(window)
    window.show()
    assert window.start()
    qtbot.waitUntil(lambda: window._last_buffer is not None, timeout=3000)

    window.on_toggle_pause()
    assert not window.driver.is_running
    window.profile_timer.stop()
    paused_t = window.driver.elapsed
    profile_updates = []
    window.profile.update_profile = lambda *args: profile_updates.append(args)

    src = state.sources[0]
    state.move_source(src.id, src.x + 10.0, src.y)
    with qtbot.waitSignal(window.driver.frame_ready) as blocker:
        window.canvas.source_moved.emit(src.id)

    assert blocker.args[1] == pytest.approx(paused_t)
    assert window._last_buffer is blocker.args[0]
    assert len(profile_updates) == 1
    assert not window.driver.is_running
    window.close()


def test_slider_change_while_stopped_redraws_frame(qtbot, ready_renderer, shown_errors):
    state = SceneState.with_defaults(200, 100)
    window = MainWindow(state, ready_renderer)
    qtbot.addWidget(window)
    assert not window.driver.is_running

    with qtbot.waitSignal(window.driver.frame_ready):
        window.controls.sld_density.slider.setValue(window.controls.sld_density.steps)
    assert window._last_buffer.shape == (100, 200)
