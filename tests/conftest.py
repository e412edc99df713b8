import os

# Must be set before any Qt module creates the application
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from waveinterference.kernel.renderer import FieldRenderer
from waveinterference.model.state import SceneState


@pytest.fixture
def two_source_scene() -> SceneState:
    """Two sources at (300, 200) and (700, 200) on a 1000x400 canvas, λ=100, f=1."""
    state = SceneState(width=1000, height=400)
    state.add_source(300.0, 200.0, wavelength=100.0, frequency=1.0)
    state.add_source(700.0, 200.0, wavelength=100.0, frequency=1.0)
    return state


@pytest.fixture(scope="session")
def ready_renderer() -> FieldRenderer:
    renderer = FieldRenderer(64, 32)
    renderer.initialize()
    return renderer
