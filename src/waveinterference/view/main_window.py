"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the control panel and the
wave canvas.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects the frame driver, the canvas, the drag controller and
   the control panel.
3. Lifecycle: It initializes the renderer and stops the frame loop on close.
"""
import logging
import os

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QFileDialog, QMessageBox
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction

from waveinterference import config
from waveinterference.controller.frame_driver import FrameDriver
from waveinterference.controller.interaction import DragController
from waveinterference.exceptions import RendererInitError
from waveinterference.kernel.renderer import FieldRenderer
from waveinterference.model.state import SceneState
from waveinterference.view.tabs.tab_sources import SourcesControlPanel
from waveinterference.view.widgets.profile_plot import FieldProfilePlot
from waveinterference.view.widgets.wave_canvas import WaveCanvas, buffer_to_qimage

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Wave Interference"


class MainWindow(QMainWindow):
    def __init__(self, state: SceneState, renderer: FieldRenderer,
                 interval_ms: int = config.FRAME_INTERVAL_MS, render_scale: float = 1.0) -> None:
        super().__init__()
        self.state = state
        self.renderer = renderer
        self._last_buffer = None
        self._render_failed = False

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 700)

        self.drag = DragController(self.state)
        self.driver = FrameDriver(self.state, self.renderer, interval_ms=interval_ms, parent=self)

        # --- MAIN CONTAINER ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT SIDE: Controls + Profile ---
        left = QWidget()
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(0, 0, 0, 0)

        self.controls = SourcesControlPanel(self.state)
        left_layout.addWidget(self.controls, 1)

        self.profile = FieldProfilePlot()
        left_layout.addWidget(self.profile)
        splitter.addWidget(left)

        # --- RIGHT SIDE: Canvas ---
        self.canvas = WaveCanvas(self.state, self.drag, render_scale=render_scale)
        splitter.addWidget(self.canvas)
        splitter.setSizes([350, 1050])

        # Profile is refreshed slower than the canvas
        self.profile_timer = QTimer(self)
        self.profile_timer.setInterval(config.PROFILE_REFRESH_MS)
        self.profile_timer.timeout.connect(self.update_profile)

        # --- SIGNAL CONNECTIONS ---
        self.driver.frame_ready.connect(self.on_frame_ready)
        self.driver.error_occurred.connect(self.on_frame_error)
        self.driver.running_changed.connect(self.on_running_changed)
        self.canvas.resized.connect(self.on_canvas_resized)
        self.canvas.source_moved.connect(self.on_scene_edited)
        self.controls.sources_changed.connect(self.canvas.update)
        self.controls.sources_changed.connect(self.on_scene_edited)
        self.controls.params_changed.connect(self.on_scene_edited)

        self._create_actions()
        self._create_menus()
        self.statusBar().showMessage("Initializing renderer...")

    def _create_actions(self) -> None:
        self.act_pause = QAction("Pause", self)
        self.act_pause.setShortcut("Space")
        self.act_pause.triggered.connect(self.on_toggle_pause)

        self.act_reset = QAction("Reset Sources", self)
        self.act_reset.setShortcut("Ctrl+R")
        self.act_reset.triggered.connect(self.on_reset)

        self.act_export = QAction("Export Frame...", self)
        self.act_export.setShortcut("Ctrl+E")
        self.act_export.triggered.connect(self.on_export_frame)

        self.act_exit = QAction("Quit", self)
        self.act_exit.setShortcut("Ctrl+Q")
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_export)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        sim_menu = menu_bar.addMenu("&Simulation")
        sim_menu.addAction(self.act_pause)
        sim_menu.addAction(self.act_reset)

    # --- LIFECYCLE ---

    def start(self) -> bool:
        """
        Initialize the renderer and start the frame loop.
        Returns False (after telling the user) if the renderer is unusable.
        """
        try:
            if not self.renderer.is_ready:
                self.renderer.initialize()
        except RendererInitError as e:
            msg = f"The visualization could not be started.\n\n{e}"
            self.canvas.show_error(msg)
            self.statusBar().showMessage("Renderer unavailable")
            self.act_pause.setEnabled(False)
            self.act_export.setEnabled(False)
            QMessageBox.critical(self, "Renderer Error", msg)
            return False

        w, h = self.canvas.backing_size()
        self.on_canvas_resized(w, h)
        self.driver.start()
        self.profile_timer.start()
        return True

    def closeEvent(self, event) -> None:
        self.driver.stop()
        self.profile_timer.stop()
        super().closeEvent(event)

    # --- SLOTS ---

    def on_frame_ready(self, buffer, t: float) -> None:
        self._last_buffer = buffer
        self.canvas.set_frame(buffer, t)
        self.statusBar().showMessage(
            f"t = {t:6.2f} s   |   {self.driver.stats.fps:5.1f} fps   |   "
            f"{self.state.width}x{self.state.height} px"
        )

    def on_frame_error(self, message: str) -> None:
        self._render_failed = True
        self.canvas.show_error(f"Rendering stopped:\n{message}")
        QMessageBox.critical(self, "Rendering Error", message)

    def on_running_changed(self, running: bool) -> None:
        self.act_pause.setText("Pause" if running else "Resume")

    def on_canvas_resized(self, width: int, height: int) -> None:
        self.state.resize(width, height, rescale=True)
        self.renderer.resize(width, height)

    def on_toggle_pause(self) -> None:
        if self.driver.is_running:
            self.driver.stop()
        elif self.renderer.is_ready:
            self._render_failed = False
            self.driver.start()

    def on_reset(self) -> None:
        self.drag.pointer_up()
        self.state.reset()
        self.driver.restart_clock()
        self.controls.rebuild()
        self.canvas.update()
        self.on_scene_edited()

    def on_scene_edited(self, *_) -> None:
        """Refresh the profile, and the frame too while the loop is paused."""
        self.update_profile()
        if not (self.driver.is_running or self._render_failed) and self.renderer.is_ready:
            self.driver.render_still()

    def update_profile(self) -> None:
        if not self.renderer.is_ready:
            return
        snapshot = self.state.snapshot()
        xs, values = self.renderer.profile(self.driver.elapsed, snapshot, y=self.state.height / 2.0)
        self.profile.update_profile(xs, values, snapshot, [s.color for s in self.state.sources])

    def on_export_frame(self) -> None:
        if self._last_buffer is None:
            QMessageBox.information(self, "Export Frame", "No frame has been rendered yet.")
            return

        file_path, _ = QFileDialog.getSaveFileName(
            self, "Export Frame", "interference.png", "PNG image (*.png)"
        )
        if not file_path:
            return

        if not buffer_to_qimage(self._last_buffer).save(file_path):
            QMessageBox.critical(self, "Export Error", f"Could not write {os.path.basename(file_path)}.")
            return
        logger.info(f"Frame exported to {file_path}")
