"""
Sources Control Panel
"""
import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QFormLayout, QPushButton, QLabel, QScrollArea, QFrame
)
from PySide6.QtCore import Signal, Qt

from waveinterference import config
from waveinterference.model.state import SceneState
from waveinterference.view.widgets.float_slider import FloatSlider

logger = logging.getLogger(__name__)


class SourcesControlPanel(QWidget):
    # Emitted when a source is added or removed
    sources_changed = Signal()
    # Emitted on any parameter change (slider moved)
    params_changed = Signal()

    def __init__(self, state: SceneState) -> None:
        super().__init__()
        self.state = state
        self._source_groups: list[QGroupBox] = []

        layout = QVBoxLayout(self)

        # --- Global Parameters ---
        grp_global = QGroupBox("Global")
        form_global = QFormLayout(grp_global)

        self.sld_decay = FloatSlider(*config.DECAY_RANGE, value=self.state.params.decay_factor)
        self.sld_decay.value_changed.connect(self.on_decay_changed)
        self.sld_decay.setToolTip("0 = no attenuation, 1 = 1/r, 0.5 = 1/sqrt(r)")
        form_global.addRow("Decay:", self.sld_decay)

        self.sld_density = FloatSlider(*config.DOT_DENSITY_RANGE, value=self.state.params.dot_density)
        self.sld_density.value_changed.connect(self.on_density_changed)
        form_global.addRow("Dot density:", self.sld_density)

        layout.addWidget(grp_global)

        # --- Sources (rebuilt on add/remove) ---
        self.sources_container = QWidget()
        self.sources_layout = QVBoxLayout(self.sources_container)
        self.sources_layout.setContentsMargins(0, 0, 0, 0)

        scroller = QScrollArea()
        scroller.setWidget(self.sources_container)
        scroller.setWidgetResizable(True)
        scroller.setFrameShape(QFrame.NoFrame)
        layout.addWidget(scroller, 1)

        # --- Actions ---
        hbox = QHBoxLayout()
        self.btn_add = QPushButton("Add Source")
        self.btn_add.clicked.connect(self.on_add_clicked)
        hbox.addWidget(self.btn_add)
        layout.addLayout(hbox)

        self.lbl_count = QLabel("")
        self.lbl_count.setAlignment(Qt.AlignCenter)
        self.lbl_count.setStyleSheet("color: gray;")
        layout.addWidget(self.lbl_count)

        self.rebuild()

    # --- BUILD ---

    def rebuild(self) -> None:
        """Recreate the per-source groups from the current state."""
        for grp in self._source_groups:
            self.sources_layout.removeWidget(grp)
            grp.deleteLater()
        self._source_groups.clear()

        # Drop the trailing stretch before re-adding groups
        while self.sources_layout.count():
            self.sources_layout.takeAt(0)

        for index, src in enumerate(self.state.sources, start=1):
            grp = self._make_source_group(index, src.id)
            self.sources_layout.addWidget(grp)
            self._source_groups.append(grp)
        self.sources_layout.addStretch()

        self.sld_decay.set_value(self.state.params.decay_factor)
        self.sld_density.set_value(self.state.params.dot_density)
        self._update_buttons()

    def _make_source_group(self, index: int, source_id: int) -> QGroupBox:
        src = self.state.get(source_id)
        grp = QGroupBox(f"Source {index}")
        grp.setStyleSheet(f"QGroupBox {{ font-weight: bold; color: {src.color}; }}")
        form = QFormLayout(grp)

        sld_wl = FloatSlider(*config.WAVELENGTH_RANGE, value=src.wavelength, decimals=0, suffix=" px")
        sld_wl.value_changed.connect(lambda v, sid=source_id: self.on_wavelength_changed(sid, v))
        form.addRow("Wavelength:", sld_wl)

        sld_freq = FloatSlider(*config.FREQUENCY_RANGE, value=src.frequency, suffix=" Hz")
        sld_freq.value_changed.connect(lambda v, sid=source_id: self.on_frequency_changed(sid, v))
        form.addRow("Frequency:", sld_freq)

        btn_remove = QPushButton("Remove")
        btn_remove.clicked.connect(lambda _=False, sid=source_id: self.on_remove_clicked(sid))
        form.addRow(btn_remove)
        return grp

    def _update_buttons(self) -> None:
        n = len(self.state.sources)
        self.btn_add.setEnabled(not self.state.is_full)
        self.lbl_count.setText(f"{n} / {config.MAX_SOURCES} sources")

    # --- SLOTS ---

    def on_decay_changed(self, value: float) -> None:
        self.state.set_decay_factor(value)
        self.params_changed.emit()

    def on_density_changed(self, value: float) -> None:
        self.state.set_dot_density(value)
        self.params_changed.emit()

    def on_wavelength_changed(self, source_id: int, value: float) -> None:
        self.state.set_wavelength(source_id, value)
        self.params_changed.emit()

    def on_frequency_changed(self, source_id: int, value: float) -> None:
        self.state.set_frequency(source_id, value)
        self.params_changed.emit()

    def on_add_clicked(self) -> None:
        src = self.state.add_source(self.state.width / 2.0, self.state.height / 2.0)
        if src is None:
            return
        logger.info(f"Source {src.id} added from control panel.")
        self.rebuild()
        self.sources_changed.emit()

    def on_remove_clicked(self, source_id: int) -> None:
        if self.state.remove_source(source_id):
            self.rebuild()
            self.sources_changed.emit()
