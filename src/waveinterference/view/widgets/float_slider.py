"""
Float Slider
Horizontal QSlider mapped onto a float range, with a live value label.
"""
from PySide6.QtWidgets import QWidget, QHBoxLayout, QSlider, QLabel
from PySide6.QtCore import Qt, Signal

from waveinterference.utils import clamp


class FloatSlider(QWidget):
    value_changed = Signal(float)

    def __init__(self, lo: float, hi: float, value: float, decimals: int = 2,
                 steps: int = 1000, suffix: str = "", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.lo = lo
        self.hi = hi
        self.steps = steps
        self.decimals = decimals
        self.suffix = suffix

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(0, steps)
        self.slider.valueChanged.connect(self._on_slider_changed)
        layout.addWidget(self.slider, 1)

        self.lbl_value = QLabel()
        self.lbl_value.setMinimumWidth(60)
        self.lbl_value.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        layout.addWidget(self.lbl_value)

        self.set_value(value)

    def value(self) -> float:
        return self._to_float(self.slider.value())

    def set_value(self, value: float) -> None:
        """Move the slider without emitting value_changed."""
        self.slider.blockSignals(True)
        self.slider.setValue(self._to_int(value))
        self.slider.blockSignals(False)
        self._update_label()

    def _on_slider_changed(self, _: int) -> None:
        self._update_label()
        self.value_changed.emit(self.value())

    def _update_label(self) -> None:
        self.lbl_value.setText(f"{self.value():.{self.decimals}f}{self.suffix}")

    def _to_int(self, value: float) -> int:
        frac = (clamp(value, self.lo, self.hi) - self.lo) / (self.hi - self.lo)
        return int(round(frac * self.steps))

    def _to_float(self, position: int) -> float:
        return self.lo + (self.hi - self.lo) * position / self.steps
