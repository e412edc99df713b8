"""Line plot of the continuous field along the canvas's horizontal centre line."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import pyqtgraph as pg
from PySide6.QtWidgets import QWidget, QVBoxLayout

if TYPE_CHECKING:
    import numpy.typing as npt
    from waveinterference.model.sources import FrameSnapshot


logger = logging.getLogger(__name__)


class FieldProfilePlot(QWidget):
    """pyqtgraph plot of field(x, y_centre) with source positions marked."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground('w')
        self.plot_widget.showGrid(x=True, y=True, alpha=0.3)
        self.plot_widget.setLabel('bottom', 'x [px]', color='black')
        self.plot_widget.setLabel('left', 'Field', color='black')
        self.plot_widget.setTitle('Field along centre line', color='black', size='10pt')
        self.plot_widget.getAxis('bottom').setPen('k')
        self.plot_widget.getAxis('left').setPen('k')
        self.plot_widget.getAxis('bottom').setTextPen('k')
        self.plot_widget.getAxis('left').setTextPen('k')
        self.plot_widget.setMouseEnabled(x=False, y=False)
        self.plot_widget.setMinimumHeight(160)
        layout.addWidget(self.plot_widget)

        self._curve = self.plot_widget.plot([], [], pen=pg.mkPen(color=(0, 120, 215), width=2))
        self._markers: list[pg.InfiniteLine] = []

    def update_profile(self, xs: npt.NDArray[np.float64], values: npt.NDArray[np.float64],
                       snapshot: FrameSnapshot, colors: list[str]) -> None:
        self._curve.setData(xs, values)

        for line in self._markers:
            self.plot_widget.removeItem(line)
        self._markers.clear()

        for i in range(snapshot.count):
            line = pg.InfiniteLine(
                pos=float(snapshot.xs[i]),
                angle=90,
                pen=pg.mkPen(color=colors[i], width=1, style=pg.QtCore.Qt.DashLine),
            )
            self.plot_widget.addItem(line)
            self._markers.append(line)

        # Without decay the field is bounded by count * amplitude
        if snapshot.decay_factor == 0.0 and snapshot.count > 0:
            bound = snapshot.count * snapshot.amplitude
            self.plot_widget.setYRange(-bound, bound, padding=0.05)
        else:
            self.plot_widget.enableAutoRange(axis='y')
        self.plot_widget.setXRange(float(xs[0]), float(xs[-1]), padding=0)
