"""
Wave Canvas
===========
Displays the dithered frame and the source overlay, and turns mouse/touch
input into drag operations on the scene.

The backing resolution (the size the kernel renders at) may differ from the
widget's displayed size: it is `displayed size * render_scale`. Every input
position is converted to backing coordinates before reaching the
DragController.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import numpy as np
from PySide6.QtCore import Qt, QEvent, QPointF, QRectF, Signal
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QBrush, QTextOption
from PySide6.QtWidgets import QWidget, QSizePolicy

from waveinterference import config
from waveinterference.controller.interaction import DragController
from waveinterference.model.state import SceneState

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def buffer_to_qimage(buffer: npt.NDArray[np.uint8]) -> QImage:
    """Copy a (height, width) uint8 frame into a standalone grayscale QImage."""
    data = np.ascontiguousarray(buffer, dtype=np.uint8)
    height, width = data.shape
    image = QImage(data.data, width, height, width, QImage.Format.Format_Grayscale8)
    # Detach from the numpy memory, which the renderer reuses next frame
    return image.copy()


class WaveCanvas(QWidget):
    # Emitted with the new backing size (px)
    resized = Signal(int, int)
    source_moved = Signal(int)

    def __init__(self, state: SceneState, drag: DragController,
                 render_scale: float = 1.0, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.state = state
        self.drag = drag
        self.render_scale = max(float(render_scale), 0.05)

        self._image: Optional[QImage] = None
        self._error: Optional[str] = None

        self.setMinimumSize(200, 120)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setAttribute(Qt.WA_OpaquePaintEvent, True)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def set_frame(self, buffer: npt.NDArray[np.uint8], t: float = 0.0) -> None:
        self._image = buffer_to_qimage(buffer)
        self.update()

    def show_error(self, message: str) -> None:
        """Replace the visualization with a visible error message."""
        self._error = message
        self._image = None
        self.update()

    def backing_size(self) -> tuple[int, int]:
        w = max(int(round(self.width() * self.render_scale)), 1)
        h = max(int(round(self.height() * self.render_scale)), 1)
        return w, h

    def to_canvas(self, pos: QPointF) -> tuple[float, float]:
        """Widget coordinates -> canvas backing coordinates."""
        sx = self.state.width / max(self.width(), 1)
        sy = self.state.height / max(self.height(), 1)
        return pos.x() * sx, pos.y() * sy

    def to_widget(self, x: float, y: float) -> QPointF:
        """Canvas backing coordinates -> widget coordinates."""
        sx = max(self.width(), 1) / self.state.width
        sy = max(self.height(), 1) / self.state.height
        return QPointF(x * sx, y * sy)

    # ------------------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------------------

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        w, h = self.backing_size()
        self.resized.emit(w, h)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), Qt.black)

        if self._error:
            painter.setPen(QColor("#FF6B6B"))
            option = QTextOption(Qt.AlignCenter)
            option.setWrapMode(QTextOption.WordWrap)
            painter.drawText(QRectF(self.rect().adjusted(20, 20, -20, -20)), self._error, option)
            painter.end()
            return

        if self._image is not None:
            painter.drawImage(QRectF(self.rect()), self._image)

        self._paint_overlay(painter)
        painter.end()

    def _paint_overlay(self, painter: QPainter) -> None:
        painter.setRenderHint(QPainter.Antialiasing, True)
        scale = max(self.width(), 1) / self.state.width
        radius = config.SOURCE_RADIUS * scale

        for src in self.state.sources:
            center = self.to_widget(src.x, src.y)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QBrush(QColor(src.color)))
            painter.drawEllipse(center, radius, radius)

            if src.id == self.drag.dragged_id:
                painter.setBrush(Qt.NoBrush)
                painter.setPen(QPen(QColor(config.DRAG_RING_COLOR), 2))
                ring = radius + 5 * scale
                painter.drawEllipse(center, ring, ring)

    def mousePressEvent(self, event) -> None:
        if event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)
        if self.drag.pointer_down(*self.to_canvas(event.position())):
            self.setCursor(Qt.ClosedHandCursor)
            self.update()

    def mouseMoveEvent(self, event) -> None:
        if self.drag.pointer_move(*self.to_canvas(event.position())):
            self.source_moved.emit(self.drag.dragged_id)
            self.update()

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.LeftButton:
            return super().mouseReleaseEvent(event)
        self.drag.pointer_up()
        self.unsetCursor()
        self.update()

    def event(self, event: QEvent) -> bool:
        etype = event.type()
        if etype in (QEvent.TouchBegin, QEvent.TouchUpdate):
            points = [self.to_canvas(self.mapFromGlobal(p.globalPosition())) for p in event.points()]
            if etype == QEvent.TouchBegin:
                self.drag.touch_start(points)
            elif self.drag.touch_move(points):
                self.source_moved.emit(self.drag.dragged_id)
            event.accept()
            self.update()
            return True
        if etype == QEvent.TouchEnd:
            self.drag.touch_end()
            event.accept()
            self.update()
            return True
        if etype == QEvent.TouchCancel:
            self.drag.touch_cancel()
            event.accept()
            self.update()
            return True
        return super().event(event)
