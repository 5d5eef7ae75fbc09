"""
Metaball canvas widget — shows the controller's pixel buffer.

A QTimer polls the control channel at ~60 Hz from the GUI thread, so
commands are applied between events and never during a render.
Space draws a new random field, C toggles the centre markers.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import QCoreApplication, QTimer, Qt, pyqtSignal
from PyQt5.QtGui import QImage, QPainter, QPixmap
from PyQt5.QtWidgets import QWidget

from .control import ChannelDisconnected, CommandChannel
from .controller import MetaballController

logger = logging.getLogger(__name__)


class MetaballCanvas(QWidget):
    """Fixed-size display of the metaball raster.

    Signals:
        state_changed():  emitted after every re-render
    """

    state_changed = pyqtSignal()

    def __init__(
        self,
        controller: MetaballController,
        channel: Optional[CommandChannel] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.controller = controller
        self.channel = channel
        self._pixmap: Optional[QPixmap] = None

        controller.on_frame = self._on_frame
        self._on_frame()

        self.setFixedSize(controller.width, controller.height)
        self.setFocusPolicy(Qt.StrongFocus)

        # Command polling timer
        self._timer = QTimer(self)
        self._timer.setInterval(16)
        self._timer.timeout.connect(self._poll)
        if channel is not None:
            self._timer.start()

    # ── frame updates ─────────────────────────────────────────────────────

    def _on_frame(self) -> None:
        c = self.controller
        qimg = QImage(bytes(c.buffer), c.width, c.height, c.width * 4, QImage.Format_RGBA8888).copy()
        self._pixmap = QPixmap.fromImage(qimg)
        self.update()
        self.state_changed.emit()

    def _poll(self) -> None:
        try:
            self.controller.poll(self.channel)
        except ChannelDisconnected:
            logger.error("STDIN hung up!")
            self._timer.stop()
            QCoreApplication.exit(1)

    # ── painting ──────────────────────────────────────────────────────────

    def paintEvent(self, event):
        if self._pixmap is None:
            return
        painter = QPainter(self)
        painter.drawPixmap(0, 0, self._pixmap)
        painter.end()

    # ── keyboard ──────────────────────────────────────────────────────────

    def keyPressEvent(self, event):
        if event.isAutoRepeat():
            return
        if event.key() == Qt.Key_Space:
            self.controller.randomize()
        elif event.key() == Qt.Key_C:
            self.controller.toggle_centers()
        else:
            super().keyPressEvent(event)

    # ── save ──────────────────────────────────────────────────────────────

    def get_image(self) -> Optional[QImage]:
        if self._pixmap:
            return self._pixmap.toImage()
        return None
