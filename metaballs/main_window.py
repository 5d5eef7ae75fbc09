"""
Main window — hosts the metaball canvas, menu bar and status bar.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QAction,
    QActionGroup,
    QFileDialog,
    QLayout,
    QMainWindow,
    QMessageBox,
)

from . import __version__
from .canvas import MetaballCanvas
from .control import CommandChannel
from .controller import MetaballController
from .palettes import SCHEMES, get_scheme, list_schemes

logger = logging.getLogger(__name__)


CONTROLS_TEXT = (
    "<p><b>Keyboard</b></p>"
    "<ul>"
    "<li><b>Space</b> — new random field</li>"
    "<li><b>C</b> — toggle centre markers</li>"
    "</ul>"
    "<p><b>Console</b> (type a line and press Enter)</p>"
    "<ul>"
    "<li><b>g&lt;float&gt;</b> — set goo, e.g. <tt>g2.5</tt></li>"
    "<li><b>t&lt;float&gt;</b> — set threshold, e.g. <tt>t0.8</tt></li>"
    "</ul>"
)


class MainWindow(QMainWindow):
    """Top-level window for the metaball viewer."""

    def __init__(
        self,
        controller: MetaballController,
        channel: Optional[CommandChannel] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Metaballs")

        self.controller = controller
        self.canvas = MetaballCanvas(controller, channel)
        self.setCentralWidget(self.canvas)

        self._build_menu()

        self.canvas.state_changed.connect(self._update_status)
        self._update_status()

        # Raster size is fixed
        self.layout().setSizeConstraint(QLayout.SetFixedSize)

    def _build_menu(self) -> None:
        menu = self.menuBar()

        file_menu = menu.addMenu("&File")
        save_act = QAction("&Save Image…", self)
        save_act.setShortcut(QKeySequence.Save)
        save_act.triggered.connect(self._save)
        file_menu.addAction(save_act)
        file_menu.addSeparator()
        quit_act = QAction("&Quit", self)
        quit_act.setShortcut(QKeySequence.Quit)
        quit_act.triggered.connect(self.close)
        file_menu.addAction(quit_act)

        view_menu = menu.addMenu("&View")
        random_act = QAction("&Randomize", self)
        random_act.setShortcut(QKeySequence("Space"))
        random_act.triggered.connect(self.controller.randomize)
        view_menu.addAction(random_act)
        centers_act = QAction("Toggle &Centers", self)
        centers_act.setShortcut(QKeySequence("C"))
        centers_act.triggered.connect(self.controller.toggle_centers)
        view_menu.addAction(centers_act)

        scheme_menu = view_menu.addMenu("Colour &Scheme")
        group = QActionGroup(self)
        current = self.controller.options.scheme
        for key in list_schemes():
            scheme = SCHEMES[key]
            act = QAction(scheme.name, self, checkable=True)
            act.setChecked(scheme == current)
            act.triggered.connect(lambda _checked, k=key: self.controller.set_scheme(get_scheme(k)))
            group.addAction(act)
            scheme_menu.addAction(act)

        help_menu = menu.addMenu("&Help")
        controls_act = QAction("&Controls", self)
        controls_act.triggered.connect(self._controls)
        help_menu.addAction(controls_act)
        about_act = QAction("&About", self)
        about_act.triggered.connect(self._about)
        help_menu.addAction(about_act)

    def _save(self) -> None:
        img = self.canvas.get_image()
        if img is None:
            QMessageBox.warning(self, "Save Error", "No image to save yet.")
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Metaball Image", "metaballs.png",
            "PNG (*.png);;JPEG (*.jpg);;All (*)",
        )
        if path:
            if img.save(path):
                self.statusBar().showMessage(f"Saved to {path}", 3000)
            else:
                QMessageBox.critical(self, "Save Error", f"Failed to save:\n{path}")

    def _update_status(self) -> None:
        f = self.controller.field
        self.statusBar().showMessage(
            f"{len(f.metaballs)} balls  goo={f.goo:g}  threshold={f.threshold:g}"
        )

    def _controls(self) -> None:
        QMessageBox.information(self, "Controls", CONTROLS_TEXT)

    def _about(self) -> None:
        QMessageBox.about(
            self,
            "About Metaballs",
            f"<h3>Metaballs v{__version__}</h3>"
            "<p>Implicit surface rendering of a set of point sources.</p>"
            "<p>Every pixel sums Σ(sizeᵢ / dᵢ<sup>goo</sup>) over all "
            "metaballs and lights up when the sum exceeds the "
            "threshold.</p>",
        )
