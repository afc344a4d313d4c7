"""
Line Selector Widget
====================
pyqtgraph host for a LineSelectorChart. Clicking a line selects it; the reset
button clears the selection.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import numpy.typing as npt
import pyqtgraph as pg
from PySide6.QtCore import QTimer
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QHBoxLayout, QPushButton, QStyle, QVBoxLayout, QWidget

from chartgallery import config
from chartgallery.charts.line_selector import LineSelectorChart
from chartgallery.errors import ChartIndexError
from chartgallery.view.pyqtgraph_surface import PyQtGraphSurface

logger = logging.getLogger(__name__)


class LineSelectorWidget(QWidget):
    def __init__(
        self,
        x_data: Optional[npt.ArrayLike] = None,
        y_data: Optional[npt.ArrayLike] = None,
        assets: Optional[config.AssetProvider] = None,
        parent: Optional[QWidget] = None,
        **chart_kwargs: Any
    ) -> None:
        super().__init__(parent)
        self.assets: config.AssetProvider = assets if assets is not None else config.FileAssetProvider()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # Toolbar
        toolbar = QHBoxLayout()
        self.btn_reset = QPushButton("Reset")
        icon_path = self.assets.icon_path("reset")
        if icon_path is not None:
            self.btn_reset.setIcon(QIcon(icon_path))
        else:
            self.btn_reset.setIcon(self.style().standardIcon(QStyle.SP_BrowserReload))
        self.btn_reset.setToolTip("Reset the chart")
        toolbar.addWidget(self.btn_reset)
        toolbar.addStretch()
        layout.addLayout(toolbar)

        self.plot_widget = pg.PlotWidget()
        layout.addWidget(self.plot_widget)

        self.surface = PyQtGraphSurface(self.plot_widget, on_line_clicked=self._on_line_clicked)
        self.chart = LineSelectorChart(x_data, y_data, surface=self.surface, **chart_kwargs)

        self.btn_reset.clicked.connect(self.chart.deselect)

        # Render driver
        self._redraw_timer = QTimer(self)
        self._redraw_timer.setSingleShot(True)
        self._redraw_timer.setInterval(config.REDRAW_INTERVAL_MS)
        self._redraw_timer.timeout.connect(self._render)

        self.chart.state.dirty_changed.connect(lambda dirty: dirty and self._redraw_timer.start())
        self.chart.state.style_changed.connect(lambda _prop: self._redraw_timer.start())
        self._redraw_timer.start()

    def _render(self) -> None:
        try:
            self.chart.update()
        except Exception:
            logger.exception("Line selector update failed.")
            return
        self.surface.redraw()

    def _on_line_clicked(self, name: str) -> None:
        try:
            self.chart.select_by_name(name)
        except ChartIndexError as e:
            # A click can arrive for a line removed by a pending update
            logger.warning(f"Ignoring click: {e}")
