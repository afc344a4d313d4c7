"""
Ternary Chart Widget
====================
Qt host for a TernaryChart: a PyVista viewport, a floating toggle button and a
collapsible control panel.

Each control maps to exactly one chart mutator. The widget never recomputes
anything itself; a debounced single-shot timer calls ``chart.update()`` and
then redraws whenever the chart reports a change.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent, QIcon
from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QFormLayout, QFrame, QGroupBox, QHBoxLayout, QPushButton,
    QSlider, QStyle, QVBoxLayout, QWidget
)
from pyvistaqt import QtInteractor

from chartgallery import config
from chartgallery.charts.ternary import MARKERS, SURFACE_TYPES, DataLike, TernaryChart
from chartgallery.model.surface import InterpolationMethod
from chartgallery.view.pyvista_surface import PyVistaSurface

logger = logging.getLogger(__name__)


class TernaryChartWidget(QWidget):
    def __init__(
        self,
        data: Optional[DataLike] = None,
        assets: Optional[config.AssetProvider] = None,
        parent: Optional[QWidget] = None,
        **chart_kwargs: Any
    ) -> None:
        super().__init__(parent)
        self.assets: config.AssetProvider = assets if assets is not None else config.FileAssetProvider()

        self.layout_box = QHBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter, stretch=1)

        self.surface = PyVistaSurface(self.plotter)
        self.chart = TernaryChart(data, surface=self.surface, **chart_kwargs)

        self._build_controls()
        self._setup_overlay_controls()
        self._sync_controls()

        # Render driver
        self._redraw_timer = QTimer(self)
        self._redraw_timer.setSingleShot(True)
        self._redraw_timer.setInterval(config.REDRAW_INTERVAL_MS)
        self._redraw_timer.timeout.connect(self._render)

        self.chart.state.dirty_changed.connect(self._on_dirty_changed)
        self.chart.state.style_changed.connect(self._on_style_changed)
        self.schedule_redraw()

    # ------------------------------------------------------------------------------
    # Render driver
    # ------------------------------------------------------------------------------

    def schedule_redraw(self) -> None:
        self._redraw_timer.start()

    def _render(self) -> None:
        try:
            self.chart.update()
        except Exception:
            # The chart stays dirty; the next change retries the full update
            logger.exception("Ternary chart update failed.")
            return
        self.surface.redraw()

    def _on_dirty_changed(self, dirty: bool) -> None:
        if dirty:
            self.schedule_redraw()

    def _on_style_changed(self, prop: str) -> None:
        self._sync_controls()
        self.schedule_redraw()

    # ------------------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------------------

    def _build_controls(self) -> None:
        self.controls_panel = QFrame(self)
        self.controls_panel.setFrameShape(QFrame.StyledPanel)
        self.controls_panel.setMinimumWidth(220)
        panel_layout = QVBoxLayout(self.controls_panel)

        # --- Axis ---
        grp_axis = QGroupBox("Axis")
        l_axis = QVBoxLayout(grp_axis)

        row = QHBoxLayout()
        self.btn_rotate_cw = QPushButton("Rotate ↻")
        self.btn_rotate_cw.setToolTip("Rotate clockwise")
        self.btn_rotate_cw.clicked.connect(lambda: self.chart.rotate("clockwise"))
        self.btn_rotate_ccw = QPushButton("Rotate ↺")
        self.btn_rotate_ccw.setToolTip("Rotate counterclockwise")
        self.btn_rotate_ccw.clicked.connect(lambda: self.chart.rotate("counterclockwise"))
        row.addWidget(self.btn_rotate_cw)
        row.addWidget(self.btn_rotate_ccw)
        l_axis.addLayout(row)

        self.chk_colorbar = QCheckBox("Colorbar")
        self.chk_colorbar.toggled.connect(lambda checked: setattr(self.chart, "colorbar_visible", checked))
        self.chk_grid = QCheckBox("Grid")
        self.chk_grid.toggled.connect(lambda checked: setattr(self.chart, "grid_visible", checked))
        self.chk_ticks = QCheckBox("Ticks")
        self.chk_ticks.toggled.connect(lambda checked: setattr(self.chart, "show_ticks", checked))
        for chk in (self.chk_colorbar, self.chk_grid, self.chk_ticks):
            l_axis.addWidget(chk)
        panel_layout.addWidget(grp_axis)

        # --- Surface ---
        grp_surface = QGroupBox("Surface")
        f_surface = QFormLayout(grp_surface)

        self.cmb_surface_type = QComboBox()
        self.cmb_surface_type.addItems(list(SURFACE_TYPES))
        self.cmb_surface_type.currentTextChanged.connect(
            lambda text: setattr(self.chart, "surface_type", text)
        )
        f_surface.addRow("Type:", self.cmb_surface_type)

        self.cmb_interpolation = QComboBox()
        for method in InterpolationMethod:
            self.cmb_interpolation.addItem(method.value, method)
        self.cmb_interpolation.currentIndexChanged.connect(
            lambda i: self.chart.set_interpolation(self.cmb_interpolation.itemData(i))
        )
        f_surface.addRow("Interpolation:", self.cmb_interpolation)

        self.sld_face_alpha = self._make_slider(0, 100)
        self.sld_face_alpha.valueChanged.connect(lambda v: setattr(self.chart, "face_alpha", v / 100.0))
        f_surface.addRow("Face alpha:", self.sld_face_alpha)

        self.sld_line_width = self._make_slider(1, 50)
        self.sld_line_width.valueChanged.connect(lambda v: setattr(self.chart, "line_width", v / 10.0))
        f_surface.addRow("Line width:", self.sld_line_width)
        panel_layout.addWidget(grp_surface)

        # --- Scatter series ---
        grp_scatter = QGroupBox("Scatter Series")
        f_scatter = QFormLayout(grp_scatter)

        self.cmb_marker = QComboBox()
        self.cmb_marker.addItems(list(MARKERS))
        self.cmb_marker.currentTextChanged.connect(lambda text: setattr(self.chart, "marker", text))
        f_scatter.addRow("Marker:", self.cmb_marker)

        self.sld_marker_size = self._make_slider(1, 100)
        self.sld_marker_size.valueChanged.connect(lambda v: setattr(self.chart, "marker_size", float(v)))
        f_scatter.addRow("Marker size:", self.sld_marker_size)
        panel_layout.addWidget(grp_scatter)

        panel_layout.addStretch()
        self.layout_box.addWidget(self.controls_panel)

    @staticmethod
    def _make_slider(low: int, high: int) -> QSlider:
        slider = QSlider(Qt.Horizontal)
        slider.setRange(low, high)
        return slider

    def _setup_overlay_controls(self) -> None:
        """Floating button that shows or hides the control panel."""
        self.overlay_widget = QFrame(self.plotter)
        self.overlay_widget.setStyleSheet("""
            QFrame { background-color: rgba(255, 255, 255, 200); border-radius: 6px; border: 1px solid #ccc; }
            QPushButton { background-color: transparent; border: none; padding: 4px; }
            QPushButton:checked { background-color: rgba(0, 120, 215, 50); border: 1px solid #0078D7; border-radius: 3px; }
        """)
        layout = QHBoxLayout(self.overlay_widget)
        layout.setContentsMargins(4, 4, 4, 4)

        self.btn_toggle_controls = QPushButton()
        icon_path = self.assets.icon_path("cog")
        if icon_path is not None:
            self.btn_toggle_controls.setIcon(QIcon(icon_path))
        else:
            self.btn_toggle_controls.setIcon(self.style().standardIcon(QStyle.SP_FileDialogDetailedView))
        self.btn_toggle_controls.setCheckable(True)
        self.btn_toggle_controls.toggled.connect(lambda checked: setattr(self.chart, "controls", checked))
        layout.addWidget(self.btn_toggle_controls)
        self.overlay_widget.move(8, 8)
        self.overlay_widget.adjustSize()

    def _sync_controls(self) -> None:
        """Mirror chart properties into the controls without feeding changes back."""
        chart = self.chart
        widgets = (
            self.chk_colorbar, self.chk_grid, self.chk_ticks, self.cmb_surface_type,
            self.cmb_interpolation, self.sld_face_alpha, self.sld_line_width,
            self.cmb_marker, self.sld_marker_size, self.btn_toggle_controls,
        )
        for w in widgets:
            w.blockSignals(True)

        self.chk_colorbar.setChecked(chart.colorbar_visible)
        self.chk_grid.setChecked(chart.grid_visible)
        self.chk_ticks.setChecked(chart.show_ticks)
        self.cmb_surface_type.setCurrentText(chart.surface_type)
        self.cmb_interpolation.setCurrentIndex(self.cmb_interpolation.findData(chart.interpolation))
        self.sld_face_alpha.setValue(round(chart.face_alpha * 100))
        self.sld_line_width.setValue(round(chart.line_width * 10))
        self.cmb_marker.setCurrentText(chart.marker)
        self.sld_marker_size.setValue(round(min(chart.marker_size, 100.0)))
        self.sld_face_alpha.setToolTip(f"{chart.face_alpha:g}")
        self.sld_line_width.setToolTip(f"{chart.line_width:g}")
        self.sld_marker_size.setToolTip(f"{chart.marker_size:g}")

        self.btn_toggle_controls.setChecked(chart.controls)
        self.btn_toggle_controls.setToolTip("Hide chart controls" if chart.controls else "Show chart controls")
        self.controls_panel.setVisible(chart.controls)

        for w in widgets:
            w.blockSignals(False)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._redraw_timer.stop()
        self.plotter.close()
        event.accept()
