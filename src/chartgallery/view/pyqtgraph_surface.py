"""
PyQtGraph Render Surface
========================
Draws 2-D line charts into a pyqtgraph PlotWidget and reports clicks on lines.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Qt

from chartgallery import config
from chartgallery.core.visuals import AxesVisual, Color, PolylineVisual, Visual, style_of

logger = logging.getLogger(__name__)

PEN_STYLES = {
    "-": Qt.PenStyle.SolidLine,
    "--": Qt.PenStyle.DashLine,
    ":": Qt.PenStyle.DotLine,
    "-.": Qt.PenStyle.DashDotLine,
}


def to_qcolor_tuple(color: Color) -> tuple[int, int, int]:
    if isinstance(color, str):
        return 0, 0, 0
    return tuple(int(round(255 * c)) for c in color)  # type: ignore[return-value]


class PyQtGraphSurface:
    """
    Args:
        plot_widget: Target plot.
        on_line_clicked: Called with the visual name of a clicked line.
    """

    def __init__(
        self,
        plot_widget: pg.PlotWidget,
        on_line_clicked: Optional[Callable[[str], None]] = None
    ) -> None:
        self.plot_widget = plot_widget
        self.on_line_clicked = on_line_clicked
        self._items: dict[str, pg.PlotDataItem] = {}
        self._visuals: dict[str, Visual] = {}

        self.plot_widget.setBackground('w')

    def show(self, visual: Visual) -> None:
        self._visuals[visual.name] = replace(visual)
        if isinstance(visual, PolylineVisual):
            self._show_line(visual)
        elif isinstance(visual, AxesVisual):
            self._apply_axes(visual)
        else:
            raise TypeError(f"{type(visual).__name__} is not supported by a 2-D plot.")

    def restyle(self, visual: Visual) -> None:
        current = self._visuals.get(visual.name)
        if current is None:
            return
        updated = replace(current, **style_of(visual))
        self._visuals[visual.name] = updated
        if isinstance(updated, PolylineVisual):
            item = self._items.get(updated.name)
            if item is not None:
                item.setPen(self._pen(updated))
                item.setVisible(updated.visible)
        elif isinstance(updated, AxesVisual):
            self._apply_axes(updated)

    def remove(self, name: str) -> None:
        self._visuals.pop(name, None)
        item = self._items.pop(name, None)
        if item is not None:
            self.plot_widget.removeItem(item)

    def redraw(self) -> None:
        # pyqtgraph repaints on its own; make sure new data is in view
        self.plot_widget.getPlotItem().enableAutoRange()

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    @staticmethod
    def _pen(visual: PolylineVisual) -> pg.QtGui.QPen:
        return pg.mkPen(
            color=to_qcolor_tuple(visual.color),
            width=visual.line_width,
            style=PEN_STYLES.get(visual.line_style, Qt.PenStyle.SolidLine),
        )

    def _show_line(self, visual: PolylineVisual) -> None:
        points = np.asarray(visual.points, dtype=np.float64).reshape(-1, 3)
        item = self._items.get(visual.name)
        if item is None:
            item = pg.PlotDataItem(connect="finite")
            item.setCurveClickable(True, width=8)
            item.sigClicked.connect(lambda _item, *_args, name=visual.name: self._clicked(name))
            self.plot_widget.addItem(item)
            self._items[visual.name] = item

        item.setData(points[:, 0], points[:, 1], connect="finite")
        item.setPen(self._pen(visual))
        item.setVisible(visual.visible and visual.line_style != "none")

    def _apply_axes(self, visual: AxesVisual) -> None:
        self.plot_widget.showGrid(x=visual.x_grid, y=visual.y_grid, alpha=0.3)
        self.plot_widget.setTitle(visual.title, color='black')
        self.plot_widget.setLabel('bottom', visual.x_label, color='black')
        self.plot_widget.setLabel('left', visual.y_label, color='black')

        # Only the y axis takes the axes colour; the x axis keeps the default
        x_color = to_qcolor_tuple(config.DEFAULT_AXIS_COLOR)
        y_color = to_qcolor_tuple(visual.axis_color)
        for side, colour in (('bottom', x_color), ('left', y_color)):
            axis = self.plot_widget.getAxis(side)
            axis.setPen(pg.mkPen(color=colour))
            axis.setTextPen(pg.mkPen(color=colour))

    def _clicked(self, name: str) -> None:
        logger.debug(f"Line '{name}' clicked.")
        if self.on_line_clicked is not None:
            self.on_line_clicked(name)
