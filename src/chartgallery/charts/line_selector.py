"""
Line Selector Chart
===================
A collection of line plots drawn on a common [0, 1] scale. Selecting one line
highlights it in its own units and maps every other line into that range.

Recompute-affecting: ``set_x_data``, ``set_y_data``.
Cosmetic: colours, line widths and the axes grids.
Selection changes line data but is driven by the user, so it never marks the
chart Dirty.
"""
from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from chartgallery import config
from chartgallery.core.state import ComponentState
from chartgallery.core.visuals import AxesVisual, PolylineVisual
from chartgallery.errors import ChartIndexError, ValidationError
from chartgallery.model import validators
from chartgallery.view.surface import HeadlessSurface, RenderSurface

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

LINE_NAME_PREFIX = "line"


def line_name(index: int) -> str:
    """Visual name of line ``index`` (1-based)."""
    return f"{LINE_NAME_PREFIX}{index}"


def column_limits(y: npt.NDArray[np.float64]) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Column-wise minimum and range, ignoring NaN.

    All-NaN columns give NaN. Constant columns get a range of 1 so they
    rescale to 0 instead of dividing by zero.
    """
    if y.shape[0] == 0:
        return np.full(y.shape[1], np.nan), np.full(y.shape[1], np.nan)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        low = np.nanmin(y, axis=0)
        high = np.nanmax(y, axis=0)
    span = high - low
    span[span == 0.0] = 1.0
    return low, span


class LineSelectorChart:
    """
    Line collection with single-line selection.

    Args:
        x_data: (n,) shared x coordinates.
        y_data: (n,) or (n, m) values, one column per line.
        surface: Where visuals are drawn. A HeadlessSurface when omitted.
        **style: Any cosmetic property, e.g. ``trace_color="k"``.
    """

    COSMETIC_PROPERTIES = (
        "trace_color", "selected_color", "trace_line_width",
        "selected_line_width", "x_grid", "y_grid",
    )

    def __init__(
        self,
        x_data: Optional[npt.ArrayLike] = None,
        y_data: Optional[npt.ArrayLike] = None,
        *,
        surface: Optional[RenderSurface] = None,
        **style: Any
    ) -> None:
        unknown = set(style) - set(self.COSMETIC_PROPERTIES)
        if unknown:
            raise TypeError(f"Unknown LineSelectorChart properties: {sorted(unknown)}")

        self.state = ComponentState()
        self.surface: RenderSurface = surface if surface is not None else HeadlessSurface()

        self._x: npt.NDArray[np.float64] = np.empty(0)
        self._y: npt.NDArray[np.float64] = np.empty((0, 1))

        self._trace_color = config.DEFAULT_TRACE_COLOR
        self._selected_color = config.DEFAULT_SELECTED_COLOR
        self._trace_line_width = config.DEFAULT_TRACE_LINE_WIDTH
        self._selected_line_width = config.DEFAULT_SELECTED_LINE_WIDTH

        self._lines: list[PolylineVisual] = []
        self._axes = AxesVisual(name="axes", x_grid=True, y_grid=True, axis_color=config.DEFAULT_AXIS_COLOR)
        self._selected: int = 0

        # Limits of the materialized data, used by select()
        self._y_min: npt.NDArray[np.float64] = np.empty(0)
        self._y_span: npt.NDArray[np.float64] = np.empty(0)
        self._y_drawn: npt.NDArray[np.float64] = np.empty((0, 0))
        self._x_drawn: npt.NDArray[np.float64] = np.empty(0)

        if x_data is not None:
            self.set_x_data(x_data)
        if y_data is not None:
            self.set_y_data(y_data)
        for name, value in style.items():
            setattr(self, name, value)

        self.surface.show(self._axes)

    # ------------------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self.state.is_dirty

    def mark_dirty(self) -> None:
        self.state.mark_dirty()

    def update(self) -> bool:
        """
        Rebuild the lines if Dirty, then re-apply the decorative properties.

        Returns:
            True if the lines were rebuilt.
        """
        regenerated = self.state.run_update(self._regenerate)
        self._apply_decorations()
        return regenerated

    # ------------------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------------------

    @property
    def x_data(self) -> npt.NDArray[np.float64]:
        return self._x.copy()

    @property
    def y_data(self) -> npt.NDArray[np.float64]:
        return self._y.copy()

    def set_x_data(self, value: npt.ArrayLike) -> None:
        """
        Replace the x coordinates.

        Shorter x truncates the rows of y; longer x pads y with NaN rows.
        """
        x = self._as_real("x_data", value).ravel()
        n_x, n_y = x.size, self._y.shape[0]
        if n_x < n_y:
            y = self._y[:n_x]
        else:
            y = np.vstack((self._y, np.full((n_x - n_y, self._y.shape[1]), np.nan)))

        self._x = x
        self._y = y
        self.state.mark_dirty()

    def set_y_data(self, value: npt.ArrayLike) -> None:
        """
        Replace the line values. A 1-D array is one line.

        Shorter y truncates x; longer y pads x with NaN.
        """
        y = self._as_real("y_data", value)
        if y.ndim <= 1:
            y = y.reshape(-1, 1)
        elif y.ndim > 2:
            raise ValidationError("y_data", f"expected a 1-D or 2-D array, got {y.ndim} dimensions.")

        n_x, n_y = self._x.size, y.shape[0]
        if n_y < n_x:
            x = self._x[:n_y]
        else:
            x = np.concatenate((self._x, np.full(n_y - n_x, np.nan)))

        self._x = x
        self._y = y
        self.state.mark_dirty()

    @staticmethod
    def _as_real(prop: str, value: npt.ArrayLike) -> npt.NDArray[np.float64]:
        try:
            array = np.array(value, dtype=np.float64)
        except (TypeError, ValueError):
            raise ValidationError(prop, "expected real numeric values.") from None
        return array

    @property
    def n_lines(self) -> int:
        """Number of materialized lines."""
        return len(self._lines)

    @property
    def lines(self) -> tuple[PolylineVisual, ...]:
        return tuple(self._lines)

    @property
    def axes(self) -> AxesVisual:
        return self._axes

    # ------------------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------------------

    @property
    def selected(self) -> int:
        """1-based index of the selected line, 0 when none is selected."""
        return self._selected

    def select(self, index: int) -> None:
        """
        Highlight line ``index`` (1-based); 0 clears the selection.

        Raises:
            ValidationError: If ``index`` is not a non-negative integer.
            ChartIndexError: If ``index`` exceeds the number of lines.
        """
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)) or index < 0:
            raise ValidationError("index", f"expected a non-negative integer, got {index!r}.")
        if index == 0:
            self.deselect()
            return
        if index > len(self._lines):
            raise ChartIndexError(
                f"Line index must not exceed the number of lines, {len(self._lines)}; got {index}."
            )

        k = int(index) - 1
        self._selected = int(index)
        for i, visual in enumerate(self._lines):
            if i == k:
                y = self._y_drawn[:, k]
                visual.color = self._selected_color
                visual.line_width = self._selected_line_width
            else:
                scaled = (self._y_drawn[:, i] - self._y_min[i]) / self._y_span[i]
                y = scaled * self._y_span[k] + self._y_min[k]
                visual.color = self._trace_color
                visual.line_width = self._trace_line_width
            visual.points = self._line_points(y)
            self.surface.show(visual)

        self._axes.axis_color = self._selected_color
        self.surface.restyle(self._axes)
        self.state.style_changed.emit("selected")

    def deselect(self) -> None:
        """Grey out all lines and put them back on the common [0, 1] scale."""
        self._selected = 0
        for i, visual in enumerate(self._lines):
            visual.color = self._trace_color
            visual.line_width = self._trace_line_width
            visual.points = self._line_points(self._scaled(i))
            self.surface.show(visual)

        self._axes.axis_color = config.DEFAULT_AXIS_COLOR
        self.surface.restyle(self._axes)
        self.state.style_changed.emit("selected")

    def select_by_name(self, name: str) -> None:
        """Select the line whose visual is called ``name`` (used by click handlers)."""
        for i, visual in enumerate(self._lines, start=1):
            if visual.name == name:
                self.select(i)
                return
        raise ChartIndexError(f"No line named '{name}'.")

    # ------------------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------------------

    def xlabel(self, text: str) -> None:
        self._axes.x_label = self._check_text("xlabel", text)
        self.surface.restyle(self._axes)

    def ylabel(self, text: str) -> None:
        self._axes.y_label = self._check_text("ylabel", text)
        self.surface.restyle(self._axes)

    def title(self, text: str) -> None:
        self._axes.title = self._check_text("title", text)
        self.surface.restyle(self._axes)

    @staticmethod
    def _check_text(prop: str, text: Any) -> str:
        if not isinstance(text, str):
            raise ValidationError(prop, f"expected a string, got {type(text).__name__}.")
        return text

    # ------------------------------------------------------------------------------
    # Cosmetic properties
    # ------------------------------------------------------------------------------

    @property
    def trace_color(self) -> tuple[float, float, float]:
        return self._trace_color

    @trace_color.setter
    def trace_color(self, value) -> None:
        self._trace_color = validators.color("trace_color", value)
        for i, visual in enumerate(self._lines, start=1):
            if i != self._selected:
                visual.color = self._trace_color
                self.surface.restyle(visual)
        self.state.style_changed.emit("trace_color")

    @property
    def selected_color(self) -> tuple[float, float, float]:
        return self._selected_color

    @selected_color.setter
    def selected_color(self, value) -> None:
        self._selected_color = validators.color("selected_color", value)
        if self._selected:
            visual = self._lines[self._selected - 1]
            visual.color = self._selected_color
            self.surface.restyle(visual)
            self._axes.axis_color = self._selected_color
            self.surface.restyle(self._axes)
        self.state.style_changed.emit("selected_color")

    @property
    def trace_line_width(self) -> float:
        return self._trace_line_width

    @trace_line_width.setter
    def trace_line_width(self, value: float) -> None:
        self._trace_line_width = validators.finite_positive("trace_line_width", value)
        for i, visual in enumerate(self._lines, start=1):
            if i != self._selected:
                visual.line_width = self._trace_line_width
                self.surface.restyle(visual)
        self.state.style_changed.emit("trace_line_width")

    @property
    def selected_line_width(self) -> float:
        return self._selected_line_width

    @selected_line_width.setter
    def selected_line_width(self, value: float) -> None:
        self._selected_line_width = validators.finite_positive("selected_line_width", value)
        if self._selected:
            visual = self._lines[self._selected - 1]
            visual.line_width = self._selected_line_width
            self.surface.restyle(visual)
        self.state.style_changed.emit("selected_line_width")

    @property
    def x_grid(self) -> bool:
        return self._axes.x_grid

    @x_grid.setter
    def x_grid(self, value: bool) -> None:
        self._axes.x_grid = bool(value)
        self.surface.restyle(self._axes)
        self.state.style_changed.emit("x_grid")

    @property
    def y_grid(self) -> bool:
        return self._axes.y_grid

    @y_grid.setter
    def y_grid(self, value: bool) -> None:
        self._axes.y_grid = bool(value)
        self.surface.restyle(self._axes)
        self.state.style_changed.emit("y_grid")

    # ------------------------------------------------------------------------------
    # Regeneration
    # ------------------------------------------------------------------------------

    def _scaled(self, i: int) -> npt.NDArray[np.float64]:
        return (self._y_drawn[:, i] - self._y_min[i]) / self._y_span[i]

    def _line_points(self, y: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return np.column_stack((self._x_drawn, y, np.zeros_like(y)))

    def _regenerate(self) -> None:
        x, y = self._x.copy(), self._y.copy()
        n_new = y.shape[1]
        logger.debug(f"Regenerating line selector chart: {n_new} line(s) of {x.size} point(s).")

        y_min, y_span = column_limits(y)

        stale = self._lines[n_new:]
        lines = self._lines[:n_new]
        for k in range(len(lines), n_new):
            lines.append(PolylineVisual(name=line_name(k + 1)))

        self._x_drawn, self._y_drawn = x, y
        self._y_min, self._y_span = y_min, y_span
        self._lines = lines
        for visual in stale:
            self.surface.remove(visual.name)
        self.deselect()

    def _apply_decorations(self) -> None:
        self.surface.restyle(self._axes)
        for i, visual in enumerate(self._lines, start=1):
            visual.line_width = self._selected_line_width if i == self._selected else self._trace_line_width
            self.surface.restyle(visual)
