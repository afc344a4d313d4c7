"""
Ternary Chart
=============
Barycentric plot of three non-negative variables with an interpolated surface
of a fourth (output) variable.

Why is this file needed?
------------------------
It composes the pure geometry and surface functions with the dirty-tracking
state:

1. Recompute-affecting mutators (``set_data``, ``set_resolution``,
   ``set_direction``, ``set_interpolation``, ``set_tick_rate``, ``rotate``,
   ``swap_axes``) validate, write, and mark the chart Dirty.
2. ``update()`` regenerates the surface, scatter, ticks, grid and data tips in
   one pass and only then marks the chart Clean.
3. Cosmetic properties (colours, widths, visibility, labels) write through to
   the materialized visuals and never mark it Dirty.

Labels follow the data columns: ``rotate`` and ``swap_axes`` permute both in a
single step.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

import numpy as np

from chartgallery import config
from chartgallery.core.state import ComponentState
from chartgallery.core.visuals import (
    AxesVisual, MeshVisual, PointsVisual, PolylineVisual, TextLabel, TextVisual, polyline_2d
)
from chartgallery.errors import ChartIndexError, ValidationError
from chartgallery.model import validators
from chartgallery.model.surface import InterpolationMethod, normalize_fractions, reconstruct_surface
from chartgallery.model.ternary_data import TernaryData
from chartgallery.model.ternary_geometry import (
    Direction, grid_lines, sample_grid, simplex_outline, tick_positions, to_barycentric,
    to_cartesian, triangulate
)
from chartgallery.view.surface import HeadlessSurface, RenderSurface

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

SURFACE_TYPES = ("surface", "mesh")
MARKERS = (".", "o", "+", "*", "x", "s", "d", "^", "v", "none")
LINE_STYLES = ("-", "--", ":", "-.", "none")
LIGHTING = ("flat", "gouraud", "none")

# Surface style applied when the surface type changes
SURFACE_PRESETS: dict[str, dict[str, Any]] = {
    "surface": {
        "face_color": "flat",
        "edge_color": (0.0, 0.0, 0.0),
        "face_alpha": 1.0,
        "face_lighting": "flat",
        "edge_lighting": "none",
    },
    "mesh": {
        "edge_color": "flat",
        "face_alpha": 0.0,
        "face_lighting": "none",
        "edge_lighting": "flat",
    },
}

# Axis label anchors (x, y, z) and rotations in degrees
_SIN30 = 0.5
LABEL_LAYOUT: dict[str, tuple[tuple[float, float, float], float]] = {
    "x": ((0.0, -0.08, 0.0), 0.0),
    "left": ((-0.45 * _SIN30 - 0.08, np.sqrt(3.0) / 4.0 + 0.08, 0.0), 60.0),
    "right": ((0.45 * _SIN30 + 0.08, np.sqrt(3.0) / 4.0 + 0.08, 0.0), -60.0),
    "z": ((0.0, 0.95, 0.0), 0.0),
}

# Column order applied by rotate(); the value column never moves
ROTATION_ORDER: dict[Direction, tuple[int, int, int, int]] = {
    Direction.CLOCKWISE: (2, 0, 1, 3),
    Direction.COUNTERCLOCKWISE: (1, 2, 0, 3),
}

DataLike = Union[TernaryData, Mapping[str, "npt.ArrayLike"], "npt.ArrayLike"]


def as_ternary_data(value: DataLike) -> TernaryData:
    """Accept a TernaryData, an ordered mapping of four columns, or an (N, 4) array."""
    if isinstance(value, TernaryData):
        return value
    if isinstance(value, Mapping):
        return TernaryData.from_mapping(value)
    return TernaryData(values=value)


class TernaryChart:
    """
    Ternary surface chart.

    Args:
        data: Initial table; a single point at the C vertex when omitted.
        resolution: Grid intervals per axis.
        tick_rate: Stride between labelled ticks.
        direction: Axis orientation.
        interpolation: Surface reconstruction policy.
        surface: Where visuals are drawn. A HeadlessSurface when omitted.
        **style: Any cosmetic property, e.g. ``face_alpha=0.5``.
    """

    COSMETIC_PROPERTIES = (
        "marker", "marker_size", "marker_edge_color", "marker_face_color",
        "face_color", "edge_color", "face_alpha", "edge_alpha", "line_style",
        "line_width", "face_lighting", "edge_lighting", "show_ticks",
        "axis_line_width", "grid_visible", "grid_line_width", "scatter_visible",
        "colorbar_visible", "surface_type", "controls",
    )

    def __init__(
        self,
        data: Optional[DataLike] = None,
        *,
        resolution: int = config.DEFAULT_GRID_RESOLUTION,
        tick_rate: int = config.DEFAULT_TICK_RATE,
        direction: Union[Direction, str] = config.DEFAULT_DIRECTION,
        interpolation: Union[InterpolationMethod, str] = config.DEFAULT_INTERPOLATION,
        surface: Optional[RenderSurface] = None,
        **style: Any
    ) -> None:
        unknown = set(style) - set(self.COSMETIC_PROPERTIES)
        if unknown:
            raise TypeError(f"Unknown TernaryChart properties: {sorted(unknown)}")

        self.state = ComponentState()
        self.surface: RenderSurface = surface if surface is not None else HeadlessSurface()

        # --- Recompute-affecting state ---
        self._data: TernaryData = TernaryData.default() if data is None else as_ternary_data(data)
        self._resolution: int = validators.positive_int("resolution", resolution)
        self._tick_rate: int = validators.positive_int("tick_rate", tick_rate)
        self._direction: Direction = validators.enum_member("direction", direction, Direction)
        self._interpolation: InterpolationMethod = validators.enum_member(
            "interpolation", interpolation, InterpolationMethod
        )

        # --- Labels: x, left, right, z ---
        self._labels: list[str] = list(self._data.headers)
        self._title: str = ""
        self._surface_type: str = "surface"
        self._controls: bool = False

        # --- Materialized visuals ---
        self._mesh = MeshVisual(name="surface")
        self._scatter = PointsVisual(name="scatter")
        self._grid = polyline_2d("grid", np.empty((0, 2)), color=(0.0, 0.0, 0.0), line_width=1.0)
        self._outline = polyline_2d("outline", simplex_outline(), color=(0.0, 0.0, 0.0), line_width=2.0)
        self._ticks = TextVisual(name="ticks", font_size=10)
        self._label_text = TextVisual(name="labels", labels=self._make_labels())
        self._axes = AxesVisual(name="axes", aspect_ratio=self._aspect_ratio(self._data))

        # Data tip values per grid size: (a, b, c, z) for every surface node
        self._annotations: dict[int, tuple[npt.NDArray[np.float64], ...]] = {}
        self._scatter_annotations: tuple[npt.NDArray[np.float64], ...] = ()
        self._grid_size: int = 0

        for name, value in style.items():
            setattr(self, name, value)

        self.surface.show(self._outline)
        self.surface.show(self._label_text)
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
        Regenerate every derived visual if Dirty.

        Returns:
            True if anything was regenerated. Exceptions propagate and leave the
            chart Dirty.
        """
        return self.state.run_update(self._regenerate)

    # ------------------------------------------------------------------------------
    # Recompute-affecting properties
    # ------------------------------------------------------------------------------

    @property
    def data(self) -> TernaryData:
        return self._data

    def set_data(self, value: DataLike) -> None:
        data = as_ternary_data(value)
        self._data = data
        self.state.mark_dirty()

        self._axes.aspect_ratio = self._aspect_ratio(data)
        self.surface.show(self._axes)

    @property
    def resolution(self) -> int:
        return self._resolution

    def set_resolution(self, value: int) -> None:
        resolution = validators.positive_int("resolution", value)
        self._resolution = resolution
        self._annotations.clear()
        self.state.mark_dirty()

    @property
    def tick_rate(self) -> int:
        return self._tick_rate

    def set_tick_rate(self, value: int) -> None:
        self._tick_rate = validators.positive_int("tick_rate", value)
        self.state.mark_dirty()

    @property
    def direction(self) -> Direction:
        return self._direction

    def set_direction(self, value: Union[Direction, str]) -> None:
        self._direction = validators.enum_member("direction", value, Direction)
        self.state.mark_dirty()

    @property
    def interpolation(self) -> InterpolationMethod:
        return self._interpolation

    def set_interpolation(self, value: Union[InterpolationMethod, str]) -> None:
        self._interpolation = validators.enum_member("interpolation", value, InterpolationMethod)
        self.state.mark_dirty()

    # ------------------------------------------------------------------------------
    # Column permutations
    # ------------------------------------------------------------------------------

    def rotate(self, direction: Union[Direction, str]) -> None:
        """
        Cycle the three input columns and their labels.

        Clockwise the columns become (C, A, B), counterclockwise (B, C, A).
        Three rotations in the same direction restore the original order.
        """
        direction = validators.enum_member("direction", direction, Direction)
        self._permute(ROTATION_ORDER[direction])

    def swap_axes(self, i: int, j: int) -> None:
        """
        Exchange two input columns (1 = bottom, 2 = left, 3 = right) and their labels.

        Raises:
            ChartIndexError: If a position is not one of 1, 2, 3.
        """
        positions = []
        for prop, value in (("i", i), ("j", j)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValidationError(prop, f"expected an integer axis position, got {value!r}.")
            if not 1 <= value <= 3:
                raise ChartIndexError(f"Axis position must be 1, 2 or 3, got {value}.")
            positions.append(int(value) - 1)

        order = [0, 1, 2, 3]
        order[positions[0]], order[positions[1]] = order[positions[1]], order[positions[0]]
        self._permute(tuple(order))

    def _permute(self, order: tuple[int, ...]) -> None:
        new_data = self._data.permuted(order)
        new_labels = [self._labels[k] for k in order]
        # Cached data tips are indexed by column like the labels
        new_annotations = {
            size: tuple(annotation[k] for k in order) for size, annotation in self._annotations.items()
        }
        new_scatter = tuple(self._scatter_annotations[k] for k in order) if self._scatter_annotations else ()

        with self.state.transaction():
            self._data = new_data
            self._labels = new_labels
            self._annotations = new_annotations
            self._scatter_annotations = new_scatter
            self.state.mark_dirty()

        self._refresh_labels()

    # ------------------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------------------

    @property
    def labels(self) -> tuple[str, str, str, str]:
        """Current (bottom, left, right, value) axis labels."""
        return tuple(self._labels)  # type: ignore[return-value]

    def xlabel(self, text: str) -> None:
        self._labels[0] = self._check_text("xlabel", text)
        self._refresh_labels()

    def ylabel(self, side: str, text: str) -> None:
        side = validators.one_of("side", side, ("left", "right"))
        index = 1 if side == "left" else 2
        self._labels[index] = self._check_text("ylabel", text)
        self._refresh_labels()

    def zlabel(self, text: str) -> None:
        self._labels[3] = self._check_text("zlabel", text)
        self._refresh_labels()
        self._axes.colorbar_title = self._labels[3]
        self.surface.restyle(self._axes)

    def title(self, text: str) -> None:
        self._title = self._check_text("title", text)
        self._axes.title = self._title
        self.surface.restyle(self._axes)

    def get_title(self) -> str:
        return self._title

    def reset_labels(self) -> None:
        """Set all four labels back to the data column headers."""
        self._labels = list(self._data.headers)
        self._refresh_labels()
        self._axes.colorbar_title = self._labels[3]
        self.surface.restyle(self._axes)

    @staticmethod
    def _check_text(prop: str, text: Any) -> str:
        if not isinstance(text, str):
            raise ValidationError(prop, f"expected a string, got {type(text).__name__}.")
        return text

    def _make_labels(self) -> list[TextLabel]:
        return [
            TextLabel(text=text, position=LABEL_LAYOUT[key][0], rotation=LABEL_LAYOUT[key][1])
            for key, text in zip(("x", "left", "right", "z"), self._labels)
        ]

    def _refresh_labels(self) -> None:
        self._label_text.labels = self._make_labels()
        self.surface.show(self._label_text)
        self.state.style_changed.emit("labels")

    # ------------------------------------------------------------------------------
    # Materialized state (read-only views)
    # ------------------------------------------------------------------------------

    @property
    def mesh(self) -> MeshVisual:
        return self._mesh

    @property
    def scatter(self) -> PointsVisual:
        return self._scatter

    @property
    def grid(self) -> PolylineVisual:
        return self._grid

    @property
    def ticks(self) -> TextVisual:
        return self._ticks

    @property
    def axes(self) -> AxesVisual:
        return self._axes

    def surface_datatip(self, index: int) -> dict[str, float]:
        """
        Data tip for surface node ``index`` (row-major over the grid).

        Raises:
            ChartIndexError: If the node does not exist in the last update.
        """
        annotation = self._annotations.get(self._grid_size)
        if annotation is None:
            raise ChartIndexError("The surface has no nodes; call update() first.")
        return self._datatip(annotation, index)

    def scatter_datatip(self, index: int) -> dict[str, float]:
        """Data tip for scatter point ``index`` (points are ordered by x)."""
        if not self._scatter_annotations:
            raise ChartIndexError("The scatter series has no points; call update() first.")
        return self._datatip(self._scatter_annotations, index)

    def _datatip(self, annotation: tuple[npt.NDArray[np.float64], ...], index: int) -> dict[str, float]:
        count = annotation[0].shape[0]
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise ValidationError("index", f"expected an integer, got {index!r}.")
        if not 0 <= index < count:
            raise ChartIndexError(f"Index {index} is out of range for {count} point(s).")
        return {label: float(values[index]) for label, values in zip(self._labels, annotation)}

    # ------------------------------------------------------------------------------
    # Cosmetic properties
    # ------------------------------------------------------------------------------

    def _restyle(self, visual, prop: str, **changes: Any) -> None:
        for key, value in changes.items():
            setattr(visual, key, value)
        self.surface.restyle(visual)
        self.state.style_changed.emit(prop)

    # Scatter

    @property
    def marker(self) -> str:
        return self._scatter.marker

    @marker.setter
    def marker(self, value: str) -> None:
        self._restyle(self._scatter, "marker", marker=validators.one_of("marker", value, MARKERS))

    @property
    def marker_size(self) -> float:
        return self._scatter.marker_size

    @marker_size.setter
    def marker_size(self, value: float) -> None:
        self._restyle(self._scatter, "marker_size", marker_size=validators.finite_positive("marker_size", value))

    @property
    def marker_edge_color(self):
        return self._scatter.edge_color

    @marker_edge_color.setter
    def marker_edge_color(self, value) -> None:
        checked = validators.color("marker_edge_color", value, keywords=validators.COLOR_KEYWORDS)
        self._restyle(self._scatter, "marker_edge_color", edge_color=checked)

    @property
    def marker_face_color(self):
        return self._scatter.face_color

    @marker_face_color.setter
    def marker_face_color(self, value) -> None:
        checked = validators.color("marker_face_color", value, keywords=validators.COLOR_KEYWORDS)
        self._restyle(self._scatter, "marker_face_color", face_color=checked)

    @property
    def scatter_visible(self) -> bool:
        return self._scatter.visible

    @scatter_visible.setter
    def scatter_visible(self, value: bool) -> None:
        self._restyle(self._scatter, "scatter_visible", visible=bool(value))

    # Surface

    @property
    def face_color(self):
        return self._mesh.face_color

    @face_color.setter
    def face_color(self, value) -> None:
        checked = validators.color("face_color", value, keywords=validators.COLOR_KEYWORDS)
        self._restyle(self._mesh, "face_color", face_color=checked)

    @property
    def edge_color(self):
        return self._mesh.edge_color

    @edge_color.setter
    def edge_color(self, value) -> None:
        checked = validators.color("edge_color", value, keywords=validators.COLOR_KEYWORDS)
        self._restyle(self._mesh, "edge_color", edge_color=checked)

    @property
    def face_alpha(self) -> float:
        return self._mesh.face_alpha

    @face_alpha.setter
    def face_alpha(self, value: float) -> None:
        self._restyle(self._mesh, "face_alpha", face_alpha=validators.in_range("face_alpha", value, 0.0, 1.0))

    @property
    def edge_alpha(self) -> float:
        return self._mesh.edge_alpha

    @edge_alpha.setter
    def edge_alpha(self, value: float) -> None:
        self._restyle(self._mesh, "edge_alpha", edge_alpha=validators.in_range("edge_alpha", value, 0.0, 1.0))

    @property
    def line_style(self) -> str:
        return self._mesh.line_style

    @line_style.setter
    def line_style(self, value: str) -> None:
        self._restyle(self._mesh, "line_style", line_style=validators.one_of("line_style", value, LINE_STYLES))

    @property
    def line_width(self) -> float:
        return self._mesh.line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        self._restyle(self._mesh, "line_width", line_width=validators.finite_positive("line_width", value))

    @property
    def face_lighting(self) -> str:
        return self._mesh.face_lighting

    @face_lighting.setter
    def face_lighting(self, value: str) -> None:
        checked = validators.one_of("face_lighting", value, LIGHTING)
        self._restyle(self._mesh, "face_lighting", face_lighting=checked)

    @property
    def edge_lighting(self) -> str:
        return self._mesh.edge_lighting

    @edge_lighting.setter
    def edge_lighting(self, value: str) -> None:
        checked = validators.one_of("edge_lighting", value, LIGHTING)
        self._restyle(self._mesh, "edge_lighting", edge_lighting=checked)

    @property
    def surface_type(self) -> str:
        return self._surface_type

    @surface_type.setter
    def surface_type(self, value: str) -> None:
        """Apply the "surface" or "mesh" style preset to the surface."""
        self._surface_type = validators.one_of("surface_type", value, SURFACE_TYPES)
        self._restyle(self._mesh, "surface_type", **SURFACE_PRESETS[self._surface_type])

    # Axes and decorations

    @property
    def show_ticks(self) -> bool:
        return self._ticks.visible

    @show_ticks.setter
    def show_ticks(self, value: bool) -> None:
        self._restyle(self._ticks, "show_ticks", visible=bool(value))

    @property
    def axis_line_width(self) -> float:
        return self._outline.line_width

    @axis_line_width.setter
    def axis_line_width(self, value: float) -> None:
        width = validators.finite_positive("axis_line_width", value)
        self._restyle(self._outline, "axis_line_width", line_width=width)

    @property
    def grid_visible(self) -> bool:
        return self._grid.visible

    @grid_visible.setter
    def grid_visible(self, value: bool) -> None:
        self._restyle(self._grid, "grid_visible", visible=bool(value))

    @property
    def grid_line_width(self) -> float:
        return self._grid.line_width

    @grid_line_width.setter
    def grid_line_width(self, value: float) -> None:
        width = validators.finite_positive("grid_line_width", value)
        self._restyle(self._grid, "grid_line_width", line_width=width)

    @property
    def colorbar_visible(self) -> bool:
        return self._axes.colorbar_visible

    @colorbar_visible.setter
    def colorbar_visible(self, value: bool) -> None:
        self._restyle(self._axes, "colorbar_visible", colorbar_visible=bool(value))

    @property
    def controls(self) -> bool:
        """Whether the interactive control panel is shown."""
        return self._controls

    @controls.setter
    def controls(self, value: bool) -> None:
        self._controls = bool(value)
        self.state.style_changed.emit("controls")

    # ------------------------------------------------------------------------------
    # Regeneration
    # ------------------------------------------------------------------------------

    @staticmethod
    def _aspect_ratio(data: TernaryData) -> tuple[float, float, float]:
        z_scale = 2.0 * data.value_range()
        if not np.isfinite(z_scale) or z_scale <= 0.0:
            z_scale = 1.0
        return 1.0, 1.0, z_scale

    def _regenerate(self) -> None:
        data = self._data
        direction = self._direction
        logger.debug(
            f"Regenerating ternary chart: {data.n_rows} row(s), resolution {self._resolution}, "
            f"{direction.value}, {self._interpolation.value}."
        )

        # 1. Normalize to fractions; rows without a composition are not drawn
        fractions = normalize_fractions(data.inputs)
        keep = np.all(np.isfinite(fractions), axis=1)
        fractions = fractions[keep]
        z = data.output[keep]

        # 2. Scatter positions, ordered by x
        x, y = to_cartesian(fractions[:, 0], fractions[:, 1], fractions[:, 2], direction)
        order = np.argsort(x, kind="stable")
        x, y, z = x[order], y[order], z[order]

        # 3. Grid, triangulation and surface heights
        if fractions.shape[0] > 0:
            grid = sample_grid(fractions[:, 0], fractions[:, 1], self._resolution)
            faces = triangulate(grid.size)
            gx, gy = to_cartesian(grid.a, grid.b, grid.c, direction)
            gz = reconstruct_surface(x, y, z, gx, gy, grid.valid, self._interpolation)
            vertices = np.column_stack((gx.ravel(), gy.ravel(), gz.ravel()))
            grid_size = grid.size
        else:
            logger.debug("No data rows; drawing an empty surface.")
            faces = np.empty((0, 3), dtype=np.int_)
            vertices = np.empty((0, 3), dtype=np.float64)
            grid_size = 0

        # 4. Ticks
        tick_labels: list[TextLabel] = []
        for axis in tick_positions(self._resolution, self._tick_rate, direction):
            for (tx, ty), text in zip(axis.positions, axis.labels):
                tick_labels.append(TextLabel(text=text, position=(float(tx), float(ty), 0.0), rotation=axis.rotation))

        # 5. Grid lines
        lines = grid_lines(self._resolution)

        # 6. Data tips, back-converted from the drawn coordinates
        na, nb, nc = to_barycentric(vertices[:, 0], vertices[:, 1], direction)
        sa, sb, sc = to_barycentric(x, y, direction)

        # Commit
        self._mesh.vertices = vertices
        self._mesh.faces = faces
        self._mesh.scalars = vertices[:, 2].copy()
        self._scatter.points = np.column_stack((x, y, z))
        self._scatter.scalars = z.copy()
        self._ticks.labels = tick_labels
        self._grid.points = np.column_stack((lines, np.zeros(lines.shape[0])))
        self._grid_size = grid_size
        self._annotations = {grid_size: (na, nb, nc, vertices[:, 2].copy())} if grid_size else {}
        self._scatter_annotations = (sa, sb, sc, z.copy()) if z.size else ()
        self._axes.colorbar_title = self._labels[3]

        for visual in (self._mesh, self._scatter, self._grid, self._ticks, self._axes):
            self.surface.show(visual)
