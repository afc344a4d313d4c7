"""
PyVista Render Surface
======================
Draws chart visuals into a PyVista plotter (usually a pyvistaqt QtInteractor).

Every visual name owns a list of actors. ``show`` replaces them; ``restyle``
rebuilds them from the cached geometry with the new style, which keeps the
actor bookkeeping in one place.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

import numpy as np
import numpy.typing as npt
import pyvista as pv
from vtkmodules.vtkRenderingCore import vtkBillboardTextActor3D

from chartgallery.core.visuals import (
    AxesVisual, Color, MeshVisual, PointsVisual, PolylineVisual, TextVisual, Visual, style_of
)

logger = logging.getLogger(__name__)

CMAP = "viridis"
SCALARS_NAME = "value"


class PyVistaSurface:
    def __init__(self, plotter: pv.Plotter) -> None:
        self.plotter = plotter
        self._actors: dict[str, list[Any]] = {}
        self._visuals: dict[str, Visual] = {}
        self._scalar_bar_title: Optional[str] = None

        self._init_plotter()

    # ------------------------------------------------------------------------------
    # RenderSurface
    # ------------------------------------------------------------------------------

    def show(self, visual: Visual) -> None:
        self._clear(visual.name)
        self._visuals[visual.name] = replace(visual)

        if isinstance(visual, MeshVisual):
            actors = self._draw_mesh(visual)
        elif isinstance(visual, PolylineVisual):
            actors = self._draw_polyline(visual)
        elif isinstance(visual, PointsVisual):
            actors = self._draw_points(visual)
        elif isinstance(visual, TextVisual):
            actors = self._draw_text(visual)
        elif isinstance(visual, AxesVisual):
            actors = self._draw_axes(visual)
        else:
            raise TypeError(f"Unsupported visual type: {type(visual).__name__}")

        self._actors[visual.name] = actors

        # The colorbar follows the surface mesh
        if isinstance(visual, MeshVisual):
            self._sync_scalar_bar()

    def restyle(self, visual: Visual) -> None:
        current = self._visuals.get(visual.name)
        if current is None:
            return
        self.show(replace(current, **style_of(visual)))

    def remove(self, name: str) -> None:
        self._clear(name)
        self._visuals.pop(name, None)

    def redraw(self) -> None:
        self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal: Drawing
    # ------------------------------------------------------------------------------

    def _init_plotter(self) -> None:
        self.plotter.set_background("white")
        self.plotter.enable_parallel_projection()
        self.plotter.view_xy()

    def _clear(self, name: str) -> None:
        for actor in self._actors.pop(name, []):
            if isinstance(actor, vtkBillboardTextActor3D):
                self.plotter.renderer.RemoveActor(actor)
            else:
                self.plotter.remove_actor(actor)

    def _draw_mesh(self, visual: MeshVisual) -> list[Any]:
        if not visual.visible:
            return []
        pd = mesh_to_polydata(visual.vertices, visual.faces, visual.scalars)
        if pd.n_cells == 0:
            return []

        clim = finite_range(visual.scalars)
        actors = []

        if visual.face_alpha > 0.0 and visual.face_color != "none":
            actors.append(self.plotter.add_mesh(
                pd,
                **color_args(visual.face_color, clim),
                opacity=visual.face_alpha,
                lighting=visual.face_lighting != "none",
                smooth_shading=visual.face_lighting == "gouraud",
                show_scalar_bar=False,
                pickable=True,
            ))

        if visual.edge_alpha > 0.0 and visual.edge_color != "none" and visual.line_style != "none":
            actors.append(self.plotter.add_mesh(
                pd,
                style="wireframe",
                **color_args(visual.edge_color, clim),
                opacity=visual.edge_alpha,
                line_width=visual.line_width,
                lighting=visual.edge_lighting != "none",
                show_scalar_bar=False,
                pickable=False,
            ))

        return actors

    def _draw_polyline(self, visual: PolylineVisual) -> list[Any]:
        if not visual.visible or visual.line_style == "none":
            return []
        pd = polyline_to_polydata(visual.points)
        if pd.n_cells == 0:
            return []
        return [self.plotter.add_mesh(
            pd,
            color=as_rgb(visual.color),
            line_width=visual.line_width,
            pickable=False,
            render_lines_as_tubes=False,
            show_scalar_bar=False,
        )]

    def _draw_points(self, visual: PointsVisual) -> list[Any]:
        if not visual.visible or visual.marker == "none":
            return []
        points = np.asarray(visual.points, dtype=np.float64).reshape(-1, 3)
        finite = np.isfinite(points).all(axis=1)
        if not finite.any():
            return []

        pd = pv.PolyData(points[finite])
        pd.point_data[SCALARS_NAME] = np.asarray(visual.scalars, dtype=np.float64)[finite]
        colour = visual.face_color if visual.face_color != "none" else visual.edge_color
        return [self.plotter.add_mesh(
            pd,
            **color_args(colour, finite_range(pd.point_data[SCALARS_NAME])),
            point_size=max(2.0, float(np.sqrt(visual.marker_size))),
            render_points_as_spheres=visual.marker in ("o", "."),
            show_scalar_bar=False,
            pickable=True,
        )]

    def _draw_text(self, visual: TextVisual) -> list[Any]:
        if not visual.visible:
            return []
        actors = []
        for label in visual.labels:
            actor = vtkBillboardTextActor3D()
            actor.SetInput(label.text)
            actor.SetPosition(*label.position)
            prop = actor.GetTextProperty()
            prop.SetColor(*as_rgb(visual.color))
            prop.SetFontSize(visual.font_size)
            prop.SetJustificationToCentered()
            prop.SetVerticalJustificationToCentered()
            prop.SetOrientation(label.rotation)
            self.plotter.renderer.AddActor(actor)
            actors.append(actor)
        return actors

    def _draw_axes(self, visual: AxesVisual) -> list[Any]:
        actors = []
        if visual.title:
            actors.append(self.plotter.add_text(
                visual.title, position="upper_edge", font_size=12, color="black", name=f"{visual.name}-title"
            ))

        sx, sy, sz = visual.aspect_ratio
        self.plotter.set_scale(xscale=1.0 / sx, yscale=1.0 / sy, zscale=1.0 / sz)

        if visual.x_grid or visual.y_grid:
            self.plotter.show_grid(color=as_rgb(visual.axis_color), xtitle=visual.x_label, ytitle=visual.y_label)
        else:
            self.plotter.remove_bounds_axes()

        self._sync_scalar_bar()
        return actors

    def _sync_scalar_bar(self) -> None:
        """Show the colorbar for the surface mesh when the axes ask for one."""
        if self._scalar_bar_title is not None:
            if self._scalar_bar_title in self.plotter.scalar_bars.keys():
                self.plotter.remove_scalar_bar(self._scalar_bar_title, render=False)
            self._scalar_bar_title = None

        axes = next((v for v in self._visuals.values() if isinstance(v, AxesVisual)), None)
        mesh_actors = [
            actor for name, actor_list in self._actors.items()
            if isinstance(self._visuals.get(name), MeshVisual)
            for actor in actor_list
        ]
        if axes is None or not axes.colorbar_visible or not mesh_actors:
            return

        title = axes.colorbar_title or " "
        self.plotter.add_scalar_bar(
            title=title,
            mapper=mesh_actors[0].mapper,
            vertical=True,
            position_x=0.85,
            position_y=0.3,
        )
        self._scalar_bar_title = title


# ------------------------------------------------------------------------------
# Conversion helpers
# ------------------------------------------------------------------------------

def as_rgb(color: Color) -> tuple[float, float, float]:
    """Keywords such as "flat" have no fixed colour; they fall back to black."""
    if isinstance(color, str):
        return 0.0, 0.0, 0.0
    return tuple(float(c) for c in color)  # type: ignore[return-value]


def color_args(color: Color, clim: tuple[float, float]) -> dict[str, Any]:
    """``add_mesh`` keyword arguments for a fixed colour or colormapped scalars."""
    if color == "flat":
        return {"scalars": SCALARS_NAME, "cmap": CMAP, "clim": clim, "nan_opacity": 0.0}
    return {"color": as_rgb(color)}


def finite_range(values: npt.ArrayLike) -> tuple[float, float]:
    values = np.asarray(values, dtype=np.float64)
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return 0.0, 1.0
    low, high = float(finite.min()), float(finite.max())
    if low == high:
        return low - 0.5, high + 0.5
    return low, high


def mesh_to_polydata(
    vertices: npt.NDArray[np.float64],
    faces: npt.NDArray[np.int_],
    scalars: npt.NDArray[np.float64]
) -> pv.PolyData:
    """
    Triangle mesh without the faces that touch a "no value" (NaN) vertex.

    NaN vertices stay in the point array (zeroed) so face indices remain valid.
    """
    vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    faces = np.asarray(faces, dtype=np.int_).reshape(-1, 3)
    if vertices.shape[0] == 0 or faces.shape[0] == 0:
        return pv.PolyData()

    finite = np.isfinite(vertices).all(axis=1)
    faces = faces[finite[faces].all(axis=1)]
    if faces.shape[0] == 0:
        return pv.PolyData()

    points = np.where(finite[:, None], vertices, 0.0)
    cells = np.column_stack((np.full(faces.shape[0], 3, dtype=np.int_), faces)).ravel()
    pd = pv.PolyData(points, faces=cells)
    pd.point_data[SCALARS_NAME] = np.asarray(scalars, dtype=np.float64)
    return pd


def polyline_to_polydata(points: npt.NDArray[np.float64]) -> pv.PolyData:
    """Convert an (N, 3) polyline with NaN breaks to PolyData with one line cell per run."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    finite = np.isfinite(points).all(axis=1)
    kept = points[finite]
    if kept.shape[0] < 2:
        return pv.PolyData()

    # Split the original indices into runs of consecutive finite rows
    index = np.flatnonzero(finite)
    runs = np.split(np.arange(kept.shape[0]), np.flatnonzero(np.diff(index) > 1) + 1)

    cells = [np.hstack([[run.size], run]) for run in runs if run.size >= 2]
    if not cells:
        return pv.PolyData()

    pd = pv.PolyData(kept)
    pd.lines = np.concatenate(cells).astype(np.int_)
    return pd
