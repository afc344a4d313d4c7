"""
Materialized Visuals
====================
Backend-neutral descriptions of what a chart draws. A chart builds these in
``update()`` and hands them to a RenderSurface; cosmetic mutators edit their
style fields and hand them over again with ``restyle``.

Every visual has a ``name`` unique within its chart. Fields listed in
``GEOMETRY`` are derived data; all other fields (except ``name``) are style.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, ClassVar, Union

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

Color = Union[str, tuple[float, float, float]]


def _empty_points() -> npt.NDArray[np.float64]:
    return np.empty((0, 3), dtype=np.float64)


@dataclass
class PolylineVisual:
    """Connected line; rows of NaN break it into separate segments."""
    GEOMETRY: ClassVar[tuple[str, ...]] = ("points",)

    name: str
    points: npt.NDArray[np.float64] = field(default_factory=_empty_points)  # (N, 3)
    color: Color = (0.0, 0.0, 0.0)
    line_width: float = 1.0
    line_style: str = "-"
    visible: bool = True


@dataclass
class MeshVisual:
    """Triangulated surface coloured by a per-vertex scalar."""
    GEOMETRY: ClassVar[tuple[str, ...]] = ("vertices", "faces", "scalars")

    name: str
    vertices: npt.NDArray[np.float64] = field(default_factory=_empty_points)  # (N, 3)
    faces: npt.NDArray[np.int_] = field(default_factory=lambda: np.empty((0, 3), dtype=np.int_))
    scalars: npt.NDArray[np.float64] = field(default_factory=lambda: np.empty(0))  # (N,)
    face_color: Color = "flat"
    edge_color: Color = (0.0, 0.0, 0.0)
    face_alpha: float = 1.0
    edge_alpha: float = 1.0
    line_style: str = "-"
    line_width: float = 0.5
    face_lighting: str = "flat"
    edge_lighting: str = "none"
    visible: bool = True


@dataclass
class PointsVisual:
    """Scatter markers, optionally coloured by a per-point scalar."""
    GEOMETRY: ClassVar[tuple[str, ...]] = ("points", "scalars")

    name: str
    points: npt.NDArray[np.float64] = field(default_factory=_empty_points)  # (N, 3)
    scalars: npt.NDArray[np.float64] = field(default_factory=lambda: np.empty(0))
    marker: str = "."
    marker_size: float = 36.0
    edge_color: Color = "flat"
    face_color: Color = "none"
    visible: bool = True


@dataclass(frozen=True)
class TextLabel:
    text: str
    position: tuple[float, float, float]
    rotation: float = 0.0  # degrees, counterclockwise in the view plane


@dataclass
class TextVisual:
    """A group of text labels sharing one style."""
    GEOMETRY: ClassVar[tuple[str, ...]] = ("labels",)

    name: str
    labels: list[TextLabel] = field(default_factory=list)
    color: Color = (0.0, 0.0, 0.0)
    font_size: int = 12
    visible: bool = True


@dataclass
class AxesVisual:
    """Per-chart axes state: title, scaling and decorations."""
    GEOMETRY: ClassVar[tuple[str, ...]] = ("aspect_ratio",)

    name: str
    aspect_ratio: tuple[float, float, float] = (1.0, 1.0, 1.0)
    title: str = ""
    x_label: str = ""
    y_label: str = ""
    colorbar_visible: bool = False
    colorbar_title: str = ""
    x_grid: bool = False
    y_grid: bool = False
    axis_color: Color = (0.15, 0.15, 0.15)
    axis_line_width: float = 1.0


Visual = Union[PolylineVisual, MeshVisual, PointsVisual, TextVisual, AxesVisual]


def style_of(visual: Visual) -> dict[str, Any]:
    """The style fields of ``visual`` as a dict (everything but name and geometry)."""
    skip = {"name", *visual.GEOMETRY}
    return {f.name: getattr(visual, f.name) for f in fields(visual) if f.name not in skip}


def polyline_2d(name: str, xy: npt.ArrayLike, z: float = 0.0, **style: Any) -> PolylineVisual:
    """Lift an (N, 2) polyline into the z = ``z`` plane."""
    xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
    points = np.column_stack((xy, np.full(xy.shape[0], z)))
    return PolylineVisual(name=name, points=points, **style)
