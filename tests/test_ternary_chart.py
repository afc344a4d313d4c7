import numpy as np
import pytest

from chartgallery.charts.ternary import TernaryChart
from chartgallery.errors import ChartIndexError, ValidationError
from chartgallery.model.surface import InterpolationMethod
from chartgallery.model.ternary_data import TernaryData
from chartgallery.model.ternary_geometry import Direction
from chartgallery.view.surface import HeadlessSurface


def test_new_chart_is_dirty_until_updated(chart: TernaryChart) -> None:
    assert chart.is_dirty
    assert chart.update() is True
    assert not chart.is_dirty
    assert chart.update() is False


def test_default_chart_has_one_point_at_c() -> None:
    chart = TernaryChart()
    assert chart.labels == ("A", "B", "C", "Z")
    chart.update()
    assert chart.scatter.points.shape == (1, 3)


def test_update_materializes_every_visual(chart: TernaryChart, surface: HeadlessSurface) -> None:
    chart.update()
    assert {"surface", "scatter", "grid", "ticks", "axes", "outline", "labels"} <= set(surface.visuals)
    assert chart.mesh.vertices.shape == (81, 3)
    assert chart.mesh.faces.shape == (2 * 8 * 8, 3)


@pytest.mark.parametrize("mutate", [
    lambda c: c.set_data(TernaryData(values=[[1, 2, 3, 4], [3, 2, 1, 0]])),
    lambda c: c.set_resolution(4),
    lambda c: c.set_tick_rate(2),
    lambda c: c.set_direction("counterclockwise"),
    lambda c: c.set_interpolation("nearest"),
    lambda c: c.rotate("clockwise"),
    lambda c: c.swap_axes(1, 2),
])
def test_recompute_affecting_mutators_mark_dirty(chart: TernaryChart, mutate) -> None:
    chart.update()
    mutate(chart)
    assert chart.is_dirty
    assert chart.update() is True


@pytest.mark.parametrize("prop, value", [
    ("face_alpha", 0.3),
    ("edge_alpha", 0.5),
    ("line_width", 2.0),
    ("line_style", "--"),
    ("marker", "o"),
    ("marker_size", 10.0),
    ("marker_face_color", "red"),
    ("face_lighting", "gouraud"),
    ("grid_visible", False),
    ("show_ticks", False),
    ("colorbar_visible", True),
    ("axis_line_width", 3.0),
    ("scatter_visible", False),
])
def test_cosmetic_properties_stay_clean(chart: TernaryChart, prop: str, value) -> None:
    chart.update()
    styles = []
    chart.state.style_changed.connect(lambda name: styles.append(name))
    setattr(chart, prop, value)
    assert not chart.is_dirty
    assert styles == [prop]


def test_cosmetic_change_reaches_the_surface(chart: TernaryChart, surface: HeadlessSurface) -> None:
    chart.update()
    chart.line_width = 2.5
    chart.marker = "s"
    assert surface.get("surface").line_width == 2.5
    assert surface.get("scatter").marker == "s"


def test_surface_type_applies_a_preset(chart: TernaryChart) -> None:
    chart.update()
    chart.surface_type = "mesh"
    assert not chart.is_dirty
    assert chart.face_alpha == 0.0
    assert chart.edge_color == "flat"

    chart.surface_type = "surface"
    assert chart.face_alpha == 1.0
    assert chart.edge_color == (0.0, 0.0, 0.0)


def test_style_keywords_at_construction() -> None:
    chart = TernaryChart(face_alpha=0.5, marker="x")
    assert chart.face_alpha == 0.5
    assert chart.marker == "x"
    with pytest.raises(TypeError):
        TernaryChart(colour="red")


def test_rejected_values_leave_the_chart_unchanged(chart: TernaryChart) -> None:
    chart.update()
    data = chart.data

    with pytest.raises(ValidationError):
        chart.set_resolution(0)
    with pytest.raises(ValidationError):
        chart.set_tick_rate(1.5)
    with pytest.raises(ValidationError):
        chart.set_direction("up")
    with pytest.raises(ValidationError):
        chart.set_interpolation("spline")
    with pytest.raises(ValidationError):
        chart.set_data([[-1.0, 0.0, 0.0, 1.0]])
    with pytest.raises(ValidationError):
        chart.face_alpha = 1.5
    with pytest.raises(ValidationError):
        chart.marker = "hexagon"

    assert chart.resolution == 8
    assert chart.data is data
    assert chart.face_alpha == 1.0
    assert not chart.is_dirty


def test_failed_update_keeps_the_chart_dirty(chart: TernaryChart, monkeypatch) -> None:
    chart.update()
    vertices = chart.mesh.vertices

    def boom(*args, **kwargs):
        raise RuntimeError("interpolation failed")

    monkeypatch.setattr("chartgallery.charts.ternary.reconstruct_surface", boom)
    chart.set_resolution(4)
    with pytest.raises(RuntimeError):
        chart.update()
    assert chart.is_dirty
    assert chart.mesh.vertices is vertices

    monkeypatch.undo()
    assert chart.update() is True
    assert chart.mesh.vertices.shape == (25, 3)


def test_three_rotations_restore_the_original(chart: TernaryChart) -> None:
    data, labels = chart.data, chart.labels
    for _ in range(3):
        chart.rotate("clockwise")
    assert chart.data == data
    assert chart.labels == labels


def test_rotation_moves_data_and_labels_together(chart: TernaryChart) -> None:
    original = chart.data.values.copy()
    chart.rotate(Direction.CLOCKWISE)
    np.testing.assert_array_equal(chart.data.values, original[:, [2, 0, 1, 3]])
    assert chart.labels == ("Cr", "Fe", "Ni", "Hardness")
    assert chart.data.headers == chart.labels

    chart.rotate("counterclockwise")
    np.testing.assert_array_equal(chart.data.values, original)
    assert chart.labels == ("Fe", "Ni", "Cr", "Hardness")


def test_rotation_is_one_visible_step(chart: TernaryChart) -> None:
    chart.update()
    events = []
    chart.state.dirty_changed.connect(lambda dirty: events.append((dirty, chart.labels[0], chart.data.headers[0])))
    chart.rotate("clockwise")
    assert events == [(True, "Cr", "Cr")]


def test_swap_is_an_involution(chart: TernaryChart) -> None:
    data = chart.data
    chart.swap_axes(1, 3)
    assert chart.labels == ("Cr", "Ni", "Fe", "Hardness")
    chart.swap_axes(1, 3)
    assert chart.data == data
    assert chart.labels == ("Fe", "Ni", "Cr", "Hardness")


def test_swap_with_itself_still_marks_dirty(chart: TernaryChart) -> None:
    chart.update()
    chart.swap_axes(2, 2)
    assert chart.is_dirty


def test_swap_rejects_bad_positions(chart: TernaryChart) -> None:
    chart.update()
    data = chart.data
    with pytest.raises(ChartIndexError):
        chart.swap_axes(0, 1)
    with pytest.raises(ChartIndexError):
        chart.swap_axes(1, 4)
    with pytest.raises(ValidationError):
        chart.swap_axes(1, 1.5)
    assert chart.data is data
    assert not chart.is_dirty


def test_labels(chart: TernaryChart, surface: HeadlessSurface) -> None:
    chart.xlabel("Iron")
    chart.ylabel("right", "Chromium")
    chart.zlabel("HV")
    chart.title("Hardness map")
    assert chart.labels == ("Iron", "Ni", "Chromium", "HV")
    assert chart.get_title() == "Hardness map"
    assert [label.text for label in surface.get("labels").labels] == ["Iron", "Ni", "Chromium", "HV"]
    assert chart.axes.colorbar_title == "HV"

    with pytest.raises(ValidationError):
        chart.ylabel("top", "x")
    with pytest.raises(ValidationError):
        chart.xlabel(3)

    chart.reset_labels()
    assert chart.labels == ("Fe", "Ni", "Cr", "Hardness")


def test_custom_labels_follow_rotation(chart: TernaryChart) -> None:
    chart.xlabel("Iron")
    chart.rotate("clockwise")
    assert chart.labels[1] == "Iron"


def test_empty_data_gives_empty_geometry(chart: TernaryChart) -> None:
    chart.set_data(np.empty((0, 4)))
    assert chart.update() is True
    assert chart.mesh.vertices.shape == (0, 3)
    assert chart.mesh.faces.shape == (0, 3)
    assert chart.scatter.points.shape == (0, 3)
    assert len(chart.ticks.labels) == 3 * 8
    with pytest.raises(ChartIndexError):
        chart.surface_datatip(0)
    with pytest.raises(ChartIndexError):
        chart.scatter_datatip(0)


def test_minimal_grid_spans_the_corners(corner_data: TernaryData) -> None:
    chart = TernaryChart(corner_data, resolution=1)
    chart.update()
    assert chart.mesh.vertices.shape == (4, 3)
    assert chart.mesh.faces.shape == (2, 3)

    corners = {}
    for i in range(3):
        tip = chart.surface_datatip(i)
        corners[(round(tip["A"], 9), round(tip["B"], 9), round(tip["C"], 9))] = tip["Z"]
    assert set(corners) == {(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)}
    assert corners[(1.0, 0.0, 0.0)] == pytest.approx(1.0)
    assert corners[(0.0, 1.0, 0.0)] == pytest.approx(2.0)
    assert corners[(0.0, 0.0, 1.0)] == pytest.approx(3.0)

    # The fourth node lies outside the simplex
    assert np.isnan(chart.surface_datatip(3)["Z"])


def test_identical_rows_do_not_raise() -> None:
    chart = TernaryChart([[1.0, 1.0, 1.0, 5.0], [2.0, 2.0, 2.0, 5.0]], resolution=3)
    chart.update()
    scalars = chart.mesh.scalars
    assert np.all(np.isnan(scalars) | np.isclose(scalars, 5.0))


@pytest.mark.parametrize("method", list(InterpolationMethod))
def test_two_points_leave_the_surface_mostly_empty(method: InterpolationMethod) -> None:
    chart = TernaryChart([[1.0, 0.0, 1.0, 1.0], [0.0, 1.0, 1.0, 2.0]], resolution=4, interpolation=method)
    chart.update()
    assert np.isfinite(chart.mesh.scalars).sum() <= 2


def test_rows_without_a_composition_are_not_drawn() -> None:
    chart = TernaryChart([[0, 0, 0, 1], [1, 0, 0, 2], [0, 1, 0, 3], [0, 0, 1, 4]])
    chart.update()
    assert chart.scatter.points.shape == (3, 3)


def test_scatter_is_ordered_by_x(chart: TernaryChart) -> None:
    chart.update()
    assert np.all(np.diff(chart.scatter.points[:, 0]) >= 0.0)


def test_scatter_datatip_reports_fractions() -> None:
    chart = TernaryChart([[1.0, 2.0, 1.0, 7.0]])
    chart.update()
    assert chart.scatter_datatip(0) == pytest.approx({"A": 0.25, "B": 0.5, "C": 0.25, "Z": 7.0})


@pytest.mark.parametrize("direction", list(Direction))
def test_surface_datatips_match_the_grid(random_data: TernaryData, direction: Direction) -> None:
    chart = TernaryChart(random_data, resolution=5, direction=direction)
    chart.update()
    tip = chart.surface_datatip(7)
    assert tip["Fe"] + tip["Ni"] + tip["Cr"] == pytest.approx(1.0)
    assert tip["Hardness"] == pytest.approx(chart.mesh.scalars[7], nan_ok=True)


def test_datatips_are_dropped_with_the_resolution(chart: TernaryChart) -> None:
    chart.update()
    chart.surface_datatip(0)
    chart.set_resolution(4)
    with pytest.raises(ChartIndexError):
        chart.surface_datatip(0)
    chart.update()
    chart.surface_datatip(24)


def test_datatip_index_checks(chart: TernaryChart) -> None:
    chart.update()
    with pytest.raises(ChartIndexError):
        chart.surface_datatip(81)
    with pytest.raises(ChartIndexError):
        chart.scatter_datatip(-1)
    with pytest.raises(ValidationError):
        chart.scatter_datatip(0.5)


def test_ticks_and_grid_follow_resolution(chart: TernaryChart) -> None:
    chart.set_tick_rate(2)
    chart.update()
    assert len(chart.ticks.labels) == 3 * 4
    assert chart.grid.points.shape == (9 * 7, 3)
    assert np.all(chart.grid.points[:, 2] == 0.0)


def test_aspect_ratio_follows_the_value_range(corner_data: TernaryData) -> None:
    chart = TernaryChart(corner_data)
    assert chart.axes.aspect_ratio == (1.0, 1.0, 4.0)
    chart.set_data([[1, 0, 0, 2.0], [0, 1, 0, 2.0]])
    assert chart.axes.aspect_ratio == (1.0, 1.0, 1.0)


def test_interpolation_alias() -> None:
    chart = TernaryChart(interpolation="v4")
    assert chart.interpolation is InterpolationMethod.BIHARMONIC


def test_controls_toggle_is_cosmetic(chart: TernaryChart) -> None:
    chart.update()
    chart.controls = True
    assert chart.controls is True
    assert not chart.is_dirty


def test_datatips_follow_a_rotation_before_the_next_update() -> None:
    chart = TernaryChart([[1.0, 2.0, 7.0, 5.0], [3.0, 3.0, 4.0, 6.0], [6.0, 2.0, 2.0, 1.0]], resolution=3)
    chart.update()
    scatter_before = chart.scatter_datatip(0)
    surface_before = chart.surface_datatip(5)

    chart.rotate("clockwise")
    assert chart.is_dirty
    assert chart.labels == ("C", "A", "B", "Z")
    assert chart.scatter_datatip(0) == pytest.approx(scatter_before)
    assert chart.surface_datatip(5) == pytest.approx(surface_before, nan_ok=True)


def test_datatips_follow_a_swap_before_the_next_update() -> None:
    chart = TernaryChart([[1.0, 2.0, 7.0, 5.0]])
    chart.update()
    chart.swap_axes(1, 3)
    assert chart.scatter_datatip(0) == pytest.approx({"C": 0.7, "B": 0.2, "A": 0.1, "Z": 5.0})


def test_resolution_given_as_text_is_rejected(chart: TernaryChart) -> None:
    chart.update()
    with pytest.raises(ValidationError):
        chart.set_resolution("3")
    assert chart.resolution == 8
    assert not chart.is_dirty
