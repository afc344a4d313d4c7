import numpy as np
import pytest

from chartgallery.model.surface import InterpolationMethod, normalize_fractions, reconstruct_surface
from chartgallery.model.ternary_geometry import SIN60

# Triangle corners plus the centroid
SAMPLE_X = np.array([0.5, -0.5, 0.0, 0.0])
SAMPLE_Y = np.array([0.0, 0.0, SIN60, SIN60 / 3.0])

INSIDE_X = np.array([0.0, 0.1, -0.1])
INSIDE_Y = np.array([0.3, 0.2, 0.1])


def plane(x, y):
    return 2.0 * x + 3.0 * y + 1.0


def reconstruct(x, y, z, qx, qy, method: InterpolationMethod) -> np.ndarray:
    qx = np.asarray(qx, dtype=float)
    qy = np.asarray(qy, dtype=float)
    return reconstruct_surface(x, y, z, qx, qy, np.ones(qx.shape, dtype=bool), method)


def test_normalize_fractions() -> None:
    fractions = normalize_fractions([[2.0, 1.0, 1.0], [0.0, 0.0, 0.0], [0.0, 3.0, 0.0]])
    np.testing.assert_allclose(fractions[0], [0.5, 0.25, 0.25])
    assert np.all(np.isnan(fractions[1]))
    np.testing.assert_allclose(fractions[2], [0.0, 1.0, 0.0])


def test_v4_is_an_alias_for_biharmonic() -> None:
    assert InterpolationMethod("v4") is InterpolationMethod.BIHARMONIC


def test_linear_reproduces_a_plane() -> None:
    z = plane(SAMPLE_X, SAMPLE_Y)
    out = reconstruct(SAMPLE_X, SAMPLE_Y, z, INSIDE_X, INSIDE_Y, InterpolationMethod.LINEAR)
    np.testing.assert_allclose(out, plane(INSIDE_X, INSIDE_Y))


def test_nearest_is_limited_to_the_hull() -> None:
    z = np.array([1.0, 2.0, 3.0, 4.0])
    out = reconstruct(SAMPLE_X, SAMPLE_Y, z, [0.45, 0.0], [0.01, -0.5], InterpolationMethod.NEAREST)
    assert out[0] == 1.0
    assert np.isnan(out[1])


def test_natural_neighbour_of_a_constant_field() -> None:
    z = np.full(4, 5.0)
    out = reconstruct(
        SAMPLE_X, SAMPLE_Y, z, np.append(INSIDE_X, 2.0), np.append(INSIDE_Y, 2.0), InterpolationMethod.NATURAL
    )
    np.testing.assert_allclose(out[:3], 5.0)
    assert np.isnan(out[3])


def test_natural_neighbour_stays_within_sample_range() -> None:
    z = np.array([1.0, 2.0, 3.0, 4.0])
    out = reconstruct(SAMPLE_X, SAMPLE_Y, z, INSIDE_X, INSIDE_Y, InterpolationMethod.NATURAL)
    assert np.all(np.isfinite(out))
    assert np.all((out >= 1.0) & (out <= 4.0))


def test_cubic_is_finite_inside_the_hull() -> None:
    z = plane(SAMPLE_X, SAMPLE_Y)
    out = reconstruct(SAMPLE_X, SAMPLE_Y, z, INSIDE_X, INSIDE_Y, InterpolationMethod.CUBIC)
    assert np.all(np.isfinite(out))


def test_biharmonic_passes_through_samples_and_extrapolates() -> None:
    rng = np.random.default_rng(3)
    x = rng.uniform(-0.4, 0.4, 8)
    y = rng.uniform(0.0, 0.7, 8)
    z = np.sin(4.0 * x) + y
    out = reconstruct(x, y, z, x, y, InterpolationMethod.BIHARMONIC)
    np.testing.assert_allclose(out, z, atol=1e-8)

    outside = reconstruct(x, y, z, [3.0], [3.0], InterpolationMethod.BIHARMONIC)
    assert np.isfinite(outside[0])


def test_invalid_nodes_are_always_nan() -> None:
    z = plane(SAMPLE_X, SAMPLE_Y)
    qx = np.array([0.0, 0.1])
    qy = np.array([0.3, 0.2])
    out = reconstruct_surface(
        SAMPLE_X, SAMPLE_Y, z, qx, qy, np.array([True, False]), InterpolationMethod.BIHARMONIC
    )
    assert np.isfinite(out[0])
    assert np.isnan(out[1])


def test_coincident_samples_are_averaged() -> None:
    x = np.array([0.0, 0.0, 0.5, -0.5])
    y = np.array([0.5, 0.5, 0.0, 0.0])
    z = np.array([1.0, 3.0, 0.0, 0.0])
    out = reconstruct(x, y, z, [0.0], [0.5], InterpolationMethod.LINEAR)
    np.testing.assert_allclose(out, [2.0])


def test_non_finite_samples_are_ignored() -> None:
    x = np.append(SAMPLE_X, 0.1)
    y = np.append(SAMPLE_Y, 0.1)
    z = np.append(plane(SAMPLE_X, SAMPLE_Y), np.nan)
    out = reconstruct(x, y, z, INSIDE_X, INSIDE_Y, InterpolationMethod.LINEAR)
    np.testing.assert_allclose(out, plane(INSIDE_X, INSIDE_Y))


@pytest.mark.parametrize("method", list(InterpolationMethod))
def test_collinear_samples_degrade_to_exact_hits(method: InterpolationMethod) -> None:
    x = np.array([0.0, 0.1, 0.2])
    y = np.zeros(3)
    z = np.array([1.0, 2.0, 3.0])
    out = reconstruct(x, y, z, [0.1, 0.05], [0.0, 0.1], method)
    assert out[0] == 2.0
    assert np.isnan(out[1])


@pytest.mark.parametrize("method", list(InterpolationMethod))
def test_single_sample_does_not_raise(method: InterpolationMethod) -> None:
    out = reconstruct([0.0], [0.2], [7.0], [0.0, 0.3], [0.2, 0.1], method)
    assert out[0] == 7.0
    assert np.isnan(out[1])


def test_no_samples_give_no_values() -> None:
    out = reconstruct([], [], [], INSIDE_X, INSIDE_Y, InterpolationMethod.LINEAR)
    assert np.all(np.isnan(out))


def test_output_keeps_the_grid_shape() -> None:
    z = plane(SAMPLE_X, SAMPLE_Y)
    gx = np.zeros((3, 3))
    gy = np.full((3, 3), 0.2)
    out = reconstruct_surface(SAMPLE_X, SAMPLE_Y, z, gx, gy, np.ones((3, 3), dtype=bool), InterpolationMethod.LINEAR)
    assert out.shape == (3, 3)
