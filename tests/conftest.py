import numpy as np
import pytest

from chartgallery.charts.line_selector import LineSelectorChart
from chartgallery.charts.ternary import TernaryChart
from chartgallery.model.ternary_data import TernaryData
from chartgallery.view.surface import HeadlessSurface


@pytest.fixture
def corner_data() -> TernaryData:
    """One sample at each vertex of the simplex."""
    return TernaryData(values=np.array([
        [1.0, 0.0, 0.0, 1.0],
        [0.0, 1.0, 0.0, 2.0],
        [0.0, 0.0, 1.0, 3.0],
    ]))


@pytest.fixture
def random_data() -> TernaryData:
    rng = np.random.default_rng(42)
    abc = rng.dirichlet((2.0, 2.0, 2.0), size=40)
    z = abc[:, 0] - 2.0 * abc[:, 1] + 0.5 * abc[:, 2]
    return TernaryData.from_columns(abc[:, 0], abc[:, 1], abc[:, 2], z, headers=("Fe", "Ni", "Cr", "Hardness"))


@pytest.fixture
def surface() -> HeadlessSurface:
    return HeadlessSurface()


@pytest.fixture
def chart(random_data: TernaryData, surface: HeadlessSurface) -> TernaryChart:
    return TernaryChart(random_data, resolution=8, interpolation="linear", surface=surface)


@pytest.fixture
def line_chart(surface: HeadlessSurface) -> LineSelectorChart:
    x = np.arange(5.0)
    y = np.column_stack((
        [0.0, 1.0, 2.0, 3.0, 4.0],
        [10.0, 30.0, 20.0, 50.0, 40.0],
        [-1.0, -1.0, 0.0, 1.0, 1.0],
    ))
    return LineSelectorChart(x, y, surface=surface)
