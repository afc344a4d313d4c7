import numpy as np
import pytest

from chartgallery.errors import ValidationError
from chartgallery.model.ternary_data import TernaryData


def test_default_is_a_single_point_at_c() -> None:
    data = TernaryData.default()
    assert data.headers == ("A", "B", "C", "Z")
    np.testing.assert_array_equal(data.values, [[0.0, 0.0, 1.0, 1.0]])


def test_empty_table_is_valid() -> None:
    assert TernaryData(values=[]).n_rows == 0
    assert len(TernaryData.empty()) == 0
    assert TernaryData.empty().values.shape == (0, 4)


def test_values_are_read_only_copies() -> None:
    raw = np.array([[1.0, 2.0, 3.0, 4.0]])
    data = TernaryData(values=raw)
    raw[0, 0] = 100.0
    assert data.values[0, 0] == 1.0
    with pytest.raises(ValueError):
        data.values[0, 0] = 5.0


def test_negative_input_names_the_column() -> None:
    with pytest.raises(ValidationError, match="'Ni'"):
        TernaryData(values=[[1.0, -2.0, 3.0, 4.0]], headers=("Fe", "Ni", "Cr", "H"))


def test_negative_output_is_allowed() -> None:
    assert TernaryData(values=[[1.0, 2.0, 3.0, -4.0]]).output[0] == -4.0


def test_non_finite_value_is_rejected() -> None:
    with pytest.raises(ValidationError, match="'Z'"):
        TernaryData(values=[[1.0, 2.0, 3.0, np.nan]])
    with pytest.raises(ValidationError, match="'A'"):
        TernaryData(values=[[np.inf, 2.0, 3.0, 4.0]])


def test_wrong_shape_is_rejected() -> None:
    with pytest.raises(ValidationError):
        TernaryData(values=[[1.0, 2.0, 3.0]])


def test_non_numeric_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        TernaryData(values=[["a", "b", "c", "d"]])


def test_headers_must_be_four_unique_names() -> None:
    with pytest.raises(ValidationError):
        TernaryData(values=[[1, 2, 3, 4]], headers=("A", "A", "C", "Z"))
    with pytest.raises(ValidationError):
        TernaryData(values=[[1, 2, 3, 4]], headers=("A", "B", "C"))


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        TernaryData(values=[[-1.0, 0.0, 0.0, 0.0]])


def test_from_columns_and_mapping() -> None:
    data = TernaryData.from_columns([1, 2], [3, 4], [5, 6], [7, 8], headers=("P", "Q", "R", "S"))
    np.testing.assert_array_equal(data.values[:, 1], [3.0, 4.0])
    assert data.headers == ("P", "Q", "R", "S")

    mapped = TernaryData.from_mapping({"P": [1, 2], "Q": [3, 4], "R": [5, 6], "S": [7, 8]})
    assert mapped == data


def test_from_columns_requires_equal_lengths() -> None:
    with pytest.raises(ValidationError):
        TernaryData.from_columns([1, 2], [3], [5, 6], [7, 8])


def test_permuted_moves_values_and_headers_together() -> None:
    data = TernaryData(values=[[1.0, 2.0, 3.0, 4.0]], headers=("Fe", "Ni", "Cr", "H"))
    rotated = data.permuted((2, 0, 1, 3))
    assert rotated.headers == ("Cr", "Fe", "Ni", "H")
    np.testing.assert_array_equal(rotated.values, [[3.0, 1.0, 2.0, 4.0]])
    with pytest.raises(ValueError):
        data.permuted((0, 0, 1, 3))


def test_value_range() -> None:
    data = TernaryData(values=[[1, 0, 0, -1.0], [0, 1, 0, 2.0]])
    assert data.value_range() == 3.0
    assert TernaryData.empty().value_range() == 0.0
