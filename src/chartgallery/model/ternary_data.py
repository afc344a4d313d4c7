"""
Ternary Chart Data
==================
An immutable 4-column table (A, B, C, Z) with named headers.

Classes:
    TernaryData: The table. Replaced wholesale on assignment, never edited in place.

Functions:
    validate_ternary_values: Precondition gate used by every constructor.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Sequence

import numpy as np

from chartgallery.errors import ValidationError

if TYPE_CHECKING:
    import numpy.typing as npt

DEFAULT_HEADERS: tuple[str, str, str, str] = ("A", "B", "C", "Z")


def validate_ternary_values(values: npt.ArrayLike, headers: Sequence[str]) -> npt.NDArray[np.float64]:
    """
    Check shape, finiteness and sign of a candidate table.

    Args:
        values: (N, 4) numeric array-like. An empty sequence is a valid 0-row table.
        headers: The four column names, used to identify the offending column.

    Returns:
        A read-only float64 copy of ``values`` shaped (N, 4).

    Raises:
        ValidationError: On a wrong shape, bad headers, a non-finite value in any
            column, or a negative value in one of the three input columns.
    """
    headers = tuple(headers)
    if len(headers) != 4 or not all(isinstance(h, str) and h for h in headers):
        raise ValidationError("data", f"expected four non-empty column names, got {headers!r}.")
    if len(set(headers)) != 4:
        raise ValidationError("data", f"column names must be unique, got {headers!r}.")

    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError):
        raise ValidationError("data", "table values must be numeric.") from None

    if array.size == 0:
        array = array.reshape(0, 4)
    if array.ndim != 2 or array.shape[1] != 4:
        raise ValidationError("data", f"expected a table with 4 columns, got shape {array.shape}.")

    for i, header in enumerate(headers):
        column = array[:, i]
        if not np.all(np.isfinite(column)):
            raise ValidationError("data", f"column '{header}' contains non-finite values.")
        if i < 3 and np.any(column < 0.0):
            raise ValidationError("data", f"column '{header}' contains negative values.")

    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class TernaryData:
    """
    Rows of three non-negative input components and one output value.

    Rows do not have to sum to a constant; the chart normalizes them when it
    draws (see ``normalize_fractions``).
    """
    values: npt.NDArray[np.float64]
    headers: tuple[str, str, str, str] = DEFAULT_HEADERS

    def __post_init__(self) -> None:
        checked = validate_ternary_values(self.values, self.headers)
        object.__setattr__(self, "values", checked)
        object.__setattr__(self, "headers", tuple(self.headers))

    # ---- constructors ----

    @classmethod
    def from_columns(
        cls,
        a: npt.ArrayLike,
        b: npt.ArrayLike,
        c: npt.ArrayLike,
        z: npt.ArrayLike,
        headers: Sequence[str] = DEFAULT_HEADERS
    ) -> TernaryData:
        try:
            columns = [np.asarray(col, dtype=np.float64).ravel() for col in (a, b, c, z)]
        except (TypeError, ValueError):
            raise ValidationError("data", "table values must be numeric.") from None
        lengths = {col.size for col in columns}
        if len(lengths) != 1:
            raise ValidationError("data", f"columns must have equal lengths, got {sorted(lengths)}.")
        return cls(values=np.column_stack(columns), headers=tuple(headers))

    @classmethod
    def from_mapping(cls, columns: Mapping[str, npt.ArrayLike]) -> TernaryData:
        """Build from an ordered mapping of exactly four named columns."""
        if len(columns) != 4:
            raise ValidationError("data", f"expected 4 columns, got {len(columns)}.")
        headers = tuple(columns.keys())
        return cls.from_columns(*columns.values(), headers=headers)

    @classmethod
    def empty(cls, headers: Sequence[str] = DEFAULT_HEADERS) -> TernaryData:
        return cls(values=np.empty((0, 4)), headers=tuple(headers))

    @classmethod
    def default(cls) -> TernaryData:
        """A single point at the C vertex."""
        return cls(values=np.array([[0.0, 0.0, 1.0, 1.0]]), headers=DEFAULT_HEADERS)

    # ---- accessors ----

    def __len__(self) -> int:
        return self.values.shape[0]

    @property
    def n_rows(self) -> int:
        return self.values.shape[0]

    @property
    def inputs(self) -> npt.NDArray[np.float64]:
        """(N, 3) view of the A, B and C columns."""
        return self.values[:, :3]

    @property
    def output(self) -> npt.NDArray[np.float64]:
        """(N,) view of the Z column."""
        return self.values[:, 3]

    def value_range(self) -> float:
        """Spread of the Z column (0 for an empty table)."""
        if self.n_rows == 0:
            return 0.0
        return float(np.ptp(self.output))

    # ---- permutations ----

    def permuted(self, order: Sequence[int]) -> TernaryData:
        """
        Reorder the columns (values and headers together).

        Args:
            order: A permutation of (0, 1, 2, 3).
        """
        order = list(order)
        if sorted(order) != [0, 1, 2, 3]:
            raise ValueError(f"Not a permutation of the 4 columns: {order}")
        headers = tuple(self.headers[i] for i in order)
        return TernaryData(values=self.values[:, order], headers=headers)  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TernaryData):
            return NotImplemented
        return self.headers == other.headers and np.array_equal(self.values, other.values)
