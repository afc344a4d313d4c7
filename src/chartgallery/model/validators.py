"""
Precondition gates for chart property values.

Each gate either returns the normalized value or raises ValidationError naming
the property. Nothing here touches chart state, so a rejected value can never
leave a chart half-updated.
"""
from __future__ import annotations

import math
import numbers
from enum import Enum
from typing import Any, Iterable, TypeVar

import numpy as np

from chartgallery.errors import ValidationError

E = TypeVar("E", bound=Enum)

NAMED_COLORS: dict[str, tuple[float, float, float]] = {
    "k": (0.0, 0.0, 0.0), "black": (0.0, 0.0, 0.0),
    "w": (1.0, 1.0, 1.0), "white": (1.0, 1.0, 1.0),
    "r": (1.0, 0.0, 0.0), "red": (1.0, 0.0, 0.0),
    "g": (0.0, 1.0, 0.0), "green": (0.0, 1.0, 0.0),
    "b": (0.0, 0.0, 1.0), "blue": (0.0, 0.0, 1.0),
    "c": (0.0, 1.0, 1.0), "cyan": (0.0, 1.0, 1.0),
    "m": (1.0, 0.0, 1.0), "magenta": (1.0, 0.0, 1.0),
    "y": (1.0, 1.0, 0.0), "yellow": (1.0, 1.0, 0.0),
    "gray": (0.5, 0.5, 0.5), "grey": (0.5, 0.5, 0.5),
}

# Keywords accepted in place of a colour for marker/surface colours
COLOR_KEYWORDS = ("flat", "none")


def _is_number(value: Any) -> bool:
    """Real numbers only; bools and numeric strings are rejected."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def positive_int(prop: str, value: Any) -> int:
    if not _is_number(value):
        raise ValidationError(prop, f"expected a positive integer, got {value!r}.")
    as_float = float(value)
    if not math.isfinite(as_float) or as_float != int(as_float) or as_float < 1:
        raise ValidationError(prop, f"expected a positive integer, got {value!r}.")
    return int(as_float)


def finite_positive(prop: str, value: Any) -> float:
    if not _is_number(value):
        raise ValidationError(prop, f"expected a positive number, got {value!r}.")
    as_float = float(value)
    if not math.isfinite(as_float) or as_float <= 0.0:
        raise ValidationError(prop, f"expected a finite positive number, got {value!r}.")
    return as_float


def in_range(prop: str, value: Any, low: float, high: float) -> float:
    if not _is_number(value):
        raise ValidationError(prop, f"expected a number in [{low}, {high}], got {value!r}.")
    as_float = float(value)
    if not low <= as_float <= high:
        raise ValidationError(prop, f"expected a number in [{low}, {high}], got {value!r}.")
    return as_float


def enum_member(prop: str, value: Any, enum_cls: type[E]) -> E:
    """Accept an enum member or its string value (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.lower())
        except ValueError:
            pass
    allowed = ", ".join(str(m.value) for m in enum_cls)
    raise ValidationError(prop, f"expected one of [{allowed}], got {value!r}.")


def one_of(prop: str, value: Any, allowed: Iterable[str]) -> str:
    allowed = tuple(allowed)
    if not isinstance(value, str) or value not in allowed:
        raise ValidationError(prop, f"expected one of {list(allowed)}, got {value!r}.")
    return value


def color(prop: str, value: Any, *, keywords: Iterable[str] = ()) -> str | tuple[float, float, float]:
    """
    Validate a colour.

    Accepts a named colour, a '#RRGGBB' hex string, an RGB triple in [0, 1], or
    (when listed in ``keywords``) a keyword such as "flat" or "none".

    Returns:
        The keyword unchanged, or the colour as an RGB tuple.
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text in tuple(keywords):
            return text
        if text in NAMED_COLORS:
            return NAMED_COLORS[text]
        if text.startswith("#") and len(text) == 7:
            try:
                return tuple(int(text[i:i + 2], 16) / 255.0 for i in (1, 3, 5))  # type: ignore[return-value]
            except ValueError:
                pass
        raise ValidationError(prop, f"unrecognized colour {value!r}.")

    try:
        rgb = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError):
        raise ValidationError(prop, f"expected an RGB triple in [0, 1], got {value!r}.") from None
    if rgb.shape != (3,) or not np.all(np.isfinite(rgb)) or np.any(rgb < 0.0) or np.any(rgb > 1.0):
        raise ValidationError(prop, f"expected an RGB triple in [0, 1], got {value!r}.")
    return float(rgb[0]), float(rgb[1]), float(rgb[2])
