"""
Chart Gallery
=============
Interactive chart widgets that recompute derived graphics lazily: mutators
mark a chart dirty, and ``update()`` regenerates it before the next redraw.
"""
from chartgallery.charts.line_selector import LineSelectorChart
from chartgallery.charts.ternary import TernaryChart
from chartgallery.core.state import Chart, ComponentState
from chartgallery.errors import ChartError, ChartIndexError, ValidationError
from chartgallery.model.surface import InterpolationMethod
from chartgallery.model.ternary_data import TernaryData
from chartgallery.model.ternary_geometry import Direction

__version__ = "0.1.0"

__all__ = [
    "Chart",
    "ChartError",
    "ChartIndexError",
    "ComponentState",
    "Direction",
    "InterpolationMethod",
    "LineSelectorChart",
    "TernaryChart",
    "TernaryData",
    "ValidationError",
]
